"""
Configuration layer for micromacro.

Configuration in micromacro is:
- Explicit (passed, not global)
- Typed (frozen dataclasses)
- Defaulted (every field has a sensible default)
"""

from micromacro.config.settings import (
    PropagationConfig,
    EquilibriumConfig,
    DefaultsConfig,
    MicroMacroConfig,
)

__all__ = [
    "PropagationConfig",
    "EquilibriumConfig",
    "DefaultsConfig",
    "MicroMacroConfig",
]
