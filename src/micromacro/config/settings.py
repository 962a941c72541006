from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ---------------------------------------------------------------------
# State distribution normalization
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class PropagationConfig:
    """
    Controls how state weights are turned into a probability vector.

    ``zero_weight_policy`` decides what happens when every state weight is
    zero: ``"error"`` raises ``AllZeroWeight``, ``"uniform"`` falls back to
    the uniform distribution.
    """

    zero_weight_policy: Literal["error", "uniform"] = "error"


# ---------------------------------------------------------------------
# Equilibrium search
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class EquilibriumConfig:
    """
    Power-iteration limits for stationary distributions.
    """

    tolerance: float = 1e-10
    max_iterations: int = 10_000


# ---------------------------------------------------------------------
# Editing defaults
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class DefaultsConfig:
    node_weight: float = 1.0
    edge_weight: float = 1.0


# ---------------------------------------------------------------------
# Root configuration object
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class MicroMacroConfig:
    """
    Root configuration object for micromacro.

    This object is intended to be:
    - constructed explicitly
    - passed to the store and analyzers
    - treated as immutable policy
    """

    propagation: PropagationConfig = field(default_factory=PropagationConfig)
    equilibrium: EquilibriumConfig = field(default_factory=EquilibriumConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
