from dataclasses import dataclass
from dynaconf import Dynaconf
from backend.app.constants import DEFAULTS

from micromacro.config.settings import (
    PropagationConfig,
    EquilibriumConfig,
    DefaultsConfig,
    MicroMacroConfig,
)

settings = Dynaconf(
    envvar_prefix="MICROMACRO",
    load_dotenv=True,
    settings_files=[],
)


def _setting(key: str):
    return settings.get(key, DEFAULTS[key])


@dataclass(frozen=True)
class AppConfig:
    # ---------------- App ----------------
    app_name: str = _setting("APP_NAME")
    api_prefix: str = _setting("API_PREFIX")

    # ---------------- Startup ----------------
    seed_default_graph: bool = _setting("SEED_DEFAULT_GRAPH")

    # ---------------- Engine Policy ----------------
    micromacro: MicroMacroConfig = MicroMacroConfig(
        propagation=PropagationConfig(
            zero_weight_policy=_setting("ZERO_WEIGHT_POLICY"),
        ),
        equilibrium=EquilibriumConfig(
            tolerance=float(_setting("EQUILIBRIUM_TOLERANCE")),
            max_iterations=int(_setting("EQUILIBRIUM_MAX_ITERATIONS")),
        ),
        defaults=DefaultsConfig(
            node_weight=float(_setting("DEFAULT_NODE_WEIGHT")),
            edge_weight=float(_setting("DEFAULT_EDGE_WEIGHT")),
        ),
    )
