from functools import lru_cache
import logging
import time

from micromacro.graph.graph_builder import GraphBuilder
from micromacro.graph.graph_store import GraphStore

from backend.app.config import AppConfig
from backend.app.services.editor_service import EditorService


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@lru_cache
def get_store() -> GraphStore:
    logger = logging.getLogger("micromacro.startup")
    t0 = time.perf_counter()
    config = get_config()
    store = GraphStore(config.micromacro)

    if config.seed_default_graph:
        GraphBuilder(store).seed_default()
        logger.info(
            "[startup] seeded default graph (%s states, %s destinations)",
            len(store.state_nodes()),
            len(store.destination_nodes()),
        )
    logger.info("[startup] get_store total %.3fs", time.perf_counter() - t0)
    return store


@lru_cache
def get_editor_service() -> EditorService:
    return EditorService(store=get_store())
