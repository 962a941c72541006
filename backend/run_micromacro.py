import json
import logging
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.config import AppConfig  # noqa: E402
from backend.app.services.editor_service import EditorService  # noqa: E402
from micromacro.graph.graph_builder import GraphBuilder  # noqa: E402
from micromacro.graph.graph_store import GraphStore  # noqa: E402


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    logger = logging.getLogger("micromacro.run")
    start = time.perf_counter()
    config = AppConfig()

    store = GraphStore(config.micromacro)
    GraphBuilder(store).seed_default()
    service = EditorService(store=store)

    def report(label: str) -> None:
        elapsed = time.perf_counter() - start
        observed = service.observed_graph()
        logger.info("[%s] recompute ready in %.3fs", label, elapsed)
        logger.info(
            json.dumps(
                {
                    "observed": {n["name"]: n["weight"] for n in observed["nodes"]},
                    "recompute": observed["recompute"],
                    "state_statistics": service.state_statistics(),
                    "observed_statistics": service.observed_statistics(),
                },
                indent=2,
            )
        )
        for issue in service.issues("mapping"):
            logger.warning("[%s] %s", label, issue)

    # Unmapped defaults: every destination sits at zero.
    report("seeded")

    # Node 0 and Node 1 feed Value 0, Node 2 feeds Value 1.
    builder = GraphBuilder(store)
    builder.add_mappings(
        [
            ("Node 0", "Value 0", 1.0),
            ("Node 1", "Value 0", 1.0),
            ("Node 2", "Value 1", 1.0),
        ]
    )
    report("mapped")

    # Skew the micro weights and watch the macro view follow.
    node = store.find_state_node("Node 2")
    service.update_state_node(node.id, name=None, weight=4.0)
    report("reweighted")


if __name__ == "__main__":
    main()
