from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from micromacro.errors import ComputationError, EmptyStateGraph
from micromacro.graph.derivation import DerivationEngine
from micromacro.graph.synchronization import SynchronizationEngine
from micromacro.graph.weighted_graph import WeightedGraph
from micromacro.probability.propagation import ProbabilityEngine

logger = logging.getLogger("micromacro.recompute")


@dataclass(frozen=True)
class RecomputeResult:
    """
    Outcome of one recompute.

    ``weights`` is keyed by Destination id. On failure every weight is
    0.0 and ``error`` holds the reason.
    """

    observed: WeightedGraph
    weights: Dict[str, float] = field(default_factory=dict)
    error: Optional[ComputationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecomputeTrigger:
    """
    Runs synchronization, derivation and propagation as one step.
    """

    def __init__(
        self,
        *,
        engine: ProbabilityEngine,
        sync: SynchronizationEngine,
        derivation: DerivationEngine,
    ) -> None:
        self.engine = engine
        self.sync = sync
        self.derivation = derivation

    def run(
        self,
        state: WeightedGraph,
        mapping: WeightedGraph,
        *,
        synchronize: Callable[[], None] | None = None,
    ) -> RecomputeResult:
        t0 = time.perf_counter()

        # ---------------- Synchronization ----------------

        if synchronize is not None:
            synchronize()

        # ---------------- Derivation ----------------

        observed = self.derivation.derive(mapping)
        destinations = [n.backref for n in observed.get_nodes()]

        # ---------------- Propagation ----------------

        error: Optional[ComputationError] = None
        try:
            weights = self.engine.propagate(
                state.get_nodes(),
                mapping.get_edges(),
                mirrors=self.sync.mirrors(mapping),
                destinations=destinations,
            )
        except ComputationError as exc:
            # An empty state graph is the normal starting point of an edit.
            level = logging.DEBUG if isinstance(exc, EmptyStateGraph) else logging.WARNING
            logger.log(level, "weight computation failed, observed weights reset: %s", exc)
            weights = {d: 0.0 for d in destinations}
            error = exc

        for node in observed.get_nodes():
            observed.replace_node(node.with_weight(weights.get(node.backref, 0.0)))

        logger.debug(
            "recomputed %s observed nodes in %.4fs",
            observed.node_count(),
            time.perf_counter() - t0,
        )
        return RecomputeResult(observed=observed, weights=weights, error=error)
