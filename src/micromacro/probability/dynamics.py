from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence

from micromacro.config.settings import MicroMacroConfig
from micromacro.errors import ComputationError
from micromacro.probability.distribution import Distribution
from micromacro.probability.markov import MarkovKernel, StationaryResult
from micromacro.probability.propagation import ProbabilityEngine

if TYPE_CHECKING:
    from micromacro.graph.graph_schema import MappingEdge, StateEdge, StateNode


@dataclass(frozen=True)
class StateStatistics:
    """
    Statistics of the micro-level chain, keyed by state id.

    Equilibrium fields are ``None`` when some state has no outgoing
    transition; ``error`` then says why.
    """

    weight_distribution: Dict[str, float] = field(default_factory=dict)
    entropy: Optional[float] = None
    effective_states: Optional[float] = None
    equilibrium: Optional[Dict[str, float]] = None
    converged: bool = False
    entropy_rate: Optional[float] = None
    detailed_balance_deviation: Optional[float] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ObservedStatistics:
    """
    Statistics of the macro-level view, keyed by Destination id.
    """

    weight_distribution: Dict[str, float] = field(default_factory=dict)
    entropy: Optional[float] = None
    equilibrium_from_state: Optional[Dict[str, float]] = None
    error: Optional[str] = None


class DynamicsAnalyzer:
    """
    Equilibrium and information measures for the state chain and its
    image under the mapping.
    """

    def __init__(self, config: MicroMacroConfig | None = None) -> None:
        self.config = config or MicroMacroConfig()
        self.engine = ProbabilityEngine(self.config.propagation)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def state_statistics(
        self,
        state_nodes: Sequence[StateNode],
        state_edges: Sequence[StateEdge],
    ) -> StateStatistics:
        try:
            distribution = self.engine.normalize(state_nodes)
        except ComputationError as exc:
            return StateStatistics(error=str(exc))

        base = dict(
            weight_distribution=distribution.as_dict(),
            entropy=distribution.entropy(),
            effective_states=distribution.effective_states(),
        )

        try:
            kernel, result = self._equilibrium(distribution, state_edges)
        except ComputationError as exc:
            return StateStatistics(**base, error=str(exc))

        return StateStatistics(
            **base,
            equilibrium=result.distribution.as_dict(),
            converged=result.converged,
            entropy_rate=kernel.entropy_rate(result.distribution),
            detailed_balance_deviation=kernel.detailed_balance_deviation(
                result.distribution
            ),
        )

    def observed_statistics(
        self,
        state_nodes: Sequence[StateNode],
        state_edges: Sequence[StateEdge],
        mapping_edges: Sequence[MappingEdge],
        *,
        mirrors: Mapping[str, str],
        destinations: List[str],
    ) -> ObservedStatistics:
        try:
            weights = self.engine.propagate(
                state_nodes,
                mapping_edges,
                mirrors=mirrors,
                destinations=destinations,
            )
        except ComputationError as exc:
            return ObservedStatistics(error=str(exc))

        observed = self._renormalize(weights)
        base = dict(
            weight_distribution=observed.as_dict() if observed else {},
            entropy=observed.entropy() if observed else None,
        )

        if not destinations:
            return ObservedStatistics(**base)

        try:
            distribution = self.engine.normalize(state_nodes)
            _, result = self._equilibrium(distribution, state_edges)
            mapping = self.engine.mapping_kernel(
                distribution.labels,
                mapping_edges,
                mirrors=mirrors,
                destinations=destinations,
            )
        except ComputationError as exc:
            return ObservedStatistics(**base, error=str(exc))

        pushed = mapping.push(result.distribution)
        return ObservedStatistics(
            **base,
            equilibrium_from_state={
                d: float(pushed[j]) for j, d in enumerate(destinations)
            },
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _equilibrium(
        self,
        distribution: Distribution,
        state_edges: Sequence[StateEdge],
    ) -> tuple[MarkovKernel, StationaryResult]:
        labels = distribution.labels
        kernel = MarkovKernel.from_edges(
            labels,
            labels,
            ((e.source, e.target, e.weight) for e in state_edges),
            strict=True,
        )
        result = kernel.stationary(
            distribution,
            tolerance=self.config.equilibrium.tolerance,
            max_iterations=self.config.equilibrium.max_iterations,
        )
        return kernel, result

    def _renormalize(self, weights: Dict[str, float]) -> Optional[Distribution]:
        # Observed mass is below one when some state maps nowhere.
        total = sum(weights.values())
        if total <= 0.0:
            return None
        labels = list(weights)
        return Distribution(labels, [weights[d] / total for d in labels])
