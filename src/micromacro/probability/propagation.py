from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

from micromacro.config.settings import PropagationConfig
from micromacro.errors import InconsistentMapping
from micromacro.probability.distribution import Distribution
from micromacro.probability.markov import MarkovKernel

if TYPE_CHECKING:
    from micromacro.graph.graph_schema import MappingEdge, StateNode


class ProbabilityEngine:
    """
    Pushes the state weight distribution through the bipartite mapping.

    Stateless apart from its policy; every call works on the snapshot it
    is given and never touches a graph.
    """

    def __init__(self, config: PropagationConfig | None = None) -> None:
        self.config = config or PropagationConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(self, state_nodes: Iterable[StateNode]) -> Distribution:
        return Distribution.from_weights(
            ((n.id, n.weight) for n in state_nodes),
            zero_weight_policy=self.config.zero_weight_policy,
        )

    def mapping_kernel(
        self,
        state_ids: List[str],
        mapping_edges: Sequence[MappingEdge],
        *,
        mirrors: Mapping[str, str],
        destinations: List[str],
    ) -> MarkovKernel:
        """
        Row-substochastic kernel from state ids to destination ids.

        Each Source row is divided by its total outgoing weight; a Source
        without edges keeps an all-zero row.
        """
        known = set(state_ids)
        columns = list(destinations)
        seen = set(columns)
        triples = []

        for edge in mapping_edges:
            state_id = mirrors.get(edge.source)
            if state_id is None or state_id not in known:
                raise InconsistentMapping(edge.source)
            if edge.target not in seen:
                # Still counts towards the row total.
                columns.append(edge.target)
                seen.add(edge.target)
            triples.append((state_id, edge.target, edge.weight))

        return MarkovKernel.from_edges(state_ids, columns, triples, strict=False)

    def propagate(
        self,
        state_nodes: Sequence[StateNode],
        mapping_edges: Sequence[MappingEdge],
        *,
        mirrors: Mapping[str, str],
        destinations: Optional[Iterable[str]] = None,
    ) -> Dict[str, float]:
        """
        Compute ``O[d] = sum_s P[s] * M[s][d]`` for every destination.

        ``mirrors`` maps Source mapping-node ids to state ids. When
        ``destinations`` is omitted the edge targets are used.
        """
        distribution = self.normalize(state_nodes)

        if destinations is None:
            dest_ids = list(dict.fromkeys(e.target for e in mapping_edges))
        else:
            dest_ids = list(destinations)

        if not dest_ids:
            return {}

        kernel = self.mapping_kernel(
            distribution.labels,
            mapping_edges,
            mirrors=mirrors,
            destinations=dest_ids,
        )
        observed = kernel.push(distribution)

        return {d: float(observed[j]) for j, d in enumerate(dest_ids)}


def propagate(
    state_nodes: Sequence[StateNode],
    mapping_edges: Sequence[MappingEdge],
    *,
    mirrors: Mapping[str, str],
    destinations: Optional[Iterable[str]] = None,
    config: PropagationConfig | None = None,
) -> Dict[str, float]:
    return ProbabilityEngine(config).propagate(
        state_nodes,
        mapping_edges,
        mirrors=mirrors,
        destinations=destinations,
    )
