from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from micromacro.config.settings import MicroMacroConfig
from micromacro.errors import (
    DuplicateNameError,
    InvalidWeightError,
    KindMismatchError,
    StructuralError,
    UnknownNodeError,
)
from micromacro.graph.derivation import DerivationEngine
from micromacro.graph.graph_schema import (
    MappingEdge,
    MappingNode,
    NodeKind,
    ObservedNode,
    StateEdge,
    StateNode,
)
from micromacro.graph.recompute import RecomputeResult, RecomputeTrigger
from micromacro.graph.synchronization import SynchronizationEngine
from micromacro.graph.weighted_graph import WeightedGraph
from micromacro.persistence.project_io import build_graphs, export_project
from micromacro.probability.dynamics import (
    DynamicsAnalyzer,
    ObservedStatistics,
    StateStatistics,
)
from micromacro.probability.propagation import ProbabilityEngine

logger = logging.getLogger("micromacro.store")


class GraphStore:
    """
    Authoritative owner of the state, mapping and observed graphs.

    Every mutation is validated before anything changes and is followed,
    within the same call, by synchronization of the Source nodes,
    derivation of the observed graph and propagation of the weights.
    The observed graph is read-only from the outside.

    Mutations that create a node return its id; the others return the
    ``RecomputeResult`` of their recompute, so a propagation failure
    reaches the caller directly. ``last_recompute`` always holds the
    latest one.
    """

    def __init__(self, config: MicroMacroConfig | None = None) -> None:
        self.config = config or MicroMacroConfig()

        self._state = WeightedGraph("state")
        self._mapping = WeightedGraph("mapping")

        self._sync = SynchronizationEngine()
        self._trigger = RecomputeTrigger(
            engine=ProbabilityEngine(self.config.propagation),
            sync=self._sync,
            derivation=DerivationEngine(),
        )
        self._analyzer = DynamicsAnalyzer(self.config)
        self._memo: Dict[str, Tuple[Tuple[int, int], Any]] = {}

        self.state_version = 0
        self.mapping_version = 0

        self.last_recompute: RecomputeResult = self._trigger.run(self._state, self._mapping)
        self._observed = self.last_recompute.observed

    # ------------------------------------------------------------------
    # State graph: nodes
    # ------------------------------------------------------------------

    def add_state_node(self, name: str, weight: float | None = None) -> str:
        name = self._clean_name(name)
        if weight is None:
            weight = self.config.defaults.node_weight
        self._check_node_weight(weight)
        self._check_state_name_free(name)

        node = StateNode.create(name, float(weight))
        self._state.add_node(node)
        logger.debug("added state %s (%s)", node.id, name)

        self._commit(
            state=True,
            mapping=True,
            synchronize=lambda: self._sync.on_state_added(self._mapping, node),
        )
        return node.id

    def remove_state_node(self, node_id: str) -> RecomputeResult:
        self.get_state_node(node_id)

        self._state.remove_node(node_id)
        logger.debug("removed state %s", node_id)

        return self._commit(
            state=True,
            mapping=True,
            synchronize=lambda: self._sync.on_state_removed(self._mapping, node_id),
        )

    def rename_state_node(self, node_id: str, name: str) -> RecomputeResult:
        node = self.get_state_node(node_id)
        name = self._clean_name(name)
        if name == node.name:
            return self.last_recompute
        self._check_state_name_free(name)

        renamed = node.renamed(name)
        self._state.replace_node(renamed)

        return self._commit(
            state=True,
            mapping=True,
            synchronize=lambda: self._sync.on_state_renamed(self._mapping, renamed),
        )

    def set_state_node_weight(self, node_id: str, weight: float) -> RecomputeResult:
        node = self.get_state_node(node_id)
        self._check_node_weight(weight)

        self._state.replace_node(node.reweighted(float(weight)))
        return self._commit(state=True)

    def update_state_node(
        self,
        node_id: str,
        *,
        name: str | None = None,
        weight: float | None = None,
    ) -> RecomputeResult:
        """
        Rename and/or reweight in one step; both values are checked
        before either is applied.
        """
        node = self.get_state_node(node_id)
        updated = node
        if name is not None:
            name = self._clean_name(name)
            if name != node.name:
                self._check_state_name_free(name)
                updated = updated.renamed(name)
        if weight is not None:
            self._check_node_weight(weight)
            updated = updated.reweighted(float(weight))
        if updated == node:
            return self.last_recompute

        self._state.replace_node(updated)
        if updated.name == node.name:
            return self._commit(state=True)
        return self._commit(
            state=True,
            mapping=True,
            synchronize=lambda: self._sync.on_state_renamed(self._mapping, updated),
        )

    # ------------------------------------------------------------------
    # State graph: edges
    # ------------------------------------------------------------------

    def set_state_edge(self, source: str, target: str, weight: float | None = None) -> RecomputeResult:
        """
        Create or update a transition; a weight <= 0 removes it.
        """
        self.get_state_node(source)
        self.get_state_node(target)
        if weight is None:
            weight = self.config.defaults.edge_weight
        self._check_edge_weight(weight)

        if weight <= 0.0:
            self._state.remove_edge(source, target)
        else:
            self._state.add_edge(StateEdge(source, target, float(weight)))
        return self._commit(state=True)

    def remove_state_edge(self, source: str, target: str) -> RecomputeResult:
        self.get_state_node(source)
        self.get_state_node(target)

        self._state.remove_edge(source, target)
        return self._commit(state=True)

    # ------------------------------------------------------------------
    # Mapping graph: destination nodes
    # ------------------------------------------------------------------

    def add_destination_node(self, name: str) -> str:
        name = self._clean_name(name)
        self._check_destination_name_free(name)

        node = MappingNode.destination(name)
        self._mapping.add_node(node)
        logger.debug("added destination %s (%s)", node.id, name)

        self._commit(mapping=True)
        return node.id

    def remove_destination_node(self, node_id: str) -> RecomputeResult:
        self._require_destination(node_id)

        self._mapping.remove_node(node_id)
        return self._commit(mapping=True)

    def rename_destination_node(self, node_id: str, name: str) -> RecomputeResult:
        node = self._require_destination(node_id)
        name = self._clean_name(name)
        if name == node.name:
            return self.last_recompute
        self._check_destination_name_free(name)

        self._mapping.replace_node(node.renamed(name))
        return self._commit(mapping=True)

    # ------------------------------------------------------------------
    # Mapping graph: edges
    # ------------------------------------------------------------------

    def set_mapping_edge(self, source: str, target: str, weight: float | None = None) -> RecomputeResult:
        """
        Create or update a Source -> Destination edge; a weight <= 0
        removes it. Any other direction is rejected.
        """
        self._check_mapping_direction(source, target)
        if weight is None:
            weight = self.config.defaults.edge_weight
        self._check_edge_weight(weight)

        if weight <= 0.0:
            self._mapping.remove_edge(source, target)
        else:
            self._mapping.add_edge(MappingEdge(source, target, float(weight)))
        return self._commit(mapping=True)

    def remove_mapping_edge(self, source: str, target: str) -> RecomputeResult:
        self._check_mapping_direction(source, target)

        self._mapping.remove_edge(source, target)
        return self._commit(mapping=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def state_nodes(self) -> List[StateNode]:
        return self._state.get_nodes()

    def state_edges(self) -> List[StateEdge]:
        return self._state.get_edges()

    def get_state_node(self, node_id: str) -> StateNode:
        if not self._state.has_node(node_id):
            raise UnknownNodeError("state", node_id)
        return self._state.get_node(node_id)

    def find_state_node(self, name: str) -> Optional[StateNode]:
        for node in self._state.get_nodes():
            if node.name == name:
                return node
        return None

    def mapping_nodes(self, kind: NodeKind | None = None) -> List[MappingNode]:
        nodes = self._mapping.get_nodes()
        if kind is None:
            return nodes
        return [n for n in nodes if n.kind is kind]

    def destination_nodes(self) -> List[MappingNode]:
        return self.mapping_nodes(NodeKind.DESTINATION)

    def mapping_edges(self) -> List[MappingEdge]:
        return self._mapping.get_edges()

    def get_mapping_node(self, node_id: str) -> MappingNode:
        if not self._mapping.has_node(node_id):
            raise UnknownNodeError("mapping", node_id)
        return self._mapping.get_node(node_id)

    def find_destination_node(self, name: str) -> Optional[MappingNode]:
        for node in self.destination_nodes():
            if node.name == name:
                return node
        return None

    def source_for_state(self, state_id: str) -> MappingNode:
        self.get_state_node(state_id)
        source = self._sync.source_for(self._mapping, state_id)
        if source is None:
            # Unreachable while the mirror invariant holds.
            raise UnknownNodeError("mapping", f"source of {state_id}")
        return source

    def mirrors(self) -> Dict[str, str]:
        return self._sync.mirrors(self._mapping)

    def observed_nodes(self) -> List[ObservedNode]:
        return self._observed.get_nodes()

    def observed_edges(self) -> List[Any]:
        return self._observed.get_edges()

    def observed_weights(self) -> Dict[str, float]:
        """
        Destination id -> derived weight.
        """
        return {n.backref: n.weight for n in self._observed.get_nodes()}

    def observed_node_for(self, destination_id: str) -> Optional[ObservedNode]:
        for node in self._observed.get_nodes():
            if node.backref == destination_id:
                return node
        return None

    # ------------------------------------------------------------------
    # Recompute & statistics
    # ------------------------------------------------------------------

    def recompute(self) -> RecomputeResult:
        result = self._trigger.run(self._state, self._mapping)
        self._apply(result)
        return result

    def state_statistics(self) -> StateStatistics:
        return self._memoized(
            "state",
            lambda: self._analyzer.state_statistics(
                self.state_nodes(),
                self.state_edges(),
            ),
        )

    def observed_statistics(self) -> ObservedStatistics:
        return self._memoized(
            "observed",
            lambda: self._analyzer.observed_statistics(
                self.state_nodes(),
                self.state_edges(),
                self.mapping_edges(),
                mirrors=self.mirrors(),
                destinations=[n.id for n in self.destination_nodes()],
            ),
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def export_state(self) -> Dict[str, Any]:
        """
        Plain-data snapshot of the state and mapping graphs.

        The observed graph is never exported; it is re-derived on import.
        """
        return export_project(self._state, self._mapping)

    def import_state(self, data: Dict[str, Any]) -> RecomputeResult:
        """
        Replace both editable graphs with ``data``.

        Raises ``ValidationError`` and leaves the store untouched when the
        payload is malformed.
        """
        state, mapping = build_graphs(data)
        self._sync.reconcile(state, mapping)

        self._state = state
        self._mapping = mapping
        logger.info(
            "imported %s states, %s destinations",
            state.node_count(),
            len(self.destination_nodes()),
        )
        return self._commit(state=True, mapping=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(
        self,
        *,
        state: bool = False,
        mapping: bool = False,
        synchronize: Callable[[], Any] | None = None,
    ) -> RecomputeResult:
        if state:
            self.state_version += 1
        if mapping:
            self.mapping_version += 1
        result = self._trigger.run(self._state, self._mapping, synchronize=synchronize)
        self._apply(result)
        return result

    def _apply(self, result: RecomputeResult) -> None:
        # Single assignment: readers see either the old or the new view.
        self._observed = result.observed
        self.last_recompute = result

    def _memoized(self, key: str, compute: Callable[[], Any]) -> Any:
        versions = (self.state_version, self.mapping_version)
        cached = self._memo.get(key)
        if cached is not None and cached[0] == versions:
            return cached[1]
        value = compute()
        self._memo[key] = (versions, value)
        return value

    def _require_destination(self, node_id: str) -> MappingNode:
        node = self.get_mapping_node(node_id)
        if not node.is_destination:
            raise KindMismatchError(
                f"mapping node {node_id!r} is a Source node; "
                "Source nodes follow the state graph"
            )
        return node

    def _check_mapping_direction(self, source: str, target: str) -> None:
        src = self.get_mapping_node(source)
        dst = self.get_mapping_node(target)
        if not (src.is_source and dst.is_destination):
            raise KindMismatchError(
                f"mapping edges run Source -> Destination, "
                f"got {src.kind.value} -> {dst.kind.value}"
            )

    def _check_state_name_free(self, name: str) -> None:
        if self.find_state_node(name) is not None:
            raise DuplicateNameError("state", name)

    def _check_destination_name_free(self, name: str) -> None:
        if self.find_destination_node(name) is not None:
            raise DuplicateNameError("mapping", name)

    @staticmethod
    def _clean_name(name: str) -> str:
        cleaned = name.strip() if isinstance(name, str) else ""
        if not cleaned:
            raise StructuralError("node names must be non-empty strings")
        return cleaned

    @staticmethod
    def _check_node_weight(weight: float) -> None:
        if not math.isfinite(weight) or weight < 0.0:
            raise InvalidWeightError(f"node weight must be finite and >= 0, got {weight!r}")

    @staticmethod
    def _check_edge_weight(weight: float) -> None:
        if not math.isfinite(weight):
            raise InvalidWeightError(f"edge weight must be finite, got {weight!r}")
