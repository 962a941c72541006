from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging
import threading

from micromacro.graph.graph_store import GraphStore
from micromacro.graph.graph_query import GraphQueryEngine
from micromacro.graph.recompute import RecomputeResult


class EditorService:
    """
    Transport-facing wrapper around one GraphStore.

    This is the ONLY place where:
    - store access is serialized (handlers run on a thread pool)
    - ids are translated to names for display
    - results are flattened to plain data
    """

    def __init__(self, *, store: GraphStore) -> None:
        self.store = store
        self.queries = GraphQueryEngine(store)
        self._lock = threading.Lock()
        self.logger = logging.getLogger("micromacro.editor")

    # ------------------------------------------------------------------
    # State graph
    # ------------------------------------------------------------------

    def state_graph(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "version": self.store.state_version,
                "nodes": [
                    {"id": n.id, "name": n.name, "weight": n.weight}
                    for n in self.store.state_nodes()
                ],
                "edges": [_edge(e) for e in self.store.state_edges()],
                "issues": [str(i) for i in self.queries.state_issues()],
            }

    def add_state_node(self, name: str, weight: Optional[float]) -> Dict[str, Any]:
        with self._lock:
            node_id = self.store.add_state_node(name, weight)
            return _mutation(self.store.last_recompute, node_id)

    def update_state_node(
        self,
        node_id: str,
        *,
        name: Optional[str],
        weight: Optional[float],
    ) -> Dict[str, Any]:
        with self._lock:
            result = self.store.update_state_node(node_id, name=name, weight=weight)
            return _mutation(result, node_id)

    def remove_state_node(self, node_id: str) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.remove_state_node(node_id))

    def set_state_edge(self, source: str, target: str, weight: Optional[float]) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.set_state_edge(source, target, weight))

    def remove_state_edge(self, source: str, target: str) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.remove_state_edge(source, target))

    def state_statistics(self) -> Dict[str, Any]:
        with self._lock:
            stats = self.store.state_statistics()
            names = {n.id: n.name for n in self.store.state_nodes()}
            return {
                "weight_distribution": _by_name(stats.weight_distribution, names),
                "entropy": stats.entropy,
                "effective_states": stats.effective_states,
                "equilibrium": _by_name(stats.equilibrium, names),
                "converged": stats.converged,
                "entropy_rate": stats.entropy_rate,
                "detailed_balance_deviation": stats.detailed_balance_deviation,
                "error": stats.error,
            }

    # ------------------------------------------------------------------
    # Mapping graph
    # ------------------------------------------------------------------

    def mapping_graph(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "version": self.store.mapping_version,
                "nodes": [
                    {"id": n.id, "name": n.name, "kind": n.kind.value, "mirror": n.mirror}
                    for n in self.store.mapping_nodes()
                ],
                "edges": [_edge(e) for e in self.store.mapping_edges()],
                "issues": [str(i) for i in self.queries.mapping_issues()],
            }

    def add_destination(self, name: str) -> Dict[str, Any]:
        with self._lock:
            node_id = self.store.add_destination_node(name)
            return _mutation(self.store.last_recompute, node_id)

    def rename_destination(self, node_id: str, name: str) -> Dict[str, Any]:
        with self._lock:
            result = self.store.rename_destination_node(node_id, name)
            return _mutation(result, node_id)

    def remove_destination(self, node_id: str) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.remove_destination_node(node_id))

    def set_mapping_edge(self, source: str, target: str, weight: Optional[float]) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.set_mapping_edge(source, target, weight))

    def remove_mapping_edge(self, source: str, target: str) -> Dict[str, Any]:
        with self._lock:
            return _mutation(self.store.remove_mapping_edge(source, target))

    # ------------------------------------------------------------------
    # Observed graph
    # ------------------------------------------------------------------

    def observed_graph(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "nodes": [
                    {
                        "id": n.id,
                        "name": n.name,
                        "destination_id": n.backref,
                        "weight": n.weight,
                    }
                    for n in self.store.observed_nodes()
                ],
                "edges": [_edge(e) for e in self.store.observed_edges()],
                "recompute": _status(self.store.last_recompute),
            }

    def observed_statistics(self) -> Dict[str, Any]:
        with self._lock:
            stats = self.store.observed_statistics()
            names = {n.id: n.name for n in self.store.destination_nodes()}
            return {
                "weight_distribution": _by_name(stats.weight_distribution, names),
                "entropy": stats.entropy,
                "equilibrium_from_state": _by_name(stats.equilibrium_from_state, names),
                "error": stats.error,
            }

    def issues(self, graph: str) -> List[str]:
        with self._lock:
            found = self.queries.state_issues() if graph == "state" else self.queries.mapping_issues()
            return [str(i) for i in found]

    # ------------------------------------------------------------------
    # Matrices & project
    # ------------------------------------------------------------------

    def matrix(self, graph: str) -> Dict[str, Any]:
        with self._lock:
            frame = self.queries.weight_matrix(graph)
            return {
                "rows": [str(r) for r in frame.index],
                "columns": [str(c) for c in frame.columns],
                "values": frame.to_numpy(dtype=float).tolist(),
            }

    def export_project(self) -> Dict[str, Any]:
        with self._lock:
            return self.store.export_state()

    def import_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            result = self.store.import_state(data)
            self.logger.info(
                "project imported (state v%s, mapping v%s)",
                self.store.state_version,
                self.store.mapping_version,
            )
            return _mutation(result)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------


def _edge(edge) -> Dict[str, Any]:
    return {"source": edge.source, "target": edge.target, "weight": edge.weight}


def _status(result: RecomputeResult) -> Dict[str, Any]:
    return {"ok": result.ok, "error": None if result.ok else str(result.error)}


def _mutation(result: RecomputeResult, node_id: Optional[str] = None) -> Dict[str, Any]:
    return {"id": node_id, "recompute": _status(result)}


def _by_name(values: Optional[Dict[str, float]], names: Dict[str, str]) -> Optional[Dict[str, float]]:
    if values is None:
        return None
    return {names.get(k, k): v for k, v in values.items()}
