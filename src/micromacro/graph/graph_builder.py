from __future__ import annotations

from typing import Dict, Iterable, Tuple

from micromacro.errors import UnknownNodeError
from micromacro.graph.graph_store import GraphStore


class GraphBuilder:
    """
    Populates a store from name-based descriptions.
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def add_states(self, states: Iterable[Tuple[str, float]]) -> Dict[str, str]:
        return {name: self.store.add_state_node(name, weight) for name, weight in states}

    def add_transitions(self, transitions: Iterable[Tuple[str, str, float]]) -> None:
        for source, target, weight in transitions:
            self.store.set_state_edge(self._state_id(source), self._state_id(target), weight)

    def add_destinations(self, names: Iterable[str]) -> Dict[str, str]:
        return {name: self.store.add_destination_node(name) for name in names}

    def add_mappings(self, mappings: Iterable[Tuple[str, str, float]]) -> None:
        """
        ``(state name, destination name, weight)`` triples.
        """
        for state, destination, weight in mappings:
            source = self.store.source_for_state(self._state_id(state))
            self.store.set_mapping_edge(source.id, self._destination_id(destination), weight)

    def seed_default(self) -> None:
        """
        Three unit-weight states in a cycle and two empty observables.
        """
        self.add_states([("Node 0", 1.0), ("Node 1", 1.0), ("Node 2", 1.0)])
        self.add_transitions(
            [
                ("Node 0", "Node 1", 1.0),
                ("Node 1", "Node 2", 1.0),
                ("Node 2", "Node 0", 1.0),
            ]
        )
        self.add_destinations(["Value 0", "Value 1"])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _state_id(self, name: str) -> str:
        node = self.store.find_state_node(name)
        if node is None:
            raise UnknownNodeError("state", name)
        return node.id

    def _destination_id(self, name: str) -> str:
        node = self.store.find_destination_node(name)
        if node is None:
            raise UnknownNodeError("mapping", name)
        return node.id
