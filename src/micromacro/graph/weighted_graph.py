from __future__ import annotations

import networkx as nx
from typing import Any, Iterator, List

# networkx attribute holding the frozen node/edge object
PAYLOAD = "payload"


class WeightedGraph:
    """
    Directed graph holding one immutable payload per node and per edge.

    Thin wrapper over ``networkx.DiGraph``; invariants about kinds and
    weights are enforced by ``GraphStore``, not here. Missing nodes and
    edges are ignored on removal and raise ``KeyError`` on lookup.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._g = nx.DiGraph()

    # -------------------- Nodes --------------------

    def add_node(self, node: Any) -> None:
        self._g.add_node(node.id, **{PAYLOAD: node})

    def replace_node(self, node: Any) -> None:
        # Keeps incident edges; only the payload changes.
        self._g.nodes[node.id][PAYLOAD] = node

    def remove_node(self, node_id: str) -> None:
        if self._g.has_node(node_id):
            self._g.remove_node(node_id)

    def has_node(self, node_id: str) -> bool:
        return self._g.has_node(node_id)

    def get_node(self, node_id: str) -> Any:
        return self._g.nodes[node_id][PAYLOAD]

    def get_nodes(self) -> List[Any]:
        # Insertion order, which networkx preserves.
        return [payload for _, payload in self._g.nodes(data=PAYLOAD)]

    # -------------------- Edges --------------------

    def add_edge(self, edge: Any) -> None:
        # A second edge between the same pair overwrites the first.
        self._g.add_edge(edge.source, edge.target, **{PAYLOAD: edge})

    def get_edge(self, source: str, target: str) -> Any:
        return self._g[source][target][PAYLOAD]

    def remove_edge(self, source: str, target: str) -> None:
        if self.has_edge(source, target):
            self._g.remove_edge(source, target)

    def has_edge(self, source: str, target: str) -> bool:
        return self._g.has_edge(source, target)

    def iter_edges(self) -> Iterator[Any]:
        return (payload for _, _, payload in self._g.edges(data=PAYLOAD))

    def get_edges(self) -> List[Any]:
        return list(self.iter_edges())

    # -------------------- Size --------------------

    def node_count(self) -> int:
        return len(self._g)

    def edge_count(self) -> int:
        return self._g.size()
