from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Tuple

import pandas as pd

from micromacro.graph.graph_store import GraphStore

IssueKind = Literal[
    "no_outgoing_edges",
    "no_incoming_edges",
    "source_no_outgoing_edges",
    "destination_no_incoming_edges",
]

_ISSUE_TEXT = {
    "no_outgoing_edges": "State {name!r} has no outgoing edges",
    "no_incoming_edges": "State {name!r} has no incoming edges",
    "source_no_outgoing_edges": "Source {name!r} maps to no destination",
    "destination_no_incoming_edges": "Destination {name!r} has no incoming edges",
}


@dataclass(frozen=True)
class ValidationIssue:
    """
    A node whose wiring makes the dynamics degenerate.

    Issues are advisory; the store accepts such graphs.
    """

    kind: IssueKind
    node_id: str
    name: str

    def __str__(self) -> str:
        return _ISSUE_TEXT[self.kind].format(name=self.name)


@dataclass(frozen=True)
class Connections:
    incoming: List[Tuple[str, float]]
    outgoing: List[Tuple[str, float]]


class GraphQueryEngine:
    """
    Read-only views over a ``GraphStore`` for editors and reports.
    """

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    def connections(
        self,
        node_id: str,
        *,
        graph: Literal["state", "mapping"] = "state",
    ) -> Connections:
        """
        Incoming and outgoing neighbours of a node as ``(name, weight)``.
        """
        if graph == "state":
            self.store.get_state_node(node_id)
            edges = self.store.state_edges()
            lookup = {n.id: n.name for n in self.store.state_nodes()}
        else:
            self.store.get_mapping_node(node_id)
            edges = self.store.mapping_edges()
            lookup = {n.id: n.name for n in self.store.mapping_nodes()}

        return Connections(
            incoming=[(lookup[e.source], e.weight) for e in edges if e.target == node_id],
            outgoing=[(lookup[e.target], e.weight) for e in edges if e.source == node_id],
        )

    def state_issues(self) -> List[ValidationIssue]:
        edges = self.store.state_edges()
        has_out = {e.source for e in edges}
        has_in = {e.target for e in edges}

        issues: List[ValidationIssue] = []
        for node in self.store.state_nodes():
            if node.id not in has_out:
                issues.append(ValidationIssue("no_outgoing_edges", node.id, node.name))
            if node.id not in has_in:
                issues.append(ValidationIssue("no_incoming_edges", node.id, node.name))
        return issues

    def mapping_issues(self) -> List[ValidationIssue]:
        edges = self.store.mapping_edges()
        has_out = {e.source for e in edges}
        has_in = {e.target for e in edges}

        issues: List[ValidationIssue] = []
        for node in self.store.mapping_nodes():
            if node.is_source and node.id not in has_out:
                issues.append(ValidationIssue("source_no_outgoing_edges", node.id, node.name))
            elif node.is_destination and node.id not in has_in:
                issues.append(
                    ValidationIssue("destination_no_incoming_edges", node.id, node.name)
                )
        return issues

    def weight_matrix(self, graph: Literal["state", "mapping"] = "state") -> pd.DataFrame:
        """
        Edge weights as a name-labelled frame; absent edges are 0.0.

        ``"state"`` gives states x states, ``"mapping"`` gives sources (in
        state order) x destinations.
        """
        if graph == "state":
            nodes = self.store.state_nodes()
            rows = [n.id for n in nodes]
            cols = rows
            row_names = col_names = [n.name for n in nodes]
            edges = self.store.state_edges()
        else:
            sources = [self.store.source_for_state(n.id) for n in self.store.state_nodes()]
            destinations = self.store.destination_nodes()
            rows = [n.id for n in sources]
            cols = [n.id for n in destinations]
            row_names = [n.name for n in sources]
            col_names = [n.name for n in destinations]
            edges = self.store.mapping_edges()

        frame = pd.DataFrame(0.0, index=rows, columns=cols)
        for e in edges:
            frame.loc[e.source, e.target] = e.weight

        frame.index = row_names
        frame.columns = col_names
        return frame
