from __future__ import annotations

from micromacro.graph.graph_schema import ObservedNode, new_id
from micromacro.graph.weighted_graph import WeightedGraph


class DerivationEngine:
    """
    Projects the mapping graph onto a fresh observed graph.

    One observed node per Destination node, in insertion order, each with
    a new id and a backref to its Destination. The input is only read.
    """

    def derive(self, mapping: WeightedGraph) -> WeightedGraph:
        observed = WeightedGraph("observed")

        for node in mapping.get_nodes():
            if node.is_destination:
                observed.add_node(
                    ObservedNode(
                        id=new_id(),
                        name=node.name,
                        backref=node.id,
                    )
                )

        # TODO: derive observed transitions from the state edges once the
        # lumping rule for macro-state transitions is settled.
        return observed
