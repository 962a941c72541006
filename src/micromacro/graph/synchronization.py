from __future__ import annotations

import logging
from typing import Dict, Optional

from micromacro.graph.graph_schema import MappingNode, StateNode
from micromacro.graph.weighted_graph import WeightedGraph

logger = logging.getLogger("micromacro.sync")


class SynchronizationEngine:
    """
    Keeps the Source subset of the mapping graph equal to the state graph.

    Each state node owns exactly one Source node, linked through
    ``MappingNode.mirror``. Destination nodes and edges not incident to an
    affected Source node are never touched.
    """

    # ------------------------------------------------------------------
    # Incremental edits
    # ------------------------------------------------------------------

    def on_state_added(self, mapping: WeightedGraph, node: StateNode) -> MappingNode:
        source = MappingNode.source(node.name, node.id)
        mapping.add_node(source)
        logger.debug("mirrored state %s as source %s", node.id, source.id)
        return source

    def on_state_removed(self, mapping: WeightedGraph, state_id: str) -> None:
        source = self.source_for(mapping, state_id)
        if source is None:
            return
        # networkx drops incident edges together with the node.
        mapping.remove_node(source.id)
        logger.debug("removed source %s mirroring state %s", source.id, state_id)

    def on_state_renamed(self, mapping: WeightedGraph, node: StateNode) -> None:
        source = self.source_for(mapping, node.id)
        if source is None:
            return
        mapping.replace_node(source.renamed(node.name))

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------

    def reconcile(self, state: WeightedGraph, mapping: WeightedGraph) -> None:
        """
        Restore the one-to-one mirror after a bulk load.

        Adds missing Source nodes, drops orphaned or duplicate ones, and
        copies state names onto their mirrors.
        """
        claimed: Dict[str, str] = {}

        for source in [n for n in mapping.get_nodes() if n.is_source]:
            state_id = source.mirror
            if state_id is None or not state.has_node(state_id) or state_id in claimed:
                mapping.remove_node(source.id)
                logger.debug("dropped orphaned source %s", source.id)
                continue

            claimed[state_id] = source.id
            name = state.get_node(state_id).name
            if source.name != name:
                mapping.replace_node(source.renamed(name))

        for node in state.get_nodes():
            if node.id not in claimed:
                self.on_state_added(mapping, node)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def source_for(self, mapping: WeightedGraph, state_id: str) -> Optional[MappingNode]:
        for node in mapping.get_nodes():
            if node.is_source and node.mirror == state_id:
                return node
        return None

    def mirrors(self, mapping: WeightedGraph) -> Dict[str, str]:
        """
        Source node id -> state id.
        """
        return {
            n.id: n.mirror
            for n in mapping.get_nodes()
            if n.is_source and n.mirror is not None
        }
