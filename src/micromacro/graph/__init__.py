"""
Graph subsystem for micromacro.

Three linked graphs:
- state: micro-states and transitions (edited)
- mapping: bipartite Source -> Destination map (edited; Sources mirrored)
- observed: one node per Destination with a derived weight (read-only)
"""

from micromacro.graph.graph_schema import (
    NodeKind,
    StateNode,
    StateEdge,
    MappingNode,
    MappingEdge,
    ObservedNode,
)
from micromacro.graph.weighted_graph import WeightedGraph
from micromacro.graph.synchronization import SynchronizationEngine
from micromacro.graph.derivation import DerivationEngine
from micromacro.graph.recompute import RecomputeTrigger, RecomputeResult
from micromacro.graph.graph_store import GraphStore
from micromacro.graph.graph_builder import GraphBuilder
from micromacro.graph.graph_query import GraphQueryEngine, ValidationIssue, Connections

__all__ = [
    "NodeKind",
    "StateNode",
    "StateEdge",
    "MappingNode",
    "MappingEdge",
    "ObservedNode",
    "WeightedGraph",
    "SynchronizationEngine",
    "DerivationEngine",
    "RecomputeTrigger",
    "RecomputeResult",
    "GraphStore",
    "GraphBuilder",
    "GraphQueryEngine",
    "ValidationIssue",
    "Connections",
]
