"""
micromacro
==========

Micro/macro dynamics of small discrete systems.

A state graph (micro-states with weights and transitions) is mapped, by a
weighted bipartite graph, onto observable values. The observed graph is
derived from the two and carries the probability mass each observable
receives from the normalized state weights.

Public API:
- GraphStore
- GraphBuilder
- GraphQueryEngine
- ProbabilityEngine
- DynamicsAnalyzer
"""

from micromacro.graph.graph_store import GraphStore
from micromacro.graph.graph_builder import GraphBuilder
from micromacro.graph.graph_query import GraphQueryEngine
from micromacro.probability.propagation import ProbabilityEngine
from micromacro.probability.dynamics import DynamicsAnalyzer

__all__ = [
    "GraphStore",
    "GraphBuilder",
    "GraphQueryEngine",
    "ProbabilityEngine",
    "DynamicsAnalyzer",
]

__version__ = "0.1.0"
