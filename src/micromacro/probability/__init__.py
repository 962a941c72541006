"""
Probability subsystem for micromacro.

Turns state weights into a distribution and pushes it through
row-normalized kernels:
- the bipartite state -> observable mapping (derived weights)
- the state transition graph (equilibrium, entropy rate, balance)
"""

from micromacro.probability.distribution import Distribution
from micromacro.probability.markov import MarkovKernel, StationaryResult
from micromacro.probability.propagation import ProbabilityEngine, propagate
from micromacro.probability.dynamics import (
    DynamicsAnalyzer,
    StateStatistics,
    ObservedStatistics,
)

__all__ = [
    "Distribution",
    "MarkovKernel",
    "StationaryResult",
    "ProbabilityEngine",
    "propagate",
    "DynamicsAnalyzer",
    "StateStatistics",
    "ObservedStatistics",
]
