"""
Algorithm for finding a maximum cardinality matching in bipartite graphs.
"""

__all__ = ["maximum_cardinality_matching",
           "BipartiteGraph",
           "MatchingEngine",
           "AugmentingPath",
           "LeftVertex",
           "RightVertex",
           "MalformedInput",
           "MatchingError",
           "InvariantViolation"]

from .graph import (BipartiteGraph,
                    LeftVertex,
                    RightVertex,
                    MalformedInput)
from .algorithm import (maximum_cardinality_matching,
                        MatchingEngine,
                        AugmentingPath,
                        MatchingError,
                        InvariantViolation)
