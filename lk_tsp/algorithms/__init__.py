"""
Tour construction and improvement algorithms.

This package contains:
- Nearest neighbor start tour heuristic
- Candidate edge lists (all, k-nearest, alpha placeholder)
- Lin-Kernighan local search with pluggable search observers
- Greedy reversal sort for signed permutations
"""

from .nearest_neighbor import NearestNeighborHeuristic
from .candidate_edges import CandidateEdges, build_candidate_edges
from .lin_kernighan import LinKernighanOptimizer, lin_kernighan_heuristic
from .search_observer import (
    SearchObserver, LoggingSearchObserver, RecordingSearchObserver, CompositeSearchObserver
)
from .signed_permutation import SignedPermutation

__all__ = ['NearestNeighborHeuristic', 'CandidateEdges', 'build_candidate_edges',
           'LinKernighanOptimizer', 'lin_kernighan_heuristic', 'SearchObserver',
           'LoggingSearchObserver', 'RecordingSearchObserver', 'CompositeSearchObserver',
           'SignedPermutation']
