"""
Candidate edge generation for the Lin-Kernighan search.

Restricts, for every vertex, the set of partners an added edge may connect to.
This bounds the branching factor of the search:
- all:     every other vertex (unrestricted, O(n) per vertex)
- nearest: the k closest vertices
- alpha:   placeholder for alpha-nearness ranking based on 1-trees
"""

import logging
from typing import List, Optional

import numpy as np

from lk_tsp.algorithms.spanning_tree import prims_algorithm, spanning_tree_weight
from lk_tsp.config import CANDIDATE_CONFIG
from lk_tsp.core.exceptions import InvalidConfigurationError
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)


class CandidateEdges(list):
    """candidate_edges[v] is the ordered list of vertices an added edge at v may lead to."""

    @classmethod
    def all_neighbors(cls, problem: TsplibProblem) -> 'CandidateEdges':
        """Every vertex may be joined to every other vertex."""
        dimension = problem.dimension
        result = cls()
        for v in range(dimension):
            result.append([w for w in range(dimension) if w != v])
        return result

    @classmethod
    def nearest_neighbors(cls, problem: TsplibProblem,
                          k: int = CANDIDATE_CONFIG['k']) -> 'CandidateEdges':
        """
        The k closest other vertices of every vertex, ascending by distance.

        Ties between equal distances are resolved by vertex index (stable sort);
        callers should not depend on that order.

        Args:
            problem: Distance oracle
            k: Candidates per vertex; clamped to n - 1
        """
        if k < 1:
            raise InvalidConfigurationError(parameter='k', value=k, expected=">= 1")

        dimension = problem.dimension
        k = min(k, dimension - 1)
        distances = problem.distance_matrix.astype(float)
        # Push each vertex behind all others so it never becomes its own candidate
        np.fill_diagonal(distances, np.inf)

        result = cls()
        for v in range(dimension):
            order = np.argsort(distances[v], kind='stable')[:k]
            result.append([int(w) for w in order])
        return result

    @classmethod
    def alpha_nearest_neighbors(cls, problem: TsplibProblem,
                                k: int = CANDIDATE_CONFIG['k']) -> 'CandidateEdges':
        """
        Alpha-nearness candidates (not implemented yet).

        Builds the minimum spanning tree and its topological order that the
        alpha-value computation needs, but still returns ``all_neighbors``.
        """
        adjacent_vertices, topological_order = prims_algorithm(problem.dimension, problem, 0)

        if logger.isEnabledFor(logging.DEBUG):
            for v, neighbors in enumerate(adjacent_vertices):
                logger.debug(f"MST {v} : {', '.join(str(w) for w in neighbors)}")
            logger.debug(f"MST topological order: {topological_order}")
            logger.debug(f"MST weight: {spanning_tree_weight(adjacent_vertices, problem)}")

        # TODO: rank by alpha-values of the minimum 1-tree and keep the k best per vertex
        return cls.all_neighbors(problem)

    def sizes(self) -> List[int]:
        return [len(candidates) for candidates in self]


def build_candidate_edges(problem: TsplibProblem, strategy: str = 'nearest',
                          k: Optional[int] = None) -> CandidateEdges:
    """
    Build candidate edges with a named strategy.

    Args:
        problem: Distance oracle
        strategy: 'all', 'nearest' or 'alpha'
        k: Candidate list length for 'nearest' / 'alpha' (default from CANDIDATE_CONFIG)

    Raises:
        InvalidConfigurationError: If the strategy is unknown
    """
    k = CANDIDATE_CONFIG['k'] if k is None else k

    if strategy == 'all':
        candidate_edges = CandidateEdges.all_neighbors(problem)
    elif strategy == 'nearest':
        candidate_edges = CandidateEdges.nearest_neighbors(problem, k)
    elif strategy == 'alpha':
        candidate_edges = CandidateEdges.alpha_nearest_neighbors(problem, k)
    else:
        raise InvalidConfigurationError(
            parameter='candidate_strategy',
            value=strategy,
            expected=" | ".join(CANDIDATE_CONFIG['strategies'])
        )

    sizes = candidate_edges.sizes()
    if sizes:
        logger.info(f"Candidate edges ({strategy}): {np.mean(sizes):.1f} per vertex on average")
    return candidate_edges
