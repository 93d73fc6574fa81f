"""
Nearest Neighbor construction heuristic for the TSP.
Provides the start tour that the Lin-Kernighan search improves.
"""

import logging
from typing import List

import numpy as np

from lk_tsp.config import START_TOUR_CONFIG
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)


class NearestNeighborHeuristic:
    """Greedy tour construction: always move to the closest unvisited vertex."""

    def __init__(self, problem: TsplibProblem):
        """
        Initialize Nearest Neighbor heuristic.

        Args:
            problem: TSP problem instance
        """
        self.problem = problem

    def solve(self, start_vertex: int = START_TOUR_CONFIG['start_vertex']) -> Tour:
        """
        Build a tour starting at ``start_vertex``.

        Ties between equally close vertices go to the smallest index.

        Returns:
            Hamiltonian tour over all vertices
        """
        dimension = self.problem.dimension
        if not 0 <= start_vertex < dimension:
            raise ValueError(f"Start vertex {start_vertex} outside [0, {dimension})")

        order = self._build_order(start_vertex)
        tour = Tour(order)
        logger.info(f"Nearest neighbor tour from vertex {start_vertex}: length {self.problem.length(tour)}")
        return tour

    def _build_order(self, start_vertex: int) -> List[int]:
        distances = self.problem.distance_matrix
        visited = np.zeros(self.problem.dimension, dtype=bool)
        visited[start_vertex] = True
        order = [start_vertex]
        current = start_vertex

        for _ in range(self.problem.dimension - 1):
            row = np.where(visited, np.iinfo(np.int64).max, distances[current])
            nearest = int(np.argmin(row))
            visited[nearest] = True
            order.append(nearest)
            current = nearest

        return order
