"""
Tour quality metrics.
Compares tour lengths against start tours and known optima.
"""

import logging
from typing import Dict, Optional

from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)


def gap_above_optimum(length: int, optimal_length: int) -> float:
    """Percentage by which ``length`` exceeds ``optimal_length``."""
    if optimal_length <= 0:
        raise ValueError(f"Optimal length must be positive, got {optimal_length}")
    return (length / float(optimal_length) - 1.0) * 100.0


class TourMetrics:
    """Calculates summary figures for a tour of a given problem."""

    def __init__(self, problem: TsplibProblem):
        """
        Args:
            problem: TSP problem instance
        """
        self.problem = problem

    def calculate(self, tour: Tour, start_tour: Optional[Tour] = None,
                  optimal_tour: Optional[Tour] = None) -> Dict:
        """
        Calculate metrics for ``tour``.

        Args:
            tour: Tour to evaluate
            start_tour: Tour the search started from, if any
            optimal_tour: Known optimal tour, if any

        Returns:
            Dictionary with length, validity and optional comparisons
        """
        length = self.problem.length(tour)
        metrics = {
            'problem': self.problem.name,
            'dimension': self.problem.dimension,
            'length': length,
            'is_hamiltonian': tour.is_hamiltonian_tour() and len(tour) == self.problem.dimension,
        }

        if start_tour is not None:
            start_length = self.problem.length(start_tour)
            metrics['start_length'] = start_length
            metrics['improvement'] = start_length - length
            metrics['improvement_pct'] = (
                (start_length - length) / float(start_length) * 100.0 if start_length else 0.0
            )

        if optimal_tour is not None:
            optimal_length = self.problem.length(optimal_tour)
            metrics['optimal_length'] = optimal_length
            metrics['gap_pct'] = gap_above_optimum(length, optimal_length) if optimal_length > 0 else 0.0

        return metrics
