"""
Abstract base classes for TSP tour improvement.
Defines the interface shared by local search optimizers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
from lk_tsp.models.tsp_problem import TsplibProblem
from lk_tsp.models.tour import Tour


class BaseOptimizer(ABC):
    """Base class for local search optimizers."""

    def __init__(self, problem: TsplibProblem):
        """
        Initialize optimizer.

        Args:
            problem: TSP problem instance
        """
        self.problem = problem

    @abstractmethod
    def optimize(self, tour: Tour) -> Tour:
        """
        Optimize tour.

        Args:
            tour: Tour to improve (not modified)

        Returns:
            Improved tour
        """
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[str, Any]:
        """
        Return optimizer statistics.

        Returns:
            Dictionary with optimizer statistics
        """
        pass
