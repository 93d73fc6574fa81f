"""Problem, tour and alternating walk models."""

from .alternating_walk import AlternatingWalk
from .tour import Tour
from .tsp_problem import TsplibProblem

__all__ = ['AlternatingWalk', 'Tour', 'TsplibProblem']
