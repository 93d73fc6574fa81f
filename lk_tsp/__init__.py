"""
LK-TSP: Lin-Kernighan heuristic for the symmetric traveling salesman problem.
"""

__version__ = "1.0.0"
