"""
TSP problem model.
Defines the problem representation and the distance / gain oracle used by the search.
"""

from typing import Iterable, Optional

import numpy as np

from lk_tsp.data_processing.distance import DistanceCalculator
from lk_tsp.models.alternating_walk import AlternatingWalk


class TsplibProblem:
    """Represents a symmetric TSP instance over vertices 0..n-1."""

    def __init__(self,
                 distance_matrix: np.ndarray,
                 name: str = "",
                 comment: str = "",
                 edge_weight_type: str = "EXPLICIT",
                 coordinates: Optional[np.ndarray] = None):
        """
        Initialize TSP problem.

        Args:
            distance_matrix: Square matrix of non-negative integral distances
            name: Problem name (TSPLIB NAME)
            comment: Free text (TSPLIB COMMENT)
            edge_weight_type: TSPLIB EDGE_WEIGHT_TYPE the matrix was derived from
            coordinates: Optional (n, 2) node coordinates, used for plotting
        """
        self.distance_matrix = np.asarray(distance_matrix, dtype=np.int64)
        self.name = name
        self.comment = comment
        self.edge_weight_type = edge_weight_type
        self.coordinates = None if coordinates is None else np.asarray(coordinates, dtype=float)

        self._validate_problem()

        # Plain nested lists are much faster than numpy scalar indexing in the search loop
        self._rows = self.distance_matrix.tolist()

    @classmethod
    def from_coordinates(cls, coordinates, edge_weight_type: str = 'EUC_2D',
                         name: str = "", comment: str = "") -> 'TsplibProblem':
        """Create a problem from node coordinates."""
        calculator = DistanceCalculator(edge_weight_type)
        matrix = calculator.calculate_distance_matrix(coordinates)
        return cls(matrix, name=name, comment=comment,
                   edge_weight_type=edge_weight_type, coordinates=coordinates)

    def _validate_problem(self):
        """Validate problem data."""
        matrix = self.distance_matrix
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Distance matrix must be square, got shape {matrix.shape}")

        if matrix.shape[0] == 0:
            raise ValueError("Problem has no vertices")

        if (matrix < 0).any():
            raise ValueError("Distances must be non-negative")

        if not np.array_equal(matrix, matrix.T):
            raise ValueError("Distance matrix must be symmetric")

        if self.coordinates is not None and len(self.coordinates) != matrix.shape[0]:
            raise ValueError(
                f"Got {len(self.coordinates)} coordinates for dimension {matrix.shape[0]}"
            )

    @property
    def dimension(self) -> int:
        return len(self._rows)

    def dist(self, vertex1: int, vertex2: int) -> int:
        """Distance between two vertices."""
        return self._rows[vertex1][vertex2]

    def length(self, tour: Iterable[int]) -> int:
        """Total length of a closed tour."""
        order = np.fromiter(tour, dtype=np.int64)
        if len(order) == 0:
            return 0
        return int(self.distance_matrix[order, np.roll(order, -1)].sum())

    def exchange_gain(self, walk: AlternatingWalk) -> int:
        """
        Gain of exchanging along an alternating walk.

        Edges at even positions are removed from the tour, edges at odd
        positions are added, so the gain is the sum of removed edge lengths
        minus the sum of added edge lengths.

        Args:
            walk: Alternating walk (closed or open)

        Returns:
            Signed integral gain; positive means the tour gets shorter
        """
        gain = 0
        rows = self._rows
        for i in range(len(walk) - 1):
            if i % 2 == 0:
                gain += rows[walk[i]][walk[i + 1]]
            else:
                gain -= rows[walk[i]][walk[i + 1]]
        return gain

    def has_coordinates(self) -> bool:
        return self.coordinates is not None

    def __repr__(self):
        return f"TsplibProblem(name={self.name!r}, dimension={self.dimension}, type={self.edge_weight_type})"
