"""
Distance calculation for TSPLIB problems.
Computes integral distance matrices for the TSPLIB edge weight types.
"""

import logging
from typing import Callable, Dict

import numpy as np

logger = logging.getLogger(__name__)

# Constants from the TSPLIB documentation (Reinelt 1995)
GEO_PI = 3.141592
EARTH_RADIUS = 6378.388


def nint(values: np.ndarray) -> np.ndarray:
    """TSPLIB nearest integer: (int)(x + 0.5)."""
    return np.floor(values + 0.5).astype(np.int64)


def _differences(coordinates: np.ndarray):
    dx = coordinates[:, 0][:, np.newaxis] - coordinates[:, 0][np.newaxis, :]
    dy = coordinates[:, 1][:, np.newaxis] - coordinates[:, 1][np.newaxis, :]
    return dx, dy


def euclidean_2d(coordinates: np.ndarray) -> np.ndarray:
    dx, dy = _differences(coordinates)
    return nint(np.sqrt(dx * dx + dy * dy))


def ceiling_2d(coordinates: np.ndarray) -> np.ndarray:
    dx, dy = _differences(coordinates)
    return np.ceil(np.sqrt(dx * dx + dy * dy)).astype(np.int64)


def manhattan_2d(coordinates: np.ndarray) -> np.ndarray:
    dx, dy = _differences(coordinates)
    return nint(np.abs(dx) + np.abs(dy))


def maximum_2d(coordinates: np.ndarray) -> np.ndarray:
    dx, dy = _differences(coordinates)
    return np.maximum(nint(np.abs(dx)), nint(np.abs(dy)))


def pseudo_euclidean(coordinates: np.ndarray) -> np.ndarray:
    """ATT distance: r = sqrt((dx^2 + dy^2) / 10), rounded up if nint(r) < r."""
    dx, dy = _differences(coordinates)
    r = np.sqrt((dx * dx + dy * dy) / 10.0)
    t = nint(r)
    return np.where(t < r, t + 1, t).astype(np.int64)


def geographical(coordinates: np.ndarray) -> np.ndarray:
    """GEO distance on an idealized sphere; coordinates are DDD.MM latitude/longitude."""
    degrees = np.trunc(coordinates)
    minutes = coordinates - degrees
    radians = GEO_PI * (degrees + 5.0 * minutes / 3.0) / 180.0
    latitude = radians[:, 0]
    longitude = radians[:, 1]

    q1 = np.cos(longitude[:, np.newaxis] - longitude[np.newaxis, :])
    q2 = np.cos(latitude[:, np.newaxis] - latitude[np.newaxis, :])
    q3 = np.cos(latitude[:, np.newaxis] + latitude[np.newaxis, :])
    argument = np.clip(0.5 * ((1.0 + q1) * q2 - (1.0 - q1) * q3), -1.0, 1.0)
    matrix = (EARTH_RADIUS * np.arccos(argument) + 1.0).astype(np.int64)
    np.fill_diagonal(matrix, 0)
    return matrix


EDGE_WEIGHT_FUNCTIONS: Dict[str, Callable[[np.ndarray], np.ndarray]] = {
    'EUC_2D': euclidean_2d,
    'CEIL_2D': ceiling_2d,
    'MAN_2D': manhattan_2d,
    'MAX_2D': maximum_2d,
    'ATT': pseudo_euclidean,
    'GEO': geographical,
}


class DistanceCalculator:
    """Calculates distance matrices for coordinate based TSPLIB problems."""

    def __init__(self, edge_weight_type: str = 'EUC_2D'):
        """
        Initialize distance calculator.

        Args:
            edge_weight_type: TSPLIB EDGE_WEIGHT_TYPE keyword value

        Raises:
            ValueError: If the edge weight type is not coordinate based or unknown
        """
        if edge_weight_type not in EDGE_WEIGHT_FUNCTIONS:
            raise ValueError(f"Unsupported edge weight type: {edge_weight_type}")
        self.edge_weight_type = edge_weight_type

    def calculate_distance_matrix(self, coordinates) -> np.ndarray:
        """
        Calculate distance matrix between all points.

        Args:
            coordinates: Sequence of (x, y) pairs or an (n, 2) array

        Returns:
            Symmetric int64 distance matrix with zero diagonal
        """
        points = np.asarray(coordinates, dtype=float)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"Expected (n, 2) coordinates, got shape {points.shape}")

        logger.debug(f"Computing {self.edge_weight_type} distance matrix for {len(points)} nodes")
        return EDGE_WEIGHT_FUNCTIONS[self.edge_weight_type](points)
