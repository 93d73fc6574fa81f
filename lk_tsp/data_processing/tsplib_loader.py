"""
Data loader for TSPLIB problem and tour files.
Handles keyword parsing, data sections and validation.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from lk_tsp.core.exceptions import TsplibFormatError
from lk_tsp.data_processing.distance import EDGE_WEIGHT_FUNCTIONS, DistanceCalculator
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)

# Column-wise formats of a symmetric matrix list the same numbers as the transposed row-wise format
EDGE_WEIGHT_FORMAT_ALIASES = {
    'UPPER_COL': 'LOWER_ROW',
    'LOWER_COL': 'UPPER_ROW',
    'UPPER_DIAG_COL': 'LOWER_DIAG_ROW',
    'LOWER_DIAG_COL': 'UPPER_DIAG_ROW',
}

SUPPORTED_EDGE_WEIGHT_FORMATS = ('FULL_MATRIX', 'UPPER_ROW', 'LOWER_ROW',
                                 'UPPER_DIAG_ROW', 'LOWER_DIAG_ROW')

HEADER_KEYWORDS = ('NAME', 'COMMENT', 'TYPE', 'DIMENSION', 'EDGE_WEIGHT_TYPE',
                          'EDGE_WEIGHT_FORMAT', 'NODE_COORD_TYPE', 'DISPLAY_DATA_TYPE')

Line = Tuple[int, str]


@dataclass
class TsplibTour:
    """A tour read from a TSPLIB tour file."""
    name: str
    tour: Tour
    comment: str = ""
    dimension: Optional[int] = None


def _split_keyword(text: str) -> Tuple[str, str]:
    """Split 'KEY : VALUE' into ('KEY', 'VALUE'); sections have no value."""
    if ':' in text:
        keyword, value = text.split(':', 1)
        return keyword.strip().upper(), value.strip()
    parts = text.split(None, 1)
    return parts[0].upper(), (parts[1].strip() if len(parts) > 1 else "")


class _LineReader:
    """Iterates over non-empty lines while remembering line numbers."""

    def __init__(self, lines: Iterable[str]):
        self.lines: List[Line] = [
            (number, text.strip()) for number, text in enumerate(lines, start=1) if text.strip()
        ]
        self.index = 0

    def has_next(self) -> bool:
        return self.index < len(self.lines)

    def next(self) -> Line:
        line = self.lines[self.index]
        self.index += 1
        return line

    def last_line_number(self) -> Optional[int]:
        if not self.lines:
            return None
        return self.lines[min(self.index, len(self.lines)) - 1][0]

    def read_tokens(self, count: int, section: str) -> List[str]:
        """Read exactly ``count`` whitespace separated tokens, possibly spanning lines."""
        tokens: List[str] = []
        while len(tokens) < count:
            if not self.has_next():
                raise TsplibFormatError(
                    f"{section} ended after {len(tokens)} of {count} values",
                    self.last_line_number(), section
                )
            _, text = self.next()
            tokens.extend(text.split())
        if len(tokens) > count:
            raise TsplibFormatError(
                f"{section} has {len(tokens) - count} unexpected trailing values",
                self.last_line_number(), section
            )
        return tokens


class TsplibLoader:
    """Loads and parses TSPLIB problem (.tsp) and tour (.tour) files."""

    def load_problem(self, file_path: str) -> TsplibProblem:
        """
        Load a symmetric TSP instance from a TSPLIB file.

        Args:
            file_path: Path to the .tsp file

        Returns:
            Parsed problem

        Raises:
            FileNotFoundError: If the file does not exist
            TsplibFormatError: If the file is malformed or uses unsupported features
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Could not open the TSPLIB file '{file_path}'")

        with open(file_path, 'r', encoding='utf-8') as f:
            problem = self.parse_problem(f.readlines())

        logger.info(f"Opened the {problem.name} TSPLIB file ({problem.dimension} nodes, {problem.edge_weight_type})")
        return problem

    def parse_problem(self, lines: Iterable[str]) -> TsplibProblem:
        """Parse the contents of a TSPLIB problem file."""
        reader = _LineReader(lines)
        header: Dict[str, str] = {}
        coordinates: Optional[np.ndarray] = None
        weights: Optional[List[str]] = None

        while reader.has_next():
            line_number, text = reader.next()
            keyword, value = _split_keyword(text)

            if keyword == 'EOF':
                break
            elif keyword in HEADER_KEYWORDS:
                if keyword == 'COMMENT' and 'COMMENT' in header:
                    header['COMMENT'] += "\n" + value
                else:
                    header[keyword] = value
                self._check_header_entry(keyword, value, line_number)
            elif keyword == 'NODE_COORD_SECTION':
                dimension = self._require_dimension(header, line_number, keyword)
                coordinates = self._read_node_coordinates(reader, dimension)
            elif keyword == 'EDGE_WEIGHT_SECTION':
                dimension = self._require_dimension(header, line_number, keyword)
                weights = reader.read_tokens(self._weight_count(header, dimension, line_number), keyword)
            elif keyword == 'DISPLAY_DATA_SECTION':
                dimension = self._require_dimension(header, line_number, keyword)
                reader.read_tokens(3 * dimension, keyword)
            else:
                raise TsplibFormatError(f"unknown keyword {keyword}", line_number, keyword)

        return self._build_problem(header, coordinates, weights, reader.last_line_number())

    def _check_header_entry(self, keyword: str, value: str, line_number: int):
        if keyword == 'TYPE' and value.upper() != 'TSP':
            raise TsplibFormatError(f"only TYPE TSP is supported, got {value}", line_number, keyword)
        if keyword == 'DIMENSION':
            try:
                dimension = int(value)
            except ValueError:
                raise TsplibFormatError(f"DIMENSION is not an integer: {value}", line_number, keyword)
            if dimension < 1:
                raise TsplibFormatError("DIMENSION must be positive", line_number, keyword)
        if keyword == 'EDGE_WEIGHT_TYPE':
            if value.upper() != 'EXPLICIT' and value.upper() not in EDGE_WEIGHT_FUNCTIONS:
                raise TsplibFormatError(f"unsupported EDGE_WEIGHT_TYPE {value}", line_number, keyword)
        if keyword == 'EDGE_WEIGHT_FORMAT':
            edge_format = EDGE_WEIGHT_FORMAT_ALIASES.get(value.upper(), value.upper())
            if edge_format not in SUPPORTED_EDGE_WEIGHT_FORMATS:
                raise TsplibFormatError(f"unsupported EDGE_WEIGHT_FORMAT {value}", line_number, keyword)

    def _require_dimension(self, header: Dict[str, str], line_number: int, section: str) -> int:
        if 'DIMENSION' not in header:
            raise TsplibFormatError(f"{section} appears before DIMENSION", line_number, section)
        return int(header['DIMENSION'])

    def _read_node_coordinates(self, reader: _LineReader, dimension: int) -> np.ndarray:
        coordinates = np.full((dimension, 2), np.nan)
        for _ in range(dimension):
            if not reader.has_next():
                raise TsplibFormatError("NODE_COORD_SECTION is incomplete",
                                        reader.last_line_number(), 'NODE_COORD_SECTION')
            line_number, text = reader.next()
            parts = text.split()
            if len(parts) != 3:
                raise TsplibFormatError(f"expected 'id x y', got '{text}'", line_number, 'NODE_COORD_SECTION')
            try:
                node = int(parts[0])
                x, y = float(parts[1]), float(parts[2])
            except ValueError:
                raise TsplibFormatError(f"invalid coordinate line '{text}'", line_number, 'NODE_COORD_SECTION')
            if not 1 <= node <= dimension:
                raise TsplibFormatError(f"node id {node} out of range", line_number, 'NODE_COORD_SECTION')
            if not np.isnan(coordinates[node - 1, 0]):
                raise TsplibFormatError(f"node {node} appears twice", line_number, 'NODE_COORD_SECTION')
            coordinates[node - 1] = (x, y)
        return coordinates

    def _weight_count(self, header: Dict[str, str], dimension: int, line_number: int) -> int:
        if 'EDGE_WEIGHT_FORMAT' not in header:
            raise TsplibFormatError("EDGE_WEIGHT_SECTION without EDGE_WEIGHT_FORMAT",
                                    line_number, 'EDGE_WEIGHT_SECTION')
        edge_format = EDGE_WEIGHT_FORMAT_ALIASES.get(header['EDGE_WEIGHT_FORMAT'].upper(),
                                                     header['EDGE_WEIGHT_FORMAT'].upper())
        if edge_format == 'FULL_MATRIX':
            return dimension * dimension
        if edge_format in ('UPPER_ROW', 'LOWER_ROW'):
            return dimension * (dimension - 1) // 2
        return dimension * (dimension + 1) // 2

    def _build_problem(self, header: Dict[str, str], coordinates: Optional[np.ndarray],
                       weights: Optional[List[str]], last_line: Optional[int]) -> TsplibProblem:
        if 'DIMENSION' not in header:
            raise TsplibFormatError("missing DIMENSION", last_line, 'DIMENSION')
        dimension = int(header['DIMENSION'])
        edge_weight_type = header.get('EDGE_WEIGHT_TYPE', '').upper()
        if not edge_weight_type:
            raise TsplibFormatError("missing EDGE_WEIGHT_TYPE", last_line, 'EDGE_WEIGHT_TYPE')

        if edge_weight_type == 'EXPLICIT':
            if weights is None:
                raise TsplibFormatError("EXPLICIT problem without EDGE_WEIGHT_SECTION",
                                        last_line, 'EDGE_WEIGHT_SECTION')
            edge_format = EDGE_WEIGHT_FORMAT_ALIASES.get(header['EDGE_WEIGHT_FORMAT'].upper(),
                                                         header['EDGE_WEIGHT_FORMAT'].upper())
            matrix = self._weights_to_matrix(weights, edge_format, dimension, last_line)
        else:
            if coordinates is None:
                raise TsplibFormatError(f"{edge_weight_type} problem without NODE_COORD_SECTION",
                                        last_line, 'NODE_COORD_SECTION')
            matrix = DistanceCalculator(edge_weight_type).calculate_distance_matrix(coordinates)

        return TsplibProblem(
            matrix,
            name=header.get('NAME', ''),
            comment=header.get('COMMENT', ''),
            edge_weight_type=edge_weight_type,
            coordinates=coordinates,
        )

    def _weights_to_matrix(self, weights: List[str], edge_format: str, dimension: int,
                           last_line: Optional[int]) -> np.ndarray:
        try:
            values = np.array([int(float(token)) for token in weights], dtype=np.int64)
        except ValueError:
            raise TsplibFormatError("EDGE_WEIGHT_SECTION contains a non-numeric value",
                                    last_line, 'EDGE_WEIGHT_SECTION')

        if edge_format == 'FULL_MATRIX':
            matrix = values.reshape(dimension, dimension)
            if not np.array_equal(matrix, matrix.T):
                raise TsplibFormatError("FULL_MATRIX is not symmetric", last_line, 'EDGE_WEIGHT_SECTION')
        else:
            if edge_format == 'UPPER_ROW':
                rows, cols = np.triu_indices(dimension, k=1)
            elif edge_format == 'LOWER_ROW':
                rows, cols = np.tril_indices(dimension, k=-1)
            elif edge_format == 'UPPER_DIAG_ROW':
                rows, cols = np.triu_indices(dimension, k=0)
            else:
                rows, cols = np.tril_indices(dimension, k=0)
            matrix = np.zeros((dimension, dimension), dtype=np.int64)
            matrix[rows, cols] = values
            matrix[cols, rows] = values

        if (matrix < 0).any():
            raise TsplibFormatError("negative edge weight", last_line, 'EDGE_WEIGHT_SECTION')
        np.fill_diagonal(matrix, 0)
        return matrix

    def load_tour(self, file_path: str) -> TsplibTour:
        """
        Load a tour from a TSPLIB tour file.

        Raises:
            FileNotFoundError: If the file does not exist
            TsplibFormatError: If the file is malformed
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Could not open the TSPLIB tour file '{file_path}'")

        with open(file_path, 'r', encoding='utf-8') as f:
            return self.parse_tour(f.readlines())

    def parse_tour(self, lines: Iterable[str]) -> TsplibTour:
        """Parse the contents of a TSPLIB tour file."""
        reader = _LineReader(lines)
        header: Dict[str, str] = {}
        nodes: Optional[List[int]] = None

        while reader.has_next():
            line_number, text = reader.next()
            keyword, value = _split_keyword(text)

            if keyword == 'EOF':
                break
            elif keyword in ('NAME', 'COMMENT', 'TYPE', 'DIMENSION'):
                if keyword == 'TYPE' and value.upper() != 'TOUR':
                    raise TsplibFormatError(f"expected TYPE TOUR, got {value}", line_number, keyword)
                if keyword == 'DIMENSION' and not value.isdigit():
                    raise TsplibFormatError(f"DIMENSION is not an integer: {value}", line_number, keyword)
                header[keyword] = value
            elif keyword == 'TOUR_SECTION':
                nodes = self._read_tour_section(reader)
            else:
                raise TsplibFormatError(f"unknown keyword {keyword}", line_number, keyword)

        if nodes is None:
            raise TsplibFormatError("missing TOUR_SECTION", reader.last_line_number(), 'TOUR_SECTION')

        dimension = int(header['DIMENSION']) if 'DIMENSION' in header else None
        if dimension is not None and len(nodes) != dimension:
            raise TsplibFormatError(f"TOUR_SECTION has {len(nodes)} nodes, DIMENSION is {dimension}",
                                    reader.last_line_number(), 'TOUR_SECTION')

        tour = Tour(node - 1 for node in nodes)
        if not tour.is_hamiltonian_tour():
            raise TsplibFormatError("TOUR_SECTION is not a permutation of 1..n",
                                    reader.last_line_number(), 'TOUR_SECTION')

        return TsplibTour(name=header.get('NAME', ''), tour=tour,
                          comment=header.get('COMMENT', ''), dimension=dimension)

    def _read_tour_section(self, reader: _LineReader) -> List[int]:
        nodes: List[int] = []
        while reader.has_next():
            line_number, text = reader.next()
            for token in text.split():
                try:
                    node = int(token)
                except ValueError:
                    raise TsplibFormatError(f"invalid node id '{token}'", line_number, 'TOUR_SECTION')
                if node == -1:
                    return nodes
                nodes.append(node)
        raise TsplibFormatError("TOUR_SECTION is not terminated by -1",
                                reader.last_line_number(), 'TOUR_SECTION')


def load_tsplib_problem(file_path: str) -> TsplibProblem:
    """Convenience function to load a TSPLIB problem."""
    return TsplibLoader().load_problem(file_path)


def load_tsplib_tour(file_path: str) -> TsplibTour:
    """Convenience function to load a TSPLIB tour."""
    return TsplibLoader().load_tour(file_path)
