"""
Tour representation for TSP problems.
A tour is a cyclic order of all vertices supporting edge exchanges.
"""

from typing import Callable, Dict, Iterable, List

from lk_tsp.core.exceptions import InvalidExchangeError
from lk_tsp.models.alternating_walk import AlternatingWalk


class Tour:
    """Cyclic sequence of vertices with O(1) adjacency queries."""

    def __init__(self, order: Iterable[int]):
        """
        Initialize tour.

        Args:
            order: Vertices in visiting order; the last vertex connects back to the first
        """
        self.order: List[int] = [int(v) for v in order]
        self._update_positions()

    def _update_positions(self):
        self.position: Dict[int, int] = {v: i for i, v in enumerate(self.order)}

    def __len__(self):
        return len(self.order)

    def __iter__(self):
        return iter(self.order)

    def __getitem__(self, index):
        return self.order[index]

    def __eq__(self, other):
        if not isinstance(other, Tour):
            return NotImplemented
        return self.order == other.order

    def __str__(self):
        return ", ".join(str(v) for v in self.order)

    def __repr__(self):
        return f"Tour([{self}])"

    def copy(self) -> 'Tour':
        """Create an independent copy of the tour."""
        return Tour(self.order)

    def to_list(self) -> List[int]:
        return list(self.order)

    def predecessor(self, vertex: int) -> int:
        """Vertex visited right before ``vertex``."""
        return self.order[self.position[vertex] - 1]

    def successor(self, vertex: int) -> int:
        """Vertex visited right after ``vertex``."""
        return self.order[(self.position[vertex] + 1) % len(self.order)]

    def neighbors(self, vertex: int) -> List[int]:
        """The (at most two) vertices adjacent to ``vertex`` in the tour."""
        predecessor = self.predecessor(vertex)
        successor = self.successor(vertex)
        if predecessor == successor:
            return [predecessor]
        return [predecessor, successor]

    def contains_edge(self, vertex1: int, vertex2: int) -> bool:
        return vertex2 == self.predecessor(vertex1) or vertex2 == self.successor(vertex1)

    def is_hamiltonian_tour(self) -> bool:
        """Check that every vertex 0..n-1 appears exactly once."""
        return sorted(self.order) == list(range(len(self.order)))

    def is_tour_after_exchange(self, walk: AlternatingWalk) -> bool:
        """
        Check whether exchanging along a closed walk yields a Hamiltonian cycle.

        The tour itself is not modified.

        Args:
            walk: Closed alternating walk (x_0, ..., x_k, x_0)

        Returns:
            True if the exchange is valid
        """
        try:
            adjacency = self._exchanged_adjacency(walk)
        except InvalidExchangeError:
            return False
        return self._is_single_cycle(self._trace_cycle(adjacency))

    def exchange(self, walk: AlternatingWalk):
        """
        Replace the walk's removed edges with its added edges.

        Args:
            walk: Closed alternating walk (x_0, ..., x_k, x_0)

        Raises:
            InvalidExchangeError: If the walk does not describe a valid exchange
        """
        adjacency = self._exchanged_adjacency(walk)
        cycle = self._trace_cycle(adjacency)
        if not self._is_single_cycle(cycle):
            raise InvalidExchangeError(walk, "result is not a Hamiltonian cycle")
        self.order = cycle
        self._update_positions()

    def _exchanged_adjacency(self, walk: AlternatingWalk) -> Callable[[int], List[int]]:
        """Build the adjacency after the exchange; only touched vertices are copied."""
        if len(walk) < 3 or len(walk) % 2 == 0 or walk[0] != walk[-1]:
            raise InvalidExchangeError(walk, "walk is not closed")

        changed: Dict[int, List[int]] = {}

        def lookup(vertex: int) -> List[int]:
            if vertex not in changed:
                changed[vertex] = [self.predecessor(vertex), self.successor(vertex)]
            return changed[vertex]

        for j, (v, w) in enumerate(walk.edges()):
            if v not in self.position or w not in self.position:
                raise InvalidExchangeError(walk, f"unknown vertex in edge ({v}, {w})")
            if j % 2 == 0:
                try:
                    lookup(v).remove(w)
                    lookup(w).remove(v)
                except ValueError:
                    raise InvalidExchangeError(walk, f"edge ({v}, {w}) is not in the tour")
            else:
                if v == w:
                    raise InvalidExchangeError(walk, f"loop at vertex {v}")
                lookup(v).append(w)
                lookup(w).append(v)

        for vertex, neighbors in changed.items():
            if len(neighbors) != 2:
                raise InvalidExchangeError(walk, f"vertex {vertex} would have degree {len(neighbors)}")

        def adjacency(vertex: int) -> List[int]:
            return changed.get(vertex) or [self.predecessor(vertex), self.successor(vertex)]

        return adjacency

    def _trace_cycle(self, adjacency: Callable[[int], List[int]]) -> List[int]:
        """Follow the adjacency from order[0], keeping the current orientation where possible."""
        start = self.order[0]
        successor = self.successor(start)
        first, second = adjacency(start)
        current = successor if successor in (first, second) else first
        previous = start
        cycle = [start]
        while current != start and len(cycle) < len(self.order):
            cycle.append(current)
            first, second = adjacency(current)
            previous, current = current, (second if first == previous else first)
        if current != start:
            # Ran out of steps without returning: leave a marker the cycle check rejects
            cycle.append(current)
        return cycle

    def _is_single_cycle(self, cycle: List[int]) -> bool:
        return len(cycle) == len(self.order) and len(set(cycle)) == len(self.order)
