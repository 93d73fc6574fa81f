"""
Alternating walk representation for sequential edge exchanges.

A walk (x_0, x_1, ..., x_k) alternates between tour edges that are removed
(edges {x_j, x_j+1} with even j) and new edges that are added (odd j).
A closed walk ends with x_0 again and describes a complete exchange.
"""

from typing import Iterator, Tuple


class AlternatingWalk(list):
    """Sequence of vertices describing a candidate multi-edge exchange."""

    def close(self) -> 'AlternatingWalk':
        """Return a copy with x_0 appended: (x_0, ..., x_k, x_0)."""
        result = AlternatingWalk(self)
        result.append(self[0])
        return result

    def append_and_close(self, vertex: int) -> 'AlternatingWalk':
        """Return a copy extended by ``vertex`` and closed with x_0."""
        result = AlternatingWalk(self)
        result.append(vertex)
        result.append(self[0])
        return result

    def contains_edge(self, vertex1: int, vertex2: int) -> bool:
        """Check whether {vertex1, vertex2} joins two consecutive walk vertices."""
        for i in range(len(self) - 1):
            if ((self[i] == vertex1 and self[i + 1] == vertex2) or
                    (self[i] == vertex2 and self[i + 1] == vertex1)):
                return True
        return False

    def edges(self) -> Iterator[Tuple[int, int]]:
        """Iterate over consecutive vertex pairs (x_j, x_j+1)."""
        for i in range(len(self) - 1):
            yield self[i], self[i + 1]

    def removed_edges(self):
        """Edges at even positions, i.e. the tour edges this walk breaks."""
        return [edge for j, edge in enumerate(self.edges()) if j % 2 == 0]

    def added_edges(self):
        """Edges at odd positions, i.e. the edges this walk introduces."""
        return [edge for j, edge in enumerate(self.edges()) if j % 2 == 1]

    def __str__(self):
        return ", ".join(str(vertex) for vertex in self)

    def __repr__(self):
        return f"AlternatingWalk([{self}])"
