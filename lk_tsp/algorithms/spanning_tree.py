"""
Minimum spanning tree construction (Prim's algorithm) for complete graphs.
"""

from typing import List, Tuple

import numpy as np

from lk_tsp.models.tsp_problem import TsplibProblem


def prims_algorithm(dimension: int, problem: TsplibProblem,
                    start_vertex: int = 0) -> Tuple[List[List[int]], List[int]]:
    """
    Compute a minimum spanning tree of the complete graph on ``dimension`` vertices.

    Args:
        dimension: Number of vertices
        problem: Distance oracle
        start_vertex: Root of the tree

    Returns:
        (adjacent_vertices, topological_order) where adjacent_vertices[v] lists the
        tree neighbours of v and topological_order lists the vertices in the order
        they joined the tree, so every parent precedes its children.
    """
    if not 0 <= start_vertex < dimension:
        raise ValueError(f"Start vertex {start_vertex} outside [0, {dimension})")

    distances = problem.distance_matrix[:dimension, :dimension]

    in_tree = np.zeros(dimension, dtype=bool)
    min_edge = np.full(dimension, np.inf)
    parent = np.full(dimension, -1, dtype=np.int64)
    min_edge[start_vertex] = 0

    adjacent_vertices: List[List[int]] = [[] for _ in range(dimension)]
    topological_order: List[int] = []

    for _ in range(dimension):
        # Cheapest vertex not yet in the tree; ties go to the smallest index
        candidates = np.where(in_tree, np.inf, min_edge)
        u = int(np.argmin(candidates))

        in_tree[u] = True
        topological_order.append(u)
        if parent[u] >= 0:
            adjacent_vertices[u].append(int(parent[u]))
            adjacent_vertices[int(parent[u])].append(u)

        improved = ~in_tree & (distances[u] < min_edge)
        min_edge[improved] = distances[u][improved]
        parent[improved] = u

    return adjacent_vertices, topological_order


def spanning_tree_weight(adjacent_vertices: List[List[int]], problem: TsplibProblem) -> int:
    """Total weight of a tree given as adjacency lists."""
    total = 0
    for v, neighbors in enumerate(adjacent_vertices):
        for w in neighbors:
            if v < w:
                total += problem.dist(v, w)
    return total
