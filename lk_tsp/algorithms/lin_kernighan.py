"""
Lin-Kernighan heuristic for the symmetric TSP.

Implemented as described in Korte & Vygen, "Combinatorial Optimization",
with backtracking depth p_1 = 5, infeasibility depth p_2 = 2 and the
candidate edges restricting which edges may be added.

The inner search is an iterative depth-first search over alternating walks
x_0, x_1, ..., x_i. Level i keeps the set X_i of vertices still to try as
x_i in ``vertex_choices[i]``:
- odd i: x_i was reached by removing tour edge {x_i-1, x_i}; X_i+1 holds the
  candidates for the next added edge, pruned by the positive gain criterion.
- even i: x_i was reached by adding edge {x_i-1, x_i}; X_i+1 holds the tour
  neighbours of x_i, i.e. the next edge to remove.
Whenever the walk can be closed (odd i >= 3) the closed walk is scored and
kept if it is the best exchange into a Hamiltonian tour seen this round.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from lk_tsp.algorithms.base import BaseOptimizer
from lk_tsp.algorithms.candidate_edges import CandidateEdges, build_candidate_edges
from lk_tsp.algorithms.search_observer import (
    CompositeSearchObserver, LoggingSearchObserver, RecordingSearchObserver, SearchObserver
)
from lk_tsp.config import LK_CONFIG
from lk_tsp.core.exceptions import SearchInvariantError
from lk_tsp.core.validators import ConfigValidator
from lk_tsp.models.alternating_walk import AlternatingWalk
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)


def lin_kernighan_heuristic(problem: TsplibProblem,
                            start_tour: Tour,
                            candidate_edges: Optional[CandidateEdges] = None,
                            backtracking_depth: int = LK_CONFIG['backtracking_depth'],
                            infeasibility_depth: int = LK_CONFIG['infeasibility_depth'],
                            observer: Optional[SearchObserver] = None,
                            should_stop: Optional[Callable[[], bool]] = None) -> Tour:
    """
    Improve a tour by sequential edge exchanges until no improving exchange exists.

    Args:
        problem: Distance and gain oracle
        start_tour: Hamiltonian tour to start from (not modified)
        candidate_edges: Allowed partners for added edges (default: nearest neighbours)
        backtracking_depth: Deepest level whose remaining alternatives survive a backtrack
        infeasibility_depth: Up to this level, removed edges need not lead to a tour when closed
        observer: Receives search events (default: logging)
        should_stop: Polled before every search step; returning True ends the search
            early with the current tour

    Returns:
        The improved tour

    Raises:
        SearchInvariantError: If the search stacks get out of sync (a defect)
    """
    dimension = problem.dimension
    if candidate_edges is None:
        candidate_edges = CandidateEdges.nearest_neighbors(problem)
    if observer is None:
        observer = LoggingSearchObserver()

    current_tour = start_tour.copy()
    observer.on_search_start(current_tour, problem.length(current_tour))
    inner_iterations = 0

    while True:
        # X_0 contains all vertices
        vertex_choices = [list(range(dimension))]
        current_walk = AlternatingWalk()
        best_alternating_walk = AlternatingWalk()
        highest_gain = 0
        i = 0

        while True:
            inner_iterations += 1
            if should_stop is not None and should_stop():
                observer.on_stopped(current_tour, problem.length(current_tour))
                observer.on_search_finished(inner_iterations)
                return current_tour

            if not vertex_choices[i]:
                if highest_gain > 0:
                    previous_length = problem.length(current_tour)
                    current_tour.exchange(best_alternating_walk)
                    observer.on_exchange(best_alternating_walk, highest_gain, previous_length,
                                         problem.length(current_tour), current_tour)
                    break
                if i == 0:
                    observer.on_local_optimum(current_tour, problem.length(current_tour))
                    observer.on_search_finished(inner_iterations)
                    return current_tour
                i = backtrack_level(i, backtracking_depth)
                del vertex_choices[i + 1:]
                del current_walk[i:]
                continue

            current_walk.append(vertex_choices[i].pop())

            if len(vertex_choices) != i + 1:
                raise SearchInvariantError('vertex_choices', len(vertex_choices), i + 1)
            if len(current_walk) != i + 1:
                raise SearchInvariantError('current_walk', len(current_walk), i + 1)

            if i % 2 == 1 and i >= 3:
                closed_walk = current_walk.close()
                gain = problem.exchange_gain(closed_walk)
                if gain > highest_gain and current_tour.is_tour_after_exchange(closed_walk):
                    observer.on_new_best_walk(closed_walk, gain, highest_gain)
                    best_alternating_walk = closed_walk
                    highest_gain = gain

            xi = current_walk[i]
            if i % 2 == 1:
                next_choices = _edges_to_add(problem, current_tour, current_walk, candidate_edges[xi],
                                             highest_gain)
            else:
                next_choices = _edges_to_remove(current_tour, current_walk, check_feasibility=i > infeasibility_depth)
            vertex_choices.append(next_choices)

            i += 1


def backtrack_level(i: int, backtracking_depth: int) -> int:
    """
    Level to resume from after X_i ran empty.

    This is a single step back while i - 1 < backtracking_depth; from deeper
    levels the search jumps straight to backtracking_depth, dropping the
    alternatives of every level in between.
    """
    return min(i - 1, backtracking_depth)


def _edges_to_add(problem: TsplibProblem, tour: Tour, walk: AlternatingWalk,
                  candidates, highest_gain: int):
    """Endpoints x of new edges {x_i, x} that keep the walk's gain above the best gain."""
    xi = walk[-1]
    current_gain = problem.exchange_gain(walk)
    xi_predecessor = tour.predecessor(xi)
    xi_successor = tour.successor(xi)
    choices = []
    for x in candidates:
        if (x != walk[0]
                and x != xi_predecessor and x != xi_successor
                and not walk.contains_edge(xi, x)
                and current_gain - problem.dist(xi, x) > highest_gain):
            choices.append(x)
    return choices


def _edges_to_remove(tour: Tour, walk: AlternatingWalk, check_feasibility: bool):
    """Tour neighbours x of x_i whose edge {x_i, x} may be removed next."""
    xi = walk[-1]
    choices = []
    for neighbor in tour.neighbors(xi):
        # Connecting back to x_0 would leave a walk that can never be closed
        if neighbor == walk[0] or walk.contains_edge(xi, neighbor):
            continue
        if check_feasibility:
            # Closing via x_1 would re-add the first removed edge {x_0, x_1}
            if neighbor == walk[1] or not tour.is_tour_after_exchange(walk.append_and_close(neighbor)):
                continue
        choices.append(neighbor)
    return choices


class LinKernighanOptimizer(BaseOptimizer):
    """Configurable wrapper around ``lin_kernighan_heuristic`` that keeps run statistics."""

    def __init__(self, problem: TsplibProblem, config: Optional[Dict[str, Any]] = None,
                 candidate_edges: Optional[CandidateEdges] = None,
                 observer: Optional[SearchObserver] = None):
        """
        Initialize optimizer.

        Args:
            problem: TSP problem instance
            config: Overrides for LK_CONFIG
            candidate_edges: Precomputed candidate edges; built from the config if None
            observer: Extra observer notified in addition to logging and recording
        """
        super().__init__(problem)
        self.config = LK_CONFIG.copy()
        if config:
            self.config.update(config)
        ConfigValidator.validate_lk_config(self.config)

        self.candidate_edges = candidate_edges
        self.observer = observer
        self.recorder = RecordingSearchObserver()
        self.runtime_seconds = 0.0

    def optimize(self, tour: Tour) -> Tour:
        """
        Run the Lin-Kernighan search from ``tour``.

        Args:
            tour: Hamiltonian start tour (not modified)

        Returns:
            Locally optimal tour, or the best tour so far if a limit was hit
        """
        if self.candidate_edges is None:
            self.candidate_edges = build_candidate_edges(
                self.problem, self.config['candidate_strategy'], self.config['candidate_k']
            )

        self.recorder = RecordingSearchObserver()
        observers = [LoggingSearchObserver(), self.recorder]
        if self.observer is not None:
            observers.append(self.observer)

        start_time = time.perf_counter()
        result = lin_kernighan_heuristic(
            self.problem,
            tour,
            candidate_edges=self.candidate_edges,
            backtracking_depth=self.config['backtracking_depth'],
            infeasibility_depth=self.config['infeasibility_depth'],
            observer=CompositeSearchObserver(observers),
            should_stop=self._make_stop_condition(start_time),
        )
        self.runtime_seconds = time.perf_counter() - start_time

        logger.info(f"Lin-Kernighan finished: {self.recorder.exchange_count} exchanges, "
                    f"length {self.recorder.start_length} -> {self.recorder.final_length} "
                    f"in {self.runtime_seconds:.2f}s ({self.recorder.inner_iterations} inner iterations)")
        return result

    def _make_stop_condition(self, start_time: float) -> Optional[Callable[[], bool]]:
        time_limit = self.config.get('time_limit')
        max_exchanges = self.config.get('max_exchanges')
        if time_limit is None and max_exchanges is None:
            return None

        def should_stop() -> bool:
            if max_exchanges is not None and self.recorder.exchange_count >= max_exchanges:
                return True
            return time_limit is not None and time.perf_counter() - start_time > time_limit

        return should_stop

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'exchanges': self.recorder.exchange_count,
            'total_gain': self.recorder.total_gain,
            'start_length': self.recorder.start_length,
            'final_length': self.recorder.final_length,
            'reached_local_optimum': self.recorder.reached_local_optimum,
            'stopped_early': self.recorder.stopped,
            'inner_iterations': self.recorder.inner_iterations,
            'runtime_seconds': self.runtime_seconds,
            'candidate_strategy': self.config['candidate_strategy'],
            'backtracking_depth': self.config['backtracking_depth'],
            'infeasibility_depth': self.config['infeasibility_depth'],
        }


def run(problem: TsplibProblem, start_tour: Tour) -> Tour:
    """Improve ``start_tour`` with the default configuration."""
    return LinKernighanOptimizer(problem).optimize(start_tour)
