"""
Unit tests for the Lin-Kernighan search.
Tests the search engine, its observers, stop conditions and the optimizer wrapper.
"""

import unittest
import numpy as np

# Add project root to path
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lk_tsp.algorithms.candidate_edges import CandidateEdges
from lk_tsp.algorithms.lin_kernighan import (
    LinKernighanOptimizer, backtrack_level, lin_kernighan_heuristic, run
)
from lk_tsp.algorithms.nearest_neighbor import NearestNeighborHeuristic
from lk_tsp.algorithms.search_observer import (
    CompositeSearchObserver, LoggingSearchObserver, RecordingSearchObserver
)
from lk_tsp.config import LK_CONFIG
from lk_tsp.core.exceptions import InvalidConfigurationError, SearchInvariantError
from lk_tsp.core.validators import ConfigValidator
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem


PENTAGON = [(0, 0), (1000, 0), (1300, 900), (500, 1500), (-300, 900)]


def random_problem(n, seed):
    rng = np.random.RandomState(seed)
    return TsplibProblem.from_coordinates(rng.uniform(0, 1000, size=(n, 2)), name=f"random{n}")


def improving_two_opt_exists(problem, tour):
    order = tour.to_list()
    n = len(order)
    for i in range(n):
        for j in range(i + 2, n):
            a, b = order[i], order[i + 1]
            c, d = order[j], order[(j + 1) % n]
            if problem.dist(a, b) + problem.dist(c, d) > problem.dist(a, c) + problem.dist(b, d):
                return True
    return False


class TestLinKernighanHeuristic(unittest.TestCase):
    """Test the search engine."""

    def setUp(self):
        """Set up a convex pentagon and its pentagram tour."""
        self.problem = TsplibProblem.from_coordinates(PENTAGON, name="pentagon")
        self.pentagram = Tour([0, 2, 4, 1, 3])
        self.optimal_length = self.problem.length([0, 1, 2, 3, 4])

    def test_pentagram_becomes_pentagon(self):
        """Points in convex position: the only tour without crossings is optimal."""
        recorder = RecordingSearchObserver()
        tour = lin_kernighan_heuristic(self.problem, self.pentagram,
                                       CandidateEdges.all_neighbors(self.problem),
                                       observer=recorder)

        self.assertTrue(tour.is_hamiltonian_tour())
        self.assertEqual(self.problem.length(tour), self.optimal_length)
        self.assertTrue(recorder.reached_local_optimum)
        self.assertFalse(recorder.stopped)
        self.assertGreaterEqual(recorder.exchange_count, 1)
        self.assertEqual(recorder.final_length, self.optimal_length)
        # at least one full sweep over the anchors after the last exchange
        self.assertGreater(recorder.inner_iterations, len(PENTAGON))

    def test_start_tour_is_not_modified(self):
        lin_kernighan_heuristic(self.problem, self.pentagram, observer=RecordingSearchObserver())
        self.assertEqual(self.pentagram.to_list(), [0, 2, 4, 1, 3])

    def test_every_exchange_shortens_the_tour_by_its_gain(self):
        problem = random_problem(30, seed=3)
        start_tour = NearestNeighborHeuristic(problem).solve()
        recorder = RecordingSearchObserver()
        tour = lin_kernighan_heuristic(problem, start_tour, observer=recorder)

        self.assertEqual(recorder.start_length, problem.length(start_tour))
        for record in recorder.exchanges:
            self.assertGreater(record.gain, 0)
            self.assertEqual(record.new_length, record.previous_length - record.gain)
            self.assertLess(record.new_length, record.previous_length)
            # closed walks: odd number of vertices, starting and ending at x_0
            self.assertEqual(record.walk[0], record.walk[-1])
            self.assertEqual(len(record.walk) % 2, 1)

        history = recorder.length_history()
        self.assertEqual(history, sorted(history, reverse=True))
        self.assertEqual(history[-1], problem.length(tour))
        self.assertEqual(recorder.total_gain, problem.length(start_tour) - problem.length(tour))

    def test_best_walk_updates_increase(self):
        recorder = RecordingSearchObserver()
        lin_kernighan_heuristic(self.problem, self.pentagram, observer=recorder)
        self.assertTrue(recorder.best_walk_updates)
        for update in recorder.best_walk_updates:
            self.assertGreater(update['gain'], update['previous_gain'])

    def test_result_has_no_improving_two_opt_move(self):
        """With unrestricted candidates every improving 2-exchange is found."""
        for seed in [1, 2]:
            problem = random_problem(25, seed)
            start_tour = NearestNeighborHeuristic(problem).solve()
            with self.subTest(seed=seed):
                tour = lin_kernighan_heuristic(problem, start_tour, CandidateEdges.all_neighbors(problem),
                                               observer=RecordingSearchObserver())
                self.assertTrue(tour.is_hamiltonian_tour())
                self.assertEqual(len(tour), 25)
                self.assertLessEqual(problem.length(tour), problem.length(start_tour))
                self.assertFalse(improving_two_opt_exists(problem, tour))

    def test_local_optimum_is_kept(self):
        optimum = Tour([0, 1, 2, 3, 4])
        recorder = RecordingSearchObserver()
        tour = lin_kernighan_heuristic(self.problem, optimum, observer=recorder)
        self.assertEqual(recorder.exchange_count, 0)
        self.assertTrue(recorder.reached_local_optimum)
        self.assertEqual(self.problem.length(tour), self.optimal_length)

    def test_tiny_instances(self):
        for coordinates in [[(0, 0)], [(0, 0), (5, 0)], [(0, 0), (5, 0), (0, 5)]]:
            problem = TsplibProblem.from_coordinates(coordinates)
            start_tour = Tour(range(len(coordinates)))
            with self.subTest(dimension=len(coordinates)):
                tour = lin_kernighan_heuristic(problem, start_tour, observer=RecordingSearchObserver())
                self.assertEqual(sorted(tour.to_list()), list(range(len(coordinates))))
                self.assertEqual(problem.length(tour), problem.length(start_tour))

    def test_should_stop(self):
        recorder = RecordingSearchObserver()
        tour = lin_kernighan_heuristic(self.problem, self.pentagram, observer=recorder,
                                       should_stop=lambda: True)
        self.assertEqual(tour, self.pentagram)
        self.assertTrue(recorder.stopped)
        self.assertFalse(recorder.reached_local_optimum)
        self.assertEqual(recorder.exchange_count, 0)
        self.assertEqual(recorder.inner_iterations, 1)

    def test_zero_depths(self):
        tour = lin_kernighan_heuristic(self.problem, self.pentagram, backtracking_depth=0,
                                       infeasibility_depth=0, observer=RecordingSearchObserver())
        self.assertTrue(tour.is_hamiltonian_tour())
        self.assertLessEqual(self.problem.length(tour), self.problem.length(self.pentagram))

    def test_backtrack_level(self):
        self.assertEqual(backtrack_level(1, 5), 0)
        self.assertEqual(backtrack_level(3, 5), 2)
        self.assertEqual(backtrack_level(6, 5), 5)
        self.assertEqual(backtrack_level(9, 5), 5)
        self.assertEqual(backtrack_level(4, 0), 0)


class TestSearchObservers(unittest.TestCase):
    """Test observer plumbing."""

    def test_composite_forwards_events(self):
        first, second = RecordingSearchObserver(), RecordingSearchObserver()
        problem = TsplibProblem.from_coordinates(PENTAGON)
        lin_kernighan_heuristic(problem, Tour([0, 2, 4, 1, 3]),
                                observer=CompositeSearchObserver([first, second]))
        self.assertEqual(first.length_history(), second.length_history())
        self.assertEqual(first.exchange_count, second.exchange_count)

    def test_logging_observer(self):
        problem = TsplibProblem.from_coordinates(PENTAGON)
        with self.assertLogs('lk_tsp.algorithms.search_observer', level='INFO') as logs:
            lin_kernighan_heuristic(problem, Tour([0, 2, 4, 1, 3]), observer=LoggingSearchObserver())
        self.assertTrue(any("Exchange done" in message for message in logs.output))
        self.assertTrue(any("local optimum" in message for message in logs.output))

    def test_logging_observer_debug_details(self):
        problem = TsplibProblem.from_coordinates(PENTAGON)
        with self.assertLogs('lk_tsp.algorithms.search_observer', level='DEBUG') as logs:
            lin_kernighan_heuristic(problem, Tour([0, 2, 4, 1, 3]), observer=LoggingSearchObserver())
        self.assertTrue(any("removed edges: [(" in message for message in logs.output))
        self.assertTrue(any("Search finished after" in message for message in logs.output))

    def test_exchange_record_to_dict(self):
        recorder = RecordingSearchObserver()
        problem = TsplibProblem.from_coordinates(PENTAGON)
        lin_kernighan_heuristic(problem, Tour([0, 2, 4, 1, 3]), observer=recorder)
        row = recorder.exchanges[0].to_dict()
        self.assertEqual(row['exchange'], 1)
        self.assertEqual(row['walk_length'], len(recorder.exchanges[0].walk))
        self.assertEqual(set(row), {'exchange', 'walk', 'walk_length', 'gain',
                                    'previous_length', 'new_length'})

    def test_empty_history(self):
        self.assertEqual(RecordingSearchObserver().length_history(), [])


class TestLinKernighanOptimizer(unittest.TestCase):
    """Test the configurable optimizer."""

    def setUp(self):
        self.problem = TsplibProblem.from_coordinates(PENTAGON, name="pentagon")
        self.pentagram = Tour([0, 2, 4, 1, 3])

    def test_optimize_and_statistics(self):
        optimizer = LinKernighanOptimizer(self.problem, {'candidate_strategy': 'all'})
        tour = optimizer.optimize(self.pentagram)
        stats = optimizer.get_statistics()

        self.assertEqual(stats['final_length'], self.problem.length(tour))
        self.assertEqual(stats['start_length'], self.problem.length(self.pentagram))
        self.assertEqual(stats['total_gain'], stats['start_length'] - stats['final_length'])
        self.assertTrue(stats['reached_local_optimum'])
        self.assertFalse(stats['stopped_early'])
        self.assertGreater(stats['inner_iterations'], 0)
        self.assertEqual(stats['candidate_strategy'], 'all')
        self.assertEqual(stats['backtracking_depth'], LK_CONFIG['backtracking_depth'])
        self.assertGreaterEqual(stats['runtime_seconds'], 0.0)

    def test_max_exchanges(self):
        optimizer = LinKernighanOptimizer(self.problem, {'max_exchanges': 1})
        optimizer.optimize(self.pentagram)
        stats = optimizer.get_statistics()
        self.assertEqual(stats['exchanges'], 1)
        self.assertTrue(stats['stopped_early'])

    def test_zero_exchanges_returns_start_tour(self):
        optimizer = LinKernighanOptimizer(self.problem, {'max_exchanges': 0})
        self.assertEqual(optimizer.optimize(self.pentagram), self.pentagram)

    def test_extra_observer(self):
        extra = RecordingSearchObserver()
        optimizer = LinKernighanOptimizer(self.problem, observer=extra)
        optimizer.optimize(self.pentagram)
        self.assertEqual(extra.exchange_count, optimizer.get_statistics()['exchanges'])

    def test_precomputed_candidates(self):
        candidates = CandidateEdges.all_neighbors(self.problem)
        optimizer = LinKernighanOptimizer(self.problem, candidate_edges=candidates)
        optimizer.optimize(self.pentagram)
        self.assertIs(optimizer.candidate_edges, candidates)

    def test_run(self):
        tour = run(self.problem, self.pentagram)
        self.assertTrue(tour.is_hamiltonian_tour())
        self.assertLess(self.problem.length(tour), self.problem.length(self.pentagram))

    def test_invalid_configuration(self):
        invalid_configs = [
            {'backtracking_depth': -1},
            {'infeasibility_depth': 1.5},
            {'candidate_strategy': 'quadrant'},
            {'candidate_k': 0},
            {'time_limit': 0},
            {'max_exchanges': -2},
        ]
        for config in invalid_configs:
            with self.subTest(config=config):
                with self.assertRaises(InvalidConfigurationError):
                    LinKernighanOptimizer(self.problem, config)

    def test_validator_requires_keys(self):
        config = LK_CONFIG.copy()
        del config['candidate_k']
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate_lk_config(config)
        self.assertTrue(ConfigValidator.validate_lk_config(LK_CONFIG))


class TestSearchInvariantError(unittest.TestCase):

    def test_message(self):
        error = SearchInvariantError('current_walk', 4, 3)
        self.assertIn("current_walk size (=4) is not i+1 (=3)", str(error))
        self.assertEqual(error.details['expected'], 3)


if __name__ == '__main__':
    unittest.main()
