"""
Unit tests for the LK-TSP command line interface.
Runs the CLI on small TSPLIB files written to a temporary directory.
"""

import unittest
import io
import tempfile
import os
from contextlib import redirect_stderr, redirect_stdout

import matplotlib
matplotlib.use('Agg')

# Add project root to path
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lk_tsp.main import main


SQUARE_PROBLEM = """NAME : square4
TYPE : TSP
DIMENSION : 4
EDGE_WEIGHT_TYPE : EUC_2D
NODE_COORD_SECTION
1 0 0
2 3 0
3 3 4
4 0 4
EOF
"""

SQUARE_TOUR = """NAME : square4.opt.tour
TYPE : TOUR
DIMENSION : 4
TOUR_SECTION
1 2 3 4 -1
EOF
"""


class TestMain(unittest.TestCase):
    """Test CLI exit codes and output."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.problem_file = self._write("square4.tsp", SQUARE_PROBLEM)
        self.tour_file = self._write("square4.opt.tour", SQUARE_TOUR)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write(self, filename, content):
        path = os.path.join(self.temp_dir.name, filename)
        with open(path, 'w') as f:
            f.write(content)
        return path

    def _run(self, *args):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            exit_code = main(list(args) + ['--no-log-file', '--log-level', 'WARNING'])
        return exit_code, stdout.getvalue(), stderr.getvalue()

    def test_solve_with_optimal_tour(self):
        exit_code, output, _ = self._run(self.problem_file, self.tour_file)
        self.assertEqual(exit_code, 0)
        self.assertIn("Opened the square4 TSPLIB file", output)
        self.assertIn("This is the shortest tour found:", output)
        self.assertIn("It is 14 units long.", output)
        self.assertIn("This is the optimal tour:", output)
        self.assertIn("is 0.0000% above the optimum", output)

    def test_solve_without_optimal_tour(self):
        exit_code, output, _ = self._run(self.problem_file, '--candidates', 'all')
        self.assertEqual(exit_code, 0)
        self.assertNotIn("optimal tour", output)

    def test_no_improve(self):
        exit_code, output, _ = self._run(self.problem_file, '--no-improve')
        self.assertEqual(exit_code, 0)
        self.assertIn("It is 14 units long.", output)

    def test_missing_problem_file(self):
        exit_code, _, error = self._run(os.path.join(self.temp_dir.name, "missing.tsp"))
        self.assertEqual(exit_code, 1)
        self.assertIn("Could not open the TSPLIB file", error)

    def test_invalid_problem_file(self):
        broken = self._write("broken.tsp", SQUARE_PROBLEM.replace("TYPE : TSP", "TYPE : HCP"))
        exit_code, _, error = self._run(broken)
        self.assertEqual(exit_code, 1)
        self.assertIn("invalid format", error)

    def test_tour_of_another_problem(self):
        other = self._write("other.opt.tour", SQUARE_TOUR.replace("square4", "other"))
        exit_code, _, error = self._run(self.problem_file, other)
        self.assertEqual(exit_code, 1)
        self.assertIn("does not belong", error)

    def test_start_vertex_out_of_range(self):
        exit_code, output, error = self._run(self.problem_file, '--start-vertex', '99')
        self.assertEqual(exit_code, 1)
        self.assertIn("Start vertex 99 outside [0, 4)", error)
        self.assertNotIn("This is the shortest tour found:", output)

    def test_invalid_configuration(self):
        exit_code, _, _ = self._run(self.problem_file, '-k', '0')
        self.assertEqual(exit_code, 1)

    def test_export_and_plot(self):
        export_dir = os.path.join(self.temp_dir.name, "results")
        plot_path = os.path.join(self.temp_dir.name, "plots", "square4.png")
        exit_code, _, _ = self._run(self.problem_file, '--export', export_dir, '--plot', plot_path)
        self.assertEqual(exit_code, 0)
        exported = os.listdir(export_dir)
        self.assertTrue(any(name.endswith(".tour") for name in exported))
        self.assertTrue(any(name.endswith("_exchanges.csv") for name in exported))
        self.assertTrue(any(name.endswith("_summary.json") for name in exported))
        self.assertTrue(os.path.exists(plot_path))


if __name__ == '__main__':
    unittest.main()
