"""
Main application entry point for LK-TSP.
Solves a TSPLIB instance with the Lin-Kernighan heuristic and compares the
result with a known optimal tour when one is supplied.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from lk_tsp.algorithms.lin_kernighan import LinKernighanOptimizer
from lk_tsp.algorithms.nearest_neighbor import NearestNeighborHeuristic
from lk_tsp.config import CANDIDATE_CONFIG, LK_CONFIG, LOGGING_CONFIG, PATHS, START_TOUR_CONFIG
from lk_tsp.core.exceptions import (
    InvalidConfigurationError, TourFileMismatchError, TsplibFormatError
)
from lk_tsp.core.logger import setup_logger
from lk_tsp.data_processing.tsplib_loader import TsplibLoader, TsplibTour
from lk_tsp.evaluation.metrics import TourMetrics
from lk_tsp.models.tsp_problem import TsplibProblem


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='lk-tsp',
        description="LK-TSP: symmetric TSP solver using the Lin-Kernighan heuristic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a TSPLIB instance
  lk-tsp berlin52.tsp

  # Compare with the optimal tour
  lk-tsp berlin52.tsp berlin52.opt.tour

  # Unrestricted candidate edges, deeper backtracking
  lk-tsp berlin52.tsp --candidates all --backtracking-depth 8

  # Export tour, exchange history and summary, plot the result
  lk-tsp berlin52.tsp --export results --plot results/berlin52.png
        """
    )

    parser.add_argument('problem_file', help='TSPLIB problem file (.tsp)')
    parser.add_argument('optimal_tour_file', nargs='?',
                        help='TSPLIB tour file with the optimal tour (.opt.tour)')

    # Search parameters
    parser.add_argument('--candidates', choices=CANDIDATE_CONFIG['strategies'],
                        default=LK_CONFIG['candidate_strategy'],
                        help=f"Candidate edge strategy (default: {LK_CONFIG['candidate_strategy']})")
    parser.add_argument('-k', type=int, default=LK_CONFIG['candidate_k'],
                        help=f"Candidates per vertex (default: {LK_CONFIG['candidate_k']})")
    parser.add_argument('--backtracking-depth', type=int, default=LK_CONFIG['backtracking_depth'],
                        help=f"Backtracking depth p_1 (default: {LK_CONFIG['backtracking_depth']})")
    parser.add_argument('--infeasibility-depth', type=int, default=LK_CONFIG['infeasibility_depth'],
                        help=f"Infeasibility depth p_2 (default: {LK_CONFIG['infeasibility_depth']})")
    parser.add_argument('--time-limit', type=float, default=LK_CONFIG['time_limit'],
                        help='Stop the search after this many seconds')
    parser.add_argument('--max-exchanges', type=int, default=LK_CONFIG['max_exchanges'],
                        help='Stop the search after this many exchanges')
    parser.add_argument('--start-vertex', type=int, default=START_TOUR_CONFIG['start_vertex'],
                        help='First vertex of the nearest neighbor start tour (default: 0)')
    parser.add_argument('--no-improve', action='store_true',
                        help='Only build the start tour, skip the Lin-Kernighan search')

    # Output options
    parser.add_argument('--export', metavar='DIR', nargs='?', const=PATHS['results'],
                        help=f"Export tour, exchange history and summary (default dir: {PATHS['results']})")
    parser.add_argument('--plot', metavar='PATH',
                        help='Save a plot of the tour (coordinate problems only)')
    parser.add_argument('--log-level', default=LOGGING_CONFIG['level'],
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help=f"Logging level (default: {LOGGING_CONFIG['level']})")
    parser.add_argument('--log-dir', default=LOGGING_CONFIG['log_dir'],
                        help=f"Directory for log files (default: {LOGGING_CONFIG['log_dir']})")
    parser.add_argument('--no-log-file', action='store_true',
                        help='Log to the console only')

    return parser


def load_optimal_tour(loader: TsplibLoader, file_path: str, problem: TsplibProblem) -> TsplibTour:
    """Load the optimal tour and check that it belongs to ``problem``."""
    optimal_tour = loader.load_tour(file_path)
    if optimal_tour.name != problem.name + ".opt.tour" or len(optimal_tour.tour) != problem.dimension:
        raise TourFileMismatchError(optimal_tour.name, problem.name)
    return optimal_tour


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point; returns the process exit code."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logger = setup_logger(LOGGING_CONFIG['logger_name'],
                          level=getattr(logging, args.log_level),
                          log_dir=args.log_dir,
                          file_logging=LOGGING_CONFIG['file_logging'] and not args.no_log_file)

    loader = TsplibLoader()

    # Interpret the problem file and report any syntax errors, logical errors or unsupported keywords
    try:
        problem = loader.load_problem(args.problem_file)
    except FileNotFoundError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except TsplibFormatError as e:
        logger.error(f"The TSPLIB file has an invalid format: {e}")
        print(f"The TSPLIB file has an invalid format: {e}", file=sys.stderr)
        return 1

    print(f"Opened the {problem.name} TSPLIB file")

    # Read the optimal tour before the search so that a broken file fails fast
    optimal_tour = None
    if args.optimal_tour_file:
        try:
            optimal_tour = load_optimal_tour(loader, args.optimal_tour_file, problem)
        except FileNotFoundError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except TsplibFormatError as e:
            logger.error(f"The TSPLIB tour file has an invalid format: {e}")
            print(f"The TSPLIB tour file has an invalid format: {e}", file=sys.stderr)
            return 1
        except TourFileMismatchError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        start_tour = NearestNeighborHeuristic(problem).solve(args.start_vertex)
    except ValueError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not start_tour.is_hamiltonian_tour():
        raise RuntimeError("The tour generated by the start heuristic is not a hamiltonian tour")

    tour = start_tour
    optimizer = None
    if not args.no_improve:
        config = {
            'candidate_strategy': args.candidates,
            'candidate_k': args.k,
            'backtracking_depth': args.backtracking_depth,
            'infeasibility_depth': args.infeasibility_depth,
            'time_limit': args.time_limit,
            'max_exchanges': args.max_exchanges,
        }
        try:
            optimizer = LinKernighanOptimizer(problem, config)
        except InvalidConfigurationError as e:
            logger.error(str(e))
            print(f"Error: {e}", file=sys.stderr)
            return 1
        tour = optimizer.optimize(start_tour)

    if not tour.is_hamiltonian_tour():
        raise RuntimeError("The tour returned by the heuristic is not a hamiltonian tour")

    # Output the best tour found and compare it to the optimal tour if given
    length = problem.length(tour)
    print("This is the shortest tour found:")
    print(tour)
    print(f"It is {length} units long.")
    print()

    metrics = TourMetrics(problem).calculate(
        tour, start_tour=start_tour, optimal_tour=optimal_tour.tour if optimal_tour else None
    )

    if optimal_tour is not None:
        print("This is the optimal tour:")
        print(optimal_tour.tour)
        print(f"It is {metrics['optimal_length']} units long.")
        print()
        print(f"The best tour found by the heuristic is {metrics['gap_pct']:.4f}% above the optimum.")

    if args.export:
        export_results(args.export, problem, tour, metrics, optimizer)

    if args.plot:
        plot_results(args.plot, problem, tour, start_tour, logger)

    return 0


def export_results(output_dir: str, problem: TsplibProblem, tour, metrics, optimizer):
    """Write tour, exchange history and summary to ``output_dir``."""
    from lk_tsp.evaluation.result_exporter import ResultExporter

    exporter = ResultExporter(output_dir)
    exporter.export_tour(tour, problem)
    summary = {'metrics': metrics}
    if optimizer is not None:
        exporter.export_exchange_history(optimizer.recorder.exchanges, problem)
        summary['statistics'] = optimizer.get_statistics()
    exporter.export_summary(summary, problem)


def plot_results(save_path: str, problem: TsplibProblem, tour, start_tour, logger):
    """Save a tour plot; EXPLICIT problems are skipped with a warning."""
    if not problem.has_coordinates():
        logger.warning(f"Problem {problem.name} has no coordinates, skipping plot")
        return

    from lk_tsp.visualization.plotter import Plotter

    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    Plotter().plot_tour(problem, tour, start_tour=start_tour, save_path=save_path)
    logger.info(f"Tour plot saved to: {save_path}")


if __name__ == '__main__':
    sys.exit(main())
