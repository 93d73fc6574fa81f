"""
Plotting utilities for LK-TSP.
Draws tours on their node coordinates and the tour length per exchange.
"""

from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from lk_tsp.config import VIZ_CONFIG
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem


class Plotter:
    """Creates plots for LK-TSP runs."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize plotter.

        Args:
            config: Visualization configuration
        """
        self.config = config or VIZ_CONFIG.copy()

        plt.style.use('default')
        sns.set_palette("husl")

        self.fig_size = self.config['figure_size']
        self.dpi = self.config['dpi']
        self.font_size = self.config['font_size']

    def plot_tour(self, problem: TsplibProblem, tour: Tour,
                  start_tour: Optional[Tour] = None,
                  title: Optional[str] = None,
                  save_path: Optional[str] = None) -> plt.Figure:
        """
        Plot a tour over the problem's node coordinates.

        Args:
            problem: Problem with coordinates
            tour: Tour to draw
            start_tour: Optional start tour drawn underneath for comparison
            title: Plot title (default: problem name and length)
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure

        Raises:
            ValueError: If the problem has no coordinates (EXPLICIT instances)
        """
        if not problem.has_coordinates():
            raise ValueError(f"Problem {problem.name} has no node coordinates to plot")

        coordinates = problem.coordinates
        fig, ax = plt.subplots(figsize=self.fig_size)

        if start_tour is not None:
            closed = np.array(list(start_tour) + [start_tour[0]])
            ax.plot(coordinates[closed, 0], coordinates[closed, 1], '--',
                    color=self.config['start_tour_color'],
                    linewidth=self.config['line_width'] * 0.7,
                    label=f"Start tour ({problem.length(start_tour)})")

        closed = np.array(list(tour) + [tour[0]])
        ax.plot(coordinates[closed, 0], coordinates[closed, 1], '-',
                color=self.config['tour_color'], linewidth=self.config['line_width'],
                label=f"Tour ({problem.length(tour)})")
        ax.scatter(coordinates[:, 0], coordinates[:, 1], s=self.config['marker_size'],
                   color='black', zorder=3)

        ax.set_title(title or f"{problem.name}: length {problem.length(tour)}", fontsize=self.font_size)
        ax.set_aspect('equal', adjustable='datalim')
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig

    def plot_convergence(self, length_history: List[int],
                         optimal_length: Optional[int] = None,
                         title: str = "Lin-Kernighan Convergence",
                         save_path: Optional[str] = None) -> plt.Figure:
        """
        Plot tour length after each committed exchange.

        Args:
            length_history: Start length followed by the length after each exchange
            optimal_length: Optional known optimum drawn as a reference line
            title: Plot title
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.fig_size)
        ax.plot(range(len(length_history)), length_history, 'b-', linewidth=2, label='Tour length')
        if optimal_length is not None:
            ax.axhline(optimal_length, color='r', linestyle='--', label=f'Optimum ({optimal_length})')

        ax.set_xlabel('Exchange', fontsize=self.font_size)
        ax.set_ylabel('Tour length', fontsize=self.font_size)
        ax.set_title(title, fontsize=self.font_size)
        ax.grid(True, alpha=0.3)
        ax.legend()
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig
