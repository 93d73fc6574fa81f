"""
Result export module for LK-TSP.
Exports tours, exchange histories and run summaries for analysis.
"""

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from lk_tsp.algorithms.search_observer import ExchangeRecord
from lk_tsp.models.tour import Tour
from lk_tsp.models.tsp_problem import TsplibProblem

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports LK-TSP results in various formats."""

    def __init__(self, output_dir: str = "results"):
        """
        Initialize result exporter.

        Args:
            output_dir: Output directory for results
        """
        self.output_dir = output_dir
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(self.output_dir, exist_ok=True)

    def _default_name(self, problem: TsplibProblem, suffix: str) -> str:
        base = problem.name or "problem"
        return f"{base}_{self.timestamp}{suffix}"

    def export_exchange_history(self, exchanges: List[ExchangeRecord], problem: TsplibProblem,
                                filename: Optional[str] = None) -> str:
        """
        Export committed exchanges to CSV.

        Args:
            exchanges: Records collected by a RecordingSearchObserver
            problem: Problem the run was made on
            filename: Output filename (auto-generated if None)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = self._default_name(problem, "_exchanges.csv")
        filepath = os.path.join(self.output_dir, filename)

        columns = ['exchange', 'walk', 'walk_length', 'gain', 'previous_length', 'new_length']
        df = pd.DataFrame([record.to_dict() for record in exchanges], columns=columns)
        df.to_csv(filepath, index=False)

        logger.info(f"Exchange history exported to: {filepath}")
        return filepath

    def export_tour(self, tour: Tour, problem: TsplibProblem,
                    filename: Optional[str] = None) -> str:
        """
        Export a tour in TSPLIB tour format (1-based node ids).

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = self._default_name(problem, ".tour")
        filepath = os.path.join(self.output_dir, filename)

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(f"NAME : {problem.name}.tour\n")
            f.write(f"COMMENT : Length {problem.length(tour)}, found by LK-TSP\n")
            f.write("TYPE : TOUR\n")
            f.write(f"DIMENSION : {len(tour)}\n")
            f.write("TOUR_SECTION\n")
            for vertex in tour:
                f.write(f"{vertex + 1}\n")
            f.write("-1\n")
            f.write("EOF\n")

        logger.info(f"Tour exported to: {filepath}")
        return filepath

    def export_summary(self, summary: Dict[str, Any], problem: TsplibProblem,
                       filename: Optional[str] = None) -> str:
        """
        Export a run summary (metrics and optimizer statistics) to JSON.

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = self._default_name(problem, "_summary.json")
        filepath = os.path.join(self.output_dir, filename)

        payload = {'timestamp': self.timestamp}
        payload.update(summary)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, default=str)

        logger.info(f"Run summary exported to: {filepath}")
        return filepath
