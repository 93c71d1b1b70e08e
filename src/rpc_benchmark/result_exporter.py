"""Handles exporting benchmark results to various formats."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from .constants import BenchmarkConstants
from .exceptions import BenchmarkExecutionError, ResultsNotFoundError


# Configure logging
logger = logging.getLogger(__name__)


class ResultExporter:
    """Handles exporting benchmark results to various formats."""

    @staticmethod
    def results_filename(timestamp: str) -> str:
        return f"test-{timestamp.replace(':', '-').replace('.', '-')}.json"

    @staticmethod
    def save_results(body: Dict[str, Any], results_dir: Union[Path, str] = BenchmarkConstants.DEFAULT_RESULTS_DIR) -> Path:
        """
        Save a run result to a timestamped JSON file.

        Args:
            body: Run result envelope.
            results_dir: Directory to write into; created if missing.

        Returns:
            Path of the written file.
        """
        results_dir = Path(results_dir)
        results_dir.mkdir(parents=True, exist_ok=True)
        output_path = results_dir / ResultExporter.results_filename(body["timestamp"])
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(body, f, indent=2)
        logger.info(f"Results saved to: {output_path}")
        return output_path

    @staticmethod
    def load_results(input_path: Union[Path, str]) -> Dict[str, Any]:
        """
        Load a run result saved by this tool or wrapped as a {statusCode, body} response.

        Args:
            input_path: Path of the JSON file.

        Returns:
            The run result envelope.

        Raises:
            BenchmarkExecutionError: If the file records a failed run.
        """
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if "statusCode" in data:
            if data["statusCode"] != 200:
                raise BenchmarkExecutionError(f"Test failed: {data}")
            body = data["body"]
            data = json.loads(body) if isinstance(body, str) else body

        if data.get("success") is False:
            raise BenchmarkExecutionError(f"Test failed: {data.get('error')}")

        logger.info(f"Results loaded from: {input_path}")
        return data

    @staticmethod
    def find_recent_results(results_dir: Union[Path, str] = BenchmarkConstants.DEFAULT_RESULTS_DIR,
                            limit: int = 5) -> List[Path]:
        """Most recent result files first; file names sort chronologically."""
        results_dir = Path(results_dir)
        if not results_dir.is_dir():
            return []
        return sorted(results_dir.glob("*.json"), reverse=True)[:limit]

    @staticmethod
    def latest_results(results_dir: Union[Path, str] = BenchmarkConstants.DEFAULT_RESULTS_DIR) -> Path:
        recent = ResultExporter.find_recent_results(results_dir, limit=1)
        if not recent:
            raise ResultsNotFoundError(f"No results files found in {results_dir}")
        return recent[0]

    @staticmethod
    def summary_frame(body: Dict[str, Any]) -> pd.DataFrame:
        """One row per endpoint with its overall statistics and success rate."""
        rows = []
        for endpoint, result in body["results"].items():
            row = {
                'endpoint': endpoint,
                'total_calls': result['totalCalls'],
                'successful_calls': result['successfulCalls'],
                'failed_calls': result['failedCalls'],
                'success_rate': result['successRate'],
            }
            row.update({f"{key}_ms" if key != 'count' else key: value for key, value in result['stats'].items()})
            row['winner'] = body.get('comparison', {}).get('overallWinner') == endpoint
            rows.append(row)
        return pd.DataFrame(rows)

    @staticmethod
    def save_summary_csv(body: Dict[str, Any], output_path: Union[Path, str]) -> None:
        """Save the per-endpoint summary to CSV for spreadsheet use."""
        df = ResultExporter.summary_frame(body)
        if df.empty:
            logger.warning("No endpoint results available for the CSV summary")
            return
        df.to_csv(output_path, index=False)
        logger.info(f"Summary CSV saved: {output_path}")
