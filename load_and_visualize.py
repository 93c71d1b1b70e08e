#!/usr/bin/env python3
"""
Utility to render a saved comparison result without running any requests.
Usage: python load_and_visualize.py [results/test-<timestamp>.json]
"""
import sys

from src.const import EXIT_FAILURE, EXIT_SUCCESS
from src.shared.config import Config
from src.shared.logging import LoggingManager
from src.rpc_benchmark import BenchmarkExecutionError, ResultExporter, ResultsNotFoundError, VisualizationGenerator


def load_and_visualize_results(filename=None, results_dir="results") -> str:
    """
    Load a result file and render it as a text report.

    Args:
        filename: Result file to render; the most recent one in ``results_dir`` when omitted.
        results_dir: Directory searched for recent result files.

    Returns:
        The rendered report.
    """
    if filename is None:
        recent = ResultExporter.find_recent_results(results_dir)
        if not recent:
            raise ResultsNotFoundError(f'No results files found in {results_dir}. Run "python benchmark.py" first.')
        print("Recent results files found:")
        for path in recent:
            print(f"  - {path}")
        filename = recent[0]
        print(f"\nUsing most recent: {filename}")

    body = ResultExporter.load_results(filename)
    return VisualizationGenerator().render_text(body)


def main():
    """Main entry point for rendering saved results."""
    config = Config()
    LoggingManager.setup_logging(config.log_level, config.library_log_levels)
    filename = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        print(load_and_visualize_results(filename, config.results_dir))
    except (ResultsNotFoundError, BenchmarkExecutionError, FileNotFoundError) as e:
        print(f"\n{e}")
        return EXIT_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
