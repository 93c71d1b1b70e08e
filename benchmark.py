"""Run an eth_call latency comparison across the configured RPC endpoints."""
import argparse
import sys

from pydantic import ValidationError

from src.const import EXIT_FAILURE, EXIT_SUCCESS
from src.shared.config import Config
from src.shared.logging import LoggingManager
from src.rpc_benchmark import (
    BenchmarkConfig, BenchmarkRunner, ConfigurationError, DatasetManager, VisualizationGenerator,
)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compare eth_call latency across RPC endpoints.")
    parser.add_argument("--iterations", type=int, help="iterations per endpoint")
    parser.add_argument("--timeout-ms", type=int, help="per-request deadline in milliseconds")
    parser.add_argument("--max-sockets", type=int, help="connection pool size per endpoint")
    parser.add_argument("--results-dir", help="directory for result files")
    parser.add_argument("--no-save", action="store_true", help="do not write result files")
    parser.add_argument("--no-plot", action="store_true", help="do not write the PNG chart")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    overrides = {
        key: value for key, value in (
            ("iterations", args.iterations),
            ("timeout_ms", args.timeout_ms),
            ("max_sockets", args.max_sockets),
            ("results_dir", args.results_dir),
        ) if value is not None
    }
    try:
        config = Config(**overrides)
        LoggingManager.setup_logging(config.log_level, config.library_log_levels)
        sample_calls = DatasetManager.prepare_sample_calls(config.sample_calls_file)
    except (ValidationError, ConfigurationError) as e:
        print(f"Test failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    runner = BenchmarkRunner(
        BenchmarkConfig.from_settings(config, sample_calls),
        results_dir=config.results_dir,
        save=not args.no_save,
        plot=not args.no_plot,
    )
    body = runner.run()
    if not body["success"]:
        print(f"Test failed: {body['error']}", file=sys.stderr)
        return EXIT_FAILURE

    if runner.results_path is not None:
        print(f"\nResults saved to: {runner.results_path}")
    print(VisualizationGenerator().render_text(body))
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
