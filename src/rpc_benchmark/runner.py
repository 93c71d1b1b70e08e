"""Benchmark runner to orchestrate the execution of benchmarks."""
import asyncio
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .comparator import EndpointComparator
from .constants import BenchmarkConstants
from .exceptions import ConfigurationError
from .latency_benchmark import LatencyBenchmark
from .models import BenchmarkConfig
from .result_exporter import ResultExporter
from .visualization_generator import VisualizationGenerator


# Configure logging
logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BenchmarkRunner:
    """Orchestrates the execution of benchmarks and manages output."""

    def __init__(self, config: BenchmarkConfig,
                 results_dir: Union[Path, str] = BenchmarkConstants.DEFAULT_RESULTS_DIR,
                 save: bool = True, plot: bool = True,
                 benchmark: Optional[LatencyBenchmark] = None):
        self.config = config
        self.results_dir = Path(results_dir)
        self.save = save
        self.plot = plot
        self.benchmark = benchmark or LatencyBenchmark(config)
        self.comparator = EndpointComparator()
        self.result_exporter = ResultExporter()
        self.visualization_generator = VisualizationGenerator()
        self.results_path: Optional[Path] = None

    def validate_config(self) -> None:
        """Raise ConfigurationError if the run cannot start."""
        config = self.config
        if not config.endpoints:
            raise ConfigurationError("No endpoints configured", config_key="endpoints")
        for name, url in config.endpoints.items():
            if not url:
                raise ConfigurationError(f"Endpoint '{name}' has no URL configured", config_key="endpoints")
        if not config.sample_calls:
            raise ConfigurationError("No sample calls configured", config_key="sample_calls")
        for key in ("iterations", "timeout_ms", "max_sockets"):
            if getattr(config, key) <= 0:
                raise ConfigurationError(f"{key} must be a positive integer", config_key=key)

    async def execute(self) -> Dict[str, Any]:
        """
        Run the comparison and build the result envelope.

        Returns:
            The run result on success, or the failure envelope if the run could not produce results.
        """
        try:
            self.validate_config()
            logger.info("Starting RPC comparison test...")
            aggregates = await self.benchmark.run()
            comparison = self.comparator.compare(aggregates)
            return {
                "success": True,
                "testConfig": self.config.as_test_config(),
                "results": {name: aggregate.to_dict() for name, aggregate in aggregates.items()},
                "comparison": comparison.to_dict(),
                "timestamp": utc_timestamp(),
            }
        except Exception as e:
            logger.error(f"Benchmark failed: {e}", stack_info=True)
            return {
                "success": False,
                "error": str(e),
                "details": {
                    "type": type(e).__name__,
                    "configKey": getattr(e, "config_key", None),
                    "stack": traceback.format_exc(),
                },
            }

    def run(self) -> Dict[str, Any]:
        """Run the complete benchmarking process and write its outputs."""
        body = asyncio.run(self.execute())
        if not body["success"]:
            return body

        if self.save:
            self.results_path = self.result_exporter.save_results(body, self.results_dir)
            self.result_exporter.save_summary_csv(body, self.results_path.with_suffix(".csv"))
            if self.plot:
                self.visualization_generator.plot_results(body, self.results_path.with_suffix(".png"))

        logger.info("Benchmark completed successfully!")
        return body
