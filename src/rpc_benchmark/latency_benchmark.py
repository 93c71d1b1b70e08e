"""Main class for running endpoint latency benchmarks."""
import logging
from typing import Dict, Optional

from .concurrency_manager import ConcurrencyManager
from .endpoint_aggregator import EndpointAggregator
from .latency_analyzer import LatencyAnalyzer
from .models import BenchmarkConfig, EndpointAggregate
from .request_executor import RequestExecutor
from .request_session_manager import RequestSessionManager


# Configure logging
logger = logging.getLogger(__name__)


class LatencyBenchmark:
    """Replays the sample call batch against each endpoint and aggregates the outcomes."""

    def __init__(self, config: BenchmarkConfig,
                 request_session_manager: Optional[RequestSessionManager] = None,
                 request_executor: Optional[RequestExecutor] = None):
        self.config = config
        self.request_session_manager = request_session_manager or RequestSessionManager()
        self.request_executor = request_executor or RequestExecutor()
        self.latency_analyzer = LatencyAnalyzer()
        self.concurrency_manager = ConcurrencyManager(self.request_executor)

    async def run(self) -> Dict[str, EndpointAggregate]:
        """
        Run the benchmark against every endpoint, one endpoint at a time.

        Returns:
            Dictionary of aggregates keyed by endpoint name, in configuration order.
        """
        logger.info(f"Testing {len(self.config.endpoints)} endpoints with {self.config.calls_per_iteration} calls, "
                    f"{self.config.iterations} iterations each")
        results = {}
        for name, url in self.config.endpoints.items():
            results[name] = await self.run_endpoint(name, url)
        return results

    async def run_endpoint(self, name: str, url: str) -> EndpointAggregate:
        """Run all iterations against one endpoint over a single pooled client."""
        config = self.config
        logger.info(f"Testing endpoint: {name}")
        aggregator = EndpointAggregator(name, self.latency_analyzer)

        async with self.request_session_manager.create_client(config.max_sockets, config.timeout_ms) as client:
            for i in range(config.iterations):
                logger.info(f"  Iteration {i + 1}/{config.iterations}")
                outcomes = await self.concurrency_manager.run_iteration(
                    client, url, config.sample_calls, config.timeout_ms
                )
                aggregator.record_all(outcomes)

        aggregate = aggregator.finalize()
        logger.info(f"{name} results: {aggregate.stats.to_dict()}")
        if aggregate.failed_calls:
            logger.warning(f"{name} failureByCall: {aggregate.failure_by_call}")
            logger.warning(f"{name} sampleErrors: {aggregate.sample_errors}")
        return aggregate
