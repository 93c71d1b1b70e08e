"""Unit tests for the run orchestrator."""

import asyncio
import json

import httpx
import pytest

from src.rpc_benchmark.latency_benchmark import LatencyBenchmark
from src.rpc_benchmark.models import BenchmarkConfig
from tests.conftest import MockSessionManager
from tests.test_const import (
    CALL_QUOTER, ENDPOINT_A, ENDPOINT_A_HOST, ENDPOINT_A_URL, ENDPOINT_B, ENDPOINT_B_HOST, ENDPOINT_B_URL,
    QUOTER_DATA, RPC_ERROR, RPC_RESULT, TEST_ITERATIONS, TEST_MAX_SOCKETS, TEST_TIMEOUT_MS,
)


class TestLatencyBenchmark:
    """Test iteration and endpoint sequencing."""

    @pytest.mark.asyncio
    async def test_totals_per_endpoint(self, benchmark_config, mock_session_manager):
        """Every endpoint sees iterations x calls outcomes."""
        benchmark = LatencyBenchmark(benchmark_config, request_session_manager=mock_session_manager)

        aggregates = await benchmark.run()

        assert list(aggregates) == [ENDPOINT_A, ENDPOINT_B]
        expected = TEST_ITERATIONS * len(benchmark_config.sample_calls)
        for aggregate in aggregates.values():
            assert aggregate.total_calls == expected
            assert aggregate.successful_calls + aggregate.failed_calls == expected
            assert aggregate.success_rate == 100.0

    @pytest.mark.asyncio
    async def test_one_client_per_endpoint(self, benchmark_config, mock_session_manager):
        """Each endpoint gets its own pooled client sized from the configuration."""
        await LatencyBenchmark(benchmark_config, request_session_manager=mock_session_manager).run()

        assert mock_session_manager.created == [(TEST_MAX_SOCKETS, TEST_TIMEOUT_MS)] * 2

    @pytest.mark.asyncio
    async def test_endpoints_and_iterations_are_sequential(self, benchmark_config):
        """No request to B starts before A is done, and iterations never overlap."""
        hosts = []
        in_flight = 0
        peak = 0

        async def handler(request):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            hosts.append(request.url.host)
            payload = json.loads(request.content)
            await asyncio.sleep(0.001)
            in_flight -= 1
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": RPC_RESULT})

        benchmark = LatencyBenchmark(benchmark_config, request_session_manager=MockSessionManager(handler))
        await benchmark.run()

        calls = TEST_ITERATIONS * len(benchmark_config.sample_calls)
        assert hosts == [ENDPOINT_A_HOST] * calls + [ENDPOINT_B_HOST] * calls
        assert peak <= len(benchmark_config.sample_calls)

    @pytest.mark.asyncio
    async def test_failures_do_not_abort_run(self, benchmark_config):
        """Remote errors on one call are counted while the run continues."""
        def handler(request):
            payload = json.loads(request.content)
            if request.url.host == ENDPOINT_B_HOST and payload["params"][0]["data"] == QUOTER_DATA:
                return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "error": RPC_ERROR})
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": RPC_RESULT})

        benchmark = LatencyBenchmark(benchmark_config, request_session_manager=MockSessionManager(handler))
        aggregates = await benchmark.run()

        healthy = aggregates[ENDPOINT_A]
        degraded = aggregates[ENDPOINT_B]
        assert healthy.failed_calls == 0
        assert degraded.failed_calls == TEST_ITERATIONS
        assert degraded.failure_by_call == {CALL_QUOTER: TEST_ITERATIONS}
        assert degraded.total_calls == healthy.total_calls
        assert degraded.success_rate == pytest.approx(200 / 3)
        assert degraded.sample_errors[0]["error"].startswith("RPC Error:")

    @pytest.mark.asyncio
    async def test_run_endpoint(self, sample_calls, mock_session_manager):
        """A single endpoint can be run on its own."""
        config = BenchmarkConfig(endpoints={ENDPOINT_A: ENDPOINT_A_URL}, sample_calls=sample_calls, iterations=2)
        benchmark = LatencyBenchmark(config, request_session_manager=mock_session_manager)

        aggregate = await benchmark.run_endpoint(ENDPOINT_B, ENDPOINT_B_URL)

        assert aggregate.name == ENDPOINT_B
        assert aggregate.total_calls == 2 * len(sample_calls)
        assert aggregate.stats.count == aggregate.successful_calls
        assert len(aggregate.slowest_calls) <= 10
