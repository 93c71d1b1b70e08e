"""Shared test configuration and fixtures for all tests."""

import json
from unittest.mock import patch

import httpx
import pytest

from src.rpc_benchmark.comparator import EndpointComparator
from src.rpc_benchmark.models import (
    BenchmarkConfig, CallFailure, CallSuccess, EndpointAggregate, ErrorKind, PhaseTimings, SampleCall, Statistics,
)
from .test_const import (
    CALL_QUOTER, CALL_RESERVES, CALL_SLOT0, ENDPOINT_A, ENDPOINT_A_URL, ENDPOINT_B, ENDPOINT_B_URL,
    QUOTER_DATA, QUOTER_GAS, QUOTER_TO, RESERVES_DATA, RESERVES_TO, RPC_RESULT, SLOT0_DATA, SLOT0_TO,
    TEST_ITERATIONS, TEST_MAX_SOCKETS, TEST_TIMEOUT_MS,
)


@pytest.fixture
def sample_calls():
    """Three sample calls, one of them with a gas limit."""
    return [
        SampleCall(name=CALL_RESERVES, to=RESERVES_TO, data=RESERVES_DATA),
        SampleCall(name=CALL_QUOTER, to=QUOTER_TO, data=QUOTER_DATA, gas=QUOTER_GAS),
        SampleCall(name=CALL_SLOT0, to=SLOT0_TO, data=SLOT0_DATA),
    ]


@pytest.fixture
def benchmark_config(sample_calls):
    """Two-endpoint run configuration."""
    return BenchmarkConfig(
        endpoints={ENDPOINT_A: ENDPOINT_A_URL, ENDPOINT_B: ENDPOINT_B_URL},
        sample_calls=sample_calls,
        iterations=TEST_ITERATIONS,
        timeout_ms=TEST_TIMEOUT_MS,
        max_sockets=TEST_MAX_SOCKETS,
    )


@pytest.fixture
def mock_logging():
    """Mock logging module fixture."""
    with patch('src.shared.logging.logging') as mock_logging:
        yield mock_logging


def rpc_result_handler(result=RPC_RESULT):
    """httpx.MockTransport handler that answers every JSON-RPC request with ``result``."""
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})
    return handler


@pytest.fixture
def mock_client_factory():
    """Build AsyncClients backed by httpx.MockTransport."""
    def factory(handler=None):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler or rpc_result_handler()))
    return factory


class MockSessionManager:
    """Stands in for RequestSessionManager, serving every client from one handler."""

    def __init__(self, handler=None):
        self.handler = handler or rpc_result_handler()
        self.created = []

    def create_client(self, max_sockets, timeout_ms):
        self.created.append((max_sockets, timeout_ms))
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def mock_session_manager():
    """Session manager fixture answering every call successfully."""
    return MockSessionManager()


class OutcomeBuilder:
    """Builder for call outcomes with specific timings."""

    @staticmethod
    def success(call_name=CALL_RESERVES, total=10.0, dns=None, tcp=None, tls=None, ttfb=None,
                reused=False, connection_id=None):
        timings = PhaseTimings(dns=dns, tcp=tcp, tls=tls, ttfb=ttfb if ttfb is not None else total, total=total)
        return CallSuccess(call_name=call_name, timings=timings, connection_reused=reused,
                           connection_id=connection_id, result=RPC_RESULT)

    @staticmethod
    def failure(call_name=CALL_RESERVES, kind=ErrorKind.NETWORK_ERROR, message="Request failed: refused"):
        return CallFailure(call_name=call_name, error_kind=kind, message=message)


@pytest.fixture
def outcome_builder():
    """Outcome builder fixture."""
    return OutcomeBuilder()


class AggregateBuilder:
    """Builder for endpoint aggregates with chosen headline statistics."""

    @staticmethod
    def build(name, p50, p95, p99, mean=None, count=10):
        mean = p50 if mean is None else mean
        stats = Statistics(count=count, min=p50 / 2, max=p99, mean=mean, median=p50, p50=p50, p95=p95, p99=p99)
        return EndpointAggregate(
            name=name,
            total_calls=count,
            successful_calls=count,
            failed_calls=0,
            success_rate=100.0,
            stats=stats,
            phase_stats={"total": stats},
            raw_times=[p50] * count,
        )


@pytest.fixture
def aggregate_builder():
    """Aggregate builder fixture."""
    return AggregateBuilder()


@pytest.fixture
def result_body(aggregate_builder):
    """Successful two-endpoint run envelope where ENDPOINT_B wins."""
    aggregates = {
        ENDPOINT_A: aggregate_builder.build(ENDPOINT_A, p50=100.0, p95=150.0, p99=200.0, mean=110.0),
        ENDPOINT_B: aggregate_builder.build(ENDPOINT_B, p50=80.0, p95=140.0, p99=250.0, mean=100.0),
    }
    return {
        "success": True,
        "testConfig": {"iterations": 10, "callsPerIteration": 1, "totalCallsPerProvider": 10},
        "results": {name: aggregate.to_dict() for name, aggregate in aggregates.items()},
        "comparison": EndpointComparator.compare(aggregates).to_dict(),
        "timestamp": "2026-10-18T09:30:00.123Z",
    }
