"""Data models for the benchmarking system."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .constants import BenchmarkConstants


@dataclass(frozen=True)
class SampleCall:
    """A named eth_call template replayed against every endpoint."""
    name: str
    to: str
    data: str
    gas: Optional[str] = None

    def to_params(self) -> List[Any]:
        """Positional JSON-RPC params: the call object and the block tag."""
        call: Dict[str, str] = {"to": self.to, "data": self.data}
        if self.gas:
            call["gas"] = self.gas
        return [call, BenchmarkConstants.BLOCK_TAG]


@dataclass(frozen=True)
class PhaseTimings:
    """Per-phase durations in milliseconds; None means the phase did not happen."""
    dns: Optional[float] = None
    tcp: Optional[float] = None
    tls: Optional[float] = None
    ttfb: Optional[float] = None
    total: Optional[float] = None

    def get(self, phase: str) -> Optional[float]:
        return getattr(self, phase)

    def is_consistent(self, tolerance: float = 0.01) -> bool:
        """Check that connection setup fits inside ttfb and ttfb inside total."""
        setup = sum(value for value in (self.dns, self.tcp, self.tls) if value is not None)
        if self.ttfb is not None and setup > self.ttfb + tolerance:
            return False
        if self.ttfb is not None and self.total is not None and self.ttfb > self.total + tolerance:
            return False
        return True

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {phase: self.get(phase) for phase in BenchmarkConstants.PHASES}


class ErrorKind(Enum):
    """Classification of a failed call."""
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    REMOTE_ERROR = "remote_error"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class CallSuccess:
    """A sample call that returned a JSON-RPC result."""
    call_name: str
    timings: PhaseTimings
    connection_reused: bool = False
    connection_id: Optional[str] = None
    result: Any = None
    success: bool = field(default=True, init=False)

    @property
    def response_time(self) -> float:
        return self.timings.total if self.timings.total is not None else 0.0


@dataclass(frozen=True)
class CallFailure:
    """A sample call that failed; never raised, only recorded."""
    call_name: str
    error_kind: ErrorKind
    message: str
    success: bool = field(default=False, init=False)


CallOutcome = Union[CallSuccess, CallFailure]


@dataclass(frozen=True)
class Statistics:
    """Summary statistics of a latency sample, rounded for presentation."""
    count: int = 0
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    p50: float = 0.0
    p95: float = 0.0
    p99: float = 0.0

    def to_dict(self) -> Dict[str, Union[int, float]]:
        return {
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "median": self.median,
            "p50": self.p50,
            "p95": self.p95,
            "p99": self.p99,
        }


@dataclass(frozen=True)
class SlowCall:
    """One of the slowest successful calls of an endpoint."""
    call_name: str
    response_time: float
    reused_socket: bool
    connection_id: Optional[str]
    phase_timings: PhaseTimings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "callName": self.call_name,
            "responseTime": self.response_time,
            "reusedSocket": self.reused_socket,
            "connectionId": self.connection_id,
            "phaseTimings": self.phase_timings.to_dict(),
        }


@dataclass
class EndpointAggregate:
    """Accumulated outcome of the whole sample-call batch against one endpoint."""
    name: str
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    success_rate: float = 0.0
    failure_by_call: Dict[str, int] = field(default_factory=dict)
    sample_errors: List[Dict[str, str]] = field(default_factory=list)
    stats: Statistics = field(default_factory=Statistics)
    phase_stats: Dict[str, Statistics] = field(default_factory=dict)
    raw_times: List[float] = field(default_factory=list)
    slowest_calls: List[SlowCall] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalCalls": self.total_calls,
            "successfulCalls": self.successful_calls,
            "failedCalls": self.failed_calls,
            "successRate": self.success_rate,
            "failureByCall": dict(self.failure_by_call),
            "sampleErrors": list(self.sample_errors),
            "stats": self.stats.to_dict(),
            "phaseStats": {phase: stats.to_dict() for phase, stats in self.phase_stats.items()},
            "rawTimes": list(self.raw_times),
            "slowestCalls": [call.to_dict() for call in self.slowest_calls],
        }


@dataclass(frozen=True)
class MetricComparison:
    """Fastest and slowest endpoint for one metric."""
    fastest_endpoint: str
    fastest_value: float
    slowest_endpoint: str
    slowest_value: float
    absolute_delta: float
    percent_improvement: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fastestEndpoint": self.fastest_endpoint,
            "fastestValue": self.fastest_value,
            "slowestEndpoint": self.slowest_endpoint,
            "slowestValue": self.slowest_value,
            "absoluteDelta": self.absolute_delta,
            "percentImprovement": self.percent_improvement,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Verdict across endpoints; empty comparisons when there is too little data."""
    metric_comparisons: Dict[str, MetricComparison] = field(default_factory=dict)
    overall_winner: Optional[str] = None
    votes: Dict[str, int] = field(default_factory=dict)
    summary: str = ""
    message: Optional[str] = None

    @property
    def is_conclusive(self) -> bool:
        return self.overall_winner is not None

    def to_dict(self) -> Dict[str, Any]:
        if not self.is_conclusive:
            return {
                "message": self.message,
                "overallWinner": None,
                "metricComparisons": {},
            }
        return {
            "metricComparisons": {metric: comp.to_dict() for metric, comp in self.metric_comparisons.items()},
            "overallWinner": self.overall_winner,
            "votes": dict(self.votes),
            "summary": self.summary,
        }


@dataclass
class BenchmarkConfig:
    """Configuration for one comparison run."""
    endpoints: Dict[str, str] = field(default_factory=dict)
    sample_calls: List[SampleCall] = field(default_factory=list)
    iterations: int = BenchmarkConstants.DEFAULT_ITERATIONS
    timeout_ms: int = BenchmarkConstants.DEFAULT_TIMEOUT_MS
    max_sockets: int = BenchmarkConstants.DEFAULT_MAX_SOCKETS

    @property
    def calls_per_iteration(self) -> int:
        return len(self.sample_calls)

    @property
    def total_calls_per_endpoint(self) -> int:
        return self.iterations * self.calls_per_iteration

    @classmethod
    def from_settings(cls, settings: Any, sample_calls: List[SampleCall]) -> "BenchmarkConfig":
        """Build the run configuration from the application settings object."""
        return cls(
            endpoints=dict(settings.endpoints),
            sample_calls=list(sample_calls),
            iterations=settings.iterations,
            timeout_ms=settings.timeout_ms,
            max_sockets=settings.max_sockets,
        )

    def as_test_config(self) -> Dict[str, int]:
        return {
            "iterations": self.iterations,
            "callsPerIteration": self.calls_per_iteration,
            "totalCallsPerProvider": self.total_calls_per_endpoint,
        }
