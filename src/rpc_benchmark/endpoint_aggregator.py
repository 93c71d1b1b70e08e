"""Folds call outcomes into a per-endpoint aggregate."""
import logging
from typing import Dict, Iterable, List

from .constants import BenchmarkConstants
from .latency_analyzer import LatencyAnalyzer
from .models import CallFailure, CallOutcome, CallSuccess, EndpointAggregate, SlowCall


# Configure logging
logger = logging.getLogger(__name__)


class EndpointAggregator:
    """Accumulates outcomes for one endpoint and finalizes them into an EndpointAggregate."""

    def __init__(self, name: str, analyzer: LatencyAnalyzer = None):
        self.name = name
        self.analyzer = analyzer or LatencyAnalyzer()
        self.successes: List[CallSuccess] = []
        self.failed_calls = 0
        self.failure_by_call: Dict[str, int] = {}
        self.sample_errors: List[Dict[str, str]] = []

    @property
    def total_calls(self) -> int:
        return len(self.successes) + self.failed_calls

    def record(self, outcome: CallOutcome) -> None:
        if outcome.success:
            self.successes.append(outcome)
            return
        self._record_failure(outcome)

    def record_all(self, outcomes: Iterable[CallOutcome]) -> None:
        for outcome in outcomes:
            self.record(outcome)

    def _record_failure(self, failure: CallFailure) -> None:
        self.failed_calls += 1
        self.failure_by_call[failure.call_name] = self.failure_by_call.get(failure.call_name, 0) + 1
        if len(self.sample_errors) < BenchmarkConstants.MAX_SAMPLE_ERRORS:
            self.sample_errors.append({"callName": failure.call_name, "error": failure.message})

    def slowest_calls(self, limit: int = BenchmarkConstants.MAX_SLOWEST_CALLS) -> List[SlowCall]:
        """Slowest successes, response time descending; equal times keep encounter order."""
        ranked = sorted(self.successes, key=lambda s: s.response_time, reverse=True)
        return [
            SlowCall(
                call_name=s.call_name,
                response_time=s.response_time,
                reused_socket=s.connection_reused,
                connection_id=s.connection_id,
                phase_timings=s.timings,
            )
            for s in ranked[:limit]
        ]

    def finalize(self) -> EndpointAggregate:
        response_times = [s.response_time for s in self.successes]
        total = self.total_calls
        return EndpointAggregate(
            name=self.name,
            total_calls=total,
            successful_calls=len(self.successes),
            failed_calls=self.failed_calls,
            success_rate=(len(self.successes) / total * 100) if total else 0.0,
            failure_by_call=dict(self.failure_by_call),
            sample_errors=list(self.sample_errors),
            stats=self.analyzer.compute_statistics(response_times),
            phase_stats=self.analyzer.compute_phase_statistics(self.successes),
            raw_times=response_times[:BenchmarkConstants.MAX_RAW_TIMES],
            slowest_calls=self.slowest_calls(),
        )
