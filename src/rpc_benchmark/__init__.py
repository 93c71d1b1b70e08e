"""RPC latency benchmark package initialization."""
from .models import (
    BenchmarkConfig, CallFailure, CallOutcome, CallSuccess, ComparisonResult, EndpointAggregate,
    ErrorKind, MetricComparison, PhaseTimings, SampleCall, SlowCall, Statistics,
)
from .constants import BenchmarkConstants
from .exceptions import BenchmarkExecutionError, ConfigurationError, ResultsNotFoundError
from .phase_timing import PhaseTimingRecorder
from .transport import PooledTransport, ResolvingNetworkBackend
from .request_session_manager import RequestSessionManager
from .dataset_manager import DatasetManager, DEFAULT_SAMPLE_CALLS
from .request_executor import RequestExecutor
from .latency_analyzer import LatencyAnalyzer
from .endpoint_aggregator import EndpointAggregator
from .concurrency_manager import ConcurrencyManager
from .comparator import EndpointComparator
from .result_exporter import ResultExporter
from .visualization_generator import VisualizationGenerator
from .latency_benchmark import LatencyBenchmark
from .runner import BenchmarkRunner

__all__ = [
    'BenchmarkConfig',
    'CallFailure',
    'CallOutcome',
    'CallSuccess',
    'ComparisonResult',
    'EndpointAggregate',
    'ErrorKind',
    'MetricComparison',
    'PhaseTimings',
    'SampleCall',
    'SlowCall',
    'Statistics',
    'BenchmarkConstants',
    'BenchmarkExecutionError',
    'ConfigurationError',
    'ResultsNotFoundError',
    'PhaseTimingRecorder',
    'PooledTransport',
    'ResolvingNetworkBackend',
    'RequestSessionManager',
    'DatasetManager',
    'DEFAULT_SAMPLE_CALLS',
    'RequestExecutor',
    'LatencyAnalyzer',
    'EndpointAggregator',
    'ConcurrencyManager',
    'EndpointComparator',
    'ResultExporter',
    'VisualizationGenerator',
    'LatencyBenchmark',
    'BenchmarkRunner'
]
