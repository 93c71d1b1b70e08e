"""Constants for the benchmarking system."""
from src import const


class BenchmarkConstants:
    """Centralized constants for benchmark configuration."""
    DEFAULT_ITERATIONS = const.DEFAULT_ITERATIONS
    DEFAULT_TIMEOUT_MS = const.DEFAULT_TIMEOUT_MS
    DEFAULT_MAX_SOCKETS = const.DEFAULT_MAX_SOCKETS
    DEFAULT_RESULTS_DIR = const.DEFAULT_RESULTS_DIR

    RPC_METHOD = "eth_call"
    RPC_VERSION = "2.0"
    BLOCK_TAG = "latest"

    PHASES = ("dns", "tcp", "tls", "ttfb", "total")
    COMPARISON_METRICS = ("p50", "p95", "p99", "mean")
    VOTING_METRICS = ("p50", "p95", "p99")

    MAX_SAMPLE_ERRORS = 10
    MAX_SLOWEST_CALLS = 10
    MAX_RAW_TIMES = 20
    MIN_ENDPOINTS_TO_COMPARE = 2

    # Rounding applied to phase durations and to presented statistics
    PHASE_PRECISION = 3
    STATS_PRECISION = 2
