"""Constants for the RPC latency comparator."""

# Default configuration values
DEFAULT_ITERATIONS = 10
DEFAULT_TIMEOUT_MS = 10000
DEFAULT_MAX_SOCKETS = 16
DEFAULT_RESULTS_DIR = "results"

# Settings sources
ENV_PREFIX = "RPC_COMPARE_"
ENV_FILE_NAME = ".env"
CONFIG_FILE_NAME = "config.json"

# Logging configuration
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library log levels
LIBRARY_LOG_LEVELS = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "matplotlib": "WARNING",
}

# CLI exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
