"""Custom exceptions for the benchmarking system."""
from typing import Optional


class BenchmarkExecutionError(Exception):
    """Custom exception for benchmark execution failures."""
    pass


class ConfigurationError(Exception):
    """Exception raised when the run configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.config_key = config_key


class ResultsNotFoundError(Exception):
    """Exception raised when no saved results file can be found."""
    pass
