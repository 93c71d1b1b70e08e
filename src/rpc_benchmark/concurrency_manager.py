"""Manages concurrent request execution."""
import asyncio
import logging
from typing import List, Sequence

import httpx

from .exceptions import BenchmarkExecutionError
from .models import CallOutcome, SampleCall
from .request_executor import RequestExecutor


# Configure logging
logger = logging.getLogger(__name__)


class ConcurrencyManager:
    """Manages concurrent request execution."""

    def __init__(self, request_executor: RequestExecutor):
        self.request_executor = request_executor

    async def run_iteration(self, client: httpx.AsyncClient, url: str, sample_calls: Sequence[SampleCall],
                            timeout_ms: int) -> List[CallOutcome]:
        """
        Fire every sample call at once and wait for all of them.

        Args:
            client: Pooled client bound to the endpoint.
            url: Endpoint URL.
            sample_calls: Calls to issue, one task each.
            timeout_ms: Per-request deadline.

        Returns:
            Outcomes in the same order as ``sample_calls``.

        Raises:
            BenchmarkExecutionError: If a task raised instead of returning an outcome.
        """
        results = await asyncio.gather(
            *(self.request_executor.execute(client, url, call, timeout_ms) for call in sample_calls),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            logger.error(f"{len(errors)} request task(s) raised unexpectedly: {errors[0]!r}")
            raise BenchmarkExecutionError(f"Request task raised unexpectedly: {errors[0]}") from errors[0]
        return list(results)
