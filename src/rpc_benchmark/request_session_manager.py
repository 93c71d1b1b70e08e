"""Manages pooled HTTP clients, one per endpoint."""
import logging
from typing import Optional

import httpcore
import httpx

from .constants import BenchmarkConstants
from .transport import PooledTransport


# Configure logging
logger = logging.getLogger(__name__)


class RequestSessionManager:
    """Manages pooled HTTP clients with phase instrumentation."""

    @staticmethod
    def create_client(
        max_sockets: int = BenchmarkConstants.DEFAULT_MAX_SOCKETS,
        timeout_ms: int = BenchmarkConstants.DEFAULT_TIMEOUT_MS,
        network_backend: Optional[httpcore.AsyncNetworkBackend] = None,
    ) -> httpx.AsyncClient:
        """Create an async client whose connection pool is bounded by ``max_sockets``.

        No retries are configured: every call is measured exactly once.
        """
        timeout_s = timeout_ms / 1000
        transport = PooledTransport(max_sockets=max_sockets, network_backend=network_backend)
        logger.debug(f"Created pooled client (max_sockets={max_sockets}, timeout={timeout_s}s)")
        return httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(timeout_s),
            headers={"Content-Type": "application/json"},
        )
