"""Handles individual request execution and timing."""
import asyncio
import itertools
import json
import logging
from typing import Any, Dict

import httpx

from .constants import BenchmarkConstants
from .models import CallFailure, CallOutcome, CallSuccess, ErrorKind, SampleCall
from .phase_timing import PhaseTimingRecorder, bind_recorder, release_recorder


# Configure logging
logger = logging.getLogger(__name__)


class RequestExecutor:
    """Handles individual eth_call execution and phase timing."""

    def __init__(self, method: str = BenchmarkConstants.RPC_METHOD):
        self.method = method
        self._ids = itertools.count(1)

    def build_payload(self, sample_call: SampleCall) -> Dict[str, Any]:
        """Build a JSON-RPC envelope with a run-unique correlation id."""
        return {
            "jsonrpc": BenchmarkConstants.RPC_VERSION,
            "method": self.method,
            "params": sample_call.to_params(),
            "id": next(self._ids),
        }

    async def execute(self, client: httpx.AsyncClient, url: str, sample_call: SampleCall,
                      timeout_ms: int = BenchmarkConstants.DEFAULT_TIMEOUT_MS) -> CallOutcome:
        """
        Send one eth_call and measure its connection phases.

        Args:
            client: Pooled client bound to the endpoint.
            url: Endpoint URL.
            sample_call: The call to replay.
            timeout_ms: Deadline for the whole request, from start to last byte.

        Returns:
            CallSuccess with phase timings, or CallFailure classified by ErrorKind.
        """
        payload = self.build_payload(sample_call)
        recorder = PhaseTimingRecorder()
        token = bind_recorder(recorder)
        try:
            recorder.mark_start()
            response = await asyncio.wait_for(
                client.post(url, json=payload, extensions={"trace": recorder.trace}),
                timeout=timeout_ms / 1000,
            )
            recorder.mark_end()
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return self._failure(sample_call, ErrorKind.TIMEOUT, f"Request timeout after {timeout_ms}ms")
        except httpx.TransportError as e:
            return self._failure(sample_call, ErrorKind.NETWORK_ERROR, f"Request failed: {e}")
        except httpx.DecodingError as e:
            return self._failure(sample_call, ErrorKind.PARSE_ERROR, f"Failed to parse response: {e}")
        finally:
            release_recorder(token)

        try:
            body = response.json()
        except ValueError as e:
            return self._failure(sample_call, ErrorKind.PARSE_ERROR,
                                 f"Failed to parse response (HTTP {response.status_code}): {e}")

        if not isinstance(body, dict) or ("result" not in body and "error" not in body):
            return self._failure(sample_call, ErrorKind.PARSE_ERROR,
                                 f"Failed to parse response (HTTP {response.status_code}): not a JSON-RPC reply")

        if body.get("error") is not None:
            return self._failure(sample_call, ErrorKind.REMOTE_ERROR, f"RPC Error: {json.dumps(body['error'])}")

        return CallSuccess(
            call_name=sample_call.name,
            timings=recorder.timings(),
            connection_reused=recorder.connection_reused,
            connection_id=response.extensions.get("connection_id"),
            result=body.get("result"),
        )

    @staticmethod
    def _failure(sample_call: SampleCall, kind: ErrorKind, message: str) -> CallFailure:
        logger.debug(f"{sample_call.name} failed ({kind.value}): {message}")
        return CallFailure(call_name=sample_call.name, error_kind=kind, message=message)
