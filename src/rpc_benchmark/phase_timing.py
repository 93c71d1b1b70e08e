"""Records connection lifecycle marks for a single request and derives phase durations."""
import contextvars
import logging
import time
from typing import Any, Dict, Optional

from .constants import BenchmarkConstants
from .models import PhaseTimings


# Configure logging
logger = logging.getLogger(__name__)

# httpcore trace event -> recorder mark
_TRACE_MARKS = {
    "connection.connect_tcp.started": "socket_assigned",
    "connection.connect_tcp.complete": "tcp_connected",
    "connection.start_tls.complete": "tls_done",
    "http11.send_request_headers.started": "socket_assigned",
    "http2.send_request_headers.started": "socket_assigned",
    "http11.receive_response_headers.complete": "first_byte",
    "http2.receive_response_headers.complete": "first_byte",
}

_MARKS = ("start", "socket_assigned", "dns_done", "tcp_connected", "tls_done", "first_byte", "end")

_active_recorder: contextvars.ContextVar[Optional["PhaseTimingRecorder"]] = contextvars.ContextVar(
    "active_phase_recorder", default=None
)


def elapsed_ms(start: Optional[float], end: Optional[float]) -> Optional[float]:
    """Milliseconds between two perf_counter marks, or None if either is missing."""
    if start is None or end is None:
        return None
    return round((end - start) * 1000, BenchmarkConstants.PHASE_PRECISION)


class PhaseTimingRecorder:
    """Monotonic timestamps for the lifecycle of one outbound request.

    Every mark is written at most once. The recorder is attached to a request
    through the httpcore ``trace`` extension; the DNS mark comes from the
    resolving network backend via :func:`current_recorder`.
    """

    def __init__(self):
        self.marks: Dict[str, Optional[float]] = dict.fromkeys(_MARKS)
        self.connected = False

    def mark(self, name: str, timestamp: Optional[float] = None) -> None:
        if name not in self.marks:
            raise KeyError(f"Unknown lifecycle mark: {name}")
        if self.marks[name] is None:
            self.marks[name] = time.perf_counter() if timestamp is None else timestamp

    def mark_start(self) -> None:
        self.mark("start")

    def mark_dns_done(self) -> None:
        self.mark("dns_done")

    def mark_end(self) -> None:
        self.mark("end")

    def observe(self, event_name: str, info: Optional[Dict[str, Any]] = None) -> None:
        """Record the mark matching an httpcore trace event, if any."""
        if event_name == "connection.connect_tcp.started":
            self.connected = True
        mark = _TRACE_MARKS.get(event_name)
        if mark is not None:
            self.mark(mark)

    async def trace(self, event_name: str, info: Dict[str, Any]) -> None:
        """Async trace callback for ``extensions={"trace": recorder.trace}``."""
        self.observe(event_name, info)

    @property
    def connection_reused(self) -> bool:
        """True when the request was sent without opening a new socket."""
        return self.marks["socket_assigned"] is not None and not self.connected

    def timings(self) -> PhaseTimings:
        marks = self.marks
        return PhaseTimings(
            dns=elapsed_ms(marks["socket_assigned"], marks["dns_done"]),
            tcp=elapsed_ms(
                marks["dns_done"] if marks["dns_done"] is not None else marks["socket_assigned"],
                marks["tcp_connected"],
            ),
            tls=elapsed_ms(marks["tcp_connected"], marks["tls_done"]),
            ttfb=elapsed_ms(marks["start"], marks["first_byte"]),
            total=elapsed_ms(marks["start"], marks["end"]),
        )


def bind_recorder(recorder: PhaseTimingRecorder) -> contextvars.Token:
    """Make ``recorder`` the target of lifecycle marks in the current context."""
    return _active_recorder.set(recorder)


def release_recorder(token: contextvars.Token) -> None:
    _active_recorder.reset(token)


def current_recorder() -> Optional[PhaseTimingRecorder]:
    return _active_recorder.get()
