"""Connection-pooled httpx transport with DNS resolution timing."""
import contextlib
import ipaddress
import logging
import socket
from typing import Any, Awaitable, Callable, Iterable, Iterator, List, Optional, Tuple

import anyio
import httpcore
import httpx

from .phase_timing import current_recorder


# Configure logging
logger = logging.getLogger(__name__)

Resolver = Callable[..., Awaitable[List[Tuple[Any, ...]]]]

# Ordered most specific first
_HTTPCORE_EXCEPTIONS = (
    (httpcore.ConnectTimeout, httpx.ConnectTimeout),
    (httpcore.ReadTimeout, httpx.ReadTimeout),
    (httpcore.WriteTimeout, httpx.WriteTimeout),
    (httpcore.PoolTimeout, httpx.PoolTimeout),
    (httpcore.TimeoutException, httpx.TimeoutException),
    (httpcore.ConnectError, httpx.ConnectError),
    (httpcore.ReadError, httpx.ReadError),
    (httpcore.WriteError, httpx.WriteError),
    (httpcore.NetworkError, httpx.NetworkError),
    (httpcore.UnsupportedProtocol, httpx.UnsupportedProtocol),
    (httpcore.RemoteProtocolError, httpx.RemoteProtocolError),
    (httpcore.LocalProtocolError, httpx.LocalProtocolError),
    (httpcore.ProtocolError, httpx.ProtocolError),
)


@contextlib.contextmanager
def map_httpcore_exceptions(request: httpx.Request) -> Iterator[None]:
    """Re-raise httpcore errors as their httpx equivalents."""
    try:
        yield
    except Exception as exc:
        for core_exc, httpx_exc in _HTTPCORE_EXCEPTIONS:
            if isinstance(exc, core_exc):
                raise httpx_exc(str(exc) or type(exc).__name__, request=request) from exc
        raise


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True


def _format_address(address: Any) -> Optional[str]:
    if isinstance(address, (tuple, list)) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return None


def connection_id_from_stream(stream: Any) -> Optional[str]:
    """Describe a network stream as ``local:port->remote:port`` when possible."""
    if stream is None:
        return None
    try:
        local = _format_address(stream.get_extra_info("client_addr"))
        remote = _format_address(stream.get_extra_info("server_addr"))
    except OSError:
        return None
    if local is None or remote is None:
        return None
    return f"{local}->{remote}"


class ResolvingNetworkBackend(httpcore.AsyncNetworkBackend):
    """Network backend that resolves host names itself so the DNS phase can be timed.

    Resolved addresses are tried in order through the wrapped backend until one
    connects; TLS still uses the original host name for SNI and certificate
    checks.
    """

    def __init__(self, backend: Optional[httpcore.AsyncNetworkBackend] = None, resolver: Optional[Resolver] = None):
        self._backend = backend if backend is not None else httpcore.AnyIOBackend()
        self._resolver = resolver if resolver is not None else anyio.getaddrinfo

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        local_address: Optional[str] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.AsyncNetworkStream:
        addresses = [host]
        if not _is_ip_literal(host):
            addresses = await self._resolve(host, port, timeout)
            recorder = current_recorder()
            if recorder is not None:
                recorder.mark_dns_done()

        last_error: Optional[httpcore.ConnectError] = None
        for address in addresses:
            try:
                return await self._backend.connect_tcp(
                    address,
                    port,
                    timeout=timeout,
                    local_address=local_address,
                    socket_options=socket_options,
                )
            except httpcore.ConnectError as e:
                logger.debug(f"Connect to {host} via {address}:{port} failed: {e}")
                last_error = e
        raise last_error

    async def _resolve(self, host: str, port: int, timeout: Optional[float]) -> List[str]:
        try:
            with anyio.fail_after(timeout):
                addresses = await self._resolver(host, port, type=socket.SOCK_STREAM)
        except TimeoutError as e:
            raise httpcore.ConnectTimeout(f"DNS lookup for {host} timed out") from e
        except OSError as e:
            raise httpcore.ConnectError(f"DNS lookup failed for {host}: {e}") from e
        if not addresses:
            raise httpcore.ConnectError(f"DNS lookup returned no addresses for {host}")
        # Distinct addresses, in resolver order
        return list(dict.fromkeys(entry[4][0] for entry in addresses))

    async def connect_unix_socket(
        self,
        path: str,
        timeout: Optional[float] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.AsyncNetworkStream:
        return await self._backend.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)


class PooledTransport(httpx.AsyncBaseTransport):
    """httpx transport over one bounded httpcore connection pool.

    The pool keeps sockets alive between requests so that connection reuse is
    exercised, and request extensions (``trace``, ``timeout``) are forwarded to
    httpcore untouched. Response bodies are read in full before returning.
    """

    def __init__(
        self,
        max_sockets: int,
        network_backend: Optional[httpcore.AsyncNetworkBackend] = None,
        keepalive_expiry: Optional[float] = 5.0,
    ):
        self.max_sockets = max_sockets
        self._pool = httpcore.AsyncConnectionPool(
            max_connections=max_sockets,
            max_keepalive_connections=max_sockets,
            keepalive_expiry=keepalive_expiry,
            network_backend=network_backend if network_backend is not None else ResolvingNetworkBackend(),
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        core_request = httpcore.Request(
            method=request.method,
            url=httpcore.URL(
                scheme=request.url.raw_scheme,
                host=request.url.raw_host,
                port=request.url.port,
                target=request.url.raw_path,
            ),
            headers=request.headers.raw,
            content=await request.aread(),
            extensions=request.extensions,
        )
        with map_httpcore_exceptions(request):
            core_response = await self._pool.handle_async_request(core_request)
            extensions = dict(core_response.extensions)
            extensions["connection_id"] = connection_id_from_stream(extensions.get("network_stream"))
            try:
                content = await core_response.aread()
            finally:
                await core_response.aclose()

        return httpx.Response(
            status_code=core_response.status,
            headers=core_response.headers,
            content=content,
            extensions=extensions,
        )

    async def aclose(self) -> None:
        await self._pool.aclose()
