"""httpx transport that injects a fixed set of extra headers."""

from collections.abc import Mapping
from types import MappingProxyType

import httpx

from headershim.core.logging import get_logger


logger = get_logger(__name__)

Transport = httpx.BaseTransport | httpx.AsyncBaseTransport


def clone_request(
    request: httpx.Request, headers: Mapping[str, str] | None = None
) -> httpx.Request:
    """Duplicate a request and overlay ``headers`` on the duplicate.

    The duplicate gets its own header collection and its own ``extensions``
    dict (carrying the same timeout/trace handles), and shares the body
    stream. Each overlaid header replaces every existing value for that name.
    The original request is left as it was.
    """
    clone = httpx.Request(
        method=request.method,
        url=request.url,
        headers=request.headers.copy(),
        stream=request.stream,
        extensions=dict(request.extensions),
    )
    # In-memory bodies are cheap to materialise and let handlers use .content
    if isinstance(request.stream, httpx.ByteStream):
        clone.read()

    if headers:
        for name, value in headers.items():
            clone.headers[name] = value
    return clone


class HeaderTransport(httpx.BaseTransport, httpx.AsyncBaseTransport):
    """Transport decorator that adds extra headers to every request.

    Wraps any httpx transport, sync or async; the matching side of the base
    is used. Each request is cloned, the configured headers are set on the
    clone (overriding caller-supplied values of the same name), and the clone
    is handed to the base transport. Responses and errors from the base are
    returned as-is.

    The header set is fixed at construction; build a new transport to change
    it. The base transport is only closed when ``owns_base`` is true.
    """

    def __init__(
        self,
        base: Transport,
        headers: Mapping[str, str] | None = None,
        *,
        owns_base: bool = False,
    ) -> None:
        if not isinstance(base, httpx.BaseTransport | httpx.AsyncBaseTransport):
            raise TypeError(
                f"base must be an httpx transport, got {type(base).__name__}"
            )
        self._base = base
        # Snapshot: later changes to the caller's mapping are not observed
        self._headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self._owns_base = owns_base

    @property
    def base(self) -> Transport:
        """The wrapped transport."""
        return self._base

    @property
    def headers(self) -> Mapping[str, str]:
        """Read-only view of the injected headers."""
        return self._headers

    def _prepare(self, request: httpx.Request) -> httpx.Request:
        clone = clone_request(request, self._headers)
        logger.debug(
            "extra_headers_injected",
            method=request.method,
            host=request.url.host,
            path=request.url.path,
            header_names=list(self._headers),
        )
        return clone

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if not isinstance(self._base, httpx.BaseTransport):
            raise TypeError(
                f"{type(self._base).__name__} is async-only; "
                "mount this transport on an httpx.AsyncClient"
            )
        return self._base.handle_request(self._prepare(request))

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if not isinstance(self._base, httpx.AsyncBaseTransport):
            raise TypeError(
                f"{type(self._base).__name__} is sync-only; "
                "mount this transport on an httpx.Client"
            )
        return await self._base.handle_async_request(self._prepare(request))

    def close(self) -> None:
        if self._owns_base and isinstance(self._base, httpx.BaseTransport):
            self._base.close()

    async def aclose(self) -> None:
        if self._owns_base and isinstance(self._base, httpx.AsyncBaseTransport):
            await self._base.aclose()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base={self._base!r}, "
            f"header_names={list(self._headers)!r})"
        )
