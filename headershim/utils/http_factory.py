"""Factory functions for creating httpx clients that inject extra headers."""

import os
import ssl
import threading
import weakref
from collections.abc import Mapping
from typing import Any

import httpx

from headershim.core.logging import get_logger
from headershim.core.transport import HeaderTransport, Transport


logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

_default_client: httpx.Client | None = None
_default_client_lock = threading.Lock()
# Default clients built here, closed when a later configuration replaces them
_factory_clients: "weakref.WeakSet[httpx.Client]" = weakref.WeakSet()


def _verify_option(insecure: bool, ca_bundle: str | None) -> ssl.SSLContext | str | bool:
    if insecure:
        return False
    ca_bundle = (
        ca_bundle
        or os.environ.get("SSL_CERT_FILE")
        or os.environ.get("REQUESTS_CA_BUNDLE")
    )
    if ca_bundle:
        return ssl.create_default_context(cafile=ca_bundle)
    return True


def create_base_transport(
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
) -> httpx.HTTPTransport:
    """Create a plain sync transport.

    Args:
        insecure: Skip TLS certificate verification
        ca_bundle: Path to a CA bundle (defaults to SSL_CERT_FILE/REQUESTS_CA_BUNDLE)
        proxy_url: Optional HTTP proxy URL

    Returns:
        httpx.HTTPTransport with the requested TLS settings
    """
    if insecure:
        logger.warning("tls_verification_disabled", category="http")
    return httpx.HTTPTransport(
        verify=_verify_option(insecure, ca_bundle),
        proxy=proxy_url,
    )


def create_async_base_transport(
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
) -> httpx.AsyncHTTPTransport:
    """Async counterpart of :func:`create_base_transport`."""
    if insecure:
        logger.warning("tls_verification_disabled", category="http")
    return httpx.AsyncHTTPTransport(
        verify=_verify_option(insecure, ca_bundle),
        proxy=proxy_url,
    )


def wrap_transport(
    base: Transport,
    headers: Mapping[str, str] | None,
    *,
    owns_base: bool = False,
) -> Transport:
    """Wrap ``base`` with a header transport, or return it as-is if there are no headers."""
    if not headers:
        return base
    return HeaderTransport(base, headers, owns_base=owns_base)


def create_client(
    headers: Mapping[str, str] | None = None,
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
    **client_kwargs: Any,
) -> httpx.Client:
    """Create an ``httpx.Client`` that adds ``headers`` to every request.

    When ``transport`` is given it is wrapped but left for the caller to
    close; otherwise a new base transport is created and closed together with
    the client. TLS and proxy options only apply to a created transport.
    """
    owns_base = transport is None
    base = transport or create_base_transport(
        insecure=insecure, ca_bundle=ca_bundle, proxy_url=proxy_url
    )
    client = httpx.Client(
        transport=wrap_transport(base, headers, owns_base=owns_base),  # type: ignore[arg-type]
        timeout=timeout,
        **client_kwargs,
    )
    logger.debug(
        "http_client_created",
        header_names=list(headers or {}),
        owns_transport=owns_base,
    )
    return client


def create_async_client(
    headers: Mapping[str, str] | None = None,
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """Async counterpart of :func:`create_client`."""
    owns_base = transport is None
    base = transport or create_async_base_transport(
        insecure=insecure, ca_bundle=ca_bundle, proxy_url=proxy_url
    )
    client = httpx.AsyncClient(
        transport=wrap_transport(base, headers, owns_base=owns_base),  # type: ignore[arg-type]
        timeout=timeout,
        **client_kwargs,
    )
    logger.debug(
        "async_http_client_created",
        header_names=list(headers or {}),
        owns_transport=owns_base,
    )
    return client


def create_header_transport(
    headers: Mapping[str, str],
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
) -> HeaderTransport:
    """Build a header transport over a fresh sync base that it owns."""
    return HeaderTransport(
        create_base_transport(insecure=insecure, ca_bundle=ca_bundle, proxy_url=proxy_url),
        headers,
        owns_base=True,
    )


def configure_http_transport(
    headers: Mapping[str, str],
    *,
    insecure: bool = False,
    ca_bundle: str | None = None,
    proxy_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> HeaderTransport:
    """Build a header transport over a fresh base and install it as the default client.

    A default client previously created by this module is closed, together
    with its transport. Clients installed through :func:`set_default_client`
    are left to their owner.

    Returns the transport so callers can also mount it on their own clients.
    """
    transport = create_header_transport(
        headers, insecure=insecure, ca_bundle=ca_bundle, proxy_url=proxy_url
    )
    client = httpx.Client(transport=transport, timeout=timeout)
    _factory_clients.add(client)

    previous = set_default_client(client)
    if previous is not None and previous in _factory_clients:
        previous.close()
        logger.debug("previous_default_client_closed", category="http")

    logger.info(
        "default_http_transport_configured",
        header_names=list(transport.headers),
        insecure=insecure,
    )
    return transport


def get_default_client() -> httpx.Client:
    """Return the installed default client, creating a plain one if needed."""
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            _default_client = httpx.Client(timeout=DEFAULT_TIMEOUT)
            _factory_clients.add(_default_client)
        return _default_client


def set_default_client(client: httpx.Client | None) -> httpx.Client | None:
    """Install ``client`` as the default client.

    Returns the previously installed client, which is not closed.
    """
    global _default_client
    with _default_client_lock:
        previous, _default_client = _default_client, client
    return previous


def reset_default_client() -> None:
    """Close and forget the installed default client."""
    previous = set_default_client(None)
    if previous is not None:
        previous.close()
