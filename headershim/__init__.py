"""Inject extra headers into every outbound httpx request."""

from headershim._version import __version__
from headershim.bootstrap import configure_extra_headers
from headershim.core import (
    HeaderStore,
    HeaderTransport,
    get_default_store,
    get_extra_headers,
    get_transport_with_headers,
    set_extra_headers,
)
from headershim.utils import (
    configure_http_transport,
    create_async_client,
    create_client,
    get_default_client,
    parse_headers_string,
    set_default_client,
)


__all__ = [
    "__version__",
    "HeaderStore",
    "HeaderTransport",
    "configure_extra_headers",
    "configure_http_transport",
    "create_async_client",
    "create_client",
    "get_default_client",
    "get_default_store",
    "get_extra_headers",
    "get_transport_with_headers",
    "parse_headers_string",
    "set_default_client",
    "set_extra_headers",
]
