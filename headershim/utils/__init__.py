"""Utility helpers for headershim."""

from .headers import (
    canonicalize_header_name,
    mask_header_values,
    normalize_headers,
    parse_headers_string,
)
from .http_factory import (
    configure_http_transport,
    create_async_base_transport,
    create_async_client,
    create_base_transport,
    create_client,
    create_header_transport,
    get_default_client,
    reset_default_client,
    set_default_client,
    wrap_transport,
)


__all__ = [
    "canonicalize_header_name",
    "configure_http_transport",
    "create_async_base_transport",
    "create_async_client",
    "create_base_transport",
    "create_client",
    "create_header_transport",
    "get_default_client",
    "mask_header_values",
    "normalize_headers",
    "parse_headers_string",
    "reset_default_client",
    "set_default_client",
    "wrap_transport",
]
