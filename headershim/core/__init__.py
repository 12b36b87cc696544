"""Core header injection primitives."""

from .store import (
    HeaderStore,
    ReadWriteLock,
    get_default_store,
    get_extra_headers,
    get_transport_with_headers,
    set_extra_headers,
)
from .transport import HeaderTransport, clone_request


__all__ = [
    "HeaderStore",
    "HeaderTransport",
    "ReadWriteLock",
    "clone_request",
    "get_default_store",
    "get_extra_headers",
    "get_transport_with_headers",
    "set_extra_headers",
]
