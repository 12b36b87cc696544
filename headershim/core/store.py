"""Process-wide holder for the currently configured extra headers."""

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType

from headershim.core.logging import get_logger
from headershim.core.transport import HeaderTransport, Transport


logger = get_logger(__name__)

_EMPTY: Mapping[str, str] = MappingProxyType({})


class ReadWriteLock:
    """Lock allowing many concurrent readers or a single writer.

    Waiting writers block new readers, so a steady stream of readers cannot
    starve a writer.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class HeaderStore:
    """Holds one header set, replaced wholesale on every ``set``.

    Readers get a copy of the set as it was before or after any given write,
    never a mix of two writes. Transports built from the store take a
    snapshot and do not follow later changes.
    """

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._lock = ReadWriteLock()
        self._headers: Mapping[str, str] = _EMPTY
        if headers:
            self.set(headers)

    def set(self, headers: Mapping[str, str] | None) -> None:
        """Replace the stored headers; ``None`` or an empty mapping clears them."""
        new_headers = MappingProxyType(dict(headers)) if headers else _EMPTY
        with self._lock.write_locked():
            self._headers = new_headers
        logger.debug("extra_headers_stored", header_names=list(new_headers))

    def get(self) -> dict[str, str]:
        """Return a copy of the stored headers (empty if none are set)."""
        with self._lock.read_locked():
            return dict(self._headers)

    def clear(self) -> None:
        self.set(None)

    def get_transport_with_headers(self, base: Transport) -> Transport:
        """Wrap ``base`` so it injects the currently stored headers.

        Returns ``base`` itself when the store is empty. The returned wrapper
        holds a snapshot; call again to pick up later ``set`` calls.
        """
        headers = self.get()
        if not headers:
            return base
        return HeaderTransport(base, headers)


_default_store = HeaderStore()


def get_default_store() -> HeaderStore:
    """Return the process-wide store used by the module-level helpers."""
    return _default_store


def set_extra_headers(headers: Mapping[str, str] | None) -> None:
    """Replace the headers held by the process-wide store."""
    _default_store.set(headers)


def get_extra_headers() -> dict[str, str]:
    """Return the headers held by the process-wide store."""
    return _default_store.get()


def get_transport_with_headers(base: Transport) -> Transport:
    """Wrap ``base`` with the process-wide store's current headers."""
    return _default_store.get_transport_with_headers(base)
