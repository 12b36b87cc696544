"""Shared fixtures for headershim tests.

Every test runs with a clean process-wide store, no installed default
client, no HEADERSHIM_* environment variables and a temporary working
directory, so config discovery never picks up files from the developer's
machine.
"""

import os
from collections.abc import Generator
from pathlib import Path

import httpx
import pytest

from headershim.core.store import get_default_store
from headershim.utils.http_factory import reset_default_client


class RecordingHandler:
    """MockTransport handler that records every request it receives."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": True})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    for key in list(os.environ):
        if key.upper().startswith("HEADERSHIM_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)

    get_default_store().clear()
    yield
    get_default_store().clear()
    reset_default_client()


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def mock_transport(recorder: RecordingHandler) -> httpx.MockTransport:
    """Base transport that records requests instead of hitting the network."""
    return httpx.MockTransport(recorder)
