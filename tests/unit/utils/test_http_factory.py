"""Tests for HTTP client factory functions."""

from unittest.mock import Mock

import httpx
import pytest

from headershim.core.transport import HeaderTransport
from headershim.utils import http_factory
from headershim.utils.http_factory import (
    DEFAULT_TIMEOUT,
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


class TestBaseTransports:
    def test_create_base_transport(self):
        transport = create_base_transport()

        assert isinstance(transport, httpx.HTTPTransport)
        transport.close()

    def test_create_insecure_base_transport(self):
        transport = create_base_transport(insecure=True)

        assert isinstance(transport, httpx.HTTPTransport)
        transport.close()

    def test_create_async_base_transport(self):
        transport = create_async_base_transport(insecure=True)

        assert isinstance(transport, httpx.AsyncHTTPTransport)

    def test_verify_option_insecure(self):
        assert http_factory._verify_option(True, "/ignored/ca.pem") is False

    def test_verify_option_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("SSL_CERT_FILE", raising=False)
        monkeypatch.delenv("REQUESTS_CA_BUNDLE", raising=False)

        assert http_factory._verify_option(False, None) is True

    def test_verify_option_ca_bundle_from_env(self, monkeypatch: pytest.MonkeyPatch):
        context = object()
        create_context = Mock(return_value=context)
        monkeypatch.setenv("SSL_CERT_FILE", "/etc/ssl/custom.pem")
        monkeypatch.setattr(http_factory.ssl, "create_default_context", create_context)

        assert http_factory._verify_option(False, None) is context
        create_context.assert_called_once_with(cafile="/etc/ssl/custom.pem")


class TestWrapTransport:
    def test_no_headers_returns_base(self, mock_transport):
        assert wrap_transport(mock_transport, {}) is mock_transport
        assert wrap_transport(mock_transport, None) is mock_transport

    def test_headers_wrap_base(self, mock_transport):
        wrapped = wrap_transport(mock_transport, {"X-A": "1"}, owns_base=True)

        assert isinstance(wrapped, HeaderTransport)
        assert wrapped.base is mock_transport


class TestClients:
    """Test client factories."""

    def test_create_client_injects_headers(self, recorder, mock_transport):
        with create_client(
            {"X-Tenant-ID": "tenant-abc"}, transport=mock_transport
        ) as client:
            client.get("https://example.com/")

        assert recorder.last.headers["X-Tenant-ID"] == "tenant-abc"

    def test_create_client_defaults(self):
        with create_client({"X-A": "1"}) as client:
            assert isinstance(client, httpx.Client)
            assert client.timeout == httpx.Timeout(DEFAULT_TIMEOUT)
            assert isinstance(client._transport, HeaderTransport)
            assert isinstance(client._transport.base, httpx.HTTPTransport)

    def test_create_client_without_headers_uses_base(self, mock_transport):
        with create_client(None, transport=mock_transport) as client:
            assert client._transport is mock_transport

    def test_create_client_does_not_close_borrowed_transport(self):
        base = Mock(spec=httpx.BaseTransport)

        client = create_client({"X-A": "1"}, transport=base)
        client.close()

        base.close.assert_not_called()

    def test_create_client_passes_client_kwargs(self, recorder, mock_transport):
        with create_client(
            {"X-A": "1"},
            transport=mock_transport,
            base_url="https://rancher.example.com/v3",
            params={"limit": "5"},
        ) as client:
            client.get("/clusters")

        assert recorder.last.url == httpx.URL(
            "https://rancher.example.com/v3/clusters?limit=5"
        )
        assert recorder.last.headers["X-A"] == "1"

    @pytest.mark.asyncio
    async def test_create_async_client_injects_headers(self, recorder, mock_transport):
        async with create_async_client(
            {"X-Proxy-Token": "secret"}, transport=mock_transport, timeout=5.0
        ) as client:
            await client.get("https://example.com/")

        assert client.timeout == httpx.Timeout(5.0)
        assert recorder.last.headers["X-Proxy-Token"] == "secret"


class TestDefaultClient:
    """Test the default client shim."""

    def test_get_default_client_creates_plain_client(self):
        client = get_default_client()

        assert isinstance(client, httpx.Client)
        assert get_default_client() is client

    def test_set_default_client_returns_previous(self, mock_transport):
        first = httpx.Client(transport=mock_transport)
        second = httpx.Client(transport=mock_transport)

        assert set_default_client(first) is None
        assert set_default_client(second) is first
        assert get_default_client() is second
        first.close()

    def test_reset_default_client_closes_it(self):
        client = Mock(spec=httpx.Client)
        set_default_client(client)

        reset_default_client()

        client.close.assert_called_once()
        assert get_default_client() is not client

    def test_configure_http_transport_installs_default(self):
        transport = configure_http_transport(
            {"X-Global-Header": "global-value"}, insecure=True
        )

        assert isinstance(transport, HeaderTransport)
        assert dict(transport.headers) == {"X-Global-Header": "global-value"}
        assert isinstance(transport.base, httpx.HTTPTransport)
        assert get_default_client()._transport is transport

    def test_reconfigure_closes_previous_default(self):
        configure_http_transport({"X-A": "1"})
        first = get_default_client()

        configure_http_transport({"X-A": "2"})

        assert first.is_closed
        assert not get_default_client().is_closed
        assert dict(get_default_client()._transport.headers) == {"X-A": "2"}

    def test_configure_closes_lazily_created_default(self):
        lazy = get_default_client()

        configure_http_transport({"X-A": "1"})

        assert lazy.is_closed

    def test_configure_leaves_caller_installed_client_open(self, mock_transport):
        own = httpx.Client(transport=mock_transport)
        set_default_client(own)

        configure_http_transport({"X-A": "1"})

        assert not own.is_closed
        own.close()

    def test_create_header_transport_owns_fresh_base(self):
        transport = create_header_transport({"X-A": "1"}, insecure=True)

        assert isinstance(transport.base, httpx.HTTPTransport)
        assert dict(transport.headers) == {"X-A": "1"}
        transport.close()

    def test_default_client_sends_injected_headers(self, recorder, mock_transport):
        set_default_client(
            httpx.Client(transport=HeaderTransport(mock_transport, {"X-G": "v"}))
        )

        get_default_client().get("https://example.com/")

        assert recorder.last.headers["X-G"] == "v"
