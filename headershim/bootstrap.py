"""Wire configured extra headers into the store and an outbound transport."""

from headershim.config.settings import Settings
from headershim.core.logging import get_logger
from headershim.core.store import HeaderStore, get_default_store
from headershim.core.transport import HeaderTransport
from headershim.utils.http_factory import (
    configure_http_transport,
    create_header_transport,
)


logger = get_logger(__name__)


def configure_extra_headers(
    settings: Settings | None = None,
    *,
    store: HeaderStore | None = None,
    install_default: bool = False,
) -> HeaderTransport | None:
    """Apply ``settings.extra_headers``.

    When headers are configured they replace the contents of ``store`` (the
    process-wide store by default) and a header transport over a new base
    transport is returned. With ``install_default`` a client using that
    transport also becomes the default client, replacing (and closing) one
    installed by an earlier call.

    Returns:
        The header transport, or None when no headers are configured. The store
        is left untouched in that case.
    """
    if settings is None:
        settings = Settings.from_config()
    if store is None:
        store = get_default_store()

    headers = dict(settings.extra_headers)
    if not headers:
        logger.debug("extra_headers_not_configured", category="config")
        return None

    store.set(headers)

    http = settings.http
    if install_default:
        transport = configure_http_transport(
            headers,
            insecure=http.insecure,
            ca_bundle=http.ca_bundle,
            proxy_url=http.proxy_url,
            timeout=http.timeout,
        )
    else:
        transport = create_header_transport(
            headers,
            insecure=http.insecure,
            ca_bundle=http.ca_bundle,
            proxy_url=http.proxy_url,
        )

    logger.info(
        "extra_headers_configured",
        header_names=list(headers),
        install_default=install_default,
        category="config",
    )
    return transport
