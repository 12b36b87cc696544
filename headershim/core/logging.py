import logging
import sys

import structlog
from structlog.stdlib import BoundLogger


def configure_structlog(json_logs: bool = False) -> None:
    """Configure structlog processors shared by library and CLI loggers.

    JSON output keeps exceptions structured; console output renders them as text.
    """
    timestamper = structlog.processors.TimeStamper(fmt="iso")
    exc_processor = (
        structlog.processors.dict_tracebacks
        if json_logs
        else structlog.processors.format_exc_info
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        timestamper,
        structlog.processors.StackInfoRenderer(),
        exc_processor,
        structlog.processors.UnicodeDecoder(),
        # Hand the event dict to ProcessorFormatter so we don't double-render
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,  # Don't cache to allow reconfiguration
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> BoundLogger:
    """
    Setup logging for applications embedding headershim (and for the CLI).
    Returns a structlog logger instance.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    configure_structlog(json_logs=json_logs)

    handler = logging.StreamHandler(sys.stderr)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    # ProcessorFormatter renders both structlog and stdlib records
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )

    root_logger.handlers = [handler]

    package_logger = logging.getLogger("headershim")
    package_logger.handlers = []
    package_logger.propagate = True
    package_logger.setLevel(level)

    # httpx logs every request at INFO; only surface that when we are debugging
    httpx_logger = logging.getLogger("httpx")
    if log_level.upper() == "DEBUG":
        httpx_logger.setLevel(logging.INFO)
    else:
        httpx_logger.setLevel(logging.WARNING)

    noisy_log_level = logging.WARNING if level <= logging.WARNING else level
    for noisy_logger_name in ["httpcore", "httpcore.http11", "httpcore.connection"]:
        noisy_logger = logging.getLogger(noisy_logger_name)
        noisy_logger.handlers = []
        noisy_logger.propagate = True
        noisy_logger.setLevel(noisy_log_level)

    return structlog.get_logger()  # type: ignore[no-any-return]


def get_logger(name: str | None = None) -> BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
