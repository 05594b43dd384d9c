"""structlog setup for ledger commands."""

import logging
import sys
from typing import Literal

import structlog

from moonlit_ledger.config.settings import get_settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _renderer(log_format: LogFormat) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    # Host log panes do not render ANSI colors.
    return structlog.dev.ConsoleRenderer(
        colors=False,
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(level: LogLevel | None = None, format: LogFormat | None = None) -> None:
    """Route structlog events through the stdlib root logger.

    Level and format fall back to ``MOONLIT_LOG_LEVEL`` / ``MOONLIT_LOG_FORMAT``.
    The bound ``command`` context from :meth:`LedgerService.execute` is merged
    into every event.
    """
    settings = get_settings()
    log_level = level or settings.log_level

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(format or settings.log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to ``name``, usually the calling module's ``__name__``."""
    return structlog.get_logger(name)
