"""
Structured Logging

DESIGN DECISION: Everything the ledger recovers from on its own (corrupt
blobs, failed writes, failed reminders) is logged rather than raised.
Logging is therefore the only place those failures become visible, so it
is structured: one snake_case event name plus keyword context.

configure_logging() is called once by create_ledger(). Modules obtain
loggers through get_logger() at any time, before or after configuration.

Until then (e.g. a LedgerStore built directly by a library user) events go
through stdlib logging with a NullHandler on the "splitledger" logger, so
nothing is printed unless the host application configures logging.
"""

import logging
import sys
from typing import Optional

import structlog

from splitledger.config import LoggingSettings


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog on top of the stdlib logging backend.

    Args:
        settings: Logging settings. Loaded from the environment if None.
    """
    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers are created at import time; re-resolve on use so that a
        # later configure (or structlog.testing.capture_logs) applies to them.
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """
    Get a lazily-resolved structlog logger.

    Pass per-event context as keyword arguments instead of bind()-ing at
    import time: bind() resolves the processor chain immediately.
    """
    return structlog.get_logger(name)


def _configure_library_default() -> None:
    """Route events to stdlib logging until configure_logging() runs."""
    logging.getLogger("splitledger").addHandler(logging.NullHandler())
    if structlog.is_configured():
        return

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


_configure_library_default()
