"""
structlog setup for mimeutil.

Importing the library leaves logging untouched. The ``mimeutil`` CLI, or an
embedding application, calls :func:`setup_logging` once; modules log through
``structlog.get_logger(__name__)`` with snake_case event names. Codec and
charset fallbacks are reported at debug, so they only show up with
``MIMEUTIL_LOG_LEVEL=DEBUG``.
"""

import logging
import sys

import structlog

from .config import settings


def _renderer():
    if settings.log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """
    Route mimeutil log events to stderr.

    The level comes from ``settings.log_level`` and the output format from
    ``settings.log_json`` (one JSON object per line, or coloured console
    lines). stdout is left to command output such as ``mimeutil parts --json``.
    """
    level = logging.getLevelName(settings.log_level.upper())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Loggers re-read the configuration so a later setup_logging() call takes effect
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
