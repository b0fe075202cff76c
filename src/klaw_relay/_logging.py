"""Structured logging for klaw-relay.

Relays log through structlog loggers that wrap stdlib loggers, so nothing is
emitted until the application configures logging, either through
configure_logging() (or init(log_level=...)) or with its own stdlib setup.
Every relay logger checks the stdlib level before any processor runs, which
keeps the per-event debug records cheap when debug output is off.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

__all__ = ['configure_logging', 'get_logger']


def _relay_processors() -> list[Any]:
    """Processors shared by relay records and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
    ]


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Route relay records and stdlib records through one stderr handler.

    Args:
        level: Root logging level ("DEBUG" shows dropped and suppressed
            events). Unknown names fall back to INFO.
        json_output: If True, emit JSON lines. If False, use console output.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_relay_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_relay_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger backed by the stdlib logger of the same name.

    The processor chain is taken from the current structlog configuration
    and always starts with a stdlib level check.

    Args:
        name: Logger name. If None, the root logger is wrapped.
    """
    processors = list(structlog.get_config()['processors'])
    if structlog.stdlib.filter_by_level not in processors:
        processors.insert(0, structlog.stdlib.filter_by_level)
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
