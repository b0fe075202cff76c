"""Relay configuration: RelayConfig defaults, environment detection, init()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_relay._logging import configure_logging

__all__ = [
    'RelayConfig',
    'get_config',
    'init',
    'reset',
    'validate_limit',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off'})
_UNBOUNDED = frozenset({'', 'none', 'unbounded'})


@dataclass(frozen=True)
class RelayConfig:
    """Default settings for newly created relays.

    Attributes:
        distinct_only: Suppress an event equal to the previously delivered one.
        limit: Maximum number of buffered events (None = unbounded).
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
    """

    distinct_only: bool = False
    limit: int | None = None
    log_level: str | None = None

    def __post_init__(self) -> None:
        validate_limit(self.limit)


# Global relay defaults (set by init())
_config: RelayConfig | None = None


def validate_limit(limit: int | None) -> int | None:
    """Check a buffer limit and return it unchanged.

    Raises:
        ValueError: If the limit is negative or not an integer.
    """
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int):
        msg = f'Relay limit must be an int or None, got {limit!r}'
        raise ValueError(msg)
    if limit < 0:
        msg = f'Relay limit must be non-negative, got {limit}'
        raise ValueError(msg)
    return limit


def _detect_distinct_only() -> bool:
    """Read KLAW_RELAY_DISTINCT_ONLY, defaulting to False."""
    raw = os.environ.get('KLAW_RELAY_DISTINCT_ONLY', '').strip().lower()
    if raw in _TRUTHY:
        return True
    if raw and raw not in _FALSY:
        logging.warning("Unknown KLAW_RELAY_DISTINCT_ONLY value '%s', defaulting to false", raw)
    return False


def _detect_limit() -> int | None:
    """Read KLAW_RELAY_LIMIT, defaulting to unbounded."""
    raw = os.environ.get('KLAW_RELAY_LIMIT', '').strip().lower()
    if raw in _UNBOUNDED:
        return None
    try:
        limit = int(raw)
    except ValueError:
        logging.warning("Unknown KLAW_RELAY_LIMIT value '%s', defaulting to unbounded", raw)
        return None
    if limit < 0:
        logging.warning("Negative KLAW_RELAY_LIMIT value '%s', defaulting to unbounded", raw)
        return None
    return limit


def init(
    distinct_only: bool | None = None,
    limit: int | None = None,
    log_level: str | None = None,
) -> RelayConfig:
    """Set the process-wide defaults used by relays created afterwards.

    Args:
        distinct_only: Default duplicate suppression. Read from the
            KLAW_RELAY_DISTINCT_ONLY environment variable if None.
        limit: Default buffer limit. Read from KLAW_RELAY_LIMIT if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.

    Returns:
        The RelayConfig that was set.

    Example:
        ```python
        from klaw_relay import EventRelay, init

        init(limit=32, log_level='DEBUG')
        relay = EventRelay()  # buffers at most 32 events
        ```
    """
    global _config  # noqa: PLW0603

    _config = RelayConfig(
        distinct_only=_detect_distinct_only() if distinct_only is None else distinct_only,
        limit=_detect_limit() if limit is None else validate_limit(limit),
        log_level=log_level,
    )

    if log_level is not None:
        configure_logging(log_level)

    return _config


def get_config() -> RelayConfig:
    """Get the current relay defaults.

    Returns RelayConfig() when init() has not been called, so relays can be
    created without any setup.
    """
    if _config is None:
        return RelayConfig()
    return _config


def reset() -> None:
    """Forget the defaults installed by init()."""
    global _config  # noqa: PLW0603
    _config = None
