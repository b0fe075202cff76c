"""klaw-relay: single-receiver event relay for the Klaw ecosystem.

Buffers events until exactly one receiver is attached, then delivers them in
send order. Supports receiver replacement (also from inside a receiver),
pausing, a buffer limit and suppression of consecutive duplicates.

Flat imports (preferred):
    from klaw_relay import EventRelay, RelayBuilder, open_stream

Submodule imports (for organization):
    from klaw_relay.relay import EventRelay
    from klaw_relay.errors import InvalidEventError, IllegalAccessError
    from klaw_relay.stream import RelayStream
"""

from klaw_relay._config import RelayConfig, get_config, init
from klaw_relay._logging import configure_logging, get_logger
from klaw_relay.errors import (
    IllegalAccess,
    IllegalAccessError,
    InvalidEvent,
    InvalidEventError,
    RelayStreamClosed,
    RelayStreamClosedError,
)
from klaw_relay.protocols import Receiver
from klaw_relay.relay import EventRelay, RelayBuilder
from klaw_relay.stats import RelayStats
from klaw_relay.stream import RelayStream, open_stream

__all__ = [
    # Relay
    'EventRelay',
    # Errors - struct variants
    'IllegalAccess',
    # Errors - exception variants
    'IllegalAccessError',
    'InvalidEvent',
    'InvalidEventError',
    'Receiver',
    'RelayBuilder',
    # Config
    'RelayConfig',
    'RelayStats',
    # Streams
    'RelayStream',
    'RelayStreamClosed',
    'RelayStreamClosedError',
    # Logging
    'configure_logging',
    'get_config',
    'get_logger',
    'init',
    'open_stream',
]
