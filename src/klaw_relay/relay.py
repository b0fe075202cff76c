"""Single-receiver event relay: buffers events until a receiver is attached.

Events sent while no receiver is attached (or while the relay is paused) are
queued and handed to the next receiver in the order they were sent. Only one
receiver is active at a time; attaching a new one replaces the old one.

Receivers run synchronously and may call back into the relay. Events sent
from inside a receiver are queued and delivered once that receiver returns,
and a receiver swapped in from inside a callback picks up the remaining
queue instead of it stalling on the stale receiver.

Example:
    ```python
    relay: EventRelay[str] = EventRelay()
    relay.send('ready')            # queued, nobody is listening yet

    received: list[str] = []
    relay.attach_receiver(received.append)
    assert received == ['ready']

    relay.send('go')               # delivered immediately
    assert received == ['ready', 'go']
    ```
"""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final

from klaw_relay._config import get_config, validate_limit
from klaw_relay._confinement import ThreadConfinement
from klaw_relay._logging import get_logger
from klaw_relay.errors import InvalidEvent
from klaw_relay.stats import RelayStats

if TYPE_CHECKING:
    from klaw_relay.protocols import Receiver

__all__ = ['EventRelay', 'RelayBuilder']

# Marks "nothing delivered yet"; None is never a valid event.
_NOTHING: Final[Any] = object()


class EventRelay[T]:
    """Queue that delivers events to exactly one receiver, in send order.

    Configuration (duplicate suppression and buffer limit) is fixed at
    construction. Arguments left as None fall back to the defaults installed
    with klaw_relay.init().

    A relay is confined to the thread that created it; every public method
    raises IllegalAccessError when called from another thread.

    Args:
        distinct_only: Skip an event equal to the previously delivered one.
        limit: Maximum number of buffered events. Sends that find the buffer
            full while delivery is impossible are dropped.
        name: Label used in logs and stats.
    """

    __slots__ = (
        '_created_at',
        '_distinct_only',
        '_emitting',
        '_guard',
        '_high_watermark',
        '_last_delivered',
        '_limit',
        '_log',
        '_name',
        '_paused',
        '_queue',
        '_receiver',
        '_total_delivered',
        '_total_dropped',
        '_total_sent',
        '_total_suppressed',
    )

    def __init__(
        self,
        *,
        distinct_only: bool | None = None,
        limit: int | None = None,
        name: str | None = None,
    ) -> None:
        defaults = get_config()
        self._guard = ThreadConfinement()
        self._distinct_only: bool = defaults.distinct_only if distinct_only is None else bool(distinct_only)
        self._limit: int | None = defaults.limit if limit is None else validate_limit(limit)
        self._name = name

        self._queue: deque[T] = deque()
        self._receiver: Receiver[T] | None = None
        self._paused: bool = False
        self._emitting: bool = False
        self._last_delivered: Any = _NOTHING

        self._created_at = datetime.now(UTC)
        self._high_watermark = 0
        self._total_sent = 0
        self._total_delivered = 0
        self._total_dropped = 0
        self._total_suppressed = 0

        self._log = get_logger(__name__).bind(relay=name)

    # --- Configuration ---

    @property
    def name(self) -> str | None:
        self._guard.verify()
        return self._name

    @property
    def distinct_only(self) -> bool:
        self._guard.verify()
        return self._distinct_only

    @property
    def limit(self) -> int | None:
        self._guard.verify()
        return self._limit

    # --- Public operations ---

    def send(self, event: T) -> None:
        """Deliver the event now if possible, otherwise queue it.

        Delivery is possible when a receiver is attached, the relay is not
        paused and no other delivery is in progress. A send issued from inside
        a receiver therefore always queues.

        When delivery is impossible and the buffer already holds ``limit``
        events, the new event is dropped silently. Events left queued by a
        receiver that raised are delivered before this one; if that delivery
        raises again, the exception propagates and the event is not sent.

        Args:
            event: The event. Must not be None.

        Raises:
            InvalidEventError: If event is None.
            IllegalAccessError: If called off the owning thread.
        """
        self._guard.verify()
        if event is None:
            raise InvalidEvent().to_exception()

        if self._can_emit() and self._queue:
            # Leftovers from a receiver that raised mid-drain go first.
            self._drain(self._receiver)

        self._total_sent += 1
        receiver = self._receiver
        if self._can_emit() and not self._queue:
            self._emit(receiver, event)
            # Anything the receiver sent to itself was queued meanwhile.
            self._drain(receiver)
            return

        self._enqueue(event)

    def attach_receiver(self, receiver: Receiver[T] | None) -> None:
        """Replace the current receiver and hand it any queued events.

        Passing None detaches the current receiver.

        Raises:
            TypeError: If receiver is neither callable nor None.
            IllegalAccessError: If called off the owning thread.
        """
        self._guard.verify()
        if receiver is not None and not callable(receiver):
            msg = f'Receiver must be callable, got {type(receiver).__name__}'
            raise TypeError(msg)

        had_receiver = self._receiver is not None
        self._receiver = receiver

        if receiver is None:
            if had_receiver:
                self._log.debug('receiver detached', pending=len(self._queue))
            return

        self._log.debug('receiver attached', pending=len(self._queue), replaced=had_receiver)
        self._drain(receiver)

    def detach_receiver(self) -> None:
        """Remove the current receiver. Queued events are kept."""
        self.attach_receiver(None)

    def set_paused(self, paused: bool) -> None:
        """Pause or resume delivery.

        While paused every sent event is queued, even with a receiver attached.
        Resuming drains the queue to the current receiver, if any.
        """
        self._guard.verify()
        paused = bool(paused)
        if paused == self._paused:
            return

        self._paused = paused
        self._log.debug('relay paused' if paused else 'relay resumed', pending=len(self._queue))

        if not paused and self._receiver is not None:
            self._drain(self._receiver)

    def has_receiver(self) -> bool:
        """Return True if a receiver is currently attached."""
        self._guard.verify()
        return self._receiver is not None

    def is_attached(self, receiver: Receiver[T]) -> bool:
        """Return True if this exact receiver object is the installed one."""
        self._guard.verify()
        return receiver is not None and self._receiver is receiver

    @property
    def paused(self) -> bool:
        self._guard.verify()
        return self._paused

    @property
    def pending(self) -> int:
        """Number of queued, undelivered events."""
        self._guard.verify()
        return len(self._queue)

    def stats(self) -> RelayStats:
        """Return a snapshot of counters and current state."""
        self._guard.verify()
        return RelayStats(
            name=self._name,
            queue_size=len(self._queue),
            capacity=self._limit,
            distinct_only=self._distinct_only,
            paused=self._paused,
            has_receiver=self._receiver is not None,
            created_at=self._created_at,
            high_watermark=self._high_watermark,
            total_sent=self._total_sent,
            total_delivered=self._total_delivered,
            total_dropped=self._total_dropped,
            total_suppressed=self._total_suppressed,
        )

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(name={self._name!r}, pending={len(self._queue)}, '
            f'paused={self._paused}, has_receiver={self._receiver is not None})'
        )

    # --- State machine ---

    def _can_emit(self) -> bool:
        return self._receiver is not None and not self._emitting and not self._paused

    def _enqueue(self, event: T) -> None:
        if self._limit is not None and len(self._queue) >= self._limit:
            self._total_dropped += 1
            self._log.debug('event dropped', reason='capacity', limit=self._limit)
            return
        self._queue.append(event)
        self._high_watermark = max(self._high_watermark, len(self._queue))

    def _drain(self, target: Receiver[T] | None) -> None:
        """Deliver queued events, following receiver swaps made by callbacks.

        The inner loop stops as soon as the installed receiver is no longer
        the target. The outer loop then retargets to whatever receiver is
        installed now, or stops if there is none.
        """
        while target is not None:
            while self._can_emit() and self._queue and self._receiver is target:
                self._emit(target, self._queue.popleft())

            if self._receiver is target:
                return
            target = self._receiver

    def _emit(self, receiver: Receiver[T], event: T) -> None:
        if self._distinct_only and self._last_delivered is not _NOTHING and event == self._last_delivered:
            self._total_suppressed += 1
            self._log.debug('event suppressed', reason='duplicate')
            return

        self._last_delivered = event
        self._total_delivered += 1
        self._emitting = True
        try:
            receiver(event)
        finally:
            self._emitting = False


class RelayBuilder[T]:
    """Fluent builder for EventRelay.

    Example:
        ```python
        relay = RelayBuilder[str]().distinct_only().limit(16).name('ui').build()
        ```
    """

    def __init__(self) -> None:
        self._distinct_only: bool | None = None
        self._limit: int | None = None
        self._name: str | None = None

    def distinct_only(self, enabled: bool = True) -> RelayBuilder[T]:
        self._distinct_only = enabled
        return self

    def limit(self, limit: int) -> RelayBuilder[T]:
        self._limit = validate_limit(limit)
        return self

    def name(self, name: str) -> RelayBuilder[T]:
        self._name = name
        return self

    def build(self) -> EventRelay[T]:
        """Create the relay. Settings not given fall back to init() defaults."""
        return EventRelay(distinct_only=self._distinct_only, limit=self._limit, name=self._name)
