"""Async consumption of relay events through an anyio memory object stream.

RelayStream attaches itself as the relay's receiver and forwards every
delivered event into an unbounded anyio memory stream, so a task can consume
events with ``await stream.recv()`` or ``async for``. The relay keeps its
synchronous delivery semantics; the stream only decouples the consumer task
from the delivery call.

Everything must run on the relay's owning thread, i.e. the event loop thread.

Example:
    ```python
    relay: EventRelay[str] = EventRelay()
    relay.send('queued before anyone listened')

    async with open_stream(relay) as stream:
        relay.send('live')
        assert await stream.recv() == 'queued before anyone listened'
        assert await stream.recv() == 'live'
    ```
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Self

import anyio

from klaw_relay.errors import RelayStreamClosed

if TYPE_CHECKING:
    from types import TracebackType

    from klaw_relay.relay import EventRelay

__all__ = ['RelayStream', 'open_stream']


class RelayStream[T]:
    """Receiver that buffers relay events for an async consumer.

    Closing the stream detaches it from the relay (if it is still the
    installed receiver) and stops further forwarding. Items already
    forwarded stay readable through recv()/try_recv() until the stream is
    closed.
    """

    def __init__(self, relay: EventRelay[T]) -> None:
        self._relay = relay
        self._tx, self._rx = anyio.create_memory_object_stream[T](max_buffer_size=math.inf)
        self._closed = False
        relay.attach_receiver(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, event: T) -> None:
        """Forward one delivered event into the memory stream."""
        self._tx.send_nowait(event)

    async def recv(self) -> T:
        """Receive the next event, waiting until one is delivered.

        Raises:
            RelayStreamClosedError: If the stream has been closed.
        """
        try:
            return await self._rx.receive()
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            raise RelayStreamClosed().to_exception() from None

    def try_recv(self) -> T | None:
        """Return the next forwarded event, or None if none is pending.

        Raises:
            RelayStreamClosedError: If the stream has been closed.
        """
        try:
            return self._rx.receive_nowait()
        except anyio.WouldBlock:
            return None
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            raise RelayStreamClosed().to_exception() from None

    def close(self) -> None:
        """Detach from the relay and close both halves of the stream."""
        if self._closed:
            return
        self._closed = True
        self._detach()
        self._tx.close()
        self._rx.close()

    async def aclose(self) -> None:
        """Async variant of close()."""
        self.close()

    def _detach(self) -> None:
        # A newer receiver may have replaced us already; leave it attached.
        if self._relay.is_attached(self):
            self._relay.detach_receiver()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __aiter__(self) -> RelayStream[T]:
        return self

    async def __anext__(self) -> T:
        """Get the next event for ``async for``; stops when the stream is closed."""
        try:
            return await self._rx.receive()
        except (anyio.EndOfStream, anyio.ClosedResourceError):
            raise StopAsyncIteration from None


def open_stream[T](relay: EventRelay[T]) -> RelayStream[T]:
    """Attach a new RelayStream to the relay and return it."""
    return RelayStream(relay)
