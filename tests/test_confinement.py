"""Tests for thread confinement of relays."""

from __future__ import annotations

import threading
from typing import Any

import pytest
from klaw_relay import EventRelay, IllegalAccess, IllegalAccessError
from klaw_relay._confinement import ThreadConfinement


def _call_from_other_thread(fn: Any) -> BaseException | None:
    """Run fn on a new thread and return whatever it raised."""
    caught: list[BaseException] = []

    def target() -> None:
        try:
            fn()
        except BaseException as exc:  # noqa: BLE001
            caught.append(exc)

    thread = threading.Thread(target=target)
    thread.start()
    thread.join()
    return caught[0] if caught else None


class TestThreadConfinement:
    """Tests for the ThreadConfinement guard."""

    def test_owner_is_creating_thread(self) -> None:
        guard = ThreadConfinement()
        assert guard.owner == threading.get_ident()
        assert guard.is_owner()
        guard.verify()

    def test_verify_from_other_thread_raises(self) -> None:
        guard = ThreadConfinement()
        exc = _call_from_other_thread(guard.verify)
        assert isinstance(exc, IllegalAccessError)
        assert exc.owner_thread == guard.owner
        assert exc.caller_thread != guard.owner


class TestRelayConfinement:
    """Every relay operation is rejected off the owning thread."""

    @pytest.mark.parametrize(
        'operation',
        [
            lambda relay: relay.send(1),
            lambda relay: relay.attach_receiver(print),
            lambda relay: relay.detach_receiver(),
            lambda relay: relay.set_paused(True),
            lambda relay: relay.has_receiver(),
            lambda relay: relay.pending,
            lambda relay: relay.stats(),
            lambda relay: relay.name,
            lambda relay: relay.distinct_only,
            lambda relay: relay.limit,
            lambda relay: relay.paused,
        ],
        ids=['send', 'attach', 'detach', 'pause', 'has_receiver', 'pending', 'stats', 'name', 'distinct_only', 'limit', 'paused'],
    )
    def test_foreign_thread_is_rejected(self, operation: Any) -> None:
        relay: EventRelay[int] = EventRelay()
        exc = _call_from_other_thread(lambda: operation(relay))
        assert isinstance(exc, IllegalAccessError)
        assert 'thread where it was created' in str(exc)

    def test_rejected_send_leaves_state_untouched(self) -> None:
        relay: EventRelay[int] = EventRelay()
        _call_from_other_thread(lambda: relay.send(1))
        assert relay.pending == 0
        assert relay.stats().total_sent == 0

    def test_relay_created_on_worker_thread_belongs_to_it(self) -> None:
        created: list[EventRelay[int]] = []
        thread = threading.Thread(target=lambda: created.append(EventRelay()))
        thread.start()
        thread.join()

        with pytest.raises(IllegalAccessError):
            created[0].send(1)


class TestIllegalAccessConversion:
    """Struct and exception variants convert into each other."""

    def test_roundtrip(self) -> None:
        struct = IllegalAccess(owner_thread=1, caller_thread=2)
        exc = struct.to_exception()
        assert isinstance(exc, RuntimeError)
        assert exc.to_struct() == struct
