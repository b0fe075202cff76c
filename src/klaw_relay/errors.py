"""Relay error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

import msgspec

__all__ = [
    'IllegalAccess',
    'IllegalAccessError',
    'InvalidEvent',
    'InvalidEventError',
    'RelayStreamClosed',
    'RelayStreamClosedError',
]


# --- Argument Errors ---


class InvalidEvent(msgspec.Struct, frozen=True, gc=False):
    """Event rejected by send() - struct variant."""

    reason: str | None = None

    def to_exception(self) -> InvalidEventError:
        """Convert to exception for raise-based code."""
        return InvalidEventError(self.reason)


class InvalidEventError(ValueError):
    """Event rejected by send() - exception variant."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or 'None is not allowed as an event')

    def to_struct(self) -> InvalidEvent:
        """Convert to struct for Result-based code."""
        return InvalidEvent(self.reason)


# --- Confinement Errors ---


class IllegalAccess(msgspec.Struct, frozen=True, gc=False):
    """Relay touched from a foreign thread - struct variant."""

    owner_thread: int
    caller_thread: int

    def to_exception(self) -> IllegalAccessError:
        """Convert to exception for raise-based code."""
        return IllegalAccessError(self.owner_thread, self.caller_thread)


class IllegalAccessError(RuntimeError):
    """Relay touched from a foreign thread - exception variant."""

    def __init__(self, owner_thread: int, caller_thread: int) -> None:
        self.owner_thread = owner_thread
        self.caller_thread = caller_thread
        super().__init__(
            'An event relay can only be accessed on the thread where it was created '
            f'(owner={owner_thread}, caller={caller_thread})'
        )

    def to_struct(self) -> IllegalAccess:
        """Convert to struct for Result-based code."""
        return IllegalAccess(self.owner_thread, self.caller_thread)


# --- Stream Errors ---


class RelayStreamClosed(msgspec.Struct, frozen=True, gc=False):
    """Relay stream has been closed - struct variant."""

    reason: str | None = None

    def to_exception(self) -> RelayStreamClosedError:
        """Convert to exception for raise-based code."""
        return RelayStreamClosedError(self.reason)


class RelayStreamClosedError(Exception):
    """Relay stream has been closed - exception variant."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason or 'Relay stream closed')

    def to_struct(self) -> RelayStreamClosed:
        """Convert to struct for Result-based code."""
        return RelayStreamClosed(self.reason)
