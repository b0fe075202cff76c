"""Thread confinement guard for relay objects."""

from __future__ import annotations

import threading

from klaw_relay.errors import IllegalAccess

__all__ = ['ThreadConfinement']


class ThreadConfinement:
    """Pins an object to the thread that created it.

    The relay state machine has no locking; every public operation checks
    in here first and is rejected when called from any other thread.
    """

    __slots__ = ('_owner',)

    def __init__(self) -> None:
        self._owner: int = threading.get_ident()

    @property
    def owner(self) -> int:
        """Identifier of the owning thread."""
        return self._owner

    def is_owner(self) -> bool:
        """Return True when called on the owning thread."""
        return threading.get_ident() == self._owner

    def verify(self) -> None:
        """Raise unless called on the owning thread.

        Raises:
            IllegalAccessError: If the caller runs on a different thread.
        """
        caller = threading.get_ident()
        if caller != self._owner:
            raise IllegalAccess(self._owner, caller).to_exception()
