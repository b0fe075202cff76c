"""Receiver protocol: the single-method consumer capability.

Uses PEP 695 type parameter syntax (Python 3.12+); type checkers infer
Receiver[T] as contravariant since T only appears in input position.
"""

from __future__ import annotations

from typing import Protocol

__all__ = ['Receiver']


class Receiver[T](Protocol):
    """Consumer attached to an EventRelay.

    Any callable taking one event qualifies: functions, lambdas, bound
    methods or objects defining ``__call__``. The relay compares receivers
    by identity, so keep a reference if you want to re-attach the same one.

    A receiver may call back into the relay (send, attach, detach, pause)
    while it runs; events sent from inside a receiver are buffered and
    delivered after it returns.
    """

    def __call__(self, event: T, /) -> None:
        """Handle one delivered event."""
        ...
