"""Relay statistics snapshot."""

from __future__ import annotations

from datetime import datetime

import msgspec

__all__ = ['RelayStats']


class RelayStats(msgspec.Struct, frozen=True, gc=False):
    """Statistics snapshot for an event relay."""

    name: str | None
    queue_size: int
    capacity: int | None
    distinct_only: bool
    paused: bool
    has_receiver: bool
    created_at: datetime
    high_watermark: int
    total_sent: int
    total_delivered: int
    total_dropped: int
    total_suppressed: int
