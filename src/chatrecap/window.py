"""Recency filtering of parsed messages."""

from __future__ import annotations

from collections.abc import Iterable

from .models import ChatMessage, TimeWindow


def cutoff_millis(window: TimeWindow, now: int) -> int:
    """Oldest timestamp (inclusive) still inside ``window``."""
    return now - window.duration_ms


def filter_messages(
    messages: Iterable[ChatMessage], window: TimeWindow, now: int
) -> list[ChatMessage]:
    """Keep messages no older than ``window`` relative to ``now`` (epoch ms).

    Messages with timestamps after ``now`` are kept.
    """
    cutoff = cutoff_millis(window, now)
    return [m for m in messages if m.timestamp >= cutoff]
