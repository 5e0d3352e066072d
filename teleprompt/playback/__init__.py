"""Playback clock, countdown timers, and scroll projection."""

from .clock import PlaybackClock
from .scroll import ScrollProjector, snapshot_from_sequence
from .timers import TimerHandle, TimerQueue

__all__ = [
    "PlaybackClock",
    "ScrollProjector",
    "TimerHandle",
    "TimerQueue",
    "snapshot_from_sequence",
]
