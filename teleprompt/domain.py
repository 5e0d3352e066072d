"""Domain data structures for scripts, schedules, and playback frames."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Token(NamedTuple):
    """One whitespace-delimited word with resolved formatting flags."""

    text: str
    bold: bool = False
    italic: bool = False
    is_line_start: bool = False
    speaker: str | None = None


class Section(NamedTuple):
    """A contiguous run of token indices attributed to one speaker.

    ``end_index`` is inclusive.
    """

    speaker: str | None
    start_index: int
    end_index: int
    content: str = ""


class ScheduleEntry(NamedTuple):
    """Allotted start offset and duration of one token, in milliseconds."""

    start_offset_ms: float
    duration_ms: float


class TokenPosition(NamedTuple):
    """Rendered position of a token relative to the scroll content."""

    top: float
    center: float


class TimelineEntry(NamedTuple):
    """A printable schedule row."""

    index: int
    start_seconds: float
    duration_seconds: float
    speaker: str
    word: str


class PlaybackState(str, Enum):
    """States of the playback clock."""

    IDLE = "idle"
    COUNTDOWN = "countdown"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class Frame(NamedTuple):
    """Per-tick output handed to the renderer."""

    state: PlaybackState
    current_index: int
    elapsed_ms: float
    scroll_offset: float
    countdown: int | None = None
