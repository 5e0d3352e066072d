"""Terminal rehearsal: a minimal renderer driving a session in real time.

The script is laid out as wrapped terminal rows. One row is one unit of the
position snapshot, so a token on row ``r`` has ``top == r`` and
``center == r + 0.5``, and the session's scroll offset is measured in rows.
"""

from __future__ import annotations

import logging
import shutil
import sys
import time
from collections.abc import Callable
from typing import TextIO

from colored import attr, bg, fg

from teleprompt.domain import Frame, PlaybackState, TokenPosition
from teleprompt.session import TeleprompterSession
from teleprompt.utils.common_utils import format_clock
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class TerminalRenderer:
    """Lays out session tokens in rows and draws the visible window."""

    def __init__(
        self,
        viewport_rows: int,
        width: int | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.viewport_rows = max(1, viewport_rows)
        self.width = width
        self.out = out or sys.stdout
        self.session: TeleprompterSession | None = None
        self.rows: list[str | list[int]] = []
        self._last_drawn: tuple | None = None

    def bind(self, session: TeleprompterSession) -> None:
        self.session = session

    def _line_width(self) -> int:
        if self.width:
            return self.width
        return max(20, shutil.get_terminal_size((80, 24)).columns - 2)

    def measure(self) -> dict[int, TokenPosition]:
        """Lays the script out again and returns each token's row position.

        Speaker names take a row of their own; each section and each script
        line starts a new row and long lines wrap at the terminal width.
        """
        self.rows = []
        positions: dict[int, TokenPosition] = {}
        if self.session is None:
            return positions

        width = self._line_width()
        tokens = self.session.tokens
        for section in self.session.sections:
            if section.speaker:
                self.rows.append(f"[{section.speaker}]")
            current: list[int] = []
            used = 0
            for index in range(section.start_index, section.end_index + 1):
                token = tokens[index]
                needed = len(token.text) + (1 if current else 0)
                if current and (token.is_line_start or used + needed > width):
                    self.rows.append(current)
                    current, used = [], 0
                    needed = len(token.text)
                current.append(index)
                used += needed
            if current:
                self.rows.append(current)

        for row_number, row in enumerate(self.rows):
            if isinstance(row, list):
                for index in row:
                    positions[index] = TokenPosition(
                        top=float(row_number), center=row_number + 0.5
                    )
        logger.debug("Laid out %d rows for %d tokens.", len(self.rows), len(positions))
        return positions

    def _render_word(self, index: int, current_index: int) -> str:
        assert self.session is not None
        token = self.session.tokens[index]
        style = ""
        if token.bold:
            style += attr("bold")
        if token.italic:
            style += attr("italic")
        if index == current_index:
            return f"{style}{fg('black')}{bg('yellow')}{token.text}{attr('reset')}"
        if index < current_index:
            return f"{style}{fg('dark_gray')}{token.text}{attr('reset')}"
        return f"{style}{token.text}{attr('reset')}" if style else token.text

    def header(self, frame: Frame) -> str:
        assert self.session is not None
        progress = f"{max(0, frame.current_index + 1)}/{self.session.word_count}"
        return (
            f"{format_clock(frame.elapsed_ms)} / {format_clock(self.session.target_ms)}"
            f"  {progress}  {self.session.average_wpm} WPM  [{frame.state.value}]"
        )

    def draw(self, frame: Frame) -> None:
        """Redraws the window when the visible row or the current word changes."""
        if self.session is None:
            return
        if not self.rows:
            self.measure()
        top_row = int(frame.scroll_offset)
        key = (top_row, frame.current_index, frame.countdown, frame.state, int(frame.elapsed_ms // 1000))
        if key == self._last_drawn:
            return
        self._last_drawn = key

        lines = [CLEAR_SCREEN + self.header(frame), ""]
        if frame.countdown is not None:
            lines.append(f"{fg('green')}{attr('bold')}{frame.countdown}{attr('reset')}")
        for row in self.rows[top_row:top_row + self.viewport_rows]:
            if isinstance(row, str):
                lines.append(f"{fg('cyan')}{row}{attr('reset')}")
            else:
                lines.append(" ".join(self._render_word(i, frame.current_index) for i in row))
        self.out.write("\n".join(lines) + "\n")
        self.out.flush()


def rehearse(
    session: TeleprompterSession,
    renderer: TerminalRenderer,
    *,
    frame_interval: float,
    sleep: Callable[[float], None] = time.sleep,
) -> Frame | None:
    """Plays ``session`` to the end of its schedule, drawing every frame.

    Returns the final frame, or ``None`` when there is nothing to play.
    Ctrl+C stops playback early.
    """
    if not session.start():
        return None

    frame: Frame | None = None
    try:
        while True:
            frame = session.tick()
            renderer.draw(frame)
            if frame.state is PlaybackState.FINISHED:
                logger.info(
                    "Rehearsal finished after %s.", format_clock(frame.elapsed_ms)
                )
                break
            sleep(frame_interval)
    except KeyboardInterrupt:
        logger.info("Rehearsal interrupted.")
    finally:
        session.exit()
    return frame
