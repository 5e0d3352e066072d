"""Teleprompter session: the programmatic surface used by renderers.

A session owns the script, target duration, and per-speaker settings. Any
change to them rebuilds the token list and schedule from scratch. Playback
commands are forwarded to a :class:`PlaybackClock`, and every call to
:meth:`TeleprompterSession.tick` pumps pending countdown timers, samples the
clock, and projects the scroll offset.

The renderer supplies two callables: ``measure_positions`` returns the
current token position snapshot and ``viewport_height`` the visible height.
Positions are re-measured each time playback enters RUNNING (after start,
resume, or restart) because the layout may have changed while paused.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

from teleprompt.config import AppConfig, get_settings
from teleprompt.domain import Frame, PlaybackState, Section, Token
from teleprompt.pacing.schedule import (
    Schedule,
    average_wpm,
    schedule_tokens,
    target_duration_ms,
)
from teleprompt.pacing.weights import speaker_speed
from teleprompt.playback.clock import PlaybackClock
from teleprompt.playback.scroll import PositionSnapshot, ScrollProjector
from teleprompt.playback.timers import TimeSource, TimerQueue
from teleprompt.script.parser import ParsedScript, build_script
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

DEFAULT_PALETTE: tuple[str, ...] = (
    "#646cff",
    "#ff6b6b",
    "#4ecdc4",
    "#ffe66d",
    "#a855f7",
    "#f97316",
    "#22c55e",
    "#ec4899",
    "#06b6d4",
    "#eab308",
)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _no_positions() -> PositionSnapshot:
    return {}


class TeleprompterSession:
    """Script, pacing settings, and playback state for one teleprompter."""

    def __init__(
        self,
        script: str = "",
        *,
        minutes: int | None = None,
        seconds: int | None = None,
        speaker_speeds: Mapping[str, float] | None = None,
        speaker_colors: Mapping[str, str] | None = None,
        measure_positions: Callable[[], PositionSnapshot] | None = None,
        viewport_height: Callable[[], float] | float = 0.0,
        time_source: TimeSource | None = None,
        settings: AppConfig | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._script = script
        self._minutes = self._settings.target.minutes if minutes is None else minutes
        self._seconds = self._settings.target.seconds if seconds is None else seconds
        self._target_ms = target_duration_ms(self._minutes, self._seconds)
        self._speeds: dict[str, float] = {}
        self._colors: dict[str, str] = dict(speaker_colors or {})
        for speaker, speed in (speaker_speeds or {}).items():
            self._speeds[speaker] = self._validate_speed(speaker, speed)

        self._measure_positions = measure_positions or _no_positions
        self._viewport_height = viewport_height
        self.timers = TimerQueue(time_source or _monotonic_ms)

        self._parsed: ParsedScript = build_script(script)
        self._schedule: Schedule = schedule_tokens(
            self._parsed.tokens, self._target_ms, self._speeds
        )
        playback = self._settings.playback
        self._clock = PlaybackClock(
            self._schedule,
            self.timers,
            countdown_ticks=playback.countdown_ticks,
            countdown_interval_ms=playback.countdown_interval_seconds * 1000.0,
            on_transition=self._on_transition,
        )
        self._projector: ScrollProjector | None = None
        self._scroll_offset = 0.0

    # Inputs

    @property
    def script(self) -> str:
        return self._script

    def set_script(self, script: str) -> None:
        self._script = script
        self._parsed = build_script(script)
        self._rebuild_schedule()

    @property
    def target(self) -> tuple[int, int]:
        """Clamped ``(minutes, seconds)`` of the target duration."""
        return max(0, int(self._minutes)), min(59, max(0, int(self._seconds)))

    def set_target(self, minutes: int, seconds: int) -> None:
        self._minutes, self._seconds = minutes, seconds
        self._target_ms = target_duration_ms(minutes, seconds)
        self._rebuild_schedule()

    def speaker_speed(self, speaker: str | None) -> float:
        return speaker_speed(self._speeds, speaker)

    def set_speaker_speed(self, speaker: str, speed: float) -> None:
        self._speeds[speaker] = self._validate_speed(speaker, speed)
        self._rebuild_schedule()

    @property
    def speaker_speeds(self) -> dict[str, float]:
        return dict(self._speeds)

    def speaker_color(self, speaker: str | None) -> str:
        """Explicit color if set, otherwise the palette entry by speaker order."""
        if speaker is not None and speaker in self._colors:
            return self._colors[speaker]
        speakers = self.speakers
        if speaker is None or speaker not in speakers:
            return DEFAULT_PALETTE[0]
        return DEFAULT_PALETTE[speakers.index(speaker) % len(DEFAULT_PALETTE)]

    def set_speaker_color(self, speaker: str, color: str) -> None:
        self._colors[speaker] = color

    @property
    def speaker_colors(self) -> dict[str, str]:
        return dict(self._colors)

    # Derived data

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._parsed.tokens

    @property
    def sections(self) -> tuple[Section, ...]:
        return self._parsed.sections

    @property
    def speakers(self) -> list[str]:
        return self._parsed.speakers

    @property
    def word_count(self) -> int:
        return len(self._parsed.tokens)

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    @property
    def target_ms(self) -> int:
        return self._target_ms

    @property
    def average_wpm(self) -> int:
        return average_wpm(self.word_count, self._target_ms)

    # Playback

    @property
    def clock(self) -> PlaybackClock:
        return self._clock

    @property
    def state(self) -> PlaybackState:
        return self._clock.state

    def start(self) -> bool:
        return self._clock.start()

    def pause(self) -> bool:
        now = self.timers.now()
        if self._clock.is_running:
            elapsed = self._clock.sample(now)
            if self._projector is not None:
                self._scroll_offset = self._projector.offset_at(elapsed)
        return self._clock.pause(scroll_offset=self._scroll_offset, now=now)

    def resume(self) -> bool:
        return self._clock.resume()

    def restart(self) -> bool:
        return self._clock.restart()

    def exit(self) -> None:
        self._clock.exit()

    def tick(self) -> Frame:
        """Runs due timers, samples the clock, and returns the frame to draw."""
        self.timers.run_due()
        elapsed = self._clock.sample()

        if self._clock.is_running and self._projector is not None:
            self._scroll_offset = self._projector.offset_at(elapsed)
        elif self._clock.state in (PlaybackState.PAUSED, PlaybackState.COUNTDOWN):
            self._scroll_offset = self._clock.paused_scroll_offset
        else:
            self._scroll_offset = 0.0

        return Frame(
            state=self._clock.state,
            current_index=self._clock.current_index,
            elapsed_ms=elapsed,
            scroll_offset=self._scroll_offset,
            countdown=self._clock.countdown,
        )

    def _current_viewport_height(self) -> float:
        if callable(self._viewport_height):
            return float(self._viewport_height())
        return float(self._viewport_height)

    def _on_transition(self, previous: PlaybackState, state: PlaybackState) -> None:
        if state is PlaybackState.RUNNING and previous is PlaybackState.COUNTDOWN:
            self._projector = ScrollProjector(
                self._schedule,
                self._measure_positions(),
                self._current_viewport_height(),
            )
            self._scroll_offset = self._projector.offset_at(self._clock.elapsed_ms)
        elif state is PlaybackState.IDLE:
            self._projector = None
            self._scroll_offset = 0.0

    def _rebuild_schedule(self) -> None:
        self._schedule = schedule_tokens(
            self._parsed.tokens, self._target_ms, self._speeds
        )
        self._clock.set_schedule(self._schedule)
        if self._projector is not None:
            self._projector.schedule = self._schedule
        logger.info(
            "Rescheduled %d words over %d ms (%d WPM).",
            self.word_count,
            self._target_ms,
            self.average_wpm,
        )

    def _validate_speed(self, speaker: str, speed: float) -> float:
        speed = float(speed)
        if speed <= 0:
            raise ValueError(f"Speed for {speaker!r} must be positive, got {speed}.")
        bounds = self._settings.speed
        if not bounds.recommended_min <= speed <= bounds.recommended_max:
            logger.warning(
                "Speed %.2f for %s is outside the recommended range %.2f-%.2f.",
                speed,
                speaker,
                bounds.recommended_min,
                bounds.recommended_max,
            )
        return speed
