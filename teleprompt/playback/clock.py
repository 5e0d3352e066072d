"""Resumable playback clock mapping wall time onto the reading schedule.

The clock is a small state machine::

    IDLE --start--> COUNTDOWN --(ticks elapse)--> RUNNING --(target)--> FINISHED
                        ^  |                         |                     |
                        |  +--pause--> PAUSED <--pause-------------------+
                        +--resume/restart--+

``exit`` returns to IDLE from anywhere. Commands that are not valid in the
current state are rejected by returning ``False``.

While running, ``elapsed_ms == now - anchor``. While paused the anchor is
dropped and elapsed time is frozen; it stays frozen through the resume
countdown and is re-anchored only when that countdown completes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from teleprompt.domain import PlaybackState
from teleprompt.pacing.schedule import Schedule
from teleprompt.playback.timers import TimerHandle, TimerQueue
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

TransitionListener = Callable[[PlaybackState, PlaybackState], None]
CountdownListener = Callable[[int], None]

NOT_STARTED = -1


class PlaybackClock:
    """Drives the current token index from wall-clock time."""

    def __init__(
        self,
        schedule: Schedule,
        timers: TimerQueue,
        *,
        countdown_ticks: int = 3,
        countdown_interval_ms: float = 1000.0,
        on_transition: TransitionListener | None = None,
        on_countdown: CountdownListener | None = None,
    ) -> None:
        if countdown_ticks < 0:
            raise ValueError("countdown_ticks must be non-negative.")
        if countdown_interval_ms <= 0:
            raise ValueError("countdown_interval_ms must be positive.")
        self._schedule = schedule
        self._timers = timers
        self._countdown_ticks = countdown_ticks
        self._countdown_interval_ms = float(countdown_interval_ms)
        self._on_transition = on_transition
        self._on_countdown = on_countdown

        self._state = PlaybackState.IDLE
        self._anchor_wall_time: float | None = None
        self._elapsed_ms = 0.0
        self._current_index = NOT_STARTED
        self._paused_scroll_offset = 0.0

        self._countdown: int | None = None
        self._countdown_handle: TimerHandle | None = None
        self._countdown_generation = 0
        self._resume_after_countdown = False

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    @property
    def elapsed_ms(self) -> float:
        """Last sampled elapsed time; frozen while not running."""
        return self._elapsed_ms

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def countdown(self) -> int | None:
        """Remaining countdown ticks, or ``None`` outside a countdown."""
        return self._countdown

    @property
    def anchor_wall_time(self) -> float | None:
        return self._anchor_wall_time

    @property
    def paused_scroll_offset(self) -> float:
        return self._paused_scroll_offset

    @property
    def is_running(self) -> bool:
        return self._state in (PlaybackState.RUNNING, PlaybackState.FINISHED)

    def set_schedule(self, schedule: Schedule) -> None:
        """Swaps in a rebuilt schedule; the index is re-resolved on next sample."""
        self._schedule = schedule
        if self._current_index > schedule.last_index:
            self._current_index = schedule.last_index

    def start(self) -> bool:
        """Begins the pre-roll countdown from the top of the script."""
        if self._state is not PlaybackState.IDLE:
            return self._reject("start")
        if len(self._schedule) == 0:
            logger.info("Nothing to play: the script has no words.")
            return False
        self._elapsed_ms = 0.0
        self._current_index = 0
        self._paused_scroll_offset = 0.0
        self._begin_countdown(resume=False)
        return True

    def pause(
        self, scroll_offset: float | None = None, now: float | None = None
    ) -> bool:
        """Freezes elapsed time, or cancels a countdown in progress.

        ``scroll_offset`` is the renderer's current offset, kept so the view
        can be restored exactly when playback resumes. ``now`` must be the
        time that offset was computed for, so both describe the same instant.
        """
        if self._state is PlaybackState.COUNTDOWN:
            self._cancel_countdown()
        elif self.is_running:
            self.sample(now)
            self._anchor_wall_time = None
        else:
            return self._reject("pause")
        if scroll_offset is not None:
            self._paused_scroll_offset = max(0.0, float(scroll_offset))
        self._set_state(PlaybackState.PAUSED)
        return True

    def resume(self) -> bool:
        """Runs a fresh countdown, then continues from the frozen elapsed time."""
        if self._state is not PlaybackState.PAUSED or self._current_index < 0:
            return self._reject("resume")
        self._begin_countdown(resume=True)
        return True

    def restart(self) -> bool:
        """Resets progress to zero and runs a fresh countdown."""
        if self._state is PlaybackState.IDLE:
            return self._reject("restart")
        if len(self._schedule) == 0:
            logger.info("Nothing to play: the script has no words.")
            return False
        self._cancel_countdown()
        self._anchor_wall_time = None
        self._elapsed_ms = 0.0
        self._current_index = 0
        self._paused_scroll_offset = 0.0
        self._begin_countdown(resume=False)
        return True

    def exit(self) -> None:
        """Stops playback and returns to the not-started state."""
        self._cancel_countdown()
        self._anchor_wall_time = None
        self._elapsed_ms = 0.0
        self._current_index = NOT_STARTED
        self._paused_scroll_offset = 0.0
        self._set_state(PlaybackState.IDLE)

    def sample(self, now: float | None = None) -> float:
        """Advances elapsed time and the current index to ``now``.

        Outside RUNNING/FINISHED this only returns the frozen elapsed time.
        Elapsed time keeps growing past the target; the index stays on the
        last token.
        """
        if not self.is_running or self._anchor_wall_time is None:
            return self._elapsed_ms
        if now is None:
            now = self._timers.now()
        self._elapsed_ms = max(0.0, now - self._anchor_wall_time)
        self._current_index = self._schedule.word_index_at(self._elapsed_ms)
        if (
            self._state is PlaybackState.RUNNING
            and self._elapsed_ms >= self._schedule.target_ms
        ):
            self._set_state(PlaybackState.FINISHED)
        return self._elapsed_ms

    def _begin_countdown(self, *, resume: bool) -> None:
        self._countdown_generation += 1
        generation = self._countdown_generation
        self._resume_after_countdown = resume
        self._anchor_wall_time = None
        self._countdown = self._countdown_ticks
        self._set_state(PlaybackState.COUNTDOWN)

        if self._countdown_ticks == 0:
            self._finish_countdown()
            return
        self._notify_countdown()
        self._arm_countdown(generation, self._timers.now() + self._countdown_interval_ms)

    def _arm_countdown(self, generation: int, deadline_ms: float) -> None:
        self._countdown_handle = self._timers.call_at(
            deadline_ms,
            lambda: self._on_countdown_tick(generation, deadline_ms),
        )

    def _on_countdown_tick(self, generation: int, deadline_ms: float) -> None:
        if (
            generation != self._countdown_generation
            or self._state is not PlaybackState.COUNTDOWN
            or self._countdown is None
        ):
            logger.debug("Ignoring stale countdown tick.")
            return
        self._countdown -= 1
        if self._countdown > 0:
            self._notify_countdown()
            self._arm_countdown(generation, deadline_ms + self._countdown_interval_ms)
            return
        self._finish_countdown()

    def _finish_countdown(self) -> None:
        self._countdown = None
        self._countdown_handle = None
        now = self._timers.now()
        if self._resume_after_countdown:
            self._anchor_wall_time = now - self._elapsed_ms
            self._current_index = self._schedule.word_index_at(self._elapsed_ms)
        else:
            self._anchor_wall_time = now
            self._elapsed_ms = 0.0
            self._current_index = 0
        self._set_state(PlaybackState.RUNNING)
        logger.debug(
            "Playback running from %.0f ms at token %d.",
            self._elapsed_ms,
            self._current_index,
        )

    def _cancel_countdown(self) -> None:
        self._countdown_generation += 1
        if self._countdown_handle is not None:
            self._countdown_handle.cancel()
            self._countdown_handle = None
        self._countdown = None

    def _notify_countdown(self) -> None:
        if self._on_countdown is not None and self._countdown is not None:
            self._on_countdown(self._countdown)

    def _set_state(self, state: PlaybackState) -> None:
        previous = self._state
        self._state = state
        if previous is not state:
            logger.debug("Playback %s -> %s", previous.value, state.value)
            if self._on_transition is not None:
                self._on_transition(previous, state)

    def _reject(self, command: str) -> bool:
        logger.debug("Ignoring %s while %s.", command, self._state.value)
        return False
