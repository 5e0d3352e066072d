"""Tests for the cooperative timer queue."""

from teleprompt.playback.timers import TimerQueue


def test_callbacks_fire_in_deadline_order_when_due(fake_clock) -> None:
    """Only due callbacks run, ordered by deadline then scheduling order."""
    timers = TimerQueue(fake_clock)
    fired: list[str] = []
    timers.call_later(200, lambda: fired.append("late"))
    timers.call_later(100, lambda: fired.append("early"))
    timers.call_at(100, lambda: fired.append("tie"))

    assert timers.run_due() == 0

    fake_clock.advance(150)
    assert timers.run_due() == 2
    assert fired == ["early", "tie"]

    fake_clock.advance(50)
    timers.run_due()
    assert fired == ["early", "tie", "late"]
    assert timers.pending() == 0


def test_cancelled_callbacks_never_fire(fake_clock) -> None:
    """A cancelled handle is skipped when its deadline passes."""
    timers = TimerQueue(fake_clock)
    fired: list[int] = []
    handle = timers.call_later(10, lambda: fired.append(1))

    handle.cancel()
    fake_clock.advance(100)

    assert timers.run_due() == 0
    assert fired == []
    assert handle.cancelled


def test_callbacks_scheduled_while_running_fire_in_same_pump(fake_clock) -> None:
    """Chained deadlines that are already due run within one ``run_due``."""
    timers = TimerQueue(fake_clock)
    fired: list[int] = []

    def first() -> None:
        fired.append(1)
        timers.call_at(20, lambda: fired.append(2))

    timers.call_at(10, first)
    fake_clock.advance(30)

    assert timers.run_due() == 2
    assert fired == [1, 2]


def test_clear_drops_everything(fake_clock) -> None:
    """Clearing the queue drops every pending callback."""
    timers = TimerQueue(fake_clock)
    timers.call_later(5, lambda: None)
    timers.call_later(6, lambda: None)

    timers.clear()
    fake_clock.advance(10)

    assert timers.pending() == 0
    assert timers.run_due() == 0
