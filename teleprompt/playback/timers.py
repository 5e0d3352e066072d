"""Single-threaded delayed callbacks pumped by the playback tick loop."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable

TimeSource = Callable[[], float]


class TimerHandle:
    """A pending callback that can be cancelled before it fires."""

    __slots__ = ("deadline_ms", "_callback", "_cancelled")

    def __init__(self, deadline_ms: float, callback: Callable[[], None]) -> None:
        self.deadline_ms = deadline_ms
        self._callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _run(self) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._callback()


class TimerQueue:
    """Deadline-ordered callbacks run only when the owner calls ``run_due``.

    Callbacks never run concurrently with the caller: they execute inside
    ``run_due`` in deadline order, with ties broken by scheduling order.
    """

    def __init__(self, time_source: TimeSource) -> None:
        self._time_source = time_source
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._time_source()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        return self.call_at(self.now() + max(0.0, delay_ms), callback)

    def call_at(self, deadline_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(deadline_ms, callback)
        heapq.heappush(self._heap, (handle.deadline_ms, next(self._sequence), handle))
        return handle

    def run_due(self, now: float | None = None) -> int:
        """Fires every live callback whose deadline is at or before ``now``.

        Returns the number of callbacks that ran.
        """
        if now is None:
            now = self.now()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle._run()
            fired += 1
        return fired

    def pending(self) -> int:
        """Number of scheduled callbacks that have not been cancelled."""
        return sum(1 for _, _, handle in self._heap if not handle.cancelled)

    def clear(self) -> None:
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap.clear()
