"""Continuous scroll offset interpolated between measured token positions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from teleprompt.domain import TokenPosition
from teleprompt.pacing.schedule import Schedule

PositionSnapshot = Mapping[int, TokenPosition]


def snapshot_from_sequence(positions: Sequence[TokenPosition | None]) -> dict[int, TokenPosition]:
    """Builds a snapshot from a per-index list, skipping unmeasured entries."""
    return {
        index: position
        for index, position in enumerate(positions)
        if position is not None
    }


class ScrollProjector:
    """Keeps the active token vertically centered in the viewport.

    The snapshot is supplied by the renderer when playback enters RUNNING and
    is not refreshed by the projector itself.
    """

    def __init__(
        self,
        schedule: Schedule,
        positions: PositionSnapshot,
        viewport_height: float,
    ) -> None:
        self.schedule = schedule
        self.positions = dict(positions)
        self.viewport_height = float(viewport_height)

    def center_of(self, index: int) -> float:
        """Center of token ``index``, falling back to the nearest earlier
        measured token and finally to 0."""
        for candidate in range(index, -1, -1):
            position = self.positions.get(candidate)
            if position is not None:
                return float(position.center)
        return 0.0

    def progress_at(self, elapsed_ms: float) -> float:
        index = self.schedule.word_index_at(elapsed_ms)
        if index < 0:
            return 0.0
        return self.schedule.progress_at(index, elapsed_ms)

    def offset_at(self, elapsed_ms: float) -> float:
        """Scroll offset in pixels for ``elapsed_ms``, never negative.

        Elapsed time beyond the target is capped so the view rests on the
        final position.
        """
        if not self.positions or len(self.schedule) == 0:
            return 0.0

        elapsed_ms = min(elapsed_ms, self.schedule.target_ms)
        current = self.schedule.word_index_at(elapsed_ms)
        following = min(current + 1, self.schedule.last_index)
        progress = self.schedule.progress_at(current, elapsed_ms)

        current_center = self.center_of(current)
        next_center = self.center_of(following)
        interpolated = current_center + (next_center - current_center) * progress

        return max(0.0, interpolated - self.viewport_height / 2)
