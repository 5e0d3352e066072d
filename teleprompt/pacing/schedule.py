"""Normalization of token weights into an absolute reading schedule."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

import numpy as np

from teleprompt.domain import ScheduleEntry, Token
from teleprompt.pacing.weights import token_weights
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Schedule:
    """Per-token start offsets and durations in milliseconds.

    Immutable; any change to the script, target, or speeds builds a new one.

    Attributes:
        start_offsets_ms: Cumulative start offset of each token.
        durations_ms: Allotted duration of each token.
        target_ms: Target duration the durations were normalized to.
    """

    start_offsets_ms: np.ndarray
    durations_ms: np.ndarray
    target_ms: float

    def __len__(self) -> int:
        return int(self.durations_ms.shape[0])

    def __getitem__(self, index: int) -> ScheduleEntry:
        return ScheduleEntry(
            float(self.start_offsets_ms[index]), float(self.durations_ms[index])
        )

    def __iter__(self) -> Iterator[ScheduleEntry]:
        for index in range(len(self)):
            yield self[index]

    @property
    def total_ms(self) -> float:
        """Sum of all token durations."""
        return float(self.durations_ms.sum())

    @property
    def last_index(self) -> int:
        return len(self) - 1

    def word_index_at(self, elapsed_ms: float) -> int:
        """Index of the token active at ``elapsed_ms``.

        A token is active from its own start offset (inclusive). Times before
        the first start resolve to 0 and the result never exceeds the last
        index. Returns -1 for an empty schedule.
        """
        if len(self) == 0:
            return -1
        index = int(np.searchsorted(self.start_offsets_ms, elapsed_ms, side="right")) - 1
        return min(max(index, 0), self.last_index)

    def progress_at(self, index: int, elapsed_ms: float) -> float:
        """Fraction of token ``index``'s duration consumed at ``elapsed_ms``."""
        start, duration = self[index]
        if duration <= 0:
            return 0.0
        return min(max((elapsed_ms - start) / duration, 0.0), 1.0)


def build_schedule(weights: Sequence[float], target_ms: float) -> Schedule:
    """Distributes ``target_ms`` across tokens in proportion to ``weights``.

    Degrades to an all-zero schedule when there are no tokens, the target is
    not positive, or the weights do not sum to a positive value.
    """
    weights_array = np.asarray(weights, dtype=np.float64)
    total_weight = float(weights_array.sum()) if weights_array.size else 0.0

    if weights_array.size == 0 or target_ms <= 0 or total_weight <= 0:
        durations = np.zeros(weights_array.shape[0], dtype=np.float64)
    else:
        durations = weights_array / total_weight * float(target_ms)

    starts = np.zeros_like(durations)
    if durations.size > 1:
        starts[1:] = np.cumsum(durations)[:-1]

    logger.debug(
        "Built schedule for %d tokens over %.0f ms.", durations.size, target_ms
    )
    return Schedule(
        start_offsets_ms=starts,
        durations_ms=durations,
        target_ms=float(max(target_ms, 0)),
    )


def schedule_tokens(
    tokens: Sequence[Token],
    target_ms: float,
    speeds: Mapping[str, float] | None = None,
) -> Schedule:
    """Weights ``tokens`` and normalizes them against ``target_ms``."""
    return build_schedule(token_weights(tokens, speeds), target_ms)


def target_duration_ms(minutes: int, seconds: int) -> int:
    """Target duration from a minutes/seconds input pair.

    Minutes are floored at 0 and seconds clamped to ``[0, 59]``.
    """
    minutes = max(0, int(minutes))
    seconds = min(59, max(0, int(seconds)))
    return (minutes * 60 + seconds) * 1000


def average_wpm(word_count: int, target_ms: float) -> int:
    """Average words per minute implied by the target, rounded half up."""
    if word_count <= 0 or target_ms <= 0:
        return 0
    return int(math.floor(word_count / (target_ms / 60000) + 0.5))
