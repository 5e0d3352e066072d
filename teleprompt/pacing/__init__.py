"""Weighting and scheduling of script tokens against a target duration."""

from .schedule import (
    Schedule,
    average_wpm,
    build_schedule,
    schedule_tokens,
    target_duration_ms,
)
from .weights import clean_word, estimate_syllables, token_weights, word_weight

__all__ = [
    "Schedule",
    "average_wpm",
    "build_schedule",
    "clean_word",
    "estimate_syllables",
    "schedule_tokens",
    "target_duration_ms",
    "token_weights",
    "word_weight",
]
