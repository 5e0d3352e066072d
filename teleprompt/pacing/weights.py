"""Relative time-cost estimates for script tokens.

A token's weight grows with its syllable count and length, gains a pause
bonus for trailing punctuation and for a following line break, and is divided
by its speaker's speed multiplier. Weights are unitless; the schedule builder
normalizes them against the target duration.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from teleprompt.domain import Token

VOWELS = "aeiouy"

SYLLABLE_FACTOR = 0.7
LENGTH_FACTOR = 0.3
SENTENCE_PAUSE = 1.5
CLAUSE_PAUSE = 0.8
LINE_BREAK_PAUSE = 1.0

DEFAULT_SPEED = 1.0

_NON_LETTER_RE = re.compile(r"[^a-zA-Z]")
_SENTENCE_END_RE = re.compile(r"[.!?]$")
_CLAUSE_END_RE = re.compile(r"[,;:\u2014\u2013]$")


def clean_word(word: str) -> str:
    """Drops every character that is not an ASCII letter."""
    return _NON_LETTER_RE.sub("", word)


def estimate_syllables(word: str) -> int:
    """Estimates the syllable count of ``word``.

    Counts vowel runs, then applies the silent-e and consonant-"le"
    corrections in that order. Words of three letters or fewer count as one.
    """
    word = clean_word(word.lower())
    if len(word) <= 3:
        return 1

    count = 0
    previous_was_vowel = False
    for char in word:
        is_vowel = char in VOWELS
        if is_vowel and not previous_was_vowel:
            count += 1
        previous_was_vowel = is_vowel

    if word.endswith("e") and count > 1:
        count -= 1
    if word.endswith("le") and len(word) > 2 and word[-3] not in VOWELS:
        count += 1

    return max(1, count)


def word_weight(word: str, before_line_break: bool = False) -> float:
    """Weight of one display word before speaker speed is applied."""
    cleaned = clean_word(word)
    syllables = estimate_syllables(cleaned)
    length_factor = max(1.0, len(cleaned) / 4)

    weight = syllables * SYLLABLE_FACTOR + length_factor * LENGTH_FACTOR

    if _SENTENCE_END_RE.search(word):
        weight += SENTENCE_PAUSE
    elif _CLAUSE_END_RE.search(word):
        weight += CLAUSE_PAUSE

    if before_line_break:
        weight += LINE_BREAK_PAUSE

    return weight


def speaker_speed(speeds: Mapping[str, float] | None, speaker: str | None) -> float:
    """Speed multiplier of ``speaker``; unset or non-positive values mean the default."""
    if not speeds or speaker is None:
        return DEFAULT_SPEED
    speed = speeds.get(speaker)
    if not speed or speed <= 0:
        return DEFAULT_SPEED
    return float(speed)


def token_weights(
    tokens: Sequence[Token],
    speeds: Mapping[str, float] | None = None,
) -> list[float]:
    """Computes the speed-adjusted weight of every token in order."""
    weights: list[float] = []
    for index, token in enumerate(tokens):
        before_line_break = (
            index + 1 < len(tokens) and tokens[index + 1].is_line_start
        )
        weight = word_weight(token.text, before_line_break)
        weights.append(weight / speaker_speed(speeds, token.speaker))
    return weights
