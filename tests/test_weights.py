"""Tests for the syllable heuristic and token weighting."""

import pytest

from teleprompt.domain import Token
from teleprompt.pacing.weights import (
    clean_word,
    estimate_syllables,
    speaker_speed,
    token_weights,
    word_weight,
)


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("the", 1),
        ("hello", 2),
        ("simple", 2),
        ("table", 2),
        ("cake", 1),
        ("queue", 1),
        ("reading", 2),
        ("Hello!!", 2),
        ("", 1),
    ],
)
def test_estimate_syllables(word: str, expected: int) -> None:
    """Vowel runs with silent-e and consonant-le corrections."""
    assert estimate_syllables(word) == expected


def test_clean_word_keeps_only_ascii_letters() -> None:
    """Punctuation, digits and markup are removed."""
    assert clean_word("**it's-42!**") == "its"


def test_word_weight_combines_syllables_and_length() -> None:
    """Base weight is 0.7 per syllable plus 0.3 per length unit."""
    assert word_weight("hello") == pytest.approx(2 * 0.7 + 1.25 * 0.3)
    assert word_weight("hi") == pytest.approx(1.0)


def test_sentence_punctuation_adds_longer_pause_than_clause() -> None:
    """Sentence ends outweigh clause punctuation, which outweighs none."""
    plain = word_weight("hello")

    assert word_weight("hello.") == pytest.approx(plain + 1.5)
    assert word_weight("hello?") == pytest.approx(plain + 1.5)
    assert word_weight("hello,") == pytest.approx(plain + 0.8)
    assert word_weight("hello\u2014") == pytest.approx(plain + 0.8)
    assert word_weight("hello.") > word_weight("hello")


def test_sentence_end_takes_priority_over_clause() -> None:
    """Only the final character decides the pause kind."""
    assert word_weight("wait,!") == pytest.approx(word_weight("wait") + 1.5)


def test_line_break_pause_is_added() -> None:
    """A following line break adds a fixed pause."""
    assert word_weight("hello", before_line_break=True) == pytest.approx(
        word_weight("hello") + 1.0
    )


def test_word_without_letters_keeps_floor_weight() -> None:
    """Numbers and symbols still get a positive weight."""
    assert word_weight("42") == pytest.approx(1.0)
    assert word_weight("\u2013") == pytest.approx(1.8)


def test_token_weights_apply_next_line_start_and_speaker_speed() -> None:
    """A following line start adds a pause; speed divides the weight."""
    tokens = [
        Token("hello", speaker="A"),
        Token("there", is_line_start=True, speaker="A"),
        Token("friend", speaker="B"),
    ]

    weights = token_weights(tokens, {"A": 2.0})

    assert weights[0] == pytest.approx((word_weight("hello") + 1.0) / 2.0)
    assert weights[1] == pytest.approx(word_weight("there") / 2.0)
    assert weights[2] == pytest.approx(word_weight("friend"))


@pytest.mark.parametrize("speed", [None, 0, -1.0])
def test_unset_or_invalid_speed_defaults_to_one(speed) -> None:
    """Missing or non-positive speeds fall back to 1.0."""
    assert speaker_speed({"A": speed}, "A") == 1.0


def test_unattributed_tokens_ignore_speed_map() -> None:
    """Tokens without a speaker always use the default speed."""
    assert speaker_speed({"A": 1.4}, None) == 1.0
