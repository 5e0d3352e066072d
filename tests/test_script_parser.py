"""Behavior tests for script sectioning, tokenization, and word formatting."""

import pytest

from teleprompt.domain import Section
from teleprompt.script import (
    build_script,
    find_speaker_markers,
    parse_script,
    parse_word_formatting,
    parse_words,
    strip_highlights,
)


def test_two_speaker_script_yields_sections_and_flat_tokens() -> None:
    """Blank lines between speakers should not create line starts."""
    parsed = build_script("[A]:\nhello world\n\n[B]:\nbye")

    assert [section.speaker for section in parsed.sections] == ["A", "B"]
    assert [token.text for token in parsed.tokens] == ["hello", "world", "bye"]
    assert [token.is_line_start for token in parsed.tokens] == [False, False, False]
    assert [token.speaker for token in parsed.tokens] == ["A", "A", "B"]
    assert parsed.sections[0] == Section("A", 0, 1, "hello world")
    assert parsed.sections[1] == Section("B", 2, 2, "bye")


def test_script_without_markers_is_one_unattributed_section() -> None:
    """Plain text becomes a single section with no speaker."""
    sections = parse_script("  Just some words  ")

    assert sections == [Section(None, -1, -1, "Just some words")]


@pytest.mark.parametrize("script", ["", "   ", "\n\n"])
def test_blank_script_has_no_sections(script: str) -> None:
    """Blank input should produce neither sections nor tokens."""
    parsed = build_script(script)

    assert parsed.sections == ()
    assert parsed.tokens == ()
    assert len(parsed) == 0


def test_text_before_first_marker_is_unattributed() -> None:
    """Leading text should become a speaker-less section."""
    parsed = build_script("Intro here\n[A]: hi")

    assert [section.speaker for section in parsed.sections] == [None, "A"]
    assert [token.text for token in parsed.tokens] == ["Intro", "here", "hi"]


def test_empty_sections_are_dropped() -> None:
    """A marker followed only by whitespace should not emit a section."""
    parsed = build_script("[A]:\n   \n[B]: hi")

    assert [section.speaker for section in parsed.sections] == ["B"]
    assert parsed.sections[0].start_index == 0
    assert parsed.sections[0].end_index == 0


def test_highlight_markers_are_removed_non_greedily() -> None:
    """Each ``==`` pair should be stripped independently."""
    assert strip_highlights("==hello== world ==again==") == "hello world again"
    assert strip_highlights("a == b") == "a == b"


def test_unterminated_marker_is_plain_text() -> None:
    """Malformed speaker markers should be kept as words."""
    parsed = build_script("[A: hello")

    assert [section.speaker for section in parsed.sections] == [None]
    assert [token.text for token in parsed.tokens] == ["[A:", "hello"]


def test_find_speaker_markers_reports_spans() -> None:
    """Markers should be reported left to right with their spans."""
    markers = find_speaker_markers("[Kevin]: hi [Mark]: yo")

    assert [(m.speaker, m.start, m.end) for m in markers] == [
        ("Kevin", 0, 8),
        ("Mark", 12, 19),
    ]


def test_line_start_marks_first_word_of_later_lines() -> None:
    """Only lines after the section's first line start with a break."""
    tokens = parse_words("one two\nthree\n\nfour", speaker="A")

    assert [(t.text, t.is_line_start) for t in tokens] == [
        ("one", False),
        ("two", False),
        ("three", True),
        ("four", True),
    ]


def test_repeated_speakers_are_listed_once() -> None:
    """Speakers may recur; the speaker list keeps first-appearance order."""
    parsed = build_script("[A]: x [B]: y [A]: z")

    assert [section.speaker for section in parsed.sections] == ["A", "B", "A"]
    assert parsed.speakers == ["A", "B"]


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("**bold**", ("bold", True, False)),
        ("__bold__", ("bold", True, False)),
        ("*italic*", ("italic", False, True)),
        ("_italic_", ("italic", False, True)),
        ("***both***", ("both", True, True)),
        ("**", ("**", False, False)),
        ("*", ("*", False, False)),
        ("****", ("****", False, False)),
        ("*half", ("*half", False, False)),
        ("plain", ("plain", False, False)),
    ],
)
def test_parse_word_formatting(word: str, expected: tuple[str, bool, bool]) -> None:
    """Double delimiters are bold, single delimiters italic."""
    assert parse_word_formatting(word) == expected


def test_formatting_flags_carry_into_tokens() -> None:
    """Tokens should expose stripped text with formatting flags."""
    parsed = build_script("Say **this** and *that*.")

    bold = parsed.tokens[1]
    assert (bold.text, bold.bold, bold.italic) == ("this", True, False)
    assert parsed.tokens[3].text == "*that*."
