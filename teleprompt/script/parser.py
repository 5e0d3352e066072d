"""Parsing of raw teleprompter scripts into speaker sections and tokens.

Scripts are free text with three lightweight markups:

* ``[Name]:`` opens a section read by ``Name``; text before the first marker
  belongs to no speaker.
* ``==text==`` highlights are stripped, keeping the inner text.
* ``**bold**`` / ``__bold__`` and ``*italic*`` / ``_italic_`` are resolved per
  word.

Malformed markers are treated as plain text; parsing never fails on content.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from teleprompt.domain import Section, Token
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

HIGHLIGHT_RE = re.compile(r"==(.*?)==")
SPEAKER_RE = re.compile(r"\[([^\]]+)\]:")


@dataclass(frozen=True)
class SpeakerMarker:
    """A ``[Name]:`` marker and its character span in the cleaned text."""

    speaker: str
    start: int
    end: int


@dataclass(frozen=True)
class ParsedScript:
    """Flat token sequence plus the sections that partition it."""

    tokens: tuple[Token, ...]
    sections: tuple[Section, ...]

    @property
    def speakers(self) -> list[str]:
        """Named speakers in order of first appearance."""
        seen: list[str] = []
        for section in self.sections:
            if section.speaker and section.speaker not in seen:
                seen.append(section.speaker)
        return seen

    def __len__(self) -> int:
        return len(self.tokens)


def strip_highlights(text: str) -> str:
    """Removes ``==`` highlight delimiters, pairing them non-greedily."""
    return HIGHLIGHT_RE.sub(r"\1", text)


def find_speaker_markers(text: str) -> list[SpeakerMarker]:
    """Scans ``text`` left to right for ``[Name]:`` markers."""
    return [
        SpeakerMarker(speaker=match.group(1), start=match.start(), end=match.end())
        for match in SPEAKER_RE.finditer(text)
    ]


def parse_script(script: str) -> list[Section]:
    """Splits ``script`` into speaker sections.

    Token indices are not known at this stage, so the returned sections carry
    their trimmed ``content`` with ``start_index``/``end_index`` set to -1.
    Sections whose content is blank are dropped.
    """
    cleaned = strip_highlights(script)
    markers = find_speaker_markers(cleaned)

    if not markers:
        content = cleaned.strip()
        return [Section(None, -1, -1, content)] if content else []

    sections: list[Section] = []
    leading = cleaned[: markers[0].start].strip()
    if leading:
        sections.append(Section(None, -1, -1, leading))

    for position, marker in enumerate(markers):
        content_end = (
            markers[position + 1].start
            if position + 1 < len(markers)
            else len(cleaned)
        )
        content = cleaned[marker.end:content_end].strip()
        if content:
            sections.append(Section(marker.speaker, -1, -1, content))
        else:
            logger.debug("Dropping empty section for speaker %s", marker.speaker)

    return sections


def parse_word_formatting(word: str) -> tuple[str, bool, bool]:
    """Resolves bold/italic wrappers on a single word.

    Double delimiters are checked first so ``**word**`` is never read as an
    italic wrapped in ``*``. Returns ``(text, bold, italic)``.
    """
    text = word
    bold = False
    italic = False

    for delimiter in ("**", "__"):
        if len(text) > 4 and text.startswith(delimiter) and text.endswith(delimiter):
            bold = True
            text = text[2:-2]
            break

    for delimiter in ("*", "_"):
        if (
            len(text) > 2
            and text.startswith(delimiter)
            and text.endswith(delimiter)
            and not text.startswith(delimiter * 2)
        ):
            italic = True
            text = text[1:-1]
            break

    return text, bold, italic


def parse_words(content: str, speaker: str | None = None) -> list[Token]:
    """Tokenizes section content line by line.

    The first word of every line except the section's first line is marked
    as a line start.
    """
    tokens: list[Token] = []
    for line_index, line in enumerate(content.split("\n")):
        for word_index, word in enumerate(line.split()):
            text, bold, italic = parse_word_formatting(word)
            tokens.append(
                Token(
                    text=text,
                    bold=bold,
                    italic=italic,
                    is_line_start=word_index == 0 and line_index > 0,
                    speaker=speaker,
                )
            )
    return tokens


def build_script(script: str) -> ParsedScript:
    """Parses ``script`` into the flat token sequence and indexed sections."""
    tokens: list[Token] = []
    sections: list[Section] = []

    for section in parse_script(script):
        start_index = len(tokens)
        tokens.extend(parse_words(section.content, section.speaker))
        sections.append(
            Section(
                speaker=section.speaker,
                start_index=start_index,
                end_index=len(tokens) - 1,
                content=section.content,
            )
        )

    logger.info(
        "Parsed script into %d sections and %d tokens.", len(sections), len(tokens)
    )
    return ParsedScript(tokens=tuple(tokens), sections=tuple(sections))
