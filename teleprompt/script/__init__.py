from .parser import (
    ParsedScript,
    SpeakerMarker,
    build_script,
    find_speaker_markers,
    parse_script,
    parse_word_formatting,
    parse_words,
    strip_highlights,
)

__all__ = [
    "ParsedScript",
    "SpeakerMarker",
    "build_script",
    "find_speaker_markers",
    "parse_script",
    "parse_word_formatting",
    "parse_words",
    "strip_highlights",
]
