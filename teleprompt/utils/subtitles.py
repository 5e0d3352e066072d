import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from teleprompt.domain import Section, Token
from teleprompt.pacing.schedule import Schedule
from teleprompt.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

Cue = tuple[float, float, str, str]


def cue_text(text: str, speaker: str) -> str:
    """Prefixes the cue text with its speaker, when there is one."""
    return f"{speaker}: {text}" if speaker else text


class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    @abstractmethod
    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to formatted time string."""
        pass

    @abstractmethod
    def generate_entry(self, index: int, start: float, end: float, text: str, speaker: str) -> str:
        """Generate a single subtitle entry."""
        pass

    def header(self) -> str:
        """Text written before the first entry."""
        return ""

    def generate_file(self, subtitles: list[Cue], output_file: str) -> None:
        """Generate a subtitle file from a list of cues."""
        name: str = type(self).__name__.replace("Formatter", "")
        logger.info("Generating %s file: %s", name, output_file)
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(self.header())
            for i, (start, duration, text, speaker) in enumerate(subtitles, 1):
                end: float = start + duration
                entry: str = self.generate_entry(i, start, end, text, speaker)
                f.write(entry + '\n')
        logger.info("%s file generated successfully: %s", name, output_file)


class ASSFormatter(SubtitleFormatter):
    """Formatter for ASS subtitles."""

    ASS_HEADER: str = """
[Script Info]
Title: Teleprompter Schedule
ScriptType: v4.00+
Collisions: Normal
PlayDepth: 0

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H64000000,-1,0,0,0,100,100,0,0.00,1,1.00,0.00,2,10,10,10,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""

    def header(self) -> str:
        return self.ASS_HEADER

    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to ASS formatted time string."""
        hours: int = int(seconds // 3600)
        minutes: int = int((seconds % 3600) // 60)
        secs: int = int(seconds % 60)
        centis: int = int((seconds - int(seconds)) * 100)
        return f"{hours:01d}:{minutes:02d}:{secs:02d}.{centis:02d}"

    def generate_entry(self, index: int, start: float, end: float, text: str, speaker: str) -> str:
        """Generate a single ASS dialogue line; the speaker goes in the Name field."""
        start_time: str = self.format_time(start)
        end_time: str = self.format_time(end)
        logger.debug(
            "ASS Entry: Start %s, End %s, Text %s, Speaker %s",
            start_time,
            end_time,
            text,
            speaker,
        )
        return f"Dialogue: 0,{start_time},{end_time},Default,{speaker},0,0,0,,{text}"


class SRTFormatter(SubtitleFormatter):
    """Formatter for SRT subtitles."""

    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to SRT formatted time string."""
        hours: int = int(seconds // 3600)
        minutes: int = int((seconds % 3600) // 60)
        secs: int = int(seconds % 60)
        millis: int = int(round((seconds - int(seconds)) * 1000))
        if millis == 1000:
            secs, millis = secs + 1, 0
        return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"

    def generate_entry(self, index: int, start: float, end: float, text: str, speaker: str) -> str:
        """Generate a single SRT subtitle entry."""
        start_time: str = self.format_time(start)
        end_time: str = self.format_time(end)
        logger.debug(
            "SRT Entry: Start %s, End %s, Text %s, Speaker %s",
            start_time,
            end_time,
            text,
            speaker,
        )
        return f"{index}\n{start_time} --> {end_time}\n{cue_text(text, speaker)}\n"


class VTTFormatter(SubtitleFormatter):
    """Formatter for WebVTT subtitles."""

    def header(self) -> str:
        return "WEBVTT\n\n"

    def format_time(self, seconds: float) -> str:
        """Convert time in seconds to WebVTT formatted time string."""
        hours: int = int(seconds // 3600)
        minutes: int = int((seconds % 3600) // 60)
        secs: int = int(seconds % 60)
        millis: int = int(round((seconds - int(seconds)) * 1000))
        if millis == 1000:
            secs, millis = secs + 1, 0
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"

    def generate_entry(self, index: int, start: float, end: float, text: str, speaker: str) -> str:
        """Generate a single WebVTT cue, using a voice span for the speaker."""
        start_time: str = self.format_time(start)
        end_time: str = self.format_time(end)
        logger.debug(
            "VTT Entry: Start %s, End %s, Text %s, Speaker %s",
            start_time,
            end_time,
            text,
            speaker,
        )
        body: str = f"<v {speaker}>{text}" if speaker else text
        return f"{start_time} --> {end_time}\n{body}\n"


def timeline_to_subtitles(
    tokens: Sequence[Token],
    schedule: Schedule,
    sections: Sequence[Section] = (),
) -> list[Cue]:
    """Groups scheduled tokens into one cue per displayed line.

    A new cue begins at every line start, at every section start, and at
    every speaker change. Times are in seconds.
    """
    if len(tokens) != len(schedule):
        raise ValueError(
            f"Schedule has {len(schedule)} entries for {len(tokens)} tokens."
        )
    if not tokens:
        logger.debug("Received empty schedule for subtitle conversion")
        return []

    section_starts: set[int] = {section.start_index for section in sections}
    subtitles: list[Cue] = []
    words: list[str] = []
    cue_start: float = 0.0
    cue_duration: float = 0.0
    cue_speaker: str | None = None

    def flush() -> None:
        if words:
            subtitles.append(
                (cue_start / 1000.0, cue_duration / 1000.0, " ".join(words), cue_speaker or "")
            )
            logger.debug(
                "Subtitle cue prepared: Start %s, Duration %s, Speaker %s",
                cue_start,
                cue_duration,
                cue_speaker,
            )

    for index, (token, entry) in enumerate(zip(tokens, schedule)):
        if (
            index == 0
            or index in section_starts
            or token.is_line_start
            or token.speaker != cue_speaker
        ):
            flush()
            words = []
            cue_start = entry.start_offset_ms
            cue_duration = 0.0
            cue_speaker = token.speaker
        words.append(token.text)
        cue_duration += entry.duration_ms
    flush()

    return subtitles


class SubtitleGenerator:
    """Main class to generate subtitle files in different formats."""

    def __init__(self, formatter: SubtitleFormatter) -> None:
        self.formatter: SubtitleFormatter = formatter

    def generate_file(self, subtitles: list[Cue], output_file: str) -> None:
        """Generate a subtitle file using the provided formatter."""
        self.formatter.generate_file(subtitles, output_file)


FORMATTERS: dict[str, SubtitleFormatter] = {
    "ass": ASSFormatter(),
    "srt": SRTFormatter(),
    "vtt": VTTFormatter(),
}
