"""
Timeline Utility Functions for the teleprompter pacing engine

This module turns a computed reading schedule into a printable timeline and
persists it. It includes functions to build the timeline, print it, and save
it to a CSV file.

Functions:
    - build_timeline: Pairs every token with its scheduled start and duration.
    - print_timeline: Prints the timeline as a colored table.
    - save_timeline_to_csv: Saves the timeline to a CSV file.
    - color_txt: Colorizes a string.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, List

from colored import attr, bg, fg
from halo import Halo

from teleprompt.config import get_settings
from teleprompt.domain import TimelineEntry, Token
from teleprompt.utils.common_utils import display_elapsed_time
from teleprompt.utils.logger import get_logger

if TYPE_CHECKING:
    from teleprompt.pacing.schedule import Schedule


logger: logging.Logger = get_logger(__name__)


def build_timeline(tokens: Sequence[Token], schedule: Schedule) -> List[TimelineEntry]:
    """
    Builds a timeline from tokens and their schedule.

    Arguments:
        tokens (Sequence[Token]): Parsed script tokens.
        schedule (Schedule): Schedule aligned 1:1 with ``tokens``.

    Returns:
        List[TimelineEntry]: One row per token, times in seconds.

    Raises:
        ValueError: If tokens and schedule are not aligned.
    """
    if len(tokens) != len(schedule):
        raise ValueError(
            f"Schedule has {len(schedule)} entries for {len(tokens)} tokens."
        )

    logger.info("Building timeline from %d scheduled tokens.", len(tokens))
    timeline: List[TimelineEntry] = []
    for index, (token, entry) in enumerate(zip(tokens, schedule)):
        timeline.append(
            TimelineEntry(
                index=index,
                start_seconds=entry.start_offset_ms / 1000.0,
                duration_seconds=entry.duration_ms / 1000.0,
                speaker=token.speaker or "",
                word=token.text,
            )
        )
    logger.debug(msg=f"Timeline: {timeline}")
    return timeline


def color_txt(
    string: str, fg_color: str, bg_color: str, padding: int = 0
) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)

    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def print_timeline(timeline: List[TimelineEntry]) -> None:
    """
    Prints the timeline as a table, one token per row.

    Arguments:
        timeline (List[TimelineEntry]): Timeline rows.
    """
    logger.info(msg=f"Printing timeline with {len(timeline)} entries.")
    if not timeline:
        return

    # Calculate maximum width for each column
    max_time_width: int = max(
        len("Start"),
        max(
            len(display_elapsed_time(entry.start_seconds, _format="short"))
            for entry in timeline
        ),
    )
    max_duration_width: int = max(
        len("Length"),
        max(len(f"{entry.duration_seconds:.2f}s") for entry in timeline),
    )
    max_speaker_width: int = max(
        len("Speaker"), max(len(entry.speaker) for entry in timeline)
    )

    # Header
    print(color_txt("Start", "black", "green", max_time_width + 1), end="")
    print(color_txt("Length", "black", "yellow", max_duration_width + 1), end="")
    print(color_txt("Speaker", "black", "blue", max_speaker_width + 1), end="")
    print(color_txt("Word", "black", "white"))

    for entry in timeline:
        time_str: str = display_elapsed_time(
            entry.start_seconds, _format="short"
        ).ljust(max_time_width)
        duration_str: str = f"{entry.duration_seconds:.2f}s".ljust(max_duration_width)
        speaker_str: str = entry.speaker.ljust(max_speaker_width)

        print(f"{time_str} {duration_str} {speaker_str} {entry.word}")


def save_timeline_to_csv(timeline: List[TimelineEntry], file_name: str) -> str:
    """
    Saves the timeline to a CSV file in the configured timeline folder.

    Arguments:
        timeline (List[TimelineEntry]): The timeline data to be saved.
        file_name (str): Name of the script file; its stem names the CSV.

    Returns:
        str: The path to the saved CSV file.
    """
    logger.info(msg="Starting to save timeline to CSV.")
    folder: Path = get_settings().timeline.folder
    folder.mkdir(parents=True, exist_ok=True)
    output_path: Path = folder / f"{Path(file_name).stem}.csv"

    with Halo(
        text=f"Saving schedule to {output_path}",
        spinner="dots",
        text_color="green",
    ):
        with open(output_path, mode="w", newline="", encoding="utf-8") as file:
            writer = csv.writer(file)
            writer.writerow(["Index", "Start (s)", "Duration (s)", "Speaker", "Word"])
            logger.debug("Header written to CSV file.")

            for entry in timeline:
                row = [
                    entry.index,
                    round(entry.start_seconds, 3),
                    round(entry.duration_seconds, 3),
                    entry.speaker,
                    entry.word,
                ]
                writer.writerow(row)
                logger.debug(msg=f"Written row: {row}")

    logger.info(msg=f"Timeline successfully saved to {output_path}")
    return str(output_path)
