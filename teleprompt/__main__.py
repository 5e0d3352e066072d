"""
Teleprompter pacing tool

Command-line entry point for the pacing engine. It reads a script, schedules
every word against a target reading time, and can print or export the
schedule or rehearse it in the terminal with a live countdown, word cursor,
and scroll.

Usage:
    teleprompt --file talk.md --minutes 2 --seconds 30 --schedule
    teleprompt --file talk.md --speed Kevin=1.2 --play
    teleprompt --file talk.md --subtitle-output talk.srt
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from teleprompt.config import reload_settings
from teleprompt.rehearsal import TerminalRenderer, rehearse
from teleprompt.session import TeleprompterSession
from teleprompt.utils import (
    build_timeline,
    configure_logging,
    get_logger,
    print_timeline,
    save_timeline_to_csv,
)
from teleprompt.utils.subtitles import (
    FORMATTERS,
    SubtitleGenerator,
    timeline_to_subtitles,
)


logger: logging.Logger = get_logger("teleprompt")


def parse_speed(value: str) -> tuple[str, float]:
    """Parses a ``NAME=FACTOR`` speaker speed argument."""
    name, separator, factor = value.rpartition("=")
    if not separator or not name.strip():
        raise argparse.ArgumentTypeError(
            f"Expected NAME=FACTOR, got {value!r}"
        )
    try:
        speed = float(factor)
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"Speed for {name!r} must be a number, got {factor!r}"
        ) from err
    if speed <= 0:
        raise argparse.ArgumentTypeError(f"Speed for {name!r} must be positive")
    return name.strip(), speed


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Pace a script to a target reading time"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--file", type=str, help="Path to the script file")
    source.add_argument("--text", type=str, help="Script text given inline")
    parser.add_argument("--minutes", type=int, help="Target minutes")
    parser.add_argument("--seconds", type=int, help="Target seconds (0-59)")
    parser.add_argument(
        "--speed",
        type=parse_speed,
        action="append",
        default=[],
        metavar="NAME=FACTOR",
        help="Speaking speed multiplier for a speaker; repeatable",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Print the per-word schedule",
    )
    parser.add_argument(
        "--save-schedule",
        action="store_true",
        help="Save the per-word schedule to a CSV file",
    )
    parser.add_argument(
        "--subtitle-format",
        choices=tuple(FORMATTERS.keys()),
        help=(
            "Export the schedule as subtitles in the chosen format. "
            "If omitted, the format is inferred from --subtitle-output when possible."
        ),
    )
    parser.add_argument(
        "--subtitle-output",
        type=str,
        help=(
            "File path for the exported subtitle file. The format is inferred from "
            "the extension when --subtitle-format is not provided."
        ),
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Rehearse the script in the terminal in real time",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (overrides LOG_LEVEL)",
    )
    return parser


def main() -> None:
    """
    Main function to handle the command line interface logic.
    """
    load_dotenv()
    args: argparse.Namespace = build_parser().parse_args()
    configure_logging(args.log_level)
    try:
        settings = reload_settings()
    except ValueError as err:
        logger.error("Invalid configuration: %s", err)
        sys.exit(1)

    if args.file:
        script_path = Path(args.file)
        if not script_path.is_file():
            logger.error("Script file not found: %s", args.file)
            sys.exit(1)
        script: str = script_path.read_text(encoding="utf-8")
    elif args.text is not None:
        script = args.text.replace("\\n", "\n")
    else:
        logger.error(msg="No script provided. Use --file or --text.")
        sys.exit(1)

    start_time: float = time.time()
    renderer = TerminalRenderer(viewport_rows=settings.viewport_rows)
    session = TeleprompterSession(
        script,
        minutes=args.minutes,
        seconds=args.seconds,
        speaker_speeds=dict(args.speed),
        measure_positions=renderer.measure,
        viewport_height=renderer.viewport_rows,
        settings=settings,
    )
    renderer.bind(session)
    minutes, seconds = session.target
    logger.info(
        "%d words from %d speakers over %d:%02d (%d WPM).",
        session.word_count,
        len(session.speakers),
        minutes,
        seconds,
        session.average_wpm,
    )

    timeline = build_timeline(session.tokens, session.schedule)
    if args.schedule:
        print_timeline(timeline)

    if args.save_schedule:
        csv_file_name: str = save_timeline_to_csv(timeline, args.file or "script")
        logger.info(msg=f"Schedule saved to {csv_file_name}")

    if args.subtitle_format or args.subtitle_output:
        _export_subtitles(session, args)

    if args.play:
        final_frame = rehearse(
            session,
            renderer,
            frame_interval=settings.playback.frame_interval_seconds,
        )
        if final_frame is None:
            logger.error("Nothing to play: the script has no words.")
            sys.exit(1)

    logger.info(
        msg=f"Pacing completed in {time.time() - start_time:.2f} seconds"
    )


def _export_subtitles(session: TeleprompterSession, args: argparse.Namespace) -> None:
    if not args.subtitle_output:
        logger.error(
            msg="--subtitle-output is required to export subtitles.",
        )
        sys.exit(1)

    subtitle_format: str | None = args.subtitle_format
    if not subtitle_format:
        subtitle_format = _infer_subtitle_format(args.subtitle_output)
        if not subtitle_format:
            logger.error(
                "Unable to infer subtitle format from %s. Provide --subtitle-format.",
                args.subtitle_output,
            )
            sys.exit(1)
    else:
        inferred_format: str | None = _infer_subtitle_format(args.subtitle_output)
        if inferred_format and inferred_format != subtitle_format:
            logger.info(
                "Using subtitle format %s (overriding inferred format %s from output path)",
                subtitle_format,
                inferred_format,
            )

    subtitles = timeline_to_subtitles(
        session.tokens, session.schedule, session.sections
    )
    if not subtitles:
        logger.warning("Schedule did not produce any subtitle entries to export.")
        return
    try:
        generator = SubtitleGenerator(FORMATTERS[subtitle_format])
        generator.generate_file(subtitles, args.subtitle_output)
        logger.info("Subtitle file exported to %s", args.subtitle_output)
    except OSError as err:
        logger.error(
            msg=f"Failed to export subtitles: {err}",
            exc_info=True,
        )
        sys.exit(1)


def _infer_subtitle_format(output_path: str) -> str | None:
    suffix: str = Path(output_path).suffix.lower().lstrip(".")
    return suffix if suffix in FORMATTERS else None


if __name__ == "__main__":
    main()
