"""Behavior tests for CLI argument dispatch and exit semantics."""

import argparse
from collections.abc import Generator
from pathlib import Path

import pytest

import teleprompt.__main__ as cli
import teleprompt.config as config_module


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Keeps .env files and exported schedules out of the working tree."""
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.setenv("TELEPROMPT_TRANSCRIPTS_DIR", str(tmp_path / "transcripts"))
    monkeypatch.delenv("TELEPROMPT_COUNTDOWN_TICKS", raising=False)
    yield
    monkeypatch.undo()
    config_module.reload_settings()


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(cli.sys, "argv", ["teleprompt", *args])
    cli.main()


def test_cli_log_level_flag_overrides_environment_level(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """`--log-level` should override LOG_LEVEL for the command invocation."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    configured_levels: list[str | int | None] = []

    def _capture_log_level(level: str | int | None = None) -> int:
        configured_levels.append(level)
        return 0

    monkeypatch.setattr(cli, "configure_logging", _capture_log_level)

    _run(monkeypatch, "--text", "hello", "--log-level", "DEBUG")

    assert configured_levels[-1] == "DEBUG"


def test_cli_exits_with_error_when_no_script_is_given(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The CLI should return exit code 1 when neither --file nor --text is provided."""
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch)

    assert exc_info.value.code == 1


def test_cli_exits_with_error_when_file_is_missing(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """A nonexistent script path should return exit code 1."""
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--file", str(tmp_path / "missing.md"))

    assert exc_info.value.code == 1


def test_cli_exits_with_error_on_invalid_configuration(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Malformed environment settings should return exit code 1."""
    monkeypatch.setenv("TELEPROMPT_COUNTDOWN_TICKS", "soon")

    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--text", "hello")

    assert exc_info.value.code == 1


def test_cli_prints_schedule_for_inline_text(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Escaped newlines in --text should become real line breaks."""
    _run(
        monkeypatch,
        "--text",
        "[Kevin]: hello there\\nfriend",
        "--minutes",
        "0",
        "--seconds",
        "5",
        "--schedule",
    )

    output = capsys.readouterr().out
    assert "Kevin" in output
    assert "friend" in output


def test_cli_saves_schedule_named_after_script(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """`--save-schedule` should write a CSV named after the script file."""
    script = tmp_path / "keynote.md"
    script.write_text("[A]: one two\n[B]: three", encoding="utf-8")

    _run(monkeypatch, "--file", str(script), "--save-schedule")

    saved = tmp_path / "transcripts" / "keynote.csv"
    assert saved.is_file()
    assert len(saved.read_text(encoding="utf-8").splitlines()) == 4


def test_cli_passes_speaker_speeds_to_session(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """`--speed` values should scale the matching speaker's durations."""
    captured: dict[str, object] = {}

    def fake_build_timeline(tokens, schedule):
        captured["schedule"] = schedule
        return []

    monkeypatch.setattr(cli, "build_timeline", fake_build_timeline)

    _run(monkeypatch, "--text", "[A]: one [B]: two", "--speed", "A=2", "--seconds", "6")

    durations = captured["schedule"].durations_ms
    assert durations[0] == pytest.approx(durations[1] / 2)


def test_cli_exports_subtitles_with_inferred_format(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """The subtitle format should be inferred from the output extension."""
    output = tmp_path / "talk.vtt"

    _run(monkeypatch, "--text", "[A]: hello world", "--subtitle-output", str(output))

    assert output.read_text(encoding="utf-8").startswith("WEBVTT")


def test_cli_subtitles_split_repeated_speaker_sections(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Each section should get its own cue even when the speaker repeats."""
    output = tmp_path / "talk.srt"

    _run(
        monkeypatch,
        "--text",
        "[A]: hello there [A]: again friend",
        "--subtitle-output",
        str(output),
    )

    text = output.read_text(encoding="utf-8")
    assert text.count("-->") == 2
    assert "A: again friend" in text


def test_cli_rejects_subtitle_output_with_unknown_extension(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An unknown subtitle extension without --subtitle-format should exit 1."""
    with pytest.raises(SystemExit) as exc_info:
        _run(
            monkeypatch,
            "--text",
            "hello",
            "--subtitle-output",
            str(tmp_path / "talk.txt"),
        )

    assert exc_info.value.code == 1


def test_cli_requires_subtitle_output_for_format(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """`--subtitle-format` alone should exit 1 without an output path."""
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--text", "hello", "--subtitle-format", "srt")

    assert exc_info.value.code == 1


def test_cli_play_dispatches_to_rehearsal(monkeypatch: pytest.MonkeyPatch) -> None:
    """`--play` should rehearse with the configured frame interval."""
    calls: list[float] = []

    def fake_rehearse(session, renderer, *, frame_interval):
        calls.append(frame_interval)
        return session.tick()

    monkeypatch.setattr(cli, "rehearse", fake_rehearse)

    _run(monkeypatch, "--text", "hello", "--play")

    assert calls == [pytest.approx(1 / 30)]


def test_cli_play_with_empty_script_exits_with_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Playing a script without words should exit 1."""
    monkeypatch.setattr(cli, "rehearse", lambda *args, **kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--text", "   ", "--play")

    assert exc_info.value.code == 1


def test_invalid_speed_argument_is_a_usage_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A malformed --speed value should be an argparse usage error."""
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "--text", "hello", "--speed", "Kevin")

    assert exc_info.value.code == 2


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Kevin=1.2", ("Kevin", 1.2)), ("Dr. A=B=0.5", ("Dr. A=B", 0.5))],
)
def test_parse_speed(value: str, expected: tuple[str, float]) -> None:
    """The speaker name is everything before the last equals sign."""
    assert cli.parse_speed(value) == expected


@pytest.mark.parametrize("value", ["Kevin", "=1.0", "Kevin=fast", "Kevin=0"])
def test_parse_speed_rejects_malformed_values(value: str) -> None:
    """Missing names, non-numeric and non-positive factors are rejected."""
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_speed(value)
