"""Typed runtime settings resolved from environment variables.

``reload_settings`` rebuilds the settings from the current environment (the
CLI loads ``.env`` first); ``get_settings`` returns the cached instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class PlaybackSettings:
    """Countdown and frame pacing of the playback loop."""

    countdown_ticks: int = 3
    countdown_interval_seconds: float = 1.0
    frame_interval_seconds: float = 1 / 30


@dataclass(frozen=True)
class TargetSettings:
    """Default target reading time."""

    minutes: int = 1
    seconds: int = 0


@dataclass(frozen=True)
class SpeedSettings:
    """Recommended bounds for speaker speed multipliers."""

    recommended_min: float = 0.5
    recommended_max: float = 1.5


@dataclass(frozen=True)
class TimelineSettings:
    """Output location for exported schedules."""

    folder: Path = Path("./transcripts")


@dataclass(frozen=True)
class AppConfig:
    """Root settings object."""

    playback: PlaybackSettings = field(default_factory=PlaybackSettings)
    target: TargetSettings = field(default_factory=TargetSettings)
    speed: SpeedSettings = field(default_factory=SpeedSettings)
    timeline: TimelineSettings = field(default_factory=TimelineSettings)
    viewport_rows: int = 12


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from err
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float, *, positive: bool = False) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be a number, got {raw!r}") from err
    if positive and value <= 0.0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _build_settings() -> AppConfig:
    playback = PlaybackSettings(
        countdown_ticks=_env_int("TELEPROMPT_COUNTDOWN_TICKS", 3, minimum=0),
        countdown_interval_seconds=_env_float(
            "TELEPROMPT_COUNTDOWN_INTERVAL", 1.0, positive=True
        ),
        frame_interval_seconds=_env_float(
            "TELEPROMPT_FRAME_INTERVAL", 1 / 30, positive=True
        ),
    )
    target = TargetSettings(
        minutes=_env_int("TELEPROMPT_DEFAULT_MINUTES", 1, minimum=0),
        seconds=min(59, _env_int("TELEPROMPT_DEFAULT_SECONDS", 0, minimum=0)),
    )
    timeline = TimelineSettings(
        folder=Path(os.getenv("TELEPROMPT_TRANSCRIPTS_DIR", "").strip() or "./transcripts"),
    )
    return AppConfig(
        playback=playback,
        target=target,
        speed=SpeedSettings(),
        timeline=timeline,
        viewport_rows=_env_int("TELEPROMPT_VIEWPORT_ROWS", 12, minimum=1),
    )


_SETTINGS: AppConfig | None = None


def reload_settings() -> AppConfig:
    """Rebuilds settings from the current environment."""
    global _SETTINGS
    _SETTINGS = _build_settings()
    return _SETTINGS


def get_settings() -> AppConfig:
    """Returns the cached settings, building them on first access."""
    if _SETTINGS is None:
        return reload_settings()
    return _SETTINGS
