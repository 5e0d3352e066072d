import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from teleprompt.config import AppConfig
from teleprompt.domain import TokenPosition


class FakeClock:
    """Manually advanced millisecond time source."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, milliseconds: float) -> None:
        self.now_ms += milliseconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> AppConfig:
    """Environment-independent default settings."""
    return AppConfig()


@pytest.fixture
def row_positions():
    """Builds a snapshot placing token ``i`` at ``top = i * spacing``."""

    def _build(count: int, spacing: float = 10.0) -> dict[int, TokenPosition]:
        return {
            index: TokenPosition(top=index * spacing, center=index * spacing + spacing / 2)
            for index in range(count)
        }

    return _build


@pytest.fixture(autouse=True)
def _silence_halo(monkeypatch):
    """Replace Halo spinners with a no-op context manager for tests."""

    class _DummyHalo:
        def __init__(self, *args, **kwargs):
            self.text = kwargs.get("text")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("teleprompt.utils.timeline_utils.Halo", _DummyHalo, raising=False)
