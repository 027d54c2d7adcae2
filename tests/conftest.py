"""Shared fixtures for countdown tests."""
from datetime import datetime

import pytest

from countdown.events import Event, EventList


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the config directory at a temporary base."""
    monkeypatch.setenv("COUNTDOWN_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("COUNTDOWN_DEBUG", raising=False)
    return tmp_path


@pytest.fixture
def now():
    """A fixed local 'now' as epoch seconds."""
    return datetime(2024, 6, 15, 12, 0, 0).timestamp()


@pytest.fixture
def clock(now):
    """A controllable clock starting at ``now``."""

    class Clock:
        def __init__(self, value: float) -> None:
            self.value = value

        def __call__(self) -> float:
            return self.value

        def advance(self, seconds: float) -> None:
            self.value += seconds

    return Clock(now)


@pytest.fixture
def saved():
    """Records every list passed to save()."""
    calls = []

    def save(events: EventList) -> None:
        calls.append(events.to_list())

    save.calls = calls
    return save


@pytest.fixture
def sample_events(now):
    base = int(now)
    return EventList([
        Event("Launch", base + 3600),
        Event("Holiday", base + 86400 * 10),
        Event("Conference", base + 86400 * 40),
    ])
