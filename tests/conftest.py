import pytest

from startup_timer.config import TimerSettings
from startup_timer.timer import StartupIntervalTimer


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_timer(clock):
    def _make(**overrides):
        settings = TimerSettings.from_intervals(
            grace_seconds=overrides.pop("grace_seconds", 2.0),
            timeout_seconds=overrides.pop("timeout_seconds", 180.0),
            **overrides,
        )
        return StartupIntervalTimer(settings, clock=clock)

    return _make
