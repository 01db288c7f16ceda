import os
from datetime import timedelta
from unittest import mock

from startup_timer.config import TimerSettings


def test_settings_defaults():
    with mock.patch.dict(os.environ, {}, clear=True):
        settings = TimerSettings.from_env()
    assert settings.fastpath_grace == timedelta(seconds=2)
    assert settings.hard_timeout == timedelta(seconds=180)
    assert settings.verbose is False
    assert settings.target_activity is None


def test_settings_custom():
    env = {
        "STARTUP_TIMER_GRACE_S": "0.5",
        "STARTUP_TIMER_TIMEOUT_S": "30",
        "STARTUP_TIMER_VERBOSE": "yes",
        "STARTUP_TIMER_TARGET": " initialize ",
    }
    with mock.patch.dict(os.environ, env, clear=True):
        settings = TimerSettings.from_env()
    assert settings.fastpath_grace == timedelta(seconds=0.5)
    assert settings.hard_timeout == timedelta(seconds=30)
    assert settings.verbose is True
    assert settings.target_activity == "initialize"


def test_invalid_values_fall_back():
    env = {"STARTUP_TIMER_GRACE_S": "soon", "STARTUP_TIMER_TIMEOUT_S": "-4"}
    with mock.patch.dict(os.environ, env, clear=True):
        settings = TimerSettings.from_env()
    assert settings.fastpath_grace == timedelta(seconds=2)
    assert settings.hard_timeout == timedelta(seconds=180)


def test_timeout_never_shorter_than_grace():
    settings = TimerSettings.from_intervals(grace_seconds=10, timeout_seconds=1)
    assert settings.hard_timeout == timedelta(seconds=10)
