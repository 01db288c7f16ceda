import asyncio
import logging
import os
from unittest import mock

import pytest

from startup_timer import lifecycle as lifecycle_module
from startup_timer.lifecycle import StartupLifecycle, get_lifecycle
from startup_timer.models import ReportTag
from startup_timer.timer import StartupIntervalTimer


def test_duplicate_arm_signals_keep_first_start(make_timer, clock):
    lifecycle = StartupLifecycle(make_timer(), enabled=True)
    lifecycle.before_splash()
    start = lifecycle.timer.state.start_instant
    clock.advance(2.0)
    lifecycle.exiting_edit_mode()
    assert lifecycle.timer.state.start_instant == start


def test_editor_hook_arms_when_splash_hook_did_not_run(make_timer):
    lifecycle = StartupLifecycle(make_timer(), enabled=True)
    lifecycle.exiting_edit_mode()
    assert lifecycle.timer.armed


def test_disabled_lifecycle_does_nothing(make_timer):
    lifecycle = StartupLifecycle(make_timer(), enabled=False)
    lifecycle.before_splash()
    lifecycle.exiting_edit_mode()
    lifecycle.on_quit()
    assert not lifecycle.timer.armed
    assert not lifecycle.timer.reported
    assert lifecycle.after_scene_load(object()) is None


def test_on_quit_reports_once(make_timer, clock, caplog):
    caplog.set_level(logging.INFO, logger="startup_timer")
    lifecycle = StartupLifecycle(make_timer(), enabled=True)
    lifecycle.before_splash()
    clock.advance(0.5)
    lifecycle.on_quit()
    lifecycle.on_quit()
    assert lifecycle.timer.state.report_tag == ReportTag.QUIT
    assert caplog.text.count("[quit] (t=500.0ms)") == 1


def test_on_quit_skips_after_report(make_timer):
    lifecycle = StartupLifecycle(make_timer(), enabled=True)
    lifecycle.before_splash()
    lifecycle.timer.report(ReportTag.END)
    lifecycle.on_quit()
    assert lifecycle.timer.state.report_tag == ReportTag.END


def test_enabled_flag_comes_from_environment():
    with mock.patch.dict(os.environ, {"STARTUP_TIMER_ENABLED": "false"}, clear=True):
        assert StartupLifecycle(StartupIntervalTimer()).enabled is False
    with mock.patch.dict(os.environ, {}, clear=True):
        assert StartupLifecycle(StartupIntervalTimer()).enabled is True


@pytest.mark.asyncio
async def test_after_scene_load_installs_one_task(make_timer):
    class NeverReady:
        def get_player(self):
            raise RuntimeError("not yet")

    lifecycle = StartupLifecycle(make_timer(), enabled=True)
    first = lifecycle.after_scene_load(NeverReady())
    second = lifecycle.after_scene_load(NeverReady())
    assert first is second
    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first


def test_get_lifecycle_is_process_wide(monkeypatch):
    registered = []
    monkeypatch.setattr(lifecycle_module, "_lifecycle", None)
    monkeypatch.setattr(lifecycle_module.atexit, "register", registered.append)
    first = get_lifecycle()
    assert get_lifecycle() is first
    assert registered == [first.on_quit]
