"""Host lifecycle hooks wired to a single timer per process."""

from __future__ import annotations

import asyncio
import atexit
import logging
from typing import Iterable, Optional

from .adapters import DEFAULT_ADAPTERS, ActivityIdentifierAdapter, PlayerRegistry
from .config import TimerSettings, read_flag
from .models import ReportTag
from .timer import StartupIntervalTimer
from .watcher import install

logger = logging.getLogger(__name__)


class StartupLifecycle:
    """Owns the timer and the polling task for one process run."""

    def __init__(
        self,
        timer: Optional[StartupIntervalTimer] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        self.timer = timer or StartupIntervalTimer(TimerSettings.from_env())
        self.enabled = read_flag("STARTUP_TIMER_ENABLED", True) if enabled is None else enabled
        self.task: Optional[asyncio.Task] = None
        self._exit_hook_registered = False

    def before_splash(self) -> None:
        if self.enabled:
            self.timer.arm("BeforeSplashScreen")

    def exiting_edit_mode(self) -> None:
        """Arm when the host re-enters play without restarting the process."""
        if self.enabled:
            self.timer.arm("Editor hook")

    def after_scene_load(
        self,
        registry: PlayerRegistry,
        adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
    ) -> Optional[asyncio.Task]:
        if not self.enabled:
            return None
        if self.task is None or self.task.done():
            logger.debug("Installing startup polling task")
        self.task = install(self.timer, registry, existing=self.task, adapters=adapters)
        return self.task

    def on_quit(self) -> None:
        if self.enabled and self.timer.armed:
            self.timer.report(ReportTag.QUIT)

    def register_exit_hook(self) -> None:
        if self._exit_hook_registered:
            return
        atexit.register(self.on_quit)
        self._exit_hook_registered = True


_lifecycle: Optional[StartupLifecycle] = None


def get_lifecycle() -> StartupLifecycle:
    """Return the process-wide lifecycle, creating it on first use."""
    global _lifecycle
    if _lifecycle is None:
        _lifecycle = StartupLifecycle()
        _lifecycle.register_exit_hook()
    return _lifecycle
