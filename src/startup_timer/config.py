"""Configuration models and helpers for the startup timer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class TimerSettings:
    """Tunables for the startup interval timer and its polling task."""

    tick_interval: timedelta = timedelta(seconds=1 / 60)
    fastpath_grace: timedelta = timedelta(seconds=2)
    hard_timeout: timedelta = timedelta(seconds=180)
    verbose: bool = False
    target_activity: Optional[str] = None

    @classmethod
    def from_intervals(
        cls,
        tick_seconds: float = 1 / 60,
        grace_seconds: float = 2.0,
        timeout_seconds: float = 180.0,
        verbose: bool = False,
        target_activity: Optional[str] = None,
    ) -> "TimerSettings":
        return cls(
            tick_interval=timedelta(seconds=tick_seconds),
            fastpath_grace=timedelta(seconds=grace_seconds),
            hard_timeout=timedelta(seconds=max(timeout_seconds, grace_seconds)),
            verbose=verbose,
            target_activity=target_activity or None,
        )

    @classmethod
    def from_env(cls) -> "TimerSettings":
        """Read settings from ``STARTUP_TIMER_*`` environment variables.

        Invalid numbers fall back to the defaults.
        """
        return cls.from_intervals(
            grace_seconds=_read_float("STARTUP_TIMER_GRACE_S", 2.0),
            timeout_seconds=_read_float("STARTUP_TIMER_TIMEOUT_S", 180.0),
            verbose=read_flag("STARTUP_TIMER_VERBOSE", False),
            target_activity=(os.environ.get("STARTUP_TIMER_TARGET") or "").strip() or None,
        )


def read_flag(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def _read_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", name, raw, default)
        return default
    return value if value >= 0 else default
