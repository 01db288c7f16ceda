"""One-shot stopwatch bracketing the first scripted activity after startup."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from .adapters import resolve_activity_identifier
from .config import TimerSettings
from .models import ReportTag, TimerState
from .normalization import normalize_activity_id

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class StartupIntervalTimer:
    """Measures arm-to-activity-end once and logs it once.

    ``arm`` may be called from several lifecycle hooks; only the first call
    starts the clock. ``poll`` is fed one sample per tick and returns the
    report tag once polling should stop. The grace period and timeout run
    from ``mark_ready``; the first ``poll`` marks the player ready if nobody
    did before.
    """

    def __init__(
        self,
        settings: Optional[TimerSettings] = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.settings = settings or TimerSettings()
        self._clock = clock
        self._state = TimerState()
        self._target = normalize_activity_id(self.settings.target_activity)

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def armed(self) -> bool:
        return self._state.armed

    @property
    def reported(self) -> bool:
        return self._state.reported

    def arm(self, source: str = "BeforeSplashScreen") -> bool:
        if self._state.armed:
            return False
        self._state.armed = True
        self._state.start_instant = self._clock()
        logger.info("[StartupTimer] armed (%s)", source)
        return True

    def mark_ready(self) -> None:
        if self._state.ready_instant is not None:
            return
        self._state.ready_instant = self._clock()
        logger.info("[StartupTimer] activity player ready.")

    def elapsed_since_ready(self) -> float:
        """Seconds since the player became observable (0 before that)."""
        if self._state.ready_instant is None:
            return 0.0
        return self._clock() - self._state.ready_instant

    def poll(self, activity_id: Optional[str], is_active: bool) -> Optional[str]:
        state = self._state
        if state.reported:
            return state.report_tag

        if state.ready_instant is None:
            self.mark_ready()

        current = normalize_activity_id(activity_id)
        if self.settings.verbose and (
            current != state.last_activity_id or is_active != state.was_active
        ):
            logger.debug(
                "[StartupTimer] state change: is_active=%s, activity=%r (norm=%r)",
                is_active,
                activity_id,
                current,
            )

        # Liveness from before the lock belongs to some other activity.
        was_locked = state.locked_activity_id is not None
        locked = state.locked_activity_id
        if locked is None and current and self._can_lock(current):
            state.locked_activity_id = locked = current
            if self.settings.verbose:
                logger.debug("[StartupTimer] locked activity %r (raw=%r)", current, activity_id)

        left_activity = (was_locked and state.was_active and not is_active) or (
            locked is not None and state.last_activity_id == locked and current != locked
        )

        waited = self.elapsed_since_ready()
        if left_activity:
            self.report(ReportTag.END)
        elif locked is None and waited >= self.settings.fastpath_grace.total_seconds():
            self.report(ReportTag.FASTPATH)
        elif waited >= self.settings.hard_timeout.total_seconds():
            if self.settings.verbose:
                logger.warning(
                    "[StartupTimer] timeout before the activity ended. "
                    "locked=%r last=%r current=%r is_active=%s",
                    locked,
                    state.last_activity_id,
                    current,
                    is_active,
                )
            self.report(ReportTag.TIMEOUT)
        else:
            state.last_activity_id = current
            state.was_active = is_active
            return None
        return state.report_tag

    def report(self, tag: str) -> bool:
        """Log ``[tag] (t=<ms>ms)`` unless something was already reported."""
        state = self._state
        if state.reported:
            return False
        if not state.armed:
            self.arm("report")
        state.reported = True
        state.report_tag = tag
        state.elapsed_ms = (self._clock() - state.start_instant) * 1000.0
        logger.info("[%s] (t=%.1fms)", tag, state.elapsed_ms)
        return True

    @staticmethod
    def resolve_activity_identifier(handle: Any) -> Optional[str]:
        return resolve_activity_identifier(handle)

    def _can_lock(self, normalized: str) -> bool:
        return self._target is None or normalized == self._target
