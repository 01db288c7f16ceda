"""Cooperative polling task that feeds player samples into the timer."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Optional

from .adapters import (
    DEFAULT_ADAPTERS,
    ActivityIdentifierAdapter,
    ActivityPlayer,
    PlayerRegistry,
    select_adapter,
)
from .config import TimerSettings
from .models import NO_OBSERVATION, ReportTag, Sample
from .timer import StartupIntervalTimer

logger = logging.getLogger(__name__)


class PlayerSampler:
    """Reads one ``Sample`` per call, never raising.

    The identifier adapter is chosen from the first handle one understands
    and reused after that; when it comes up empty the others get a turn.
    """

    def __init__(
        self,
        player: ActivityPlayer,
        adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
    ) -> None:
        self.player = player
        self._adapters = tuple(adapters)
        self._adapter: Optional[ActivityIdentifierAdapter] = None

    def sample(self) -> Sample:
        try:
            handle = self.player.played_activity
        except Exception:
            logger.debug("Player did not expose its played activity", exc_info=True)
            return NO_OBSERVATION
        return Sample(activity_id=self._identify(handle), is_active=self._is_active())

    def _identify(self, handle: Any) -> Optional[str]:
        if handle is None:
            return None
        if self._adapter is not None:
            identifier = self._adapter.try_get_activity_identifier(handle)
            if identifier is not None:
                return identifier
        adapter = select_adapter(handle, self._adapters)
        if adapter is None:
            return None
        if adapter is not self._adapter:
            logger.debug("Using %s for activity identifiers", type(adapter).__name__)
            self._adapter = adapter
        return adapter.try_get_activity_identifier(handle)

    def _is_active(self) -> bool:
        try:
            return bool(self.player.is_active)
        except Exception:
            return False


async def wait_for_player(
    registry: PlayerRegistry,
    settings: TimerSettings,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> Optional[ActivityPlayer]:
    """Retry the registry every tick until it answers or the timeout elapses."""
    loop = loop or asyncio.get_running_loop()
    deadline = loop.time() + settings.hard_timeout.total_seconds()
    interval = settings.tick_interval.total_seconds()
    while True:
        try:
            player = registry.get_player()
        except Exception:
            logger.debug("Activity player not available yet", exc_info=settings.verbose)
        else:
            if player is not None:
                return player
        if loop.time() >= deadline:
            return None
        await asyncio.sleep(interval)


async def watch(
    timer: StartupIntervalTimer,
    registry: PlayerRegistry,
    adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
) -> Optional[str]:
    """Poll until the timer reports and return the report tag."""
    settings = timer.settings
    player = await wait_for_player(registry, settings)
    if player is None:
        logger.warning("Activity player never became available.")
        timer.report(ReportTag.TIMEOUT)
        return timer.state.report_tag

    timer.mark_ready()
    sampler = PlayerSampler(player, adapters)
    interval = settings.tick_interval.total_seconds()
    while not timer.reported:
        sample = sampler.sample()
        if timer.poll(sample.activity_id, sample.is_active):
            break
        # Second look before the next tick so a one-tick activity is not missed.
        await asyncio.sleep(0)
        sample = sampler.sample()
        if timer.poll(sample.activity_id, sample.is_active):
            break
        await asyncio.sleep(interval)
    return timer.state.report_tag


def install(
    timer: StartupIntervalTimer,
    registry: PlayerRegistry,
    existing: Optional[asyncio.Task] = None,
    adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
) -> asyncio.Task:
    """Schedule ``watch`` on the running loop unless ``existing`` is still alive."""
    if existing is not None and not existing.done():
        return existing
    loop = asyncio.get_running_loop()
    return loop.create_task(watch(timer, registry, adapters), name="startup-timer")
