"""State and sample models for the startup timer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ReportTag:
    END = "end"
    FASTPATH = "fastpath"
    TIMEOUT = "timeout"
    QUIT = "quit"


@dataclass(frozen=True, slots=True)
class Sample:
    """One observation of the activity player."""

    activity_id: Optional[str] = None
    is_active: bool = False


NO_OBSERVATION = Sample()


@dataclass(slots=True)
class TimerState:
    """Everything the timer remembers between polls."""

    armed: bool = False
    start_instant: float = 0.0
    reported: bool = False
    report_tag: Optional[str] = None
    elapsed_ms: Optional[float] = None
    locked_activity_id: Optional[str] = None
    last_activity_id: Optional[str] = None
    was_active: bool = False
    ready_instant: Optional[float] = None
