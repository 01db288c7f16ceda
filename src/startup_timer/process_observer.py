"""Activity player backed by a process tree.

Each live process under a root command counts as an activity, identified by
the script it runs (``python scripts/initialize.py`` -> ``scripts/initialize.py``)
or by its executable name.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import psutil

from .adapters import DEFAULT_ADAPTERS, SubsystemNotReady

logger = logging.getLogger(__name__)

_INTERPRETERS = ("python", "pypy", "node", "bash", "sh", "zsh", "ruby", "perl", "pwsh")


def _is_running(process: psutil.Process) -> bool:
    try:
        return process.is_running() and process.status() != psutil.STATUS_ZOMBIE
    except psutil.Error:
        return False


class ProcessTreePlayer:
    """Reports the newest live descendant of ``root`` as the played activity.

    A ``None`` root is a command that already exited; it never plays anything.
    """

    def __init__(self, root: Optional[psutil.Process]) -> None:
        self.root = root
        self._current: Optional[psutil.Process] = None

    @property
    def played_activity(self) -> Optional[psutil.Process]:
        live = [child for child in self._children() if _is_running(child)]
        if live:
            self._current = max(live, key=_create_time)
        elif self.root is not None and _is_running(self.root):
            self._current = self.root
        else:
            self._current = None
        return self._current

    @property
    def is_active(self) -> bool:
        return self._current is not None and _is_running(self._current)

    def _children(self) -> list[psutil.Process]:
        if self.root is None:
            return []
        try:
            return self.root.children(recursive=True)
        except psutil.Error:
            return []


def _create_time(process: psutil.Process) -> float:
    try:
        return process.create_time()
    except psutil.Error:
        return 0.0


class ProcessTreeRegistry:
    """Hands out a ``ProcessTreePlayer`` once a root process is attached."""

    def __init__(self, pid: Optional[int] = None) -> None:
        self._pid = pid
        self._player: Optional[ProcessTreePlayer] = None

    def attach(self, pid: int) -> None:
        """Take a handle on ``pid`` now, before the caller waits on it.

        A process that is already gone still yields a player, one that only
        ever reports no activity.
        """
        self._pid = pid
        try:
            root: Optional[psutil.Process] = psutil.Process(pid)
        except psutil.NoSuchProcess:
            logger.debug("Process %s exited before it could be watched", pid)
            root = None
        self._player = ProcessTreePlayer(root)

    def get_player(self) -> ProcessTreePlayer:
        if self._player is not None:
            return self._player
        if self._pid is None:
            raise SubsystemNotReady("no process attached")
        try:
            root = psutil.Process(self._pid)
        except psutil.NoSuchProcess as exc:
            raise SubsystemNotReady(f"process {self._pid} not found") from exc
        self._player = ProcessTreePlayer(root)
        logger.debug("Watching process tree rooted at pid %s", self._pid)
        return self._player


class ProcessAdapter:
    """Identifies ``psutil.Process`` handles by script argument or name."""

    def supports(self, handle: Any) -> bool:
        return isinstance(handle, psutil.Process)

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]:
        try:
            cmdline = handle.cmdline()
            name = handle.name()
        except (psutil.Error, OSError):
            return None
        script = script_argument(cmdline)
        return script or name or None


def script_argument(cmdline: list[str]) -> Optional[str]:
    """Return the script an interpreter command line runs, if any."""
    if len(cmdline) < 2:
        return None
    executable = cmdline[0].replace("\\", "/").rsplit("/", 1)[-1].lower()
    if not executable.startswith(_INTERPRETERS):
        return None
    args = iter(cmdline[1:])
    for arg in args:
        if arg == "-m":
            module = next(args, None)
            return module.replace(".", "/") if module else None
        if arg == "-c":
            return None
        if not arg.startswith("-"):
            return arg
    return None


PROCESS_ADAPTERS = (ProcessAdapter(), *DEFAULT_ADAPTERS)
