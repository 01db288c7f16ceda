"""Adapters that pull an activity identifier out of a player handle.

Script players have exposed the name of the played script in different
places over time. Each supported shape gets its own adapter; the watcher
picks one once, on the first handle it sees, instead of probing every tick.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class SubsystemNotReady(RuntimeError):
    """Raised by a registry while the activity player does not exist yet."""


@runtime_checkable
class ActivityPlayer(Protocol):
    """The observable side of a script player."""

    @property
    def played_activity(self) -> Any: ...

    @property
    def is_active(self) -> bool: ...


class PlayerRegistry(Protocol):
    def get_player(self) -> ActivityPlayer:
        """Return the player or raise while the subsystem is initializing."""
        ...


class ActivityIdentifierAdapter(Protocol):
    def supports(self, handle: Any) -> bool: ...

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]: ...


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


class ScriptNameAdapter:
    """Handles that carry a non-empty ``script_name``."""

    def supports(self, handle: Any) -> bool:
        return self.try_get_activity_identifier(handle) is not None

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]:
        try:
            return _text(getattr(handle, "script_name", None))
        except Exception:
            return None


class NestedScriptAdapter:
    """Handles that wrap a script object with a non-empty ``name``."""

    def supports(self, handle: Any) -> bool:
        return self.try_get_activity_identifier(handle) is not None

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]:
        try:
            script = getattr(handle, "script", None)
            return _text(getattr(script, "name", None))
        except Exception:
            return None


class MappingAdapter:
    _KEYS = ("script_name", "name")

    def supports(self, handle: Any) -> bool:
        return isinstance(handle, Mapping)

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]:
        try:
            for key in self._KEYS:
                value = _text(handle.get(key))
                if value:
                    return value
        except Exception:
            return None
        return None


class TextAdapter:
    """Plain string handles are their own identifier."""

    def supports(self, handle: Any) -> bool:
        return isinstance(handle, str)

    def try_get_activity_identifier(self, handle: Any) -> Optional[str]:
        return _text(handle)


DEFAULT_ADAPTERS: tuple[ActivityIdentifierAdapter, ...] = (
    TextAdapter(),
    MappingAdapter(),
    ScriptNameAdapter(),
    NestedScriptAdapter(),
)


def select_adapter(
    handle: Any,
    adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
) -> Optional[ActivityIdentifierAdapter]:
    """Return the first adapter that understands ``handle``."""
    if handle is None:
        return None
    for adapter in adapters:
        try:
            if adapter.supports(handle):
                return adapter
        except Exception:
            logger.debug("Adapter %r failed capability check", adapter, exc_info=True)
    return None


def resolve_activity_identifier(
    handle: Any,
    adapters: Iterable[ActivityIdentifierAdapter] = DEFAULT_ADAPTERS,
) -> Optional[str]:
    """Best-effort identifier for ``handle``; ``None`` when nothing fits."""
    adapter = select_adapter(handle, adapters)
    if adapter is None:
        return None
    return adapter.try_get_activity_identifier(handle)
