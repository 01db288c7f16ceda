"""Utilities to normalize activity identifiers."""

from __future__ import annotations

from typing import Optional


def normalize_activity_id(raw: Optional[str]) -> Optional[str]:
    """Reduce a script path or name to a comparable identifier.

    ``scripts\\Initialize.nani`` and ``INITIALIZE`` both become ``initialize``.
    """
    if not raw:
        return None
    normalized = raw.strip().replace("\\", "/")
    normalized = normalized.rsplit("/", 1)[-1]
    stem, dot, _ = normalized.rpartition(".")
    if dot and stem:
        normalized = stem
    return normalized.casefold() or None


def same_activity(left: Optional[str], right: Optional[str]) -> bool:
    normalized = normalize_activity_id(left)
    return normalized is not None and normalized == normalize_activity_id(right)
