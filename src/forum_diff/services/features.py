# src/forum_diff/services/features.py
"""Lookup of optional companion features enabled for this installation."""

from __future__ import annotations

from collections.abc import Iterable

QUIET_EDITS = "quiet-edits"


class FeatureFlags:
    """Answers whether a named companion feature is switched on."""

    def __init__(self, enabled: Iterable[str] = ()) -> None:
        self._enabled = frozenset(name.strip() for name in enabled if name.strip())

    def is_enabled(self, name: str) -> bool:
        """Return True if ``name`` is enabled."""
        return name in self._enabled

    @classmethod
    def from_settings(cls, settings: object) -> "FeatureFlags":
        """Build the lookup from ``Settings.enabled_extensions``."""
        return cls(getattr(settings, "enabled_extensions", ()) or ())
