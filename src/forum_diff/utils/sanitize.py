# src/forum_diff/utils/sanitize.py
"""Helpers that coerce loosely typed setting values into safe numbers."""

from __future__ import annotations

import math


def sanitize_float(
    value: object,
    default: float = 0.8,
    minimum: float = 0.0,
    maximum: float = 1.0,
) -> float:
    """Coerce ``value`` to a float clamped into ``[minimum, maximum]``.

    Args:
        value: Raw setting value (number, numeric string, or anything else).
        default: Returned when ``value`` cannot be read as a finite number.
        minimum: Lower bound of the result.
        maximum: Upper bound of the result.

    Returns:
        A finite float within the requested bounds.
    """
    if isinstance(value, bool):
        return default
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return min(max(number, minimum), maximum)


def sanitize_int(value: object, default: int = 0) -> int:
    """Coerce ``value`` to an int, falling back to ``default`` when malformed."""
    if isinstance(value, bool):
        return default
    try:
        return int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
