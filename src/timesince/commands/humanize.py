"""Render elapsed durations as short English phrases."""

from __future__ import annotations

from datetime import timedelta

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

# Calendar-free approximations: a month is 30 days and a year 365 days.
UNITS: tuple[tuple[str, int], ...] = (
    ("year", 365 * _DAY),
    ("month", 30 * _DAY),
    ("week", 7 * _DAY),
    ("day", _DAY),
    ("hour", _HOUR),
    ("minute", _MINUTE),
    ("second", 1),
)


def _pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def decompose(duration: timedelta) -> list[tuple[int, str]]:
    """Split *duration* into ``(count, unit)`` pairs, largest unit first.

    Fractions of a second are dropped and negative durations count as zero.
    Units with a zero count are omitted.
    """

    remaining = max(int(duration.total_seconds()), 0)
    parts: list[tuple[int, str]] = []
    for unit, size in UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append((count, unit))
    return parts


def format_duration(duration: timedelta, *, max_units: int | None = None) -> str:
    """Return e.g. ``"3 days, 2 hours"`` for *duration*.

    ``max_units`` keeps only the largest units, truncating the rest.
    """

    if max_units is not None and max_units < 1:
        raise ValueError("max_units must be positive")
    parts = decompose(duration)
    if not parts:
        return _pluralize(0, "second")
    if max_units is not None:
        parts = parts[:max_units]
    return ", ".join(_pluralize(count, unit) for count, unit in parts)


__all__ = ["UNITS", "decompose", "format_duration"]
