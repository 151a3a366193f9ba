"""Datetime helpers for stored event timestamps."""

from __future__ import annotations

import re
from datetime import datetime, timezone

UTC_ZONE = timezone.utc

_FRACTION = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC_ZONE)


def to_utc(ts: datetime) -> datetime:
    """Convert a naive or timezone-aware timestamp to UTC.

    Naive timestamps are taken to already be in UTC.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC_ZONE)
    return ts.astimezone(UTC_ZONE)


def format_timestamp(ts: datetime) -> str:
    """Render *ts* as an ISO-8601 UTC string with a ``Z`` suffix."""
    return to_utc(ts).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing ``Z`` for UTC."""
    if not isinstance(raw, str):
        raise TypeError(f"timestamp must be a string, got {type(raw).__name__}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat only understands up to microsecond precision
    text = _FRACTION.sub(_pad_fraction, text, count=1)
    return to_utc(datetime.fromisoformat(text))


def _pad_fraction(match: re.Match[str]) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")
