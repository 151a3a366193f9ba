"""Event records and name validation."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import datetime

from timesince.errors import InvalidName


@dataclass(frozen=True)
class Event:
    name: str
    timestamp: datetime


def normalize_name(name: str) -> str:
    """Return the stored form of *name* or raise :class:`InvalidName`."""
    if not isinstance(name, str):
        raise InvalidName(str(name), "must be text")
    stripped = name.strip()
    if not stripped:
        raise InvalidName(name)
    if any(unicodedata.category(char) == "Cc" for char in stripped):
        raise InvalidName(name, "must not contain control characters")
    return stripped


__all__ = ["Event", "normalize_name"]
