"""Error hierarchy for event store and command failures."""

from __future__ import annotations

from pathlib import Path


class TimesinceError(Exception):
    """Base exception for all user-facing failures."""

    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidName(TimesinceError):
    def __init__(self, name: str, reason: str = "must not be empty") -> None:
        super().__init__(f"Invalid event name {name!r}: {reason}.")
        self.name = name


class DuplicateEvent(TimesinceError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Event '{name}' already exists. Use 'did' to update it.")
        self.name = name


class EventNotFound(TimesinceError):
    def __init__(self, name: str, hint: str | None = None) -> None:
        message = f"Event '{name}' not found."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.name = name


class CorruptStore(TimesinceError):
    """The persisted event file exists but cannot be parsed."""

    exit_code = 3

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Event file {path} is corrupt: {detail}")
        self.path = path


class IOFailure(TimesinceError):
    """Reading or writing the event file failed at the filesystem level."""

    exit_code = 4

    def __init__(self, path: Path, action: str, exc: OSError) -> None:
        reason = exc.strerror or str(exc)
        super().__init__(f"Could not {action} {path}: {reason}")
        self.path = path


__all__ = [
    "CorruptStore",
    "DuplicateEvent",
    "EventNotFound",
    "IOFailure",
    "InvalidName",
    "TimesinceError",
]
