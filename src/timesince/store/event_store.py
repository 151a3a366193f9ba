"""JSON-file backed store mapping event names to their last occurrence."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Literal

from timesince.errors import CorruptStore, DuplicateEvent, EventNotFound, InvalidName, IOFailure
from timesince.store.events import Event, normalize_name
from timesince.utils.dt import format_timestamp, parse_timestamp, to_utc, utc_now

ListOrder = Literal["name", "recent", "oldest"]
LIST_ORDERS: tuple[str, ...] = ("name", "recent", "oldest")


class EventStore:
    """Event timestamps held in memory and persisted to a single JSON file.

    Only :meth:`load` and :meth:`save` touch the filesystem. Every other
    operation mutates or reads the in-memory mapping loaded for this run.
    """

    def __init__(
        self,
        path: Path,
        *,
        clock: Callable[[], datetime] = utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self._path = Path(path)
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._events: dict[str, datetime] = {}

    @property
    def path(self) -> Path:
        return self._path

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._events

    def __len__(self) -> int:
        return len(self._events)

    def _now(self) -> datetime:
        return to_utc(self._clock())

    def _require(self, name: str, hint: str | None = None) -> str:
        key = name.strip() if isinstance(name, str) else name
        if key not in self._events:
            raise EventNotFound(str(name), hint)
        return key

    def add(self, name: str) -> Event:
        """Insert *name* with the current time."""

        key = normalize_name(name)
        if key in self._events:
            raise DuplicateEvent(key)
        self._events[key] = self._now()
        self._logger.info("Added event %r", key)
        return Event(key, self._events[key])

    def mark(self, name: str) -> Event:
        """Reset the timestamp of an existing event to the current time."""

        key = self._require(name)
        self._events[key] = self._now()
        self._logger.info("Marked event %r", key)
        return Event(key, self._events[key])

    def get(self, name: str, *, hint: str | None = None) -> Event:
        key = self._require(name, hint)
        return Event(key, self._events[key])

    def elapsed(self, name: str, *, hint: str | None = None) -> tuple[timedelta, datetime]:
        """Return the time since *name* was last marked and the raw timestamp."""

        event = self.get(name, hint=hint)
        return self._now() - event.timestamp, event.timestamp

    def remove(self, name: str) -> Event:
        key = self._require(name)
        timestamp = self._events.pop(key)
        self._logger.info("Removed event %r", key)
        return Event(key, timestamp)

    def list_events(self, order: ListOrder = "name") -> list[Event]:
        """Return all events in a deterministic *order*.

        ``name`` sorts alphabetically, ``recent`` puts the most recently
        marked event first and ``oldest`` the least recently marked one.
        Ties on timestamp fall back to the name.
        """

        events = [Event(name, timestamp) for name, timestamp in self._events.items()]
        if order == "name":
            return sorted(events, key=lambda event: event.name)
        if order == "oldest":
            return sorted(events, key=lambda event: (event.timestamp, event.name))
        if order == "recent":
            by_name = sorted(events, key=lambda event: event.name)
            return sorted(by_name, key=lambda event: event.timestamp, reverse=True)
        raise ValueError(f"list order must be one of: {', '.join(LIST_ORDERS)}")

    def load(self) -> None:
        """Replace the in-memory mapping with the contents of :attr:`path`.

        A missing file yields an empty store. On any failure the current
        mapping is left as it was.
        """

        if not self._path.exists():
            self._logger.info("No event file at %s, starting empty", self._path)
            self._events = {}
            return
        try:
            data = self._path.read_bytes()
        except OSError as exc:
            raise IOFailure(self._path, "read", exc) from exc
        try:
            raw = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptStore(self._path, f"not valid UTF-8 (byte {exc.start})") from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptStore(self._path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
        self._events = self._decode(payload)
        self._logger.info("Loaded %d events from %s", len(self._events), self._path)

    def _decode(self, payload: Any) -> dict[str, datetime]:
        if not isinstance(payload, dict):
            raise CorruptStore(self._path, "top level must be a JSON object")
        decoded: dict[str, datetime] = {}
        for name, raw_timestamp in payload.items():
            try:
                key = normalize_name(name)
            except InvalidName as exc:
                raise CorruptStore(self._path, exc.message) from exc
            if key in decoded:
                raise CorruptStore(self._path, f"duplicate event name {key!r}")
            # OverflowError when an offset pushes the value outside datetime range
            try:
                decoded[key] = parse_timestamp(raw_timestamp)
            except (TypeError, ValueError, OverflowError) as exc:
                raise CorruptStore(
                    self._path, f"bad timestamp {raw_timestamp!r} for event {key!r}"
                ) from exc
        return decoded

    def save(self) -> None:
        """Atomically replace :attr:`path` with the current mapping."""

        payload = {name: format_timestamp(ts) for name, ts in sorted(self._events.items())}
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
        temp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                delete=False,
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                encoding="utf-8",
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            # NamedTemporaryFile creates 0600; keep the mode a plain write would give
            os.chmod(temp_path, self._target_mode())
            os.replace(temp_path, self._path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise IOFailure(self._path, "write", exc) from exc
        self._logger.info("Saved %d events to %s", len(self._events), self._path)

    def _target_mode(self) -> int:
        """Mode of the existing file, or the umask-derived default for a new one."""

        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask


__all__ = ["EventStore", "LIST_ORDERS", "ListOrder"]
