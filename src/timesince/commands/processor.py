"""Execute one parsed command against an event store.

Each invocation loads the store, applies exactly one command and persists
the store only when the command changed it. Errors raised by the store
propagate unchanged, so nothing is written when a command fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from timesince.commands.humanize import format_duration
from timesince.store.event_store import EventStore, ListOrder

logger = logging.getLogger(__name__)

QUERY_HINT = "You can add it using the 'add' command."


@dataclass(frozen=True)
class Add:
    name: str


@dataclass(frozen=True)
class Mark:
    name: str


@dataclass(frozen=True)
class Query:
    name: str


@dataclass(frozen=True)
class ListEvents:
    order: ListOrder = "name"


@dataclass(frozen=True)
class Remove:
    name: str


Command = Union[Add, Mark, Query, ListEvents, Remove]


def execute(store: EventStore, command: Command) -> str:
    """Run *command* against *store* and return the text to display."""

    store.load()
    if isinstance(command, Add):
        event = store.add(command.name)
        store.save()
        return f"Added '{event.name}'."
    if isinstance(command, Mark):
        event = store.mark(command.name)
        store.save()
        return f"Marked '{event.name}' as done just now."
    if isinstance(command, Query):
        duration, _ = store.elapsed(command.name, hint=QUERY_HINT)
        return f"Time since last {command.name.strip()}: {format_duration(duration)}"
    if isinstance(command, ListEvents):
        return render_list(store, command.order)
    if isinstance(command, Remove):
        event = store.remove(command.name)
        store.save()
        return f"Removed '{event.name}'."
    raise TypeError(f"Unsupported command: {command!r}")


def render_list(store: EventStore, order: ListOrder = "name") -> str:
    events = store.list_events(order)
    if not events:
        return "No events found."
    lines = []
    for event in events:
        duration, _ = store.elapsed(event.name)
        lines.append(f"{event.name}: {format_duration(duration)}")
    logger.debug("Listed %d events ordered by %s", len(events), order)
    return "\n".join(lines)


__all__ = ["Add", "Command", "ListEvents", "Mark", "Query", "Remove", "execute", "render_list"]
