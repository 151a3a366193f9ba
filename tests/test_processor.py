"""Tests for command execution against an event store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from timesince.commands.processor import Add, ListEvents, Mark, Query, Remove, execute
from timesince.errors import DuplicateEvent, EventNotFound, InvalidName
from timesince.store.event_store import EventStore


def _fresh(data_file: Path, clock) -> EventStore:
    """A new store for the same file, as the next CLI invocation would build it."""
    return EventStore(data_file, clock=clock)


def test_add_persists_and_confirms(store: EventStore, data_file: Path) -> None:
    assert execute(store, Add("workout")) == "Added 'workout'."
    assert json.loads(data_file.read_text(encoding="utf-8")) == {"workout": "2024-05-01T12:00:00Z"}


def test_workout_scenario(data_file: Path, clock) -> None:
    """add, list, mark after a delay, query, remove, list across invocations."""
    execute(_fresh(data_file, clock), Add("workout"))
    assert execute(_fresh(data_file, clock), ListEvents()) == "workout: 0 seconds"

    clock.advance(days=3, hours=2)
    assert execute(_fresh(data_file, clock), Query("workout")) == "Time since last workout: 3 days, 2 hours"

    assert execute(_fresh(data_file, clock), Mark("workout")) == "Marked 'workout' as done just now."
    clock.advance(seconds=5)
    assert execute(_fresh(data_file, clock), Query("workout")) == "Time since last workout: 5 seconds"

    assert execute(_fresh(data_file, clock), Remove("workout")) == "Removed 'workout'."
    assert execute(_fresh(data_file, clock), ListEvents()) == "No events found."


def test_list_one_line_per_event(data_file: Path, clock) -> None:
    execute(_fresh(data_file, clock), Add("meditate"))
    clock.advance(hours=1)
    execute(_fresh(data_file, clock), Add("bake"))
    clock.advance(minutes=2)

    output = execute(_fresh(data_file, clock), ListEvents())
    assert output.splitlines() == ["bake: 2 minutes", "meditate: 1 hour, 2 minutes"]

    output = execute(_fresh(data_file, clock), ListEvents("oldest"))
    assert output.splitlines() == ["meditate: 1 hour, 2 minutes", "bake: 2 minutes"]


def test_duplicate_add_does_not_write(data_file: Path, clock) -> None:
    execute(_fresh(data_file, clock), Add("workout"))
    before = data_file.read_text(encoding="utf-8")
    clock.advance(hours=4)

    with pytest.raises(DuplicateEvent, match="Use 'did'"):
        execute(_fresh(data_file, clock), Add("workout"))

    assert data_file.read_text(encoding="utf-8") == before


def test_invalid_name_does_not_create_file(store: EventStore, data_file: Path) -> None:
    with pytest.raises(InvalidName):
        execute(store, Add(""))
    assert not data_file.exists()


@pytest.mark.parametrize("command", [Mark("ghost"), Query("ghost"), Remove("ghost")])
def test_missing_event_is_not_found(store: EventStore, data_file: Path, command) -> None:
    with pytest.raises(EventNotFound):
        execute(store, command)
    assert not data_file.exists()


def test_query_not_found_suggests_add(store: EventStore) -> None:
    with pytest.raises(EventNotFound, match="'add' command"):
        execute(store, Query("ghost"))


def test_read_only_commands_do_not_save(store: EventStore, data_file: Path) -> None:
    execute(store, ListEvents())
    assert not data_file.exists()


def test_unknown_command_type_is_rejected(store: EventStore) -> None:
    with pytest.raises(TypeError):
        execute(store, "list")  # type: ignore[arg-type]
