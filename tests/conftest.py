from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from timesince.store.event_store import EventStore

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "timesince" / "data.json"


@pytest.fixture
def store(data_file: Path, clock: FakeClock) -> EventStore:
    return EventStore(data_file, clock=clock)
