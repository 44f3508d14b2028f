from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shiftlog.core.clock import Clock
from shiftlog.storage import MemoryStore, StateRepository
from shiftlog.tracker import ShiftTracker

T0 = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced time source for deterministic instants."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def repository(store: MemoryStore) -> StateRepository:
    return StateRepository(store)


@pytest.fixture
def tracker(repository: StateRepository, fake_clock: FakeClock) -> ShiftTracker:
    return ShiftTracker(repository=repository, clock=Clock(fake_clock))
