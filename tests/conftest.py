"""Shared fixtures: simulated wall clock and a recording tick scheduler."""

from datetime import datetime, timedelta, timezone

import pytest

from cycletimer.store import CycleStore

T0 = datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


class FakeNow:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current

    def at(self, seconds: float) -> datetime:
        """Jump to T0 + seconds."""
        self.current = T0 + timedelta(seconds=seconds)
        return self.current


class FakeHandle:
    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeScheduler:
    """Records every tick handle handed out."""

    def __init__(self):
        self.handles = []

    def __call__(self, interval, callback):
        handle = FakeHandle(interval, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.stopped]


@pytest.fixture
def now():
    return FakeNow()


@pytest.fixture
def store(now):
    return CycleStore(now=now)


@pytest.fixture
def scheduler():
    return FakeScheduler()
