"""Shared fixtures for the daylist test suite."""

import os
import tempfile

# Keep test runs from writing into the real log directory
os.environ.setdefault("DAYLIST_LOG_DIR", tempfile.mkdtemp(prefix="daylist-logs-"))

import pytest
from datetime import date

from daylist.data.gateway import MemoryGateway
from daylist.models import Task
from daylist.session import EditSession
from daylist.store import TaskStore

TODAY = date(2026, 10, 17)


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = 1_760_700_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def gateway():
    return MemoryGateway()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(gateway, clock):
    return TaskStore(gateway, clock=clock)


@pytest.fixture
def session(store):
    return EditSession(store)


@pytest.fixture
def make_task():
    """Factory for tasks with sequential ids."""
    counter = {"next": 1}

    def _make(title="Task", **fields):
        task_id = fields.pop("id", None)
        if task_id is None:
            task_id = counter["next"]
            counter["next"] += 1
        return Task(id=task_id, title=title, **fields)

    return _make
