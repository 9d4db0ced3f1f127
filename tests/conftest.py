# tests/conftest.py

from datetime import datetime
from pathlib import Path

import pytest

from taskr.engine import TaskEngine
from taskr.storage import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    # Monday 19 October 2026, mid-morning
    return FakeClock(datetime(2026, 10, 19, 10, 0, 0))


@pytest.fixture()
def store(tmp_path: Path) -> TaskStore:
    return TaskStore(tmp_path / "data.json")


@pytest.fixture()
def engine(store: TaskStore, clock: FakeClock) -> TaskEngine:
    return TaskEngine(store, clock=clock)
