# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from todays_focus.cli.bootstrap import create_initial_state
from todays_focus.core.state import AppState
from todays_focus.reminders.notifications import LocalNotificationCenter
from todays_focus.reminders.reminder_scheduler import ReminderScheduler
from todays_focus.tasks.task_store import TaskStore

from .fakes import FakeClock, InMemoryKeyValueStorage

# Wednesday, mid-month, local time.
NOW = datetime(2026, 10, 14, 12, 0).timestamp()


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todays-focus-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "focus.sqlite3",
        storage_key="todos",
        nag_delay_minutes=10,
        notify_interval_seconds=0.01,
        first_weekday=0,
        show_completed=True,
        default_category="Yours",
        default_priority="Medium",
        console_enabled=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """AppState wired by the real composition root over a tmp SQLite file."""
    return create_initial_state(settings=settings)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def store(storage: InMemoryKeyValueStorage, clock: FakeClock) -> TaskStore:
    return TaskStore(storage, clock=clock)


@pytest.fixture()
def center(clock: FakeClock) -> LocalNotificationCenter:
    return LocalNotificationCenter(clock=clock)


@pytest.fixture()
def scheduler(store: TaskStore, center: LocalNotificationCenter, clock: FakeClock) -> ReminderScheduler:
    return ReminderScheduler(store, center, nag_delay_minutes=10, clock=clock)
