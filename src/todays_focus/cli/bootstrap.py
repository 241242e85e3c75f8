# src/todays_focus/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, the task store, the notification center and the reminder
  scheduler into AppState,
- loads persisted tasks and re-registers their reminders.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..reminders.actions import NotificationActionHandler
from ..reminders.notifications import LocalNotificationCenter
from ..reminders.reminder_scheduler import ReminderScheduler
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = TaskStore(SQLiteKeyValueStore(settings.db_path), key=settings.storage_key)
    center = LocalNotificationCenter()

    # Subscribe before load() so nothing mutates the store unobserved.
    scheduler = ReminderScheduler(store, center, nag_delay_minutes=settings.nag_delay_minutes)
    scheduler.register_categories()

    store.load()
    scheduler.reschedule_all()

    return AppState(
        settings=settings,
        store=store,
        notifications=center,
        scheduler=scheduler,
        actions=NotificationActionHandler(scheduler),
        show_completed=bool(getattr(settings, "show_completed", True)),
    )
