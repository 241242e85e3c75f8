# src/todays_focus/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..reminders.actions import NotificationActionHandler
from ..reminders.notifications import LocalNotificationCenter, NotificationRequest
from ..reminders.reminder_scheduler import ReminderScheduler
from ..tasks.task_models import Category
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Everything the front end needs, wired once by the composition root.

    `lock` serializes store access between the console thread and the
    notification delivery thread.
    """

    settings: Any
    store: TaskStore
    notifications: LocalNotificationCenter
    scheduler: ReminderScheduler
    actions: NotificationActionHandler

    show_completed: bool = True
    selected_category: Category | None = None
    last_notification: NotificationRequest | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
