# src/todays_focus/reminders/reminder_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

Keeps the notification center in step with the task store:
- a task with an enabled reminder in the future gets two one-shot requests,
  the primary at reminder_date and a nagging follow-up `nag_delay` later,
- editing, completing or deleting a task cancels both,
- snooze / turn-off go through the store so the change is persisted.

The scheduler listens to store events, so callers never invoke it directly
for plain edits.
"""

import logging
import time
from collections.abc import Callable

from ..core.ports import NotificationCenter
from ..tasks.task_models import Task
from ..tasks.task_store import TaskEvent, TaskEventKind, TaskStore
from .notifications import (
    REMINDER_CATEGORY,
    NotificationAction,
    NotificationCategory,
    NotificationRequest,
)

logger = logging.getLogger(__name__)

NAG_PREFIX = "nag-"
DEFAULT_NAG_DELAY_MINUTES = 10

ACTION_SNOOZE_15 = "SNOOZE_15"
ACTION_SNOOZE_30 = "SNOOZE_30"
ACTION_SNOOZE_60 = "SNOOZE_60"
ACTION_TURN_OFF = "TURN_OFF"

REMINDER_ACTIONS: tuple[NotificationAction, ...] = (
    NotificationAction(ACTION_SNOOZE_15, "Snooze 15 min"),
    NotificationAction(ACTION_SNOOZE_30, "Snooze 30 min"),
    NotificationAction(ACTION_SNOOZE_60, "Snooze 1 hour"),
    NotificationAction(ACTION_TURN_OFF, "Turn Off", destructive=True),
)


def reminder_identifiers(task_id: str) -> tuple[str, str]:
    """(primary, nag) notification identifiers for a task."""
    return task_id, f"{NAG_PREFIX}{task_id}"


def build_reminder_requests(
    task: Task,
    *,
    now_ts: float,
    nag_delay_minutes: int = DEFAULT_NAG_DELAY_MINUTES,
) -> tuple[NotificationRequest, NotificationRequest] | None:
    """
    Compute the (primary, nag) pair for a task, or None if nothing should fire.

    Eligible: reminder enabled, reminder_date set and strictly in the future,
    task not completed.
    """
    when = task.reminder_date
    if when is None or not task.reminder_enabled or when <= now_ts or task.is_completed:
        return None

    primary_id, nag_id = reminder_identifiers(task.id)
    info = {"todoId": task.id}

    primary = NotificationRequest(
        identifier=primary_id,
        fire_at=when,
        title=f"Reminder: {task.title}",
        body=task.description or "You have a task reminder.",
        category=REMINDER_CATEGORY,
        user_info=info,
        relevance=1.0,
    )
    nag = NotificationRequest(
        identifier=nag_id,
        fire_at=when + nag_delay_minutes * 60,
        title=f"Nagging Reminder: {task.title}",
        body="You still have this task pending.",
        category=REMINDER_CATEGORY,
        user_info=dict(info),
        relevance=0.8,
    )
    return primary, nag


class ReminderScheduler:
    """Subscribes to a TaskStore and mirrors reminder state into a NotificationCenter."""

    def __init__(
        self,
        store: TaskStore,
        center: NotificationCenter,
        *,
        nag_delay_minutes: int = DEFAULT_NAG_DELAY_MINUTES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._center = center
        self._nag_delay = max(0, int(nag_delay_minutes))
        self._clock = clock
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self.on_task_event)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ---- setup ----

    def register_categories(self) -> None:
        """Install the reminder category and its actions (safe to call repeatedly)."""
        try:
            self._center.set_categories(
                [NotificationCategory(identifier=REMINDER_CATEGORY, actions=REMINDER_ACTIONS)]
            )
        except Exception:
            logger.exception("Failed to register notification categories")

    def reschedule_all(self) -> int:
        """Re-register reminders for every stored task (used once after load)."""
        count = 0
        for task in self._store.all():
            if self.sync(task):
                count += 1
        logger.info("Reminders scheduled for %d tasks", count)
        return count

    # ---- scheduling ----

    def schedule(self, task: Task) -> bool:
        """
        Cancel whatever is pending for the task, then register primary + nag.

        The nag is registered only once the primary registration went through.
        Returns True if the primary was registered.
        """
        pair = build_reminder_requests(
            task, now_ts=self._clock(), nag_delay_minutes=self._nag_delay
        )
        if pair is None:
            logger.debug(
                "Reminder not scheduled task_id=%s date=%s enabled=%s",
                task.id,
                task.reminder_date,
                task.reminder_enabled,
            )
            return False

        self.cancel(task.id)
        primary, nag = pair

        try:
            self._center.add(primary)
        except Exception:
            logger.exception("Failed to schedule main notification task_id=%s", task.id)
            return False
        logger.info("Scheduled reminder task_id=%s at %s", task.id, primary.fire_at)

        try:
            self._center.add(nag)
        except Exception:
            logger.exception("Failed to schedule nagging notification task_id=%s", task.id)
            return True
        logger.debug("Scheduled nagging reminder task_id=%s at %s", task.id, nag.fire_at)
        return True

    def cancel(self, task_id: str) -> None:
        try:
            self._center.remove_pending(reminder_identifiers(task_id))
        except Exception:
            logger.exception("Failed to cancel notifications task_id=%s", task_id)

    def sync(self, task: Task) -> bool:
        """Cancel, then schedule again if the task is still eligible."""
        self.cancel(task.id)
        return self.schedule(task)

    def on_task_event(self, event: TaskEvent) -> None:
        if event.kind == TaskEventKind.DELETED:
            self.cancel(event.task.id)
        else:
            self.sync(event.task)

    # ---- user responses ----

    def snooze(self, task_id: str, minutes: int) -> Task | None:
        """Move the reminder to now + minutes and re-enable it. Unknown or completed task -> None."""
        current = self._store.get(task_id)
        if current is None:
            return None
        if current.is_completed:
            logger.info("Snooze ignored for completed task_id=%s", task_id)
            return None
        self.cancel(task_id)
        new_date = self._clock() + int(minutes) * 60
        # The store publishes UPDATED, which reschedules through on_task_event.
        task = self._store.set_reminder(task_id, reminder_date=new_date, enabled=True)
        logger.info("Reminder snoozed task_id=%s minutes=%s", task_id, minutes)
        return task

    def turn_off(self, task_id: str) -> Task | None:
        if self._store.get(task_id) is None:
            return None
        self.cancel(task_id)
        task = self._store.set_reminder(task_id, enabled=False)
        logger.info("Reminder turned off task_id=%s", task_id)
        return task
