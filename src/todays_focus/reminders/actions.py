# src/todays_focus/reminders/actions.py

from __future__ import annotations

import logging

from .notifications import NotificationResponse
from .reminder_scheduler import (
    ACTION_SNOOZE_15,
    ACTION_SNOOZE_30,
    ACTION_SNOOZE_60,
    ACTION_TURN_OFF,
    NAG_PREFIX,
    ReminderScheduler,
)

logger = logging.getLogger(__name__)

SNOOZE_MINUTES: dict[str, int] = {
    ACTION_SNOOZE_15: 15,
    ACTION_SNOOZE_30: 30,
    ACTION_SNOOZE_60: 60,
}


def task_id_for(response: NotificationResponse) -> str:
    """Task id carried by a notification: user_info first, identifier as fallback."""
    tid = response.request.user_info.get("todoId")
    if isinstance(tid, str) and tid:
        return tid
    ident = response.request.identifier
    return ident[len(NAG_PREFIX):] if ident.startswith(NAG_PREFIX) else ident


class NotificationActionHandler:
    """Routes a user's response on a reminder to snooze / turn-off."""

    def __init__(self, scheduler: ReminderScheduler) -> None:
        self._scheduler = scheduler

    def handle(self, response: NotificationResponse) -> bool:
        """Returns True if the action was recognized and applied to an existing task."""
        return self.handle_action(task_id_for(response), response.action)

    def handle_action(self, task_id: str, action: str) -> bool:
        action = (action or "").strip().upper()

        if action in SNOOZE_MINUTES:
            return self._scheduler.snooze(task_id, SNOOZE_MINUTES[action]) is not None

        if action == ACTION_TURN_OFF:
            return self._scheduler.turn_off(task_id) is not None

        logger.debug("Ignoring notification action=%s task_id=%s", action, task_id)
        return False
