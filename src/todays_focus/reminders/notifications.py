# src/todays_focus/reminders/notifications.py

from __future__ import annotations

"""
Local notification center.

An in-process stand-in for the platform notification system:
- pending one-shot requests keyed by identifier,
- a registry of notification categories (the response actions a user can pick),
- a small polling loop that hands due requests to an injected presenter port.

How a notification is shown (console line, desktop popup, ...) belongs to the
presenter, not to this module.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from ..core.ports import NotificationPresenter

logger = logging.getLogger(__name__)

REMINDER_CATEGORY = "TODO_REMINDER"


@dataclass(slots=True, frozen=True)
class NotificationAction:
    identifier: str
    title: str
    destructive: bool = False


@dataclass(slots=True, frozen=True)
class NotificationCategory:
    identifier: str
    actions: tuple[NotificationAction, ...]


@dataclass(slots=True, frozen=True)
class NotificationRequest:
    identifier: str
    fire_at: float
    title: str
    body: str
    category: str = REMINDER_CATEGORY
    user_info: dict[str, Any] = field(default_factory=dict)
    relevance: float = 1.0


@dataclass(slots=True, frozen=True)
class NotificationResponse:
    """What the user picked on a delivered notification."""

    request: NotificationRequest
    action: str


class LocalNotificationCenter:
    """
    Pending-request registry.

    All methods are guarded by one lock: the delivery loop runs on its own
    event loop thread while the store mutates from the console thread.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._pending: dict[str, NotificationRequest] = {}
        self._categories: dict[str, NotificationCategory] = {}

    # ---- categories ----

    def set_categories(self, categories: Iterable[NotificationCategory]) -> None:
        """Replace the whole category set (re-applying the same set is harmless)."""
        with self._lock:
            self._categories = {c.identifier: c for c in categories}
            names = sorted(self._categories)
        logger.info("Notification categories set: %s", ", ".join(names) or "-")

    def categories(self) -> list[NotificationCategory]:
        with self._lock:
            return list(self._categories.values())

    # ---- requests ----

    def add(self, request: NotificationRequest) -> None:
        with self._lock:
            replaced = request.identifier in self._pending
            self._pending[request.identifier] = request
        logger.debug(
            "Notification %s id=%s fire_at=%s",
            "replaced" if replaced else "added",
            request.identifier,
            request.fire_at,
        )

    def remove_pending(self, identifiers: Iterable[str]) -> None:
        with self._lock:
            removed = [i for i in identifiers if self._pending.pop(i, None) is not None]
        if removed:
            logger.debug("Notifications removed: %s", ", ".join(removed))

    def pending(self) -> list[NotificationRequest]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda r: (r.fire_at, r.identifier))

    def pop_due(self, now_ts: float | None = None) -> list[NotificationRequest]:
        """Remove and return every request whose fire time has come, earliest first."""
        ts = self._clock() if now_ts is None else now_ts
        with self._lock:
            due = [r for r in self._pending.values() if r.fire_at <= ts]
            for r in due:
                del self._pending[r.identifier]
        due.sort(key=lambda r: (r.fire_at, r.identifier))
        return due


async def run_notification_loop(
    center: LocalNotificationCenter,
    presenter: NotificationPresenter,
    *,
    interval_seconds: float = 5.0,
) -> None:
    """
    Simple polling delivery loop.

    Every interval_seconds:
    - pop requests whose fire_at <= now
    - await presenter.present(request) for each, earliest first
    - a presenter failure is logged; the request is not retried

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            due = center.pop_due()
        except Exception:
            logger.exception("pop_due failed")
            due = []

        for request in due:
            try:
                await presenter.present(request)
                logger.info("Notification delivered id=%s", request.identifier)
            except Exception:
                logger.exception("Notification presenter failed id=%s", request.identifier)

        await asyncio.sleep(sleep_s)
