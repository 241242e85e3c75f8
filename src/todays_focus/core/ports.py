# src/todays_focus/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store and the reminder scheduler depend on Protocols instead of concrete
implementations. This keeps storage and the notification backend swappable
and makes testing easier.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..reminders.notifications import NotificationCategory, NotificationRequest


class KeyValueStorage(Protocol):
    """Local key/value storage (one text blob per key)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class NotificationCenter(Protocol):
    """
    Local notification system.

    Requests are one-shot, time-based and identified by a string identifier.
    Adding a request with an existing identifier replaces it.
    """

    def add(self, request: NotificationRequest) -> None: ...
    def remove_pending(self, identifiers: Iterable[str]) -> None: ...
    def pending(self) -> list[NotificationRequest]: ...
    def set_categories(self, categories: Iterable[NotificationCategory]) -> None: ...


class NotificationPresenter(Protocol):
    """
    Front-end port: how a fired notification is shown to the user.

    The console connector prints it; tests record it.
    """

    def present(self, request: NotificationRequest) -> Awaitable[None]: ...
