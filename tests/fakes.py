# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from todays_focus.reminders.notifications import (
    LocalNotificationCenter,
    NotificationRequest,
)


class FakeClock:
    """Settable clock; pass the instance wherever a `clock` callable is expected."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(slots=True)
class InMemoryKeyValueStorage:
    """KeyValueStorage held in a dict; `fail_writes` makes set() raise."""

    data: dict[str, str] = field(default_factory=dict)
    fail_writes: bool = False
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value


class FailingNotificationCenter(LocalNotificationCenter):
    """Notification center whose add() raises for identifiers listed in `reject`."""

    def __init__(self, reject: Iterable[str] = ()) -> None:
        super().__init__()
        self.reject = set(reject)

    def add(self, request: NotificationRequest) -> None:
        if request.identifier in self.reject:
            raise RuntimeError(f"rejected {request.identifier}")
        super().add(request)


@dataclass(slots=True)
class FakePresenter:
    """NotificationPresenter that records what it was asked to show."""

    shown: list[NotificationRequest] = field(default_factory=list)
    fail: bool = False

    async def present(self, request: NotificationRequest) -> None:
        if self.fail:
            raise RuntimeError("presenter down")
        self.shown.append(request)
