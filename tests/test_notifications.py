# tests/test_notifications.py

from __future__ import annotations

import asyncio
import time

import pytest

from todays_focus.reminders.notifications import (
    LocalNotificationCenter,
    NotificationRequest,
    run_notification_loop,
)

from .fakes import FakeClock, FakePresenter


def _req(identifier: str, fire_at: float) -> NotificationRequest:
    return NotificationRequest(identifier=identifier, fire_at=fire_at, title=identifier, body="")


def test_add_replaces_by_identifier_and_remove(center: LocalNotificationCenter, clock: FakeClock) -> None:
    center.add(_req("a", clock.now + 10))
    center.add(_req("a", clock.now + 20))
    center.add(_req("b", clock.now + 5))

    assert [(r.identifier, r.fire_at - clock.now) for r in center.pending()] == [("b", 5), ("a", 20)]

    center.remove_pending(["a", "never-added"])
    assert [r.identifier for r in center.pending()] == ["b"]


def test_pop_due_returns_earliest_first_once(center: LocalNotificationCenter, clock: FakeClock) -> None:
    center.add(_req("later", clock.now + 100))
    center.add(_req("second", clock.now - 1))
    center.add(_req("first", clock.now - 5))

    assert [r.identifier for r in center.pop_due()] == ["first", "second"]
    assert center.pop_due() == []

    clock.advance(100)
    assert [r.identifier for r in center.pop_due()] == ["later"]


@pytest.mark.asyncio
async def test_loop_delivers_due_request_once() -> None:
    center = LocalNotificationCenter()
    presenter = FakePresenter()
    now = time.time()
    center.add(_req("due", now - 1))
    center.add(_req("future", now + 3600))

    runner = asyncio.create_task(run_notification_loop(center, presenter, interval_seconds=0.01))

    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert [r.identifier for r in presenter.shown] == ["due"]
    assert [r.identifier for r in center.pending()] == ["future"]


@pytest.mark.asyncio
async def test_loop_survives_presenter_failure() -> None:
    center = LocalNotificationCenter()
    presenter = FakePresenter(fail=True)
    center.add(_req("due", time.time() - 1))

    runner = asyncio.create_task(run_notification_loop(center, presenter, interval_seconds=0.01))
    await asyncio.sleep(0.05)

    assert not runner.done()
    assert center.pending() == []

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner
