# tests/test_console_connector.py

from __future__ import annotations

import asyncio
import threading
import time

from todays_focus.connectors.console_connector import (
    ConsolePresenter,
    start_notifications_in_background,
)
from todays_focus.core.state import AppState
from todays_focus.reminders.notifications import NotificationRequest


def test_presenter_remembers_last_notification(state: AppState, capsys) -> None:
    req = NotificationRequest(
        identifier="nag-abc",
        fire_at=time.time(),
        title="Nagging Reminder: Stretch",
        body="You still have this task pending.",
        user_info={"todoId": "abcdef0123456789"},
    )

    asyncio.run(ConsolePresenter(state).present(req))

    assert state.last_notification == req
    out = capsys.readouterr().out
    assert "[REMINDER] Nagging Reminder: Stretch" in out
    assert "/snooze abcdef01 15|30|60" in out


def test_background_runner_delivers_and_stops(state: AppState) -> None:
    state.notifications.add(
        NotificationRequest(identifier="due", fire_at=time.time() - 1, title="t", body="b")
    )

    runner = start_notifications_in_background(state)
    assert runner is not None
    try:
        deadline = time.time() + 5.0
        while state.last_notification is None and time.time() < deadline:
            time.sleep(0.01)
    finally:
        runner.stop()
        runner.join(timeout=5.0)

    assert state.last_notification is not None
    assert state.last_notification.identifier == "due"
    assert not runner.thread.is_alive()


def test_presenter_does_not_wait_for_console_lock(state: AppState) -> None:
    held = threading.Event()
    release = threading.Event()

    def hold_lock() -> None:
        with state.lock:
            held.set()
            release.wait(timeout=5.0)

    holder = threading.Thread(target=hold_lock)
    holder.start()
    try:
        assert held.wait(timeout=5.0)
        req = NotificationRequest(identifier="x", fire_at=time.time(), title="t", body="b")
        started = time.monotonic()
        asyncio.run(ConsolePresenter(state).present(req))
        elapsed = time.monotonic() - started
    finally:
        release.set()
        holder.join(timeout=5.0)

    assert elapsed < 1.0
    assert state.last_notification == req
