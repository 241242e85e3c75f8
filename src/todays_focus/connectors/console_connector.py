# src/todays_focus/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from ..cli.commands import SHORT_ID, registry as command_registry
from ..core.state import AppState
from ..reminders.notifications import NotificationRequest, run_notification_loop

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsolePresenter:
    """NotificationPresenter that prints reminders and remembers the last one for /snooze and /off."""

    def __init__(self, state: AppState) -> None:
        self._state = state

    async def present(self, request: NotificationRequest) -> None:
        # No state.lock here: a console command may hold it for its whole run.
        self._state.last_notification = request
        short = str(request.user_info.get("todoId", request.identifier))[:SHORT_ID]
        _print_ts(f"[REMINDER] {request.title}: {request.body}")
        _print_ts(f"  /snooze {short} 15|30|60  or  /off {short}")


@dataclass
class NotificationRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal notification loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _deliver_until_stopped(state: AppState, stop_event: asyncio.Event) -> None:
    interval = float(getattr(state.settings, "notify_interval_seconds", 5.0))
    task = asyncio.create_task(
        run_notification_loop(state.notifications, ConsolePresenter(state), interval_seconds=interval)
    )
    try:
        await stop_event.wait()
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


def start_notifications_in_background(state: AppState) -> NotificationRunner | None:
    """
    Run the reminder delivery loop in a background thread.

    The console REPL blocks on input(), so the async loop gets its own event loop.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_deliver_until_stopped(state, stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="notifications", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Notification thread did not initialize properly.")
        return None

    logger.info("Notification delivery thread started.")
    return NotificationRunner(thread=t, loop=loop, stop_event=stop_event)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (%d tasks).", len(state.store))
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/add " + user_input

        try:
            with state.lock:
                response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(f"[{_ts_local()}] {response}")

    logger.info("Console connector finished.")
