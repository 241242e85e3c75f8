# src/todays_focus/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum

from ..core.ports import KeyValueStorage
from .task_models import Task, task_from_dict, task_to_dict

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"

_UNSET = object()


class TaskEventKind(StrEnum):
    ADDED = "added"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(slots=True, frozen=True)
class TaskEvent:
    """
    One change published by the store.

    For ADDED/UPDATED `task` is the new state; for DELETED it is the state
    just before removal.
    """

    kind: TaskEventKind
    task: Task


TaskListener = Callable[[TaskEvent], None]


class TaskStore:
    """
    In-memory task collection persisted as one JSON blob.

    - the in-memory list is authoritative for the session
    - every mutation rewrites the whole blob under a single key
    - lookups by unknown id are silent no-ops
    - subscribers receive a TaskEvent after each change is persisted

    Tasks handed out are copies; mutate them through update()/set_reminder().
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._tasks: list[Task] = []
        self._listeners: list[TaskListener] = []

    # ---- persistence ----

    def load(self) -> None:
        """Read the stored collection; any decode failure leaves the store empty."""
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.exception("Failed to read tasks key=%s", self._key)
            raw = None

        if not raw:
            self._tasks = []
            return

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError("stored tasks must be a JSON array")
            self._tasks = [task_from_dict(item) for item in data]
        except Exception:
            logger.exception("Failed to decode stored tasks; starting empty.")
            self._tasks = []
            return

        logger.info("Loaded %d tasks from key=%s", len(self._tasks), self._key)

    def _save(self) -> None:
        try:
            blob = json.dumps([task_to_dict(t) for t in self._tasks], ensure_ascii=False)
            self._storage.set(self._key, blob)
        except Exception:
            logger.exception("Failed to persist %d tasks; keeping in-memory state.", len(self._tasks))

    # ---- change notification ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, kind: TaskEventKind, task: Task) -> None:
        event = TaskEvent(kind=kind, task=replace(task))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Task listener failed kind=%s task_id=%s", kind.value, task.id)

    # ---- queries ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else replace(self._tasks[idx])

    def all(self) -> list[Task]:
        return [replace(t) for t in self._tasks]

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def total_count(self) -> int:
        return len(self._tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.is_completed)

    # ---- mutations ----

    def add(self, task: Task) -> Task:
        stored = replace(task)
        self._tasks.append(stored)
        self._save()
        logger.debug("Task added id=%s title=%r", stored.id, stored.title)
        self._publish(TaskEventKind.ADDED, stored)
        return replace(stored)

    def update(self, task: Task) -> Task | None:
        """Replace the stored task with the same id."""
        idx = self._index_of(task.id)
        if idx is None:
            return None
        stored = replace(task)
        self._tasks[idx] = stored
        self._save()
        logger.debug("Task updated id=%s", stored.id)
        self._publish(TaskEventKind.UPDATED, stored)
        return replace(stored)

    def delete(self, task: Task | str) -> bool:
        task_id = task if isinstance(task, str) else task.id
        idx = self._index_of(task_id)
        if idx is None:
            return False
        removed = self._tasks.pop(idx)
        self._save()
        logger.debug("Task deleted id=%s", task_id)
        self._publish(TaskEventKind.DELETED, removed)
        return True

    def toggle_complete(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None
        t = self._tasks[idx]
        done = not t.is_completed
        stored = replace(t, is_completed=done, completed_at=self._clock() if done else None)
        self._tasks[idx] = stored
        self._save()
        logger.debug("Task id=%s completed=%s", task_id, done)
        self._publish(TaskEventKind.UPDATED, stored)
        return replace(stored)

    def set_reminder(
        self,
        task_id: str,
        *,
        reminder_date: float | None | object = _UNSET,
        enabled: bool | None = None,
    ) -> Task | None:
        """
        Change only the reminder fields of a task.

        Omitted arguments keep their current value. Unknown id -> None.
        """
        idx = self._index_of(task_id)
        if idx is None:
            return None
        t = self._tasks[idx]
        stored = replace(
            t,
            reminder_date=t.reminder_date if reminder_date is _UNSET else reminder_date,  # type: ignore[arg-type]
            reminder_enabled=t.reminder_enabled if enabled is None else bool(enabled),
        )
        self._tasks[idx] = stored
        self._save()
        logger.debug(
            "Task reminder id=%s date=%s enabled=%s",
            task_id,
            stored.reminder_date,
            stored.reminder_enabled,
        )
        self._publish(TaskEventKind.UPDATED, stored)
        return replace(stored)

    def clear_completed(self) -> int:
        removed = [t for t in self._tasks if t.is_completed]
        return self._remove_all(removed)

    def clear_all(self) -> int:
        return self._remove_all(list(self._tasks))

    def _remove_all(self, removed: list[Task]) -> int:
        ids = {t.id for t in removed}
        self._tasks = [t for t in self._tasks if t.id not in ids]
        self._save()
        logger.info("Removed %d tasks (%d left)", len(removed), len(self._tasks))
        for t in removed:
            self._publish(TaskEventKind.DELETED, t)
        return len(removed)
