# src/todays_focus/tasks/task_models.py

from __future__ import annotations

import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class Category(StrEnum):
    """
    Fixed task categories.

    Values are the persisted strings, so renaming a member is safe but
    changing a value breaks existing data.
    """

    PERSONAL = "Yours"
    WORK = "Work"
    SHOPPING = "Groceries"
    LEARNING = "Learning"
    MEET_UPS = "MeetUps"
    FAMILY = "Family"

    @classmethod
    def parse(cls, raw: str) -> Category:
        """Accept either the stored value ("Groceries") or the member name ("shopping")."""
        s = (raw or "").strip()
        for c in cls:
            if s.lower() in (c.value.lower(), c.name.lower()):
                return c
        raise ValueError(f"unknown category: {raw!r}")


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    category: Category = Category.PERSONAL
    due_date: float | None = None
    reminder_date: float | None = None
    reminder_enabled: bool = True

    is_completed: bool = False
    completed_at: float | None = None

    id: str = field(default_factory=new_task_id)
    created_at: float = field(default_factory=time.time)

    @property
    def has_active_reminder(self) -> bool:
        return self.reminder_enabled and self.reminder_date is not None


# ---- JSON codec ----
#
# Keys follow the stored (camelCase) layout so existing blobs keep loading.


def task_to_dict(task: Task) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "isCompleted": task.is_completed,
        "priority": task.priority.value,
        "reminderEnabled": task.reminder_enabled,
        "createdAt": task.created_at,
        "category": task.category.value,
    }
    if task.due_date is not None:
        out["dueDate"] = task.due_date
    if task.reminder_date is not None:
        out["reminderDate"] = task.reminder_date
    if task.completed_at is not None:
        out["completedAt"] = task.completed_at
    return out


def _timestamp(raw: Any) -> float:
    """POSIX seconds that datetime can represent; anything else is a malformed record."""
    if isinstance(raw, bool):
        raise TypeError("timestamp must be a number")
    ts = float(raw)
    if not math.isfinite(ts):
        raise ValueError(f"timestamp is not finite: {raw!r}")
    try:
        datetime.fromtimestamp(ts)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"timestamp out of range: {raw!r}") from e
    return ts


def _opt_float(raw: Any) -> float | None:
    if raw is None:
        return None
    return _timestamp(raw)


def _decode_id(raw: Any) -> str:
    if isinstance(raw, str):
        try:
            return str(uuid.UUID(raw))
        except ValueError:
            pass
    tid = new_task_id()
    logger.debug("Task record without a valid id; assigned %s", tid)
    return tid


def task_from_dict(data: dict[str, Any]) -> Task:
    """
    Decode one stored task.

    Raises KeyError/ValueError/TypeError on a malformed record. Missing `id`
    is regenerated, missing `reminderEnabled` defaults to True, and
    `completedAt` is reconciled with `isCompleted`.
    """
    if not isinstance(data, dict):
        raise TypeError(f"task record must be an object, got {type(data).__name__}")

    is_completed = data["isCompleted"]
    if not isinstance(is_completed, bool):
        raise TypeError("isCompleted must be a boolean")

    created_at = _timestamp(data["createdAt"])
    completed_at = _opt_float(data.get("completedAt"))
    if not is_completed:
        completed_at = None
    elif completed_at is None:
        completed_at = created_at

    return Task(
        id=_decode_id(data.get("id")),
        title=str(data["title"]),
        description=str(data.get("description") or ""),
        is_completed=is_completed,
        completed_at=completed_at,
        priority=Priority(data["priority"]),
        category=Category(data["category"]),
        due_date=_opt_float(data.get("dueDate")),
        reminder_date=_opt_float(data.get("reminderDate")),
        reminder_enabled=bool(data.get("reminderEnabled", True)),
        created_at=created_at,
    )
