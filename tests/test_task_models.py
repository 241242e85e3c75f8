# tests/test_task_models.py

from __future__ import annotations

import uuid

import pytest

from todays_focus.tasks.task_models import (
    Category,
    Priority,
    Task,
    task_from_dict,
    task_to_dict,
)


def _record(**overrides) -> dict:
    data = {
        "id": "6f1c2a3e-8b6d-4a55-9a0e-0c7f3b1d2e4f",
        "title": "Buy milk",
        "description": "",
        "isCompleted": False,
        "priority": "High",
        "createdAt": 1_700_000_000.0,
        "category": "Groceries",
    }
    data.update(overrides)
    return data


def test_decode_defaults_and_enum_values() -> None:
    task = task_from_dict(_record())

    assert task.id == "6f1c2a3e-8b6d-4a55-9a0e-0c7f3b1d2e4f"
    assert task.priority is Priority.HIGH
    assert task.category is Category.SHOPPING
    assert task.reminder_enabled is True
    assert task.due_date is None
    assert task.reminder_date is None
    assert task.completed_at is None


def test_missing_id_is_regenerated() -> None:
    data = _record()
    del data["id"]

    a = task_from_dict(data)
    b = task_from_dict(data)

    assert uuid.UUID(a.id)
    assert a.id != b.id


def test_completed_at_follows_is_completed() -> None:
    stale = task_from_dict(_record(isCompleted=False, completedAt=1_700_000_500.0))
    assert stale.completed_at is None

    repaired = task_from_dict(_record(isCompleted=True))
    assert repaired.completed_at == 1_700_000_000.0

    kept = task_from_dict(_record(isCompleted=True, completedAt=1_700_000_500.0))
    assert kept.completed_at == 1_700_000_500.0


@pytest.mark.parametrize(
    "bad",
    [
        {"priority": "Urgent"},
        {"category": "Chores"},
        {"isCompleted": "yes"},
        {"dueDate": 1e20},
        {"reminderDate": float("inf")},
        {"createdAt": float("nan")},
        {"completedAt": -1e20, "isCompleted": True},
        {"dueDate": True},
    ],
)
def test_invalid_values_raise(bad: dict) -> None:
    with pytest.raises((ValueError, TypeError)):
        task_from_dict(_record(**bad))


def test_missing_required_field_raises() -> None:
    data = _record()
    del data["title"]
    with pytest.raises(KeyError):
        task_from_dict(data)


def test_encode_omits_null_dates_and_uses_stored_keys() -> None:
    task = Task(title="Call mom", category=Category.FAMILY, priority=Priority.LOW, created_at=10.0)
    data = task_to_dict(task)

    assert data["category"] == "Family"
    assert data["priority"] == "Low"
    assert data["isCompleted"] is False
    assert data["reminderEnabled"] is True
    assert "dueDate" not in data
    assert "reminderDate" not in data
    assert "completedAt" not in data
    assert task_from_dict(data) == task


def test_category_parse_accepts_value_or_name() -> None:
    assert Category.parse("groceries") is Category.SHOPPING
    assert Category.parse("shopping") is Category.SHOPPING
    assert Category.parse("MeetUps") is Category.MEET_UPS
    with pytest.raises(ValueError):
        Category.parse("garden")


def test_priority_weights() -> None:
    assert [p.weight for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)] == [3, 2, 1]
