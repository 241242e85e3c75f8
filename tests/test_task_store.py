# tests/test_task_store.py

from __future__ import annotations

import json
from pathlib import Path

from todays_focus.storage.kv_store import SQLiteKeyValueStore
from todays_focus.tasks.task_models import Task
from todays_focus.tasks.task_store import TaskEvent, TaskEventKind, TaskStore

from .fakes import FakeClock, InMemoryKeyValueStorage


def _stored(storage: InMemoryKeyValueStorage) -> list[dict]:
    return json.loads(storage.data["todos"])


def test_add_update_delete_persist_whole_collection(
    store: TaskStore, storage: InMemoryKeyValueStorage
) -> None:
    a = store.add(Task(title="a"))
    b = store.add(Task(title="b"))
    assert [t["title"] for t in _stored(storage)] == ["a", "b"]

    a.title = "a2"
    store.update(a)
    assert [t["title"] for t in _stored(storage)] == ["a2", "b"]
    assert store.get(a.id).title == "a2"

    assert store.delete(b) is True
    assert [t["id"] for t in _stored(storage)] == [a.id]
    assert storage.writes == 4


def test_unknown_id_is_silent_noop(store: TaskStore, storage: InMemoryKeyValueStorage) -> None:
    store.add(Task(title="kept"))
    writes = storage.writes

    assert store.update(Task(title="ghost")) is None
    assert store.delete("missing") is False
    assert store.toggle_complete("missing") is None
    assert store.set_reminder("missing", enabled=False) is None

    assert storage.writes == writes
    assert len(store) == 1


def test_toggle_sets_and_clears_completed_at(store: TaskStore, clock: FakeClock) -> None:
    task = store.add(Task(title="t"))

    done = store.toggle_complete(task.id)
    assert done.is_completed is True
    assert done.completed_at == clock.now

    clock.advance(60)
    undone = store.toggle_complete(task.id)
    assert undone.is_completed is False
    assert undone.completed_at is None
    assert (undone.is_completed, undone.completed_at) == (task.is_completed, task.completed_at)


def test_completed_iff_completed_at(store: TaskStore) -> None:
    ids = [store.add(Task(title=str(i))).id for i in range(5)]
    for tid in ids[::2]:
        store.toggle_complete(tid)
    store.toggle_complete(ids[0])

    for t in store.all():
        assert t.is_completed == (t.completed_at is not None)
    assert store.completed_count == 2
    assert store.total_count == 5


def test_returned_tasks_are_copies(store: TaskStore) -> None:
    task = store.add(Task(title="original"))
    snapshot = store.all()[0]
    snapshot.title = "changed outside"
    assert store.get(task.id).title == "original"


def test_clear_completed_and_clear_all(store: TaskStore) -> None:
    keep = store.add(Task(title="keep"))
    gone = store.add(Task(title="gone"))
    store.toggle_complete(gone.id)

    assert store.clear_completed() == 1
    assert [t.id for t in store.all()] == [keep.id]

    assert store.clear_all() == 1
    assert store.all() == []


def test_set_reminder_only_touches_given_fields(store: TaskStore) -> None:
    task = store.add(Task(title="r", reminder_date=100.0))

    off = store.set_reminder(task.id, enabled=False)
    assert off.reminder_enabled is False
    assert off.reminder_date == 100.0

    moved = store.set_reminder(task.id, reminder_date=200.0, enabled=True)
    assert moved.reminder_enabled is True
    assert moved.reminder_date == 200.0


def test_events_published_per_change(store: TaskStore) -> None:
    events: list[TaskEvent] = []
    unsubscribe = store.subscribe(events.append)

    a = store.add(Task(title="a"))
    store.add(Task(title="b"))
    store.toggle_complete(a.id)
    store.clear_all()

    kinds = [e.kind for e in events]
    assert kinds == [
        TaskEventKind.ADDED,
        TaskEventKind.ADDED,
        TaskEventKind.UPDATED,
        TaskEventKind.DELETED,
        TaskEventKind.DELETED,
    ]
    assert events[2].task.is_completed is True

    unsubscribe()
    store.add(Task(title="c"))
    assert len(events) == 5


def test_listener_failure_does_not_abort_mutation(store: TaskStore) -> None:
    def boom(_event: TaskEvent) -> None:
        raise RuntimeError("listener bug")

    seen: list[TaskEvent] = []
    store.subscribe(boom)
    store.subscribe(seen.append)

    store.add(Task(title="still added"))
    assert len(store) == 1
    assert len(seen) == 1


def test_persist_failure_keeps_memory_state(store: TaskStore, storage: InMemoryKeyValueStorage) -> None:
    storage.fail_writes = True
    task = store.add(Task(title="unsaved"))
    assert store.get(task.id) is not None
    assert "todos" not in storage.data


def test_load_round_trip_through_sqlite(tmp_path: Path) -> None:
    db = tmp_path / "focus.sqlite3"
    first = TaskStore(SQLiteKeyValueStore(db))
    a = first.add(Task(title="persisted", due_date=1_800_000_000.0))
    first.toggle_complete(a.id)

    second = TaskStore(SQLiteKeyValueStore(db))
    second.load()
    loaded = second.get(a.id)

    assert loaded is not None
    assert loaded.title == "persisted"
    assert loaded.due_date == 1_800_000_000.0
    assert loaded.is_completed is True
    assert loaded.completed_at is not None


def test_load_corrupt_blob_falls_back_to_empty(storage: InMemoryKeyValueStorage) -> None:
    storage.data["todos"] = "{not json"
    store = TaskStore(storage)
    store.load()
    assert store.all() == []

    storage.data["todos"] = json.dumps([{"title": "no other fields"}])
    store.load()
    assert store.all() == []

    # Out-of-range and non-finite dates fail the whole blob.
    for bad in ("1e20", "Infinity", "NaN"):
        storage.data["todos"] = (
            '[{"title": "t", "description": "", "isCompleted": false, "priority": "Low",'
            f' "createdAt": 1.0, "category": "Work", "dueDate": {bad}}}]'
        )
        store.load()
        assert store.all() == []


def test_load_regenerates_missing_ids(storage: InMemoryKeyValueStorage) -> None:
    record = {
        "title": "legacy",
        "description": "",
        "isCompleted": False,
        "priority": "Medium",
        "createdAt": 1.0,
        "category": "Work",
    }
    storage.data["todos"] = json.dumps([record, record])
    store = TaskStore(storage)
    store.load()

    ids = [t.id for t in store.all()]
    assert len(ids) == 2
    assert ids[0] != ids[1]
