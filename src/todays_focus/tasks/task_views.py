# src/todays_focus/tasks/task_views.py

from __future__ import annotations

"""
Derived views over a task collection.

Everything here is a pure function of (tasks, now, ...): no store access,
no clock reads unless `now` is omitted. Calendar boundaries (day, week,
month) are computed in local time.
"""

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .task_models import Category, Priority, Task

MONDAY = 0
SUNDAY = 6


# ---- calendar helpers ----


def _day_start(ts: float) -> datetime:
    d = datetime.fromtimestamp(ts)
    return datetime(d.year, d.month, d.day)


def start_of_day(ts: float) -> float:
    return _day_start(ts).timestamp()


def day_bounds(now: float) -> tuple[float, float]:
    """[startOfToday, startOfTomorrow) as timestamps."""
    today = _day_start(now)
    return today.timestamp(), (today + timedelta(days=1)).timestamp()


def week_bounds(now: float, first_weekday: int = MONDAY) -> tuple[float, float]:
    """[weekStart, weekStart + 7 days) for the calendar week containing `now`."""
    today = _day_start(now)
    offset = (today.weekday() - first_weekday) % 7
    start = today - timedelta(days=offset)
    return start.timestamp(), (start + timedelta(days=7)).timestamp()


def _now(now: float | None) -> float:
    return time.time() if now is None else now


# ---- ordering ----


def sort_key(task: Task) -> tuple:
    """
    Shared list ordering.

    1. incomplete before completed
    2. due calendar day ascending, tasks without a due date last
    3. priority weight descending
    4. creation time descending (newest first)
    """
    if task.due_date is None:
        due = (1, 0.0)
    else:
        due = (0, start_of_day(task.due_date))
    return (task.is_completed, due, -task.priority.weight, -task.created_at)


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=sort_key)


# ---- filters ----


def due_today(tasks: Iterable[Task], now: float | None = None) -> list[Task]:
    start, end = day_bounds(_now(now))
    return [t for t in tasks if t.due_date is not None and start <= t.due_date < end]


def due_this_week(
    tasks: Iterable[Task], now: float | None = None, *, first_weekday: int = MONDAY
) -> list[Task]:
    start, end = week_bounds(_now(now), first_weekday)
    return [t for t in tasks if t.due_date is not None and start <= t.due_date < end]


def by_category(tasks: Iterable[Task], category: Category) -> list[Task]:
    return sort_tasks(t for t in tasks if t.category == category)


def by_priority(tasks: Iterable[Task], priority: Priority) -> list[Task]:
    return [t for t in tasks if t.priority == priority]


def overdue(tasks: Iterable[Task], now: float | None = None) -> list[Task]:
    ts = _now(now)
    return [t for t in tasks if not t.is_completed and t.due_date is not None and t.due_date < ts]


def filtered(
    tasks: Iterable[Task],
    *,
    category: Category | None = None,
    show_completed: bool = True,
) -> list[Task]:
    """Main list: optional category filter, optional hiding of completed tasks, sorted."""
    out = list(tasks)
    if category is not None:
        out = [t for t in out if t.category == category]
    if not show_completed:
        out = [t for t in out if not t.is_completed]
    return sort_tasks(out)


def search(tasks: Iterable[Task], text: str) -> list[Task]:
    """Case-insensitive substring match on title or description."""
    needle = (text or "").strip().casefold()
    items = list(tasks)
    if not needle:
        return items
    return [t for t in items if needle in t.title.casefold() or needle in t.description.casefold()]


def recent(tasks: Iterable[Task], limit: int = 5) -> list[Task]:
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)[: max(0, int(limit))]


# ---- weekly wins ----


@dataclass(slots=True, frozen=True)
class WeeklyBucket:
    week_number: int
    start: float
    end: float
    completed: list[Task] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.completed)

    @property
    def title(self) -> str:
        return f"Week {self.week_number}"

    def date_range(self) -> str:
        fmt = "%Y-%m-%d"
        return (
            f"{datetime.fromtimestamp(self.start).strftime(fmt)} - "
            f"{datetime.fromtimestamp(self.end).strftime(fmt)}"
        )


@dataclass(slots=True, frozen=True)
class WeeklySummary:
    total_weeks: int
    total_completed: int
    average_per_week: float
    best_week: WeeklyBucket | None

    @property
    def best_week_title(self) -> str:
        if self.best_week is None:
            return "N/A"
        return f"{self.best_week.title} ({self.best_week.count} tasks)"


def weekly_completion(tasks: Iterable[Task], now: float | None = None) -> list[WeeklyBucket]:
    """
    Split the current month into 7-day windows starting at the 1st.

    Windows are produced while their start is not after `now`, so the last
    one contains today and may run past the month end.
    """
    ts = _now(now)
    d = datetime.fromtimestamp(ts)
    window = datetime(d.year, d.month, 1)

    done = [t for t in tasks if t.is_completed and t.completed_at is not None]
    buckets: list[WeeklyBucket] = []
    week_number = 1

    while window.timestamp() <= ts:
        start = window.timestamp()
        window = window + timedelta(days=7)
        end = window.timestamp()
        hits = [t for t in done if start <= t.completed_at < end]  # type: ignore[operator]
        buckets.append(WeeklyBucket(week_number=week_number, start=start, end=end, completed=hits))
        week_number += 1

    return buckets


def weekly_summary(buckets: list[WeeklyBucket]) -> WeeklySummary:
    total = sum(b.count for b in buckets)
    best: WeeklyBucket | None = None
    for b in buckets:
        # strict > keeps the first week on ties
        if best is None or b.count > best.count:
            best = b
    return WeeklySummary(
        total_weeks=len(buckets),
        total_completed=total,
        average_per_week=(total / len(buckets)) if buckets else 0.0,
        best_week=best,
    )


# ---- statistics ----


@dataclass(slots=True, frozen=True)
class Progress:
    completed: int
    total: int

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0


def _progress(tasks: Iterable[Task]) -> Progress:
    items = list(tasks)
    return Progress(completed=sum(1 for t in items if t.is_completed), total=len(items))


@dataclass(slots=True, frozen=True)
class Statistics:
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: float
    today: Progress
    this_week: Progress
    by_category: dict[Category, Progress]
    by_priority: dict[Priority, Progress]


def statistics(
    tasks: Iterable[Task], now: float | None = None, *, first_weekday: int = MONDAY
) -> Statistics:
    items = list(tasks)
    ts = _now(now)
    overall = _progress(items)
    return Statistics(
        total=overall.total,
        completed=overall.completed,
        pending=overall.total - overall.completed,
        overdue=len(overdue(items, ts)),
        completion_rate=overall.ratio * 100.0,
        today=_progress(due_today(items, ts)),
        this_week=_progress(due_this_week(items, ts, first_weekday=first_weekday)),
        by_category={c: _progress(by_category(items, c)) for c in Category},
        by_priority={p: _progress(by_priority(items, p)) for p in Priority},
    )
