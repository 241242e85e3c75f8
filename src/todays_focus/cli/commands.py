# src/todays_focus/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import cast

from ..core.state import AppState
from ..presentation import category_label, priority_label
from ..reminders.actions import SNOOZE_MINUTES
from ..reminders.notifications import NotificationResponse
from ..reminders.reminder_scheduler import ACTION_TURN_OFF
from ..tasks import task_views as views
from ..tasks.task_models import Category, Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID = 8
_OPTION_RE = re.compile(r"^(title|desc|due|prio|priority|cat|category|remind)=(.*)$", re.IGNORECASE)
_RELATIVE_RE = re.compile(r"^\+(\d+)([mhd])$")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def parse_when(raw: str, now_ts: float | None = None) -> float:
    """
    Parse a user-entered moment.

    Accepted: +30m / +2h / +1d, HH:MM (today), today, tomorrow,
    YYYY-MM-DD (end of that day), YYYY-MM-DDTHH:MM.
    Raises ValueError on anything else.
    """
    s = (raw or "").strip().lower()
    now = datetime.fromtimestamp(time.time() if now_ts is None else now_ts)

    m = _RELATIVE_RE.match(s)
    if m:
        n, unit = int(m.group(1)), m.group(2)
        delta = {"m": timedelta(minutes=n), "h": timedelta(hours=n), "d": timedelta(days=n)}[unit]
        return (now + delta).timestamp()

    end_of_today = now.replace(hour=23, minute=59, second=0, microsecond=0)
    if s == "today":
        return end_of_today.timestamp()
    if s == "tomorrow":
        return (end_of_today + timedelta(days=1)).timestamp()

    if re.fullmatch(r"\d{1,2}:\d{2}", s):
        hh, mm = (int(p) for p in s.split(":"))
        return now.replace(hour=hh, minute=mm, second=0, microsecond=0).timestamp()

    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", s):
        d = datetime.fromisoformat(s)
        return d.replace(hour=23, minute=59).timestamp()

    return datetime.fromisoformat(s.upper() if "t" in s else s).timestamp()


def _parse_optional_when(raw: str) -> float | None:
    if raw.strip().lower() in ("", "none", "off", "-"):
        return None
    return parse_when(raw)


def _parse_priority(raw: str) -> Priority:
    s = raw.strip().lower()
    for p in Priority:
        if s in (p.value.lower(), p.name.lower(), p.value.lower()[0]):
            return p
    raise ValueError(f"unknown priority: {raw!r}")


def _split_options(args: list[str]) -> tuple[str, dict[str, str]]:
    """Separate key=value options from free text."""
    text: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        m = _OPTION_RE.match(a)
        if m:
            key = m.group(1).lower()
            key = {"priority": "prio", "category": "cat"}.get(key, key)
            opts[key] = m.group(2).replace("_", " ") if key in ("title", "desc") else m.group(2)
        else:
            text.append(a)
    return " ".join(text), opts


def _apply_options(task: Task, opts: dict[str, str]) -> Task:
    changes: dict[str, object] = {}
    if "title" in opts and opts["title"].strip():
        changes["title"] = opts["title"].strip()
    if "desc" in opts:
        changes["description"] = opts["desc"].strip()
    if "due" in opts:
        changes["due_date"] = _parse_optional_when(opts["due"])
    if "prio" in opts:
        changes["priority"] = _parse_priority(opts["prio"])
    if "cat" in opts:
        changes["category"] = Category.parse(opts["cat"])
    if "remind" in opts:
        when = _parse_optional_when(opts["remind"])
        changes["reminder_date"] = when
        changes["reminder_enabled"] = when is not None
    return replace(task, **changes)  # type: ignore[arg-type]


def _resolve(state: AppState, raw: str) -> Task | str:
    """Find a task by full id or unique id prefix; returns an error string on miss."""
    needle = raw.strip().lower()
    if not needle:
        return "Missing task id."
    hits = [t for t in state.store.all() if t.id.lower().startswith(needle)]
    if not hits:
        return f"No task with id {raw}."
    if len(hits) > 1:
        return f"Ambiguous id {raw} ({len(hits)} tasks match)."
    return hits[0]


def _fmt_ts(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def format_task(task: Task) -> str:
    mark = "x" if task.is_completed else " "
    parts = [
        f"[{mark}] {task.id[:SHORT_ID]}",
        priority_label(task.priority),
        category_label(task.category),
        task.title,
    ]
    if task.due_date is not None:
        parts.append(f"(due {_fmt_ts(task.due_date)})")
    if task.has_active_reminder:
        parts.append(f"(remind {_fmt_ts(task.reminder_date)})")
    return "  ".join(parts)


def _format_list(title: str, tasks: list[Task]) -> str:
    if not tasks:
        return f"{title}: no tasks."
    lines = [f"{title} ({len(tasks)}):"]
    lines.extend(f"  {format_task(t)}" for t in tasks)
    return "\n".join(lines)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [| description] [due=..] [prio=..] [cat=..] [remind=..]
    """
    text, opts = _split_options(args)
    title, _, desc = text.partition("|")
    title = title.strip()
    if not title:
        return "Usage: /add <title> [| description] [due=..] [prio=..] [cat=..] [remind=..]"

    settings = state.settings
    try:
        task = Task(
            title=title,
            description=desc.strip(),
            priority=_parse_priority(getattr(settings, "default_priority", "Medium")),
            category=Category.parse(getattr(settings, "default_category", "Yours")),
        )
        task = _apply_options(task, opts)
    except ValueError as e:
        return f"Invalid value: {e}"

    added = state.store.add(task)
    return f"Added: {format_task(added)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> [title=..] [desc=..] [due=..|none] [prio=..] [cat=..] [remind=..|none]"""
    if not args:
        return "Usage: /edit <id> key=value ..."
    found = _resolve(state, args[0])
    if isinstance(found, str):
        return found
    _, opts = _split_options(args[1:])
    if not opts:
        return "Nothing to change. Keys: title desc due prio cat remind (use _ for spaces)."
    try:
        task = _apply_options(found, opts)
    except ValueError as e:
        return f"Invalid value: {e}"
    updated = state.store.update(task)
    return f"Updated: {format_task(updated)}" if updated else f"No task with id {args[0]}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    found = _resolve(state, args[0])
    if isinstance(found, str):
        return found
    toggled = state.store.toggle_complete(found.id)
    if toggled is None:
        return f"No task with id {args[0]}."
    return ("Completed: " if toggled.is_completed else "Reopened: ") + toggled.title


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    found = _resolve(state, args[0])
    if isinstance(found, str):
        return found
    state.store.delete(found)
    return f"Deleted: {found.title}"


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list              -> main list (category filter + show-completed setting)
    /list today|week   -> due today / this week
    /list overdue      -> overdue tasks
    /list <category>   -> one category
    """
    tasks = state.store.all()
    now = time.time()
    first_weekday = int(getattr(state.settings, "first_weekday", views.MONDAY))
    sub = args[0].lower() if args else ""

    if not sub:
        title = state.selected_category.value if state.selected_category else "All tasks"
        return _format_list(
            title,
            views.filtered(
                tasks, category=state.selected_category, show_completed=state.show_completed
            ),
        )
    if sub == "today":
        return _format_list("Today", views.sort_tasks(views.due_today(tasks, now)))
    if sub == "week":
        return _format_list(
            "This week",
            views.sort_tasks(views.due_this_week(tasks, now, first_weekday=first_weekday)),
        )
    if sub == "overdue":
        return _format_list("Overdue", views.sort_tasks(views.overdue(tasks, now)))

    try:
        category = Category.parse(" ".join(args))
    except ValueError:
        return "Usage: /list [today|week|overdue|<category>]"
    return _format_list(category.value, views.by_category(tasks, category))


def cmd_search(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /search <text>"
    query = " ".join(args)
    return _format_list(f"Search '{query}'", views.sort_tasks(views.search(state.store.all(), query)))


def cmd_recent(state: AppState, args: list[str]) -> str:
    return _format_list("Recent activity", views.recent(state.store.all(), limit=5))


def cmd_stats(state: AppState, args: list[str]) -> str:
    first_weekday = int(getattr(state.settings, "first_weekday", views.MONDAY))
    st = views.statistics(state.store.all(), first_weekday=first_weekday)
    lines = [
        "Statistics:",
        f"  Total: {st.total}  Completed: {st.completed}  Pending: {st.pending}  Overdue: {st.overdue}",
        f"  Completion rate: {st.completion_rate:.0f}%",
        f"  Today: {st.today.completed}/{st.today.total}  This week: {st.this_week.completed}/{st.this_week.total}",
        "  By category:",
    ]
    for c, p in st.by_category.items():
        lines.append(f"    {category_label(c):<14} {p.completed}/{p.total}")
    lines.append("  By priority:")
    for pr, p in st.by_priority.items():
        lines.append(f"    {priority_label(pr):<14} {p.completed}/{p.total}")
    return "\n".join(lines)


def cmd_weekly(state: AppState, args: list[str]) -> str:
    buckets = views.weekly_completion(state.store.all())
    summary = views.weekly_summary(buckets)
    lines = ["Weekly wins (current month):"]
    for b in buckets:
        lines.append(f"  {b.title} [{b.date_range()}]: {b.count} completed")
    lines.append(
        f"  Weeks: {summary.total_weeks}  Completed: {summary.total_completed}  "
        f"Avg/week: {summary.average_per_week:.1f}  Best: {summary.best_week_title}"
    )
    return "\n".join(lines)


def _respond(state: AppState, args: list[str], action: str) -> str:
    """Apply a reminder action to an explicit task id, or to the last delivered reminder."""
    if args:
        found = _resolve(state, args[0])
        if isinstance(found, str):
            return found
        ok = state.actions.handle_action(found.id, action)
    elif state.last_notification is not None:
        ok = state.actions.handle(NotificationResponse(request=state.last_notification, action=action))
    else:
        return "No reminder delivered yet; pass a task id."
    return "Done." if ok else "Task not found or already completed."


def cmd_snooze(state: AppState, args: list[str]) -> str:
    """/snooze [id] 15|30|60"""
    action = f"SNOOZE_{args[-1]}" if args else ""
    if action not in SNOOZE_MINUTES:
        return "Usage: /snooze [id] 15|30|60"
    return _respond(state, args[:-1], action)


def cmd_off(state: AppState, args: list[str]) -> str:
    """/off [id] -> turn the reminder off"""
    return _respond(state, args, ACTION_TURN_OFF)


def cmd_pending(state: AppState, args: list[str]) -> str:
    pending = state.notifications.pending()
    if not pending:
        return "No pending reminders."
    lines = [f"Pending reminders ({len(pending)}):"]
    for r in pending:
        lines.append(f"  {_fmt_ts(r.fire_at)}  {r.identifier[: SHORT_ID + 4]}  {r.title}")
    return "\n".join(lines)


def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/clear completed | /clear all"""
    sub = args[0].lower() if args else ""
    if sub == "completed":
        n = state.store.clear_completed()
        return f"Removed {n} completed tasks."
    if sub == "all":
        if emit is not None:
            emit("Deleting every task. This cannot be undone.")
        n = state.store.clear_all()
        return f"Removed {n} tasks."
    return "Usage: /clear completed | /clear all"


def cmd_show(state: AppState, args: list[str]) -> str:
    """
    /show completed on|off -> hide/show completed tasks in /list
    /show <category>|all   -> category filter for /list
    """
    if not args:
        cat = state.selected_category.value if state.selected_category else "all"
        return f"Category: {cat}. Completed tasks: {'shown' if state.show_completed else 'hidden'}."

    if args[0].lower() == "completed":
        flag = args[1].lower() if len(args) > 1 else ""
        if flag not in ("on", "off"):
            return "Usage: /show completed on|off"
        state.show_completed = flag == "on"
        return f"Completed tasks {'shown' if state.show_completed else 'hidden'}."

    if args[0].lower() == "all":
        state.selected_category = None
        return "Showing all categories."

    try:
        state.selected_category = Category.parse(" ".join(args))
    except ValueError:
        return "Usage: /show completed on|off | /show <category>|all"
    return f"Showing category {state.selected_category.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "add", cmd_add, help_text="Add a task: /add Title | description due=today prio=high cat=work remind=+30m."
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> key=value ...")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("list", cmd_list, help_text="List tasks: /list [today|week|overdue|<category>].", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search title/description: /search <text>.")
registry.register("recent", cmd_recent, help_text="Five most recently created tasks.")
registry.register("stats", cmd_stats, help_text="Totals, completion rate and breakdowns.")
registry.register("weekly", cmd_weekly, help_text="Completed tasks per week of the current month.")
registry.register("snooze", cmd_snooze, help_text="Snooze a reminder: /snooze [id] 15|30|60.")
registry.register("off", cmd_off, help_text="Turn a reminder off: /off [id].")
registry.register("pending", cmd_pending, help_text="Show pending reminder notifications.")
registry.register("clear", cmd_clear, help_text="Bulk delete: /clear completed | /clear all.")
registry.register("show", cmd_show, help_text="List filters: /show completed on|off | /show <category>|all.")
