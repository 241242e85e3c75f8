# src/todays_focus/presentation.py

"""
Display metadata for categories and priorities.

Kept out of the domain enums: the core never looks at icons or colors.
Icon names are SF-Symbols style identifiers (what a mobile front end would
use); `glyph` is a plain-text stand-in for the console.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tasks.task_models import Category, Priority


@dataclass(slots=True, frozen=True)
class Style:
    icon: str
    color: str
    glyph: str


CATEGORY_STYLES: dict[Category, Style] = {
    Category.PERSONAL: Style(icon="person.circle", color="blue", glyph="@"),
    Category.WORK: Style(icon="briefcase", color="purple", glyph="#"),
    Category.SHOPPING: Style(icon="cart", color="green", glyph="$"),
    Category.LEARNING: Style(icon="book", color="orange", glyph="%"),
    Category.MEET_UPS: Style(icon="person.3", color="teal", glyph="&"),
    Category.FAMILY: Style(icon="house.fill", color="pink", glyph="~"),
}

PRIORITY_STYLES: dict[Priority, Style] = {
    Priority.LOW: Style(icon="arrow.down.circle", color="green", glyph="v"),
    Priority.MEDIUM: Style(icon="minus.circle", color="orange", glyph="-"),
    Priority.HIGH: Style(icon="exclamationmark.circle", color="red", glyph="!"),
}


def category_label(category: Category) -> str:
    return f"{CATEGORY_STYLES[category].glyph} {category.value}"


def priority_label(priority: Priority) -> str:
    return f"{PRIORITY_STYLES[priority].glyph} {priority.value}"
