# blog_admin_console/selection.py
"""
Per-screen selection state over the category directory.

Lists are never mutated in place: every operation returns a new list of
frozen SelectableCategory entries, so a screen can hold the list as the single
source of truth for its checkboxes.
"""
from typing import Iterable

from blog_admin_console.models import Category, SelectableCategory


def initialize(categories: Iterable[Category]) -> list[SelectableCategory]:
    return [
        SelectableCategory(id=c.id, name=c.name, is_select=False) for c in categories
    ]


def apply_selection(
    items: list[SelectableCategory], selected_ids: Iterable[str]
) -> list[SelectableCategory]:
    """Marks exactly the entries listed in selected_ids; unknown ids are ignored."""
    wanted = set(selected_ids)
    return [item.model_copy(update={"is_select": item.id in wanted}) for item in items]


def toggle(
    items: list[SelectableCategory], category_id: str
) -> list[SelectableCategory]:
    """
    Flips the entry matching category_id. An unknown id returns the input
    list itself so stale checkbox events are harmless.
    """
    if not any(item.id == category_id for item in items):
        return items

    return [
        item.model_copy(update={"is_select": not item.is_select})
        if item.id == category_id
        else item
        for item in items
    ]


def selected_ids(items: Iterable[SelectableCategory]) -> set[str]:
    return {item.id for item in items if item.is_select}
