"""Types and validation helpers for the tags resource.

A tag is a hardware requirement template. Its category is stored explicitly
when the tag is created and never changes afterwards; only the label may be
edited.
"""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly

from ..tools.taxonomy import CATEGORIES, ORDERED_CATEGORIES, Category
from ..tools.units import has_magnitude


class TagResponse(TypedDict, total=False):
    """Readonly tag dict returned by tag endpoints."""
    id: ReadOnly[str]
    label: ReadOnly[str | int | float]
    category: ReadOnly[Category]


def _normalize_category(value: object) -> Category | None:
    """Return the category name for ``value``, or None if it is not one."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    if candidate in CATEGORIES:
        return candidate  # type: ignore[return-value]
    return None


def _validate_label(category: Category, label: object) -> str | None:
    """Return an error message for an unusable label, or None when valid."""
    if isinstance(label, bool):
        return f"Invalid label: {label!r}"
    if isinstance(label, str):
        if not label.strip():
            return f"Invalid label: {label!r}"
    elif not isinstance(label, (int, float)):
        return f"Invalid label: {label!r}"
    if category in ORDERED_CATEGORIES and not has_magnitude(label):
        return f"Label for {category} tag has no magnitude: {label!r}"
    return None


__all__ = ["CATEGORIES", "Category", "ORDERED_CATEGORIES", "TagResponse"]
