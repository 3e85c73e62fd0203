"""Requirement tag taxonomy: categories, ordering and grouping."""

from __future__ import annotations

import re
from typing import Iterable, Literal, Mapping, get_args

from .units import parse_magnitude

Category = Literal["ram", "vga", "others"]
CATEGORIES: tuple[Category, ...] = get_args(Category)

# Categories whose labels carry a comparable magnitude.
ORDERED_CATEGORIES: tuple[Category, ...] = ("ram", "vga")

# How a tag's category is decided:
#  - "stored": the tag's own ``category`` field (labels are only consulted for
#    legacy records that have no valid field)
#  - "inferred": keyword matching on the label
CategoryPolicy = Literal["stored", "inferred"]

_VGA_KEYWORDS = ("vga", "gpu", "graphics", "vram")
_BARE_GB = re.compile(r"\d+(?:\.\d+)?\s*gb\b", flags=re.IGNORECASE)


def infer_category(label: object) -> Category:
    """Classify a label by keyword.

    Graphics keywords win over ``ram`` so that ``"8GB VRAM"`` lands in the
    ``vga`` bucket. A bare ``"<n> GB"`` label with no keyword is RAM.
    """
    if not isinstance(label, str):
        return "others"
    text = label.lower()
    if any(keyword in text for keyword in _VGA_KEYWORDS):
        return "vga"
    if "ram" in text:
        return "ram"
    if _BARE_GB.search(text):
        return "ram"
    return "others"


def category(tag: Mapping[str, object], policy: CategoryPolicy = "stored") -> Category:
    """Return the category of ``tag`` under ``policy``."""
    if policy == "stored":
        stored = tag.get("category")
        if isinstance(stored, str) and stored.strip().lower() in CATEGORIES:
            return stored.strip().lower()  # type: ignore[return-value]
    return infer_category(tag.get("label"))


def magnitude(tag: Mapping[str, object]) -> float:
    """Magnitude of a tag's label in gigabytes."""
    return parse_magnitude(tag.get("label"))


def compare_ordered(tag_a: Mapping[str, object], tag_b: Mapping[str, object]) -> int:
    """Compare two tags by magnitude, returning -1, 0 or 1."""
    left = magnitude(tag_a)
    right = magnitude(tag_b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def group_tags(
    tags: Iterable[Mapping[str, object]],
    *,
    policy: CategoryPolicy = "stored",
) -> dict[Category, list[Mapping[str, object]]]:
    """Partition tags into category buckets.

    ``ram`` and ``vga`` buckets are sorted ascending by magnitude (ties keep
    their input order); ``others`` keeps insertion order.
    """
    groups: dict[Category, list[Mapping[str, object]]] = {name: [] for name in CATEGORIES}
    for tag in tags:
        if not isinstance(tag, Mapping):
            continue
        groups[category(tag, policy)].append(tag)
    for name in ORDERED_CATEGORIES:
        groups[name].sort(key=magnitude)
    return groups


__all__ = [
    "CATEGORIES",
    "Category",
    "CategoryPolicy",
    "ORDERED_CATEGORIES",
    "category",
    "compare_ordered",
    "group_tags",
    "infer_category",
    "magnitude",
]
