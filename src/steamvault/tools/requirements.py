"""Suggest requirement tags from Steam-style PC requirement text."""

from __future__ import annotations

import html
import re
from typing import Iterable, Mapping

from .taxonomy import ORDERED_CATEGORIES, Category, CategoryPolicy, category, magnitude
from .units import find_unit_magnitude, parse_magnitude

_LINE_BREAKS = re.compile(r"<\s*(?:br\s*/?|/li|/p|/ul)\s*>", flags=re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_FIELD_LINE = re.compile(r"^\s*([A-Za-z][A-Za-z ]*?)\s*:\s*(.+)$")

_RAM_FIELDS = {"memory", "ram", "system memory"}
_VGA_FIELDS = {"graphics", "video card", "video", "vga", "gpu"}


def _plain_lines(text: str) -> list[str]:
    stripped = _TAGS.sub(" ", _LINE_BREAKS.sub("\n", text))
    return [html.unescape(line).strip() for line in stripped.splitlines() if line.strip()]


def extract_requirements(text: object) -> dict[Category, float]:
    """Read RAM and graphics memory magnitudes from a requirements block.

    Returns a dict with ``ram`` and/or ``vga`` keys for the fields that were
    found; a graphics line only counts when it names a memory size.
    """
    if not isinstance(text, str) or not text.strip():
        return {}

    found: dict[Category, float] = {}
    for line in _plain_lines(text):
        match = _FIELD_LINE.match(line)
        if not match:
            continue
        field_name = match.group(1).strip().lower()
        value = match.group(2)
        if field_name in _RAM_FIELDS and "ram" not in found:
            ram_value = find_unit_magnitude(value)
            if ram_value is None:
                ram_value = parse_magnitude(value)
            if ram_value > 0:
                found["ram"] = ram_value
        elif field_name in _VGA_FIELDS and "vga" not in found:
            vga_value = find_unit_magnitude(value)
            if vga_value is not None and vga_value > 0:
                found["vga"] = vga_value
    return found


def suggest_requirement_ids(
    text: object,
    all_tags: Iterable[Mapping[str, object]],
    *,
    policy: CategoryPolicy = "stored",
) -> list[str]:
    """Pick a tag id per ordered category for the requirements in ``text``.

    For each category the tag with the smallest magnitude that still covers
    the requirement is chosen; when no tag is large enough, the largest tag
    of the category is used.
    """
    needs = extract_requirements(text)
    if not needs:
        return []

    by_category: dict[Category, list[tuple[float, str]]] = {name: [] for name in ORDERED_CATEGORIES}
    for tag in all_tags:
        tag_id = tag.get("id")
        if not isinstance(tag_id, str):
            continue
        tag_cat = category(tag, policy)
        if tag_cat in by_category:
            by_category[tag_cat].append((magnitude(tag), tag_id))

    suggestions: list[str] = []
    for cat in ORDERED_CATEGORIES:
        need = needs.get(cat)
        candidates = sorted(by_category[cat], key=lambda entry: entry[0])
        if need is None or not candidates:
            continue
        covering = [tag_id for value, tag_id in candidates if value >= need]
        suggestions.append(covering[0] if covering else candidates[-1][1])
    return suggestions


__all__ = ["extract_requirements", "suggest_requirement_ids"]
