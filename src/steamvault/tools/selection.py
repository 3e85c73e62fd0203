"""Interactive tag selection helpers."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from .taxonomy import CATEGORIES, CategoryPolicy, group_tags

CATEGORY_TITLES = {
    "ram": "RAM",
    "vga": "Graphics memory",
    "others": "Other requirements",
}


def tag_choices(
    tags: Iterable[Mapping[str, object]],
    selected: Iterable[str] = (),
    *,
    policy: CategoryPolicy = "stored",
) -> list[Any]:
    """Build grouped checkbox choices for a tag set.

    Each category gets an InquirerPy ``Separator`` header followed by its
    tags in display order (ascending magnitude for ``ram``/``vga``).
    """
    try:
        from InquirerPy.separator import Separator
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("InquirerPy is required for tag_choices.") from exc

    chosen = set(selected)
    groups = group_tags(tags, policy=policy)
    choices: list[Any] = []
    for name in CATEGORIES:
        bucket = groups[name]
        if not bucket:
            continue
        choices.append(Separator(f"-- {CATEGORY_TITLES[name]} --"))
        for tag in bucket:
            tag_id = tag.get("id")
            if not isinstance(tag_id, str):
                continue
            choices.append(
                {
                    "name": f"  {tag.get('label', '(unnamed)')}",
                    "value": tag_id,
                    "enabled": tag_id in chosen,
                }
            )
    return choices


def choose_tags(
    tags: Sequence[Mapping[str, object]],
    selected: Iterable[str] = (),
    *,
    policy: CategoryPolicy = "stored",
) -> list[str] | None:
    """Interactively choose requirement tags using InquirerPy.

    Parameters
    ----------
    tags
        Live tag set.
    selected
        Tag ids that start out checked.
    policy
        How tag categories are decided.

    Returns
    -------
    list[str] | None
        Chosen tag ids, or None if the user cancels.
    """
    try:
        from InquirerPy.resolver import prompt
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("InquirerPy is required for choose_tags.") from exc

    choices = tag_choices(tags, selected, policy=policy)
    if not choices:
        return []

    result = prompt(
        [
            {
                "type": "checkbox",
                "name": "tags",
                "message": "Select what your machine has",
                "choices": choices,
            }
        ],
    )
    if not isinstance(result, dict):
        return None
    values = result.get("tags")
    if not isinstance(values, list):
        return None
    return [value for value in values if isinstance(value, str)]


__all__ = ["CATEGORY_TITLES", "choose_tags", "tag_choices"]
