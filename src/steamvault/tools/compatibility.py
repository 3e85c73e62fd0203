"""Compatibility filter over the game catalog.

Given the live tag set, the catalog and a selection of tag ids, work out
which games a visitor's machine can run:

- ``ram`` and ``vga`` are ordered categories. The user's capability is the
  largest magnitude they selected; a game passes when its smallest declared
  magnitude in that category does not exceed it (ties pass). A game that
  declares nothing in the category passes unless ``require_any_tag`` is set.
- ``others`` is a flag category. A game passes when it declares at least one
  of the selected flags. A game with no flags at all is silent on the
  dimension and passes the same way as for the ordered categories.
- Categories combine with AND; categories with no selection impose nothing.

Selected ids that are not in the live tag set are ignored, and so are ids a
game still references after its tag was deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from .taxonomy import ORDERED_CATEGORIES, Category, CategoryPolicy, category, magnitude

_logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=Mapping[str, object])


def _requirement_ids(item: Mapping[str, object]) -> frozenset[str]:
    ids = item.get("requirementIds")
    if isinstance(ids, (str, bytes)) or not isinstance(ids, Iterable):
        return frozenset()
    return frozenset(tag_id for tag_id in ids if isinstance(tag_id, str))


def _matches_search(item: Mapping[str, object], needle: str) -> bool:
    if not needle:
        return True
    name = item.get("name")
    if not isinstance(name, str):
        return False
    return needle in name.lower()


def filter_catalog(
    all_tags: Iterable[Mapping[str, object]],
    items: Iterable[ItemT],
    selected_tag_ids: Iterable[str] = (),
    *,
    require_any_tag: bool = False,
    search_text: Optional[str] = "",
    policy: CategoryPolicy = "stored",
) -> list[ItemT]:
    """Return the games compatible with a tag selection, in input order.

    Parameters
    ----------
    all_tags
        Live tag set; the only source of truth for which ids exist.
    items
        Catalog entries, each with an optional ``requirementIds`` list.
    selected_tag_ids
        Tag ids chosen by the visitor.
    require_any_tag
        Only keep games that declare at least one requirement tag. Also makes
        games that are silent on a selected ordered category fail it.
    search_text
        Case-insensitive substring filter on the game name.
    policy
        How tag categories are decided, see :mod:`steamvault.tools.taxonomy`.

    Returns
    -------
    list
        The matching subsequence of ``items``.
    """
    # Snapshot every input before the pass starts.
    tag_snapshot = tuple(tag for tag in all_tags if isinstance(tag, Mapping))
    item_snapshot = tuple(items)
    selection = frozenset(tag_id for tag_id in selected_tag_ids if isinstance(tag_id, str))
    needle = (search_text or "").lower()

    tag_category: dict[str, Category] = {}
    tag_magnitude: dict[str, float] = {}
    for tag in tag_snapshot:
        tag_id = tag.get("id")
        if not isinstance(tag_id, str) or tag_id in tag_category:
            continue
        tag_category[tag_id] = category(tag, policy)
        tag_magnitude[tag_id] = magnitude(tag)

    user_caps: dict[Category, float] = {}
    selected_others: set[str] = set()
    for tag_id in selection:
        tag_cat = tag_category.get(tag_id)
        if tag_cat is None:
            continue
        if tag_cat in ORDERED_CATEGORIES:
            user_caps[tag_cat] = max(user_caps.get(tag_cat, tag_magnitude[tag_id]), tag_magnitude[tag_id])
        else:
            selected_others.add(tag_id)

    results: list[ItemT] = []
    for item in item_snapshot:
        if not isinstance(item, Mapping):
            continue
        if not _matches_search(item, needle):
            continue
        declared = _requirement_ids(item)
        if require_any_tag and not declared:
            continue
        if _is_compatible(declared, user_caps, selected_others, tag_category, tag_magnitude, require_any_tag):
            results.append(item)
        else:
            _logger.debug("Excluding %s: incompatible with selection", item.get("id"))
    return results


def _is_compatible(
    declared: frozenset[str],
    user_caps: Mapping[Category, float],
    selected_others: set[str],
    tag_category: Mapping[str, Category],
    tag_magnitude: Mapping[str, float],
    require_any_tag: bool,
) -> bool:
    for cat, user_cap in user_caps.items():
        item_magnitudes = [
            tag_magnitude[tag_id]
            for tag_id in declared
            if tag_category.get(tag_id) == cat
        ]
        if not item_magnitudes:
            if require_any_tag:
                return False
            continue
        if min(item_magnitudes) > user_cap:
            return False
    if selected_others:
        declared_others = {
            tag_id for tag_id in declared if tag_category.get(tag_id) == "others"
        }
        # No flags declared: silent on this dimension.
        if not declared_others:
            return not require_any_tag
        if not (declared_others & selected_others):
            return False
    return True


@dataclass(frozen=True)
class FilterState:
    """Immutable browsing selection fed to :func:`filter_catalog`.

    Each change returns a new state; nothing is ever persisted.
    """

    selected_tag_ids: frozenset[str] = field(default_factory=frozenset)
    require_any_tag: bool = False
    search_text: str = ""

    @classmethod
    def from_ids(cls, tag_ids: Iterable[str], **kwargs) -> "FilterState":
        return cls(selected_tag_ids=frozenset(tag_ids), **kwargs)

    def toggle(self, tag_id: str) -> "FilterState":
        """Select ``tag_id`` if it is not selected, otherwise deselect it."""
        if tag_id in self.selected_tag_ids:
            return replace(self, selected_tag_ids=self.selected_tag_ids - {tag_id})
        return replace(self, selected_tag_ids=self.selected_tag_ids | {tag_id})

    def with_search(self, search_text: str) -> "FilterState":
        return replace(self, search_text=search_text or "")

    def with_require_any_tag(self, require_any_tag: bool) -> "FilterState":
        return replace(self, require_any_tag=bool(require_any_tag))

    def reset(self) -> "FilterState":
        """Clear the tag selection, keeping search text and flags."""
        return replace(self, selected_tag_ids=frozenset())

    def apply(
        self,
        all_tags: Sequence[Mapping[str, object]],
        items: Sequence[ItemT],
        *,
        policy: CategoryPolicy = "stored",
    ) -> list[ItemT]:
        return filter_catalog(
            all_tags,
            items,
            self.selected_tag_ids,
            require_any_tag=self.require_any_tag,
            search_text=self.search_text,
            policy=policy,
        )


__all__ = ["FilterState", "filter_catalog"]
