"""Requirement tag resource wrapper."""

from __future__ import annotations

import uuid
from typing import Mapping, Optional, Sequence, cast

from .base import Resource
from .tags_types import TagResponse, _normalize_category, _validate_label
from ._common_types import ValidationMode, _is_document_id, _normalize_id_sequence
from ..tools.taxonomy import Category, CategoryPolicy, category as tag_category, group_tags


class Tags(Resource):
    """Requirement tag operations."""

    collection = "tags"

    def list(self, *, timeout: Optional[int] = None) -> list[TagResponse] | None:
        """Fetch all tags.

        Parameters
        ----------
        timeout
            Request timeout in seconds.

        Returns
        -------
        list[TagResponse] or None
            List of tag dicts. When the document store cannot be reached the
            local cache is returned instead.
        """
        return cast(list[TagResponse], self._list_documents(timeout=timeout))

    def get(self, tag_id: str, *, timeout: Optional[int] = None) -> TagResponse | None:
        if not _is_document_id(tag_id):
            self._logger.warning("Invalid tag_id for get: %s", tag_id)
            return None
        tag = self._get_document(tag_id, timeout=timeout)
        if tag is None:
            self._logger.warning("Tag %s not found", tag_id)
            return None
        return cast(TagResponse, tag)

    def add(
        self,
        category: str,
        label: str | int | float,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> TagResponse | None:
        """Create a new requirement tag.

        Parameters
        ----------
        category
            ``"ram"``, ``"vga"`` or ``"others"``. Fixed for the tag's lifetime.
        label
            Display label. For ``ram``/``vga`` it must contain a magnitude,
            e.g. ``"8GB"`` or ``16``.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        TagResponse or None
            Created tag dict, or ``None`` on error.
        """
        normalized_category = _normalize_category(category)
        if validation != "off":
            if normalized_category is None:
                if validation == "strict":
                    raise ValueError(f"Invalid category: {category}")
                self._logger.warning("Invalid category for add: %s", category)
                return None

            label_error = _validate_label(normalized_category, label)
            if label_error is not None:
                if validation == "strict":
                    raise ValueError(label_error)
                self._logger.warning("Invalid label for add: %s", label_error)
                return None
            if isinstance(label, str):
                label = label.strip()

        document = {
            "id": uuid.uuid4().hex,
            "label": label,
            "category": normalized_category or category,
        }
        created = self._put_document(document, timeout=timeout)
        if created is None:
            self._logger.warning("Create tag failed for %s", document)
            return None
        return cast(TagResponse, created)

    def update(
        self,
        tag_id: str,
        *,
        label: Optional[str | int | float] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> TagResponse | None:
        """Change a tag's display label, keeping its ID and category.

        Returns
        -------
        TagResponse or None
            Updated tag dict, or ``None`` on error.
        """
        if not _is_document_id(tag_id):
            if validation == "strict":
                raise ValueError(f"Invalid tag_id: {tag_id}")
            if validation == "warn":  # pragma: no branch - strict raises above
                self._logger.warning("Invalid tag_id for update: %s", tag_id)
                return None

        if label is None:
            self._logger.warning("No updates provided for tag %s", tag_id)
            return None

        existing = self.get(tag_id, timeout=timeout)
        if existing is None:
            return None
        current_category: Category = tag_category(existing)

        if validation != "off":
            label_error = _validate_label(current_category, label)
            if label_error is not None:
                if validation == "strict":
                    raise ValueError(label_error)
                self._logger.warning("Invalid label for update: %s", label_error)
                return None
            if isinstance(label, str):
                label = label.strip()

        document = {"id": tag_id, "label": label, "category": current_category}
        updated = self._put_document(document, timeout=timeout)
        if updated is None:
            self._logger.warning("Update tag response missing expected data.")
            return None
        return cast(TagResponse, updated)

    def delete(
        self,
        tag_ids: Sequence[str] | str,
        *,
        cascade: bool = False,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more tags by ID.

        Parameters
        ----------
        tag_ids
            Tag ID or iterable of tag identifiers.
        cascade
            Also remove the IDs from every game that references them. Without
            it the references dangle, which the filter ignores.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        bool
            ``True`` when every delete (and cascade rewrite) succeeds.
        """
        # When validation is off, pass input directly without transformation
        if validation == "off":
            ids = [tag_ids] if isinstance(tag_ids, str) else list(tag_ids)
        else:
            ids = _normalize_id_sequence(tag_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid tag_ids: {tag_ids}")
                if validation == "warn":  # pragma: no branch - strict raises above
                    self._logger.warning("Invalid tag_ids for delete: %s", tag_ids)
                    return False

        for tag_id in ids:
            if not self._delete_document(tag_id, timeout=timeout):
                return False

        if cascade:
            rewritten = self._client.games.prune_requirements(ids, timeout=timeout)
            if rewritten is None:
                return False
            self._logger.info("Removed deleted tags from %s games", rewritten)
        return True

    def grouped(
        self,
        *,
        policy: CategoryPolicy = "stored",
        timeout: Optional[int] = None,
    ) -> dict[Category, list[Mapping[str, object]]] | None:
        """Fetch all tags partitioned into ``ram``, ``vga`` and ``others``."""
        tags = self.list(timeout=timeout)
        if tags is None:
            return None
        return group_tags(tags, policy=policy)
