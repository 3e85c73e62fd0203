"""Game resource wrapper."""

from __future__ import annotations

import uuid
from typing import Mapping, Optional, Sequence, cast

from .base import Resource
from .games_types import GameResponse, _normalize_game
from ._common_types import ValidationMode, _is_document_id, _normalize_id_sequence


class Games(Resource):
    """Game catalog operations."""

    collection = "games"

    def list(self, *, timeout: Optional[int] = None) -> list[GameResponse] | None:
        """Fetch every game in the catalog.

        Parameters
        ----------
        timeout
            Request timeout in seconds.

        Returns
        -------
        list[GameResponse] or None
            Game dicts. When the document store cannot be reached the local
            cache is returned instead.
        """
        return cast(list[GameResponse], self._list_documents(timeout=timeout))

    def get(
        self,
        game_id: str,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> GameResponse | None:
        """Fetch a single game by ID.

        Parameters
        ----------
        game_id
            Game ID to fetch.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        GameResponse | None
            Game dict, or None if not found or on error.
        """
        if not _is_document_id(game_id):
            if validation == "strict":
                raise ValueError(f"Invalid game_id for get: {game_id}")
            if validation == "warn":
                self._logger.warning("Invalid game_id for get: %s", game_id)
                return None

        game = self._get_document(game_id, timeout=timeout)
        if game is None:
            self._logger.warning("Game %s not found", game_id)
            return None
        return cast(GameResponse, game)

    def save(
        self,
        game: Mapping[str, object],
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> GameResponse | None:
        """Create or fully replace a game.

        The stored document is replaced as a whole, including its
        ``requirementIds``; concurrent writers are last-write-wins.

        Parameters
        ----------
        game
            Game document. Must carry an ``id`` and a non-empty ``name``.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        GameResponse or None
            Saved game dict, or ``None`` on error.
        """
        if validation == "off":
            document = dict(game)
        else:
            document, invalid_fields, value_errors = _normalize_game(game)
            problems = [f"unknown field {name}" for name in invalid_fields or []] + (value_errors or [])
            if "id" not in document:
                problems.append("missing id")
            name = document.get("name")
            if not isinstance(name, str) or not name.strip():
                problems.append("missing name")
            if problems:
                if validation == "strict":
                    raise ValueError(f"Invalid game: {'; '.join(problems)}")
                self._logger.warning("Invalid game for save: %s", "; ".join(problems))
                if "id" not in document or "missing name" in problems:
                    return None

        if not _is_document_id(document.get("id")):
            self._logger.warning("Game has no usable id: %s", document.get("id"))
            return None
        return cast(Optional[GameResponse], self._put_document(document, timeout=timeout))

    def add(
        self,
        game: Mapping[str, object],
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> GameResponse | None:
        """Create a new game, assigning an ID when the draft has none.

        Parameters
        ----------
        game
            Game draft, e.g. the result of a storefront lookup.
        validation
            Validation mode: ``"off"`` sends inputs as-is, ``"warn"`` drops invalid
            inputs with warnings, and ``"strict"`` raises on invalid inputs.
        timeout
            Request timeout in seconds.

        Returns
        -------
        GameResponse or None
            Created game dict, or ``None`` on error.
        """
        document = dict(game)
        if not document.get("id"):
            document["id"] = uuid.uuid4().hex
        return self.save(document, validation=validation, timeout=timeout)

    def update(
        self,
        game_id: str,
        *,
        name: Optional[str] = None,
        price: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[str] = None,
        trailer_url: Optional[str] = None,
        min_requirements: Optional[str] = None,
        recommended_requirements: Optional[str] = None,
        release_date: Optional[str] = None,
        screenshots: Optional[Sequence[str]] = None,
        requirement_ids: Optional[Sequence[str]] = None,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> GameResponse | None:
        """Update an existing game.

        Only the given fields change. ``requirement_ids`` replaces the whole
        requirement set; pass an empty list to clear it.

        Returns
        -------
        GameResponse or None
            Updated game dict, or ``None`` on error.
        """
        if not _is_document_id(game_id):
            if validation == "strict":
                raise ValueError(f"Invalid game_id: {game_id}")
            if validation == "warn":  # pragma: no branch - strict raises above
                self._logger.warning("Invalid game_id for update: %s", game_id)
                return None

        changes: dict[str, object] = {}
        for field, value in (
            ("name", name),
            ("price", price),
            ("description", description),
            ("thumbnail", thumbnail),
            ("trailerUrl", trailer_url),
            ("minRequirements", min_requirements),
            ("recommendedRequirements", recommended_requirements),
            ("releaseDate", release_date),
            ("screenshots", screenshots),
            ("requirementIds", requirement_ids),
        ):
            if value is not None:
                changes[field] = list(value) if field in {"screenshots", "requirementIds"} else value

        if not changes:
            self._logger.warning("No updates provided for game %s", game_id)
            return None

        existing = self.get(game_id, validation=validation, timeout=timeout)
        if existing is None:
            return None
        merged = {**existing, **changes, "id": game_id}
        return self.save(merged, validation=validation, timeout=timeout)

    def delete(
        self,
        game_ids: Sequence[str] | str,
        *,
        validation: ValidationMode = "warn",
        timeout: Optional[int] = None,
    ) -> bool:
        """Delete one or more games by ID.

        Returns
        -------
        bool
            ``True`` when every delete succeeds.
        """
        if validation == "off":
            ids = [game_ids] if isinstance(game_ids, str) else game_ids
        else:
            ids = _normalize_id_sequence(game_ids)
            if ids is None:
                if validation == "strict":
                    raise ValueError(f"Invalid game_ids: {game_ids}")
                if validation == "warn":  # pragma: no branch - strict raises above
                    self._logger.warning("Invalid game_ids for delete: %s", game_ids)
                    return False

        for game_id in ids:
            if not self._delete_document(game_id, timeout=timeout):
                return False
        return True

    def prune_requirements(
        self,
        tag_ids: Sequence[str] | str,
        *,
        timeout: Optional[int] = None,
    ) -> int | None:
        """Drop ``tag_ids`` from every game that references them.

        Returns
        -------
        int or None
            Number of games rewritten, or ``None`` if a write failed.
        """
        ids = _normalize_id_sequence(tag_ids)
        if ids is None:
            self._logger.warning("Invalid tag_ids for prune_requirements: %s", tag_ids)
            return None
        targets = set(ids)

        rewritten = 0
        for game in self.list(timeout=timeout) or []:
            current = game.get("requirementIds") or []
            if not targets.intersection(current):
                continue
            kept = [tag_id for tag_id in current if tag_id not in targets]
            if self.save({**game, "requirementIds": kept}, validation="off", timeout=timeout) is None:
                return None
            rewritten += 1
        return rewritten
