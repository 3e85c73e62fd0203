'''Types, structures, and validation for games'''

from __future__ import annotations

from typing import Literal, Mapping, TypedDict, get_args
from typing_extensions import ReadOnly

from ._common_types import _is_document_id, _normalize_id_sequence

__all__ = [
    "GameField",
    "GameResponse",
    "GAME_FIELDS",
    "TEXT_FIELDS",
]


class GameResponse(TypedDict, total=False):
    """Readonly game dict returned by game endpoints."""
    id: ReadOnly[str]
    steamAppId: ReadOnly[str]
    name: ReadOnly[str]
    thumbnail: ReadOnly[str]
    price: ReadOnly[str]
    description: ReadOnly[str]
    minRequirements: ReadOnly[str]
    recommendedRequirements: ReadOnly[str]
    trailerUrl: ReadOnly[str]
    releaseDate: ReadOnly[str]
    screenshots: ReadOnly[list[str]]
    requirementIds: ReadOnly[list[str]]


GameField = Literal[
    "id", "steamAppId", "name", "thumbnail", "price", "description", "minRequirements",
    "recommendedRequirements", "trailerUrl", "releaseDate", "screenshots", "requirementIds",
]
GAME_FIELDS: tuple[GameField, ...] = get_args(GameField)

# Opaque display strings
TEXT_FIELDS: tuple[GameField, ...] = (
    "steamAppId", "name", "thumbnail", "price", "description", "minRequirements",
    "recommendedRequirements", "trailerUrl", "releaseDate",
)


def _normalize_game(
    game: Mapping[str, object],
) -> tuple[dict[str, object], list[str] | None, list[str] | None]:
    """Normalize a game document and return errors.

    Returns the cleaned document, the unknown field names and the value
    errors. ``requirementIds`` is deduplicated and always present.
    """
    if not isinstance(game, Mapping):
        raise ValueError(f"Game input must be a dict: {type(game)}")

    document: dict[str, object] = {}
    invalid_fields: list[str] = []
    value_errors: list[str] = []
    for field, value in game.items():
        if field not in GAME_FIELDS:
            invalid_fields.append(str(field))
            continue
        if field == "id":
            if not _is_document_id(value):
                value_errors.append(f"id: invalid document id {value!r}")
                continue
            document["id"] = value
        elif field in TEXT_FIELDS:
            if value is None:
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool) and field == "steamAppId":
                value = str(value)
            if not isinstance(value, str):
                value_errors.append(f"{field}: expected a string, got {type(value).__name__}")
                continue
            document[field] = value
        elif field == "screenshots":
            if value is None:
                continue
            if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
                value_errors.append(f"screenshots: expected a list of URLs, got {type(value).__name__}")
                continue
            document["screenshots"] = [url for url in value if isinstance(url, str) and url]
        elif field == "requirementIds":
            if value is None or (isinstance(value, (list, tuple)) and not value):
                document["requirementIds"] = []
                continue
            normalized = _normalize_id_sequence(value)
            if normalized is None:
                value_errors.append(f"requirementIds: invalid tag ids {value!r}")
                continue
            document["requirementIds"] = normalized

    document.setdefault("requirementIds", [])
    return document, invalid_fields or None, value_errors or None
