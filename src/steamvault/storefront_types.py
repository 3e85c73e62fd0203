"""Types shared by the storefront lookups."""

from __future__ import annotations

from typing import TypedDict
from typing_extensions import ReadOnly

# Placeholders used when the store lists no requirements.
NO_MIN_REQUIREMENTS = "No minimum requirements listed."
NO_RECOMMENDED_REQUIREMENTS = "No recommended requirements listed."
FREE_PRICE = "Free to Play"
UNRELEASED_PRICE = "Coming Soon"


class SteamSearchResult(TypedDict):
    """One hit of a storefront name search."""
    appId: ReadOnly[str]
    name: ReadOnly[str]


class GameDraft(TypedDict, total=False):
    """Best-effort metadata for a game, ready to pass to ``Games.add``."""
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


__all__ = [
    "FREE_PRICE",
    "GameDraft",
    "NO_MIN_REQUIREMENTS",
    "NO_RECOMMENDED_REQUIREMENTS",
    "SteamSearchResult",
    "UNRELEASED_PRICE",
]
