"""Storefront lookups answered by a Gemini text-generation model.

Same interface as :class:`steamvault.storefront.SteamStore`, for setups where
the Steam API cannot be reached directly. Answers are model output and are
not verified.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

import requests

from .exceptions import NotAvailable
from .storefront import StorefrontClient
from .storefront_types import GameDraft, SteamSearchResult

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")

MAX_SEARCH_RESULTS = 5
STEAM_HEADER_URL = "https://cdn.akamai.steamstatic.com/steam/apps/{app_id}/header.jpg"

SEARCH_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "appId": {"type": "STRING", "description": "The numeric Steam App ID"},
            "name": {"type": "STRING", "description": "The official Steam storefront title"},
        },
        "required": ["appId", "name"],
    },
}

DETAILS_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "thumbnail": {"type": "STRING"},
        "price": {"type": "STRING"},
        "description": {"type": "STRING"},
        "minRequirements": {"type": "STRING"},
        "recommendedRequirements": {"type": "STRING"},
        "trailerUrl": {"type": "STRING"},
        "releaseDate": {"type": "STRING"},
    },
    "required": ["name", "thumbnail", "description", "minRequirements", "recommendedRequirements"],
}

SEARCH_PROMPT = (
    'Search for official Steam Store games matching the query: "{query}".\n'
    "Return a JSON list of up to {limit} results.\n"
    "For each result, provide the 'appId' (as a string) and the 'name' "
    "(exactly as it appears on the Steam Storefront)."
)

DETAILS_PROMPT = (
    "You are an expert on the Steam Storefront. Fetch the official data for App ID: {app_id}.\n\n"
    "REQUIRED FIELDS:\n"
    "1. name: The exact official title from the Steam Store. Do NOT shorten it.\n"
    '2. thumbnail: Use "{thumbnail}".\n'
    '3. price: Current price or "Free to Play".\n'
    "4. description: A detailed HTML summary (3+ paragraphs) covering gameplay, features, and setting.\n"
    "5. minRequirements: Minimum PC specs in HTML format.\n"
    "6. recommendedRequirements: Recommended PC specs in HTML format.\n"
    "7. trailerUrl: A valid URL for a video, a direct .mp4 from steamstatic or a YouTube link.\n"
    "8. releaseDate: Format YYYY-MM-DD.\n\n"
    "Return ONLY a JSON object."
)

_DRAFT_FIELDS = (
    "name", "thumbnail", "price", "description", "minRequirements",
    "recommendedRequirements", "trailerUrl", "releaseDate",
)


class GeminiStore(StorefrontClient):
    """Storefront lookups through the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        default_timeout: int = 60,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        super().__init__(default_timeout=default_timeout, session=session, raise_on_error=raise_on_error)
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self.model = model or GEMINI_MODEL

    def generate_json(
        self,
        prompt: str,
        schema: dict[str, Any],
        *,
        timeout: Optional[int] = None,
    ) -> object | None:
        """Run ``prompt`` and parse the JSON answer.

        Returns None when the model cannot be reached, answers with nothing,
        or answers with text that is not JSON.
        """
        if not self.api_key:
            if self.raise_on_error:
                raise NotAvailable("GEMINI_API_KEY is not set")
            self._logger.warning("GEMINI_API_KEY is not set; skipping lookup")
            return None

        payload = self._fetch_json(
            "POST",
            f"{GEMINI_URL}/models/{self.model}:generateContent",
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": schema,
                },
            },
            headers={"x-goog-api-key": self.api_key},
            timeout=timeout,
        )
        text = _response_text(payload)
        if not text:
            self._logger.warning("Empty response from Gemini model %s", self.model)
            return None
        try:
            return json.loads(text)
        except ValueError:
            self._logger.error("Failed to parse Gemini JSON. Raw text: %s", text)
            return None

    def search(self, query: str, *, timeout: Optional[int] = None) -> list[SteamSearchResult]:
        """Ask the model for up to five store matches for ``query``."""
        if not isinstance(query, str) or not query.strip():
            return []
        prompt = SEARCH_PROMPT.format(query=query.strip(), limit=MAX_SEARCH_RESULTS)
        answer = self.generate_json(prompt, SEARCH_SCHEMA, timeout=timeout)
        if not isinstance(answer, list):
            return []
        results: list[SteamSearchResult] = []
        for item in answer:
            if not isinstance(item, dict) or item.get("appId") is None or not item.get("name"):
                continue
            results.append({"appId": str(item["appId"]), "name": str(item["name"])})
        return results[:MAX_SEARCH_RESULTS]

    def details(self, app_id: str, *, timeout: Optional[int] = None) -> GameDraft | None:
        """Ask the model for the store page of ``app_id``."""
        app_id = str(app_id).strip()
        if not app_id.isdigit():
            self._logger.warning("Invalid app_id for details: %s", app_id)
            return None
        thumbnail = STEAM_HEADER_URL.format(app_id=app_id)
        prompt = DETAILS_PROMPT.format(app_id=app_id, thumbnail=thumbnail)
        answer = self.generate_json(prompt, DETAILS_SCHEMA, timeout=timeout)
        if not isinstance(answer, dict):
            if self.raise_on_error:
                raise NotAvailable(f"No usable details for app {app_id}")
            return None

        draft: dict[str, Any] = {
            field: answer[field] for field in _DRAFT_FIELDS if isinstance(answer.get(field), str)
        }
        draft.setdefault("thumbnail", thumbnail)
        draft["steamAppId"] = app_id
        return draft  # type: ignore[return-value]


def _response_text(payload: object) -> str:
    """Concatenate the text parts of the first candidate."""
    if not isinstance(payload, dict):
        return ""
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return ""
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""
    texts = (part.get("text") if isinstance(part, dict) else None for part in parts)
    return "".join(text for text in texts if isinstance(text, str))


__all__ = ["GEMINI_MODEL", "GeminiStore"]
