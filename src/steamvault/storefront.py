"""Steam storefront lookups used to pre-fill game metadata."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import quote, urlencode

import requests
from tqdm import tqdm

from .exceptions import NotAvailable
from .storefront_types import (
    FREE_PRICE,
    NO_MIN_REQUIREMENTS,
    NO_RECOMMENDED_REQUIREMENTS,
    UNRELEASED_PRICE,
    GameDraft,
    SteamSearchResult,
)

STEAM_STORE_URL = "https://store.steampowered.com/api"
# Optional prefix for a CORS-style proxy, e.g. "https://corsproxy.io/?url=".
STEAM_PROXY = os.environ.get("STEAMVAULT_STEAM_PROXY", "")


class StorefrontClient(ABC):
    """Shared HTTP plumbing for metadata lookups.

    Subclasses answer ``details`` for a single app ID.
    """

    def __init__(
        self,
        *,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        self.default_timeout = default_timeout
        self.raise_on_error = raise_on_error
        self._logger = logging.getLogger(__name__)
        self._session = session

    def _fetch_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        requester = self._session or requests
        try:
            response = requester.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=timeout or self.default_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except Exception as exc:  # noqa: BLE001 - lookups are best effort
            if self.raise_on_error:
                raise NotAvailable(f"Lookup failed for {method} {url}: {exc}") from exc
            self._logger.warning("Lookup failed for %s %s: %s", method, url, exc)
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None

    @abstractmethod
    def details(self, app_id: str, *, timeout: Optional[int] = None) -> GameDraft | None:
        """Fetch a draft for one app ID, or None when it cannot be found."""

    def details_many(
        self,
        app_ids: Iterable[str],
        *,
        max_workers: int = 4,
        timeout: Optional[int] = None,
    ) -> list[GameDraft]:
        """Fetch drafts for several app IDs, optionally in parallel.

        Failed lookups are logged and left out of the result.
        """
        app_ids = [str(app_id) for app_id in app_ids]
        results: list[GameDraft] = []

        if not app_ids:
            return results

        if max_workers == 0:
            for app_id in tqdm(app_ids, desc="Fetching games", unit=" games"):
                try:
                    draft = self.details(app_id, timeout=timeout)
                except Exception as exc:  # noqa: BLE001 - keep going with the rest
                    self._logger.warning("App %s failed during fetch: %s", app_id, exc)
                    continue
                if draft:
                    results.append(draft)
            return results

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self.details, app_id, timeout=timeout): app_id
                for app_id in app_ids
            }
            with tqdm(total=len(futures), desc="Fetching games (parallel)", unit=" games") as pbar:
                for future in as_completed(futures):
                    app_id = futures[future]
                    try:
                        draft = future.result()
                        if draft:
                            results.append(draft)
                    except Exception as exc:  # noqa: BLE001 - handle worker failures gracefully
                        self._logger.warning("App %s failed during fetch: %s", app_id, exc)
                    finally:
                        pbar.update(1)

        return results


def _first_trailer(movies: object) -> str:
    """Best quality trailer URL of the first movie, mp4 preferred."""
    if not isinstance(movies, list) or not movies or not isinstance(movies[0], dict):
        return ""
    movie = movies[0]
    for container in ("mp4", "webm"):
        sources = movie.get(container)
        if isinstance(sources, dict) and isinstance(sources.get("max"), str) and sources["max"]:
            return sources["max"]
    return ""


def _price(data: Mapping[str, Any]) -> str:
    if data.get("is_free"):
        return FREE_PRICE
    overview = data.get("price_overview")
    if isinstance(overview, dict) and isinstance(overview.get("final_formatted"), str):
        return overview["final_formatted"]
    return UNRELEASED_PRICE


def _requirements(data: Mapping[str, Any]) -> tuple[str, str]:
    # Steam sends an empty list instead of a dict when nothing is listed.
    requirements = data.get("pc_requirements")
    if not isinstance(requirements, dict):
        requirements = {}
    minimum = requirements.get("minimum")
    recommended = requirements.get("recommended")
    return (
        minimum if isinstance(minimum, str) and minimum else NO_MIN_REQUIREMENTS,
        recommended if isinstance(recommended, str) and recommended else NO_RECOMMENDED_REQUIREMENTS,
    )


def draft_from_appdetails(app_id: str, data: Mapping[str, Any]) -> GameDraft:
    """Map an ``appdetails`` data block to a game draft."""
    minimum, recommended = _requirements(data)
    release = data.get("release_date")
    screenshots = data.get("screenshots")
    return {
        "steamAppId": str(app_id),
        "name": data.get("name") or "",
        "thumbnail": data.get("header_image") or "",
        "price": _price(data),
        "description": data.get("about_the_game") or data.get("short_description") or "",
        "minRequirements": minimum,
        "recommendedRequirements": recommended,
        "trailerUrl": _first_trailer(data.get("movies")),
        "releaseDate": (release.get("date") or "") if isinstance(release, dict) else "",
        "screenshots": [
            shot["path_full"]
            for shot in screenshots or []
            if isinstance(shot, dict) and isinstance(shot.get("path_full"), str)
        ],
    }


class SteamStore(StorefrontClient):
    """Direct lookups against the public Steam storefront API."""

    def __init__(
        self,
        *,
        proxy: Optional[str] = None,
        language: str = "english",
        country: str = "US",
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
    ) -> None:
        super().__init__(default_timeout=default_timeout, session=session, raise_on_error=raise_on_error)
        self.proxy = STEAM_PROXY if proxy is None else proxy
        self.language = language
        self.country = country

    def _url(self, endpoint: str, params: Mapping[str, Any]) -> str:
        url = f"{STEAM_STORE_URL}/{endpoint}?{urlencode(params)}"
        if self.proxy:
            return f"{self.proxy}{quote(url, safe='')}"
        return url

    def search(self, query: str, *, timeout: Optional[int] = None) -> list[SteamSearchResult]:
        """Search the store by name.

        Returns
        -------
        list[SteamSearchResult]
            Matches in store order; empty on blank queries and on any failure.
        """
        if not isinstance(query, str) or not query.strip():
            return []
        url = self._url("storesearch/", {"term": query.strip(), "l": self.language, "cc": self.country})
        payload = self._fetch_json("GET", url, timeout=timeout)
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []
        return [
            {"appId": str(item["id"]), "name": str(item.get("name") or "")}
            for item in items
            if isinstance(item, dict) and item.get("id") is not None
        ]

    def details(self, app_id: str, *, timeout: Optional[int] = None) -> GameDraft | None:
        """Fetch store details for one app ID.

        Returns
        -------
        GameDraft | None
            Draft metadata, or None when the app is unknown or the lookup
            fails (``NotAvailable`` is raised instead with ``raise_on_error``).
        """
        app_id = str(app_id).strip()
        if not app_id.isdigit():
            self._logger.warning("Invalid app_id for details: %s", app_id)
            return None
        url = self._url("appdetails", {"appids": app_id, "l": self.language, "cc": self.country})
        payload = self._fetch_json("GET", url, timeout=timeout)
        entry = payload.get(app_id) if isinstance(payload, dict) else None
        if not isinstance(entry, dict) or not entry.get("success") or not isinstance(entry.get("data"), dict):
            if self.raise_on_error and payload is not None:
                raise NotAvailable(f"Game {app_id} not found or Steam API error")
            self._logger.warning("Game %s not found or Steam API error", app_id)
            return None
        return draft_from_appdetails(app_id, entry["data"])


__all__ = ["STEAM_PROXY", "STEAM_STORE_URL", "SteamStore", "StorefrontClient", "draft_from_appdetails"]
