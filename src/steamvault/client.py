"""Core SteamVault client with a raw-request escape hatch."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Sequence

import requests

from .exceptions import NotAvailable, PermissionDenied
from .local import LocalStore
from .resources.games import Games
from .resources.games_types import GameResponse
from .resources.tags import Tags
from .resources.tags_types import TagResponse
from .tools.compatibility import FilterState

DEFAULT_FIRESTORE_URL = os.environ.get("STEAMVAULT_FIRESTORE_URL", "https://firestore.googleapis.com/v1")
DEFAULT_PROJECT_ID = os.environ.get("STEAMVAULT_PROJECT_ID", "")
DEFAULT_API_KEY = os.environ.get("STEAMVAULT_API_KEY", "")
IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1"

# Values left in a config template are treated as missing.
PLACEHOLDER_VALUES = frozenset({"YOUR_API_KEY", "YOUR_PROJECT_ID"})


class SteamVault:
    """Resource-grouped client for the SteamVault catalog store."""

    games: Games
    tags: Tags
    local: LocalStore

    def __init__(
        self,
        *,
        project_id: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        local_path: Optional[str | os.PathLike[str]] = None,
        default_timeout: int = 20,
        session: Optional[requests.Session] = None,
        raise_on_error: bool = False,
        id_token: Optional[str] = None,
    ) -> None:
        """Create a client bound to a Firestore project.

        Parameters
        ----------
        project_id
            Firestore project ID. Without it the client runs in local mode.
        api_key
            Web API key of the project.
        base_url
            Firestore REST root, mostly useful for emulators.
        local_path
            Location of the local JSON catalog.
        default_timeout
            Default request timeout in seconds.
        session
            Optional requests session to reuse connections.
        raise_on_error
            If True, raise ``NotAvailable``/``PermissionDenied`` instead of
            returning None.
        id_token
            Identity token of a signed-in administrator, sent on every request.
        """
        self.project_id = project_id if project_id is not None else DEFAULT_PROJECT_ID
        self.api_key = api_key if api_key is not None else DEFAULT_API_KEY
        self.base_url = (base_url or DEFAULT_FIRESTORE_URL).rstrip("/")
        self.default_timeout = default_timeout
        self.raise_on_error = raise_on_error
        self.id_token = id_token
        self._logger = logging.getLogger(__name__)
        self._session = session

        self.local: LocalStore = LocalStore(local_path)
        self.games: Games = Games(self)
        self.tags: Tags = Tags(self)

    @property
    def is_configured(self) -> bool:
        """True when the document store can be used."""
        return bool(
            self.project_id
            and self.api_key
            and self.project_id not in PLACEHOLDER_VALUES
            and self.api_key not in PLACEHOLDER_VALUES
        )

    @property
    def documents_url(self) -> str:
        return f"{self.base_url}/projects/{self.project_id}/databases/(default)/documents"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        """Send a raw request to the document store.

        Parameters
        ----------
        method
            HTTP method (GET, PATCH, DELETE).
        path
            Document path relative to the database root, e.g. ``games/123``.
        params
            Query parameters for the request.
        json
            JSON payload for the request.
        timeout
            Timeout in seconds for this request.

        Returns
        -------
        dict | list | None
            Parsed JSON payload, or None if the response is empty or non-JSON.
        """
        if not self.is_configured:
            if self.raise_on_error:
                raise NotAvailable("Document store is not configured")
            self._logger.info("Document store not configured; skipping %s %s", method, path)
            return None

        url = f"{self.documents_url}/{path.lstrip('/')}"
        query: list[tuple[str, Any]]
        if params is None:
            query = []
        elif isinstance(params, dict):
            query = list(params.items())
        else:
            query = list(params)
        query.append(("key", self.api_key))

        headers = {"Authorization": f"Bearer {self.id_token}"} if self.id_token else None
        return self._send(method, url, params=query, json=json, headers=headers, timeout=timeout)

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Sequence[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[int] = None,
        denied_statuses: frozenset[int] = frozenset({401, 403}),
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
        except requests.HTTPError as exc:
            status = getattr(response, "status_code", None)
            # Extract error message from response body if available
            error_msg = str(exc)
            try:
                error_body = response.json()
                if isinstance(error_body, dict):
                    error = error_body.get("error")
                    if isinstance(error, dict) and "message" in error:
                        error_msg = f"{exc}\nServer message: {error['message']}"
                    elif isinstance(error, str):
                        error_msg = f"{exc}\nServer error: {error}"
                    elif "message" in error_body:
                        error_msg = f"{exc}\nServer message: {error_body['message']}"
            except (ValueError, AttributeError, KeyError):
                pass  # Response wasn't JSON or didn't have expected fields
            if self.raise_on_error:
                if status in denied_statuses:
                    raise PermissionDenied(error_msg, status) from exc
                raise NotAvailable(error_msg) from exc
            self._logger.warning("Request failed for %s %s: %s", method, url, error_msg)
            return None
        except Exception as exc:  # noqa: BLE001 - surface request failures
            if self.raise_on_error:
                raise NotAvailable(f"Request failed for {method} {url}: {exc}") from exc
            self._logger.warning("Request failed for %s %s: %s", method, url, exc)
            return None

        if not response.content:
            return None
        try:
            payload = response.json()
        except ValueError:  # noqa: PERF203 - only attempt JSON when present
            self._logger.warning("Response from %s %s was not JSON", method, url)
            return None
        if isinstance(payload, (dict, list)):
            return payload
        return None

    def sign_in(self, email: str, password: str, *, timeout: Optional[int] = None) -> bool:
        """Sign an administrator in with email and password.

        On success the identity token is kept on the client and sent with
        every later request. Rejected credentials raise ``PermissionDenied``
        when ``raise_on_error`` is set.
        """
        if not self.api_key or self.api_key in PLACEHOLDER_VALUES:
            if self.raise_on_error:
                raise NotAvailable("Auth is not configured")
            self._logger.warning("Auth not configured; cannot sign in %s", email)
            return False

        response = self._send(
            "POST",
            f"{IDENTITY_URL}/accounts:signInWithPassword",
            params=[("key", self.api_key)],
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=timeout,
            denied_statuses=frozenset({400, 401, 403}),
        )
        token = response.get("idToken") if isinstance(response, dict) else None
        if not isinstance(token, str) or not token:
            self._logger.warning("Sign-in response missing idToken for %s", email)
            return False
        self.id_token = token
        return True

    def sign_out(self) -> None:
        self.id_token = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self.id_token)

    def load_all_tags(self, *, timeout: Optional[int] = None) -> list[TagResponse]:
        """Return every tag, or an empty list when nothing could be loaded."""
        return self.tags.list(timeout=timeout) or []

    def load_all_games(self, *, timeout: Optional[int] = None) -> list[GameResponse]:
        """Return every game, or an empty list when nothing could be loaded."""
        return self.games.list(timeout=timeout) or []

    def browse(
        self,
        state: Optional[FilterState] = None,
        *,
        timeout: Optional[int] = None,
    ) -> list[GameResponse]:
        """Load a fresh snapshot of tags and games and filter it with ``state``."""
        tags = self.load_all_tags(timeout=timeout)
        games = self.load_all_games(timeout=timeout)
        return (state or FilterState()).apply(tags, games)
