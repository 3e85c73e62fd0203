"""Base resource helpers."""

from __future__ import annotations

from typing import Any, Mapping, Optional, TYPE_CHECKING

from ._common_types import _decode_document, _encode_fields

if TYPE_CHECKING:  # pragma: no cover
    from ..client import SteamVault
    from ..local import LocalStore

# Documents requested per page when listing a collection.
PAGE_SIZE = 300


class Resource:
    """Shared helpers for resource classes."""

    collection: str = ""

    def __init__(self, client: "SteamVault") -> None:
        self._client = client

    @property
    def _logger(self):
        return self._client._logger

    @property
    def _local(self) -> "LocalStore":
        return self._client.local

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._client.request(method, path, params=params, json=json, timeout=timeout)

    def _get(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("GET", path, params=params, timeout=timeout)

    def _patch(
        self,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("PATCH", path, json=json, timeout=timeout)

    def _delete(
        self,
        path: str,
        *,
        params: Optional[dict[str, Any] | list[tuple[str, Any]]] = None,
        timeout: Optional[int] = None,
    ) -> Optional[dict[str, Any] | list[Any]]:
        return self._request("DELETE", path, params=params, timeout=timeout)

    # ------------------------------------------------------------------
    # Document helpers with local fallback
    # ------------------------------------------------------------------
    def _list_documents(self, *, timeout: Optional[int] = None) -> list[dict[str, Any]]:
        """List the collection, falling back to the local cache on failure."""
        if not self._client.is_configured:
            return self._local.load(self.collection)

        documents: list[dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            params: dict[str, Any] = {"pageSize": PAGE_SIZE}
            if page_token:
                params["pageToken"] = page_token
            response = self._get(self.collection, params=params, timeout=timeout)
            if not isinstance(response, dict):
                self._logger.warning("Could not list %s; using local cache.", self.collection)
                return self._local.load(self.collection)
            raw_documents = response.get("documents") or []
            for raw in raw_documents if isinstance(raw_documents, list) else []:
                decoded = _decode_document(raw)
                if decoded is not None:
                    documents.append(decoded)
            next_token = response.get("nextPageToken")
            if not isinstance(next_token, str) or not next_token:
                break
            page_token = next_token

        self._local.replace(self.collection, documents)
        return documents

    def _get_document(self, doc_id: str, *, timeout: Optional[int] = None) -> dict[str, Any] | None:
        if not self._client.is_configured:
            return self._local.get(self.collection, doc_id)
        response = self._get(f"{self.collection}/{doc_id}", timeout=timeout)
        return _decode_document(response)

    def _put_document(
        self,
        document: Mapping[str, Any],
        *,
        timeout: Optional[int] = None,
    ) -> dict[str, Any] | None:
        """Write a whole document (last write wins) and mirror it locally."""
        doc_id = document["id"]
        if not self._client.is_configured:
            return dict(document) if self._local.upsert(self.collection, document) else None

        payload = {"fields": _encode_fields(document)}
        response = self._patch(f"{self.collection}/{doc_id}", json=payload, timeout=timeout)
        saved = _decode_document(response)
        if saved is None:
            if response is not None:
                self._logger.warning("Write to %s/%s returned no document.", self.collection, doc_id)
            return None
        self._local.upsert(self.collection, saved)
        return saved

    def _delete_document(self, doc_id: str, *, timeout: Optional[int] = None) -> bool:
        if self._client.is_configured:
            response = self._delete(f"{self.collection}/{doc_id}", timeout=timeout)
            if response is None:
                return False
        self._local.delete(self.collection, [doc_id])
        return True
