"""Local JSON catalog used when the document store is missing or offline."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

DEFAULT_LOCAL_PATH = os.environ.get(
    "STEAMVAULT_LOCAL_PATH",
    str(Path.home() / ".steamvault" / "catalog.json"),
)
COLLECTIONS = ("games", "tags")

_logger = logging.getLogger(__name__)


class LocalStore:
    """Keeps each collection as a list of documents in one JSON file.

    The file looks like ``{"games": [...], "tags": [...]}``. A missing or
    unreadable file reads as an empty catalog.
    """

    def __init__(self, path: Optional[str | os.PathLike[str]] = None) -> None:
        self.path = Path(path or DEFAULT_LOCAL_PATH).expanduser()

    def _read(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.error("Failed to read local catalog %s: %s", self.path, exc)
            return {}
        if not isinstance(payload, dict):
            _logger.error("Local catalog %s is not a JSON object", self.path)
            return {}
        return {
            key: [doc for doc in value if isinstance(doc, dict)]
            for key, value in payload.items()
            if key in COLLECTIONS and isinstance(value, list)
        }

    def _write(self, data: Mapping[str, list[dict[str, Any]]]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            _logger.warning("Failed to write local catalog %s: %s", self.path, exc)
            return False
        return True

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Return every document of ``collection``."""
        return list(self._read().get(collection, []))

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        for document in self.load(collection):
            if document.get("id") == doc_id:
                return document
        return None

    def replace(self, collection: str, documents: Iterable[Mapping[str, Any]]) -> bool:
        """Overwrite ``collection`` with ``documents``."""
        data = self._read()
        data[collection] = [dict(doc) for doc in documents]
        return self._write(data)

    def upsert(self, collection: str, document: Mapping[str, Any]) -> bool:
        """Replace the document with the same ID, or add it to the front."""
        data = self._read()
        documents = data.get(collection, [])
        doc_id = document.get("id")
        for index, existing in enumerate(documents):
            if existing.get("id") == doc_id:
                documents[index] = dict(document)
                break
        else:
            documents.insert(0, dict(document))
        data[collection] = documents
        return self._write(data)

    def delete(self, collection: str, doc_ids: Iterable[str]) -> bool:
        data = self._read()
        targets = set(doc_ids)
        data[collection] = [doc for doc in data.get(collection, []) if doc.get("id") not in targets]
        return self._write(data)


__all__ = ["COLLECTIONS", "DEFAULT_LOCAL_PATH", "LocalStore"]
