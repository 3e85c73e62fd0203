"""Shared types and validation helpers for resources.

This module contains:
- Validation mode type (shared across all resources)
- Document id normalization
- The Firestore typed-value codec used for every stored document
"""

from __future__ import annotations

import logging
import math
from typing import Any, Literal, Mapping, Sequence

from ..utils import unique_in_order

_logger = logging.getLogger(__name__)

# --- Shared Validation Mode --- #
ValidationMode = Literal["off", "warn", "strict"]


# --- ID Sequence Normalization --- #
def _is_document_id(value: object) -> bool:
    """Document ids are non-empty strings without path separators."""
    return isinstance(value, str) and bool(value.strip()) and "/" not in value


def _normalize_id_sequence(ids: str | Sequence[str] | object) -> list[str] | None:
    """Normalize a single ID or sequence of IDs to a deduplicated list.

    Parameters
    ----------
    ids
        Single document ID or sequence of document IDs.

    Returns
    -------
    list[str] | None
        Deduplicated list of valid IDs, or None if:
        - Input is not a str or sequence (or is bytes)
        - No valid IDs found

    Notes
    -----
    Used for game IDs, tag IDs and requirement ID lists. Invalid elements
    are dropped before deduplication.
    """
    if isinstance(ids, str):
        id_list = [ids]
    elif isinstance(ids, Sequence) and not isinstance(ids, bytes):
        id_list = list(ids)
    else:
        return None

    valid_ids = [id_val for id_val in id_list if _is_document_id(id_val)]
    if not valid_ids:
        return None

    return unique_in_order(valid_ids)


# --- Firestore Value Codec --- #
def _encode_value(value: object) -> dict[str, Any]:
    """Encode a JSON-compatible value as a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        # int64 values travel as strings.
        return {"integerValue": str(value)}
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Non-finite float {value!r}")
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": _encode_fields(value)}}
    if isinstance(value, Sequence) and not isinstance(value, bytes):
        return {"arrayValue": {"values": [_encode_value(item) for item in value]}}
    raise ValueError(f"Unsupported value type {type(value)}")


def _encode_fields(document: Mapping[str, object]) -> dict[str, Any]:
    return {str(key): _encode_value(value) for key, value in document.items()}


def _decode_value(value: object) -> object:
    """Decode a Firestore typed value; unknown shapes decode to None."""
    if not isinstance(value, Mapping):
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        try:
            return int(value["integerValue"])
        except (TypeError, ValueError):
            _logger.warning("Could not decode integer value %r", value["integerValue"])
            return None
    if "doubleValue" in value:
        try:
            return float(value["doubleValue"])
        except (TypeError, ValueError):
            _logger.warning("Could not decode double value %r", value["doubleValue"])
            return None
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        array = value["arrayValue"]
        items = array.get("values") if isinstance(array, Mapping) else None
        return [_decode_value(item) for item in items or []]
    if "mapValue" in value:
        mapping = value["mapValue"]
        fields = mapping.get("fields") if isinstance(mapping, Mapping) else None
        return _decode_fields(fields or {})
    return None


def _decode_fields(fields: Mapping[str, object]) -> dict[str, object]:
    return {str(key): _decode_value(value) for key, value in fields.items()}


def _document_id(name: object) -> str | None:
    """Return the trailing ID of a document resource name."""
    if not isinstance(name, str) or not name:
        return None
    return name.rsplit("/", 1)[-1] or None


def _decode_document(document: object) -> dict[str, object] | None:
    """Decode a Firestore document into a plain dict with an ``id`` key."""
    if not isinstance(document, Mapping):
        return None
    fields = document.get("fields")
    decoded = _decode_fields(fields) if isinstance(fields, Mapping) else {}
    doc_id = _document_id(document.get("name"))
    if doc_id is not None:
        decoded.setdefault("id", doc_id)
    if not decoded.get("id"):
        return None
    return decoded
