"""Public package surface for the SteamVault catalog library."""

from .client import DEFAULT_FIRESTORE_URL, SteamVault
from .exceptions import NotAvailable, PermissionDenied, SteamVaultError
from .gemini import GeminiStore
from .local import LocalStore
from .storefront import SteamStore
from .tools.compatibility import FilterState, filter_catalog
from .tools.requirements import extract_requirements, suggest_requirement_ids
from .tools.taxonomy import CATEGORIES, category, compare_ordered, group_tags, infer_category
from .tools.units import parse_magnitude

__all__ = [
    "CATEGORIES",
    "DEFAULT_FIRESTORE_URL",
    "FilterState",
    "GeminiStore",
    "LocalStore",
    "NotAvailable",
    "PermissionDenied",
    "SteamStore",
    "SteamVault",
    "SteamVaultError",
    "category",
    "compare_ordered",
    "extract_requirements",
    "filter_catalog",
    "group_tags",
    "infer_category",
    "parse_magnitude",
    "suggest_requirement_ids",
]
