"""Exception hierarchy for the catalog store and metadata lookups.

The filter engine never raises; these are only used by the collaborators
that talk to remote services, and only when ``raise_on_error`` is enabled.
"""


class SteamVaultError(Exception):
    """Base class for all SteamVault exceptions."""


class NotAvailable(SteamVaultError):
    """Raised when a remote service is offline, misconfigured or misbehaving.

    Callers are expected to fall back to the local cache.
    """


class PermissionDenied(SteamVaultError):
    """Raised when a write is rejected by the document store (HTTP 401/403)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
