"""
Error taxonomy for the customer record core.

Every failure surfaced by the Schema Registry, Record Store, Tabular
Service and Sync Engine is one of these types. They all derive from
NetCustomersError so the interface layer can catch them in one place.
"""

from __future__ import annotations


class NetCustomersError(Exception):
    """Base class for all core errors."""


class ValidationError(NetCustomersError):
    """
    Bad or missing caller input.

    Attributes:
        field: Key of the offending field (or an input name such as "file")
        record_id: Record the problem belongs to, when known
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        record_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.record_id = record_id


class NotFoundError(NetCustomersError):
    """A record or field id that no longer exists."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class ProtectedFieldError(NetCustomersError):
    """Attempt to remove a required field."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Field '{key}' is required and cannot be removed")
        self.key = key


class PersistenceError(NetCustomersError):
    """Local storage read or write failed."""


class SyncError(NetCustomersError):
    """Remote store unreachable, unauthenticated or transport failure."""


__all__ = [
    "NetCustomersError",
    "ValidationError",
    "NotFoundError",
    "ProtectedFieldError",
    "PersistenceError",
    "SyncError",
]
