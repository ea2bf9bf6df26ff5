"""
Collaborator protocols for the record core.

The core talks to local persistence and to the remote snapshot store
only through these interfaces, so concrete backends can be swapped or
replaced by stubs in tests.
"""

from __future__ import annotations

from typing import Any, Protocol

# Logical documents kept by a DocumentStorage
CUSTOMERS_KEY = "customers"
FIELDS_KEY = "customer_fields"
SYNC_SETTINGS_KEY = "sync_settings"


class DocumentStorage(Protocol):
    """Protocol for local JSON document persistence (see LocalStore)."""

    def get_json(self, key: str) -> Any | None:
        """Load a document; None when the key is absent."""
        ...

    def set_json(self, key: str, value: Any) -> None:
        """Replace a document. Raises PersistenceError on failure."""
        ...

    def remove(self, key: str) -> None:
        """Delete a document. Raises PersistenceError on failure."""
        ...


class RemoteDocumentStore(Protocol):
    """
    Protocol for the remote blob store holding the snapshot document.

    Implementations may raise any exception; the Sync Engine converts
    failures into SyncError.
    """

    async def find_document(self, name: str) -> str | None:
        """Handle of the document with this name, or None."""
        ...

    async def upload(self, handle: str | None, data: bytes, name: str) -> str:
        """Overwrite the document behind handle (create when None); return its handle."""
        ...

    async def download(self, handle: str) -> bytes:
        """Full content of the document behind handle."""
        ...
