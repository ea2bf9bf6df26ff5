"""
Domain layer package.

Contains pure data models with no I/O dependencies.
Models are serialized to/from JSON documents by the application layer.
"""

from netcustomers.domain.models import (
    # Enums
    FieldType,
    HeaderStyle,
    # Core Models
    FieldDefinition,
    CustomerRecord,
    SyncMetadata,
    # Helpers
    RESERVED_KEYS,
    utc_now,
    format_timestamp,
    parse_timestamp,
    new_record_id,
)

from netcustomers.domain.errors import (
    NetCustomersError,
    ValidationError,
    NotFoundError,
    ProtectedFieldError,
    PersistenceError,
    SyncError,
)

from netcustomers.domain.sync_state import (
    SyncState,
    SyncResult,
    RemoteSnapshot,
)

__all__ = [
    # Enums
    "FieldType",
    "HeaderStyle",
    # Core Models
    "FieldDefinition",
    "CustomerRecord",
    "SyncMetadata",
    # Helpers
    "RESERVED_KEYS",
    "utc_now",
    "format_timestamp",
    "parse_timestamp",
    "new_record_id",
    # Errors
    "NetCustomersError",
    "ValidationError",
    "NotFoundError",
    "ProtectedFieldError",
    "PersistenceError",
    "SyncError",
    # Sync Engine Types
    "SyncState",
    "SyncResult",
    "RemoteSnapshot",
]
