"""
Sync Engine Types.

Enums and result types for the snapshot sync state machine:

    IDLE --manual_sync()--> SYNCING --success--> IDLE
                                    --failure--> IDLE (last_error set)

Architecture Note:
    This is a pure domain module with NO external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from netcustomers.domain.errors import SyncError
from netcustomers.domain.models import CustomerRecord, FieldDefinition


class SyncState(str, Enum):
    """State of the Sync Engine."""

    IDLE = "idle"
    SYNCING = "syncing"


@dataclass
class SyncResult:
    """
    Outcome of one manual_sync() flight.

    Attributes:
        success: Snapshot uploaded and metadata updated
        error: The surfaced failure when success is False
        synced_at: lastSyncTime written on success
        record_count: Number of records in the uploaded snapshot
    """

    success: bool
    error: SyncError | None = None
    synced_at: str | None = None
    record_count: int = 0

    @classmethod
    def failed(cls, error: SyncError) -> SyncResult:
        return cls(success=False, error=error)


@dataclass
class RemoteSnapshot:
    """Decoded remote snapshot document."""

    records: list[CustomerRecord] = field(default_factory=list)
    fields: list[FieldDefinition] = field(default_factory=list)
    last_updated: str | None = None
