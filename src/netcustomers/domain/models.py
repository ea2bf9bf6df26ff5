"""
Domain models for NetCustomers.

This module contains the core entities of the record core:
- Field definitions (the user-editable schema)
- Customer records (metadata + ordered field values)
- Sync metadata

These models are pure data structures with no I/O dependencies.
They are serialized to/from JSON documents via to_dict()/from_dict()
using the camelCase wire names shared with the remote snapshot.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping


# ============================================================================
# Timestamps
# ============================================================================


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO-8601 with microseconds and UTC offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 timestamp.

    Accepts the trailing "Z" form written by JavaScript clients.
    Naive values are assumed to be UTC. Returns None for empty or
    unparseable input.
    """
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_record_id() -> str:
    """Opaque, never-reused record identifier."""
    return uuid.uuid4().hex


# ============================================================================
# Enumerations
# ============================================================================


class FieldType(str, Enum):
    """Input type of a field definition."""

    TEXT = "text"
    PASSWORD = "password"
    IP = "ip"
    NUMBER = "number"

    @classmethod
    def parse(cls, value: str | FieldType) -> FieldType:
        """Parse a field type, raising ValueError for unknown names."""
        if isinstance(value, FieldType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown field type '{value}' (expected one of: {allowed})") from None


class HeaderStyle(str, Enum):
    """Which text labels a column in tabular exports."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    KEY = "key"


# ============================================================================
# Core Domain Models
# ============================================================================

# Metadata keys of the flat record document; never valid field keys
RESERVED_KEYS = frozenset({"id", "createdAt", "updatedAt", "isFavorite"})

# Written by older installations instead of isFavorite
_LEGACY_FAVORITE_KEYS = ("favorite",)


@dataclass
class FieldDefinition:
    """
    One user-configurable column of the customer schema.

    Attributes:
        id: Opaque identifier of the definition
        key: Stable value key used in every record (unique, never reused)
        label_primary: Label in the primary language (Arabic by default)
        label_secondary: Label in the secondary language (English by default)
        type: Input type hint for forms
        required: Required fields must be non-blank and cannot be removed
        order: 1-based presentation position
    """

    id: str
    key: str
    label_primary: str
    label_secondary: str
    type: FieldType = FieldType.TEXT
    required: bool = False
    order: int = 0

    def label(self, style: HeaderStyle = HeaderStyle.PRIMARY) -> str:
        """Column label for the requested header style."""
        if style == HeaderStyle.SECONDARY:
            return self.label_secondary
        if style == HeaderStyle.KEY:
            return self.key
        return self.label_primary

    def copy(self) -> FieldDefinition:
        return FieldDefinition(
            id=self.id,
            key=self.key,
            label_primary=self.label_primary,
            label_secondary=self.label_secondary,
            type=self.type,
            required=self.required,
            order=self.order,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "labelPrimary": self.label_primary,
            "labelSecondary": self.label_secondary,
            "type": self.type.value,
            "required": self.required,
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldDefinition:
        """
        Build a definition from its JSON document.

        Accepts the legacy labelAr/labelEn label names.

        Raises:
            KeyError: If the key is missing
            ValueError: If the type is unknown or order is not an integer
        """
        primary = data.get("labelPrimary", data.get("labelAr", ""))
        secondary = data.get("labelSecondary", data.get("labelEn", ""))
        return cls(
            id=str(data.get("id") or data["key"]),
            key=str(data["key"]),
            label_primary=str(primary or ""),
            label_secondary=str(secondary or ""),
            type=FieldType.parse(data.get("type", FieldType.TEXT.value)),
            required=bool(data.get("required", False)),
            order=int(data.get("order", 0)),
        )


@dataclass
class CustomerRecord:
    """
    One customer's field values plus fixed metadata.

    Attributes:
        id: Opaque identifier, immutable after creation
        created_at: ISO-8601 creation timestamp
        updated_at: ISO-8601 timestamp of the last mutation
        is_favorite: Pinned by the technician
        values: Field key -> string value
    """

    id: str
    created_at: str
    updated_at: str
    is_favorite: bool = False
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        """Value for a field key, defaulting to empty string."""
        return self.values.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.values.get(key, "")

    def copy(self) -> CustomerRecord:
        return CustomerRecord(
            id=self.id,
            created_at=self.created_at,
            updated_at=self.updated_at,
            is_favorite=self.is_favorite,
            values=dict(self.values),
        )

    def with_schema(self, fields: Iterable[FieldDefinition]) -> CustomerRecord:
        """
        Copy of this record with every schema key defined.

        Keys missing from storage default to empty string; values for
        retired keys are kept as harmless extras.
        """
        result = self.copy()
        for definition in fields:
            result.values.setdefault(definition.key, "")
        return result

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "isFavorite": self.is_favorite,
        }
        for key, value in self.values.items():
            if key not in RESERVED_KEYS:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CustomerRecord:
        """
        Build a record from its flat JSON document.

        Missing id or timestamps are synthesized, None values become
        empty strings and non-string values are stringified.
        """
        now = format_timestamp(utc_now())
        favorite = data.get("isFavorite")
        if favorite is None:
            for legacy_key in _LEGACY_FAVORITE_KEYS:
                if legacy_key in data:
                    favorite = data[legacy_key]
                    break

        values: dict[str, str] = {}
        for key, value in data.items():
            if key in RESERVED_KEYS or key in _LEGACY_FAVORITE_KEYS:
                continue
            values[str(key)] = "" if value is None else str(value)

        return cls(
            id=str(data.get("id") or new_record_id()),
            created_at=str(data.get("createdAt") or now),
            updated_at=str(data.get("updatedAt") or data.get("createdAt") or now),
            is_favorite=_as_bool(favorite),
            values=values,
        )


@dataclass
class SyncMetadata:
    """
    Sync settings and bookkeeping.

    Attributes:
        auto_sync_enabled: Sync automatically when connectivity returns
        last_sync_time: ISO-8601 time of the last successful upload
        remote_file_id: Handle of the remote snapshot document
    """

    auto_sync_enabled: bool = False
    last_sync_time: str | None = None
    remote_file_id: str | None = None

    def copy(self) -> SyncMetadata:
        return SyncMetadata(
            auto_sync_enabled=self.auto_sync_enabled,
            last_sync_time=self.last_sync_time,
            remote_file_id=self.remote_file_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "autoSync": self.auto_sync_enabled,
            "lastSyncTime": self.last_sync_time,
            "remoteFileId": self.remote_file_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SyncMetadata:
        """Build metadata, accepting the legacy googleDriveFileId key."""
        remote_id = data.get("remoteFileId", data.get("googleDriveFileId"))
        return cls(
            auto_sync_enabled=_as_bool(data.get("autoSync", False)),
            last_sync_time=data.get("lastSyncTime") or None,
            remote_file_id=remote_id or None,
        )


def _as_bool(value: Any) -> bool:
    """Interpret JSON/spreadsheet truthiness ("true", 1, True)."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)
