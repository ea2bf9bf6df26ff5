"""
Remote Snapshot Document.

The whole store serialized as one JSON document:

    {
        "customers": [CustomerRecord, ...],
        "fields": [FieldDefinition, ...],
        "lastUpdated": "2024-01-01T00:00:00.000000+00:00"
    }

Downloaded documents are validated with pydantic before being decoded
into domain models.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from netcustomers.domain.errors import SyncError
from netcustomers.domain.models import CustomerRecord, FieldDefinition
from netcustomers.domain.sync_state import RemoteSnapshot

logger = logging.getLogger(__name__)


class FieldDocument(BaseModel):
    """Wire shape of one field definition."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None
    key: str = Field(..., min_length=1)
    type: str = "text"
    required: bool = False
    order: int = 0


class SnapshotDocument(BaseModel):
    """Wire shape of the whole snapshot."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    customers: List[Dict[str, Any]] = Field(default_factory=list)
    fields: List[FieldDocument] = Field(default_factory=list)
    last_updated: Optional[str] = Field(None, alias="lastUpdated")


def encode_snapshot(
    records: Iterable[CustomerRecord],
    fields: Iterable[FieldDefinition],
    last_updated: str,
) -> bytes:
    """Serialize the store to the snapshot document (UTF-8 JSON)."""
    document = {
        "customers": [r.to_dict() for r in records],
        "fields": [f.to_dict() for f in fields],
        "lastUpdated": last_updated,
    }
    return json.dumps(document, ensure_ascii=False, indent=2).encode("utf-8")


def decode_snapshot(data: bytes) -> RemoteSnapshot:
    """
    Decode and validate a downloaded snapshot document.

    Raises:
        SyncError: If the bytes are not a valid snapshot document
    """
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SyncError(f"Remote snapshot is not valid JSON: {e}") from e

    try:
        document = SnapshotDocument.model_validate(raw)
        fields = [FieldDefinition.from_dict(f.model_dump()) for f in document.fields]
    except (PydanticValidationError, ValueError) as e:
        logger.error("Remote snapshot failed validation: %s", e)
        raise SyncError(f"Remote snapshot is malformed: {e}") from e

    records = [CustomerRecord.from_dict(item) for item in document.customers]
    return RemoteSnapshot(
        records=records,
        fields=sorted(fields, key=lambda f: f.order),
        last_updated=document.last_updated,
    )
