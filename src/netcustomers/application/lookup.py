"""
Record lookup helpers for list, favorites and scan screens.

Pure functions over record lists, plus the QR payload used to jump
straight to a customer from a scanned code.
"""

from __future__ import annotations

import json
from typing import Iterable

from netcustomers.application.record_store import RecordStore
from netcustomers.domain.errors import ValidationError
from netcustomers.domain.field_registry import SEARCH_KEYS
from netcustomers.domain.models import CustomerRecord


def search_records(
    records: Iterable[CustomerRecord],
    query: str,
    keys: Iterable[str] = SEARCH_KEYS,
) -> list[CustomerRecord]:
    """Case-insensitive substring search; an empty query matches everything."""
    records = list(records)
    needle = query.strip().lower()
    if not needle:
        return records
    keys = tuple(keys)
    return [
        record for record in records
        if any(needle in record.get(key).lower() for key in keys)
    ]


def favorite_records(records: Iterable[CustomerRecord]) -> list[CustomerRecord]:
    """Records marked favorite, in insertion order."""
    return [record for record in records if record.is_favorite]


def build_scan_payload(record: CustomerRecord) -> str:
    """QR code text identifying a record."""
    return json.dumps({"id": record.id})


def resolve_scan_payload(store: RecordStore, payload: str) -> CustomerRecord:
    """
    Find the record a scanned QR payload points at.

    Raises:
        ValidationError: If the payload is not a {"id": ...} JSON object
        NotFoundError: If no record has that id
    """
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValidationError("Invalid QR code", field="payload") from e

    if not isinstance(data, dict) or not data.get("id"):
        raise ValidationError("Invalid QR code", field="payload")
    return store.get(str(data["id"]))
