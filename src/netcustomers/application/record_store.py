"""
Record Store - owner of the customer RecordSet.

This module handles:
- CRUD over customer records with required-field validation
- Write-through persistence of the entire RecordSet after every mutation
- Rollback of the in-memory set when persistence fails
- Bulk replace, append and merge for spreadsheet import and snapshot pull

Architecture Note:
    - The RecordSet is only ever mutated here
    - Readers always see every current schema key (missing keys read as "")
    - Value-level type checks are advisory and never enforced here
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Mapping

from netcustomers.application.protocols import CUSTOMERS_KEY, DocumentStorage
from netcustomers.application.schema_registry import SchemaRegistry
from netcustomers.domain.errors import NotFoundError, PersistenceError, ValidationError
from netcustomers.domain.models import (
    RESERVED_KEYS,
    CustomerRecord,
    FieldDefinition,
    format_timestamp,
    new_record_id,
    parse_timestamp,
    utc_now,
)
from netcustomers.domain.validation import check_required

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass
class MergeResult:
    """Counts from a merge() call."""

    added: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.added + self.updated + self.skipped


class RecordStore:
    """
    Owns the RecordSet of one installation.

    Usage:
        store = RecordStore(local_store, registry)
        store.load()

        record = store.create({"serialNumber": "00001", "location": "X", "name": "Y"})
        store.update(record.id, {"name": "Z"})
        store.toggle_favorite(record.id)
        store.delete(record.id)
    """

    def __init__(
        self,
        storage: DocumentStorage,
        registry: SchemaRegistry,
        clock: Clock = utc_now,
    ) -> None:
        self._storage = storage
        self._registry = registry
        self._clock = clock
        self._records: list[CustomerRecord] = []

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def load(self) -> None:
        """
        Load the RecordSet from storage (absent document = empty set).

        Raises:
            PersistenceError: If the stored document cannot be read or decoded
        """
        data = self._storage.get_json(CUSTOMERS_KEY)
        if data is None:
            self._records = []
        elif isinstance(data, list):
            try:
                self._records = [CustomerRecord.from_dict(item) for item in data]
            except (AttributeError, TypeError) as e:
                raise PersistenceError(f"Stored customers are corrupt: {e}") from e
        else:
            raise PersistenceError("Stored customers document is not a list")
        logger.info("Loaded %d customer records", len(self._records))

    def _commit(self, records: list[CustomerRecord]) -> None:
        """Persist the given RecordSet, then adopt it in memory."""
        try:
            self._storage.set_json(CUSTOMERS_KEY, [r.to_dict() for r in records])
        except PersistenceError:
            logger.error("Failed to persist %d records, keeping previous state", len(records))
            raise
        self._records = records

    # ========================================================================
    # Queries
    # ========================================================================

    def list(self) -> list[CustomerRecord]:
        """All records in insertion order, with every schema key defined."""
        fields = self._registry.list()
        return [r.with_schema(fields) for r in self._records]

    def find(self, record_id: str) -> CustomerRecord | None:
        """A record by id, or None."""
        for record in self._records:
            if record.id == record_id:
                return record.with_schema(self._registry.list())
        return None

    def get(self, record_id: str) -> CustomerRecord:
        """
        A record by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        record = self.find(record_id)
        if record is None:
            raise NotFoundError("Customer", record_id)
        return record

    def __len__(self) -> int:
        return len(self._records)

    def _index_of(self, record_id: str) -> int:
        for idx, record in enumerate(self._records):
            if record.id == record_id:
                return idx
        raise NotFoundError("Customer", record_id)

    # ========================================================================
    # Timestamps
    # ========================================================================

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _next_updated_at(self, previous: str) -> str:
        """Current time, bumped past previous so updatedAt strictly increases."""
        now = self._clock()
        last = parse_timestamp(previous)
        if last is not None and now <= last:
            now = last + timedelta(microseconds=1)
        return format_timestamp(now)

    # ========================================================================
    # Mutations
    # ========================================================================

    def create(self, initial_values: Mapping[str, object] | None = None) -> CustomerRecord:
        """
        Create a record.

        Args:
            initial_values: Field key -> value; unspecified keys default to ""

        Returns:
            The persisted record

        Raises:
            ValidationError: If a required field is blank or a metadata key is given
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        values = self._clean_values(initial_values or {})
        fields = self._registry.list()
        for definition in fields:
            values.setdefault(definition.key, "")
        check_required(values, fields)

        now = self._now()
        record = CustomerRecord(
            id=new_record_id(),
            created_at=now,
            updated_at=now,
            values=values,
        )
        self._commit(self._records + [record])
        logger.info("Created customer %s", record.id)
        return record.with_schema(fields)

    def update(self, record_id: str, partial_values: Mapping[str, object]) -> CustomerRecord:
        """
        Merge values into an existing record.

        Raises:
            NotFoundError: If the id is unknown
            ValidationError: If a required field ends up blank or a metadata key is given
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        idx = self._index_of(record_id)
        current = self._records[idx]
        fields = self._registry.list()

        updated = current.with_schema(fields)
        updated.values.update(self._clean_values(partial_values))
        check_required(updated.values, fields, record_id=record_id)
        updated.updated_at = self._next_updated_at(current.updated_at)

        records = list(self._records)
        records[idx] = updated
        self._commit(records)
        logger.info("Updated customer %s", record_id)
        return updated.copy()

    def toggle_favorite(self, record_id: str) -> CustomerRecord:
        """
        Flip the favorite flag.

        Raises:
            NotFoundError: If the id is unknown
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        idx = self._index_of(record_id)
        updated = self._records[idx].copy()
        updated.is_favorite = not updated.is_favorite
        updated.updated_at = self._next_updated_at(updated.updated_at)

        records = list(self._records)
        records[idx] = updated
        self._commit(records)
        logger.info("Customer %s favorite=%s", record_id, updated.is_favorite)
        return updated.with_schema(self._registry.list())

    def delete(self, record_id: str) -> bool:
        """
        Delete a record; deleting an absent id is not an error.

        Returns:
            True if a record was removed, False if it was already gone

        Raises:
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            logger.debug("Customer %s already deleted", record_id)
            return False
        self._commit(remaining)
        logger.info("Deleted customer %s", record_id)
        return True

    def clear_all(self) -> int:
        """
        Delete every record (irreversible).

        Returns:
            Number of records removed

        Raises:
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        count = len(self._records)
        self._commit([])
        logger.warning("Cleared all %d customer records", count)
        return count

    # ========================================================================
    # Bulk operations
    # ========================================================================

    def replace_all(self, records: Iterable[CustomerRecord]) -> int:
        """
        Atomically replace the RecordSet (import / adopt a pulled snapshot).

        Every incoming record is validated before anything is written.

        Returns:
            Number of records now stored

        Raises:
            ValidationError: If any record misses a required value or ids repeat
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        incoming = self.validate(records)
        self._commit(incoming)
        logger.info("Replaced RecordSet with %d records", len(incoming))
        return len(incoming)

    def merge(self, records: Iterable[CustomerRecord]) -> MergeResult:
        """
        Atomically merge records by id.

        Unknown ids are appended; a known id is replaced only when the
        incoming updatedAt is not older than the local one.

        Raises:
            ValidationError: If any record misses a required value or ids repeat
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        incoming = self.validate(records)
        result = MergeResult()
        merged = list(self._records)
        positions = {r.id: idx for idx, r in enumerate(merged)}

        for record in incoming:
            idx = positions.get(record.id)
            if idx is None:
                positions[record.id] = len(merged)
                merged.append(record)
                result.added += 1
                continue

            local_time = parse_timestamp(merged[idx].updated_at)
            remote_time = parse_timestamp(record.updated_at)
            if local_time is not None and remote_time is not None and remote_time < local_time:
                result.skipped += 1
                continue
            merged[idx] = record
            result.updated += 1

        if result.added or result.updated:
            self._commit(merged)
        logger.info(
            "Merged records: %d added, %d updated, %d skipped",
            result.added, result.updated, result.skipped,
        )
        return result

    def append(self, records: Iterable[CustomerRecord]) -> int:
        """
        Atomically add records after the existing ones (spreadsheet append).

        Returns:
            Number of records added

        Raises:
            ValidationError: If any record misses a required value, ids repeat
                or an id is already stored
            PersistenceError: If the write fails (RecordSet unchanged)
        """
        incoming = self.validate(records)
        known = {r.id for r in self._records}
        for record in incoming:
            if record.id in known:
                raise ValidationError(
                    f"Customer id '{record.id}' already exists", field="id", record_id=record.id
                )

        if incoming:
            self._commit(self._records + incoming)
        logger.info("Appended %d records", len(incoming))
        return len(incoming)

    def validate(
        self,
        records: Iterable[CustomerRecord],
        fields: Iterable[FieldDefinition] | None = None,
    ) -> list[CustomerRecord]:
        """
        Copies of records after required-field and id-uniqueness checks.

        Nothing is written. Records are checked against the given field
        list, or the current schema when none is given.

        Raises:
            ValidationError: On the first record that fails a check
        """
        fields = self._registry.list() if fields is None else [f.copy() for f in fields]
        result: list[CustomerRecord] = []
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise ValidationError(
                    f"Duplicate customer id '{record.id}'", field="id", record_id=record.id
                )
            seen.add(record.id)
            copy = record.with_schema(fields)
            check_required(copy.values, fields, record_id=record.id)
            result.append(copy)
        return result

    @staticmethod
    def _clean_values(values: Mapping[str, object]) -> dict[str, str]:
        """Stringify values and reject metadata keys."""
        cleaned: dict[str, str] = {}
        for key, value in values.items():
            if key in RESERVED_KEYS:
                raise ValidationError(f"'{key}' is managed by the store", field=key)
            cleaned[str(key)] = "" if value is None else str(value)
        return cleaned
