"""
Schema Registry - the ordered, user-editable field definitions.

This module handles:
- Loading the field list (built-in defaults on first run)
- add / remove / reorder / replace_all with write-through persistence
- Tombstones for retired keys, so a removed key is never generated again

Invariants kept after every successful operation:
- keys are unique
- order values are the dense sequence 1..N matching list position
- required fields are never removed

Architecture Note:
    - Uses a DocumentStorage (LocalStore) for persistence
    - A failed write rolls the in-memory state back before raising
"""

from __future__ import annotations

import logging
import secrets
import time
import uuid
from enum import Enum
from typing import Any, Iterable

from netcustomers.application.protocols import FIELDS_KEY, DocumentStorage
from netcustomers.domain.errors import (
    NotFoundError,
    PersistenceError,
    ProtectedFieldError,
    ValidationError,
)
from netcustomers.domain.field_registry import default_fields
from netcustomers.domain.models import FieldDefinition, FieldType
from netcustomers.domain.validation import is_blank

logger = logging.getLogger(__name__)

CUSTOM_KEY_PREFIX = "custom_"


class Direction(str, Enum):
    """Reorder direction."""

    UP = "up"
    DOWN = "down"


def _sorted_dense(fields: Iterable[FieldDefinition]) -> list[FieldDefinition]:
    """
    Sort by order (ties broken by insertion index) and renumber 1..N.

    Returns new FieldDefinition objects; the input is not modified.
    """
    indexed = sorted(enumerate(fields), key=lambda pair: (pair[1].order, pair[0]))
    result = []
    for position, (_, definition) in enumerate(indexed, start=1):
        copy = definition.copy()
        copy.order = position
        result.append(copy)
    return result


class SchemaRegistry:
    """
    Holds the customer field definitions.

    Usage:
        registry = SchemaRegistry(store)
        registry.load()

        field = registry.add("الهاتف", "Phone", "number")
        registry.reorder(field.id, "up")
        registry.remove(field.id)
    """

    def __init__(self, storage: DocumentStorage) -> None:
        self._storage = storage
        self._fields: list[FieldDefinition] = default_fields()
        self._retired_keys: set[str] = set()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def load(self) -> None:
        """
        Load the registry from storage.

        An absent document means first run: the built-in defaults are used.
        Both the current {"fields", "retiredKeys"} document and the legacy
        bare-list document are accepted.

        Raises:
            PersistenceError: If the stored document cannot be read or decoded
        """
        data = self._storage.get_json(FIELDS_KEY)
        if data is None:
            self._fields = default_fields()
            self._retired_keys = set()
            logger.info("No stored schema, using %d default fields", len(self._fields))
            return

        if isinstance(data, list):
            raw_fields, retired = data, []
        elif isinstance(data, dict):
            raw_fields, retired = data.get("fields", []), data.get("retiredKeys", [])
        else:
            raise PersistenceError("Stored field schema has an unexpected shape")

        try:
            fields = [FieldDefinition.from_dict(item) for item in raw_fields]
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Stored field schema is corrupt: {e}") from e

        if not fields:
            # An emptied legacy document falls back to defaults
            fields = default_fields()

        self._fields = _sorted_dense(fields)
        self._retired_keys = {str(k) for k in retired}
        logger.info(
            "Loaded %d fields (%d retired keys)", len(self._fields), len(self._retired_keys)
        )

    def _persist(self, fields: list[FieldDefinition], retired: set[str]) -> None:
        """Write the given state, then adopt it in memory."""
        document: dict[str, Any] = {
            "fields": [f.to_dict() for f in fields],
            "retiredKeys": sorted(retired),
        }
        try:
            self._storage.set_json(FIELDS_KEY, document)
        except PersistenceError:
            logger.error("Failed to persist field schema, keeping previous state")
            raise
        self._fields = fields
        self._retired_keys = retired

    # ========================================================================
    # Queries
    # ========================================================================

    def list(self) -> list[FieldDefinition]:
        """Field definitions sorted by order (copies)."""
        return [f.copy() for f in self._fields]

    def get(self, field_id: str) -> FieldDefinition:
        """
        Look up a field by id.

        Raises:
            NotFoundError: If no field has this id
        """
        return self._find(field_id).copy()

    def keys(self) -> list[str]:
        """Field keys in presentation order."""
        return [f.key for f in self._fields]

    @property
    def retired_keys(self) -> frozenset[str]:
        return frozenset(self._retired_keys)

    def _find(self, field_id: str) -> FieldDefinition:
        for definition in self._fields:
            if definition.id == field_id:
                return definition
        raise NotFoundError("Field", field_id)

    def _index_of(self, field_id: str) -> int:
        for idx, definition in enumerate(self._fields):
            if definition.id == field_id:
                return idx
        raise NotFoundError("Field", field_id)

    # ========================================================================
    # Mutations
    # ========================================================================

    def add(
        self,
        label_primary: str,
        label_secondary: str,
        field_type: FieldType | str = FieldType.TEXT,
    ) -> FieldDefinition:
        """
        Append a new optional field.

        Args:
            label_primary: Label in the primary language
            label_secondary: Label in the secondary language
            field_type: text, password, ip or number

        Returns:
            The created definition

        Raises:
            ValidationError: If a label is blank or the type is unknown
            PersistenceError: If the write fails (registry unchanged)
        """
        if is_blank(label_primary):
            raise ValidationError("Primary label is required", field="labelPrimary")
        if is_blank(label_secondary):
            raise ValidationError("Secondary label is required", field="labelSecondary")
        try:
            parsed_type = FieldType.parse(field_type)
        except ValueError as e:
            raise ValidationError(str(e), field="type") from e

        definition = FieldDefinition(
            id=uuid.uuid4().hex,
            key=self._generate_key(),
            label_primary=label_primary.strip(),
            label_secondary=label_secondary.strip(),
            type=parsed_type,
            required=False,
            order=max((f.order for f in self._fields), default=0) + 1,
        )

        fields = [f.copy() for f in self._fields] + [definition]
        self._persist(fields, set(self._retired_keys))
        logger.info("Added field %s (%s)", definition.key, definition.label_secondary)
        return definition.copy()

    def _generate_key(self) -> str:
        """New key from the creation time plus a random suffix, never reusing a key."""
        taken = {f.key for f in self._fields} | self._retired_keys
        while True:
            key = f"{CUSTOM_KEY_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(3)}"
            if key not in taken:
                return key

    def remove(self, field_id: str) -> None:
        """
        Remove a non-required field and retire its key.

        Stored record values for the key are left in place as orphaned
        extras.

        Raises:
            NotFoundError: If no field has this id
            ProtectedFieldError: If the field is required
            PersistenceError: If the write fails (registry unchanged)
        """
        target = self._find(field_id)
        if target.required:
            logger.warning("Refused to remove required field %s", target.key)
            raise ProtectedFieldError(target.key)

        remaining = _sorted_dense(f for f in self._fields if f.id != field_id)
        self._persist(remaining, self._retired_keys | {target.key})
        logger.info("Removed field %s", target.key)

    def reorder(self, field_id: str, direction: Direction | str) -> None:
        """
        Swap a field with its neighbour; no-op at either boundary.

        Raises:
            NotFoundError: If no field has this id
            ValidationError: If direction is not "up" or "down"
            PersistenceError: If the write fails (registry unchanged)
        """
        try:
            direction = Direction(direction)
        except ValueError as e:
            raise ValidationError(f"Unknown direction '{direction}'", field="direction") from e

        idx = self._index_of(field_id)
        other = idx - 1 if direction == Direction.UP else idx + 1
        if other < 0 or other >= len(self._fields):
            logger.debug("Field %s already at %s boundary", field_id, direction.value)
            return

        fields = [f.copy() for f in self._fields]
        fields[idx], fields[other] = fields[other], fields[idx]
        for position, definition in enumerate(fields, start=1):
            definition.order = position

        self._persist(fields, set(self._retired_keys))
        logger.info("Moved field %s %s", fields[other].key, direction.value)

    def replace_all(self, new_fields: Iterable[FieldDefinition]) -> None:
        """
        Atomically replace the whole field list.

        The incoming list must have unique ids and keys, non-blank labels,
        and orders forming the dense sequence 1..N. Required fields present
        today must still be present. Dropped keys are retired.

        Raises:
            ValidationError: If the list is malformed (registry unchanged)
            ProtectedFieldError: If a required field would be dropped
            PersistenceError: If the write fails (registry unchanged)
        """
        candidate = [f.copy() for f in new_fields]
        self._validate_replacement(candidate)

        new_keys = {f.key for f in candidate}
        for definition in self._fields:
            if definition.required and definition.key not in new_keys:
                raise ProtectedFieldError(definition.key)

        dropped = {f.key for f in self._fields} - new_keys
        retired = (self._retired_keys | dropped) - new_keys
        self._persist(_sorted_dense(candidate), retired)
        logger.info("Replaced field schema (%d fields, %d dropped)", len(candidate), len(dropped))

    def restore(self, fields: Iterable[FieldDefinition], retired_keys: Iterable[str]) -> None:
        """
        Write back a state captured earlier with list() and retired_keys.

        Used to undo replace_all when a follow-up step fails.

        Raises:
            PersistenceError: If the write fails (registry unchanged)
        """
        self._persist(_sorted_dense(fields), {str(k) for k in retired_keys})
        logger.warning("Restored field schema (%d fields)", len(self._fields))

    @staticmethod
    def _validate_replacement(fields: list[FieldDefinition]) -> None:
        if not fields:
            raise ValidationError("Field list cannot be empty", field="fields")

        seen_keys: set[str] = set()
        seen_ids: set[str] = set()
        for definition in fields:
            if is_blank(definition.key):
                raise ValidationError("Field key cannot be blank", field="key")
            if definition.key in seen_keys:
                raise ValidationError(f"Duplicate field key '{definition.key}'", field=definition.key)
            if definition.id in seen_ids:
                raise ValidationError(f"Duplicate field id '{definition.id}'", field=definition.key)
            if is_blank(definition.label_primary) or is_blank(definition.label_secondary):
                raise ValidationError(f"Field '{definition.key}' needs both labels", field=definition.key)
            seen_keys.add(definition.key)
            seen_ids.add(definition.id)

        orders = sorted(f.order for f in fields)
        if orders != list(range(1, len(fields) + 1)):
            raise ValidationError("Field order must be the sequence 1..N", field="order")
