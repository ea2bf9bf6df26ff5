"""
Tabular Codec - records <-> spreadsheet-shaped rows.

Pure functions; no I/O. Rows are lists of strings, header row first,
columns in schema order.

to_rows() is deterministic: the same records and fields always produce
identical rows, and record order is preserved.

from_rows() reads values positionally against the current schema
order. The header row only establishes how many columns the file has;
header text is not matched against labels. Rows are not validated
here: required-field checks happen only when the parsed records go
through the Record Store.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Sequence

from netcustomers.domain.models import (
    CustomerRecord,
    FieldDefinition,
    HeaderStyle,
    format_timestamp,
    new_record_id,
    utc_now,
)

logger = logging.getLogger(__name__)


def _ordered(fields: Iterable[FieldDefinition]) -> list[FieldDefinition]:
    """Fields by order, ties broken by position in the input."""
    indexed = sorted(enumerate(fields), key=lambda pair: (pair[1].order, pair[0]))
    return [definition for _, definition in indexed]


def header_row(
    fields: Iterable[FieldDefinition],
    style: HeaderStyle = HeaderStyle.PRIMARY,
) -> list[str]:
    """Column labels in schema order."""
    return [definition.label(style) for definition in _ordered(fields)]


def to_rows(
    records: Iterable[CustomerRecord],
    fields: Iterable[FieldDefinition],
    style: HeaderStyle = HeaderStyle.PRIMARY,
) -> list[list[str]]:
    """
    Render records as rows.

    Args:
        records: Records in the order they should appear
        fields: Current schema
        style: Which label heads each column

    Returns:
        Header row followed by one row per record
    """
    ordered = _ordered(fields)
    rows = [[definition.label(style) for definition in ordered]]
    for record in records:
        rows.append([record.get(definition.key, "") for definition in ordered])
    return rows


def from_rows(
    rows: Sequence[Sequence[object]],
    fields: Iterable[FieldDefinition],
    clock: Callable[[], datetime] = utc_now,
    id_factory: Callable[[], str] = new_record_id,
) -> list[CustomerRecord]:
    """
    Parse rows into best-effort records.

    Missing cells become "", every record gets a fresh id and
    createdAt/updatedAt set to now.

    Args:
        rows: Header row followed by data rows
        fields: Current schema (defines column -> key mapping)
        clock: Source of the synthesized timestamps
        id_factory: Source of the synthesized ids

    Returns:
        One record per data row, in row order
    """
    if not rows:
        return []

    ordered = _ordered(fields)
    column_count = len(rows[0])
    if column_count != len(ordered):
        logger.warning(
            "File has %d columns but the schema has %d fields; reading positionally",
            column_count, len(ordered),
        )

    now = format_timestamp(clock())
    records: list[CustomerRecord] = []
    for row in rows[1:]:
        values: dict[str, str] = {}
        for idx, definition in enumerate(ordered):
            cell = row[idx] if idx < column_count and idx < len(row) else None
            values[definition.key] = "" if cell is None else str(cell)
        records.append(
            CustomerRecord(id=id_factory(), created_at=now, updated_at=now, values=values)
        )

    logger.debug("Parsed %d records from %d columns", len(records), column_count)
    return records
