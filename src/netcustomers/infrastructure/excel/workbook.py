"""
Customer Workbook - xlsx byte streams.

Serializes row-major tabular data (header row first) to a single-sheet
xlsx workbook, and reads the first sheet of an xlsx byte stream back
into rows of strings.

Never touches the file system: callers hand bytes to a save/share
collaborator or receive them from a file picker.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from io import BytesIO
from typing import Any, Iterable, Sequence
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import InvalidFileException

from netcustomers.domain.errors import ValidationError
from netcustomers.domain.models import FieldDefinition, FieldType, HeaderStyle
from netcustomers.infrastructure.excel_styles import ColumnDef, apply_header_row, style_data_cell

logger = logging.getLogger(__name__)

SHEET_TITLE = "Customers"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def column_for_field(definition: FieldDefinition, style: HeaderStyle) -> ColumnDef:
    """Column styling for a field definition."""
    label = definition.label(style)
    width = max(12, min(40, len(label) + 4))
    return ColumnDef(
        name=label,
        width=width,
        is_monospace=definition.type in (FieldType.IP, FieldType.NUMBER),
        is_secret=definition.type == FieldType.PASSWORD,
    )


def rows_to_xlsx(
    rows: Sequence[Sequence[str]],
    columns: Sequence[ColumnDef] | None = None,
    sheet_title: str = SHEET_TITLE,
) -> bytes:
    """
    Write rows to an xlsx workbook.

    Args:
        rows: Header row followed by data rows
        columns: Optional styling per column; defaults to plain columns
            named after the header row
        sheet_title: Worksheet title

    Returns:
        The workbook as bytes
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    if rows:
        header = [str(h) for h in rows[0]]
        styles = list(columns or [])
        # Header text always comes from the rows themselves
        column_defs = [
            replace(styles[idx], name=text) if idx < len(styles) else ColumnDef(name=text)
            for idx, text in enumerate(header)
        ]
        apply_header_row(ws, column_defs)

        for row_idx, row in enumerate(rows[1:], start=2):
            for col_idx, value in enumerate(row, start=1):
                cell = ws.cell(row=row_idx, column=col_idx)
                cell.value = ILLEGAL_CHARACTERS_RE.sub("", str(value)) if value else None
                # Keep "=..." and numeric-looking text as literal strings
                if cell.value is not None:
                    cell.data_type = "s"
                column = column_defs[col_idx - 1] if col_idx <= len(column_defs) else None
                style_data_cell(cell, column, zebra=row_idx % 2 == 1)

    buffer = BytesIO()
    wb.save(buffer)
    logger.debug("Wrote workbook with %d rows", max(len(rows) - 1, 0))
    return buffer.getvalue()


def xlsx_to_rows(data: bytes) -> list[list[str]]:
    """
    Read the first worksheet of an xlsx byte stream.

    Cells are converted to strings (empty cells become ""), and trailing
    rows with no content are dropped.

    Raises:
        ValidationError: If the bytes are not a readable workbook
    """
    try:
        wb = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        logger.error("Failed to open workbook: %s", e)
        raise ValidationError(f"Not a readable xlsx workbook: {e}", field="file") from e

    try:
        if not wb.sheetnames:
            return []
        ws = wb[wb.sheetnames[0]]
        rows = [[cell_to_text(v) for v in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    return drop_trailing_empty_rows(rows)


def cell_to_text(value: Any) -> str:
    """Render a spreadsheet cell value as text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def drop_trailing_empty_rows(rows: list[list[str]]) -> list[list[str]]:
    """Remove rows at the end that hold no text at all."""
    end = len(rows)
    while end > 0 and not _has_content(rows[end - 1]):
        end -= 1
    return rows[:end]


def _has_content(row: Iterable[str]) -> bool:
    return any(cell != "" for cell in row)
