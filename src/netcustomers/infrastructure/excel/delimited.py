"""
CSV byte streams for customer tables.

Every cell is quoted and the text is UTF-8 with a byte-order mark, so
spreadsheet tools open Arabic labels and values correctly.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Sequence

from netcustomers.domain.errors import ValidationError
from netcustomers.infrastructure.excel.workbook import drop_trailing_empty_rows

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
CSV_ENCODING = "utf-8-sig"


def rows_to_csv(rows: Sequence[Sequence[str]]) -> bytes:
    """Serialize rows (header first) to quoted CSV bytes."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if value is None else str(value) for value in row])
    return buffer.getvalue().encode(CSV_ENCODING)


def csv_to_rows(data: bytes) -> list[list[str]]:
    """
    Parse CSV bytes into rows of strings.

    Raises:
        ValidationError: If the bytes are not UTF-8 CSV text
    """
    try:
        text = data.decode(CSV_ENCODING)
    except UnicodeDecodeError as e:
        logger.error("CSV file is not UTF-8: %s", e)
        raise ValidationError("CSV file is not UTF-8 text", field="file") from e

    try:
        rows = [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    except csv.Error as e:
        raise ValidationError(f"Malformed CSV file: {e}", field="file") from e
    return drop_trailing_empty_rows(rows)
