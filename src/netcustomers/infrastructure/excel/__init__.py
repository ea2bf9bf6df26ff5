"""
Spreadsheet file formats.

Converts row-major tables (header row first) to and from xlsx and CSV
byte streams. Never touches storage or the file system.
"""

from netcustomers.infrastructure.excel.workbook import (
    SHEET_TITLE,
    XLSX_MEDIA_TYPE,
    column_for_field,
    rows_to_xlsx,
    xlsx_to_rows,
)
from netcustomers.infrastructure.excel.delimited import (
    CSV_MEDIA_TYPE,
    rows_to_csv,
    csv_to_rows,
)

__all__ = [
    "SHEET_TITLE",
    "XLSX_MEDIA_TYPE",
    "CSV_MEDIA_TYPE",
    "column_for_field",
    "rows_to_xlsx",
    "xlsx_to_rows",
    "rows_to_csv",
    "csv_to_rows",
]
