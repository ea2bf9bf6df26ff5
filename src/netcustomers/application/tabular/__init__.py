"""
Tabular package - spreadsheet export and import.

Package Structure:
    codec.py    - to_rows / from_rows (pure, deterministic)
    service.py  - TabularService (codec + xlsx/csv byte streams)
"""

from netcustomers.application.tabular.codec import from_rows, header_row, to_rows
from netcustomers.application.tabular.service import (
    ExportArtifact,
    TabularFormat,
    TabularService,
    default_filename,
)

__all__ = [
    "to_rows",
    "from_rows",
    "header_row",
    "ExportArtifact",
    "TabularFormat",
    "TabularService",
    "default_filename",
]
