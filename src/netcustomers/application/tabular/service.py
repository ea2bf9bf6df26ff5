"""
Tabular Service - export and import of customer spreadsheets.

Composes the pure codec with a file format (xlsx or CSV). Produces and
consumes byte streams only; saving, sharing and picking files is left
to the caller.

Usage:
    tabular = TabularService()

    artifact = tabular.export(store.list(), registry.list())
    Path(artifact.filename).write_bytes(artifact.content)

    records = tabular.parse(Path("edited.xlsx").read_bytes(), registry.list())
    store.replace_all(records)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import PurePath
from typing import Iterable

from netcustomers.application.tabular.codec import from_rows, to_rows
from netcustomers.domain.errors import ValidationError
from netcustomers.domain.models import CustomerRecord, FieldDefinition, HeaderStyle
from netcustomers.infrastructure.excel import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    column_for_field,
    csv_to_rows,
    rows_to_csv,
    rows_to_xlsx,
    xlsx_to_rows,
)

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "customers"


class TabularFormat(str, Enum):
    """Spreadsheet file formats."""

    XLSX = "xlsx"
    CSV = "csv"

    @property
    def media_type(self) -> str:
        return XLSX_MEDIA_TYPE if self == TabularFormat.XLSX else CSV_MEDIA_TYPE

    @classmethod
    def from_filename(cls, name: str | PurePath) -> TabularFormat:
        """
        Format from a file extension.

        Raises:
            ValidationError: If the extension is not .xlsx or .csv
        """
        suffix = PurePath(name).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            raise ValidationError(
                f"Unsupported file type '{suffix or name}' (expected .xlsx or .csv)",
                field="file",
            ) from None


@dataclass(frozen=True)
class ExportArtifact:
    """Serialized export handed to a save/share collaborator."""

    filename: str
    content: bytes
    media_type: str
    record_count: int


def default_filename(fmt: TabularFormat, today: date | None = None) -> str:
    """customers_YYYY-MM-DD.<ext>"""
    today = today or date.today()
    return f"{FILENAME_PREFIX}_{today.isoformat()}.{fmt.value}"


class TabularService:
    """Spreadsheet export/import over the tabular codec."""

    def __init__(self, header_style: HeaderStyle = HeaderStyle.PRIMARY) -> None:
        self.header_style = header_style

    def export(
        self,
        records: Iterable[CustomerRecord],
        fields: Iterable[FieldDefinition],
        fmt: TabularFormat = TabularFormat.XLSX,
        style: HeaderStyle | None = None,
        today: date | None = None,
    ) -> ExportArtifact:
        """
        Serialize records to a spreadsheet.

        Args:
            records: Records in display order
            fields: Current schema
            fmt: xlsx or csv
            style: Header labels (defaults to the service setting)
            today: Date used in the file name

        Returns:
            ExportArtifact with file name, bytes and media type
        """
        style = style or self.header_style
        fields = sorted(fields, key=lambda f: f.order)
        rows = to_rows(records, fields, style)

        if fmt == TabularFormat.XLSX:
            content = rows_to_xlsx(rows, [column_for_field(f, style) for f in fields])
        else:
            content = rows_to_csv(rows)

        artifact = ExportArtifact(
            filename=default_filename(fmt, today),
            content=content,
            media_type=fmt.media_type,
            record_count=len(rows) - 1,
        )
        logger.info(
            "Exported %d records to %s (%d bytes)",
            artifact.record_count, artifact.filename, len(content),
        )
        return artifact

    def parse(
        self,
        data: bytes,
        fields: Iterable[FieldDefinition],
        fmt: TabularFormat = TabularFormat.XLSX,
    ) -> list[CustomerRecord]:
        """
        Parse an externally edited spreadsheet into best-effort records.

        Columns are read in current schema order. No required-field
        validation happens here.

        Raises:
            ValidationError: If the bytes are not a readable file of this format
        """
        rows = xlsx_to_rows(data) if fmt == TabularFormat.XLSX else csv_to_rows(data)
        records = from_rows(rows, list(fields))
        logger.info("Parsed %d records from %s data", len(records), fmt.value)
        return records
