"""
Tests for the xlsx and CSV byte stream adapters and the TabularService.
"""

from datetime import date
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from netcustomers.application.tabular import TabularFormat, TabularService, default_filename
from netcustomers.domain.errors import ValidationError
from netcustomers.domain.field_registry import default_fields
from netcustomers.domain.models import CustomerRecord, HeaderStyle
from netcustomers.infrastructure.excel import (
    CSV_MEDIA_TYPE,
    SHEET_TITLE,
    XLSX_MEDIA_TYPE,
    csv_to_rows,
    rows_to_csv,
    rows_to_xlsx,
    xlsx_to_rows,
)

ROWS = [
    ["رقم تسلسلي", "الموقع", "الاسم"],
    ["00001", "North Tower", "علي"],
    ["=SUM(A1)", "", "Omar"],
]


def _record(record_id, **values):
    return CustomerRecord(
        id=record_id,
        created_at="2024-01-01T00:00:00+00:00",
        updated_at="2024-01-01T00:00:00+00:00",
        values=values,
    )


class TestXlsx:
    """Workbook writing and reading."""

    def test_round_trip_keeps_text_literal(self):
        rows = xlsx_to_rows(rows_to_xlsx(ROWS))
        assert rows == ROWS

    def test_sheet_layout(self):
        wb = load_workbook(BytesIO(rows_to_xlsx(ROWS)))
        ws = wb.active
        assert ws.title == SHEET_TITLE
        assert ws.freeze_panes == "A2"
        assert ws["A1"].font.bold
        assert ws["A2"].data_type == "s"

    def test_header_only_workbook(self):
        assert xlsx_to_rows(rows_to_xlsx([ROWS[0]])) == [ROWS[0]]

    def test_numeric_cells_are_read_as_text(self):
        wb = Workbook()
        ws = wb.active
        ws.append(["serial", "speed", "ratio"])
        ws.append([1, 100.0, 2.5])
        ws.append([None, None, None])
        buffer = BytesIO()
        wb.save(buffer)

        assert xlsx_to_rows(buffer.getvalue()) == [["serial", "speed", "ratio"], ["1", "100", "2.5"]]

    def test_garbage_bytes_raise_validation_error(self):
        with pytest.raises(ValidationError) as exc:
            xlsx_to_rows(b"this is not a workbook")
        assert exc.value.field == "file"


class TestCsv:
    """Quoted UTF-8 CSV."""

    def test_round_trip(self):
        assert csv_to_rows(rows_to_csv(ROWS)) == ROWS

    def test_every_cell_quoted_with_bom(self):
        data = rows_to_csv([["a", "b"], ["1", ""]])
        assert data.startswith(b"\xef\xbb\xbf")
        assert data.decode("utf-8-sig") == '"a","b"\n"1",""\n'

    def test_trailing_empty_rows_dropped(self):
        data = '"a","b"\n"1","2"\n"",""\n'.encode("utf-8")
        assert csv_to_rows(data) == [["a", "b"], ["1", "2"]]

    def test_non_utf8_raises_validation_error(self):
        with pytest.raises(ValidationError):
            csv_to_rows("نص".encode("cp1256"))


class TestTabularService:
    """Export artifacts and import parsing."""

    def test_default_filename(self):
        assert default_filename(TabularFormat.XLSX, date(2024, 5, 6)) == "customers_2024-05-06.xlsx"
        assert default_filename(TabularFormat.CSV, date(2024, 5, 6)) == "customers_2024-05-06.csv"

    def test_format_from_filename(self):
        assert TabularFormat.from_filename("edited.XLSX") == TabularFormat.XLSX
        assert TabularFormat.from_filename("edited.csv") == TabularFormat.CSV
        with pytest.raises(ValidationError):
            TabularFormat.from_filename("edited.ods")

    @pytest.mark.parametrize("fmt", [TabularFormat.XLSX, TabularFormat.CSV])
    def test_export_then_parse(self, fmt):
        fields = default_fields()
        service = TabularService()
        records = [
            _record("a", serialNumber="00001", location="North Tower", name="علي",
                    networkPassword="p@ss", ipAddress="10.0.0.5"),
            _record("b", serialNumber="00002", location="South", name="Omar"),
        ]

        artifact = service.export(records, fields, fmt, today=date(2024, 5, 6))
        assert artifact.filename == f"customers_2024-05-06.{fmt.value}"
        assert artifact.media_type == (XLSX_MEDIA_TYPE if fmt == TabularFormat.XLSX else CSV_MEDIA_TYPE)
        assert artifact.record_count == 2

        parsed = service.parse(artifact.content, fields, fmt)
        assert [r.get("serialNumber") for r in parsed] == ["00001", "00002"]
        assert parsed[0].get("networkPassword") == "p@ss"
        assert parsed[1].get("ipAddress") == ""
        assert {r.id for r in parsed}.isdisjoint({"a", "b"})

    def test_header_style_setting_and_override(self):
        fields = default_fields()
        service = TabularService(HeaderStyle.KEY)

        rows = csv_to_rows(service.export([], fields, TabularFormat.CSV).content)
        assert rows[0][:3] == ["serialNumber", "location", "name"]

        rows = csv_to_rows(
            service.export([], fields, TabularFormat.CSV, style=HeaderStyle.SECONDARY).content
        )
        assert rows[0][:3] == ["Serial Number", "Location", "Name"]
