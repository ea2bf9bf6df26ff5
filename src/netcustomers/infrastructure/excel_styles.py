"""
Workbook styling for customer exports.

One navy header band, thin grey grid, zebra rows, and per-column fonts
picked from the field type (monospace for addresses and numbers, dimmed
for passwords).
"""

from __future__ import annotations

from dataclasses import dataclass

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet


# ============================================================================
# Palette
# ============================================================================


class Colors:
    """Hex colors (no leading #)."""

    NAVY = "203764"
    WHITE = "FFFFFF"
    ZEBRA = "F2F2F2"
    GRID = "B4B4B4"
    HEADER_EDGE = "1F4E79"
    MUTED = "7F7F7F"


def _solid(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _box(color: str, bottom: str = "thin") -> Border:
    side = Side(style="thin", color=color)
    return Border(left=side, right=side, top=side, bottom=Side(style=bottom, color=color))


# ============================================================================
# Presets
# ============================================================================


class Fonts:
    HEADER = Font(name="Segoe UI", size=11, bold=True, color=Colors.WHITE)
    TEXT = Font(name="Segoe UI", size=10)
    CODE = Font(name="Consolas", size=10)
    SECRET = Font(name="Consolas", size=10, color=Colors.MUTED)


class Fills:
    HEADER = _solid(Colors.NAVY)
    ZEBRA = _solid(Colors.ZEBRA)


class Borders:
    CELL = _box(Colors.GRID)
    HEADER = _box(Colors.HEADER_EDGE, bottom="medium")


HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
CELL_ALIGNMENT = Alignment(vertical="center")


# ============================================================================
# Columns
# ============================================================================


@dataclass
class ColumnDef:
    """
    How one exported column looks.

    Attributes:
        name: Header text
        width: Width in characters
        is_monospace: Addresses and numbers
        is_secret: Password values
    """

    name: str
    width: int = 16
    is_monospace: bool = False
    is_secret: bool = False

    @property
    def data_font(self) -> Font:
        if self.is_secret:
            return Fonts.SECRET
        if self.is_monospace:
            return Fonts.CODE
        return Fonts.TEXT


def apply_header_row(ws: Worksheet, columns: list[ColumnDef]) -> None:
    """
    Write the styled header band on row 1, set widths, freeze it and
    put an autofilter over it.
    """
    for col_idx, column in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column.name)
        cell.font = Fonts.HEADER
        cell.fill = Fills.HEADER
        cell.alignment = HEADER_ALIGNMENT
        cell.border = Borders.HEADER
        ws.column_dimensions[get_column_letter(col_idx)].width = column.width

    ws.freeze_panes = "A2"
    if columns:
        ws.auto_filter.ref = f"A1:{get_column_letter(len(columns))}1"


def style_data_cell(cell, column: ColumnDef | None, zebra: bool) -> None:
    """Grid border, column font and the alternate-row fill."""
    cell.border = Borders.CELL
    cell.alignment = CELL_ALIGNMENT
    if column is not None:
        cell.font = column.data_font
    if zebra:
        cell.fill = Fills.ZEBRA
