"""
Export / Import Commands - Spreadsheet exchange.

Export writes customers_YYYY-MM-DD.xlsx (or .csv) into a directory.
Import reads an edited file positionally against the current schema. Rows
carry no ids, so the file either replaces the whole RecordSet (default) or
is appended as new customers.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from netcustomers.application.tabular import TabularFormat
from netcustomers.domain.errors import ValidationError
from netcustomers.domain.models import HeaderStyle
from netcustomers.interface.cli.session import console, fail, open_container

logger = logging.getLogger(__name__)


class ImportMode(str, Enum):
    """How imported records are adopted."""

    REPLACE = "replace"
    APPEND = "append"


def export_customers(
    ctx: typer.Context,
    output_dir: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        help="Directory the file is written to.",
        file_okay=False,
    ),
    fmt: TabularFormat = typer.Option(
        TabularFormat.XLSX,
        "--format",
        "-f",
        help="Spreadsheet format.",
        case_sensitive=False,
    ),
    header: Optional[HeaderStyle] = typer.Option(
        None,
        "--header",
        help="Column labels (defaults to the header_style setting).",
        case_sensitive=False,
    ),
):
    """Export all customers to a spreadsheet."""
    with open_container(ctx) as container:
        artifact = container.tabular.export(
            container.records.list(), container.registry.list(), fmt, header
        )

    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / artifact.filename
    try:
        target.write_bytes(artifact.content)
    except OSError as e:
        logger.error("Failed to write %s: %s", target, e)
        fail(f"Could not write {target}: {e}")

    console.print(
        f"[green]✅ Exported {artifact.record_count} customer(s) to[/green] {escape(str(target))}"
    )


def import_customers(
    ctx: typer.Context,
    source: Path = typer.Argument(
        ...,
        help="Spreadsheet to import (.xlsx or .csv).",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    mode: ImportMode = typer.Option(
        ImportMode.REPLACE,
        "--mode",
        "-m",
        help="replace the whole RecordSet, or append every row as a new customer.",
        case_sensitive=False,
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask before replacing."),
):
    """Import customers from an edited spreadsheet."""
    try:
        fmt = TabularFormat.from_filename(source)
    except ValidationError as e:
        fail(str(e))

    if mode == ImportMode.REPLACE and not yes:
        typer.confirm("Replace ALL customers with the file contents?", abort=True)

    with open_container(ctx) as container:
        records = container.tabular.parse(source.read_bytes(), container.registry.list(), fmt)

        if mode == ImportMode.REPLACE:
            count = container.records.replace_all(records)
            console.print(f"[green]✅ Replaced customers with {count} imported record(s)[/green]")
        else:
            count = container.records.append(records)
            console.print(f"[green]✅ Appended {count} record(s) as new customers[/green]")
