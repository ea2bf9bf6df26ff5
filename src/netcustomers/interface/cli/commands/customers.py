"""
Customer Commands - Record management.

Values are given as KEY=VALUE arguments using field keys, for example:

    netcustomers customers add serialNumber=00001 location=Tower name="Ali"
"""

import logging
from typing import List, Optional

import typer
from rich.markup import escape

from netcustomers.application.lookup import (
    build_scan_payload,
    favorite_records,
    resolve_scan_payload,
    search_records,
)
from netcustomers.domain.models import HeaderStyle
from netcustomers.domain.validation import advisory_warnings
from netcustomers.interface.cli.formatters import RecordTableFormatter, display_warnings
from netcustomers.interface.cli.session import console, open_container, parse_assignments

logger = logging.getLogger(__name__)

customers_app = typer.Typer(
    name="customers",
    help="👥 Customer records",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

STYLE_OPTION = typer.Option(
    HeaderStyle.SECONDARY,
    "--labels",
    help="Which field labels to show.",
    case_sensitive=False,
)
REVEAL_OPTION = typer.Option(False, "--reveal", help="Show password values.")


@customers_app.command("list")
def list_customers(
    ctx: typer.Context,
    style: HeaderStyle = STYLE_OPTION,
    reveal: bool = REVEAL_OPTION,
):
    """List all customers in insertion order."""
    with open_container(ctx) as container:
        RecordTableFormatter(style, reveal).display_records(
            container.records.list(), container.registry.list()
        )


@customers_app.command("show")
def show_customer(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Customer id."),
    style: HeaderStyle = STYLE_OPTION,
    reveal: bool = REVEAL_OPTION,
    qr: bool = typer.Option(False, "--qr", help="Print the QR code payload."),
):
    """Show every field of one customer."""
    with open_container(ctx) as container:
        fields = container.registry.list()
        record = container.records.get(record_id)
        RecordTableFormatter(style, reveal).display_record(
            record, fields, advisory_warnings(record.values, fields)
        )
        if qr:
            console.print(escape(build_scan_payload(record)), soft_wrap=True)


@customers_app.command("add")
def add_customer(
    ctx: typer.Context,
    values: Optional[List[str]] = typer.Argument(None, help="KEY=VALUE pairs."),
):
    """Create a customer. Required fields must be given."""
    with open_container(ctx) as container:
        record = container.records.create(parse_assignments(values))
        display_warnings(advisory_warnings(record.values, container.registry.list()))
        console.print(f"[green]✅ Created customer[/green] {record.id}")


@customers_app.command("update")
def update_customer(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Customer id."),
    values: Optional[List[str]] = typer.Argument(None, help="KEY=VALUE pairs."),
):
    """Change field values of a customer."""
    with open_container(ctx) as container:
        record = container.records.update(record_id, parse_assignments(values))
        display_warnings(advisory_warnings(record.values, container.registry.list()))
        console.print(f"[green]✅ Updated customer[/green] {record.id}")


@customers_app.command("delete")
def delete_customer(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Customer id."),
):
    """Delete a customer (no-op when already gone)."""
    with open_container(ctx) as container:
        if container.records.delete(record_id):
            console.print(f"[green]✅ Deleted customer[/green] {escape(record_id)}")
        else:
            console.print(f"[yellow]Customer {escape(record_id)} was already deleted[/yellow]")


@customers_app.command("clear")
def clear_customers(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Delete every customer. This cannot be undone."""
    if not yes:
        typer.confirm("Delete ALL customers?", abort=True)
    with open_container(ctx) as container:
        count = container.records.clear_all()
        console.print(f"[green]✅ Deleted {count} customer(s)[/green]")


@customers_app.command("favorite")
def toggle_favorite(
    ctx: typer.Context,
    record_id: str = typer.Argument(..., help="Customer id."),
):
    """Toggle the favorite flag of a customer."""
    with open_container(ctx) as container:
        record = container.records.toggle_favorite(record_id)
        state = "added to" if record.is_favorite else "removed from"
        console.print(f"[green]★ Customer {record.id} {state} favorites[/green]")


@customers_app.command("search")
def search_customers(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to look for."),
    style: HeaderStyle = STYLE_OPTION,
    reveal: bool = REVEAL_OPTION,
):
    """Search by name, serial number, location or IP address."""
    with open_container(ctx) as container:
        matches = search_records(container.records.list(), query)
        RecordTableFormatter(style, reveal).display_records(
            matches, container.registry.list(), title=f"🔍 Search: {escape(query)}"
        )


@customers_app.command("favorites")
def list_favorites(
    ctx: typer.Context,
    style: HeaderStyle = STYLE_OPTION,
    reveal: bool = REVEAL_OPTION,
):
    """List favorite customers."""
    with open_container(ctx) as container:
        RecordTableFormatter(style, reveal).display_records(
            favorite_records(container.records.list()),
            container.registry.list(),
            title="★ Favorites",
        )


@customers_app.command("scan")
def scan_customer(
    ctx: typer.Context,
    payload: str = typer.Argument(..., help="Scanned QR code text."),
    style: HeaderStyle = STYLE_OPTION,
    reveal: bool = REVEAL_OPTION,
):
    """Open the customer a scanned QR code points at."""
    with open_container(ctx) as container:
        fields = container.registry.list()
        record = resolve_scan_payload(container.records, payload)
        RecordTableFormatter(style, reveal).display_record(
            record, fields, advisory_warnings(record.values, fields)
        )
