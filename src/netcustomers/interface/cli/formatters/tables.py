"""
CLI formatters for fields, customer records and sync status.

Separates display logic from command logic. All user-supplied text is
escaped before it reaches rich markup.
"""

import logging
from typing import Dict, Iterable, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from netcustomers.domain.field_registry import IDENTITY_KEYS
from netcustomers.domain.models import (
    CustomerRecord,
    FieldDefinition,
    FieldType,
    HeaderStyle,
    SyncMetadata,
)
from netcustomers.domain.sync_state import SyncResult

logger = logging.getLogger(__name__)
console = Console()

MASK = "••••••"


class FieldTableFormatter:
    """Display of the field schema."""

    def display_fields(self, fields: List[FieldDefinition], retired: Iterable[str] = ()) -> None:
        table = Table(title="🧩 Customer Fields")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Label", style="white")
        table.add_column("Label (secondary)", style="white")
        table.add_column("Type", style="magenta")
        table.add_column("Required", style="green")
        table.add_column("ID", style="dim", no_wrap=True)

        for definition in fields:
            table.add_row(
                str(definition.order),
                escape(definition.key),
                escape(definition.label_primary),
                escape(definition.label_secondary),
                definition.type.value,
                "[green]✅ Yes[/green]" if definition.required else "No",
                definition.id,
            )

        console.print(table)
        retired = sorted(retired)
        if retired:
            console.print(f"[dim]Retired keys: {escape(', '.join(retired))}[/dim]")


class RecordTableFormatter:
    """Display of customer records."""

    def __init__(self, style: HeaderStyle = HeaderStyle.SECONDARY, reveal: bool = False):
        self.style = style
        self.reveal = reveal

    def _text(self, definition: FieldDefinition, value: str) -> str:
        if definition.type == FieldType.PASSWORD and value and not self.reveal:
            return MASK
        return escape(value)

    def display_records(
        self,
        records: List[CustomerRecord],
        fields: List[FieldDefinition],
        title: str = "👥 Customers",
    ) -> None:
        """
        Display records as a table of the identity columns.

        Args:
            records: Records in display order
            fields: Current schema
            title: Table title
        """
        columns = [f for f in fields if f.key in IDENTITY_KEYS] or fields[:3]

        table = Table(title=title)
        table.add_column("★", style="yellow", justify="center")
        for definition in columns:
            table.add_column(escape(definition.label(self.style)), style="cyan")
        table.add_column("ID", style="dim", no_wrap=True)

        for record in records:
            table.add_row(
                "★" if record.is_favorite else "",
                *[self._text(d, record.get(d.key)) for d in columns],
                record.id,
            )

        console.print(table)
        console.print(f"[blue]📊 {len(records)} record(s)[/blue]")

    def display_record(
        self,
        record: CustomerRecord,
        fields: List[FieldDefinition],
        warnings: Dict[str, str] | None = None,
    ) -> None:
        """Display one record with every schema field and its advisory warnings."""
        warnings = warnings or {}
        table = Table(title=f"👤 Customer {record.id}", show_header=False)
        table.add_column("Field", style="bold cyan")
        table.add_column("Value")

        for definition in fields:
            text = self._text(definition, record.get(definition.key))
            if definition.key in warnings:
                text = f"{text} [yellow]⚠[/yellow]"
            table.add_row(escape(definition.label(self.style)), text)

        table.add_row("Favorite", "★ Yes" if record.is_favorite else "No")
        table.add_row("Created", record.created_at)
        table.add_row("Updated", record.updated_at)
        console.print(table)
        display_warnings(warnings)


def display_warnings(warnings: Dict[str, str]) -> None:
    """Print advisory value warnings in yellow."""
    for key, message in warnings.items():
        console.print(f"[yellow]⚠ {escape(key)}: {escape(message)}[/yellow]")


class SyncStatusFormatter:
    """Display of sync metadata and results."""

    def display_status(self, metadata: SyncMetadata, configured: bool, remote: str) -> None:
        panel = Panel.fit(
            f"[bold blue]Remote:[/bold blue] {escape(remote) if configured else '❌ Not configured'}\n"
            f"[bold blue]Auto-sync:[/bold blue] {'✅ Enabled' if metadata.auto_sync_enabled else 'Disabled'}\n"
            f"[bold blue]Last sync:[/bold blue] {metadata.last_sync_time or 'Never'}\n"
            f"[bold blue]Remote document:[/bold blue] {escape(metadata.remote_file_id or '-')}",
            title="🔄 Sync Status",
            border_style="blue",
        )
        console.print(panel)

    def display_result(self, result: SyncResult) -> None:
        if result.success:
            console.print(
                f"[green]✅ Synced {result.record_count} record(s) at {result.synced_at}[/green]"
            )
        else:
            console.print(f"[red]❌ Sync failed:[/red] {escape(str(result.error))}")
