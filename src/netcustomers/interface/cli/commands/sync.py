"""
Sync Commands - Remote snapshot sync.

push uploads the whole store (last writer wins). pull downloads the
snapshot and, with --apply, adopts it through the Record Store.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

import typer

from netcustomers.interface.cli.formatters import SyncStatusFormatter
from netcustomers.interface.cli.session import console, open_container

logger = logging.getLogger(__name__)

sync_app = typer.Typer(
    name="sync",
    help="🔄 Remote snapshot sync",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


class ApplyMode(str, Enum):
    """How a pulled snapshot is adopted."""

    REPLACE = "replace"
    MERGE = "merge"


@sync_app.command("push")
def push(ctx: typer.Context):
    """Upload all customers and fields as the remote snapshot."""
    with open_container(ctx) as container:
        result = asyncio.run(container.sync_engine.manual_sync())
        SyncStatusFormatter().display_result(result)
    if not result.success:
        raise typer.Exit(1)


@sync_app.command("pull")
def pull(
    ctx: typer.Context,
    apply: Optional[ApplyMode] = typer.Option(
        None,
        "--apply",
        help="Adopt the snapshot: replace local data, or merge records by id.",
        case_sensitive=False,
    ),
):
    """Download the remote snapshot."""
    with open_container(ctx) as container:
        snapshot = asyncio.run(container.sync_engine.pull())
        console.print(
            f"[blue]📥 Remote snapshot: {len(snapshot.records)} record(s), "
            f"{len(snapshot.fields)} field(s), updated {snapshot.last_updated or 'unknown'}[/blue]"
        )

        if apply == ApplyMode.REPLACE:
            count = container.sync_engine.adopt_snapshot(snapshot)
            console.print(f"[green]✅ Replaced local data with {count} record(s)[/green]")
        elif apply == ApplyMode.MERGE:
            result = container.records.merge(snapshot.records)
            console.print(
                f"[green]✅ Merged: {result.added} added, {result.updated} updated, "
                f"{result.skipped} skipped[/green]"
            )


@sync_app.command("status")
def status(ctx: typer.Context):
    """Show sync settings and the last sync time."""
    with open_container(ctx) as container:
        engine = container.sync_engine
        remote = str(container.settings.remote_dir or "")
        SyncStatusFormatter().display_status(engine.metadata, engine.is_configured, remote)


@sync_app.command("auto")
def auto(
    ctx: typer.Context,
    enabled: bool = typer.Argument(..., help="on/off, true/false."),
):
    """Enable or disable auto-sync when connectivity returns."""
    with open_container(ctx) as container:
        container.sync_engine.set_auto_sync(enabled)
        console.print(
            f"[green]✅ Auto-sync {'enabled' if enabled else 'disabled'}[/green]"
        )
