"""
CLI Orchestrator - Main Entry Point

Wires the command groups into one typer application. Each command
opens the application Container itself, so the root callback only
records global options.
"""

import logging
from pathlib import Path

import typer

from netcustomers import __version__
from netcustomers.interface.cli.commands import (
    customers_app,
    export_customers,
    fields_app,
    import_customers,
    sync_app,
)
from netcustomers.interface.cli.session import CliState, console

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="netcustomers",
    help="📡 NetCustomers - offline-first customer records for network technicians",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(fields_app, name="fields")
app.add_typer(customers_app, name="customers")
app.add_typer(sync_app, name="sync")
app.command("export")(export_customers)
app.command("import")(import_customers)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"netcustomers {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Path = typer.Option(
        Path("config"),
        "--config-dir",
        "-c",
        help="Directory holding netcustomers.json (relative paths in it resolve here).",
        envvar="NETCUSTOMERS_CONFIG_DIR",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
):
    """
    📡 NetCustomers - customer subscription records

    🔧 **Quick Start:**
    1. Review the schema: `netcustomers fields list`
    2. Add a customer: `netcustomers customers add serialNumber=00001 location=Tower name=Ali`
    3. Export: `netcustomers export --format xlsx`
    4. Sync: set `remote_dir` in netcustomers.json, then `netcustomers sync push`
    """
    ctx.obj = CliState(config_dir=config_dir, verbose=verbose)
