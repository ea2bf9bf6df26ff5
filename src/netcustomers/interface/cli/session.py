"""
CLI session helpers.

Holds the per-invocation state set by the root callback and opens the
application Container for a command. Core errors are turned into a red
message and exit code 1 in one place.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from netcustomers.application.container import Container
from netcustomers.domain.errors import NetCustomersError, ValidationError
from netcustomers.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)

console = Console()


@dataclass
class CliState:
    """Options given to the root command."""

    config_dir: Path
    verbose: bool = False


def fail(message: str) -> None:
    """Print an error and exit with code 1."""
    console.print(f"[red]❌ Error:[/red] {escape(message)}")
    raise typer.Exit(1)


@contextmanager
def open_container(ctx: typer.Context) -> Iterator[Container]:
    """
    Open the application container for one command.

    Loads settings, configures logging and loads the record core.
    NetCustomersError and settings errors end the command with exit 1.
    """
    state: Optional[CliState] = ctx.obj if isinstance(ctx.obj, CliState) else None
    config_dir = state.config_dir if state else Path.cwd() / "config"
    container = Container(config_dir=config_dir)

    try:
        settings = container.settings
    except ValueError as e:
        fail(f"Configuration error: {e}")

    level = "DEBUG" if state and state.verbose else settings.log_level
    setup_logging(level, settings.log_file)

    try:
        yield container.open()
    except NetCustomersError as e:
        logger.error("Command failed: %s", e)
        fail(str(e))
    finally:
        container.close()


def parse_assignments(assignments: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse KEY=VALUE arguments.

    Raises:
        ValidationError: If an argument has no '=' or an empty key
    """
    values: Dict[str, str] = {}
    for item in assignments or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValidationError(f"Expected KEY=VALUE, got '{item}'", field="values")
        values[key.strip()] = value
    return values
