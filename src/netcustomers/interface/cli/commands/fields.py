"""
Field Commands - Customer schema management.

Fields are addressed by id or by key.
"""

import logging

import typer
from rich.markup import escape

from netcustomers.application.schema_registry import Direction, SchemaRegistry
from netcustomers.domain.errors import NotFoundError
from netcustomers.domain.models import FieldType
from netcustomers.interface.cli.formatters import FieldTableFormatter
from netcustomers.interface.cli.session import console, open_container

logger = logging.getLogger(__name__)

fields_app = typer.Typer(
    name="fields",
    help="🧩 Customer field schema",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def resolve_field_id(registry: SchemaRegistry, ref: str) -> str:
    """
    Field id for an id or key reference.

    Raises:
        NotFoundError: If neither an id nor a key matches
    """
    for definition in registry.list():
        if ref in (definition.id, definition.key):
            return definition.id
    raise NotFoundError("Field", ref)


@fields_app.command("list")
def list_fields(ctx: typer.Context):
    """Show the field schema in presentation order."""
    with open_container(ctx) as container:
        registry = container.registry
        FieldTableFormatter().display_fields(registry.list(), registry.retired_keys)


@fields_app.command("add")
def add_field(
    ctx: typer.Context,
    label_primary: str = typer.Argument(..., help="Label in the primary language."),
    label_secondary: str = typer.Argument(..., help="Label in the secondary language."),
    field_type: FieldType = typer.Option(
        FieldType.TEXT,
        "--type",
        "-t",
        help="Input type of the field.",
        case_sensitive=False,
    ),
):
    """Append a new optional field."""
    with open_container(ctx) as container:
        definition = container.registry.add(label_primary, label_secondary, field_type)
        console.print(
            f"[green]✅ Added field[/green] [cyan]{definition.key}[/cyan] "
            f"(order {definition.order})"
        )


@fields_app.command("remove")
def remove_field(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="Field id or key."),
):
    """Remove an optional field. Stored values stay as orphaned extras."""
    with open_container(ctx) as container:
        field_id = resolve_field_id(container.registry, field)
        container.registry.remove(field_id)
        console.print(f"[green]✅ Removed field[/green] {escape(field)}")


def _move(ctx: typer.Context, field: str, direction: Direction) -> None:
    with open_container(ctx) as container:
        registry = container.registry
        registry.reorder(resolve_field_id(registry, field), direction)
        FieldTableFormatter().display_fields(registry.list())


@fields_app.command("up")
def move_up(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="Field id or key."),
):
    """Move a field one position up."""
    _move(ctx, field, Direction.UP)


@fields_app.command("down")
def move_down(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="Field id or key."),
):
    """Move a field one position down."""
    _move(ctx, field, Direction.DOWN)
