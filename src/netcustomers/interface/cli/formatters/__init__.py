"""Rich output formatters for the CLI."""

from .tables import (
    FieldTableFormatter,
    RecordTableFormatter,
    SyncStatusFormatter,
    display_warnings,
)

__all__ = [
    "FieldTableFormatter",
    "RecordTableFormatter",
    "SyncStatusFormatter",
    "display_warnings",
]
