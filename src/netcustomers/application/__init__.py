"""
Application layer: the record core services.

    schema_registry.py - SchemaRegistry (field definitions)
    record_store.py    - RecordStore (customer RecordSet)
    tabular/           - spreadsheet export/import
    sync/              - remote snapshot sync
    lookup.py          - search, favorites, QR payloads
    container.py       - explicit wiring of the above
"""

from netcustomers.application.record_store import MergeResult, RecordStore
from netcustomers.application.schema_registry import Direction, SchemaRegistry

__all__ = [
    "SchemaRegistry",
    "Direction",
    "RecordStore",
    "MergeResult",
]
