"""
Sync Package - whole-store snapshot synchronization.

Package Structure:
    engine.py    - SyncEngine (single-flight manual sync, pull, auto-sync)
    snapshot.py  - Snapshot document encode/decode and validation

Usage:
    from netcustomers.application.sync import SyncEngine

    engine = SyncEngine(local_store, records, registry, remote)
    engine.load()
    result = await engine.manual_sync()
"""

from netcustomers.application.sync.engine import DEFAULT_DOCUMENT_NAME, SyncEngine
from netcustomers.application.sync.snapshot import decode_snapshot, encode_snapshot

__all__ = [
    "SyncEngine",
    "DEFAULT_DOCUMENT_NAME",
    "encode_snapshot",
    "decode_snapshot",
]
