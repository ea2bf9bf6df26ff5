"""
Sync Engine - whole-store snapshot sync with a single remote document.

State machine:

    IDLE --manual_sync()--> SYNCING --upload ok--> IDLE (lastSyncTime = now)
                                    --failure----> IDLE (last_error set)

Rules:
- Last-writer-wins at the granularity of the whole store: every sync
  overwrites the remote document with the local snapshot.
- Single-flight: a manual_sync() issued while a flight is active joins
  that flight instead of starting a second upload.
- A failed sync never touches local record data or lastSyncTime.
- pull() only downloads and decodes. Adopting the result is a separate
  step: adopt_snapshot() for fields plus records, or RecordStore.merge.
- Connectivity events trigger one fire-and-forget sync when auto-sync is
  enabled. Failures are not retried until the next event or manual call.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from netcustomers.application.protocols import (
    SYNC_SETTINGS_KEY,
    DocumentStorage,
    RemoteDocumentStore,
)
from netcustomers.application.record_store import RecordStore
from netcustomers.application.schema_registry import SchemaRegistry
from netcustomers.application.sync.snapshot import decode_snapshot, encode_snapshot
from netcustomers.domain.errors import NetCustomersError, PersistenceError, SyncError
from netcustomers.domain.models import SyncMetadata, format_timestamp, utc_now
from netcustomers.domain.sync_state import RemoteSnapshot, SyncResult, SyncState

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_NAME = "net_customers_snapshot.json"


class SyncEngine:
    """
    Reconciles the local store with the remote snapshot document.

    Usage:
        engine = SyncEngine(local_store, records, registry, remote)
        engine.load()

        result = await engine.manual_sync()
        if not result.success:
            print(result.error)

        snapshot = await engine.pull()
        engine.adopt_snapshot(snapshot)
    """

    def __init__(
        self,
        storage: DocumentStorage,
        records: RecordStore,
        registry: SchemaRegistry,
        remote: RemoteDocumentStore | None,
        document_name: str = DEFAULT_DOCUMENT_NAME,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._storage = storage
        self._records = records
        self._registry = registry
        self._remote = remote
        self._document_name = document_name
        self._clock = clock

        self._metadata = SyncMetadata()
        self._state = SyncState.IDLE
        self._last_error: SyncError | None = None
        self._flight: asyncio.Future[SyncResult] | None = None
        self._background: set[asyncio.Future[SyncResult]] = set()

    # ========================================================================
    # Metadata
    # ========================================================================

    def load(self) -> None:
        """
        Load SyncMetadata (absent document = defaults).

        Raises:
            PersistenceError: If the stored document cannot be read
        """
        data = self._storage.get_json(SYNC_SETTINGS_KEY)
        if data is None:
            self._metadata = SyncMetadata()
        elif isinstance(data, dict):
            self._metadata = SyncMetadata.from_dict(data)
        else:
            raise PersistenceError("Stored sync settings are not an object")
        logger.debug(
            "Sync metadata: auto=%s last=%s",
            self._metadata.auto_sync_enabled, self._metadata.last_sync_time,
        )

    def _save_metadata(self, metadata: SyncMetadata) -> None:
        """Persist metadata, then adopt it in memory."""
        self._storage.set_json(SYNC_SETTINGS_KEY, metadata.to_dict())
        self._metadata = metadata

    @property
    def metadata(self) -> SyncMetadata:
        return self._metadata.copy()

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_syncing(self) -> bool:
        return self._state == SyncState.SYNCING

    @property
    def last_error(self) -> SyncError | None:
        return self._last_error

    @property
    def is_configured(self) -> bool:
        return self._remote is not None

    def set_auto_sync(self, enabled: bool) -> SyncMetadata:
        """
        Enable or disable auto-sync on connectivity changes.

        Raises:
            PersistenceError: If the write fails (setting unchanged)
        """
        metadata = self._metadata.copy()
        metadata.auto_sync_enabled = bool(enabled)
        self._save_metadata(metadata)
        logger.info("Auto-sync %s", "enabled" if enabled else "disabled")
        return metadata.copy()

    # ========================================================================
    # Sync
    # ========================================================================

    async def manual_sync(self) -> SyncResult:
        """
        Upload the whole store as the remote snapshot.

        Never raises for sync failures: the outcome (including the
        SyncError) is returned and kept in last_error.
        """
        if self._flight is not None and not self._flight.done():
            logger.debug("Sync already in flight, joining it")
            return await asyncio.shield(self._flight)

        self._state = SyncState.SYNCING
        self._last_error = None
        self._flight = asyncio.ensure_future(self._run_sync())
        return await asyncio.shield(self._flight)

    async def _run_sync(self) -> SyncResult:
        try:
            result = await self._upload_snapshot()
        except SyncError as e:
            result = SyncResult.failed(e)
        except PersistenceError as e:
            result = SyncResult.failed(SyncError(f"Could not record sync time: {e}"))
        except Exception as e:  # pylint: disable=broad-except
            # Remote backends may fail with any transport/auth exception
            logger.debug("Remote store raised", exc_info=True)
            result = SyncResult.failed(SyncError(f"Remote store failure: {e}"))
        finally:
            self._state = SyncState.IDLE

        if result.success:
            logger.info("Synced %d records at %s", result.record_count, result.synced_at)
        else:
            self._last_error = result.error
            logger.warning("Sync failed: %s", result.error)
        return result

    async def _upload_snapshot(self) -> SyncResult:
        remote = self._require_remote()
        records = self._records.list()
        fields = self._registry.list()
        synced_at = format_timestamp(self._clock())
        payload = encode_snapshot(records, fields, synced_at)

        handle = await remote.find_document(self._document_name)
        handle = await remote.upload(handle, payload, self._document_name)

        metadata = self._metadata.copy()
        metadata.last_sync_time = synced_at
        metadata.remote_file_id = handle
        self._save_metadata(metadata)

        return SyncResult(success=True, synced_at=synced_at, record_count=len(records))

    async def pull(self) -> RemoteSnapshot:
        """
        Download and decode the remote snapshot without touching local state.

        Raises:
            SyncError: If the remote is unavailable, the document is missing
                or it is not a valid snapshot
        """
        remote = self._require_remote()
        try:
            handle = await remote.find_document(self._document_name)
            if handle is None:
                raise SyncError(f"No remote snapshot named '{self._document_name}'")
            data = await remote.download(handle)
        except SyncError:
            raise
        except Exception as e:  # pylint: disable=broad-except
            raise SyncError(f"Remote store failure: {e}") from e

        snapshot = decode_snapshot(data)
        logger.info(
            "Pulled snapshot with %d records and %d fields",
            len(snapshot.records), len(snapshot.fields),
        )
        return snapshot

    def adopt_snapshot(self, snapshot: RemoteSnapshot) -> int:
        """
        Replace local fields and records with a pulled snapshot, all or nothing.

        Records are checked against the snapshot's field list before anything
        is written. If the record write fails after the fields were replaced,
        the previous field schema is written back.

        Returns:
            Number of records now stored

        Raises:
            ValidationError: If a record or the field list is invalid (nothing written)
            ProtectedFieldError: If a required local field is missing (nothing written)
            PersistenceError: If a write fails (previous state restored)
        """
        fields = snapshot.fields or self._registry.list()
        incoming = self._records.validate(snapshot.records, fields)

        previous_fields = self._registry.list()
        previous_retired = self._registry.retired_keys
        if snapshot.fields:
            self._registry.replace_all(snapshot.fields)

        try:
            return self._records.replace_all(incoming)
        except NetCustomersError:
            logger.error("Adopting snapshot records failed, restoring previous field schema")
            self._registry.restore(previous_fields, previous_retired)
            raise

    def _require_remote(self) -> RemoteDocumentStore:
        if self._remote is None:
            raise SyncError("Remote storage is not configured")
        return self._remote

    # ========================================================================
    # Connectivity
    # ========================================================================

    def on_connectivity_change(self, connected: bool) -> asyncio.Future[SyncResult] | None:
        """
        React to a connectivity transition.

        Starts a fire-and-forget sync when connected, auto-sync is enabled
        and no flight is active. Must be called from a running event loop.

        Returns:
            The scheduled sync task, or None when nothing was started
        """
        if not connected:
            logger.debug("Connectivity lost")
            return None
        if not self._metadata.auto_sync_enabled:
            logger.debug("Connectivity restored, auto-sync disabled")
            return None
        if self.is_syncing:
            logger.debug("Connectivity restored, sync already in flight")
            return None

        logger.info("Connectivity restored, starting auto-sync")
        task = asyncio.ensure_future(self.manual_sync())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
