"""
Dependency injection container for the application.

Creates the record core explicitly (no module-level singletons):

    settings -> LocalStore -> SchemaRegistry -> RecordStore
                                             -> TabularService
                                             -> SyncEngine (+ remote store)

Lifecycle: open() loads every component from persistence; all writes
are write-through, so close() only releases the database connection.
"""

import logging
from pathlib import Path
from typing import Optional

from ..domain.config import AppSettings
from ..infrastructure.config.repository import ConfigRepository
from ..infrastructure.remote.directory import DirectoryRemoteStore
from ..infrastructure.sqlite.store import LocalStore
from .protocols import RemoteDocumentStore
from .record_store import RecordStore
from .schema_registry import SchemaRegistry
from .sync.engine import SyncEngine
from .tabular.service import TabularService

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Manages the creation and lifecycle of the record core components.
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        settings: Optional[AppSettings] = None,
        remote: Optional[RemoteDocumentStore] = None,
    ):
        """
        Initialize the container.

        Args:
            config_dir: Directory holding netcustomers.json
            settings: Settings override (skips the settings file)
            remote: Remote store override (defaults to settings.remote_dir)
        """
        self.config_dir = config_dir or Path.cwd() / "config"
        self._settings = settings
        self._remote = remote

        self._config_repository: Optional[ConfigRepository] = None
        self._local_store: Optional[LocalStore] = None
        self._registry: Optional[SchemaRegistry] = None
        self._records: Optional[RecordStore] = None
        self._tabular: Optional[TabularService] = None
        self._sync_engine: Optional[SyncEngine] = None

    @property
    def config_repository(self) -> ConfigRepository:
        """Get the configuration repository."""
        if self._config_repository is None:
            self._config_repository = ConfigRepository(self.config_dir)
        return self._config_repository

    @property
    def settings(self) -> AppSettings:
        """Get application settings (loaded from the config directory)."""
        if self._settings is None:
            self._settings = self.config_repository.load_settings()
        return self._settings

    @property
    def local_store(self) -> LocalStore:
        """Get the local document store."""
        if self._local_store is None:
            self._local_store = LocalStore(self.settings.database_path)
            self._local_store.initialize_schema()
        return self._local_store

    @property
    def registry(self) -> SchemaRegistry:
        """Get the schema registry."""
        if self._registry is None:
            self._registry = SchemaRegistry(self.local_store)
        return self._registry

    @property
    def records(self) -> RecordStore:
        """Get the record store."""
        if self._records is None:
            self._records = RecordStore(self.local_store, self.registry)
        return self._records

    @property
    def tabular(self) -> TabularService:
        """Get the spreadsheet export/import service."""
        if self._tabular is None:
            self._tabular = TabularService(self.settings.header_style)
        return self._tabular

    @property
    def remote(self) -> Optional[RemoteDocumentStore]:
        """Get the remote snapshot store (None when sync is not configured)."""
        if self._remote is None and self.settings.remote_dir is not None:
            self._remote = DirectoryRemoteStore(self.settings.remote_dir)
        return self._remote

    @property
    def sync_engine(self) -> SyncEngine:
        """Get the sync engine."""
        if self._sync_engine is None:
            self._sync_engine = SyncEngine(
                self.local_store,
                self.records,
                self.registry,
                self.remote,
                document_name=self.settings.remote_document_name,
            )
        return self._sync_engine

    def open(self) -> "Container":
        """Load schema, records and sync metadata from persistence."""
        self.registry.load()
        self.records.load()
        self.sync_engine.load()
        logger.debug("Container opened (%s)", self.settings.database_path)
        return self

    def close(self) -> None:
        """Release the database connection."""
        if self._local_store is not None:
            self._local_store.close()
