"""
SQLite-based document store for local persistence.

Holds the three logical documents of an installation:
- customers:        the serialized RecordSet
- customer_fields:  the serialized Schema Registry
- sync_settings:    the serialized SyncMetadata

Each document is one self-contained JSON value stored under its key.
An absent key is the valid "empty/default" state, never an error.

Uses stdlib sqlite3 with no ORM.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from netcustomers.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

# Schema version - increment when making breaking changes
SCHEMA_VERSION = 1


class LocalStore:
    """
    SQLite-backed storage for JSON documents.

    Usage:
        store = LocalStore(Path("data/netcustomers.db"))
        store.initialize_schema()

        store.set_json("customers", [...])
        customers = store.get_json("customers") or []
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize document store.

        Args:
            db_path: Path to SQLite database file (created if not exists),
                or ":memory:" for a throwaway store
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self._connection: sqlite3.Connection | None = None
        logger.debug("LocalStore initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            try:
                if isinstance(self.db_path, Path):
                    self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._connection = sqlite3.connect(self.db_path)
            except (sqlite3.Error, OSError) as e:
                raise PersistenceError(f"Cannot open local store {self.db_path}: {e}") from e
            self._connection.row_factory = sqlite3.Row
            logger.debug("Database connection established")
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("Database connection closed")

    # ========================================================================
    # Schema Management
    # ========================================================================

    def initialize_schema(self) -> None:
        """
        Create tables if they don't exist.

        Safe to call multiple times - uses CREATE TABLE IF NOT EXISTS.
        """
        try:
            conn = self._get_connection()
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS documents (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schema_meta (
                        key TEXT PRIMARY KEY,
                        value TEXT
                    )
                """
                )
                conn.execute(
                    "INSERT OR REPLACE INTO schema_meta (key, value) VALUES ('version', ?)",
                    (str(SCHEMA_VERSION),),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot initialize local store: {e}") from e
        logger.debug("Local store schema initialized (version %d)", SCHEMA_VERSION)

    # ========================================================================
    # Documents
    # ========================================================================

    def get_json(self, key: str) -> Any | None:
        """
        Load the JSON document stored under key.

        Returns:
            Decoded document, or None when the key is absent

        Raises:
            PersistenceError: If the read fails or the document is corrupt
        """
        try:
            row = self._get_connection().execute(
                "SELECT value FROM documents WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read '{key}': {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Stored document '{key}' is not valid JSON: {e}") from e

    def set_json(self, key: str, value: Any) -> None:
        """
        Replace the document stored under key in a single transaction.

        Raises:
            PersistenceError: If serialization or the write fails
        """
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Document '{key}' is not serializable: {e}") from e

        now = datetime.now(timezone.utc).isoformat()
        try:
            conn = self._get_connection()
            with conn:
                conn.execute(
                    """
                    INSERT INTO documents (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                """,
                    (key, payload, now),
                )
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to write '{key}': {e}") from e
        logger.debug("Saved document '%s' (%d bytes)", key, len(payload))

    def remove(self, key: str) -> None:
        """
        Delete the document stored under key (no-op when absent).

        Raises:
            PersistenceError: If the delete fails
        """
        try:
            conn = self._get_connection()
            with conn:
                conn.execute("DELETE FROM documents WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to remove '{key}': {e}") from e
        logger.debug("Removed document '%s'", key)

    def keys(self) -> list[str]:
        """Keys of all stored documents."""
        try:
            rows = self._get_connection().execute(
                "SELECT key FROM documents ORDER BY key"
            ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to list documents: {e}") from e
        return [row["key"] for row in rows]
