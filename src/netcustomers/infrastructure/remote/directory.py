"""
Directory-backed remote snapshot store.

Keeps the named snapshot document in a directory that stands for the
shared remote location (a mounted network share or a folder kept in
sync by a cloud drive client). Handles are document file names
relative to that directory.

File I/O runs in a worker thread so the event loop never blocks.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from netcustomers.domain.errors import SyncError

logger = logging.getLogger(__name__)


class DirectoryRemoteStore:
    """
    RemoteDocumentStore implementation over a directory.

    Usage:
        remote = DirectoryRemoteStore(Path("/mnt/share/netcustomers"))
        handle = await remote.find_document("net_customers_snapshot.json")
        handle = await remote.upload(handle, data, "net_customers_snapshot.json")
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _require_root(self) -> None:
        """The remote directory must already exist (mounted/available)."""
        if not self.root.is_dir():
            raise SyncError(f"Remote directory is not available: {self.root}")

    def _resolve(self, handle: str) -> Path:
        """Map a handle to a path inside the root directory."""
        path = (self.root / handle).resolve()
        if path.parent != self.root.resolve():
            raise SyncError(f"Invalid remote handle: {handle}")
        return path

    async def find_document(self, name: str) -> str | None:
        return await asyncio.to_thread(self._find_document, name)

    def _find_document(self, name: str) -> str | None:
        self._require_root()
        if self._resolve(name).is_file():
            return name
        return None

    async def upload(self, handle: str | None, data: bytes, name: str) -> str:
        return await asyncio.to_thread(self._upload, handle, data, name)

    def _upload(self, handle: str | None, data: bytes, name: str) -> str:
        self._require_root()
        target_handle = handle or name
        target = self._resolve(target_handle)

        # Write to a sibling temp file, then swap in atomically
        fd, temp_name = tempfile.mkstemp(prefix=".upload-", dir=self.root)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(temp_name, target)
        except OSError as e:
            Path(temp_name).unlink(missing_ok=True)
            raise SyncError(f"Upload to {target} failed: {e}") from e

        logger.info("Uploaded %d bytes to %s", len(data), target)
        return target_handle

    async def download(self, handle: str) -> bytes:
        return await asyncio.to_thread(self._download, handle)

    def _download(self, handle: str) -> bytes:
        self._require_root()
        path = self._resolve(handle)
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise SyncError(f"Remote document not found: {handle}") from e
        except OSError as e:
            raise SyncError(f"Download of {path} failed: {e}") from e
        logger.debug("Downloaded %d bytes from %s", len(data), path)
        return data
