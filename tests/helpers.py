"""
Test doubles shared by the NetCustomers tests.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from netcustomers.domain.errors import PersistenceError


class FlakyStorage:
    """DocumentStorage wrapper whose writes can be switched to fail (all, or per key)."""

    def __init__(self, inner):
        self.inner = inner
        self.fail_writes = False
        self.fail_keys = set()
        self.writes = 0

    def get_json(self, key):
        return self.inner.get_json(key)

    def set_json(self, key, value):
        if self.fail_writes or key in self.fail_keys:
            raise PersistenceError(f"disk full while writing '{key}'")
        self.writes += 1
        self.inner.set_json(key, value)

    def remove(self, key):
        if self.fail_writes:
            raise PersistenceError(f"disk full while removing '{key}'")
        self.inner.remove(key)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds=1.0):
        self.now = self.now + timedelta(seconds=seconds)


class MemoryRemote:
    """In-memory RemoteDocumentStore with switchable failures and a gate."""

    def __init__(self):
        self.documents = {}
        self.uploads = 0
        self.fail_with = None
        self.gate = None

    async def find_document(self, name):
        if self.fail_with is not None:
            raise self.fail_with
        return name if name in self.documents else None

    async def upload(self, handle, data, name):
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        self.uploads += 1
        handle = handle or name
        self.documents[handle] = data
        return handle

    async def download(self, handle):
        if self.fail_with is not None:
            raise self.fail_with
        return self.documents[handle]

    def hold(self):
        """Block uploads until release() is called."""
        self.gate = asyncio.Event()

    def release(self):
        self.gate.set()
