"""
Shared fixtures for the NetCustomers test suite.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parents[1] / "src"))

import pytest

from helpers import FlakyStorage, FrozenClock
from netcustomers.application.record_store import RecordStore
from netcustomers.application.schema_registry import SchemaRegistry
from netcustomers.infrastructure.sqlite.store import LocalStore


@pytest.fixture
def local_store():
    store = LocalStore(":memory:")
    store.initialize_schema()
    yield store
    store.close()


@pytest.fixture
def storage(local_store):
    return FlakyStorage(local_store)


@pytest.fixture
def registry(storage):
    registry = SchemaRegistry(storage)
    registry.load()
    return registry


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def records(storage, registry, clock):
    store = RecordStore(storage, registry, clock=clock)
    store.load()
    return store


@pytest.fixture
def identity():
    """Values for the three required identity fields."""
    return {"serialNumber": "00001", "location": "North Tower", "name": "Ali"}
