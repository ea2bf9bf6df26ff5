"""
Tests for the SQLite document store.
"""

import ast
import inspect
import sqlite3

import pytest

from netcustomers.application import record_store, schema_registry
from netcustomers.application.protocols import CUSTOMERS_KEY, FIELDS_KEY
from netcustomers.application.sync import engine
from netcustomers.domain.errors import PersistenceError
from netcustomers.infrastructure.sqlite.store import LocalStore


def test_absent_key_reads_as_none(local_store):
    assert local_store.get_json(CUSTOMERS_KEY) is None


def test_set_then_get_round_trip(local_store):
    document = [{"id": "a", "name": "علي"}]
    local_store.set_json(CUSTOMERS_KEY, document)
    assert local_store.get_json(CUSTOMERS_KEY) == document


def test_set_replaces_previous_document(local_store):
    local_store.set_json(FIELDS_KEY, {"fields": [1]})
    local_store.set_json(FIELDS_KEY, {"fields": [2]})
    assert local_store.get_json(FIELDS_KEY) == {"fields": [2]}
    assert local_store.keys() == [FIELDS_KEY]


def test_empty_list_is_stored_not_removed(local_store):
    local_store.set_json(CUSTOMERS_KEY, [])
    assert local_store.get_json(CUSTOMERS_KEY) == []


def test_remove_is_idempotent(local_store):
    local_store.set_json(CUSTOMERS_KEY, [])
    local_store.remove(CUSTOMERS_KEY)
    local_store.remove(CUSTOMERS_KEY)
    assert local_store.get_json(CUSTOMERS_KEY) is None


def test_documents_survive_reopen(tmp_path):
    db_path = tmp_path / "nested" / "netcustomers.db"
    store = LocalStore(db_path)
    store.initialize_schema()
    store.set_json(CUSTOMERS_KEY, [{"id": "x"}])
    store.close()

    reopened = LocalStore(db_path)
    reopened.initialize_schema()
    assert reopened.get_json(CUSTOMERS_KEY) == [{"id": "x"}]
    reopened.close()


def test_corrupt_document_raises_persistence_error(tmp_path):
    db_path = tmp_path / "netcustomers.db"
    store = LocalStore(db_path)
    store.initialize_schema()
    store.close()

    conn = sqlite3.connect(db_path)
    with conn:
        conn.execute(
            "INSERT INTO documents (key, value, updated_at) VALUES (?, ?, ?)",
            (CUSTOMERS_KEY, "{not json", "2024-01-01"),
        )
    conn.close()

    store = LocalStore(db_path)
    with pytest.raises(PersistenceError):
        store.get_json(CUSTOMERS_KEY)
    store.close()


def test_unserializable_value_raises_persistence_error(local_store):
    with pytest.raises(PersistenceError):
        local_store.set_json(CUSTOMERS_KEY, {"bad": object()})


def test_missing_table_raises_persistence_error():
    store = LocalStore(":memory:")
    with pytest.raises(PersistenceError):
        store.get_json(CUSTOMERS_KEY)
    store.close()


@pytest.mark.parametrize("module", [record_store, schema_registry, engine])
def test_core_services_only_see_the_storage_protocol(module):
    """Document keys come from the protocol module, never from the SQLite backend."""
    tree = ast.parse(inspect.getsource(module))
    imported = {
        node.module for node in ast.walk(tree)
        if isinstance(node, ast.ImportFrom) and node.module
    }
    assert "netcustomers.application.protocols" in imported
    assert not any(name.startswith("netcustomers.infrastructure") for name in imported)
