"""
Tests for the Sync Engine and the directory remote store.

Async tests run with pytest-asyncio.
"""

import asyncio
import json

import pytest

from helpers import MemoryRemote
from netcustomers.application.protocols import CUSTOMERS_KEY, SYNC_SETTINGS_KEY
from netcustomers.application.sync import SyncEngine, decode_snapshot, encode_snapshot
from netcustomers.domain.errors import (
    PersistenceError,
    ProtectedFieldError,
    SyncError,
    ValidationError,
)
from netcustomers.domain.models import CustomerRecord, FieldDefinition
from netcustomers.domain.sync_state import RemoteSnapshot, SyncState
from netcustomers.infrastructure.remote import DirectoryRemoteStore

DOC = "net_customers_snapshot.json"


@pytest.fixture
def remote():
    return MemoryRemote()


@pytest.fixture
def engine(storage, records, registry, remote, clock):
    engine = SyncEngine(storage, records, registry, remote, document_name=DOC, clock=clock)
    engine.load()
    return engine


# ============================================================================
# manual_sync
# ============================================================================


@pytest.mark.asyncio
async def test_successful_sync_uploads_snapshot(engine, records, remote, storage, identity):
    records.create(identity)
    records.create({**identity, "serialNumber": "00002"})

    result = await engine.manual_sync()

    assert result.success is True
    assert result.error is None
    assert result.record_count == 2
    assert remote.uploads == 1
    document = json.loads(remote.documents[DOC].decode("utf-8"))
    assert len(document["customers"]) == 2
    assert len(document["fields"]) == 12
    assert document["lastUpdated"] == result.synced_at

    metadata = engine.metadata
    assert metadata.last_sync_time == result.synced_at
    assert metadata.remote_file_id == DOC
    assert storage.get_json(SYNC_SETTINGS_KEY)["lastSyncTime"] == result.synced_at
    assert engine.state == SyncState.IDLE


@pytest.mark.asyncio
async def test_second_sync_overwrites_same_document(engine, records, remote, identity, clock):
    records.create(identity)
    await engine.manual_sync()
    records.create({**identity, "serialNumber": "00002"})
    clock.advance(60)
    result = await engine.manual_sync()

    assert list(remote.documents) == [DOC]
    assert remote.uploads == 2
    assert result.record_count == 2


@pytest.mark.asyncio
async def test_scenario_sync_failure_keeps_local_data(engine, records, remote, identity):
    """A remote failure surfaces as SyncError and changes nothing locally."""
    record = records.create(identity)
    before = [r.to_dict() for r in records.list()]
    remote.fail_with = ConnectionError("network unreachable")

    result = await engine.manual_sync()

    assert result.success is False
    assert isinstance(result.error, SyncError)
    assert "network unreachable" in str(result.error)
    assert engine.last_error is result.error
    assert engine.state == SyncState.IDLE
    assert engine.metadata.last_sync_time is None
    assert [r.to_dict() for r in records.list()] == before
    assert records.get(record.id).get("name") == "Ali"


@pytest.mark.asyncio
async def test_error_clears_after_next_success(engine, remote):
    remote.fail_with = ConnectionError("offline")
    assert (await engine.manual_sync()).success is False
    remote.fail_with = None
    assert (await engine.manual_sync()).success is True
    assert engine.last_error is None


@pytest.mark.asyncio
async def test_metadata_write_failure_is_a_sync_error(engine, storage):
    storage.fail_writes = True
    result = await engine.manual_sync()
    assert result.success is False
    assert isinstance(result.error, SyncError)
    assert engine.metadata.last_sync_time is None


@pytest.mark.asyncio
async def test_missing_remote_fails_with_sync_error(storage, records, registry):
    engine = SyncEngine(storage, records, registry, None)
    engine.load()
    assert engine.is_configured is False

    result = await engine.manual_sync()
    assert result.success is False
    assert isinstance(result.error, SyncError)
    with pytest.raises(SyncError):
        await engine.pull()


@pytest.mark.asyncio
async def test_scenario_concurrent_syncs_share_one_flight(engine, remote, identity, records):
    """Two overlapping sync requests produce exactly one upload."""
    records.create(identity)
    remote.hold()

    first = asyncio.ensure_future(engine.manual_sync())
    await asyncio.sleep(0)
    assert engine.is_syncing is True
    second = asyncio.ensure_future(engine.manual_sync())
    await asyncio.sleep(0)

    remote.release()
    results = await asyncio.gather(first, second)

    assert remote.uploads == 1
    assert results[0] is results[1]
    assert results[0].success is True
    assert engine.is_syncing is False


# ============================================================================
# pull
# ============================================================================


@pytest.mark.asyncio
async def test_pull_returns_snapshot_without_mutating(engine, records, registry, remote, identity):
    records.create(identity)
    await engine.manual_sync()
    records.clear_all()

    snapshot = await engine.pull()

    assert len(snapshot.records) == 1
    assert snapshot.records[0].get("serialNumber") == "00001"
    assert [f.key for f in snapshot.fields] == registry.keys()
    assert len(records) == 0

    records.replace_all(snapshot.records)
    assert len(records) == 1


@pytest.mark.asyncio
async def test_pull_without_document_raises(engine):
    with pytest.raises(SyncError):
        await engine.pull()


@pytest.mark.asyncio
async def test_pull_transport_failure_raises_sync_error(engine, remote):
    remote.documents[DOC] = b"{}"
    remote.fail_with = TimeoutError("slow link")
    with pytest.raises(SyncError):
        await engine.pull()


@pytest.mark.asyncio
async def test_pull_malformed_document_raises_sync_error(engine, remote):
    remote.documents[DOC] = b'{"customers": "nope"}'
    with pytest.raises(SyncError):
        await engine.pull()


# ============================================================================
# adopt_snapshot
# ============================================================================


def _zone_field(order):
    return FieldDefinition(
        id="zone", key="zone", label_primary="المنطقة", label_secondary="Zone",
        required=True, order=order,
    )


def _remote_record(record_id, **extra):
    values = {"serialNumber": "90", "location": "Hill", "name": "Remote"}
    values.update(extra)
    return CustomerRecord(
        id=record_id,
        created_at="2024-02-01T00:00:00+00:00",
        updated_at="2024-02-01T00:00:00+00:00",
        values=values,
    )


def test_adopt_snapshot_replaces_fields_and_records(engine, records, registry, identity):
    records.create(identity)
    fields = registry.list() + [_zone_field(len(registry.list()) + 1)]
    snapshot = RemoteSnapshot(records=[_remote_record("r1", zone="East")], fields=fields)

    assert engine.adopt_snapshot(snapshot) == 1

    assert registry.keys()[-1] == "zone"
    assert [r.id for r in records.list()] == ["r1"]
    assert records.get("r1").get("zone") == "East"


def test_adopt_snapshot_without_fields_keeps_schema(engine, records, registry):
    keys = registry.keys()
    assert engine.adopt_snapshot(RemoteSnapshot(records=[_remote_record("r1")])) == 1
    assert registry.keys() == keys


def test_scenario_invalid_snapshot_records_write_nothing(engine, records, registry, storage, identity):
    """A snapshot record missing a new required field leaves fields and records untouched."""
    local = records.create(identity)
    keys = registry.keys()
    writes = storage.writes
    fields = registry.list() + [_zone_field(len(keys) + 1)]
    snapshot = RemoteSnapshot(records=[_remote_record("r1")], fields=fields)

    with pytest.raises(ValidationError) as exc:
        engine.adopt_snapshot(snapshot)

    assert exc.value.field == "zone"
    assert storage.writes == writes
    assert registry.keys() == keys
    assert registry.retired_keys == frozenset()
    assert [r.id for r in records.list()] == [local.id]
    records.update(local.id, {"name": "Still editable"})


def test_adopt_snapshot_dropping_required_field_writes_nothing(engine, registry, storage):
    writes = storage.writes
    fields = [f for f in registry.list() if f.key != "name"]
    for position, definition in enumerate(fields, start=1):
        definition.order = position
    snapshot = RemoteSnapshot(records=[_remote_record("r1")], fields=fields)

    with pytest.raises(ProtectedFieldError):
        engine.adopt_snapshot(snapshot)
    assert storage.writes == writes
    assert "name" in registry.keys()


def test_failed_record_write_restores_previous_schema(engine, records, registry, storage, identity):
    local = records.create(identity)
    keys = registry.keys()
    fields = [f for f in registry.list() if f.key != "packageSize"]
    storage.fail_keys.add(CUSTOMERS_KEY)

    with pytest.raises(PersistenceError):
        engine.adopt_snapshot(RemoteSnapshot(records=[_remote_record("r1")], fields=fields))

    assert registry.keys() == keys
    assert registry.retired_keys == frozenset()
    assert [r.id for r in records.list()] == [local.id]

    registry.load()
    assert registry.keys() == keys
    assert registry.retired_keys == frozenset()


# ============================================================================
# Auto-sync
# ============================================================================


def test_set_auto_sync_persists(engine, storage, records, registry, remote):
    engine.set_auto_sync(True)
    assert storage.get_json(SYNC_SETTINGS_KEY)["autoSync"] is True

    fresh = SyncEngine(storage, records, registry, remote)
    fresh.load()
    assert fresh.metadata.auto_sync_enabled is True


def test_legacy_sync_settings_load(storage, records, registry, remote):
    storage.set_json(SYNC_SETTINGS_KEY, {"autoSync": True, "googleDriveFileId": "abc"})
    engine = SyncEngine(storage, records, registry, remote)
    engine.load()
    assert engine.metadata.remote_file_id == "abc"
    assert engine.metadata.auto_sync_enabled is True


@pytest.mark.asyncio
async def test_connectivity_triggers_sync_only_when_enabled(engine, remote):
    assert engine.on_connectivity_change(True) is None

    engine.set_auto_sync(True)
    assert engine.on_connectivity_change(False) is None

    task = engine.on_connectivity_change(True)
    assert task is not None
    result = await task
    assert result.success is True
    assert remote.uploads == 1


@pytest.mark.asyncio
async def test_connectivity_ignored_while_syncing(engine, remote):
    engine.set_auto_sync(True)
    remote.hold()
    flight = asyncio.ensure_future(engine.manual_sync())
    await asyncio.sleep(0)

    assert engine.on_connectivity_change(True) is None

    remote.release()
    await flight
    assert remote.uploads == 1


# ============================================================================
# Snapshot codec
# ============================================================================


def test_snapshot_round_trip(records, registry, identity):
    records.create({**identity, "name": "علي"})
    data = encode_snapshot(records.list(), registry.list(), "2024-01-01T00:00:00+00:00")
    snapshot = decode_snapshot(data)
    assert snapshot.last_updated == "2024-01-01T00:00:00+00:00"
    assert snapshot.records[0].get("name") == "علي"
    assert snapshot.fields[0].required is True


def test_snapshot_accepts_legacy_labels():
    data = json.dumps({
        "customers": [{"id": "1", "name": "A"}],
        "fields": [{"key": "name", "labelAr": "الاسم", "labelEn": "Name", "order": 1}],
    }).encode("utf-8")
    snapshot = decode_snapshot(data)
    assert snapshot.fields[0].label_secondary == "Name"
    assert snapshot.last_updated is None


def test_snapshot_rejects_non_json():
    with pytest.raises(SyncError):
        decode_snapshot(b"\xff\xfe not json")


# ============================================================================
# DirectoryRemoteStore
# ============================================================================


@pytest.mark.asyncio
async def test_directory_store_round_trip(tmp_path):
    store = DirectoryRemoteStore(tmp_path)
    assert await store.find_document(DOC) is None

    handle = await store.upload(None, b"one", DOC)
    assert handle == DOC
    assert await store.find_document(DOC) == DOC

    await store.upload(handle, b"two", DOC)
    assert await store.download(handle) == b"two"
    assert sorted(p.name for p in tmp_path.iterdir()) == [DOC]


@pytest.mark.asyncio
async def test_directory_store_missing_root(tmp_path):
    store = DirectoryRemoteStore(tmp_path / "unmounted")
    with pytest.raises(SyncError):
        await store.find_document(DOC)
    with pytest.raises(SyncError):
        await store.upload(None, b"x", DOC)


@pytest.mark.asyncio
async def test_directory_store_rejects_escaping_handle(tmp_path):
    store = DirectoryRemoteStore(tmp_path / "remote")
    (tmp_path / "remote").mkdir()
    with pytest.raises(SyncError):
        await store.download("../secret.txt")


@pytest.mark.asyncio
async def test_engine_over_directory_store(tmp_path, storage, records, registry, identity):
    engine = SyncEngine(storage, records, registry, DirectoryRemoteStore(tmp_path), document_name=DOC)
    engine.load()
    records.create(identity)

    result = await engine.manual_sync()
    assert result.success is True
    assert (tmp_path / DOC).is_file()

    snapshot = await engine.pull()
    assert snapshot.records[0].get("serialNumber") == "00001"
