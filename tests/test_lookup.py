"""
Tests for search, favorites and QR scan payloads.
"""

import json

import pytest

from netcustomers.application.lookup import (
    build_scan_payload,
    favorite_records,
    resolve_scan_payload,
    search_records,
)
from netcustomers.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def populated(records):
    records.create({"serialNumber": "A-100", "location": "North Tower", "name": "Ali Hassan",
                    "ipAddress": "192.168.1.10"})
    records.create({"serialNumber": "B-200", "location": "Market", "name": "سارة",
                    "networkName": "tower-net"})
    records.create({"serialNumber": "C-300", "location": "South Tower", "name": "Omar"})
    return records


def test_empty_query_returns_everything(populated):
    assert len(search_records(populated.list(), "  ")) == 3


def test_search_is_case_insensitive(populated):
    names = [r.get("name") for r in search_records(populated.list(), "TOWER")]
    assert names == ["Ali Hassan", "Omar"]


def test_search_covers_serial_ip_and_arabic(populated):
    assert [r.get("name") for r in search_records(populated.list(), "b-2")] == ["سارة"]
    assert [r.get("name") for r in search_records(populated.list(), "168.1")] == ["Ali Hassan"]
    assert [r.get("name") for r in search_records(populated.list(), "سار")] == ["سارة"]


def test_search_ignores_other_fields(populated):
    assert search_records(populated.list(), "tower-net") == []


def test_favorites_keep_insertion_order(populated):
    ids = [r.id for r in populated.list()]
    populated.toggle_favorite(ids[2])
    populated.toggle_favorite(ids[0])
    assert [r.id for r in favorite_records(populated.list())] == [ids[0], ids[2]]


def test_scan_payload_resolves_to_record(populated):
    record = populated.list()[1]
    payload = build_scan_payload(record)
    assert json.loads(payload) == {"id": record.id}
    assert resolve_scan_payload(populated, payload).get("name") == "سارة"


@pytest.mark.parametrize("payload", ["not json", "[1, 2]", '{"name": "x"}', '{"id": ""}'])
def test_invalid_scan_payload(populated, payload):
    with pytest.raises(ValidationError):
        resolve_scan_payload(populated, payload)


def test_scan_of_deleted_record(populated):
    record = populated.list()[0]
    payload = build_scan_payload(record)
    populated.delete(record.id)
    with pytest.raises(NotFoundError):
        resolve_scan_payload(populated, payload)
