import json
import uuid
from datetime import datetime, timezone

import pytest

from location_hub.code_strategy import RandomSuffixCodeStrategy
from location_hub.exceptions import ParseError, RecordNotFoundError, ValidationError
from location_hub.admin_store import LocationStore, new_record_id

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
FIXED_UUID = uuid.UUID("12345678-9abc-4def-8123-456789abcdef")

VERSOVA = {
    "stateName": "Maharashtra",
    "districtName": "Mumbai",
    "talukaName": "Andheri",
    "villageName": "Versova",
}


@pytest.fixture
def store(tmp_path):
    return LocationStore(
        tmp_path / "admin.json",
        code_strategy=RandomSuffixCodeStrategy(uuid_factory=lambda: FIXED_UUID),
        clock=lambda: NOW,
        uuid_factory=lambda: FIXED_UUID,
    )


def test_new_record_id():
    record_id = new_record_id(NOW)
    prefix, millis, suffix = record_id.split("_")
    assert prefix == "loc"
    assert millis == "1704067200000"
    assert len(suffix) == 9


def test_add_location(store):
    record = store.add_location(dict(VERSOVA, villageName="  Versova "))
    assert record["villageName"] == "Versova"
    assert record["uniqueCode"] == "MA-MUM-VER-1234"
    assert record["searchText"] == "maharashtra mumbai andheri versova"
    assert record["locationId"] == "maharashtra_mumbai_andheri_versova"
    assert record["shortCode"] == "12345678"
    assert record["createdAt"] == record["updatedAt"] == "2024-01-01T00:00:00.000Z"
    assert store.get_location(record["id"]) == record


def test_add_requires_every_name(store):
    with pytest.raises(ValidationError):
        store.add_location({"stateName": "Maharashtra"})
    with pytest.raises(ValidationError):
        store.add_location(dict(VERSOVA, talukaName="   "))


def test_update_regenerates_code_on_name_change(store):
    record = store.add_location(VERSOVA)
    updated = store.update_location(record["id"], {"villageName": "Madh"})
    assert updated["uniqueCode"] == "MA-MUM-MAD-1234"
    assert updated["searchText"] == "maharashtra mumbai andheri madh"
    assert updated["locationId"] == "maharashtra_mumbai_andheri_madh"
    assert updated["shortCode"] == record["shortCode"]
    assert updated["createdAt"] == record["createdAt"]


def test_update_rejects_other_fields(store):
    record = store.add_location(VERSOVA)
    with pytest.raises(ValidationError):
        store.update_location(record["id"], {"uniqueCode": "X"})


def test_unknown_id(store):
    with pytest.raises(RecordNotFoundError):
        store.get_location("loc_0_missing")
    with pytest.raises(RecordNotFoundError):
        store.delete_location("loc_0_missing")


def test_delete_location(store):
    record = store.add_location(VERSOVA)
    assert store.delete_location(record["id"]) is True
    assert store.get_all_locations()["total"] == 0


def test_store_persists_to_file(store, tmp_path):
    record = store.add_location(VERSOVA)

    saved = json.loads((tmp_path / "admin.json").read_text(encoding="utf-8"))
    assert saved["locations"][0]["id"] == record["id"]

    reopened = LocationStore(tmp_path / "admin.json")
    assert reopened.get_location(record["id"])["uniqueCode"] == "MA-MUM-VER-1234"


def test_pagination(store):
    for village in ["Versova", "Madh", "Aksa"]:
        store.add_location(dict(VERSOVA, villageName=village))

    page = store.get_all_locations(page=2, limit=2)
    assert page["total"] == 3
    assert page["pages"] == 2
    assert [r["villageName"] for r in page["locations"]] == ["Aksa"]

    with pytest.raises(ValidationError):
        store.get_all_locations(page=0)


def test_queries(store):
    store.add_location(VERSOVA)
    store.add_location({
        "stateName": "Karnataka",
        "districtName": "Bengaluru Urban",
        "talukaName": "Anekal",
        "villageName": "Chandapura",
    })

    assert [r["villageName"] for r in store.get_locations_by_state("karnataka")] == ["Chandapura"]
    assert [r["villageName"] for r in store.search_locations("ANDHERI")] == ["Versova"]
    assert [r["villageName"] for r in store.search_locations("ka-ben")] == ["Chandapura"]
    assert store.search_locations("  ") == []


def test_export_data(store):
    store.add_location(VERSOVA)
    exported = json.loads(store.export_data())
    assert exported["timestamp"] == "2024-01-01T00:00:00.000Z"
    assert exported["totalLocations"] == 1
    assert exported["locations"][0]["villageName"] == "Versova"


def test_store_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("LOCATION_HUB_ADMIN_STORE", str(tmp_path / "env-admin.json"))
    store = LocationStore(clock=lambda: NOW)
    store.add_location(VERSOVA)
    assert (tmp_path / "env-admin.json").exists()


@pytest.mark.parametrize("content", ['[]', '"locations"', '{"locations": {}}'])
def test_store_file_must_hold_locations_object(tmp_path, content):
    path = tmp_path / "admin.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ParseError, match="admin.json"):
        LocationStore(path)


def test_search_limit(store):
    for village in ["Versova", "Madh", "Aksa"]:
        store.add_location(dict(VERSOVA, villageName=village))

    assert len(store.search_locations("andheri", limit=2)) == 2
    assert store.search_locations("andheri", limit=0) == []
    with pytest.raises(ValidationError):
        store.search_locations("andheri", limit=-1)
