"""Storage backends — keyed JSON documents in memory and on disk."""

import pytest

from classifieds.catalog.schemas import Job
from classifieds.catalog.store import Catalog, board_key
from classifieds.errors import StorageError
from classifieds.storage import JsonDirectoryStorage, MemoryStorage


def test_memory_storage_missing_key_is_none():
    assert MemoryStorage().read("absent") is None


def test_memory_storage_does_not_alias_values():
    storage = MemoryStorage()
    value = {"a": [1]}
    storage.write("k", value)
    value["a"].append(2)
    read = storage.read("k")
    read["a"].append(3)
    assert storage.read("k") == {"a": [1]}


def test_json_storage_writes_one_file_per_key(tmp_path):
    storage = JsonDirectoryStorage(tmp_path)
    storage.write(board_key("for sale/cars"), [{"post_id": 1}])
    storage.write("dlist", {"for sale/cars": board_key("for sale/cars")})

    names = sorted(p.name for p in tmp_path.iterdir())
    assert names == ["dlist%3Afor%20sale%2Fcars.json", "dlist.json"]
    assert storage.read(board_key("for sale/cars")) == [{"post_id": 1}]


def test_json_storage_missing_file_is_none(tmp_path):
    assert JsonDirectoryStorage(tmp_path / "not-yet").read("dlist") is None


def test_json_storage_malformed_file_raises(tmp_path):
    (tmp_path / "dlist.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError) as exc_info:
        JsonDirectoryStorage(tmp_path).read("dlist")
    assert exc_info.value.key == "dlist"
    assert exc_info.value.http_status == 503


def test_json_storage_overwrite_leaves_no_temp_files(tmp_path):
    storage = JsonDirectoryStorage(tmp_path)
    storage.write("k", [1])
    storage.write("k", [1, 2])
    assert storage.read("k") == [1, 2]
    assert [p.name for p in tmp_path.iterdir()] == ["k.json"]


def test_json_catalog_survives_reopen(json_catalog, ctx, listing, tmp_path):
    json_catalog.set_items("community", listing(1))
    json_catalog.set_items("community", listing(2))
    json_catalog.remove_items("community", ctx.caller_id, 1, ctx)

    reopened = Catalog(JsonDirectoryStorage(tmp_path / "catalog"))
    assert [i.post_id for i in reopened.get_items("community")] == [2]
    assert reopened.groups() == ["community"]


def test_json_catalog_reads_legacy_board(tmp_path):
    storage = JsonDirectoryStorage(tmp_path)
    storage.write("dlist", {"jobs": board_key("jobs")})
    storage.write(
        board_key("jobs"),
        [
            {
                "creator": "alice.testnet",
                "post_id": 9,
                "date": 1,
                "category": "jobs",
                "title": "Cook",
                "description": "Kitchen work",
                "image": None,
                "location": None,
                "price": None,
                "details": {
                    "for_sale": None,
                    "community": None,
                    "housing": None,
                    "jobs": {
                        "employment_type": "PartTime",
                        "job_title": "cook",
                        "compensation": 20,
                        "company_name": None,
                    },
                },
            }
        ],
    )

    item = Catalog(storage).get_item("jobs", 9)
    assert isinstance(item.details, Job)
    assert item.details.employment_type.value == "PartTime"


def test_corrupt_listing_surfaces_as_storage_error(tmp_path):
    storage = JsonDirectoryStorage(tmp_path)
    storage.write("dlist", {"g": board_key("g")})
    storage.write(board_key("g"), [{"post_id": "not a number"}])

    with pytest.raises(StorageError):
        Catalog(storage).get_items("g")


def test_stored_non_object_payload_surfaces_as_storage_error(tmp_path):
    storage = JsonDirectoryStorage(tmp_path)
    storage.write("dlist", {"jobs": board_key("jobs")})
    storage.write(
        board_key("jobs"),
        [
            {
                "creator": "alice.testnet",
                "post_id": 1,
                "date": 0,
                "category": "jobs",
                "title": "t",
                "description": "d",
                "details": {"jobs": 5},
            }
        ],
    )

    with pytest.raises(StorageError):
        Catalog(storage).get_items("jobs")
