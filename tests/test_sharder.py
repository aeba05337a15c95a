import pytest

from location_hub.exceptions import SlugCollisionError
from location_hub.sharder import (
    assign_state_slugs,
    search_letter,
    shard_location_tree,
    state_slug,
)


SCENARIO_TREE = {
    "states": [
        {
            "code": "MH",
            "name": "Maharashtra",
            "districts": [
                {
                    "code": "MUM",
                    "name": "Mumbai",
                    "talukas": [
                        {"code": "AND", "name": "Andheri", "villages": [{"code": "001", "name": "Bandra"}]}
                    ],
                }
            ],
        }
    ]
}


def test_single_village_scenario():
    result = shard_location_tree(SCENARIO_TREE)

    assert result["states"] == [
        {"name": "Maharashtra", "code": "MH", "districts": 1, "talukas": 1, "villages": 1}
    ]

    shard = result["state_shards"]["maharashtra"]
    assert shard["state"] == "Maharashtra"
    assert shard["code"] == "MH"
    village = shard["districts"][0]["talukas"][0]["villages"][0]
    assert village == {"name": "Bandra", "code": "001", "uniqueCode": "MH-MUM-AND-001"}

    assert list(result["search_index"]) == ["b"]
    (record,) = result["search_index"]["b"]
    assert record["fullPath"] == "Maharashtra > Mumbai > Andheri > Bandra"
    assert record["searchText"] == "maharashtra mumbai andheri bandra"
    assert list(record) == [
        "stateName", "stateCode", "districtName", "districtCode",
        "talukaName", "talukaCode", "villageName", "villageCode",
        "uniqueCode", "fullPath", "searchText",
    ]


def test_rollup_counts(sample_tree):
    result = shard_location_tree(sample_tree)
    assert result["states"] == [
        {"name": "Maharashtra", "code": "MH", "districts": 2, "talukas": 3, "villages": 5},
        {"name": "Karnataka", "code": "KA", "districts": 1, "talukas": 1, "villages": 2},
    ]
    assert result["totals"] == {
        "states": 2, "districts": 3, "talukas": 4, "villages": 7, "indexed": 6, "unindexed": 1,
    }


def test_numeric_initial_is_browse_only(sample_tree):
    result = shard_location_tree(sample_tree)

    andheri = result["state_shards"]["maharashtra"]["districts"][0]["talukas"][0]
    assert {"name": "7 Mile Post", "code": "003", "uniqueCode": "MH-MUM-AND-003"} in andheri["villages"]

    indexed_names = [r["villageName"] for bucket in result["search_index"].values() for r in bucket]
    assert "7 Mile Post" not in indexed_names
    assert "7" not in result["search_index"]


def test_count_conservation(sample_tree):
    result = shard_location_tree(sample_tree)
    total = sum(state["villages"] for state in result["states"])
    bucket_total = sum(len(bucket) for bucket in result["search_index"].values())

    assert total == result["totals"]["villages"] == 7
    assert bucket_total < total
    assert bucket_total + result["totals"]["unindexed"] == total


def test_full_path_round_trip(sample_tree):
    result = shard_location_tree(sample_tree)
    for bucket in result["search_index"].values():
        for record in bucket:
            assert record["fullPath"].split(" > ") == [
                record["stateName"], record["districtName"], record["talukaName"], record["villageName"],
            ]


def test_unique_codes_are_distinct(sample_tree):
    result = shard_location_tree(sample_tree)
    codes = [
        village["uniqueCode"]
        for shard in result["state_shards"].values()
        for district in shard["districts"]
        for taluka in district["talukas"]
        for village in taluka["villages"]
    ]
    assert len(codes) == 7
    assert len(set(codes)) == len(codes)


def test_buckets_keep_source_order(sample_tree):
    result = shard_location_tree(sample_tree)
    assert [r["villageName"] for r in result["search_index"]["b"]] == ["Bandra", "Bavdhan", "Bommasandra"]
    assert list(result["state_shards"]) == ["maharashtra", "karnataka"]


def test_repeated_runs_do_not_share_index(sample_tree):
    first = shard_location_tree(sample_tree)
    second = shard_location_tree(sample_tree)
    assert len(second["search_index"]["b"]) == 3
    assert first["search_index"] is not second["search_index"]


def test_source_tree_not_mutated(sample_tree):
    import copy

    before = copy.deepcopy(sample_tree)
    shard_location_tree(sample_tree)
    assert sample_tree == before


@pytest.mark.parametrize("name,expected", [
    ("Maharashtra", "maharashtra"),
    ("Tamil Nadu", "tamil-nadu"),
    ("Andaman & Nicobar Islands", "andaman--nicobar-islands"),
    ("Jammu   and\tKashmir", "jammu-and-kashmir"),
    ("Dadra (DNH)", "dadra-dnh"),
])
def test_state_slug(name, expected):
    assert state_slug(name) == expected


@pytest.mark.parametrize("name,expected", [
    ("Bandra", "b"),
    ("attibele", "a"),
    ("7 Mile Post", None),
    ("", None),
    ("पुणे", None),
    ("Élan", None),
])
def test_search_letter(name, expected):
    assert search_letter(name) == expected


def test_slug_collision_fails():
    states = [{"name": "Daman & Diu"}, {"name": "Daman  Diu"}]
    assert state_slug("Daman & Diu") == "daman--diu"
    assert state_slug("Daman  Diu") == "daman-diu"
    assert assign_state_slugs(states) == ["daman--diu", "daman-diu"]

    colliding = [{"name": "Goa"}, {"name": "GOA!"}]
    with pytest.raises(SlugCollisionError) as exc:
        assign_state_slugs(colliding)
    assert exc.value.path == "states[1].name"


def test_empty_slug_fails():
    with pytest.raises(SlugCollisionError):
        assign_state_slugs([{"name": "गोवा"}])
