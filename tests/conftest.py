import json
from datetime import datetime, timezone

import pytest


BUILD_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_tree():
    """Two states, four talukas, seven villages (one with a numeric initial)."""
    return {
        "states": [
            {
                "code": "MH",
                "name": "Maharashtra",
                "districts": [
                    {
                        "code": "MUM",
                        "name": "Mumbai",
                        "talukas": [
                            {
                                "code": "AND",
                                "name": "Andheri",
                                "villages": [
                                    {"code": "001", "name": "Bandra"},
                                    {"code": "002", "name": "Juhu"},
                                    {"code": "003", "name": "7 Mile Post"},
                                ],
                            },
                            {
                                "code": "BOR",
                                "name": "Borivali",
                                "villages": [{"code": "001", "name": "Gorai"}],
                            },
                        ],
                    },
                    {
                        "code": "PUN",
                        "name": "Pune",
                        "talukas": [
                            {
                                "code": "HAV",
                                "name": "Haveli",
                                "villages": [{"code": "001", "name": "Bavdhan"}],
                            }
                        ],
                    },
                ],
            },
            {
                "code": "KA",
                "name": "Karnataka",
                "districts": [
                    {
                        "code": "BLR",
                        "name": "Bengaluru Urban",
                        "talukas": [
                            {
                                "code": "ANK",
                                "name": "Anekal",
                                "villages": [
                                    {"code": "001", "name": "Attibele"},
                                    {"code": "002", "name": "Bommasandra"},
                                ],
                            }
                        ],
                    }
                ],
            },
        ]
    }


@pytest.fixture
def sample_tree():
    return make_tree()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "india_locations.json"
    path.write_text(json.dumps(make_tree()), encoding="utf-8")
    return path


@pytest.fixture
def build_time():
    return BUILD_TIME
