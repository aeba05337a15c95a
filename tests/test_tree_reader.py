import pytest

from location_hub.exceptions import ParseError, ReadError
from location_hub.tree_reader import load_location_tree, read_json_file


def test_load_location_tree(source_file):
    tree = load_location_tree(source_file)
    assert [state["code"] for state in tree["states"]] == ["MH", "KA"]


def test_missing_file_raises_read_error(tmp_path):
    with pytest.raises(ReadError):
        load_location_tree(tmp_path / "nope.json")


def test_directory_raises_read_error(tmp_path):
    with pytest.raises(ReadError):
        read_json_file(tmp_path)


def test_malformed_json_raises_parse_error(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"states": [', encoding="utf-8")
    with pytest.raises(ParseError):
        load_location_tree(bad)


def test_errors_are_runtime_errors(tmp_path):
    with pytest.raises(RuntimeError):
        load_location_tree(tmp_path / "nope.json")
