import pytest

from location_hub.exceptions import ShapeError
from location_hub.verify_source import main, verify_tree_shape


def test_valid_tree_report(sample_tree):
    report = verify_tree_shape(sample_tree)
    assert report == {
        "states": 2,
        "districts": 3,
        "talukas": 4,
        "villages": 7,
        "verification_status": "PASSED",
    }


def test_empty_states_is_valid():
    assert verify_tree_shape({"states": []})["states"] == 0


def test_missing_villages_names_path(sample_tree):
    del sample_tree["states"][0]["districts"][1]["talukas"][0]["villages"]
    with pytest.raises(ShapeError) as exc:
        verify_tree_shape(sample_tree)
    assert exc.value.path == "states[0].districts[1].talukas[0].villages"


def test_children_must_be_a_list(sample_tree):
    sample_tree["states"][1]["districts"] = {"code": "BLR"}
    with pytest.raises(ShapeError) as exc:
        verify_tree_shape(sample_tree)
    assert exc.value.path == "states[1].districts"


def test_village_code_must_not_be_boolean(sample_tree):
    sample_tree["states"][1]["districts"][0]["talukas"][0]["villages"][1]["code"] = True
    with pytest.raises(ShapeError) as exc:
        verify_tree_shape(sample_tree)
    assert exc.value.path == "states[1].districts[0].talukas[0].villages[1]"


def test_missing_name(sample_tree):
    del sample_tree["states"][0]["name"]
    with pytest.raises(ShapeError, match="missing 'name'"):
        verify_tree_shape(sample_tree)


@pytest.mark.parametrize("root", [[], {"districts": []}, {"states": {}}])
def test_bad_root(root):
    with pytest.raises(ShapeError):
        verify_tree_shape(root)


def test_first_error_in_source_order(sample_tree):
    del sample_tree["states"][0]["districts"][0]["talukas"][1]["villages"]
    del sample_tree["states"][1]["districts"][0]["talukas"]
    with pytest.raises(ShapeError) as exc:
        verify_tree_shape(sample_tree)
    assert exc.value.path.startswith("states[0]")


def test_main_exit_codes(source_file, tmp_path):
    assert main([str(source_file)]) == 0
    assert main([str(tmp_path / "missing.json")]) == 1
    assert main([]) == 1


def test_integer_codes_are_accepted(sample_tree):
    sample_tree["states"][0]["code"] = 27
    sample_tree["states"][0]["districts"][0]["code"] = 519
    assert verify_tree_shape(sample_tree)["verification_status"] == "PASSED"


@pytest.mark.parametrize("code", [2.5, None, ["MH"]])
def test_other_code_types_rejected(sample_tree, code):
    sample_tree["states"][0]["code"] = code
    with pytest.raises(ShapeError, match="'code' must be a string or integer") as exc:
        verify_tree_shape(sample_tree)
    assert exc.value.path == "states[0]"


def test_name_must_be_string(sample_tree):
    sample_tree["states"][1]["name"] = 29
    with pytest.raises(ShapeError, match="'name' must be a string"):
        verify_tree_shape(sample_tree)
