import pytest

from location_hub.data_cleaning import clean_location_name, normalize_unicode, suggest_names


def test_normalize_unicode_dashes_and_invisibles():
    assert normalize_unicode("Medchal\u2013Malkajgiri") == "Medchal-Malkajgiri"
    assert normalize_unicode("Ban\u200bdra") == "Bandra"
    assert normalize_unicode(None) is None


def test_normalize_keeps_devanagari():
    assert normalize_unicode("पुणे") == "पुणे"


@pytest.mark.parametrize("raw,expected", [
    ("  Navi   Mumbai ", "Navi Mumbai"),
    ("Bengaluru\tUrban", "Bengaluru Urban"),
    ("Andheri", "Andheri"),
    ("   ", None),
    ("", None),
    (None, None),
])
def test_clean_location_name(raw, expected):
    assert clean_location_name(raw) == expected


def test_suggest_names():
    suggestions = suggest_names("bandara", ["Bandra", "Borivali", "Bandra"])
    assert [name for name, _ in suggestions] == ["Bandra"]


def test_suggest_names_threshold():
    assert suggest_names("zzz", ["Bandra", "Juhu"]) == []
    assert suggest_names("", ["Bandra"]) == []
    assert suggest_names("bandra", []) == []
