from __future__ import annotations

import pytest

from searchlib.matching import display_value, matches, resolve_path


RECORD = {
    "label": "Apple",
    "address": {"city": "Cupertino", "zip": 95014},
    "tags": ["fruit", "company"],
    "owner": None,
}


@pytest.mark.parametrize(
    "path, expected",
    [
        ("label", "Apple"),
        ("address.city", "Cupertino"),
        ("address.zip", 95014),
        ("tags.1", "company"),
        ("address.country", None),
        ("owner.name", None),
        ("label.length", None),
        ("tags.9", None),
        ("tags.first", None),
    ],
)
def test_resolve_path(path, expected):
    assert resolve_path(RECORD, path) == expected


def test_resolve_path_on_non_mapping_record():
    assert resolve_path("just a string", "label") is None
    assert resolve_path(None, "label") is None
    assert resolve_path(42, "a.b") is None


def test_matches_is_case_insensitive_substring():
    assert matches(RECORD, ["label"], "ppl")
    assert matches(RECORD, ["label"], "APPLE")
    assert not matches(RECORD, ["label"], "pear")


def test_matches_any_key():
    assert matches(RECORD, ["label", "address.city"], "cuper")
    assert not matches(RECORD, ["label"], "cuper")


def test_non_string_values_never_match():
    assert not matches(RECORD, ["address.zip"], "950")
    assert not matches(RECORD, ["tags"], "fruit")
    assert not matches({"label": True}, ["label"], "true")


def test_empty_query_matches_nothing():
    assert not matches(RECORD, ["label"], "")


def test_missing_keys_do_not_raise():
    assert not matches({}, ["label", "deep.nested.path"], "x")
    assert not matches([1, 2], ["0"], "1")


def test_display_value():
    assert display_value(RECORD, "label") == "Apple"
    assert display_value(RECORD, "address.zip") == "95014"
    assert display_value(RECORD, "missing") == ""
