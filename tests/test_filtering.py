from __future__ import annotations

from searchlib.filtering import filter_records
from searchlib.matching import matches


PEOPLE = [
    {"name": "John Doe", "email": "j.doe@example.com"},
    {"name": "Jane Smith", "email": "j.smith@example.com"},
]

FRUIT = [{"label": "apple"}, {"label": "avocado"}, {"label": "apricot"}]


def test_multi_field_match():
    result = filter_records(PEOPLE, ["name", "email"], "smith")
    assert result == [PEOPLE[1]]


def test_empty_query_returns_nothing():
    assert filter_records(FRUIT, ["label"], "") == []
    assert filter_records(FRUIT, ["label"], "", 2) == []


def test_cap_truncates_from_the_front():
    assert filter_records(FRUIT, ["label"], "a", 2) == FRUIT[:2]


def test_non_positive_cap_is_unbounded():
    assert filter_records(FRUIT, ["label"], "a", 0) == FRUIT
    assert filter_records(FRUIT, ["label"], "a", -3) == FRUIT


def test_no_matches():
    assert filter_records(FRUIT, ["label"], "xyz") == []


def test_matches_exactly_the_matching_records_in_order():
    records = [
        {"label": "Alpha", "tag": "x"},
        {"label": "beta", "tag": "alpha"},
        {"label": 3},
        {},
        "plain string",
        {"label": "gamma"},
        {"label": "ALPHABET"},
    ]
    keys = ["label", "tag"]
    result = filter_records(records, keys, "alpha")
    assert result == [r for r in records if matches(r, keys, "alpha")]
    assert [r["label"] for r in result] == ["Alpha", "beta", "ALPHABET"]


def test_same_record_object_appears_once():
    shared = {"label": "apple", "alias": "apple pie"}
    records = [shared, {"label": "banana"}, shared]
    result = filter_records(records, ["label", "alias"], "apple")
    assert len(result) == 1
    assert result[0] is shared


def test_equal_but_distinct_records_are_kept():
    records = [{"label": "apple"}, {"label": "apple"}]
    assert len(filter_records(records, ["label"], "apple")) == 2


def test_filter_is_deterministic():
    first = filter_records(FRUIT, ["label"], "ap", 1)
    second = filter_records(FRUIT, ["label"], "ap", 1)
    assert first == second == [FRUIT[0]]
