"""Tests for the sort capability."""

import pytest

from samplebank.capabilities import AttributeBag, MalformedQuery, parse_sort
from samplebank.capabilities.sort import SortKey


def _records():
    return [
        AttributeBag({"id": "a", "balance": 200, "lastUpdate": 1}),
        AttributeBag({"id": "b", "balance": 100, "lastUpdate": 1}),
        AttributeBag({"id": "c", "balance": 100, "lastUpdate": 3}),
        AttributeBag({"id": "d", "balance": 300, "lastUpdate": 2}),
        AttributeBag({"id": "e", "balance": 100, "lastUpdate": 2}),
    ]


def _ids(records):
    return [r.attribute("id") for r in records]


def test_parse_keys_and_directions():
    spec = parse_sort("balance|lastUpdate-")

    assert spec.keys == (
        SortKey(attribute="balance", descending=False),
        SortKey(attribute="lastUpdate", descending=True),
    )


def test_ascending_then_descending_tie_break():
    result = parse_sort("balance|lastUpdate-").apply(_records())

    assert _ids(result) == ["c", "e", "b", "a", "d"]


def test_explicit_ascending_suffix():
    assert _ids(parse_sort("balance+").apply(_records())) == _ids(parse_sort("balance").apply(_records()))


def test_double_colon_direction_form():
    assert parse_sort("balance::-|lastUpdate::+") == parse_sort("balance-|lastUpdate")


def test_stable_when_all_keys_tie():
    result = parse_sort("balance").apply(_records())

    assert _ids(result) == ["b", "c", "e", "a", "d"]


def test_apply_does_not_mutate_input():
    records = _records()
    parse_sort("balance-").apply(records)

    assert _ids(records) == ["a", "b", "c", "d", "e"]


def test_none_sorts_first_ascending():
    records = [AttributeBag({"v": 2}), AttributeBag({"v": None}), AttributeBag({"v": 1})]

    result = parse_sort("v").apply(records)

    assert [r.attribute("v") for r in result] == [None, 1, 2]


def test_mixed_types_still_sort():
    records = [AttributeBag({"v": "b"}), AttributeBag({"v": 1}), AttributeBag({"v": "a"})]

    assert len(parse_sort("v-").apply(records)) == 3


@pytest.mark.parametrize("raw", ["balance::up", "balance::", "balance:: ", "balance|lastUpdate::"])
def test_unknown_direction_is_malformed(raw):
    with pytest.raises(MalformedQuery) as excinfo:
        parse_sort(raw)
    assert excinfo.value.capability == "sort"


def test_canonical_form_round_trip():
    spec = parse_sort("balance::+|lastUpdate-")

    assert spec.to_query() == "balance|lastUpdate-"
    assert parse_sort(spec.to_query()) == spec
