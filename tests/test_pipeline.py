"""Tests for the capability pipeline."""

from datetime import datetime, timedelta, timezone

import pytest

from samplebank.capabilities import (
    AttributeBag,
    MalformedQuery,
    apply,
    parse_elements,
    parse_interval,
    parse_query,
    parse_select,
    parse_sort,
)

NOW = datetime(2016, 10, 14, tzinfo=timezone.utc)


def _transactions(count=40):
    return [
        AttributeBag({
            "id": f"tx{i:02d}",
            "amount": (i * 7) % 10,
            "timestamp": NOW - timedelta(days=i),
        })
        for i in range(count)
    ]


def _ids(records):
    return [r.attribute("id") for r in records]


def test_no_capabilities_returns_copy():
    records = _transactions(3)

    result = apply(records)

    assert result == records
    assert result is not records


def test_order_is_select_interval_sort_elements():
    records = _transactions()

    result = apply(
        records,
        select=parse_select("amount::5+"),
        interval=parse_interval("from::-14d|to::now", NOW),
        sort=parse_sort("amount-|id"),
        elements=parse_elements("0|2"),
        time_attribute="timestamp",
    )

    expected_pool = [
        r for r in records
        if r.attribute("amount") >= 5 and r.attribute("timestamp") >= NOW - timedelta(days=14)
    ]
    expected = sorted(expected_pool, key=lambda r: (-r.attribute("amount"), r.attribute("id")))[:3]
    assert _ids(result) == _ids(expected)


def test_elements_applied_after_sort():
    records = _transactions(10)

    result = apply(records, sort=parse_sort("id-"), elements=parse_elements("0|1"))

    assert _ids(result) == ["tx09", "tx08"]


def test_interval_needs_time_attribute():
    records = _transactions(20)
    window = parse_interval("from::-5d", NOW)

    assert len(apply(records, interval=window)) == 20
    assert len(apply(records, interval=window, time_attribute="timestamp")) == 6


def test_input_is_not_mutated():
    records = _transactions(5)
    before = _ids(records)

    apply(records, sort=parse_sort("id-"), elements=parse_elements("0|1"))

    assert _ids(records) == before


def test_parse_query_collects_all_capabilities():
    query = parse_query(
        {
            "select": "amount::1|amount::2",
            "sort": "timestamp-",
            "interval": "from::-14d|to::now",
            "elements": "0|9",
            "filter": "amount::+",
            "embed": "account::sparse",
            "unrelated": "ignored",
        },
        NOW,
        vocabulary=["id", "amount", "timestamp"],
    )

    assert not query.select.is_empty
    assert query.elements.size == 10
    assert query.filter.include == ("amount",)
    assert query.embed.concepts() == ["account"]

    result = query.apply(_transactions(), time_attribute="timestamp")
    assert all(r.attribute("amount") in (1, 2) for r in result)
    assert [r.attribute("timestamp") for r in result] == sorted(
        (r.attribute("timestamp") for r in result), reverse=True
    )


def test_parse_query_checks_vocabulary():
    with pytest.raises(MalformedQuery):
        parse_query({"sort": "owner"}, NOW, vocabulary=["id", "amount"])


def test_parse_query_respects_max_elements():
    query = parse_query({"elements": "0|100"}, NOW, max_elements=10)

    assert query.elements.end == 9


def test_canonical_params_reparse_to_equal_query():
    query = parse_query(
        {
            "select": "amount::3+|amount::8-",
            "sort": "amount::-|id",
            "interval": "from::-14d",
            "elements": "5|15",
            "filter": "id::-",
            "embed": "account::sparse",
        },
        NOW,
    )

    params = query.to_params()

    assert params["sort"] == "amount-|id"
    assert parse_query(params, NOW) == query


def test_to_params_omits_absent_capabilities():
    assert parse_query({"sort": "id"}, NOW).to_params() == {"sort": "id"}
