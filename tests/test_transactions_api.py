"""Tests for the transactions API surface."""

from datetime import datetime, timezone

import pytest

from samplebank.api.events_api import list_events_by_category
from samplebank.api.models import TransactionUpdate
from samplebank.api.transactions_api import add_transaction, get_transaction, list_transactions
from samplebank.capabilities import MalformedQuery
from samplebank.config.loader import BASE_CONFIG
from samplebank.runners.seed_demo import seed_demo
from samplebank.utils.time import FixedClock


@pytest.fixture
def seeded(session, clock):
    seed_demo(session, clock)
    session.commit()
    return session


def _descriptions(result):
    return [t["description"] for t in result["transactions"]]


def test_list_all_transactions(seeded, clock):
    result = list_transactions(seeded, "5479", "1234567", clock=clock)

    assert result["count"] == 4
    assert result["_links"]["self"]["href"] == "/accounts/5479-1234567/transactions"
    assert _descriptions(result) == ["Starting balance", "Salary", "Starbucks Coffee", "Books"]


def test_interval_last_14_days(seeded, clock):
    result = list_transactions(seeded, "5479", "1234567", interval="from::-14d|to::now", clock=clock)

    assert _descriptions(result) == ["Starbucks Coffee", "Books"]
    assert result["total"] == 4


def test_interval_at_epoch(seeded, clock):
    ten_days_ago = int(datetime(2016, 10, 4, tzinfo=timezone.utc).timestamp())

    result = list_transactions(seeded, "5479", "1234567", interval=f"at::{ten_days_ago}", clock=clock)

    assert _descriptions(result) == ["Starbucks Coffee", "Books"]


def test_select_sort_elements_together(seeded, clock):
    result = list_transactions(
        seeded,
        "5479",
        "1234567",
        select="amount::100+",
        sort="amount-",
        elements="0|1",
        clock=clock,
    )

    assert _descriptions(result) == ["Starting balance", "Salary"]


def test_balance_after_each_transaction(seeded, clock):
    result = list_transactions(seeded, "5479", "1234567", sort="timestamp-", elements="0|0", clock=clock)

    assert result["transactions"][0]["balance"] == "1404.50"


def test_configured_time_attribute_is_used(seeded, clock):
    config = {**BASE_CONFIG, "capabilities": {**BASE_CONFIG["capabilities"], "time_attributes": {
        "account": "lastUpdate", "transaction": "missing", "event": "time",
    }}}

    result = list_transactions(seeded, "5479", "1234567", interval="from::-14d", clock=clock, config=config)

    assert result["count"] == 0


def test_unknown_account(seeded, clock):
    assert list_transactions(seeded, "0000", "1", clock=clock) is None


def test_malformed_interval(seeded, clock):
    with pytest.raises(MalformedQuery) as excinfo:
        list_transactions(seeded, "5479", "1234567", interval="from::-2w", clock=clock)
    assert excinfo.value.capability == "interval"


def test_filter_is_not_a_transaction_capability(seeded, clock):
    with pytest.raises(TypeError):
        list_transactions(seeded, "5479", "1234567", filter="amount::+", clock=clock)


def test_add_transaction_books_and_publishes_event(seeded, clock):
    body = add_transaction(
        seeded,
        "5479",
        "1234567",
        TransactionUpdate(description="Rent", amount="500.00"),
        tx_id="TX-RENT",
        clock=clock,
    )
    seeded.commit()

    assert body["id"] == "TX-RENT"
    assert body["balance"] == "1904.50"
    assert body["timestamp"] == "2016-10-14T00:00:00Z"
    assert get_transaction(seeded, "5479", "1234567", "TX-RENT")["amount"] == "500.00"

    events = list_events_by_category(seeded, "5479-1234567", sort="sequence-", elements="0|0", clock=clock)
    assert events["events"][0]["origin"] == "/accounts/5479-1234567/transactions/TX-RENT"


def test_add_transaction_same_id_twice(seeded, clock):
    update = TransactionUpdate(description="Rent", amount="500.00")
    add_transaction(seeded, "5479", "1234567", update, tx_id="TX-RENT", clock=clock)
    seeded.commit()

    add_transaction(seeded, "5479", "1234567", update, tx_id="TX-RENT", clock=clock)
    seeded.commit()

    result = list_transactions(seeded, "5479", "1234567", clock=clock)
    assert result["count"] == 5
    events = list_events_by_category(seeded, "5479-1234567", clock=clock)
    assert events["count"] == 5


def test_add_transaction_unknown_account(seeded, clock):
    update = TransactionUpdate(description="Rent", amount="500.00")

    assert add_transaction(seeded, "0000", "1", update, clock=clock) is None


@pytest.mark.parametrize("amount", ["-5", "1.5", "1234567890", "12,50", ""])
def test_transaction_amount_validation(amount):
    with pytest.raises(ValueError):
        TransactionUpdate(description="x", amount=amount)


def test_transaction_description_validation():
    with pytest.raises(ValueError):
        TransactionUpdate(description="", amount="1.00")
    with pytest.raises(ValueError):
        TransactionUpdate(description="x" * 257, amount="1.00")


def test_transaction_booked_this_second_is_inside_from_window(session):
    clock = FixedClock(datetime(2016, 10, 14, 12, 0, 0, 500000, tzinfo=timezone.utc))
    seed_demo(session, clock)
    add_transaction(
        session,
        "1234",
        "56789",
        TransactionUpdate(description="Deposit", amount="10.00"),
        clock=clock,
    )
    session.commit()

    result = list_transactions(session, "1234", "56789", interval="from::-1d", clock=clock)

    assert result["total"] == 1
    assert _descriptions(result) == ["Deposit"]
