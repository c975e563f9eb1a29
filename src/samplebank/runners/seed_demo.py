from datetime import timedelta
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy.orm import Session

from samplebank.config.loader import get_sqlite_path, load_config
from samplebank.database.account_repo import find_account, save_account
from samplebank.database.event_repo import event_category, save_event
from samplebank.database.sqlite_client import session_context
from samplebank.database.transaction_repo import add_transaction
from samplebank.utils.logging import get_logger
from samplebank.utils.time import Clock, SystemClock, to_utc_z

logger = get_logger(__name__)

DEMO_ACCOUNTS = [
    {
        "reg_no": "5479",
        "account_no": "1234567",
        "name": "Student Account",
        "transactions": [
            # (days ago, amount, description)
            (40, "1000.00", "Starting balance"),
            (20, "250.00", "Salary"),
            (9, "34.50", "Starbucks Coffee"),
            (2, "120.00", "Books"),
        ],
    },
    {
        "reg_no": "5479",
        "account_no": "7654321",
        "name": "Nem Konto",
        "transactions": [
            (30, "5000.00", "Transfer"),
            (1, "99.95", "Groceries"),
        ],
    },
    {
        "reg_no": "1234",
        "account_no": "56789",
        "name": "Savings",
        "transactions": [],
    },
]


def seed_demo(session: Session, clock: Optional[Clock] = None) -> Dict[str, int]:
    """
    Insert the demo accounts, transactions and events.

    Transactions are booked relative to the clock so relative intervals
    like ``from::-14d`` always find some of them. The caller commits.

    Returns:
        Counts of the rows written
    """
    now = (clock or SystemClock()).now()
    counts = {"accounts": 0, "transactions": 0, "events": 0}

    for spec in DEMO_ACCOUNTS:
        if find_account(session, spec["reg_no"], spec["account_no"]):
            logger.info(f"Demo account {spec['reg_no']}-{spec['account_no']} already present, skipping")
            continue

        opened_at = now - timedelta(days=60)
        account, _ = save_account(session, spec["reg_no"], spec["account_no"], spec["name"], to_utc_z(opened_at))
        counts["accounts"] += 1

        for days_ago, amount, description in spec["transactions"]:
            booked_at = to_utc_z(now - timedelta(days=days_ago))
            tx = add_transaction(session, account, Decimal(amount), description, booked_at)
            save_event(
                session,
                origin=f"/accounts/{account.reg_no}-{account.account_no}/transactions/{tx.tx_id}",
                information=f"new transaction on account {account.reg_no}-{account.account_no}",
                time_utc=booked_at,
                category=event_category(account.reg_no, account.account_no),
            )
            counts["transactions"] += 1
            counts["events"] += 1

    return counts


def main() -> None:
    """Seed the configured database with demo data."""
    config = load_config()
    sqlite_path = get_sqlite_path(config)

    with session_context(sqlite_path) as session:
        counts = seed_demo(session)
        session.commit()

    logger.info(
        f"Seeded {counts['accounts']} accounts, {counts['transactions']} transactions "
        f"and {counts['events']} events into {sqlite_path}"
    )
