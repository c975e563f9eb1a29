"""Transactions API: canonical query surface for account transactions.

Supported capabilities on the list: select, sort, interval, elements.
Transactions are immutable once booked.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..database.account_repo import find_account
from ..database.event_repo import event_category, save_event
from ..database.transaction_repo import add_transaction as book_transaction
from ..database.transaction_repo import find_transaction, list_transactions as query_transactions
from ..utils.logging import get_logger
from ..utils.time import Clock, SystemClock, to_utc_z
from .models import TransactionRecord, TransactionUpdate
from .query import parse_request, time_attribute
from .representation import build_collection, build_representation

logger = get_logger(__name__)


def list_transactions(
    session: Session,
    reg_no: str,
    account_no: str,
    select: Optional[str] = None,
    sort: Optional[str] = None,
    interval: Optional[str] = None,
    elements: Optional[str] = None,
    clock: Optional[Clock] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    List an account's transactions shaped by the request's capabilities.

    Args:
        session: SQLAlchemy session
        reg_no: Registration number of the account
        account_no: Account number
        select: Raw select capability (e.g. "amount::100+")
        sort: Raw sort capability (e.g. "timestamp-")
        interval: Raw interval capability (e.g. "from::-14d|to::now")
        elements: Raw elements capability (e.g. "0|49")
        clock: Clock for the request (system clock if None)
        config: Service config (built-in defaults if None)

    Returns:
        Collection representation with a "transactions" list, or None if
        the account doesn't exist

    Raises:
        MalformedQuery: If a capability string is malformed
    """
    query = parse_request(
        {"select": select, "sort": sort, "interval": interval, "elements": elements},
        TransactionRecord,
        clock=clock,
        config=config,
    )
    if not find_account(session, reg_no, account_no):
        return None

    records = [TransactionRecord.from_row(row) for row in query_transactions(session, reg_no, account_no)]
    page = query.apply(records, time_attribute("transaction", config))
    return build_collection(
        "transactions",
        f"/accounts/{reg_no}-{account_no}/transactions",
        [build_representation(record) for record in page],
        total=len(records),
        query=query.to_params(),
    )


def get_transaction(session: Session, reg_no: str, account_no: str, tx_id: str) -> Optional[Dict[str, Any]]:
    """Get a single transaction representation, or None if not found."""
    row = find_transaction(session, reg_no, account_no, tx_id)
    if not row:
        return None
    return build_representation(TransactionRecord.from_row(row))


def add_transaction(
    session: Session,
    reg_no: str,
    account_no: str,
    update: TransactionUpdate,
    tx_id: Optional[str] = None,
    clock: Optional[Clock] = None,
) -> Optional[Dict[str, Any]]:
    """
    Book a transaction and publish an event for it. The caller commits.

    Returns:
        Transaction representation, or None if the account doesn't exist
    """
    account = find_account(session, reg_no, account_no)
    if not account:
        logger.warning(f"Account not found: {reg_no}-{account_no}")
        return None

    if tx_id:
        existing = find_transaction(session, reg_no, account_no, tx_id)
        if existing:
            return build_representation(TransactionRecord.from_row(existing))

    booked_at = to_utc_z((clock or SystemClock()).now())
    row = book_transaction(session, account, Decimal(update.amount), update.description, booked_at, tx_id=tx_id)
    record = TransactionRecord.from_row(row)
    save_event(
        session,
        origin=record.self_href(),
        information=f"new transaction on account {reg_no}-{account_no}",
        time_utc=booked_at,
        category=event_category(reg_no, account_no),
    )
    return build_representation(record)
