"""Repository for transactions table operations."""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from samplebank.database.schema import Account, Transaction
from samplebank.utils.id_generator import new_transaction_id
from samplebank.utils.logging import get_logger

logger = get_logger(__name__)


def list_transactions(session: Session, reg_no: str, account_no: str) -> List[Transaction]:
    """List an account's transactions in booking order."""
    return (
        session.query(Transaction)
        .filter(Transaction.reg_no == reg_no, Transaction.account_no == account_no)
        .order_by(Transaction.booked_at_utc, Transaction.tx_id)
        .all()
    )


def find_transaction(session: Session, reg_no: str, account_no: str, tx_id: str) -> Optional[Transaction]:
    return (
        session.query(Transaction)
        .filter(
            Transaction.reg_no == reg_no,
            Transaction.account_no == account_no,
            Transaction.tx_id == tx_id,
        )
        .first()
    )


def add_transaction(
    session: Session,
    account: Account,
    amount: Decimal,
    description: str,
    booked_at_utc: str,
    tx_id: Optional[str] = None,
) -> Transaction:
    """
    Book a transaction on an account and update the account balance.

    Transactions are immutable once booked; an existing tx_id is returned
    unchanged.

    Args:
        session: SQLAlchemy session
        account: Account row the transaction is booked on
        amount: Transaction amount
        description: Human readable description
        booked_at_utc: ISO 8601 booking time
        tx_id: Optional caller-chosen id (generated if absent)

    Returns:
        Transaction row
    """
    if tx_id:
        existing = find_transaction(session, account.reg_no, account.account_no, tx_id)
        if existing:
            logger.debug(f"Transaction already exists: {tx_id}")
            return existing

    balance = Decimal(account.balance or 0) + amount
    tx = Transaction(
        tx_id=tx_id or new_transaction_id(),
        reg_no=account.reg_no,
        account_no=account.account_no,
        amount=amount,
        description=description,
        balance_after=balance,
        booked_at_utc=booked_at_utc,
    )
    account.balance = balance
    account.last_update_utc = booked_at_utc

    session.add(tx)
    logger.debug(f"Booked transaction {tx.tx_id} on {account.reg_no}-{account.account_no}")
    return tx
