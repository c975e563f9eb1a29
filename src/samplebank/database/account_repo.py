"""Repository for accounts table operations."""

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from samplebank.database.schema import Account
from samplebank.utils.logging import get_logger

logger = get_logger(__name__)


def find_account(session: Session, reg_no: str, account_no: str) -> Optional[Account]:
    """Find an account by its registration and account number."""
    return (
        session.query(Account)
        .filter(Account.reg_no == reg_no, Account.account_no == account_no)
        .first()
    )


def list_accounts(session: Session) -> List[Account]:
    """
    List all accounts in canonical order (reg_no, account_no).

    The capability pipeline re-orders when the client asks for a sort.
    """
    return session.query(Account).order_by(Account.reg_no, Account.account_no).all()


def save_account(
    session: Session,
    reg_no: str,
    account_no: str,
    name: str,
    updated_at_utc: str,
) -> Tuple[Account, bool]:
    """
    Create an account or rename an existing one.

    Args:
        session: SQLAlchemy session
        reg_no: Registration number (4 digits)
        account_no: Account number
        name: Display name of the account
        updated_at_utc: ISO 8601 timestamp of the change

    Returns:
        (Account row, created flag)
    """
    existing = find_account(session, reg_no, account_no)
    if existing:
        existing.name = name
        existing.last_update_utc = updated_at_utc
        logger.debug(f"Renamed account {reg_no}-{account_no}")
        return existing, False

    account = Account(
        reg_no=reg_no,
        account_no=account_no,
        name=name,
        balance=Decimal("0.00"),
        last_update_utc=updated_at_utc,
    )
    session.add(account)
    logger.debug(f"Created account {reg_no}-{account_no}")
    return account, True
