"""Accounts API: canonical query surface for account data.

Supported capabilities: select, sort, elements, filter, embed (list) and
filter, embed (single account). Embeddable concepts: ``transaction``
with the ``list`` (full) or ``sparse`` (links only) projection.
"""

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..capabilities import EmbedRequest, parse_embed, parse_filter
from ..database.account_repo import find_account, list_accounts as query_accounts, save_account as store_account
from ..database.transaction_repo import list_transactions as query_transactions
from ..utils.time import Clock, SystemClock, to_utc_z
from .models import AccountRecord, AccountUpdate, TransactionRecord
from .query import parse_request, time_attribute
from .representation import build_collection, build_representation, resolve_embeds


def _transaction_embeds(session: Session, account: AccountRecord) -> Dict[str, Any]:
    def resolve(projection: str) -> Optional[List[Dict[str, Any]]]:
        rows = query_transactions(session, account.reg_no, account.account_no)
        records = [TransactionRecord.from_row(row) for row in rows]
        if projection == "list":
            return [record.to_representation() for record in records]
        if projection == "sparse":
            return [{"_links": record.links()} for record in records]
        return None

    return {"transaction": resolve}


def _embedded_for(session: Session, account: AccountRecord, embed: EmbedRequest) -> Dict[str, Any]:
    if embed.is_empty:
        return {}
    return resolve_embeds(embed, _transaction_embeds(session, account))


def list_accounts(
    session: Session,
    select: Optional[str] = None,
    sort: Optional[str] = None,
    elements: Optional[str] = None,
    filter: Optional[str] = None,
    embed: Optional[str] = None,
    clock: Optional[Clock] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    List accounts shaped by the request's capabilities.

    Args:
        session: SQLAlchemy session
        select: Raw select capability (e.g. "balance::100+|balance::1000-")
        sort: Raw sort capability (e.g. "balance|lastUpdate-")
        elements: Raw elements capability (e.g. "10|30")
        filter: Raw filter capability (e.g. "balance::-|name::-")
        embed: Raw embed capability (e.g. "transaction::list")
        clock: Clock for the request (system clock if None)
        config: Service config (built-in defaults if None)

    Returns:
        Collection representation with an "accounts" list

    Raises:
        MalformedQuery: If a capability string is malformed
    """
    query = parse_request(
        {"select": select, "sort": sort, "elements": elements, "filter": filter, "embed": embed},
        AccountRecord,
        clock=clock,
        config=config,
    )
    records = [AccountRecord.from_row(row) for row in query_accounts(session)]
    page = query.apply(records, time_attribute("account", config))

    items = [
        build_representation(record, query.filter, _embedded_for(session, record, query.embed))
        for record in page
    ]
    return build_collection("accounts", "/accounts", items, total=len(records), query=query.to_params())


def get_account(
    session: Session,
    reg_no: str,
    account_no: str,
    filter: Optional[str] = None,
    embed: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Get a single account representation.

    Returns:
        Account representation, or None if not found

    Raises:
        MalformedQuery: If filter or embed is malformed
    """
    projection = parse_filter(filter, AccountRecord.vocabulary())
    embed_request = parse_embed(embed)

    row = find_account(session, reg_no, account_no)
    if not row:
        return None
    record = AccountRecord.from_row(row)
    return build_representation(record, projection, _embedded_for(session, record, embed_request))


def save_account(
    session: Session,
    reg_no: str,
    account_no: str,
    update: AccountUpdate,
    clock: Optional[Clock] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Create a new account or rename an existing one. The caller commits.

    Returns:
        (account representation, created flag)

    Raises:
        ValueError: If the path identity and the body disagree
    """
    if update.reg_no != reg_no or update.account_no != account_no:
        raise ValueError(f"Account {update.reg_no}-{update.account_no} does not match {reg_no}-{account_no}")

    now = (clock or SystemClock()).now()
    row, created = store_account(session, reg_no, account_no, update.name, to_utc_z(now))
    return AccountRecord.from_row(row).to_representation(), created
