"""Events API: canonical query surface for account events.

Supported capabilities on the lists: sort, interval, elements.
"""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..database.event_repo import find_event, list_events as query_events
from ..utils.time import Clock
from .models import EventRecord
from .query import parse_request, time_attribute
from .representation import build_collection, build_representation

EVENTS_METADATA = {
    "events": {
        "description": "This is a very simple non-persisted edition of the metadata for events on account",
        "purpose": "To show that it is easy to deliver information as part of the service and not only in the API docs",
        "supported-versions": "This is only in the current initial version 1",
    }
}


def _list(
    session: Session,
    category: Optional[str],
    sort: Optional[str],
    interval: Optional[str],
    elements: Optional[str],
    clock: Optional[Clock],
    config: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    query = parse_request(
        {"sort": sort, "interval": interval, "elements": elements},
        EventRecord,
        clock=clock,
        config=config,
    )
    records = [EventRecord.from_row(row) for row in query_events(session, category=category)]
    page = query.apply(records, time_attribute("event", config))
    href = "/account-events" if category is None else f"/account-events/{category}"
    return build_collection(
        "events",
        href,
        [build_representation(record) for record in page],
        total=len(records),
        query=query.to_params(),
    )


def list_events(
    session: Session,
    sort: Optional[str] = None,
    interval: Optional[str] = None,
    elements: Optional[str] = None,
    clock: Optional[Clock] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    List all events, in sequence order unless sorted.

    Raises:
        MalformedQuery: If a capability string is malformed
    """
    return _list(session, None, sort, interval, elements, clock, config)


def list_events_by_category(
    session: Session,
    category: str,
    sort: Optional[str] = None,
    interval: Optional[str] = None,
    elements: Optional[str] = None,
    clock: Optional[Clock] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """List the events of one category (e.g. "5479-123456")."""
    return _list(session, category, sort, interval, elements, clock, config)


def get_event(session: Session, category: str, event_id: str) -> Optional[Dict[str, Any]]:
    """Get a single event representation, or None if not found."""
    row = find_event(session, category, event_id)
    if not row:
        return None
    return build_representation(EventRecord.from_row(row))


def events_metadata() -> Dict[str, Any]:
    return {
        "metadata": EVENTS_METADATA,
        "_links": {"self": {"href": "/account-events/metadata"}},
    }
