"""Repository for events table operations."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from samplebank.database.schema import Event
from samplebank.utils.id_generator import new_event_id
from samplebank.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORY = "default"


def event_category(reg_no: str, account_no: str) -> str:
    """Category under which an account's events are published."""
    return f"{reg_no}-{account_no}"


def _next_sequence(session: Session) -> int:
    current = session.query(func.max(Event.sequence)).scalar()
    return (current or 0) + 1


def save_event(
    session: Session,
    origin: str,
    information: Optional[str],
    time_utc: str,
    category: str = DEFAULT_CATEGORY,
    event_id: Optional[str] = None,
) -> Event:
    """
    Record an event.

    Args:
        session: SQLAlchemy session
        origin: Path of the resource the event is about
        information: Human readable text
        time_utc: ISO 8601 time of the event
        category: Event category (defaults to "default")
        event_id: Optional caller-chosen id (generated if absent)

    Returns:
        Event row
    """
    event = Event(
        event_id=event_id or new_event_id(),
        category=category or DEFAULT_CATEGORY,
        origin=origin,
        information=information,
        sequence=_next_sequence(session),
        time_utc=time_utc,
    )
    session.add(event)
    session.flush()
    logger.debug(f"Created event {event.event_id} ({event.category}, seq {event.sequence})")
    return event


def list_events(session: Session, category: Optional[str] = None) -> List[Event]:
    """List events in sequence order, optionally for a single category."""
    query = session.query(Event)
    if category is not None:
        query = query.filter(Event.category == category)
    return query.order_by(Event.sequence).all()


def find_event(session: Session, category: str, event_id: str) -> Optional[Event]:
    return (
        session.query(Event)
        .filter(Event.category == category, Event.event_id == event_id)
        .first()
    )
