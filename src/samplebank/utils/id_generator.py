import uuid
from datetime import UTC, datetime


def new_transaction_id() -> str:
    return f"TX-{datetime.now(UTC).strftime('%Y%m%d')}-{uuid.uuid4().hex[:8]}"


def new_event_id() -> str:
    return f"EVT-{datetime.now(UTC).strftime('%Y%m%d')}-{uuid.uuid4().hex[:8]}"
