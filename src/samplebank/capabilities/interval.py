"""Temporal capability: ``interval=from::-14d|to::now``.

Bounds are ``from``, ``to`` and ``at``. An operand is ``now``, a relative
day offset (``-14d``, ``14d`` and ``+2d``; no sign means the past) or an
absolute Unix epoch. ``at::T`` means ``from::T`` with ``to`` defaulting to
now. ``from`` alone runs up to now; ``to`` alone is open towards the past.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..utils.time import from_epoch, parse_utc, to_epoch
from .errors import MalformedQuery
from .tokenizer import Clause, join_clauses, tokenize

CAPABILITY = "interval"

KEYWORDS = ("from", "to", "at")
UNITS = {"d": timedelta(days=1)}
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_OFFSET_RE = re.compile(r"^([+-]?)(\d+)([A-Za-z]+)$")
_EPOCH_RE = re.compile(r"^\d+$")


class TemporalWindow(BaseModel):
    """Inclusive time window; a missing bound leaves that side open."""

    model_config = ConfigDict(frozen=True)

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, value: Any) -> bool:
        if self.is_unbounded:
            return True
        instant = parse_utc(value)
        if instant is None:
            return False
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True

    def to_query(self) -> str:
        parts = []
        if self.start is not None:
            parts.append(f"from::{to_epoch(self.start)}")
        if self.end is not None:
            parts.append(f"to::{to_epoch(self.end)}")
        return join_clauses(parts)


def _resolve(clause: Clause, now: datetime) -> datetime:
    operand = clause.operand.strip()
    if clause.suffix is not None or not operand:
        raise MalformedQuery(CAPABILITY, "bound needs now, an offset like -14d or an epoch", clause.to_query())
    if operand == "now":
        return now
    if _EPOCH_RE.match(operand):
        try:
            return from_epoch(int(operand))
        except (OverflowError, OSError, ValueError):
            raise MalformedQuery(CAPABILITY, "epoch out of range", clause.to_query())

    match = _OFFSET_RE.match(operand)
    if not match:
        raise MalformedQuery(CAPABILITY, "offset must be a whole number of days", clause.to_query())
    sign, amount, unit = match.groups()
    if unit not in UNITS:
        raise MalformedQuery(CAPABILITY, f"unrecognized unit '{unit}'", clause.to_query())
    try:
        offset = UNITS[unit] * int(amount)
        instant = now + offset if sign == "+" else now - offset
    except OverflowError:
        raise MalformedQuery(CAPABILITY, "offset out of range", clause.to_query())
    if instant < EPOCH:
        raise MalformedQuery(CAPABILITY, "bound is before 1970-01-01T00:00:00Z", clause.to_query())
    return instant


def capture_now(now: datetime) -> datetime:
    """
    Pin the request clock to a whole UTC second, rounding up.

    Rounding up keeps anything stamped earlier in the current second inside
    a window ending at now, and keeps every bound expressible in epoch seconds.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    if now.microsecond:
        now = now.replace(microsecond=0) + timedelta(seconds=1)
    return now


def parse_interval(raw: Optional[str], now: datetime) -> TemporalWindow:
    """
    Parse an ``interval`` capability string against a captured clock value.

    Args:
        raw: Raw query-string value
        now: The request's current instant, captured once by the caller

    Returns:
        TemporalWindow (unbounded when raw is empty)

    Raises:
        MalformedQuery: On unknown keywords, repeated bounds, unknown units,
            non-integer offsets or a window whose start is after its end
    """
    clauses = tokenize(raw, CAPABILITY)
    if not clauses:
        return TemporalWindow()

    now = capture_now(now)
    bounds: Dict[str, Clause] = {}
    for clause in clauses:
        if clause.attribute not in KEYWORDS:
            raise MalformedQuery(CAPABILITY, f"unknown bound '{clause.attribute}'", clause.to_query())
        if clause.attribute in bounds:
            raise MalformedQuery(CAPABILITY, f"bound '{clause.attribute}' given twice", clause.to_query())
        bounds[clause.attribute] = clause

    if "at" in bounds and "from" in bounds:
        raise MalformedQuery(CAPABILITY, "'at' and 'from' can't be combined", raw)

    start_clause = bounds.get("from") or bounds.get("at")
    start = _resolve(start_clause, now) if start_clause else None
    end = _resolve(bounds["to"], now) if "to" in bounds else None
    if start is not None and end is None:
        end = now

    if start is not None and end is not None and start > end:
        raise MalformedQuery(CAPABILITY, "window starts after it ends", raw)
    return TemporalWindow(start=start, end=end)
