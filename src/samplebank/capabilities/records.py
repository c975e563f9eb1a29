"""Record abstraction the capabilities are applied to.

Capabilities never inspect record types directly. A record only has to
answer ``attribute(name)`` for the names it exposes; anything else
returns None.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ..utils.time import parse_utc


@runtime_checkable
class Record(Protocol):
    def attribute(self, name: str) -> Any:
        ...


class AttributeBag:
    """Adapt a plain mapping to the Record protocol."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    def attribute(self, name: str) -> Any:
        return self._values.get(name)

    def as_dict(self) -> dict:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"AttributeBag({self._values!r})"


def attribute_of(record: Any, name: str) -> Any:
    """Read an attribute from a Record or a plain mapping."""
    if isinstance(record, Record):
        return record.attribute(name)
    if isinstance(record, Mapping):
        return record.get(name)
    return None


def coerce_operand(value: Any, operand: str) -> Optional[Any]:
    """
    Convert a query operand to the type of a record value.

    Returns None when the operand can't be read as that type, which the
    matchers treat as "no match".
    """
    if isinstance(value, bool):
        lowered = operand.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            number = Decimal(operand.strip())
        except InvalidOperation:
            return None
        # NaN and infinities never match; sNaN would raise on comparison
        return number if number.is_finite() else None
    if isinstance(value, datetime):
        return parse_utc(operand)
    return operand


def normalize_value(value: Any) -> Any:
    """Bring a record value to the form operands are coerced to."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, datetime):
        return parse_utc(value)
    if isinstance(value, Decimal):
        return value
    return str(value)


def compare_values(left: Any, right: Any) -> int:
    """
    Three-way comparison giving a total order over record values.

    None sorts before everything else. Values that don't compare with each
    other fall back to their string forms.
    """
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    left = normalize_value(left)
    right = normalize_value(right)
    try:
        if left < right:
            return -1
        if left > right:
            return 1
        return 0
    except (TypeError, InvalidOperation):
        left_text, right_text = str(left), str(right)
        return (left_text > right_text) - (left_text < right_text)
