"""Record models and request DTOs for the API layer.

Record models expose a fixed public attribute vocabulary (the names
clients use in select/sort/filter) through ``attribute(name)`` so the
capability engine can work on them without knowing their types.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.time import parse_utc, to_utc_z

if TYPE_CHECKING:
    from ..database.schema import Account, Event, Transaction


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return to_utc_z(value)
    return value


def _stored_time(value: Optional[str]) -> datetime:
    parsed = parse_utc(value)
    if parsed is None:
        raise ValueError(f"Stored timestamp is not ISO 8601: {value!r}")
    return parsed


class RecordModel(BaseModel):
    """Base for records the capability engine is applied to."""

    model_config = ConfigDict(frozen=True)

    # public attribute name -> model field
    ATTRIBUTES: ClassVar[Dict[str, str]] = {}

    @classmethod
    def vocabulary(cls) -> List[str]:
        return list(cls.ATTRIBUTES)

    def attribute(self, name: str) -> Any:
        field = self.ATTRIBUTES.get(name)
        if field is None:
            return None
        return getattr(self, field)

    def self_href(self) -> str:
        raise NotImplementedError

    def links(self) -> Dict[str, Dict[str, str]]:
        return {"self": {"href": self.self_href()}}

    def to_representation(self) -> Dict[str, Any]:
        """Public attributes plus HAL ``_links``."""
        body = {name: _json_value(self.attribute(name)) for name in self.ATTRIBUTES}
        body["_links"] = self.links()
        return body


class AccountRecord(RecordModel):
    ATTRIBUTES: ClassVar[Dict[str, str]] = {
        "regNo": "reg_no",
        "accountNo": "account_no",
        "name": "name",
        "balance": "balance",
        "lastUpdate": "last_update",
    }

    reg_no: str
    account_no: str
    name: str
    balance: Decimal
    last_update: datetime

    @classmethod
    def from_row(cls, row: "Account") -> "AccountRecord":
        return cls(
            reg_no=row.reg_no,
            account_no=row.account_no,
            name=row.name,
            balance=Decimal(row.balance or 0),
            last_update=_stored_time(row.last_update_utc),
        )

    def self_href(self) -> str:
        return f"/accounts/{self.reg_no}-{self.account_no}"

    def links(self) -> Dict[str, Dict[str, str]]:
        return {
            "self": {"href": self.self_href()},
            "transactions": {"href": f"{self.self_href()}/transactions"},
        }


class TransactionRecord(RecordModel):
    ATTRIBUTES: ClassVar[Dict[str, str]] = {
        "id": "tx_id",
        "amount": "amount",
        "description": "description",
        "balance": "balance",
        "timestamp": "timestamp",
    }

    tx_id: str
    reg_no: str
    account_no: str
    amount: Decimal
    description: str
    balance: Optional[Decimal] = None
    timestamp: datetime

    @classmethod
    def from_row(cls, row: "Transaction") -> "TransactionRecord":
        return cls(
            tx_id=row.tx_id,
            reg_no=row.reg_no,
            account_no=row.account_no,
            amount=Decimal(row.amount),
            description=row.description,
            balance=Decimal(row.balance_after) if row.balance_after is not None else None,
            timestamp=_stored_time(row.booked_at_utc),
        )

    def self_href(self) -> str:
        return f"/accounts/{self.reg_no}-{self.account_no}/transactions/{self.tx_id}"


class EventRecord(RecordModel):
    ATTRIBUTES: ClassVar[Dict[str, str]] = {
        "id": "event_id",
        "category": "category",
        "origin": "origin",
        "information": "information",
        "sequence": "sequence",
        "time": "time",
    }

    event_id: str
    category: str
    origin: str
    information: Optional[str] = None
    sequence: int
    time: datetime

    @classmethod
    def from_row(cls, row: "Event") -> "EventRecord":
        return cls(
            event_id=row.event_id,
            category=row.category,
            origin=row.origin,
            information=row.information,
            sequence=row.sequence,
            time=_stored_time(row.time_utc),
        )

    def self_href(self) -> str:
        return f"/account-events/{self.category}/{self.event_id}"

    def links(self) -> Dict[str, Dict[str, str]]:
        return {
            "self": {"href": self.self_href()},
            "origin": {"href": self.origin},
        }


class AccountUpdate(BaseModel):
    """Input for creating or renaming an account."""
    reg_no: str = Field(..., pattern=r"^[0-9]{4}$")
    account_no: str = Field(..., pattern=r"^[0-9]+$")
    name: str = Field(..., min_length=1, max_length=256)


class TransactionUpdate(BaseModel):
    """Input for booking a transaction."""
    description: str = Field(..., min_length=1, max_length=256, description="Human readable description")
    amount: str = Field(..., pattern=r"^[0-9]{1,9}(\.[0-9]{2})?$", description="Amount without currency, e.g. 123.45")
