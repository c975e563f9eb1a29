from sqlalchemy import (
    Column,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Account(Base):
    __tablename__ = "accounts"

    reg_no = Column(String, primary_key=True)  # 4 digits
    account_no = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    last_update_utc = Column(String, nullable=False)  # ISO 8601 string


class Transaction(Base):
    __tablename__ = "transactions"

    tx_id = Column(String, primary_key=True)
    reg_no = Column(String, nullable=False)
    account_no = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String, nullable=False)
    balance_after = Column(Numeric(14, 2), nullable=True)  # account balance once posted
    booked_at_utc = Column(String, nullable=False, index=True)  # ISO 8601 string

    __table_args__ = (
        Index("idx_transactions_account", "reg_no", "account_no"),
    )


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String, primary_key=True)
    category = Column(String, nullable=False, index=True)  # "<regNo>-<accountNo>" or "default"
    origin = Column(String, nullable=False)  # path of the resource that caused the event
    information = Column(Text, nullable=True)
    sequence = Column(Integer, nullable=False, index=True)
    time_utc = Column(String, nullable=False)  # ISO 8601 string


def create_all(engine_url: str) -> None:
    engine = create_engine(engine_url)
    Base.metadata.create_all(engine)
