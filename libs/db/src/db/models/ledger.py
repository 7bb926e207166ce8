from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_PK_TYPE = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: sms_transactions
# ---------------------------


class SmsTransaction(Base):
    __tablename__ = "sms_transactions"

    # Internal surrogate key; also the insertion order used for newest-first listing.
    pk: Mapped[int] = mapped_column(_PK_TYPE, primary_key=True, autoincrement=True)
    # Opaque identifier handed to callers (UUID4 string).
    public_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(CHAR(3), nullable=False, server_default=text("'USD'"))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    direction: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    # Original message text, kept for re-parsing and audits.
    raw_sms: Mapped[str | None] = mapped_column(Text, nullable=True)
    sender: Mapped[str | None] = mapped_column(String, nullable=True)
    source: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'manual'"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        CheckConstraint("direction in ('income','expense')", name="ck_sms_tx_direction"),
        CheckConstraint("source in ('local','remote','manual')", name="ck_sms_tx_source"),
        CheckConstraint("amount > 0", name="ck_sms_tx_amount_positive"),
    )


# ---------------------------
# Reference: sms_sender_rules
# ---------------------------


class SmsSenderRule(Base):
    __tablename__ = "sms_sender_rules"

    pk: Mapped[int] = mapped_column(_PK_TYPE, primary_key=True, autoincrement=True)
    public_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    # Matched case-insensitively against the message sender by the extraction core.
    sender_name: Mapped[str] = mapped_column(String, nullable=False)
    auto_process: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    default_category: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


__all__ = [
    "Base",
    "SmsSenderRule",
    "SmsTransaction",
]
