"""Data models for ``sms_extraction``.

Frozen dataclasses describe everything that flows through the extraction
pipeline: rule descriptors, the candidate record a parse produces, the sender
rules read from the record store, and the result wrapper returned by the
orchestrator. None of these are mutated after construction; a sender-rule
category override builds a new record with :func:`dataclasses.replace`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transport",
    "Shopping",
    "Utilities",
    "Entertainment",
    "Health",
    "Salary",
    "Investment",
    "Transfer",
    "Other",
)
"""The fixed category set. ``Other`` is the universal fallback."""

FALLBACK_CATEGORY = "Other"


class Direction(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class Provenance(StrEnum):
    """Which source produced an extracted record."""

    LOCAL = "local"
    REMOTE = "remote"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# Extraction rule descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CaptureMerchant:
    """Read the merchant from capture group ``group`` of the rule pattern."""

    group: int


@dataclass(frozen=True, slots=True)
class FixedMerchant:
    """Use ``literal`` as the merchant; the rule has no merchant capture."""

    literal: str


type MerchantSource = CaptureMerchant | FixedMerchant


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    """One ordered entry of the local parser's rule table.

    Attributes
    ----------
    name:
        Short identifier used in logs and tests.
    direction:
        Direction every match of this rule is assigned.
    pattern:
        Compiled, case-insensitive pattern searched against normalized text.
    amount_group:
        Capture group holding the numeric amount.
    merchant:
        Where the merchant comes from (capture group or fixed placeholder).
    currency_group:
        Optional capture group holding a currency symbol or code.
    """

    name: str
    direction: Direction
    pattern: re.Pattern[str]
    amount_group: int
    merchant: MerchantSource
    currency_group: int | None = None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CandidateRecord:
    """A transaction extracted from one message.

    ``date`` is an ISO ``YYYY-MM-DD`` string. ``currency`` is normally a
    3-letter code, but unknown tokens shorter than three characters pass
    through the lossy fallback unchanged.
    """

    amount: Decimal
    currency: str
    merchant: str
    category: str
    direction: Direction
    date: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount > 0:
            raise ValueError(f"CandidateRecord.amount must be a positive Decimal: {self.amount!r}")
        if not self.currency:
            raise ValueError("CandidateRecord.currency must be non-empty")
        if not self.merchant or self.merchant != self.merchant.strip():
            raise ValueError(
                f"CandidateRecord.merchant must be non-empty and trimmed: {self.merchant!r}"
            )
        if self.category not in CATEGORIES:
            raise ValueError(f"CandidateRecord.category is not a known category: {self.category!r}")
        # Raises ValueError for malformed dates
        date.fromisoformat(self.date)

    def as_dict(self) -> dict[str, str]:
        return {
            "amount": f"{self.amount}",
            "currency": self.currency,
            "merchant": self.merchant,
            "category": self.category,
            "direction": self.direction.value,
            "date": self.date,
        }


@dataclass(frozen=True, slots=True)
class SenderRule:
    """A per-sender rule owned by the record store.

    ``sender_name`` is matched case-insensitively against the message sender.
    When ``default_category`` is set it replaces the extracted category.
    ``auto_process`` marks senders whose messages are saved without review.
    """

    id: str
    sender_name: str
    auto_process: bool = True
    default_category: str | None = None

    def matches(self, sender: str | None) -> bool:
        if not sender:
            return False
        return self.sender_name.casefold() == sender.casefold()


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Orchestrator output: the record plus where it came from."""

    record: CandidateRecord
    provenance: Provenance
    sender_rule: SenderRule | None = None


@dataclass(frozen=True, slots=True)
class StoredTransaction:
    """A transaction as persisted by the record store."""

    id: str
    amount: Decimal
    currency: str
    description: str
    category: str
    direction: Direction
    date: date
    raw_sms: str | None
    sender: str | None
    source: Provenance
    created_at: datetime | None = None


__all__ = [
    "CATEGORIES",
    "FALLBACK_CATEGORY",
    "CandidateRecord",
    "CaptureMerchant",
    "Direction",
    "ExtractionResult",
    "ExtractionRule",
    "FixedMerchant",
    "MerchantSource",
    "Provenance",
    "SenderRule",
    "StoredTransaction",
]
