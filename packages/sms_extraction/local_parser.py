"""Offline, rule-based transaction extraction.

The rule table is a closed, ordered tuple of :class:`ExtractionRule`
descriptors. :func:`parse_locally` searches the normalized message with each
rule in turn and assembles a :class:`CandidateRecord` from the first one that
matches. Later rules are never consulted once an earlier rule matched, even if
they would also match; ties resolve by declaration order.

A miss returns ``None``. That is the signal for the orchestrator to escalate
to remote extraction, not an error.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation

from .categories import classify
from .currency import normalize_currency
from .dates import extract_date
from .errors import LocalParseMiss
from .logging_setup import get_logger
from .models import (
    CandidateRecord,
    CaptureMerchant,
    Direction,
    ExtractionRule,
    FixedMerchant,
)

_logger = get_logger("sms_extraction.local_parser")

# Shared fragments: optional currency token, then the amount.
_CURRENCY = r"([A-Za-z$€£₹]+)?\s?"
_AMOUNT = r"([\d,.]+)"
_MERCHANT = r"([A-Za-z0-9\s.&]+)"

SALARY_PLACEHOLDER_MERCHANT = "Employer/Bank"


def _rule(
    name: str,
    direction: Direction,
    pattern: str,
    *,
    merchant: CaptureMerchant | FixedMerchant,
) -> ExtractionRule:
    return ExtractionRule(
        name=name,
        direction=direction,
        pattern=re.compile(pattern, re.IGNORECASE),
        currency_group=1,
        amount_group=2,
        merchant=merchant,
    )


RULES: tuple[ExtractionRule, ...] = (
    # "Paid USD 12.50 to Starbucks", "Sent $50 to John"
    _rule(
        "paid_or_sent",
        Direction.EXPENSE,
        r"(?:paid|sent|transfer|transferred)\s+"
        + _CURRENCY
        + _AMOUNT
        + r"\s+(?:to|at)\s+"
        + _MERCHANT
        + r"(?:\s+on|$)",
        merchant=CaptureMerchant(3),
    ),
    # "Transaction of $12.00 at Amazon", "Purchase of $50 at Walmart"
    _rule(
        "purchase_or_spent",
        Direction.EXPENSE,
        r"(?:transaction|purchase|spent|debited)\s+(?:(?:of|for)\s+)?"
        + _CURRENCY
        + _AMOUNT
        + r"\s+(?:at|to|on)\s+"
        + _MERCHANT,
        merchant=CaptureMerchant(3),
    ),
    # "Acct XX123 debited for $20.00 info: MCDONALDS"
    _rule(
        "debited_with_reference",
        Direction.EXPENSE,
        r"(?:debited|withdrawn)\s+(?:(?:for|of)\s+)?"
        + _CURRENCY
        + _AMOUNT
        + r"(?:.*info:|.*at|.*ref:)\s+"
        + _MERCHANT,
        merchant=CaptureMerchant(3),
    ),
    # "Received $500 from Boss", "Credited with $500 by Venmo"
    _rule(
        "received_or_credited",
        Direction.INCOME,
        r"(?:received|credited)\s+(?:with\s+)?"
        + _CURRENCY
        + _AMOUNT
        + r"\s+(?:from|by)\s+"
        + _MERCHANT,
        merchant=CaptureMerchant(3),
    ),
    # "Salary of $5000 credited"
    _rule(
        "salary_or_dividend",
        Direction.INCOME,
        r"(?:salary|dividend)\s+(?:of\s+)?" + _CURRENCY + _AMOUNT + r"\s+(?:credited|received)",
        merchant=FixedMerchant(SALARY_PLACEHOLDER_MERCHANT),
    ),
)

_TRAILING_PUNCT_RE = re.compile(r"[.,]+$")


def normalize_text(text: str) -> str:
    """Collapse line breaks to spaces and trim."""

    return re.sub(r"\r\n|\r|\n", " ", text).strip()


def _parse_amount(raw: str) -> Decimal | None:
    try:
        amount = Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def _clean_merchant(raw: str) -> str:
    return _TRAILING_PUNCT_RE.sub("", raw.strip()).strip()


def _apply_rule(
    rule: ExtractionRule, text: str, *, today: date | None
) -> CandidateRecord | None:
    match = rule.pattern.search(text)
    if match is None:
        return None

    amount = _parse_amount(match.group(rule.amount_group))
    if amount is None:
        _logger.debug("local_parser:bad_amount rule=%s", rule.name)
        return None

    currency_raw = match.group(rule.currency_group) if rule.currency_group else None
    currency = normalize_currency(currency_raw)

    if isinstance(rule.merchant, FixedMerchant):
        merchant = rule.merchant.literal
        # No real merchant capture; classify what the rule actually matched.
        category_source = match.group(0)
    else:
        merchant = _clean_merchant(match.group(rule.merchant.group) or "")
        category_source = merchant
    if not merchant:
        _logger.debug("local_parser:empty_merchant rule=%s", rule.name)
        return None

    return CandidateRecord(
        amount=amount,
        currency=currency,
        merchant=merchant,
        category=classify(category_source, rule.direction),
        direction=rule.direction,
        date=extract_date(text, today=today),
    )


def parse_locally(text: str, *, today: date | None = None) -> CandidateRecord | None:
    """Extract a record from ``text`` using the first matching rule.

    Returns ``None`` when no rule yields a usable record.
    """

    normalized = normalize_text(text)
    for rule in RULES:
        record = _apply_rule(rule, normalized, today=today)
        if record is not None:
            _logger.debug("local_parser:rule_matched rule=%s", rule.name)
            return record
    return None


def require_local_parse(text: str, *, today: date | None = None) -> CandidateRecord:
    """Like :func:`parse_locally` but raise :class:`LocalParseMiss` on a miss."""

    record = parse_locally(text, today=today)
    if record is None:
        raise LocalParseMiss()
    return record


__all__ = [
    "RULES",
    "SALARY_PLACEHOLDER_MERCHANT",
    "normalize_text",
    "parse_locally",
    "require_local_parse",
]
