from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from sms_extraction.errors import LocalParseMiss
from sms_extraction.local_parser import (
    RULES,
    SALARY_PLACEHOLDER_MERCHANT,
    normalize_text,
    parse_locally,
    require_local_parse,
)
from sms_extraction.models import Direction

TODAY = date(2025, 3, 15)


def test_rule_table_order_is_fixed():
    assert [r.name for r in RULES] == [
        "paid_or_sent",
        "purchase_or_spent",
        "debited_with_reference",
        "received_or_credited",
        "salary_or_dividend",
    ]


@pytest.mark.parametrize(
    "text, amount, currency, merchant, category, direction",
    [
        (
            "Paid $12.50 to Starbucks on 12-Oct",
            Decimal("12.50"),
            "USD",
            "Starbucks",
            "Food & Dining",
            Direction.EXPENSE,
        ),
        (
            "Transaction of $12.00 at Amazon",
            Decimal("12.00"),
            "USD",
            "Amazon",
            "Other",
            Direction.EXPENSE,
        ),
        (
            "Acct XX123 debited for $20.00 info: MCDONALDS",
            Decimal("20.00"),
            "USD",
            "MCDONALDS",
            "Food & Dining",
            Direction.EXPENSE,
        ),
        (
            "Received ₹500 from Boss",
            Decimal("500"),
            "INR",
            "Boss",
            "Other",
            Direction.INCOME,
        ),
        (
            "Salary of $5000 credited",
            Decimal("5000"),
            "USD",
            SALARY_PLACEHOLDER_MERCHANT,
            "Salary",
            Direction.INCOME,
        ),
    ],
)
def test_each_rule_extracts_expected_fields(text, amount, currency, merchant, category, direction):
    rec = parse_locally(text, today=TODAY)
    assert rec is not None
    assert rec.amount == amount
    assert rec.currency == currency
    assert rec.merchant == merchant
    assert rec.category == category
    assert rec.direction is direction


def test_date_from_message_uses_reference_year():
    rec = parse_locally("Paid $12.50 to Starbucks on 12-Oct", today=TODAY)
    assert rec is not None
    assert rec.date == "2025-10-12"


def test_missing_date_falls_back_to_today():
    rec = parse_locally("Received ₹500 from Boss", today=TODAY)
    assert rec is not None
    assert rec.date == "2025-03-15"


def test_thousands_separators_are_stripped():
    rec = parse_locally("Paid INR 1,250.00 to Big Bazaar", today=TODAY)
    assert rec is not None
    assert rec.amount == Decimal("1250.00")
    assert rec.currency == "INR"
    assert rec.merchant == "Big Bazaar"


def test_trailing_punctuation_is_stripped_from_merchant():
    rec = parse_locally("Spent EUR 40 at Corner Pharmacy.", today=TODAY)
    assert rec is not None
    assert rec.merchant == "Corner Pharmacy"
    assert rec.currency == "EUR"
    assert rec.category == "Health"


def test_line_breaks_are_normalized_before_matching():
    rec = parse_locally("Paid $5\nto Uber", today=TODAY)
    assert rec is not None
    assert rec.merchant == "Uber"
    assert rec.category == "Transport"
    assert normalize_text("  a\r\nb\rc\n ") == "a b c"


def test_first_matching_rule_wins():
    # Rule 1 (paid/sent) matches before rule 2 could pick up "purchase of 9"
    rec = parse_locally("Sent 25 to Lyft purchase of 9 at Cafe", today=TODAY)
    assert rec is not None
    assert rec.amount == Decimal("25")
    assert rec.merchant == "Lyft purchase of 9 at Cafe"
    assert rec.category == "Transport"


def test_case_insensitive_keywords():
    rec = parse_locally("PAID $3 TO NETFLIX", today=TODAY)
    assert rec is not None
    assert rec.category == "Entertainment"


def test_unparseable_amount_is_a_miss():
    assert parse_locally("Paid ... to Nobody", today=TODAY) is None


def test_zero_amount_is_a_miss():
    assert parse_locally("Paid $0 to Nobody", today=TODAY) is None


def test_no_rule_matches_returns_none():
    assert parse_locally("asdkjasd random text", today=TODAY) is None


def test_parsing_is_deterministic():
    text = "Purchase of $50 at Walmart"
    first = parse_locally(text, today=TODAY)
    second = parse_locally(text, today=TODAY)
    assert first == second
    assert first is not None
    assert first.category == "Shopping"


def test_require_local_parse_raises_on_miss():
    with pytest.raises(LocalParseMiss):
        require_local_parse("hello there", today=TODAY)
