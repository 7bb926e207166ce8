from __future__ import annotations

import pytest

from sms_extraction.categories import (
    classify,
    coerce_category,
    is_known_category,
    match_category,
)
from sms_extraction.models import CATEGORIES, Direction


@pytest.mark.parametrize(
    "merchant, expected",
    [
        ("UBER TRIP", "Transport"),
        ("Shell Station", "Transport"),
        ("Joe's Pizza", "Food & Dining"),
        ("Starbucks", "Food & Dining"),
        ("Whole Foods Market", "Food & Dining"),
        ("Walmart", "Shopping"),
        ("Spotify", "Entertainment"),
        ("CVS", "Health"),
        ("City Water Board", "Utilities"),
        ("Amazon", "Other"),
    ],
)
def test_expense_keywords(merchant, expected):
    assert classify(merchant, Direction.EXPENSE) == expected


def test_expense_groups_are_checked_in_priority_order():
    # Both transport ("uber") and food ("food") keywords; transport comes first
    assert classify("Uber Food", Direction.EXPENSE) == "Transport"


@pytest.mark.parametrize(
    "merchant, expected",
    [
        ("ACME PAYROLL", "Salary"),
        ("Monthly salary", "Salary"),
        ("Savings interest", "Investment"),
        ("Amazon refund", "Other"),
        ("Boss", "Other"),
    ],
)
def test_income_keywords(merchant, expected):
    assert classify(merchant, Direction.INCOME) == expected


def test_income_and_expense_keywords_do_not_mix():
    assert classify("salary", Direction.EXPENSE) == "Other"
    assert classify("uber", Direction.INCOME) == "Other"


def test_classify_always_returns_member_of_fixed_set():
    for direction in Direction:
        for merchant in ("", "???", "Lyft", "payroll"):
            assert classify(merchant, direction) in CATEGORIES


def test_match_and_coerce_category():
    assert match_category("food & dining") == "Food & Dining"
    assert match_category("  transport ") == "Transport"
    assert match_category("Groceries") is None
    assert match_category(None) is None
    assert coerce_category("Groceries") == "Other"
    assert coerce_category("SALARY") == "Salary"
    assert is_known_category("Health")
    assert not is_known_category("health")
