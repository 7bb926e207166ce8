"""Keyword-based category classification.

Classification is plain case-insensitive substring containment against small
keyword groups. Expense groups are checked in their declared order and the
first group with a hit wins; nothing is scored.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import CATEGORIES, FALLBACK_CATEGORY, Direction

# (category, keywords) in priority order
_INCOME_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Salary", ("salary", "payroll")),
    # Refunds are income but not earnings
    (FALLBACK_CATEGORY, ("refund", "return")),
    ("Investment", ("interest",)),
)

_EXPENSE_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Transport", ("uber", "lyft", "fuel", "shell", "metro")),
    (
        "Food & Dining",
        ("food", "burger", "pizza", "cafe", "coffee", "starbucks", "mcdonald"),
    ),
    ("Shopping", ("market", "mart", "grocery", "whole foods")),
    ("Entertainment", ("netflix", "spotify", "cinema")),
    ("Health", ("pharmacy", "doctor", "hospital", "cvs")),
    ("Utilities", ("electric", "water", "bill", "mobile")),
)


def _first_group_hit(
    text: str, groups: Sequence[tuple[str, tuple[str, ...]]]
) -> str | None:
    for category, keywords in groups:
        if any(k in text for k in keywords):
            return category
    return None


def classify(merchant: str, direction: Direction) -> str:
    """Return the category for ``merchant`` given the transaction ``direction``."""

    lowered = merchant.lower()
    groups = _INCOME_GROUPS if direction is Direction.INCOME else _EXPENSE_GROUPS
    return _first_group_hit(lowered, groups) or FALLBACK_CATEGORY


def is_known_category(value: str | None) -> bool:
    return value is not None and value in CATEGORIES


def match_category(value: str | None) -> str | None:
    """Return the category in the fixed set equal to ``value`` ignoring case."""

    if value is None:
        return None
    wanted = value.strip().casefold()
    for category in CATEGORIES:
        if category.casefold() == wanted:
            return category
    return None


def coerce_category(value: str | None) -> str:
    """Like :func:`match_category`, but unknown or blank values become ``Other``."""

    return match_category(value) or FALLBACK_CATEGORY


__all__ = [
    "CATEGORIES",
    "classify",
    "coerce_category",
    "is_known_category",
    "match_category",
]
