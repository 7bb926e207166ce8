from __future__ import annotations

from datetime import date

import pytest

from sms_extraction.currency import DEFAULT_CURRENCY, normalize_currency
from sms_extraction.dates import extract_date

TODAY = date(2025, 6, 1)


# ---- Currency ---------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$", "USD"),
        ("usd", "USD"),
        ("₹", "INR"),
        ("Rs", "INR"),
        (" inr ", "INR"),
        ("₵", "GHS"),
        ("GHS", "GHS"),
        ("€", "EUR"),
        ("£", "GBP"),
        ("gbp", "GBP"),
    ],
)
def test_known_tokens_map_to_codes(raw, expected):
    assert normalize_currency(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_absent_token_defaults_to_usd(raw):
    assert normalize_currency(raw) == DEFAULT_CURRENCY == "USD"


def test_unknown_token_truncates_to_three_letters():
    assert normalize_currency("dirham") == "DIR"
    assert normalize_currency("jpy") == "JPY"


def test_short_unknown_token_passes_through():
    assert normalize_currency("x") == "X"


# ---- Dates ------------------------------------------------------------------


def test_day_and_month_abbreviation_use_reference_year():
    assert extract_date("Paid $12.50 to Starbucks on 12-Oct", today=TODAY) == "2025-10-12"


def test_month_abbreviation_is_case_insensitive():
    assert extract_date("on 3/MAR", today=TODAY) == "2025-03-03"


def test_numeric_month_with_two_digit_year():
    assert extract_date("txn on 05/11/24 at ATM", today=TODAY) == "2024-11-05"


def test_numeric_month_with_four_digit_year():
    assert extract_date("dated 09-02-2023", today=TODAY) == "2023-02-09"


def test_first_number_is_always_the_day():
    assert extract_date("on 03-04", today=TODAY) == "2025-04-03"


def test_no_date_fragment_returns_today():
    assert extract_date("Received $5 from Mom", today=TODAY) == "2025-06-01"


@pytest.mark.parametrize("text", ["on 31-02-2025", "on 12-13", "on 12-Foo"])
def test_invalid_calendar_date_returns_today(text):
    assert extract_date(text, today=TODAY) == "2025-06-01"


def test_defaults_to_system_today():
    assert extract_date("no date here") == date.today().isoformat()
