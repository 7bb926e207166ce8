"""Best-effort date extraction from message text.

Looks for a ``<day><sep><month>[<sep><year>]`` fragment where ``sep`` is ``-``
or ``/`` and the month is a 3-letter English abbreviation or a 2-digit number.
The first number is always read as the day; ``03-04`` is the 3rd of April
regardless of locale. When no fragment is found, or the parts do not form a
real calendar date, today's date is returned instead.
"""

from __future__ import annotations

import re
from datetime import date

_DATE_FRAGMENT_RE = re.compile(r"(\d{1,2})[-/]([A-Za-z]{3}|\d{2})(?:[-/](\d{2,4}))?")

_MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)


def _month_number(token: str) -> int | None:
    if token.isdigit():
        return int(token)
    try:
        return _MONTH_ABBREVIATIONS.index(token.lower()) + 1
    except ValueError:
        return None


def _year_number(token: str | None, fallback: int) -> int:
    if token is None:
        return fallback
    if len(token) == 2:
        return 2000 + int(token)
    return int(token)


def extract_date(text: str, *, today: date | None = None) -> str:
    """Return the ISO date found in ``text``, or today's date.

    Parameters
    ----------
    text:
        Message text to scan. Only the first date-like fragment is used.
    today:
        Reference date for the missing-year substitution and the fallback.
        Defaults to :meth:`datetime.date.today` (local clock).
    """

    ref = today or date.today()
    match = _DATE_FRAGMENT_RE.search(text)
    if match is None:
        return ref.isoformat()

    day_raw, month_raw, year_raw = match.groups()
    month = _month_number(month_raw)
    if month is None:
        return ref.isoformat()
    try:
        found = date(_year_number(year_raw, ref.year), month, int(day_raw))
    except ValueError:
        return ref.isoformat()
    return found.isoformat()


__all__ = ["extract_date"]
