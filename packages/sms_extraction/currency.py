"""Currency token normalization.

Maps a currency symbol or code fragment captured from a message to a
canonical code. Unknown tokens fall back to their first three upper-cased
characters; that fallback is best-effort and is not validated against
ISO-4217, so ``"DIRHAM"`` becomes ``"DIR"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

DEFAULT_CURRENCY = "USD"

CURRENCY_CODES: Mapping[str, str] = MappingProxyType(
    {
        "$": "USD",
        "USD": "USD",
        "₹": "INR",
        "INR": "INR",
        "RS": "INR",
        "₵": "GHS",
        "GHS": "GHS",
        "€": "EUR",
        "EUR": "EUR",
        "£": "GBP",
        "GBP": "GBP",
    }
)


def normalize_currency(raw: str | None) -> str:
    """Return the canonical code for ``raw`` (``"USD"`` when absent)."""

    if raw is None:
        return DEFAULT_CURRENCY
    token = raw.strip().upper()
    if not token:
        return DEFAULT_CURRENCY
    known = CURRENCY_CODES.get(token)
    if known is not None:
        return known
    return token[:3]


__all__ = ["CURRENCY_CODES", "DEFAULT_CURRENCY", "normalize_currency"]
