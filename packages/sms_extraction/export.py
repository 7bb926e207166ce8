"""CSV export of stored transactions.

Rows are written with the stdlib :mod:`csv` module, so descriptions
containing commas, quotes or newlines are quoted per RFC 4180.
"""

from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import date
from typing import IO

from .models import StoredTransaction

CSV_HEADER: tuple[str, ...] = (
    "Date",
    "Amount",
    "Currency",
    "Type",
    "Category",
    "Description",
    "Sender",
)


def export_filename(today: date | None = None) -> str:
    """Return the default export file name, e.g. ``transactions_2025-10-12.csv``."""

    return f"transactions_{(today or date.today()).isoformat()}.csv"


def write_transactions_csv(records: Sequence[StoredTransaction], stream: IO[str]) -> int:
    """Write ``records`` as CSV to ``stream`` and return the row count.

    Raises ``ValueError`` when there is nothing to export.
    """

    if not records:
        raise ValueError("No transactions to export.")

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in records:
        writer.writerow(
            (
                r.date.isoformat(),
                f"{r.amount:.2f}",
                r.currency,
                r.direction.value,
                r.category,
                r.description,
                r.sender or "",
            )
        )
    return len(records)


__all__ = ["CSV_HEADER", "export_filename", "write_transactions_csv"]
