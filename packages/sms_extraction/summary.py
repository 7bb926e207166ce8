"""Income/expense totals over the current month or year.

Amounts are summed as-is across currencies; there is no conversion.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal

from .models import Direction, StoredTransaction

type Period = Literal["month", "year"]


@dataclass(frozen=True, slots=True)
class PeriodSummary:
    period: Period
    start: date
    total_income: Decimal
    total_expense: Decimal
    transaction_count: int
    # (category, total) pairs, largest first
    expense_by_category: tuple[tuple[str, Decimal], ...] = field(default=())

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


def _in_period(d: date, period: Period, today: date) -> bool:
    if period == "month":
        return d.year == today.year and d.month == today.month
    return d.year == today.year


def summarize(
    records: Iterable[StoredTransaction],
    *,
    period: Period = "month",
    today: date | None = None,
) -> PeriodSummary:
    """Summarize ``records`` dated within the current ``period``."""

    if period not in ("month", "year"):
        raise ValueError(f"period must be 'month' or 'year', got {period!r}")
    ref = today or date.today()

    income = Decimal("0")
    expense = Decimal("0")
    count = 0
    by_category: dict[str, Decimal] = {}
    for r in records:
        if not _in_period(r.date, period, ref):
            continue
        count += 1
        if r.direction is Direction.INCOME:
            income += r.amount
        else:
            expense += r.amount
            by_category[r.category] = by_category.get(r.category, Decimal("0")) + r.amount

    ranked = tuple(sorted(by_category.items(), key=lambda kv: (-kv[1], kv[0])))
    start = ref.replace(day=1) if period == "month" else ref.replace(month=1, day=1)
    return PeriodSummary(
        period=period,
        start=start,
        total_income=income,
        total_expense=expense,
        transaction_count=count,
        expense_by_category=ranked,
    )


__all__ = ["PeriodSummary", "summarize"]
