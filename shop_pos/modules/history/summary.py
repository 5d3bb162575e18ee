"""
Sales history helpers without Qt: text search and the summary cards.

Dates are compared in local time, the way the cashier reads them.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from ...constants import DATE_DISPLAY_FORMAT
from ...database.repositories.sales_repo import FinalizedSale
from ...utils.helpers import to_local


@dataclass(frozen=True)
class SalesSummary:
    count: int
    today_total: Decimal
    month_total: Decimal


def sale_matches(sale: FinalizedSale, term: str) -> bool:
    """Receipt number, customer name or dd/mm/yyyy date contains `term`."""
    t = (term or "").strip().casefold()
    if not t:
        return True
    day = to_local(sale.created_at).strftime(DATE_DISPLAY_FORMAT)
    return (
        t in sale.short_id.casefold()
        or t in sale.customer_name.casefold()
        or t in day
    )


def filter_sales(sales: Iterable[FinalizedSale], term: str) -> list[FinalizedSale]:
    return [s for s in sales if sale_matches(s, term)]


def summarize(sales: Iterable[FinalizedSale], now: datetime | None = None) -> SalesSummary:
    """Number of sales plus the sum of totals for today and for this month."""
    now = to_local(now) if now is not None else datetime.now().astimezone()
    today = now.date()
    count = 0
    today_total = Decimal("0")
    month_total = Decimal("0")
    for s in sales:
        count += 1
        d = to_local(s.created_at).date()
        if d.year == today.year and d.month == today.month:
            month_total += s.total
            if d == today:
                today_total += s.total
    return SalesSummary(count=count, today_total=today_total, month_total=month_total)
