"""Sales history summaries"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from shoppro_pos.models.money import ZERO
from shoppro_pos.models.sale import SaleRecord


@dataclass(frozen=True)
class SalesSummary:
    """Totals shown above the sales history table"""
    today_total: Decimal
    today_count: int
    month_total: Decimal
    month_count: int
    all_total: Decimal
    all_count: int


def summarize_sales(
    sales: Iterable[SaleRecord], now: Optional[datetime] = None
) -> SalesSummary:
    """
    Today / this month / all time totals

    ``now`` defaults to the local time; day and month boundaries are taken
    in ``now``'s timezone.
    """
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

    today_total = month_total = all_total = ZERO
    today_count = month_count = all_count = 0

    for sale in sales:
        all_total += sale.total
        all_count += 1
        if sale.created_at is None:
            continue
        local = sale.created_at.astimezone(now.tzinfo)
        if local >= start_of_day:
            today_total += sale.total
            today_count += 1
        if local.year == now.year and local.month == now.month:
            month_total += sale.total
            month_count += 1

    return SalesSummary(
        today_total=today_total,
        today_count=today_count,
        month_total=month_total,
        month_count=month_count,
        all_total=all_total,
        all_count=all_count,
    )


def search_sales(sales: Iterable[SaleRecord], query: str) -> List[SaleRecord]:
    """Case-insensitive match on sale id or customer name / phone"""
    needle = query.lower()
    matches = []
    for sale in sales:
        haystack = [sale.id]
        for info in (sale.customer_details, sale.customer_info):
            if info is not None:
                haystack.extend([info.name, info.phone])
        if any(needle in value.lower() for value in haystack if value):
            matches.append(sale)
    return matches


def sort_recent_first(sales: Iterable[SaleRecord]) -> List[SaleRecord]:
    return sorted(
        sales,
        key=lambda s: s.created_at.timestamp() if s.created_at else float("-inf"),
        reverse=True,
    )
