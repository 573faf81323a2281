"""
Analytics service - dashboard aggregates computed from the order list

Every function here is a pure function of its arguments: the order list is
never modified and calling twice on the same input gives equal results.
"""
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Any, Iterable, Optional, Sequence, Union
from zoneinfo import ZoneInfo

from ..config import STATUS_COLORS
from ..models.analytics import OrderStats, DailyPoint, StatusSlice, StatusRevenue
from ..models.dessert import Dessert
from ..models.order import Order, OrderStatus, REVENUE_STATUSES

CENT = Decimal("0.01")


def resolve_timezone(tz: Union[str, tzinfo, None]) -> tzinfo:
    if tz is None or tz == "UTC":
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def _to_major(cents: int) -> Decimal:
    return Decimal(cents) / 100


def _revenue_orders(orders: Iterable[Order]) -> List[Order]:
    return [order for order in orders if order.status.counts_as_revenue]


def order_local_date(order: Order, tz: tzinfo) -> Optional[date]:
    """Calendar date of ``order.created_at`` in ``tz``; naive timestamps are UTC"""
    if not order.created_at:
        return None
    created = datetime.fromisoformat(order.created_at.replace("Z", "+00:00"))
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.astimezone(tz).date()


def count_by_status(orders: Sequence[Order]) -> Dict[str, int]:
    counts = {status.value: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status.value] += 1
    counts["total"] = len(orders)
    return counts


def revenue_stats(orders: Sequence[Order], desserts: Optional[Sequence[Dessert]] = None) -> OrderStats:
    paid = _revenue_orders(orders)
    revenue_cents = sum(order.total_cents or 0 for order in paid)
    total_orders = len(paid)

    if total_orders:
        avg = (Decimal(revenue_cents) / total_orders / 100).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        avg = Decimal("0")

    return OrderStats(
        total_revenue=_to_major(revenue_cents),
        total_orders=total_orders,
        avg_order_value=avg,
        total_desserts=len(desserts) if desserts is not None else 0
    )


def daily_series(orders: Sequence[Order], days: int = 7, today: Optional[date] = None,
                 tz: Union[str, tzinfo, None] = None) -> List[DailyPoint]:
    # Oldest day first, ending with today
    zone = resolve_timezone(tz)
    if today is None:
        today = datetime.now(zone).date()

    by_day: Dict[date, List[Order]] = {}
    for order in _revenue_orders(orders):
        day = order_local_date(order, zone)
        if day is not None:
            by_day.setdefault(day, []).append(order)

    series = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_orders = by_day.get(day, [])
        series.append(DailyPoint(
            date=day.isoformat(),
            label=f"{day.strftime('%b')} {day.day}",
            revenue=_to_major(sum(order.total_cents or 0 for order in day_orders)),
            order_count=len(day_orders)
        ))
    return series


def status_distribution(orders: Sequence[Order],
                        colors: Optional[Dict[str, str]] = None) -> List[StatusSlice]:
    # Zero-count statuses are dropped; order and colors follow OrderStatus
    colors = colors or STATUS_COLORS
    counts = count_by_status(orders)
    return [
        StatusSlice(
            status=status.value,
            name=status.label,
            value=counts[status.value],
            color=colors.get(status.value, "#9CA3AF")
        )
        for status in OrderStatus
        if counts[status.value] > 0
    ]


def revenue_by_status(orders: Sequence[Order]) -> List[StatusRevenue]:
    result = []
    for status in REVENUE_STATUSES:
        matching = [order for order in orders if order.status == status]
        result.append(StatusRevenue(
            status=status.value,
            name=status.label,
            revenue=_to_major(sum(order.total_cents or 0 for order in matching)),
            count=len(matching)
        ))
    return result


def build_dashboard(orders: Sequence[Order], desserts: Sequence[Dessert],
                    days: int = 7, today: Optional[date] = None,
                    tz: Union[str, tzinfo, None] = None,
                    colors: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Everything the admin analytics tab renders, as plain JSON-ready data"""
    return {
        "stats": revenue_stats(orders, desserts).to_dict(),
        "status_counts": count_by_status(orders),
        "daily": [point.to_dict() for point in daily_series(orders, days, today, tz)],
        "status_distribution": [s.to_dict() for s in status_distribution(orders, colors)],
        "revenue_by_status": [r.to_dict() for r in revenue_by_status(orders)],
    }
