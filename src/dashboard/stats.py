"""Dashboard statistics computed from a full order set.

``compute_stats`` is a pure function of the orders it is given: the same set
always yields the same ``AggregateStats``. Orders only need to expose
``status``, ``order_type``, ``total``, ``created_at`` and ``items`` (each with
``product_id``, ``name``, ``category``, ``unit_price`` and ``quantity``).

Calendar dates are taken in UTC.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from types import MappingProxyType

STATUSES = ("Pending", "Processing", "Completed", "Cancelled")
ORDER_TYPES = ("Pickup", "Delivery")

TOP_PRODUCTS_LIMIT = 5
DAILY_REVENUE_DAYS = 7
UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class ProductRank:
    product_id: str
    name: str
    count: int


@dataclass(frozen=True)
class DailyRevenue:
    date: date
    revenue: float


@dataclass(frozen=True)
class AggregateStats:
    total_orders: int
    total_revenue: float
    average_order_value: float
    counts_by_status: MappingProxyType
    counts_by_type: MappingProxyType
    share_by_type: MappingProxyType
    top_products: tuple[ProductRank, ...]
    daily_revenue: tuple[DailyRevenue, ...]
    revenue_by_category: MappingProxyType
    sequence: int
    computed_at: datetime

    def to_dict(self) -> dict:
        return {
            "total_orders": self.total_orders,
            "total_revenue": self.total_revenue,
            "average_order_value": self.average_order_value,
            "counts_by_status": dict(self.counts_by_status),
            "counts_by_type": dict(self.counts_by_type),
            "share_by_type": dict(self.share_by_type),
            "top_products": [
                {"product_id": p.product_id, "name": p.name, "count": p.count} for p in self.top_products
            ],
            "daily_revenue": [{"date": d.date.isoformat(), "revenue": d.revenue} for d in self.daily_revenue],
            "revenue_by_category": dict(self.revenue_by_category),
            "sequence": self.sequence,
            "computed_at": self.computed_at.isoformat(),
        }


def utc_date(value) -> date:
    """Calendar date of a timestamp in UTC; naive timestamps are taken as UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).date()


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


def _top_products(orders) -> tuple[ProductRank, ...]:
    counts: dict[str, int] = {}
    names: dict[str, str] = {}
    for order in orders:
        for line in order.items:
            product_id = str(line.product_id)
            if product_id not in counts:
                counts[product_id] = 0
                names[product_id] = line.name
            counts[product_id] += 1

    # dicts keep first-seen order and sorted() is stable, so ties stay in that order
    ranked = sorted(counts, key=lambda product_id: -counts[product_id])
    return tuple(ProductRank(pid, names[pid], counts[pid]) for pid in ranked[:TOP_PRODUCTS_LIMIT])


def _daily_revenue(orders) -> tuple[DailyRevenue, ...]:
    by_date: dict[date, float] = {}
    for order in orders:
        day = utc_date(order.created_at)
        by_date[day] = by_date.get(day, 0.0) + (order.total or 0.0)
    recent = sorted(by_date)[-DAILY_REVENUE_DAYS:]
    return tuple(DailyRevenue(day, round(by_date[day], 2)) for day in recent)


def _revenue_by_category(orders) -> dict[str, float]:
    revenue: dict[str, float] = {}
    for order in orders:
        for line in order.items:
            category = line.category or UNCATEGORIZED
            revenue[category] = revenue.get(category, 0.0) + line.unit_price * line.quantity
    return {category: round(amount, 2) for category, amount in revenue.items()}


def compute_stats(orders, sequence: int = 0) -> AggregateStats:
    orders = list(orders)
    total_orders = len(orders)
    total_revenue = round(sum(order.total or 0.0 for order in orders), 2)

    counts_by_status = dict.fromkeys(STATUSES, 0)
    counts_by_type = dict.fromkeys(ORDER_TYPES, 0)
    for order in orders:
        counts_by_status[order.status] = counts_by_status.get(order.status, 0) + 1
        counts_by_type[order.order_type] = counts_by_type.get(order.order_type, 0) + 1

    return AggregateStats(
        total_orders=total_orders,
        total_revenue=total_revenue,
        average_order_value=_ratio(total_revenue, total_orders),
        counts_by_status=MappingProxyType(counts_by_status),
        counts_by_type=MappingProxyType(counts_by_type),
        share_by_type=MappingProxyType({t: _ratio(count, total_orders) for t, count in counts_by_type.items()}),
        top_products=_top_products(orders),
        daily_revenue=_daily_revenue(orders),
        revenue_by_category=MappingProxyType(_revenue_by_category(orders)),
        sequence=sequence,
        computed_at=datetime.now(UTC),
    )
