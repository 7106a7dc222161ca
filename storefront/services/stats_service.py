# storefront/services/stats_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.status import OrderStatus, normalize_status
from storefront.repos.order_repo import OrderRepo
from storefront.utils.money import to_money

_COUNTER_KEYS = {
    OrderStatus.PENDING_CONFIRMATION: "pending",
    OrderStatus.AWAITING_PAYMENT: "awaiting_payment",
    OrderStatus.CONFIRMED: "confirmed",
    OrderStatus.PROCESSING: "processing",
    OrderStatus.SHIPPED: "shipped",
    OrderStatus.DELIVERED: "delivered",
    OrderStatus.CANCELLED: "cancelled",
}


def _as_utc(value: datetime) -> datetime:
    # sqlite zwraca naive datetime, traktujemy jako UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StatsService:
    """Projekcja tylko do odczytu, liczona od zera przy kazdym wywolaniu."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def get_stats(self, now: datetime | None = None) -> Dict[str, Any]:
        now = _as_utc(now or datetime.now(timezone.utc))
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)

        stats: Dict[str, Any] = {key: 0 for key in _COUNTER_KEYS.values()}
        stats["total"] = 0
        stats["today_orders"] = 0
        revenue = Decimal("0.00")

        for status, total_amount, order_date in self.repo.get_stats_rows():
            normalized = normalize_status(status)
            stats[_COUNTER_KEYS[normalized]] += 1
            stats["total"] += 1

            if order_date is not None and _as_utc(order_date) >= today:
                stats["today_orders"] += 1

            if normalized != OrderStatus.CANCELLED:
                revenue += to_money(total_amount)

        stats["total_revenue"] = to_money(revenue)
        return stats
