"""Tests for the order statistics projection."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.data.models import OrderModel
from storefront.services.stats_service import StatsService

NOW = datetime(2026, 10, 19, 15, 0, 0, tzinfo=timezone.utc)


def add_order(db, status, total, order_date=NOW):
    order = OrderModel(
        customer_id="cust-1",
        total_amount=Decimal(total),
        delivery_fee=Decimal("0"),
        payment_method="cash_on_delivery",
        status=status,
        order_date=order_date,
    )
    db.add(order)
    db.commit()
    if status is None:
        # default kolumny nadpisalby NULL przy insercie
        order.status = None
        db.commit()


def test_empty_store(db):
    stats = StatsService(db).get_stats(now=NOW)
    assert stats["total"] == 0
    assert stats["total_revenue"] == Decimal("0.00")


def test_counts_and_revenue(db, catalog):
    add_order(db, "Pending Confirmation", "10.00")
    add_order(db, None, "5.50")
    add_order(db, "Awaiting Payment", "7.25")
    add_order(db, "Confirmed", "20.00", NOW - timedelta(days=2))
    add_order(db, "Delivered", "100.00", NOW - timedelta(days=30))
    add_order(db, "Cancelled", "999.99")

    stats = StatsService(db).get_stats(now=NOW)

    assert stats["total"] == 6
    assert stats["pending"] == 2
    assert stats["awaiting_payment"] == 1
    assert stats["confirmed"] == 1
    assert stats["delivered"] == 1
    assert stats["cancelled"] == 1
    assert stats["processing"] == stats["shipped"] == 0
    assert stats["today_orders"] == 4
    assert stats["total_revenue"] == Decimal("142.75")


def test_revenue_matches_raw_rows(db, place_order):
    from storefront.services.status_service import StatusService
    from conftest import FakeNotifier

    first = place_order()
    place_order()
    StatusService(db, notification_service=FakeNotifier()).cancel(first)

    expected = sum(
        (o.total_amount for o in db.query(OrderModel).all() if o.status != "Cancelled"),
        Decimal("0.00"),
    )
    stats = StatsService(db).get_stats()
    assert stats["total_revenue"] == expected == Decimal("60.00")
    assert stats["cancelled"] == 1
    assert stats["today_orders"] == 2
