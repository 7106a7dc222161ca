"""Tests for Celery tasks: orphan sweeper and notifications."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.data.models import OrderModel
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService, send_order_notification_task
from storefront.tasks.orphans import sweep_orphan_orders


def add_header(db, age):
    order = OrderModel(
        customer_id="cust-1",
        total_amount=Decimal("10.00"),
        delivery_fee=Decimal("0.00"),
        payment_method="cash_on_delivery",
        order_date=datetime.now(timezone.utc) - age,
    )
    db.add(order)
    db.commit()
    return order.id


class TestOrphanSweeper:
    def test_removes_only_old_headers_without_items(self, db, place_order):
        complete = place_order()
        old_orphan = add_header(db, timedelta(hours=1))
        fresh_orphan = add_header(db, timedelta(seconds=5))

        removed = sweep_orphan_orders(db, grace_seconds=600)

        repo = OrderRepo(db)
        assert removed == [old_orphan]
        assert repo.get_order(old_orphan) is None
        assert repo.get_order(fresh_orphan) is not None
        assert repo.get_order(complete) is not None

    def test_nothing_to_sweep(self, db, catalog):
        assert sweep_orphan_orders(db, grace_seconds=0) == []


class TestNotifications:
    def test_task_runs_eagerly(self):
        result = send_order_notification_task.delay("cust-1", "order-1", "Confirmed")
        assert result.get() == {
            "customer_id": "cust-1",
            "order_id": "order-1",
            "status": "Confirmed",
            "sent": True,
        }

    def test_service_queues_task(self):
        NotificationService().send_order_notification("cust-1", "order-1", "Shipped")
