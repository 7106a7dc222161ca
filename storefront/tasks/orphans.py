# storefront/tasks/orphans.py
from datetime import datetime, timezone, timedelta

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import ORPHAN_ORDER_GRACE_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def sweep_orphan_orders(db, grace_seconds: int = ORPHAN_ORDER_GRACE_SECONDS) -> list[str]:
    """
    Usuwa naglowki zamowien bez pozycji, starsze niz grace_seconds.
    Zostaja po crashu procesu miedzy insertem naglowka a pozycji.
    """
    repo = OrderRepo(db)
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=grace_seconds)
    orphans = repo.find_orphans(cutoff)

    logger.info(f"Found {len(orphans)} orphan orders older than {cutoff.isoformat()}")

    removed = []
    for order_id in orphans:
        try:
            repo.delete_order(order_id)
            removed.append(order_id)
        except Exception as e:
            repo.rollback()
            logger.warning(f"Failed to delete orphan order {order_id}: {e}")
    return removed


@celery_app.task(name="storefront.tasks.orphans.sweep_orphan_orders_task")
def sweep_orphan_orders_task():
    logger.info("Sweep orphan orders task started")

    db = SessionLocal()
    try:
        removed = sweep_orphan_orders(db)
        return {"removed": removed}
    finally:
        db.close()
