# storefront/services/status_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.errors import (
    InvalidTransitionError,
    OrderNotFoundError,
    TransitionConflictError,
    ValidationError,
)
from storefront.domain.status import OrderStatus, can_transition, normalize_status
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.retry import conflict_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StatusService:
    """
    Maszyna stanow zamowienia.

    Zmiana statusu to warunkowy update ("where status = oczekiwany"), wiec
    nieaktualne zadanie nie nadpisze nowszego statusu. Przy konflikcie
    odczytujemy zamowienie ponownie i sprawdzamy krawedz jeszcze raz.
    Efekty uboczne (zwrot stanu magazynowego, powiadomienie) wykonuje tylko
    zadanie, ktore wygralo update.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        order_repo: OrderRepo | None = None,
        product_repo: ProductRepo | None = None,
    ):
        self.repo = order_repo or OrderRepo(db)
        self.products = product_repo or ProductRepo(db)
        self.notification_service = notification_service or NotificationService()

    def transition(self, order_id: str, target: OrderStatus | str) -> Dict[str, Any]:
        target = self._parse_target(target, order_id)

        try:
            order, previous = self._apply(order_id, target)
        except TransitionConflictError:
            logger.error(f"[transition] order {order_id}: gave up on -> {target.value} after repeated conflicts")
            raise

        logger.info(f"[transition] order {order_id}: {previous.value} -> {target.value}")

        if target == OrderStatus.CANCELLED:
            self._restore_stock(order_id)

        self._notify(order.customer_id, order_id, target.value)

        return {
            "order_id": order_id,
            "previous_status": previous,
            "status": target,
        }

    def confirm(self, order_id: str) -> Dict[str, Any]:
        return self.transition(order_id, OrderStatus.CONFIRMED)

    def cancel(self, order_id: str) -> Dict[str, Any]:
        return self.transition(order_id, OrderStatus.CANCELLED)

    @conflict_retry()
    def _apply(self, order_id: str, target: OrderStatus):
        # swiezy odczyt przy kazdej probie
        order = self.repo.get_order(order_id)
        if not order:
            logger.warning(f"[transition] order {order_id}: not found")
            raise OrderNotFoundError(f"order {order_id} not found", order_id)

        current = normalize_status(order.status)
        if not can_transition(current, target):
            logger.warning(f"[transition] order {order_id}: rejected {current.value} -> {target.value}")
            raise InvalidTransitionError(current.value, target.value, order_id)

        rowcount = self.repo.update_status_if(order_id, order.status, target.value)
        if rowcount == 0:
            self.repo.rollback()
            logger.info(f"[transition] order {order_id}: status changed concurrently, retrying")
            raise TransitionConflictError(
                f"order {order_id} is no longer '{order.status}'", order_id
            )

        return order, current

    def _restore_stock(self, order_id: str):
        for item in self.repo.get_items(order_id):
            if not item.product_id:
                continue
            try:
                restored = self.products.restore_stock(item.product_id, item.quantity)
            except Exception as e:
                self.repo.rollback()
                logger.error(
                    f"[cancel] order {order_id}: failed to restore {item.quantity} of {item.product_id}: {e}"
                )
                continue
            if not restored:
                logger.warning(
                    f"[cancel] order {order_id}: product {item.product_id} no longer exists, stock not restored"
                )

    def _notify(self, customer_id: str, order_id: str, status: str):
        try:
            self.notification_service.send_order_notification(customer_id, order_id, status)
        except Exception as e:
            logger.warning(f"[notify] order {order_id}: notification not queued: {e}")

    @staticmethod
    def _parse_target(value, order_id: str) -> OrderStatus:
        try:
            return OrderStatus(value)
        except ValueError:
            raise ValidationError(f"unknown status {value!r}", order_id, code="invalid_status")
