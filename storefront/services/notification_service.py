# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień do klienta.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(customer_id: str, order_id: str, status: str):
        """
        Powiadomienie o nowym zamowieniu albo zmianie jego statusu.
        """
        send_order_notification_task.delay(customer_id, order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(customer_id: str, order_id: str, status: str):
    """
    Informuje klienta o nowym statusie zamowienia.
    Kanal dostawy (mail, SMS) jest poza serwisem, tu zostaje wpis w logu i wynik taska.
    """
    logger.info(f"[NOTIFICATION] Customer {customer_id}: Order {order_id} is now '{status}'")

    return {"customer_id": customer_id, "order_id": order_id, "status": status, "sent": True}
