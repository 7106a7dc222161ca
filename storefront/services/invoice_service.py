# storefront/services/invoice_service.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import requests
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import (
    InvoiceGenerationFailed,
    InvoiceNotAllowedError,
    OrderNotFoundError,
)
from storefront.domain.schemas import RequestContext
from storefront.domain.status import OrderStatus, normalize_status
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.render_client import RenderClient
from storefront.services.storage_client import StorageClient
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def invoice_number(order_id: str, order_date: datetime) -> str:
    """INV-RRRRMM-XXXXXX, powtarzalny bez osobnego licznika."""
    return f"INV-{order_date.year}{order_date.month:02d}-{order_id[-6:].upper()}"


def is_invoice_allowed(status: str | None) -> bool:
    # anulowane zamowienia nigdy nie dostaja faktury
    return normalize_status(status) != OrderStatus.CANCELLED


@dataclass(frozen=True)
class InvoiceDocument:
    order_id: str
    invoice_number: str
    filename: str
    content: bytes
    media_type: str = "application/pdf"


class InvoiceService:
    """
    Faktura na zadanie:
    - sklada payload (naglowek, klient, adres z chwili zamowienia, pozycje z cenami historycznymi)
    - renderowanie deleguje do serwisu PDF
    - archiwizacja (upload + document_url) jest osobnym krokiem best-effort
    """

    def __init__(
        self,
        db: Session,
        render_client: RenderClient | None = None,
        storage_client: StorageClient | None = None,
    ):
        self.repo = OrderRepo(db)
        self.customers = CustomerRepo(db)
        self.render_client = render_client or RenderClient()
        self.storage_client = storage_client or StorageClient()

    def generate_invoice(self, order_id: str, ctx: RequestContext | None = None) -> InvoiceDocument:
        order = self.repo.get_order(order_id)
        if not order:
            logger.warning(f"[generate_invoice] order {order_id}: not found")
            raise OrderNotFoundError(f"order {order_id} not found", order_id)

        if ctx is not None and not ctx.is_admin and order.customer_id != ctx.user_id:
            raise PermissionError("Brak dostępu do zamówienia")

        if not is_invoice_allowed(order.status):
            logger.warning(f"[generate_invoice] order {order_id}: refused, order is cancelled")
            raise InvoiceNotAllowedError(f"order {order_id} is cancelled", order_id)

        payload = self.build_payload(order)

        try:
            content = self.render_client.render_invoice(payload)
        except requests.Timeout as e:
            logger.error(f"[generate_invoice] order {order_id}: renderer timed out: {e}")
            raise InvoiceGenerationFailed(f"renderer timeout: {e}", order_id) from e
        except requests.RequestException as e:
            logger.error(f"[generate_invoice] order {order_id}: renderer failed: {e}")
            raise InvoiceGenerationFailed(f"renderer error: {e}", order_id) from e

        if not content:
            logger.error(f"[generate_invoice] order {order_id}: renderer returned empty document")
            raise InvoiceGenerationFailed("empty document", order_id)

        number = payload["invoice_number"]
        logger.info(f"[generate_invoice] order {order_id}: {number} rendered, {len(content)} bytes")

        return InvoiceDocument(
            order_id=order_id,
            invoice_number=number,
            filename=f"invoice-{number}.pdf",
            content=content,
        )

    def archive_invoice(self, document: InvoiceDocument) -> str | None:
        """
        Upload + zapis document_url. Blad to tylko ostrzezenie w logach,
        pobranie faktury przez uzytkownika juz sie udalo.
        """
        try:
            url = self.storage_client.upload(document.content, document.filename, document.media_type)
        except Exception as e:
            logger.warning(f"[archive_invoice] order {document.order_id}: upload failed: {e}")
            return None

        try:
            self.repo.set_document_url(document.order_id, url)
        except Exception as e:
            self.repo.rollback()
            logger.warning(f"[archive_invoice] order {document.order_id}: failed to save document url: {e}")
            return None

        logger.info(f"[archive_invoice] order {document.order_id}: archived at {url}")
        return url

    def build_payload(self, order: OrderModel) -> dict:
        customer = self.customers.get_customer(order.customer_id)
        items = [
            {
                "product_id": i.product_id,
                "name": i.product_name,
                "quantity": i.quantity,
                "unit_price": str(to_money(i.price)),
                "line_total": str(to_money(to_money(i.price) * i.quantity)),
            }
            for i in order.items
        ]
        subtotal = sum((to_money(i.price) * i.quantity for i in order.items), Decimal("0.00"))

        return {
            "invoice_number": invoice_number(order.id, order.order_date),
            "order_details": {
                "id": order.id,
                "order_date": order.order_date.isoformat(),
                "status": normalize_status(order.status).value,
                "payment_method": order.payment_method,
                "subtotal": str(to_money(subtotal)),
                "delivery_fee": str(to_money(order.delivery_fee)),
                "total_amount": str(to_money(order.total_amount)),
            },
            "customer_info": {
                "first_name": customer.first_name if customer else None,
                "last_name": customer.last_name if customer else None,
                "email": customer.email if customer else None,
            },
            "customer_address": {
                "address_line_1": order.shipping_address_line_1,
                "address_line_2": order.shipping_address_line_2,
                "city": order.shipping_city,
                "state": order.shipping_state,
                "postal_code": order.shipping_postal_code,
                "country": order.shipping_country,
                "phone_number": order.shipping_phone,
            },
            "items": items,
        }
