# storefront/services/order_service.py
import uuid
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Dict, Iterable

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import (
    AddressNotFoundError,
    CompensatedCreationFailure,
    InvalidTransitionError,
    OrderNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    TransitionConflictError,
    ValidationError,
)
from storefront.domain.schemas import OrderItemIn, RequestContext
from storefront.domain.status import OrderStatus, PaymentMethod, TERMINAL_STATUSES, initial_status, normalize_status
from storefront.repos.customer_repo import CustomerRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import CartService
from storefront.services.compensation import CompensationLog
from storefront.services.notification_service import NotificationService
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger, log_rejection

logger = get_logger(__name__)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "customer_id": order.customer_id,
        "status": normalize_status(order.status),
        "payment_method": order.payment_method,
        "total_amount": to_money(order.total_amount),
        "delivery_fee": to_money(order.delivery_fee),
        "order_date": order.order_date,
        "document_url": order.document_url,
        "notes": order.notes,
        "shipping_address": {
            "address_id": order.shipping_address_id,
            "address_line_1": order.shipping_address_line_1,
            "address_line_2": order.shipping_address_line_2,
            "city": order.shipping_city,
            "state": order.shipping_state,
            "postal_code": order.shipping_postal_code,
            "country": order.shipping_country,
            "phone_number": order.shipping_phone,
        },
        "items": [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "unit_price": to_money(i.price),
                "line_total": to_money(to_money(i.price) * i.quantity),
            }
            for i in order.items
        ],
    }


class OrderService:
    """
    Serwis odpowiedzialny za tworzenie i odczyt zamówień.

    Magazyn danych nie daje transakcji wieloinstrukcyjnych, wiec tworzenie
    zamowienia to kilka osobnych commitow (naglowek, pozycje, rezerwacja stanu)
    z reczna kompensacja: przy bledzie kazdy wykonany krok jest cofany.
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        order_repo: OrderRepo | None = None,
        product_repo: ProductRepo | None = None,
    ):
        self.db = db
        self.repo = order_repo or OrderRepo(db)
        self.products = product_repo or ProductRepo(db)
        self.customers = CustomerRepo(db)
        self.carts = CartService(db)
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # COMMANDS
    # =====================================================
    def create_order(
        self,
        customer_id: str,
        shipping_address_id: str,
        items: Iterable[OrderItemIn],
        delivery_fee: Decimal | None,
        payment_method: PaymentMethod | str,
        expected_total: Decimal | None = None,
        notes: str | None = None,
    ) -> str:
        """
        Use Case: Tworzenie zamówienia.

        1. Walidacja (oplata z ustawien sklepu, pozycje, ilosci, ceny, suma, adres) - nic nie jest jeszcze zapisane
        2. Naglowek zamowienia
        3. Pozycje z cena z chwili zamowienia
        4. Warunkowe zmniejszenie stanu magazynowego
        5. Czyszczenie koszyka i powiadomienie (bledy tylko logowane)
        """
        items = list(items or [])
        method = self._parse_payment_method(payment_method, customer_id)
        fee = self._resolve_delivery_fee(delivery_fee, customer_id)

        if not items:
            raise self._rejected(ValidationError("order has no items", customer_id, code="empty_cart"))

        for item in items:
            if item.quantity is None or item.quantity <= 0:
                raise self._rejected(ValidationError(
                    f"quantity {item.quantity} for product {item.product_id}",
                    item.product_id,
                    code="invalid_quantity",
                ))

        products = self.products.get_products(i.product_id for i in items)
        lines = []
        reserved: "OrderedDict[str, int]" = OrderedDict()
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                raise self._rejected(
                    ProductNotFoundError(f"product {item.product_id} not found", item.product_id)
                )

            unit_price = to_money(product.price)
            if item.unit_price is not None and to_money(item.unit_price) != unit_price:
                raise self._rejected(ValidationError(
                    f"client price {item.unit_price} != catalog price {unit_price}",
                    item.product_id,
                    code="price_mismatch",
                ))
            lines.append((product, item.quantity, unit_price))
            reserved[product.id] = reserved.get(product.id, 0) + item.quantity

        subtotal = sum((price * qty for _, qty, price in lines), Decimal("0.00"))
        total = to_money(subtotal + fee)

        # podana suma musi sie zgadzac, nigdy jej nie poprawiamy po cichu
        if expected_total is not None and to_money(expected_total) != total:
            raise self._rejected(ValidationError(
                f"expected total {expected_total} != computed {total}",
                customer_id,
                code="total_mismatch",
            ))

        # sprawdzenie best-effort, decyduje warunkowy update w kroku 4
        for product_id, qty in reserved.items():
            product = products[product_id]
            if product.stock < qty:
                raise self._rejected(OutOfStockError(
                    f"product {product_id}: requested {qty}, available {product.stock}",
                    product_id,
                ))

        address = self.customers.get_address(shipping_address_id)
        if address is None or address.customer_id != customer_id:
            raise self._rejected(
                AddressNotFoundError(f"address {shipping_address_id} not found", shipping_address_id)
            )

        order_id = str(uuid.uuid4())
        order = OrderModel(
            id=order_id,
            customer_id=customer_id,
            shipping_address_id=address.id,
            shipping_address_line_1=address.address_line_1,
            shipping_address_line_2=address.address_line_2,
            shipping_city=address.city,
            shipping_state=address.state,
            shipping_postal_code=address.postal_code,
            shipping_country=address.country,
            shipping_phone=address.phone_number,
            total_amount=total,
            delivery_fee=fee,
            payment_method=method.value,
            status=initial_status(method).value,
            notes=notes,
        )

        log = CompensationLog("create_order", order_id)
        try:
            # undo przed insertem: commit moze sie udac, a refresh juz nie
            log.record("insert order header", lambda: self.repo.delete_order(order_id))
            self.repo.create_order(order)
            log.record("insert order items", lambda: self.repo.delete_items(order_id))

            for position, (product, qty, unit_price) in enumerate(lines):
                self.repo.add_item(
                    OrderItemModel(
                        order_id=order_id,
                        product_id=product.id,
                        product_name=product.name,
                        position=position,
                        quantity=qty,
                        price=unit_price,
                    )
                )

            for product_id, qty in reserved.items():
                if not self.products.decrement_stock(product_id, qty):
                    raise OutOfStockError(
                        f"product {product_id}: stock changed concurrently, {qty} not available",
                        product_id,
                    )
                log.record(
                    f"reserve stock {product_id}",
                    lambda pid=product_id, q=qty: self.products.restore_stock(pid, q),
                )

        except OutOfStockError as e:
            logger.warning(f"[create_order] {order_id}: {e.detail}, compensating")
            self._compensate(log)
            raise

        except Exception as e:
            logger.error(f"[create_order] {order_id}: partial failure after {log.steps}: {e}")
            self._compensate(log)
            raise CompensatedCreationFailure(str(e), order_id) from e

        log.discard()

        logger.info(
            f"Order {order_id} created for customer {customer_id}: "
            f"{len(lines)} items, total {total}, status '{order.status}'"
        )

        try:
            self.carts.clear_cart(customer_id)
        except Exception as e:
            self.db.rollback()
            logger.warning(f"[create_order] {order_id}: failed to clear cart of {customer_id}: {e}")

        self._notify(customer_id, order_id, order.status)
        return order_id

    def checkout(
        self,
        customer_id: str,
        payment_method: PaymentMethod | str,
        shipping_address_id: str | None = None,
        notes: str | None = None,
    ) -> str:
        """
        Use Case: Zamowienie z koszyka po stronie serwera.
        Ceny i oplata za dostawe pochodza z koszyka, nie od klienta.
        """
        cart = self.carts.get_cart(customer_id)
        if not cart["items"]:
            raise self._rejected(ValidationError("cart is empty", customer_id, code="empty_cart"), "checkout")

        if shipping_address_id:
            address = self.customers.get_address(shipping_address_id)
        else:
            address = self.customers.get_latest_address(customer_id)

        if address is None or address.customer_id != customer_id:
            raise self._rejected(
                AddressNotFoundError(f"no shipping address for {customer_id}", shipping_address_id), "checkout"
            )

        if not (address.address_line_1 and address.city and address.phone_number):
            raise self._rejected(
                ValidationError(f"address {address.id} is incomplete", address.id, code="incomplete_address"),
                "checkout",
            )

        items = [
            OrderItemIn(
                product_id=line["product_id"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
            )
            for line in cart["items"]
        ]
        return self.create_order(
            customer_id=customer_id,
            shipping_address_id=address.id,
            items=items,
            delivery_fee=cart["delivery_fee"],
            payment_method=payment_method,
            expected_total=cart["total"],
            notes=notes,
        )

    def correct_total(self, order_id: str, new_total: Decimal, reason: str, ctx: RequestContext) -> Dict[str, Any]:
        """
        Jedyna sciezka zmiany total_amount po utworzeniu (korekta admina).
        """
        if not ctx.is_admin:
            raise self._rejected(PermissionError("Brak dostępu do korekty zamówienia"), "correct_total")

        if new_total is None or new_total < 0:
            raise self._rejected(
                ValidationError(f"invalid total {new_total}", order_id, code="invalid_total"), "correct_total"
            )

        order = self.repo.get_order(order_id)
        if not order:
            raise self._rejected(OrderNotFoundError(f"order {order_id} not found", order_id), "correct_total")

        current = normalize_status(order.status)
        if current in TERMINAL_STATUSES:
            raise self._rejected(InvalidTransitionError(current.value, current.value, order_id), "correct_total")

        old_total = to_money(order.total_amount)
        new_total = to_money(new_total)
        note = f"[correction by {ctx.user_id}] total {old_total} -> {new_total}: {reason}"
        notes = f"{order.notes}\n{note}" if order.notes else note

        rowcount = self.repo.update_total_if(order_id, order.status, new_total, notes)
        if rowcount == 0:
            self.repo.rollback()
            raise self._rejected(
                TransitionConflictError(f"order {order_id} changed during correction", order_id), "correct_total"
            )

        logger.info(f"[correct_total] order {order_id}: {old_total} -> {new_total} by {ctx.user_id}")
        return self.get_order(order_id, ctx)

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: str, ctx: RequestContext) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise self._rejected(OrderNotFoundError(f"order {order_id} not found", order_id), "get_order")

        if order.customer_id != ctx.user_id and not ctx.is_admin:
            raise self._rejected(PermissionError(f"order {order_id}: access denied for {ctx.user_id}"), "get_order")

        return serialize_order(order)

    def list_orders(
        self,
        ctx: RequestContext,
        status: OrderStatus | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        limit = min(max(limit, 1), 100)
        orders, total = self.repo.list_orders(
            customer_id=None if ctx.is_admin else ctx.user_id,
            status=status.value if status else None,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return {
            "orders": [serialize_order(o) for o in orders],
            "total": total,
            "page": page,
            "limit": limit,
        }

    # =====================================================
    # HELPERS
    # =====================================================
    def _compensate(self, log: CompensationLog):
        # sesja moze byc w stanie bledu po nieudanym flush
        self.db.rollback()
        failed = log.compensate()
        if failed:
            logger.critical(
                f"[create_order] {log.entity_id}: compensation incomplete, manual cleanup needed: {failed}"
            )

    def _notify(self, customer_id: str, order_id: str, status: str):
        try:
            self.notification_service.send_order_notification(customer_id, order_id, status)
        except Exception as e:
            logger.warning(f"[notify] order {order_id}: notification not queued: {e}")

    @staticmethod
    def _rejected(exc: Exception, operation: str = "create_order") -> Exception:
        return log_rejection(logger, operation, exc)

    def _parse_payment_method(self, value, entity_id: str) -> PaymentMethod:
        try:
            return PaymentMethod(value)
        except ValueError:
            raise self._rejected(ValidationError(
                f"unsupported payment method {value!r}", entity_id, code="invalid_payment_method"
            ))

    def _resolve_delivery_fee(self, value, entity_id: str) -> Decimal:
        """
        Oplata za dostawe zawsze pochodzi z ustawien sklepu.
        Klient moze ja przeslac, ale musi byc rowna aktualnej.
        """
        store_fee = self.carts.get_delivery_fee()
        if value is None:
            return store_fee

        try:
            fee = to_money(value)
        except ArithmeticError:
            raise self._rejected(
                ValidationError(f"delivery fee {value!r}", entity_id, code="invalid_delivery_fee")
            )
        if fee < 0:
            raise self._rejected(
                ValidationError(f"delivery fee {fee} < 0", entity_id, code="invalid_delivery_fee")
            )
        if fee != store_fee:
            raise self._rejected(ValidationError(
                f"delivery fee {fee} != store fee {store_fee}", entity_id, code="invalid_delivery_fee"
            ))
        return store_fee
