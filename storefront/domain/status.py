# storefront/domain/status.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING_CONFIRMATION = "Pending Confirmation"
    AWAITING_PAYMENT = "Awaiting Payment"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"


# graf przejsc, wszystko spoza tabeli jest odrzucane
TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING_CONFIRMATION: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.AWAITING_PAYMENT: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def initial_status(payment_method: PaymentMethod) -> OrderStatus:
    if payment_method == PaymentMethod.CASH_ON_DELIVERY:
        return OrderStatus.PENDING_CONFIRMATION
    return OrderStatus.AWAITING_PAYMENT


def normalize_status(raw: str | None) -> OrderStatus:
    """Brak statusu albo nieznana wartosc liczy sie jako Pending Confirmation."""
    try:
        return OrderStatus(raw)
    except ValueError:
        return OrderStatus.PENDING_CONFIRMATION


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())
