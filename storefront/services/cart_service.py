from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import OutOfStockError, ProductNotFoundError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.money import to_money
from storefront.utils.settings import DEFAULT_DELIVERY_FEE
from storefront.utils.logging import get_logger, log_rejection

logger = get_logger(__name__)

class CartService:
    """
    Koszyk klienta: jeden na klienta, tworzony leniwie.
    query (get_cart) zwraca pozycje z aktualnymi cenami, subtotal i oplate za dostawe
    commands (add, remove, clear) modyfikuja stan
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.settings = SettingsRepo(db)

    #query - odczyt
    def get_cart(self, customer_id: str) -> Dict[str, Any]:
        delivery_fee = self.get_delivery_fee()
        cart = self.repo.get_cart_by_customer(customer_id)

        if not cart:
            return self._empty(customer_id, delivery_fee)

        items = self.repo.get_cart_items(cart.id)
        products = self.products.get_products(i.product_id for i in items)

        lines = []
        for item in items:
            product = products.get(item.product_id)
            # produkt usuniety z katalogu - pomijamy zamiast blokowac caly koszyk
            if product is None:
                logger.warning(
                    f"[get_cart] cart {cart.id}: product {item.product_id} no longer exists, skipped"
                )
                continue
            unit_price = to_money(product.price)
            lines.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "line_total": to_money(unit_price * item.quantity),
                }
            )

        if not lines:
            return self._empty(customer_id, delivery_fee, cart.id)

        subtotal = to_money(sum((line["line_total"] for line in lines), Decimal("0.00")))

        return {
            "cart_id": cart.id,
            "customer_id": customer_id,
            "items": lines,
            "subtotal": subtotal,
            "delivery_fee": delivery_fee,
            "total": to_money(subtotal + delivery_fee),
        }

    def get_delivery_fee(self) -> Decimal:
        row = self.settings.get_latest()
        if row is None or row.delivery_fee is None:
            return to_money(DEFAULT_DELIVERY_FEE)
        return to_money(row.delivery_fee)

    #commands
    def add_product(self, customer_id: str, product_id: str, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise log_rejection(
                logger, "add_to_cart", ValidationError("quantity must be > 0", product_id, code="invalid_quantity")
            )

        product = self.products.get_product(product_id)
        if not product:
            raise log_rejection(logger, "add_to_cart", ProductNotFoundError(f"product {product_id} not found", product_id))

        cart = self._get_or_create_cart(customer_id)
        existing_item = self.repo.get_cart_item(cart.id, product_id)
        new_quantity = quantity + (existing_item.quantity if existing_item else 0)

        # sprawdzenie best-effort, prawdziwa rezerwacja dopiero przy tworzeniu zamowienia
        if product.stock < new_quantity:
            raise log_rejection(
                logger,
                "add_to_cart",
                OutOfStockError(f"requested {new_quantity}, available {product.stock}", product_id),
            )

        if existing_item:
            logger.info(
                f"Produkt {product_id} już jest w koszyku, zwiekszam ilosc "
                f"z {existing_item.quantity} do {new_quantity}"
            )
            existing_item.quantity = new_quantity
            self.repo.add_cart_item(existing_item)
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        return self.get_cart(customer_id)

    def remove_product(self, customer_id: str, product_id: str) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_customer(customer_id)
        if cart:
            removed = self.repo.delete_cart_item(cart.id, product_id)
            logger.info(f"Usuwanie produktu {product_id} z koszyka {cart.id}: {removed} rows")
        return self.get_cart(customer_id)

    def clear_cart(self, customer_id: str) -> int:
        cart = self.repo.get_cart_by_customer(customer_id)
        if not cart:
            return 0
        return self.repo.clear_cart(cart.id)

    def update_delivery_fee(self, fee: Decimal) -> Decimal:
        if fee is None or fee < 0:
            raise log_rejection(
                logger,
                "update_delivery_fee",
                ValidationError(f"delivery fee {fee} must be >= 0", code="invalid_delivery_fee"),
            )
        row = self.settings.save_delivery_fee(to_money(fee))
        logger.info(f"Delivery fee set to {row.delivery_fee}")
        return to_money(row.delivery_fee)

    def _get_or_create_cart(self, customer_id: str) -> CartModel:
        cart = self.repo.get_cart_by_customer(customer_id)
        if cart:
            return cart
        created = self.repo.create_cart(CartModel(customer_id=customer_id))
        logger.info(f"Utworzono nowy koszyk {created.id} dla klienta {customer_id}")
        return created

    @staticmethod
    def _empty(customer_id: str, delivery_fee: Decimal, cart_id: str | None = None) -> Dict[str, Any]:
        return {
            "cart_id": cart_id,
            "customer_id": customer_id,
            "items": [],
            "subtotal": Decimal("0.00"),
            "delivery_fee": delivery_fee,
            "total": Decimal("0.00"),
        }
