import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.status import OrderStatus, PaymentMethod


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False, index=True)
    shipping_address_id = Column(String(36), ForeignKey("addresses.id", ondelete="SET NULL"), nullable=True)

    # snapshot adresu z chwili zlozenia zamowienia
    shipping_address_line_1 = Column(String, nullable=True)
    shipping_address_line_2 = Column(String, nullable=True)
    shipping_city = Column(String, nullable=True)
    shipping_state = Column(String, nullable=True)
    shipping_postal_code = Column(String, nullable=True)
    shipping_country = Column(String, nullable=True)
    shipping_phone = Column(String, nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    payment_method = Column(String(32), nullable=False, default=PaymentMethod.CASH_ON_DELIVERY.value)

    status = Column(String(32), nullable=True, default=OrderStatus.PENDING_CONFIRMATION.value, index=True)
    order_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    document_url = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        order_by="OrderItemModel.position",
        passive_deletes=True,
    )
