from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric

from storefront.data.database import Base


class StoreSettingsModel(Base):
    __tablename__ = "store_settings"

    id = Column(Integer, primary_key=True)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
