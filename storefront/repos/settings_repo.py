# storefront/repos/settings_repo.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.store_settings import StoreSettingsModel


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_latest(self) -> StoreSettingsModel | None:
        return self.db.execute(
            select(StoreSettingsModel)
            .order_by(StoreSettingsModel.updated_at.desc(), StoreSettingsModel.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def save_delivery_fee(self, fee: Decimal) -> StoreSettingsModel:
        row = self.get_latest()
        if row is None:
            row = StoreSettingsModel(delivery_fee=fee)
            self.db.add(row)
        else:
            row.delivery_fee = fee
            row.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(row)
        return row
