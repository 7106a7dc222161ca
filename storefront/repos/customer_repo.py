# storefront/repos/customer_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.customer import CustomerModel


class CustomerRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: str) -> CustomerModel | None:
        return self.db.get(CustomerModel, customer_id)

    def get_address(self, address_id: str) -> AddressModel | None:
        return self.db.get(AddressModel, address_id)

    def get_latest_address(self, customer_id: str) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel)
            .where(AddressModel.customer_id == customer_id)
            .order_by(AddressModel.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()
