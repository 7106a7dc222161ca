# storefront/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    """
    Dostep do stanu magazynowego produktow.
    Zmiany stanu sa warunkowe (pojedynczy UPDATE), bez locka w aplikacji.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: str) -> ProductModel | None:
        # stan zmieniaja warunkowe UPDATE-y, wiec zawsze swiezy odczyt
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def get_products(self, product_ids) -> dict[str, ProductModel]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {p.id: p for p in rows}

    def get_stock(self, product_id: str) -> int | None:
        return self.db.execute(
            select(ProductModel.stock).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def decrement_stock(self, product_id: str, quantity: int) -> bool:
        # update ... set stock = stock - q where id = ? and stock >= q
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def restore_stock(self, product_id: str, quantity: int) -> bool:
        # False gdy produkt zostal usuniety z katalogu
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def rollback(self):
        self.db.rollback()
