# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.status import OrderStatus


class OrderRepo:
    """
    CRUD na poziomie wierszy. Kazda operacja zapisu to osobny commit,
    spojnosc wieloetapowa zapewnia serwis (kompensacja).
    """

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def add_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.commit()
        return item

    def delete_items(self, order_id: str) -> int:
        result = self.db.execute(
            delete(OrderItemModel).where(OrderItemModel.order_id == order_id)
        )
        self.db.commit()
        return result.rowcount

    def delete_order(self, order_id: str) -> int:
        result = self.db.execute(
            delete(OrderModel).where(OrderModel.id == order_id)
        )
        self.db.commit()
        return result.rowcount

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get_items(self, order_id: str) -> list[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.position)
            ).scalars().all()
        )

    def list_orders(
        self,
        customer_id: str | None = None,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel)
        count_query = select(func.count(OrderModel.id))
        if customer_id:
            query = query.where(OrderModel.customer_id == customer_id)
            count_query = count_query.where(OrderModel.customer_id == customer_id)
        if status:
            condition = self._status_condition(status)
            query = query.where(condition)
            count_query = count_query.where(condition)

        rows = self.db.execute(
            query.options(selectinload(OrderModel.items))
            .order_by(OrderModel.order_date.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()
        total = self.db.execute(count_query).scalar_one()
        return list(rows), total

    @staticmethod
    def _status_condition(status: str):
        if status != OrderStatus.PENDING_CONFIRMATION.value:
            return OrderModel.status == status
        # NULL i nieznane statusy licza sie jako oczekujace, tak jak w statystykach
        others = [s.value for s in OrderStatus if s != OrderStatus.PENDING_CONFIRMATION]
        return or_(OrderModel.status.is_(None), OrderModel.status.notin_(others))

    def update_status_if(self, order_id: str, expected: str | None, target: str) -> int:
        """
        update orders set status = target where id = ? and status = expected
        Zwraca rowcount, 0 = ktos zmienil status w miedzyczasie.
        """
        condition = (
            OrderModel.status.is_(None) if expected is None else OrderModel.status == expected
        )
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, condition)
            .values(status=target, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def update_total_if(self, order_id: str, expected: str | None, total, notes: str | None) -> int:
        condition = (
            OrderModel.status.is_(None) if expected is None else OrderModel.status == expected
        )
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, condition)
            .values(total_amount=total, notes=notes, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def set_document_url(self, order_id: str, url: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(document_url=url)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def get_stats_rows(self):
        # tylko kolumny potrzebne do projekcji statystyk
        return self.db.execute(
            select(OrderModel.status, OrderModel.total_amount, OrderModel.order_date)
        ).all()

    def find_orphans(self, created_before: datetime) -> list[str]:
        has_items = (
            select(OrderItemModel.id)
            .where(OrderItemModel.order_id == OrderModel.id)
            .exists()
        )
        return list(
            self.db.execute(
                select(OrderModel.id).where(
                    OrderModel.order_date < created_before,
                    ~has_items,
                )
            ).scalars().all()
        )

    def rollback(self):
        self.db.rollback()
