# storefront/repos/order_repo.py
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.repos import fetch_page


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamówienie, stock i koszyk idą w jednej transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def list_user_orders(self, user_id: int, offset: int, limit: int) -> Tuple[List[OrderModel], int]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return fetch_page(self.db, stmt, offset, limit)

    def list_orders(self, offset: int, limit: int, status: Optional[str] = None) -> Tuple[List[OrderModel], int]:
        stmt = select(OrderModel)
        if status:
            stmt = stmt.where(OrderModel.status == status)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return fetch_page(self.db, stmt, offset, limit)

    def change_status(self, order_id: int, expected: Iterable[str], status: str) -> int:
        """UPDATE ... WHERE status IN expected, zwraca rowcount. Bez commita."""
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status.in_(list(expected)))
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
