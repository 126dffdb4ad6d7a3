# app/repos/order_repo.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #flush only, the caller commits together with the cart removal
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_by_user(self, user_id: int, status: str | None = None) -> list[OrderModel]:
        query = select(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            query = query.where(OrderModel.status == status)
        return self._newest_first(query)

    def list_by_restaurant(self, restaurant_id: int, status: str | None = None) -> list[OrderModel]:
        query = select(OrderModel).where(OrderModel.restaurant_id == restaurant_id)
        if status:
            query = query.where(OrderModel.status == status)
        return self._newest_first(query)

    def _newest_first(self, query) -> list[OrderModel]:
        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(query).scalars().all())

    def update_if_status(self, order_id: int, expected_status: str, new_data: dict[str, Any]) -> int:
        """
        Optimistic update: UPDATE orders SET ... WHERE id = :id AND status = :expected.
        Returns rowcount, 0 means the status moved underneath us.
        """
        values = {**new_data, "updated_at": datetime.now(timezone.utc)}
        result = self.db.execute(
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == expected_status,
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
