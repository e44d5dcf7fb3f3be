# storefront/repos/order_repo.py
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.product import ProductModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_for_user(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        ).scalar_one_or_none()

    def list_for_user(
        self, user_id: int, status: str | None = None, page: int = 1, limit: int = 10
    ) -> Tuple[List[OrderModel], int]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id)
        if status:
            stmt = stmt.where(OrderModel.order_status == status)
        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        orders = self.db.execute(
            stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(orders), total

    def status_summary_for_user(self, user_id: int):
        return self.db.execute(
            select(OrderModel.order_status, func.count(OrderModel.id), func.sum(OrderModel.total_amount))
            .where(OrderModel.user_id == user_id)
            .group_by(OrderModel.order_status)
            .order_by(OrderModel.order_status)
        ).all()

    def count_between(self, start: datetime, end: datetime) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.created_at >= start, OrderModel.created_at < end)
        ).scalar_one()

    def order_number_exists(self, order_number: str) -> bool:
        return self.db.execute(
            select(OrderModel.id).where(OrderModel.order_number == order_number)
        ).first() is not None

    def user_has_delivered(self, user_id: int, product_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .join(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .where(
                OrderModel.user_id == user_id,
                OrderModel.order_status == "Delivered",
                OrderItemModel.product_id == product_id,
            )
            .order_by(OrderModel.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()

    def list_for_user_all(self, user_id: int, limit: int | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id).order_by(OrderModel.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def delete_for_user(self, user_id: int) -> None:
        self.db.execute(delete(OrderModel).where(OrderModel.user_id == user_id))

    # ---------------------------------------------------------------
    # reporting
    # ---------------------------------------------------------------
    def count(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def revenue(self):
        return self.db.execute(select(func.coalesce(func.sum(OrderModel.total_amount), 0))).scalar_one()

    def created_since(self, since: datetime) -> List[Tuple[datetime, object]]:
        return self.db.execute(
            select(OrderModel.created_at, OrderModel.total_amount)
            .where(OrderModel.created_at >= since)
            .order_by(OrderModel.created_at)
        ).all()

    def top_products(self, since: datetime, limit: int = 5):
        revenue = func.sum(OrderItemModel.price * OrderItemModel.quantity)
        return self.db.execute(
            select(
                OrderItemModel.product_id,
                ProductModel.name,
                func.sum(OrderItemModel.quantity),
                revenue,
            )
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .where(OrderModel.created_at >= since)
            .group_by(OrderItemModel.product_id, ProductModel.name)
            .order_by(revenue.desc())
            .limit(limit)
        ).all()

    def status_breakdown(self):
        return self.db.execute(
            select(OrderModel.order_status, func.count(OrderModel.id))
            .group_by(OrderModel.order_status)
            .order_by(OrderModel.order_status)
        ).all()

    def recent(self, limit: int = 5) -> List[OrderModel]:
        return list(
            self.db.execute(select(OrderModel).order_by(OrderModel.created_at.desc()).limit(limit)).scalars().all()
        )

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, order: OrderModel):
        self.db.refresh(order)
