# storefront/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, PaymentStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_for_user(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
            .options(selectinload(OrderModel.items))
        ).scalar_one_or_none()

    def get_by_reference(self, reference: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.payment_reference == reference)
        ).scalar_one_or_none()

    def get_by_number_for_user(self, order_number: str, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .where(
                OrderModel.order_number == order_number,
                OrderModel.user_id == user_id,
            )
            .options(selectinload(OrderModel.items))
        ).scalar_one_or_none()

    def list_for_user(
        self,
        user_id: int,
        search: str | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 5,
    ) -> tuple[list[OrderModel], int]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id)

        if search:
            like = f"%{search}%"
            item_match = (
                select(OrderItemModel.order_id)
                .where(OrderItemModel.product_name.ilike(like))
            )
            stmt = stmt.where(
                or_(OrderModel.order_number.ilike(like), OrderModel.id.in_(item_match))
            )

        if status:
            stmt = stmt.where(OrderModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        orders = self.db.execute(
            stmt.options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        ).scalars().all()

        return list(orders), total

    def stale_pending(self, cutoff: datetime) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(
                    OrderModel.status == OrderStatus.PENDING.value,
                    OrderModel.payment_status == PaymentStatus.PENDING.value,
                    OrderModel.created_at < cutoff,
                )
            ).scalars().all()
        )

    def delete(self, order: OrderModel):
        self.db.delete(order)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
