# storefront/repos/cart_repo.py
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == user_id)
                .options(
                    selectinload(CartItemModel.product).selectinload(ProductModel.images)
                )
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_item(self, user_id: int, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def get_line(
        self,
        user_id: int,
        product_id: int,
        size: str | None,
        color: str | None,
    ) -> CartItemModel | None:
        #NULL != NULL in SQL, so options are matched with IS for missing values
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
            CartItemModel.size.is_(None) if size is None else CartItemModel.size == size,
            CartItemModel.color.is_(None) if color is None else CartItemModel.color == color,
        )
        return self.db.execute(stmt).scalars().first()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        return item

    def delete_item(self, user_id: int, item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id == item_id,
                CartItemModel.user_id == user_id,
            )
        )
        return result.rowcount

    def delete_for_user(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount

    def count_quantity(self, user_id: int) -> int:
        total = self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.quantity), 0)).where(
                CartItemModel.user_id == user_id
            )
        ).scalar_one()
        return int(total)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
