from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.product import ProductModel
from storefront.data.models.wishlist import WishlistModel


class WishlistRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_entry(self, user_id: int, product_id: int) -> WishlistModel | None:
        return self.db.execute(
            select(WishlistModel).where(
                WishlistModel.user_id == user_id,
                WishlistModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def list_for_user(self, user_id: int) -> list[WishlistModel]:
        return list(
            self.db.execute(
                select(WishlistModel)
                .where(WishlistModel.user_id == user_id)
                .options(
                    selectinload(WishlistModel.product).selectinload(ProductModel.images),
                    selectinload(WishlistModel.product).selectinload(ProductModel.category),
                )
                .order_by(WishlistModel.created_at.desc(), WishlistModel.id.desc())
            ).scalars().all()
        )

    def add(self, user_id: int, product_id: int) -> WishlistModel:
        entry = WishlistModel(user_id=user_id, product_id=product_id)
        self.db.add(entry)
        self.db.commit()
        return entry

    def remove(self, entry: WishlistModel):
        self.db.delete(entry)
        self.db.commit()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(delete(WishlistModel).where(WishlistModel.user_id == user_id))
        self.db.commit()
        return result.rowcount
