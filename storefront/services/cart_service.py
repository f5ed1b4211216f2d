# storefront/services/cart_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError
from storefront.domain.pricing import cart_summary
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.services.lock_service import LockService
from storefront.utils.settings import CART_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases for one user.
    commands (add, update, remove, clear) change state,
    queries (get_cart, count) only read.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.lock_service = lock_service

    # query

    def get_cart_items(self, user_id: int) -> List[Dict[str, Any]]:
        return [self.serialize_item(i) for i in self.repo.list_for_user(user_id)]

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.get_cart_items(user_id)
        return {
            "cart_items": items,
            "cart_summary": self.get_cart_summary(items),
        }

    @staticmethod
    def get_cart_summary(items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return cart_summary(items)

    def get_cart_count(self, user_id: int) -> int:
        return self.repo.count_quantity(user_id)

    @staticmethod
    def serialize_item(item: CartItemModel) -> Dict[str, Any]:
        product = item.product
        return {
            "id": item.id,
            "product": {
                "id": product.id,
                "name": product.name,
                "slug": product.slug,
                "image": product.primary_image_url,
                "in_stock": product.in_stock,
            },
            "quantity": item.quantity,
            "size": item.size,
            "color": item.color,
            "unit_price": item.price,
            "total_price": item.total_price,
        }

    # commands

    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: str | None = None,
        color: str | None = None,
    ) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        product = self.catalog.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        if not product.is_active:
            raise ValueError("Product is not available")

        if not product.in_stock:
            raise ValueError("Product is out of stock")

        key = self.lock_service.cart_line_key(user_id, product_id, size, color)
        with self.lock_service.hold(
            key,
            ttl=CART_LOCK_TTL_SECONDS,
            conflict_message="Cart is being updated, please try again",
        ):
            #same product/size/color merges into one line
            existing = self.repo.get_line(user_id, product_id, size, color)

            if existing:
                logger.info(
                    f"Product {product_id} already in cart of user {user_id}, quantity "
                    f"{existing.quantity} -> {existing.quantity + quantity}"
                )
                existing.quantity += quantity
            else:
                logger.info(f"Adding product {product_id} to cart of user {user_id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=product_id,
                        quantity=quantity,
                        size=size,
                        color=color,
                        price=product.price,
                    )
                )

            self.repo.commit()

        return {
            "message": "Item added to cart successfully!",
            "cart_count": self.get_cart_count(user_id),
        }

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        item = self.repo.get_item(user_id, item_id)
        if not item:
            raise NotFoundError("Cart item not found")

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart item {item_id} of user {user_id} set to quantity {quantity}")

        return {
            "message": "Cart updated successfully!",
            "cart_count": self.get_cart_count(user_id),
        }

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        removed = self.repo.delete_item(user_id, item_id)
        self.repo.commit()

        logger.info(f"Removed {removed} cart row(s) {item_id} for user {user_id}")

        return {
            "message": "Item removed from cart!",
            "cart_count": self.get_cart_count(user_id),
        }

    def clear(self, user_id: int) -> Dict[str, Any]:
        removed = self.repo.delete_for_user(user_id)
        self.repo.commit()

        logger.info(f"Cart of user {user_id} cleared, {removed} row(s) removed")

        return {"message": "Cart cleared!", "cart_count": 0}
