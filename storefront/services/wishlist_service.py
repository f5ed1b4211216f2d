# storefront/services/wishlist_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.errors import AlreadyExistsError, NotFoundError
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.wishlist_repo import WishlistRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_SORT_KEYS = {
    "oldest": (lambda e: e.created_at, False),
    "price_low": (lambda e: e.product.price, False),
    "price_high": (lambda e: e.product.price, True),
    "name": (lambda e: e.product.name.lower(), False),
    "newest": (lambda e: e.created_at, True),
}


class WishlistService:
    def __init__(self, db: Session):
        self.repo = WishlistRepo(db)
        self.catalog = CatalogRepo(db)

    def list_items(
        self,
        user_id: int,
        search: str | None = None,
        category: str | None = None,
        brand: str | None = None,
        sort: str = "newest",
    ) -> Dict[str, Any]:
        entries = [e for e in self.repo.list_for_user(user_id) if e.product is not None]

        #filter choices come from the whole wishlist, not the filtered view
        categories = sorted({e.product.category.name for e in entries if e.product.category})
        brands = sorted({e.product.brand for e in entries if e.product.brand})

        if search:
            needle = search.lower()
            entries = [
                e for e in entries
                if needle in e.product.name.lower()
                or needle in (e.product.description or "").lower()
            ]
        if category:
            entries = [
                e for e in entries
                if e.product.category and e.product.category.name == category
            ]
        if brand:
            entries = [e for e in entries if e.product.brand == brand]

        key, reverse = _SORT_KEYS.get(sort, _SORT_KEYS["newest"])
        entries = sorted(entries, key=key, reverse=reverse)

        return {
            "products": [self.serialize(e) for e in entries],
            "categories": categories,
            "brands": brands,
            "filters": {"search": search, "category": category, "brand": brand, "sort": sort},
        }

    @staticmethod
    def serialize(entry) -> Dict[str, Any]:
        product = entry.product
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "price": product.price,
            "compare_price": product.compare_price,
            "description": product.description,
            "images": [i.url for i in product.images],
            "category": product.category.name if product.category else "Uncategorized",
            "brand": product.brand,
            "in_stock": product.in_stock,
            "stock_quantity": product.stock_quantity,
            "rating": float(product.rating or 0),
            "reviews_count": product.review_count or 0,
            "added_to_wishlist_at": entry.created_at,
        }

    def _ensure_product(self, product_id: int):
        if not self.catalog.get_product(product_id):
            raise NotFoundError("Product not found")

    def add(self, user_id: int, product_id: int) -> Dict[str, Any]:
        self._ensure_product(product_id)
        if self.repo.get_entry(user_id, product_id):
            raise AlreadyExistsError("Product is already in your wishlist")

        self.repo.add(user_id, product_id)
        logger.info(f"Product {product_id} added to wishlist of user {user_id}")
        return {"message": "Product added to wishlist", "in_wishlist": True}

    def remove(self, user_id: int, product_id: int) -> Dict[str, Any]:
        entry = self.repo.get_entry(user_id, product_id)
        if not entry:
            raise NotFoundError("Product not found in wishlist")

        self.repo.remove(entry)
        logger.info(f"Product {product_id} removed from wishlist of user {user_id}")
        return {"message": "Product removed from wishlist", "in_wishlist": False}

    def clear(self, user_id: int) -> Dict[str, Any]:
        removed = self.repo.clear(user_id)
        logger.info(f"Wishlist of user {user_id} cleared, {removed} row(s) removed")
        return {"message": "Wishlist cleared"}

    def toggle(self, user_id: int, product_id: int) -> Dict[str, Any]:
        self._ensure_product(product_id)
        if self.repo.get_entry(user_id, product_id):
            return self.remove(user_id, product_id)
        return self.add(user_id, product_id)

    def check(self, user_id: int, product_id: int) -> Dict[str, Any]:
        return {"in_wishlist": self.repo.get_entry(user_id, product_id) is not None}
