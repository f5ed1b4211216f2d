# storefront/services/catalog_service.py
from decimal import Decimal
from math import ceil
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.settings import PRODUCTS_PER_PAGE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRICE_RANGES = [
    {"min": 0, "max": 25, "label": "Under ₦25"},
    {"min": 25, "max": 50, "label": "₦25 - ₦50"},
    {"min": 50, "max": 100, "label": "₦50 - ₦100"},
    {"min": 100, "max": None, "label": "Over ₦100"},
]
SORT_OPTIONS = ["newest", "price_low", "price_high", "name", "rating", "popular"]
FLAG_OPTIONS = ["featured", "new", "bestseller", "sale"]


class CatalogService:
    """Read side of the shop: listing, detail, categories, home page."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    @staticmethod
    def product_card(product: ProductModel) -> Dict[str, Any]:
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "category": product.category.name if product.category else None,
            "price": product.price,
            "original_price": product.compare_price if product.is_on_sale else None,
            "discount": product.discount_percentage,
            "rating": float(product.rating or 0),
            "review_count": product.review_count,
            "image": product.primary_image_url,
            "is_new": product.is_new,
            "is_featured": product.is_featured,
            "is_bestseller": product.is_bestseller,
            "in_stock": product.in_stock,
            "brand": product.brand,
        }

    @staticmethod
    def category_card(category: CategoryModel) -> Dict[str, Any]:
        return {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "image": category.image,
            "children": [
                {"id": c.id, "name": c.name, "slug": c.slug}
                for c in category.children
                if c.is_active
            ],
        }

    def list_products(
        self,
        category: str | None = None,
        flag: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort: str = "newest",
        page: int = 1,
    ) -> Dict[str, Any]:
        page = max(page, 1)

        category_ids = None
        if category:
            found = self.repo.get_category_by_slug(category)
            #unknown slug filters everything out instead of being ignored
            category_ids = self.repo.descendant_ids(found) if found else []

        products, total = self.repo.search_products(
            category_ids=category_ids,
            flag=flag,
            search=search,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            page=page,
            per_page=PRODUCTS_PER_PAGE,
        )

        return {
            "products": {
                "data": [self.product_card(p) for p in products],
                "current_page": page,
                "per_page": PRODUCTS_PER_PAGE,
                "total": total,
                "last_page": max(ceil(total / PRODUCTS_PER_PAGE), 1),
            },
            "categories": self.get_categories(),
            "filters": {
                "price_ranges": PRICE_RANGES,
                "sorts": SORT_OPTIONS,
                "flags": FLAG_OPTIONS,
            },
            "current_category": category,
            "current_filter": flag,
            "search_query": search,
        }

    def get_product(self, id_or_slug: str) -> Dict[str, Any]:
        product = self.repo.get_active_product(id_or_slug)
        if not product:
            raise NotFoundError("Product not found")

        self.repo.increment_view_count(product)
        logger.info(f"Product {product.id} viewed ({product.view_count} views)")

        detail = self.product_card(product)
        detail.update(
            {
                "description": product.description,
                "short_description": product.short_description,
                "sku": product.sku,
                "material": product.material,
                "images": [
                    {"url": i.url, "alt_text": i.alt_text, "is_primary": i.is_primary}
                    for i in product.images
                ],
                "sizes": product.sizes or [],
                "colors": product.colors or [],
                "features": product.features or [],
                "tags": product.tags or [],
                "stock_quantity": product.stock_quantity,
                "breadcrumbs": product.category.breadcrumbs() if product.category else [],
            }
        )

        return {
            "product": detail,
            "related_products": [
                self.product_card(p) for p in self.repo.related_products(product, limit=4)
            ],
        }

    def get_categories(self) -> list[Dict[str, Any]]:
        return [self.category_card(c) for c in self.repo.active_parent_categories()]

    def home(self) -> Dict[str, Any]:
        return {
            "featured_products": [self.product_card(p) for p in self.repo.flagged("featured")],
            "new_arrivals": [self.product_card(p) for p in self.repo.flagged("new")],
            "bestsellers": [self.product_card(p) for p in self.repo.flagged("bestseller")],
            "categories": self.get_categories(),
        }
