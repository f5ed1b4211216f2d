# storefront/repos/catalog_repo.py
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel

_SORTS = {
    "newest": (ProductModel.created_at.desc(), ProductModel.id.desc()),
    "price_low": (ProductModel.price.asc(),),
    "price_high": (ProductModel.price.desc(),),
    "name": (ProductModel.name.asc(),),
    "rating": (ProductModel.rating.desc(), ProductModel.review_count.desc()),
    "popular": (ProductModel.sales_count.desc(), ProductModel.view_count.desc()),
}

_FLAGS = {
    "featured": ProductModel.is_featured,
    "new": ProductModel.is_new,
    "bestseller": ProductModel.is_bestseller,
}


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # ---------- products ----------

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_active_product(self, id_or_slug: str) -> ProductModel | None:
        stmt = select(ProductModel).options(
            selectinload(ProductModel.images),
            selectinload(ProductModel.category),
        ).where(ProductModel.is_active.is_(True))

        if str(id_or_slug).isdigit():
            stmt = stmt.where(
                or_(ProductModel.id == int(id_or_slug), ProductModel.slug == str(id_or_slug))
            )
        else:
            stmt = stmt.where(ProductModel.slug == id_or_slug)
        return self.db.execute(stmt).scalars().first()

    def search_products(
        self,
        category_ids: list[int] | None = None,
        flag: str | None = None,
        search: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort: str = "newest",
        page: int = 1,
        per_page: int = 12,
    ) -> tuple[list[ProductModel], int]:
        stmt = select(ProductModel).where(ProductModel.is_active.is_(True))

        if category_ids is not None:
            stmt = stmt.where(ProductModel.category_id.in_(category_ids))

        if flag == "sale":
            stmt = stmt.where(
                ProductModel.compare_price.is_not(None),
                ProductModel.compare_price > ProductModel.price,
            )
        elif flag in _FLAGS:
            stmt = stmt.where(_FLAGS[flag].is_(True))

        if search:
            like = f"%{search}%"
            stmt = stmt.where(
                or_(
                    ProductModel.name.ilike(like),
                    ProductModel.description.ilike(like),
                    ProductModel.short_description.ilike(like),
                    ProductModel.brand.ilike(like),
                    ProductModel.sku.ilike(like),
                )
            )

        if min_price is not None:
            stmt = stmt.where(ProductModel.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(ProductModel.price <= max_price)

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        products = self.db.execute(
            stmt.options(
                selectinload(ProductModel.images),
                selectinload(ProductModel.category),
            )
            .order_by(*_SORTS.get(sort, _SORTS["newest"]))
            .offset((page - 1) * per_page)
            .limit(per_page)
        ).scalars().all()

        return list(products), total

    def flagged(self, flag: str, limit: int = 8) -> list[ProductModel]:
        products, _ = self.search_products(flag=flag, per_page=limit)
        return products

    def related_products(self, product: ProductModel, limit: int = 4) -> list[ProductModel]:
        if product.category_id is None:
            return []
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.category_id == product.category_id,
                    ProductModel.id != product.id,
                    ProductModel.is_active.is_(True),
                )
                .options(selectinload(ProductModel.images))
                .order_by(ProductModel.sales_count.desc(), ProductModel.id)
                .limit(limit)
            ).scalars().all()
        )

    def increment_view_count(self, product: ProductModel):
        product.view_count = (product.view_count or 0) + 1
        self.db.commit()

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def slug_exists(self, model, slug: str) -> bool:
        return self.db.execute(
            select(model.id).where(model.slug == slug)
        ).first() is not None

    # ---------- categories ----------

    def get_category_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def active_parent_categories(self) -> list[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(
                    CategoryModel.is_active.is_(True),
                    CategoryModel.parent_id.is_(None),
                )
                .options(selectinload(CategoryModel.children))
                .order_by(CategoryModel.sort_order, CategoryModel.name)
            ).scalars().all()
        )

    def descendant_ids(self, category: CategoryModel) -> list[int]:
        ids, stack = [], [category]
        while stack:
            current = stack.pop()
            ids.append(current.id)
            stack.extend(current.children)
        return ids

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def commit(self):
        self.db.commit()
