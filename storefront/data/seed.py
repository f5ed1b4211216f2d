# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CategoryModel, ProductImageModel, ProductModel
from storefront.domain.factories import new_sku, slugify
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = {
    "Men's Clothing": ["T-Shirts", "Shirts", "Trousers"],
    "Women's Clothing": ["Dresses", "Blouses", "Skirts"],
    "Footwear": ["Sneakers", "Formal Shoes"],
    "Corporate Wear": ["Suits", "Blazers"],
}

PRODUCTS = [
    ("Premium Cotton T-Shirt", "T-Shirts", "29.99", "39.99", {"is_new": True, "is_featured": True}),
    ("Classic Oxford Shirt", "Shirts", "49.99", None, {"is_bestseller": True}),
    ("Slim Fit Chinos", "Trousers", "59.99", "69.99", {}),
    ("Floral Summer Dress", "Dresses", "79.99", None, {"is_new": True}),
    ("Silk Blouse", "Blouses", "64.50", None, {"is_featured": True}),
    ("Pleated Midi Skirt", "Skirts", "44.00", "55.00", {}),
    ("Canvas Sneakers", "Sneakers", "34.99", None, {"is_bestseller": True}),
    ("Leather Derby Shoes", "Formal Shoes", "119.00", None, {}),
    ("Two-Piece Business Suit", "Suits", "249.00", "299.00", {"is_featured": True}),
    ("Tailored Navy Blazer", "Blazers", "139.99", None, {"is_new": True}),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return

        repo = CatalogRepo(db)
        children = {}
        for order, (parent_name, child_names) in enumerate(CATEGORIES.items()):
            parent = repo.add_category(
                CategoryModel(name=parent_name, slug=slugify(parent_name), sort_order=order)
            )
            for child_order, child_name in enumerate(child_names):
                children[child_name] = repo.add_category(
                    CategoryModel(
                        name=child_name,
                        slug=slugify(f"{parent_name} {child_name}"),
                        parent_id=parent.id,
                        sort_order=child_order,
                    )
                )

        for name, category, price, compare_price, flags in PRODUCTS:
            product = repo.add_product(
                ProductModel(
                    name=name,
                    slug=slugify(name),
                    sku=new_sku(),
                    description=f"{name} from the JPATHNEC collection.",
                    short_description=name,
                    price=Decimal(price),
                    compare_price=Decimal(compare_price) if compare_price else None,
                    stock_quantity=50,
                    sizes=["S", "M", "L", "XL"],
                    colors=["Black", "White", "Navy"],
                    category_id=children[category].id,
                    **flags,
                )
            )
            db.add(
                ProductImageModel(
                    product_id=product.id,
                    image_path=f"products/{product.slug}.jpg",
                    alt_text=name,
                    is_primary=True,
                )
            )

        repo.commit()
        logger.info(f"Seeded {len(children)} categories and {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
