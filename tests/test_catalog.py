# tests/test_catalog.py
from decimal import Decimal

from conftest import add_image, make_category, make_product


def names(body):
    return [p["name"] for p in body["products"]["data"]]


def test_category_filter_includes_children(client, db):
    men = make_category(db, "Men")
    shirts = make_category(db, "Men Shirts", parent=men)
    make_product(db, name="Linen Shirt", category=shirts)
    make_product(db, name="Wool Coat", category=men)
    make_product(db, name="Silk Scarf")

    body = client.get("/product-list", params={"category": "men", "sort": "name"}).json()

    assert names(body) == ["Linen Shirt", "Wool Coat"]
    assert body["current_category"] == "men"

    body = client.get("/product-list", params={"category": "men-shirts"}).json()
    assert names(body) == ["Linen Shirt"]


def test_unknown_category_lists_nothing(client, db):
    make_product(db)
    body = client.get("/product-list", params={"category": "nowhere"}).json()
    assert body["products"]["total"] == 0


def test_sale_filter_search_price_and_sort(client, db):
    make_product(db, name="Denim Jacket", price="80.00", compare_price=Decimal("100.00"))
    make_product(db, name="Denim Jeans", price="40.00")
    make_product(db, name="Hidden Denim", price="10.00", is_active=False)
    make_product(db, name="Cotton Tee", price="15.00")

    body = client.get("/product-list", params={"filter": "sale"}).json()
    assert names(body) == ["Denim Jacket"]
    card = body["products"]["data"][0]
    assert card["discount"] == 20.0
    assert float(card["original_price"]) == 100.0

    body = client.get("/product-list", params={"search": "denim", "sort": "price_low"}).json()
    assert names(body) == ["Denim Jeans", "Denim Jacket"]

    body = client.get("/product-list", params={"min_price": 20, "max_price": 50}).json()
    assert names(body) == ["Denim Jeans"]


def test_pagination(client, db):
    for i in range(15):
        make_product(db, name=f"Tee {i:02d}")

    body = client.get("/product-list", params={"page": 2, "sort": "name"}).json()

    assert body["products"]["total"] == 15
    assert body["products"]["last_page"] == 2
    assert names(body) == ["Tee 12", "Tee 13", "Tee 14"]


def test_product_detail_counts_views_and_lists_related(client, db):
    men = make_category(db, "Men")
    product = make_product(db, name="Linen Shirt", category=men, sizes=["S", "M"])
    add_image(db, product, path="products/linen.jpg")
    for i in range(5):
        make_product(db, name=f"Other {i}", category=men)
    make_product(db, name="Elsewhere")

    body = client.get(f"/products/{product.slug}").json()
    client.get(f"/products/{product.id}")

    assert body["product"]["sizes"] == ["S", "M"]
    assert body["product"]["images"][0]["url"].endswith("/storage/products/linen.jpg")
    assert body["product"]["breadcrumbs"] == [
        {"name": "Men", "slug": "men", "url": "/product-list?category=men"}
    ]
    assert len(body["related_products"]) == 4
    assert "Elsewhere" not in [p["name"] for p in body["related_products"]]
    db.refresh(product)
    assert product.view_count == 2


def test_inactive_or_missing_product_is_404(client, db):
    hidden = make_product(db, is_active=False)
    assert client.get(f"/products/{hidden.slug}").status_code == 404
    assert client.get("/products/does-not-exist").status_code == 404


def test_categories_and_home(client, db):
    women = make_category(db, "Women")
    make_category(db, "Dresses", parent=women)
    make_product(db, name="Featured Dress", is_featured=True)
    make_product(db, name="New Dress", is_new=True)

    categories = client.get("/categories").json()
    assert [c["name"] for c in categories] == ["Women"]
    assert [c["slug"] for c in categories[0]["children"]] == ["dresses"]

    home = client.get("/").json()
    assert [p["name"] for p in home["featured_products"]] == ["Featured Dress"]
    assert [p["name"] for p in home["new_arrivals"]] == ["New Dress"]
    assert home["bestsellers"] == []
