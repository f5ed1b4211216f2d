# tests/test_cart.py
from decimal import Decimal

from conftest import add_image, add_to_cart, auth, cart_rows, make_product, make_user
from storefront.services.lock_service import LockService


def test_same_line_add_increments_quantity(client, db):
    user = make_user(db)
    product = make_product(db, price="29.99")

    for _ in range(2):
        resp = client.post(
            "/cart/add",
            json={"product_id": product.id, "quantity": 1, "size": "M", "color": "Black"},
            headers=auth(user),
        )
        assert resp.status_code == 200

    rows = cart_rows(db, user)
    assert len(rows) == 1
    assert rows[0].quantity == 2
    assert resp.json()["cart_count"] == 2


def test_different_options_make_separate_lines(client, db):
    user = make_user(db)
    product = make_product(db)

    client.post("/cart/add", json={"product_id": product.id, "quantity": 1, "size": "M"}, headers=auth(user))
    client.post("/cart/add", json={"product_id": product.id, "quantity": 1, "size": "L"}, headers=auth(user))
    client.post("/cart/add", json={"product_id": product.id, "quantity": 1}, headers=auth(user))

    assert len(cart_rows(db, user)) == 3


def test_add_snapshots_price(client, db):
    user = make_user(db)
    product = make_product(db, price="10.00")

    client.post("/cart/add", json={"product_id": product.id, "quantity": 1}, headers=auth(user))
    product.price = Decimal("12.00")
    db.commit()

    assert cart_rows(db, user)[0].price == Decimal("10.00")


def test_add_rejects_missing_inactive_and_out_of_stock(client, db):
    user = make_user(db)
    inactive = make_product(db, name="Old Tee", is_active=False)
    sold_out = make_product(db, name="Rare Tee", stock_quantity=0)

    assert client.post("/cart/add", json={"product_id": 999, "quantity": 1}, headers=auth(user)).status_code == 404
    assert client.post("/cart/add", json={"product_id": inactive.id, "quantity": 1}, headers=auth(user)).status_code == 400
    assert client.post("/cart/add", json={"product_id": sold_out.id, "quantity": 1}, headers=auth(user)).status_code == 400
    assert client.post("/cart/add", json={"product_id": sold_out.id, "quantity": 0}, headers=auth(user)).status_code == 422


def test_add_runs_under_cart_line_lock(client, db, locks):
    user = make_user(db)
    product = make_product(db)
    key = LockService.cart_line_key(user.id, product.id, "M", None)

    client.post("/cart/add", json={"product_id": product.id, "quantity": 1, "size": "M"}, headers=auth(user))
    assert key in locks.acquired
    assert key not in locks.held

    locks.held[key] = "someone-else"
    resp = client.post("/cart/add", json={"product_id": product.id, "quantity": 1, "size": "M"}, headers=auth(user))
    assert resp.status_code == 409
    assert cart_rows(db, user)[0].quantity == 1


def test_get_cart_with_summary(client, db):
    user = make_user(db)
    product = make_product(db, price="29.99")
    add_image(db, product, path="products/tee.jpg")
    add_to_cart(db, user, product, quantity=2)

    body = client.get("/cart", headers=auth(user)).json()

    item = body["cart_items"][0]
    assert item["product"]["name"] == "Cotton Tee"
    assert item["product"]["image"].endswith("/storage/products/tee.jpg")
    assert Decimal(str(item["total_price"])) == Decimal("59.98")

    summary = body["cart_summary"]
    assert Decimal(str(summary["tax"])) == Decimal("6.00")
    assert Decimal(str(summary["shipping"])) == Decimal("0")
    assert Decimal(str(summary["total"])) == Decimal("65.98")
    assert summary["item_count"] == 2


def test_update_remove_count_clear(client, db):
    user = make_user(db)
    other = make_user(db, email="bob@mail.com", name="Bob")
    a = add_to_cart(db, user, make_product(db, name="A"), quantity=1)
    b = add_to_cart(db, user, make_product(db, name="B"), quantity=2)
    theirs = add_to_cart(db, other, make_product(db, name="C"), quantity=1)

    resp = client.patch(f"/cart/update/{a.id}", json={"quantity": 5}, headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["cart_count"] == 7

    assert client.patch(f"/cart/update/{theirs.id}", json={"quantity": 5}, headers=auth(user)).status_code == 404

    resp = client.delete(f"/cart/remove/{b.id}", headers=auth(user))
    assert resp.json()["cart_count"] == 5

    assert client.get("/cart/count", headers=auth(user)).json() == {"count": 5}

    resp = client.delete("/cart/clear", headers=auth(user))
    assert resp.json()["cart_count"] == 0
    assert cart_rows(db, user) == []
    assert len(cart_rows(db, other)) == 1


def test_cart_requires_token(client):
    assert client.get("/cart").status_code == 401
    assert client.get("/cart", headers={"Authorization": "Bearer nope"}).status_code == 401
