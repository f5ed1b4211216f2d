# tests/test_orders.py
from datetime import datetime, timedelta, timezone

import pytest

from conftest import RecordingNotifier, auth, cart_rows, make_order, make_product, make_user
from storefront.domain.enums import (
    ALLOWED_TRANSITIONS,
    OrderStatus,
    can_transition,
    ensure_transition,
    progress_percentage,
)
from storefront.domain.errors import InvalidTransitionError
from storefront.domain.factories import build_order_item
from storefront.services import notification_service
from storefront.services.order_service import OrderService
from storefront.tasks.expire import expire_pending_orders


# ---------- transition table ----------

@pytest.mark.parametrize(
    "current,target",
    [
        ("pending", "shipped"),
        ("pending", "delivered"),
        ("shipped", "cancelled"),
        ("delivered", "shipped"),
        ("cancelled", "processing"),
        ("refunded", "pending"),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransitionError):
        ensure_transition(current, target)


def test_allowed_transitions_and_same_status():
    for current, targets in ALLOWED_TRANSITIONS.items():
        for target in targets:
            assert ensure_transition(current.value, target.value) == target
        assert can_transition(current.value, current.value)


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidTransitionError):
        ensure_transition("pending", "teleported")


def test_progress_percentage():
    assert [progress_percentage(s.value) for s in OrderStatus] == [25, 50, 75, 100, 0, 0]
    assert progress_percentage("nonsense") == 0


# ---------- admin status update ----------

def test_status_update_requires_admin(client, db):
    user = make_user(db)
    order = make_order(db, user, status="processing", payment_status="paid")

    resp = client.patch(f"/admin/orders/{order.id}/status", json={"status": "shipped"}, headers=auth(user))

    assert resp.status_code == 403


def test_status_update_sets_tracking_and_notifies(client, db, notifier):
    admin = make_user(db, email="admin@mail.com", name="Admin", is_admin=True)
    customer = make_user(db)
    order = make_order(db, customer, status="processing", payment_status="paid")

    resp = client.patch(
        f"/admin/orders/{order.id}/status",
        json={
            "status": "shipped",
            "tracking_number": "TRK-1",
            "location": "Lagos Distribution Center",
            "description": "Left the warehouse",
        },
        headers=auth(admin),
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "shipped"
    assert order.shipped_at is not None
    assert order.status_updated_at is not None
    assert order.tracking_number == "TRK-1"
    assert order.current_location == "Lagos Distribution Center"

    (mail,) = notifier.emails
    assert mail["to"] == customer.email
    assert mail["subject"] == f"Order Shipped - Order #{order.order_number}"
    assert "Tracking Number: TRK-1" in mail["body"]


def test_invalid_transition_is_400(client, db, notifier):
    admin = make_user(db, email="admin@mail.com", is_admin=True)
    order = make_order(db, admin, status="pending")

    resp = client.patch(f"/admin/orders/{order.id}/status", json={"status": "delivered"}, headers=auth(admin))

    assert resp.status_code == 400
    assert order.status == "pending"
    assert notifier.emails == []


def test_same_status_update_does_not_notify(client, db, notifier):
    admin = make_user(db, email="admin@mail.com", is_admin=True)
    order = make_order(db, admin, status="shipped", payment_status="paid")

    resp = client.patch(
        f"/admin/orders/{order.id}/status",
        json={"status": "shipped", "location": "Abuja hub"},
        headers=auth(admin),
    )

    assert resp.status_code == 200
    assert order.current_location == "Abuja hub"
    assert notifier.emails == []


def test_status_update_queues_whatsapp_when_enabled(db, monkeypatch):
    admin = make_user(db, email="admin@mail.com", is_admin=True)
    order = make_order(db, admin, status="shipped", payment_status="paid")
    order.phone = "08012345678"
    db.commit()

    queued = []

    class FakeTask:
        @staticmethod
        def delay(*args):
            queued.append(args)

    monkeypatch.setattr(notification_service, "send_whatsapp_task", FakeTask)
    notifier = RecordingNotifier(whatsapp_enabled=True)

    OrderService(db, notifier).update_status(admin, order.id, "delivered")

    assert order.delivered_at is not None
    (args,) = queued
    assert args[0] == "08012345678"
    assert args[1] == "order_status_update"
    assert {"type": "text", "text": "Delivered"} in args[2]


def test_unknown_order_is_404(client, db):
    admin = make_user(db, email="admin@mail.com", is_admin=True)
    resp = client.patch("/admin/orders/404/status", json={"status": "shipped"}, headers=auth(admin))
    assert resp.status_code == 404


# ---------- my orders ----------

def test_my_orders_paginates_and_filters(client, db):
    user = make_user(db)
    other = make_user(db, email="bob@mail.com")
    tee = make_product(db, name="Cotton Tee")
    hat = make_product(db, name="Straw Hat")
    for _ in range(6):
        make_order(db, user, tee)
    hat_order = make_order(db, user, hat, status="processing", payment_status="paid")
    make_order(db, other, hat)

    body = client.get("/my-orders", headers=auth(user)).json()
    assert body["orders"]["total"] == 7
    assert len(body["orders"]["data"]) == 5
    assert body["orders"]["last_page"] == 2
    assert body["orders"]["data"][0]["id"] == hat_order.id

    body = client.get("/my-orders", params={"search": "straw"}, headers=auth(user)).json()
    assert [o["id"] for o in body["orders"]["data"]] == [hat_order.id]

    body = client.get("/my-orders", params={"search": hat_order.order_number}, headers=auth(user)).json()
    assert body["orders"]["total"] == 1

    body = client.get("/my-orders", params={"status": "processing"}, headers=auth(user)).json()
    assert body["orders"]["total"] == 1


def test_other_users_orders_are_hidden(client, db):
    user = make_user(db)
    other = make_user(db, email="bob@mail.com")
    theirs = make_order(db, other)

    assert client.get(f"/my-orders/{theirs.id}", headers=auth(user)).status_code == 404
    assert client.get(f"/my-orders/{theirs.id}/track", headers=auth(user)).status_code == 404
    assert client.get(f"/my-orders/{theirs.id}", headers=auth(other)).status_code == 200


def test_track_order(client, db):
    user = make_user(db)
    order = make_order(db, user, status="processing", payment_status="paid")

    body = client.get(f"/my-orders/{order.id}/track", headers=auth(user)).json()

    assert body["progress_percentage"] == 50
    completed = [e["status"] for e in body["timeline"] if e["completed"]]
    assert completed == ["pending", "processing"]


def test_timeline_keeps_steps_of_cancelled_and_refunded_orders(db):
    user = make_user(db)
    cancelled = make_order(db, user, status="cancelled", payment_status="paid")
    refunded = make_order(db, user, status="refunded", payment_status="refunded")
    refunded.shipped_at = refunded.delivered_at = datetime.now(timezone.utc)
    unpaid = make_order(db, user, status="cancelled", payment_status="failed")

    def completed(order):
        return [e["status"] for e in OrderService.timeline(order) if e["completed"]]

    assert completed(cancelled) == ["pending", "processing", "cancelled"]
    assert completed(refunded) == ["pending", "processing", "shipped", "delivered", "refunded"]
    assert completed(unpaid) == ["pending", "cancelled"]


def test_reorder_skips_unavailable_products(client, db):
    user = make_user(db)
    tee = make_product(db, name="Cotton Tee")
    old = make_product(db, name="Old Hat", is_active=False)
    order = make_order(db, user, tee, quantity=2)
    order.items.append(build_order_item(old.id, 1, old.price, product=old))
    db.commit()

    body = client.post(f"/my-orders/{order.id}/reorder", headers=auth(user)).json()

    assert body["added"] == 1
    assert body["skipped"] == ["Old Hat (no longer available)"]
    assert body["cart_count"] == 2
    (row,) = cart_rows(db, user)
    assert row.product_id == tee.id


def test_invoice_only_for_paid_orders(client, db):
    user = make_user(db)
    unpaid = make_order(db, user)
    paid = make_order(db, user, status="processing", payment_status="paid")

    resp = client.get(f"/my-orders/{unpaid.id}/invoice", headers=auth(user))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invoice is only available for paid orders."

    body = client.get(f"/my-orders/{paid.id}/invoice", headers=auth(user)).json()
    assert body["invoice_number"] == f"INV-{paid.order_number}"
    assert body["file_name"] == f"invoice-{paid.order_number}.pdf"


def test_checkout_success_page(client, db):
    user = make_user(db)
    order = make_order(db, user)

    resp = client.get("/checkout/success", params={"order": order.order_number}, headers=auth(user))
    assert resp.json()["order"]["id"] == order.id

    assert client.get("/checkout/success", params={"order": "JP-NOPE0000"}, headers=auth(user)).status_code == 404
    assert client.get("/checkout/success", headers=auth(user)).status_code == 404


# ---------- expiry ----------

def test_expire_pending_orders(db):
    user = make_user(db)
    stale = make_order(db, user)
    stale.created_at = datetime.now(timezone.utc) - timedelta(days=2)
    fresh = make_order(db, user)
    paid = make_order(db, user, status="processing", payment_status="paid")
    paid.created_at = datetime.now(timezone.utc) - timedelta(days=2)
    db.commit()

    assert expire_pending_orders(db, ttl_seconds=24 * 60 * 60) == 1

    assert stale.status == "cancelled"
    assert stale.payment_status == "failed"
    assert fresh.status == "pending"
    assert paid.status == "processing"
