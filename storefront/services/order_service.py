# storefront/services/order_service.py
from datetime import datetime, timezone
from math import ceil
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import OrderStatus, PaymentStatus, ensure_transition, progress_percentage
from storefront.domain.errors import NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import ORDERS_PER_PAGE, SHOP_NAME
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order queries for the customer (my-orders) and the admin status
    update. Kept apart from PaymentService: nothing here talks to the
    gateway.
    """

    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart = CartRepo(db)
        self.catalog = CatalogRepo(db)
        self.notifier = notifier or NotificationService()

    # ---------- serialization ----------

    @staticmethod
    def serialize_item(item) -> Dict[str, Any]:
        return {
            "id": item.id,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "product_sku": item.product_sku,
            "product_image": item.product_image,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total_price": item.total_price,
            "size": item.size,
            "color": item.color,
        }

    def serialize_order(self, order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": order.payment_status,
            "subtotal": order.subtotal,
            "tax_amount": order.tax_amount,
            "shipping_amount": order.shipping_amount,
            "discount_amount": order.discount_amount,
            "total_amount": order.total_amount,
            "currency": order.currency,
            "payment_reference": order.payment_reference,
            "payment_method": order.payment_method,
            "shipping_method": order.shipping_method,
            "tracking_number": order.tracking_number,
            "shipping_address": order.shipping_address,
            "billing_address": order.billing_address,
            "notes": order.notes,
            "created_at": order.created_at,
            "shipped_at": order.shipped_at,
            "delivered_at": order.delivered_at,
            "items_count": len(order.items),
            "items": [self.serialize_item(i) for i in order.items],
        }

    # ---------- customer queries ----------

    def list_orders(
        self,
        user_id: int,
        search: str | None = None,
        status: str | None = None,
        page: int = 1,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        orders, total = self.repo.list_for_user(
            user_id, search=search, status=status, page=page, per_page=ORDERS_PER_PAGE
        )
        return {
            "orders": {
                "data": [self.serialize_order(o) for o in orders],
                "current_page": page,
                "per_page": ORDERS_PER_PAGE,
                "total": total,
                "last_page": max(ceil(total / ORDERS_PER_PAGE), 1),
            },
            "filters": {"search": search, "status": status},
            "cart_count": self.cart.count_quantity(user_id),
        }

    def _get_owned(self, user_id: int, order_id: int) -> OrderModel:
        #other users' orders look exactly like missing ones
        order = self.repo.get_for_user(order_id, user_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_order(self, user_id: int, order_id: int) -> Dict[str, Any]:
        return self.serialize_order(self._get_owned(user_id, order_id))

    def get_by_number(self, user_id: int, order_number: str | None) -> Dict[str, Any]:
        order = self.repo.get_by_number_for_user(order_number, user_id) if order_number else None
        if not order:
            raise NotFoundError("Order not found")
        return self.serialize_order(order)

    def track(self, user_id: int, order_id: int) -> Dict[str, Any]:
        order = self._get_owned(user_id, order_id)
        return {
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": order.payment_status,
            "progress_percentage": progress_percentage(order.status),
            "tracking_number": order.tracking_number,
            "current_location": order.current_location,
            "status_description": order.status_description,
            "status_updated_at": order.status_updated_at,
            "timeline": self.timeline(order),
        }

    @staticmethod
    def timeline(order: OrderModel) -> list[Dict[str, Any]]:
        reached = progress_percentage(order.status)
        #a cancelled or refunded order keeps the steps it got through
        paid = order.payment_status in (PaymentStatus.PAID.value, PaymentStatus.REFUNDED.value)
        steps = [
            ("pending", "Order placed", order.created_at, True),
            ("processing", "Payment confirmed", None, reached >= 50 or paid),
            ("shipped", "Shipped", order.shipped_at, reached >= 75 or order.shipped_at is not None),
            ("delivered", "Delivered", order.delivered_at, reached >= 100 or order.delivered_at is not None),
        ]
        events = [
            {"status": status, "label": label, "date": date, "completed": done}
            for status, label, date, done in steps
        ]
        if order.status in (OrderStatus.CANCELLED.value, OrderStatus.REFUNDED.value):
            events.append(
                {
                    "status": order.status,
                    "label": order.status.capitalize(),
                    "date": order.status_updated_at,
                    "completed": True,
                }
            )
        return events

    def reorder(self, user_id: int, order_id: int) -> Dict[str, Any]:
        order = self._get_owned(user_id, order_id)

        added, skipped = 0, []
        for item in order.items:
            if not item.product_id:
                skipped.append(f"{item.product_name} (product not found)")
                continue

            product = self.catalog.get_product(item.product_id)
            if not product or not product.is_active:
                skipped.append(f"{item.product_name} (no longer available)")
                continue

            line = self.cart.get_line(user_id, item.product_id, item.size, item.color)
            if line:
                line.quantity += item.quantity
            else:
                self.cart.add_cart_item(
                    CartItemModel(
                        user_id=user_id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        size=item.size,
                        color=item.color,
                        price=product.price,
                    )
                )
            added += 1

        self.cart.commit()

        message = f"Added {added} items from order #{order.order_number} to your cart."
        if skipped:
            message += " Some items were skipped: " + ", ".join(skipped)

        logger.info(f"Reorder of {order.order_number} by user {user_id}: {added} added, {len(skipped)} skipped")

        return {
            "message": message,
            "added": added,
            "skipped": skipped,
            "cart_count": self.cart.count_quantity(user_id),
        }

    def invoice(self, user_id: int, order_id: int) -> Dict[str, Any]:
        order = self._get_owned(user_id, order_id)
        if not order.is_paid:
            raise ValueError("Invoice is only available for paid orders.")

        return {
            "invoice_number": f"INV-{order.order_number}",
            "file_name": f"invoice-{order.order_number}.pdf",
            "issued_at": order.status_updated_at or order.created_at,
            "seller": SHOP_NAME,
            "customer": {
                "name": order.user.name if order.user else None,
                "email": order.email,
                "phone": order.phone,
            },
            "order": self.serialize_order(order),
            "formatted_total": order.formatted_total,
        }

    # ---------- admin ----------

    def update_status(
        self,
        actor: UserModel,
        order_id: int,
        status: str,
        location: str | None = None,
        description: str | None = None,
        tracking_number: str | None = None,
    ) -> Dict[str, Any]:
        if not actor.is_admin:
            raise PermissionError("Only administrators can update order status")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        previous = order.status
        target = ensure_transition(previous, status)
        now = datetime.now(timezone.utc)

        order.status = target.value
        order.status_updated_at = now
        if target == OrderStatus.SHIPPED and not order.shipped_at:
            order.shipped_at = now
        if target == OrderStatus.DELIVERED and not order.delivered_at:
            order.delivered_at = now

        if tracking_number is not None:
            order.tracking_number = tracking_number
        if location is not None:
            order.current_location = location
        if description is not None:
            order.status_description = description

        self.repo.commit()

        logger.info(f"Order {order.order_number} status {previous} -> {order.status} by user {actor.id}")

        if previous != order.status:
            self.notifier.send_order_status_update(order, previous)

        return self.serialize_order(order)
