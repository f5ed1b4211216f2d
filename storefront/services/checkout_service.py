# storefront/services/checkout_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.pricing import PAYMENT_METHODS, SHIPPING_OPTIONS
from storefront.repos.address_repo import AddressRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.order_service import OrderService


class CheckoutService:
    def __init__(self, db: Session, lock_service: LockService):
        self.cart_service = CartService(db, lock_service)
        self.order_service = OrderService(db)
        self.addresses = AddressRepo(db)

    def checkout_page(self, user_id: int) -> Dict[str, Any]:
        items = self.cart_service.get_cart_items(user_id)
        if not items:
            raise ValueError("Your cart is empty. Add some items before checkout.")

        return {
            "cart_items": items,
            "cart_summary": self.cart_service.get_cart_summary(items),
            "shipping_options": SHIPPING_OPTIONS,
            "payment_methods": PAYMENT_METHODS,
            "addresses": [
                {"id": a.id, "type": a.type, "is_default": a.is_default, **a.to_order_format()}
                for a in self.addresses.list_for_user(user_id)
            ],
        }

    def success_page(self, user_id: int, order_number: str | None) -> Dict[str, Any]:
        return {"order": self.order_service.get_by_number(user_id, order_number)}
