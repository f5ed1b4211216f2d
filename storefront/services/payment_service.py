# storefront/services/payment_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel
from storefront.domain.enums import OrderStatus, PaymentStatus, can_transition
from storefront.domain.errors import NotFoundError, PaymentGatewayError
from storefront.domain.factories import build_order_item, new_order_number
from storefront.domain.pricing import order_totals, shipping_option, to_minor_units
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaystackClient
from storefront.utils.retry import retry_while_none
from storefront.utils.settings import (
    APP_URL,
    PAYMENT_LOCK_TTL_SECONDS,
    VERIFY_RETRY_DELAY_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAID = "paid"
ALREADY_PAID = "already_paid"
RECOVERED = "recovered"
FAILED = "failed"
NOT_FOUND = "not_found"

RECOVERY_NOTE = "Recovery order - created after successful payment"


class PaymentService:
    """
    Paystack checkout flow.

    initialize: the pending order and its reference are committed first,
    the gateway is called afterwards with no transaction open, and a
    gateway refusal or error deletes the pending order again.

    reconcile: applies a verified gateway result to the order carrying
    the reference. It runs under payment:<reference>:lock and is
    idempotent, so callback and verify may both arrive for one payment.
    """

    verify_retry_delay = VERIFY_RETRY_DELAY_SECONDS

    def __init__(
        self,
        db: Session,
        gateway: PaystackClient,
        lock_service: LockService,
        notifier: NotificationService,
    ):
        self.db = db
        self.orders = OrderRepo(db)
        self.cart = CartRepo(db)
        self.users = UserRepo(db)
        self.gateway = gateway
        self.lock_service = lock_service
        self.notifier = notifier

    # ---------- initialize ----------

    def initialize(self, user: UserModel, order_data: Dict[str, Any], amount) -> Dict[str, Any]:
        amount = Decimal(str(amount))
        if amount != amount.to_integral_value():
            raise ValueError("Amount must be a whole number of minor units")
        amount = int(amount)

        order = self._create_pending_order(user, order_data)

        expected = to_minor_units(order.total_amount)
        if amount != expected:
            logger.warning(
                f"Amount mismatch for order {order.order_number}: client sent {amount}, "
                f"order total is {expected} minor units"
            )

        try:
            response = self.gateway.initialize_payment(
                amount=amount,
                email=user.email,
                reference=order.payment_reference,
                callback_url=f"{APP_URL}/payment/callback",
                metadata={"order_id": order.id, "user_id": user.id},
            )
        except Exception as e:
            logger.error(
                f"Gateway call for reference {order.payment_reference} raised {e!r}, "
                f"removing pending order {order.order_number}"
            )
            self._discard(order)
            raise PaymentGatewayError("Payment initialization failed. Please try again.") from e

        if not response["status"]:
            logger.error(
                f"Gateway refused reference {order.payment_reference}: {response['message']}, "
                f"removing pending order {order.order_number}"
            )
            self._discard(order)
            raise PaymentGatewayError(response["message"])

        order.payment_method = "paystack"
        self.orders.commit()

        logger.info(f"Payment initialized for order {order.order_number} ({order.payment_reference})")

        data = response["data"] or {}
        return {
            "authorization_url": data.get("authorization_url"),
            "access_code": data.get("access_code"),
            "reference": order.payment_reference,
            "order_id": order.id,
            "public_key": self.gateway.get_public_key(),
        }

    def _create_pending_order(self, user: UserModel, order_data: Dict[str, Any]) -> OrderModel:
        cart_items = self.cart.list_for_user(user.id)
        if not cart_items:
            raise ValueError("Cart is empty")

        delivery = shipping_option((order_data.get("delivery") or {}).get("id"))
        subtotal = sum((i.total_price for i in cart_items), Decimal("0"))
        totals = order_totals(subtotal, delivery["price"])

        shipping = order_data["shipping"]
        order = OrderModel(
            order_number=new_order_number(),
            user_id=user.id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            billing_address=order_data.get("billing") or shipping,
            shipping_address=shipping,
            email=user.email,
            phone=shipping.get("phone") or user.phone,
            payment_reference=self.gateway.generate_reference(),
            shipping_method=delivery["name"],
            notes=order_data.get("notes"),
            **totals,
        )
        order.items = [
            build_order_item(
                product_id=i.product_id,
                quantity=i.quantity,
                unit_price=i.price,
                product=i.product,
                size=i.size,
                color=i.color,
            )
            for i in cart_items
        ]

        try:
            self.orders.add_order(order)
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            raise

        logger.info(
            f"Pending order {order.order_number} created for user {user.id} "
            f"with reference {order.payment_reference}"
        )
        return order

    def _discard(self, order: OrderModel):
        self.orders.delete(order)
        self.orders.commit()

    # ---------- callback / verify ----------

    def callback(self, reference: str | None, user: UserModel | None) -> Dict[str, Any]:
        """
        Browser return from the gateway. Returns {outcome, order, error};
        the router turns it into a redirect.
        """
        if not reference:
            logger.error("Payment callback without reference")
            return {"outcome": None, "order": None, "error": "Invalid payment reference"}

        verification = self.gateway.verify_payment(reference)
        logger.info(f"Callback verification for {reference}: status={verification['status']}")

        if not verification["status"]:
            return {"outcome": None, "order": None, "error": "Payment verification failed"}

        result = self.reconcile(reference, verification["data"], user, allow_recovery=True)

        if result["outcome"] == FAILED:
            result["error"] = "Payment failed. Please try again."
        elif result["outcome"] == NOT_FOUND:
            result["error"] = "Order not found"
        else:
            result["error"] = None
        return result

    def verify(self, reference: str, user: UserModel | None) -> Dict[str, Any]:
        verification = self.gateway.verify_payment(reference)
        if not verification["status"]:
            raise PaymentGatewayError(verification["message"])

        #the order may not be visible yet when verify races initialize
        lookup = retry_while_none(2, self.verify_retry_delay)(self.orders.get_by_reference)
        if lookup(reference) is None:
            logger.error(f"Order not found for payment verification {reference}")
            raise NotFoundError(
                f"Order not found. Please contact support with reference: {reference}"
            )

        result = self.reconcile(reference, verification["data"], user, allow_recovery=False)
        order = result["order"]

        if result["outcome"] not in (PAID, ALREADY_PAID):
            raise PaymentGatewayError("Payment verification failed")

        return {
            "message": "Payment verified successfully",
            "order_number": order.order_number,
            "order_id": order.id,
        }

    # ---------- reconcile ----------

    def reconcile(
        self,
        reference: str,
        payment_data: Dict[str, Any],
        user: UserModel | None,
        allow_recovery: bool = False,
    ) -> Dict[str, Any]:
        with self.lock_service.hold(
            self.lock_service.payment_key(reference),
            ttl=PAYMENT_LOCK_TTL_SECONDS,
            conflict_message="Payment is already being processed",
        ):
            return self._reconcile_locked(reference, payment_data or {}, user, allow_recovery)

    def _reconcile_locked(
        self,
        reference: str,
        payment_data: Dict[str, Any],
        user: UserModel | None,
        allow_recovery: bool,
    ) -> Dict[str, Any]:
        success = payment_data.get("status") == "success"
        order = self.orders.get_by_reference(reference)

        if order is None:
            buyer = self._resolve_buyer(payment_data, user) if success and allow_recovery else None
            if buyer is not None:
                return self._recover(reference, payment_data, buyer)
            logger.warning(
                f"No order for reference {reference} (gateway status "
                f"{payment_data.get('status')}), nothing to reconcile"
            )
            return {"outcome": NOT_FOUND, "order": None}

        if not success:
            if order.is_paid:
                logger.warning(
                    f"Gateway reports {payment_data.get('status')} for paid order "
                    f"{order.order_number}, keeping it paid"
                )
            else:
                order.payment_status = PaymentStatus.FAILED.value
                self.orders.commit()
                logger.info(f"Order {order.order_number} marked payment failed")
            return {"outcome": FAILED, "order": order}

        if order.is_paid:
            logger.info(f"Order {order.order_number} already paid, nothing to do")
            return {"outcome": ALREADY_PAID, "order": order}

        order.payment_status = PaymentStatus.PAID.value
        if can_transition(order.status, OrderStatus.PROCESSING.value):
            order.status = OrderStatus.PROCESSING.value
        else:
            logger.warning(
                f"Order {order.order_number} paid while {order.status}, status left unchanged"
            )

        try:
            removed = self.cart.delete_for_user(order.user_id)
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            raise

        logger.info(
            f"Order {order.order_number} paid, {removed} cart row(s) of user {order.user_id} cleared"
        )

        self.notifier.send_order_confirmation(order)
        return {"outcome": PAID, "order": order}

    def _resolve_buyer(self, payment_data: Dict[str, Any], user: UserModel | None) -> UserModel | None:
        """
        Buyer for a recovery order: the callback user, else metadata.user_id
        set at initialize, else the customer email of the verified transaction.
        """
        if user is not None:
            return user

        metadata = payment_data.get("metadata")
        if isinstance(metadata, dict) and str(metadata.get("user_id") or "").isdigit():
            buyer = self.users.get_user(int(metadata["user_id"]))
            if buyer is not None:
                return buyer

        email = (payment_data.get("customer") or {}).get("email")
        if email:
            return self.users.get_by_email(email)
        return None

    def _recover(self, reference: str, payment_data: Dict[str, Any], user: UserModel) -> Dict[str, Any]:
        cart_items = self.cart.list_for_user(user.id)
        if not cart_items:
            logger.warning(
                f"Successful payment {reference} has no order and user {user.id} has an empty cart, "
                f"recovery skipped"
            )
            return {"outcome": NOT_FOUND, "order": None}

        logger.info(
            f"Creating recovery order for {reference}, user {user.id}, "
            f"paid amount {payment_data.get('amount')}"
        )

        subtotal = sum((i.total_price for i in cart_items), Decimal("0"))
        placeholder = {
            "recovery": True,
            "full_name": user.name or "Recovery User",
            "address_line_1": "Address not provided during payment",
            "address_line_2": "",
            "city": "Recovery",
            "state": "Nigeria",
            "postal_code": "000000",
            "phone": "Not provided",
        }

        order = OrderModel(
            order_number=new_order_number(),
            user_id=user.id,
            status=OrderStatus.PROCESSING.value,
            payment_status=PaymentStatus.PAID.value,
            billing_address=dict(placeholder),
            shipping_address=dict(placeholder),
            email=user.email,
            payment_reference=reference,
            payment_method="paystack",
            shipping_method="Standard Shipping",
            notes=RECOVERY_NOTE,
            **order_totals(subtotal, Decimal("0")),
        )
        order.items = [
            build_order_item(
                product_id=i.product_id,
                quantity=i.quantity,
                unit_price=i.price,
                product=i.product,
                size=i.size,
                color=i.color,
                fallback_sku="RECOVERY-SKU",
            )
            for i in cart_items
        ]

        try:
            self.orders.add_order(order)
            removed = self.cart.delete_for_user(user.id)
            self.orders.commit()
        except IntegrityError:
            #another worker stored this reference first
            self.orders.rollback()
            winner = self.orders.get_by_reference(reference)
            logger.warning(f"Recovery order for {reference} already exists, using {winner and winner.order_number}")
            if winner is None:
                raise
            return {"outcome": ALREADY_PAID, "order": winner}

        logger.info(
            f"Recovery order {order.order_number} created for {reference}, "
            f"{removed} cart row(s) cleared"
        )

        self.notifier.send_order_confirmation(order)
        return {"outcome": RECOVERED, "order": order}
