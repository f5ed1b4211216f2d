# storefront/services/emails.py
"""Plain-text bodies for transactional mail."""
from storefront.data.models.order import OrderModel
from storefront.utils.settings import APP_URL, FRONTEND_URL, SHOP_NAME

_STATUS_COPY = {
    "pending": (
        "Order Confirmed",
        "Thank you for your order!",
        "Your order has been confirmed and is being prepared.",
    ),
    "processing": (
        "Order Processing",
        "Your order is being processed",
        "We are currently preparing your order for shipment.",
    ),
    "shipped": (
        "Order Shipped",
        "Great news! Your order is on its way",
        "Your order has been shipped and is on its way to you.",
    ),
    "delivered": (
        "Order Delivered",
        "Your order has been delivered!",
        "Your order has been successfully delivered. We hope you enjoy your purchase!",
    ),
    "cancelled": (
        "Order Cancelled",
        "Order Cancellation Notice",
        "Your order has been cancelled. If you have any questions, please contact our support team.",
    ),
    "refunded": (
        "Order Refunded",
        "Your refund is on its way",
        "Your order has been refunded to the original payment method.",
    ),
}
_DEFAULT_COPY = ("Order Status Update", "Order Update", "Your order status has been updated.")


def order_confirmation(order: OrderModel) -> tuple[str, str]:
    subject = f"Order Confirmation - #{order.order_number}"
    lines = [
        f"Hi {order.user.name if order.user else 'there'},",
        "",
        f"Thank you for shopping with {SHOP_NAME}! Your payment was received.",
        "",
        f"Order Number: #{order.order_number}",
        f"Payment Reference: {order.payment_reference or '-'}",
        "",
    ]
    for item in order.items:
        options = ", ".join(o for o in (item.size, item.color) if o)
        suffix = f" ({options})" if options else ""
        lines.append(
            f"- {item.product_name}{suffix} x{item.quantity}: "
            f"{order.currency}{item.total_price:,.2f}"
        )
    lines += [
        "",
        f"Subtotal: {order.currency}{order.subtotal:,.2f}",
        f"Tax: {order.currency}{order.tax_amount:,.2f}",
        f"Shipping: {order.currency}{order.shipping_amount:,.2f}",
        f"Total: {order.formatted_total}",
        "",
        f"View your order: {FRONTEND_URL}/my-orders/{order.id}",
    ]
    return subject, "\n".join(lines)


def order_status_update(order: OrderModel) -> tuple[str, str]:
    title, greeting, message = _STATUS_COPY.get(order.status, _DEFAULT_COPY)
    lines = [
        greeting,
        "",
        message,
        "",
        "Order Details:",
        f"Order Number: #{order.order_number}",
        f"Status: {order.status.capitalize()}",
        f"Total Amount: {order.formatted_total}",
    ]
    if order.tracking_number:
        lines.append(f"Tracking Number: {order.tracking_number}")
    if order.current_location:
        lines.append(f"Current Location: {order.current_location}")
    if order.status_description:
        lines.append(f"Additional Info: {order.status_description}")

    if order.status == "shipped":
        lines += ["", f"Track Your Order: {FRONTEND_URL}/my-orders/{order.id}/track"]
    elif order.status in ("pending", "processing", "delivered"):
        lines += ["", f"View Order Details: {FRONTEND_URL}/my-orders/{order.id}"]

    lines += ["", f"Thank you for shopping with {SHOP_NAME}!"]
    return f"{title} - Order #{order.order_number}", "\n".join(lines)


def newsletter_confirmation(email: str, token: str) -> tuple[str, str]:
    body = "\n".join(
        [
            f"Thanks for subscribing to the {SHOP_NAME} newsletter!",
            "",
            "You'll be the first to hear about new arrivals and offers.",
            "",
            f"Unsubscribe at any time: {APP_URL}/newsletter/unsubscribe/{token}",
        ]
    )
    return f"Welcome to the {SHOP_NAME} newsletter", body


def welcome(name: str) -> tuple[str, str]:
    body = "\n".join(
        [
            f"Hi {name},",
            "",
            f"Welcome to {SHOP_NAME}! Your account is ready.",
            "",
            f"Start shopping: {FRONTEND_URL}/product-list",
        ]
    )
    return f"Welcome to {SHOP_NAME}", body
