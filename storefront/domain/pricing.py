# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

TAX_RATE = Decimal("0.10")
FREE_SHIPPING_THRESHOLD = Decimal("50")
FLAT_SHIPPING = Decimal("5.99")
CENT = Decimal("0.01")

SHIPPING_OPTIONS = [
    {
        "id": "standard",
        "name": "Standard Shipping",
        "price": Decimal("0"),
        "duration": "5-7 business days",
    },
    {
        "id": "express",
        "name": "Express Shipping",
        "price": Decimal("9.99"),
        "duration": "2-3 business days",
    },
    {
        "id": "overnight",
        "name": "Overnight Shipping",
        "price": Decimal("24.99"),
        "duration": "1 business day",
    },
]

PAYMENT_METHODS = [
    {"id": "card", "name": "Credit/Debit Card"},
    {"id": "bank_transfer", "name": "Bank Transfer"},
    {"id": "ussd", "name": "USSD"},
]


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def tax_for(subtotal: Decimal) -> Decimal:
    return subtotal * TAX_RATE


def cart_shipping_for(subtotal: Decimal) -> Decimal:
    return Decimal("0") if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING


def shipping_option(option_id: str | None) -> dict:
    for option in SHIPPING_OPTIONS:
        if option["id"] == option_id:
            return option
    return SHIPPING_OPTIONS[0]


def cart_summary(lines: Iterable[dict]) -> dict:
    """
    lines: dicts with total_price and quantity.
    Rounding happens on the final figures only, so
    total == round(subtotal + tax + shipping).
    """
    lines = list(lines)
    subtotal = sum((Decimal(str(l["total_price"])) for l in lines), Decimal("0"))
    tax = tax_for(subtotal)
    shipping = cart_shipping_for(subtotal)
    total = subtotal + tax + shipping

    return {
        "subtotal": money(subtotal),
        "tax": money(tax),
        "shipping": money(shipping),
        "total": money(total),
        "item_count": sum(int(l["quantity"]) for l in lines),
    }


def order_totals(subtotal: Decimal, shipping: Decimal, discount: Decimal = Decimal("0")) -> dict:
    tax = tax_for(subtotal)
    return {
        "subtotal": money(subtotal),
        "tax_amount": money(tax),
        "shipping_amount": money(shipping),
        "discount_amount": money(discount),
        "total_amount": money(subtotal + tax + shipping - discount),
    }


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
