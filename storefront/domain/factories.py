# storefront/domain/factories.py
"""
Explicit constructors for values the persistence layer must not invent
on its own: order numbers, payment references, slugs, SKUs and the
order line snapshot.
"""
import re
import secrets
import string
import time
import unicodedata
from decimal import Decimal

from storefront.data.models.order_item import OrderItemModel
from storefront.utils.settings import ORDER_NUMBER_PREFIX, PAYMENT_REFERENCE_PREFIX

_ALPHANUM = string.ascii_uppercase + string.digits


def new_order_number(prefix: str = ORDER_NUMBER_PREFIX) -> str:
    return f"{prefix}-" + "".join(secrets.choice(_ALPHANUM) for _ in range(8))


def new_payment_reference(prefix: str = PAYMENT_REFERENCE_PREFIX) -> str:
    return f"{prefix}_{int(time.time())}_{secrets.randbelow(900000) + 100000}"


def new_sku() -> str:
    return "".join(secrets.choice(_ALPHANUM) for _ in range(8))


def new_token(nbytes: int = 20) -> str:
    return secrets.token_hex(nbytes)


def slugify(value: str) -> str:
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value.lower())
    return re.sub(r"[-\s_]+", "-", value).strip("-")


def build_order_item(
    product_id: int | None,
    quantity: int,
    unit_price: Decimal,
    product=None,
    size: str | None = None,
    color: str | None = None,
    fallback_name: str = "Unknown Product",
    fallback_sku: str | None = None,
) -> OrderItemModel:
    unit_price = Decimal(str(unit_price))
    return OrderItemModel(
        product_id=product_id,
        product_name=product.name if product is not None else fallback_name,
        product_sku=product.sku if product is not None else fallback_sku,
        product_image=product.primary_image_url if product is not None else None,
        quantity=quantity,
        unit_price=unit_price,
        total_price=unit_price * quantity,
        size=size,
        color=color,
    )
