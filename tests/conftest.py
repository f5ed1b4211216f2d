# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WHATSAPP_ENABLED"] = "false"
os.environ.pop("SMTP_HOST", None)

from decimal import Decimal

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_gateway, get_lock_service, get_notifier
from storefront.data.database import Base, get_db
from storefront.data.models import (
    CartItemModel,
    CategoryModel,
    OrderModel,
    ProductImageModel,
    ProductModel,
    UserModel,
)
from storefront.domain.factories import build_order_item, new_order_number
from storefront.main import create_app
from storefront.services.auth_service import create_token
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_service import PaymentService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class FakeGateway:
    """Stands in for PaystackClient; responses are set per test."""

    def __init__(self):
        self.initialized = []
        self.verified = []
        self.init_response = {
            "status": True,
            "data": {
                "authorization_url": "https://checkout.paystack.test/abc",
                "access_code": "abc",
            },
            "message": "Payment initialized successfully",
        }
        self.init_error = None
        self.verify_status = "success"
        self.verify_ok = True
        self.verify_extra = {}
        self._counter = 100000

    def initialize_payment(self, amount, email, reference, callback_url, metadata=None):
        if self.init_error is not None:
            raise self.init_error
        self.initialized.append(
            {
                "amount": amount,
                "email": email,
                "reference": reference,
                "callback_url": callback_url,
                "metadata": metadata,
            }
        )
        return self.init_response

    def verify_payment(self, reference):
        self.verified.append(reference)
        if not self.verify_ok:
            return {"status": False, "data": None, "message": "Payment verification failed"}
        return {
            "status": True,
            "data": {
                "status": self.verify_status,
                "reference": reference,
                "amount": 6598,
                **self.verify_extra,
            },
            "message": "Payment verification successful",
        }

    def get_public_key(self):
        return "pk_test_123"

    def generate_reference(self):
        self._counter += 1
        return f"JP_1700000000_{self._counter}"


class FakeLockService(LockService):
    """In-memory locks with the same hold() semantics as the Redis one."""

    def __init__(self):
        self.held = {}
        self.acquired = []

    def acquire(self, key, token, ttl):
        if key in self.held:
            return False
        self.held[key] = token
        self.acquired.append(key)
        return True

    def release(self, key, token):
        if self.held.get(key) == token:
            del self.held[key]
            return True
        return False


class RecordingNotifier(NotificationService):
    """Records queued mail instead of talking to the broker."""

    def __init__(self, whatsapp_enabled=False):
        super().__init__(whatsapp_enabled=whatsapp_enabled)
        self.emails = []

    def _queue_email(self, to, subject, body):
        self.emails.append({"to": to, "subject": subject, "body": body})
        return True


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def locks():
    return FakeLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture(autouse=True)
def no_verify_wait(monkeypatch):
    monkeypatch.setattr(PaymentService, "verify_retry_delay", 0)


@pytest.fixture
def client(db, gateway, locks, notifier):
    app = create_app(create_tables=False)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_lock_service] = lambda: locks
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as c:
        yield c


# ---------- builders ----------

def make_user(db, email="ada@mail.com", name="Ada", password="secret123", is_admin=False, phone=None):
    user = UserModel(
        name=name,
        email=email,
        password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
        is_admin=is_admin,
        phone=phone,
    )
    db.add(user)
    db.commit()
    return user


def auth(user):
    return {"Authorization": f"Bearer {create_token(user)}"}


def make_category(db, name="Men", slug=None, parent=None):
    category = CategoryModel(
        name=name,
        slug=slug or name.lower().replace(" ", "-"),
        parent_id=parent.id if parent else None,
    )
    db.add(category)
    db.commit()
    return category


_sku = {"n": 0}


def make_product(db, name="Cotton Tee", price="29.99", category=None, **kw):
    _sku["n"] += 1
    product = ProductModel(
        name=name,
        slug=kw.pop("slug", name.lower().replace(" ", "-")),
        sku=kw.pop("sku", f"SKU{_sku['n']:05d}"),
        price=Decimal(price),
        stock_quantity=kw.pop("stock_quantity", 10),
        category_id=category.id if category else None,
        **kw,
    )
    db.add(product)
    db.commit()
    return product


def add_image(db, product, path="products/tee.jpg", primary=True):
    image = ProductImageModel(product_id=product.id, image_path=path, is_primary=primary)
    db.add(image)
    db.commit()
    return image


def add_to_cart(db, user, product, quantity=1, size=None, color=None):
    item = CartItemModel(
        user_id=user.id,
        product_id=product.id,
        quantity=quantity,
        size=size,
        color=color,
        price=product.price,
    )
    db.add(item)
    db.commit()
    return item


def make_order(db, user, product=None, status="pending", payment_status="pending", reference=None, quantity=1):
    order = OrderModel(
        order_number=new_order_number(),
        user_id=user.id,
        status=status,
        payment_status=payment_status,
        subtotal=Decimal("29.99") * quantity,
        tax_amount=Decimal("3.00"),
        shipping_amount=Decimal("0"),
        total_amount=Decimal("32.99"),
        email=user.email,
        payment_reference=reference,
    )
    if product is not None:
        order.items = [build_order_item(product.id, quantity, product.price, product=product)]
    db.add(order)
    db.commit()
    return order


def cart_rows(db, user):
    return db.query(CartItemModel).filter(CartItemModel.user_id == user.id).all()
