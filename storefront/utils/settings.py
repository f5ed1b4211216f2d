# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")

APP_URL = os.getenv("APP_URL", "http://localhost:8000").rstrip("/")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000").rstrip("/")

# paystack
PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")
PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "")
PAYSTACK_PUBLIC_KEY = os.getenv("PAYSTACK_PUBLIC_KEY", "")
PAYSTACK_CURRENCY = os.getenv("PAYSTACK_CURRENCY", "NGN")
PAYMENT_REFERENCE_PREFIX = os.getenv("PAYMENT_REFERENCE_PREFIX", "JP")
PAYMENT_LOCK_TTL_SECONDS = int(os.getenv("PAYMENT_LOCK_TTL_SECONDS", 30))
VERIFY_RETRY_DELAY_SECONDS = float(os.getenv("VERIFY_RETRY_DELAY_SECONDS", 1))

# orders
ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "JP")
ORDER_CURRENCY = os.getenv("ORDER_CURRENCY", "₦")
PENDING_ORDER_TTL_SECONDS = int(os.getenv("PENDING_ORDER_TTL_SECONDS", 24 * 60 * 60))
ORDERS_PER_PAGE = int(os.getenv("ORDERS_PER_PAGE", 5))

# catalog / cart
PRODUCTS_PER_PAGE = int(os.getenv("PRODUCTS_PER_PAGE", 12))
CART_LOCK_TTL_SECONDS = int(os.getenv("CART_LOCK_TTL_SECONDS", 5))
PLACEHOLDER_IMAGE_URL = os.getenv(
    "PLACEHOLDER_IMAGE_URL", f"{APP_URL}/images/placeholder-product.jpg"
)
STORAGE_URL = os.getenv("STORAGE_URL", f"{APP_URL}/storage").rstrip("/")

# auth
JWT_SECRET = os.getenv("JWT_SECRET", "devsecret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_TTL_SECONDS = int(os.getenv("JWT_TTL_SECONDS", 7 * 24 * 60 * 60))

# mail
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_STARTTLS = os.getenv("SMTP_STARTTLS", "true").lower() in ("1", "true", "yes")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@jpathnec.com")
SHOP_NAME = os.getenv("SHOP_NAME", "JPATHNEC")

# whatsapp
WHATSAPP_ENABLED = os.getenv("WHATSAPP_ENABLED", "false").lower() in ("1", "true", "yes")
WHATSAPP_TOKEN = os.getenv("WHATSAPP_TOKEN")
WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID")
WHATSAPP_API_URL = os.getenv("WHATSAPP_API_URL", "https://graph.facebook.com/v18.0").rstrip("/")
WHATSAPP_COUNTRY_CODE = os.getenv("WHATSAPP_COUNTRY_CODE", "234")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
