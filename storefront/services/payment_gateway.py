# storefront/services/payment_gateway.py
from typing import Any, Dict

import requests
from requests import RequestException

from storefront.domain.factories import new_payment_reference
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    PAYMENT_REFERENCE_PREFIX,
    PAYSTACK_BASE_URL,
    PAYSTACK_CURRENCY,
    PAYSTACK_PUBLIC_KEY,
    PAYSTACK_SECRET_KEY,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaystackClient:
    """
    Thin Paystack client. Every call returns {status, data, message};
    transport failures are retried, then reported as status False.
    """

    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        public_key: str | None = None,
        timeout: int = 10,
    ):
        self.base_url = (base_url or PAYSTACK_BASE_URL).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else PAYSTACK_SECRET_KEY
        self.public_key = public_key if public_key is not None else PAYSTACK_PUBLIC_KEY
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    @http_retry()
    def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaystackClient POST {url}")
        resp = requests.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        return resp.json()

    @http_retry()
    def _get(self, path: str) -> dict:
        url = f"{self.base_url}{path}"
        logger.info(f"PaystackClient GET {url}")
        resp = requests.get(url, headers=self._headers(), timeout=self.timeout)
        return resp.json()

    def initialize_payment(
        self,
        amount: int,
        email: str,
        reference: str,
        callback_url: str,
        metadata: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        metadata = dict(metadata or {})
        order_id = metadata.get("order_id")
        if order_id is not None:
            metadata["custom_fields"] = [
                {
                    "display_name": "Order ID",
                    "variable_name": "order_id",
                    "value": order_id,
                }
            ]

        payload = {
            "amount": int(amount),
            "email": email,
            "reference": reference,
            "currency": PAYSTACK_CURRENCY,
            "callback_url": callback_url,
            "metadata": metadata,
        }

        try:
            body = self._post("/transaction/initialize", payload)
        except (RequestException, ValueError) as e:
            logger.error(f"Paystack payment initialization failed: {e}")
            return {
                "status": False,
                "data": None,
                "message": "Payment initialization failed. Please try again.",
            }

        if body.get("status") and body.get("data"):
            return {
                "status": True,
                "data": body["data"],
                "message": "Payment initialized successfully",
            }

        return {
            "status": False,
            "data": None,
            "message": body.get("message") or "Payment initialization failed",
        }

    def verify_payment(self, reference: str) -> Dict[str, Any]:
        try:
            body = self._get(f"/transaction/verify/{reference}")
        except (RequestException, ValueError) as e:
            logger.error(f"Paystack payment verification failed: {e}")
            return {
                "status": False,
                "data": None,
                "message": "Payment verification failed. Please contact support.",
            }

        if body.get("status") and body.get("data"):
            return {
                "status": True,
                "data": body["data"],
                "message": "Payment verification successful",
            }

        return {
            "status": False,
            "data": None,
            "message": body.get("message") or "Payment verification failed",
        }

    def get_public_key(self) -> str:
        return self.public_key

    @staticmethod
    def generate_reference(prefix: str = PAYMENT_REFERENCE_PREFIX) -> str:
        return new_payment_reference(prefix)
