# storefront/services/whatsapp_client.py
import re
from typing import Any, Dict, List

import requests
from requests import RequestException

from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    WHATSAPP_API_URL,
    WHATSAPP_COUNTRY_CODE,
    WHATSAPP_ENABLED,
    WHATSAPP_PHONE_NUMBER_ID,
    WHATSAPP_TOKEN,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def format_phone_number(phone: str, country_code: str = WHATSAPP_COUNTRY_CODE) -> str:
    """Normalize a local or international number to E.164."""
    digits = re.sub(r"[^0-9]", "", phone)
    if digits.startswith("0"):
        digits = country_code + digits[1:]
    return f"+{digits}"


class WhatsAppClient:
    def __init__(
        self,
        token: str | None = None,
        phone_number_id: str | None = None,
        enabled: bool | None = None,
        base_url: str | None = None,
        timeout: int = 10,
    ):
        self.token = token if token is not None else WHATSAPP_TOKEN
        self.phone_number_id = phone_number_id if phone_number_id is not None else WHATSAPP_PHONE_NUMBER_ID
        self.enabled = WHATSAPP_ENABLED if enabled is None else enabled
        self.base_url = (base_url or WHATSAPP_API_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _post(self, payload: dict) -> requests.Response:
        url = f"{self.base_url}/{self.phone_number_id}/messages"
        return requests.post(
            url,
            json=payload,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
        )

    def send_template_message(
        self,
        to: str,
        template_name: str,
        parameters: List[Dict[str, Any]] | None = None,
        language: str = "en",
    ) -> Dict[str, Any]:
        if not self.enabled:
            logger.info(f"WhatsApp is disabled, skipping template {template_name} to {to}")
            return {"status": False, "message": "WhatsApp is disabled"}

        if not self.token or not self.phone_number_id:
            logger.error("WhatsApp credentials not configured")
            return {"status": False, "message": "WhatsApp not configured"}

        to = format_phone_number(to)
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "template",
            "template": {
                "name": template_name,
                "language": {"code": language},
                "components": [{"type": "body", "parameters": parameters or []}],
            },
        }

        try:
            resp = self._post(payload)
        except RequestException as e:
            logger.error(f"WhatsApp request to {to} failed: {e}")
            return {"status": False, "message": f"Exception: {e}"}

        body = resp.json() if resp.content else {}
        if resp.ok:
            message_id = (body.get("messages") or [{}])[0].get("id")
            logger.info(f"WhatsApp template {template_name} sent to {to}, message id {message_id}")
            return {"status": True, "message_id": message_id, "data": body}

        logger.error(f"WhatsApp API error {resp.status_code} for {to}: {body}")
        return {
            "status": False,
            "message": (body.get("error") or {}).get("message", "Failed to send WhatsApp message"),
            "error": body,
        }
