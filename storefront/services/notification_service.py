# storefront/services/notification_service.py
import smtplib

from storefront.celery_worker import celery_app
from storefront.data.models.order import OrderModel
from storefront.services import emails
from storefront.services.mailer import Mailer
from storefront.services.whatsapp_client import WhatsAppClient
from storefront.utils.settings import WHATSAPP_ENABLED
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues transactional notifications on Celery.
    Dispatch is best-effort: a broker failure is logged, never raised,
    so it cannot undo a payment or status change that already committed.
    Delivery retries belong to the queue (see task options below).
    """

    def __init__(self, whatsapp_enabled: bool | None = None):
        self.whatsapp_enabled = WHATSAPP_ENABLED if whatsapp_enabled is None else whatsapp_enabled

    def _queue_email(self, to: str, subject: str, body: str) -> bool:
        try:
            send_email_task.delay(to, subject, body)
            logger.info(f"Queued mail '{subject}' for {to}")
            return True
        except Exception as e:
            logger.error(f"Failed to queue mail '{subject}' for {to}: {e}")
            return False

    def send_order_confirmation(self, order: OrderModel) -> bool:
        to = order.email or (order.user.email if order.user else None)
        if not to:
            logger.warning(f"Order {order.order_number} has no email, confirmation skipped")
            return False
        subject, body = emails.order_confirmation(order)
        return self._queue_email(to, subject, body)

    def send_order_status_update(self, order: OrderModel, previous_status: str | None = None) -> bool:
        to = order.email or (order.user.email if order.user else None)
        sent = False
        if to:
            subject, body = emails.order_status_update(order)
            sent = self._queue_email(to, subject, body)

        if self.whatsapp_enabled and order.phone:
            try:
                send_whatsapp_task.delay(
                    order.phone,
                    "order_status_update",
                    [
                        {"type": "text", "text": order.order_number},
                        {"type": "text", "text": order.status.capitalize()},
                        {"type": "text", "text": order.tracking_number or "-"},
                    ],
                )
                logger.info(
                    f"Queued WhatsApp status update for order {order.order_number} "
                    f"({previous_status} -> {order.status})"
                )
            except Exception as e:
                logger.error(f"Failed to queue WhatsApp update for order {order.order_number}: {e}")

        return sent

    def send_newsletter_confirmation(self, email: str, token: str) -> bool:
        subject, body = emails.newsletter_confirmation(email, token)
        return self._queue_email(email, subject, body)

    def send_welcome(self, name: str, email: str) -> bool:
        subject, body = emails.welcome(name)
        return self._queue_email(email, subject, body)


@celery_app.task(
    name="storefront.services.notification_service.send_email_task",
    autoretry_for=(smtplib.SMTPException, OSError),
    retry_backoff=True,
    max_retries=3,
)
def send_email_task(to: str, subject: str, body: str):
    sent = Mailer().send(to, subject, body)
    return {"to": to, "subject": subject, "sent": sent}


@celery_app.task(name="storefront.services.notification_service.send_whatsapp_task")
def send_whatsapp_task(to: str, template_name: str, parameters: list):
    return WhatsAppClient().send_template_message(to, template_name, parameters)
