# storefront/services/newsletter_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.newsletter_subscriber import NewsletterSubscriberModel
from storefront.domain.errors import NotFoundError
from storefront.domain.factories import new_token
from storefront.repos.newsletter_repo import NewsletterRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SUBSCRIBED = "Thanks — your subscription was received."
RESUBSCRIBED = "Welcome back — you have been re-subscribed to our newsletter."
ALREADY_SUBSCRIBED = "You are already subscribed to our newsletter."


class NewsletterService:
    def __init__(self, db: Session, notifier: NotificationService):
        self.repo = NewsletterRepo(db)
        self.notifier = notifier

    def subscribe(self, email: str) -> Dict[str, Any]:
        email = email.lower()
        token = new_token()
        now = datetime.now(timezone.utc)

        subscriber = self.repo.get_by_email(email)
        if subscriber is None:
            message, send_mail = SUBSCRIBED, True
            subscriber = self.repo.add(NewsletterSubscriberModel(email=email))
        elif subscriber.unsubscribed_at is not None:
            message, send_mail = RESUBSCRIBED, True
        else:
            message, send_mail = ALREADY_SUBSCRIBED, False

        #every subscribe call rotates the unsubscribe token
        subscriber.subscribed_at = now
        subscriber.unsubscribed_at = None
        subscriber.unsubscribe_token = token
        self.repo.commit()

        logger.info(f"Newsletter subscribe {email}: {message}")

        if send_mail:
            self.notifier.send_newsletter_confirmation(email, token)

        return {"message": message, "mail_sent": send_mail}

    def unsubscribe(self, token: str) -> Dict[str, Any]:
        subscriber = self.repo.get_by_token(token)
        if not subscriber:
            raise NotFoundError("Newsletter subscriber not found or already unsubscribed.")

        subscriber.unsubscribed_at = datetime.now(timezone.utc)
        subscriber.unsubscribe_token = None
        self.repo.commit()

        logger.info(f"Newsletter unsubscribe {subscriber.email}")
        return {"message": "You have been unsubscribed from the newsletter."}
