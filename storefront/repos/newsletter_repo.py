from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.newsletter_subscriber import NewsletterSubscriberModel


class NewsletterRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> NewsletterSubscriberModel | None:
        return self.db.execute(
            select(NewsletterSubscriberModel).where(NewsletterSubscriberModel.email == email)
        ).scalar_one_or_none()

    def get_by_token(self, token: str) -> NewsletterSubscriberModel | None:
        return self.db.execute(
            select(NewsletterSubscriberModel).where(
                NewsletterSubscriberModel.unsubscribe_token == token
            )
        ).scalar_one_or_none()

    def add(self, subscriber: NewsletterSubscriberModel) -> NewsletterSubscriberModel:
        self.db.add(subscriber)
        return subscriber

    def commit(self):
        self.db.commit()
