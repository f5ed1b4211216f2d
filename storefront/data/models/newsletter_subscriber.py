from sqlalchemy import Column, DateTime, Integer, String

from storefront.data.database import Base


class NewsletterSubscriberModel(Base):
    __tablename__ = "newsletter_subscribers"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    subscribed_at = Column(DateTime(timezone=True), nullable=True)
    unsubscribed_at = Column(DateTime(timezone=True), nullable=True)
    unsubscribe_token = Column(String(64), nullable=True, unique=True)
