# storefront/api/routers/newsletter.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_notifier
from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import NewsletterSubscribeIn
from storefront.services.newsletter_service import NewsletterService
from storefront.services.notification_service import NotificationService

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.post("/subscribe")
def subscribe(
    payload: NewsletterSubscribeIn,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    return NewsletterService(db, notifier).subscribe(payload.email)


@router.get("/unsubscribe/{token}")
def unsubscribe(
    token: str,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    try:
        return NewsletterService(db, notifier).unsubscribe(token)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
