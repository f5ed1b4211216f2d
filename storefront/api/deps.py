# storefront/api/deps.py
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.repos.user_repo import UserRepo
from storefront.services.auth_service import decode_token
from storefront.services.device_service import DeviceService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaystackClient


@dataclass
class RequestContext:
    """What a handler needs about the caller, passed explicitly to services."""

    db: Session
    user: UserModel


def get_gateway() -> PaystackClient:
    return PaystackClient()


def get_lock_service() -> LockService:
    return LockService()


def get_notifier() -> NotificationService:
    return NotificationService()


def _resolve_user(authorization: str | None, db: Session) -> UserModel | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    user_id = decode_token(token.strip())
    if user_id is None:
        return None
    return UserRepo(db).get_user(user_id)


def get_optional_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel | None:
    return _resolve_user(authorization, db)


def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel:
    user = _resolve_user(authorization, db)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthenticated.")

    DeviceService(db).track(
        user.id,
        request.client.host if request.client else None,
        request.headers.get("user-agent"),
    )
    return user


def get_context(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequestContext:
    return RequestContext(db=db, user=user)
