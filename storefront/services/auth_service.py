# storefront/services/auth_service.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import AlreadyExistsError
from storefront.repos.user_repo import UserRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import JWT_ALGORITHM, JWT_SECRET, JWT_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def create_token(user: UserModel) -> str:
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "is_admin": bool(user.is_admin),
        "exp": datetime.now(timezone.utc) + timedelta(seconds=JWT_TTL_SECONDS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> int | None:
    """User id from a bearer token, None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None
    sub = payload.get("sub")
    return int(sub) if sub and str(sub).isdigit() else None


class AuthService:
    def __init__(self, db: Session, notifier: NotificationService | None = None):
        self.repo = UserRepo(db)
        self.notifier = notifier or NotificationService()

    def register(self, name: str, email: str, password: str, phone: str | None = None) -> Dict[str, Any]:
        email = email.lower()
        if self.repo.get_by_email(email):
            raise AlreadyExistsError("The email has already been taken.")

        user = self.repo.create_user(
            UserModel(
                name=name,
                email=email,
                password_hash=hash_password(password),
                phone=phone,
            )
        )

        logger.info(f"User {user.id} registered")
        self.notifier.send_welcome(user.name, user.email)

        return {"token": create_token(user), "user": user}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.repo.get_by_email(email)
        if not user or not check_password(password, user.password_hash):
            logger.info(f"Failed login for {email.lower()}")
            raise PermissionError("These credentials do not match our records.")

        return {"token": create_token(user), "user": user}

    def get_user(self, user_id: int) -> UserModel | None:
        return self.repo.get_user(user_id)

    def update_profile(self, user: UserModel, changes: Dict[str, Any]) -> UserModel:
        for field in ("name", "phone", "date_of_birth", "gender"):
            if field in changes:
                setattr(user, field, changes[field])

        logger.info(f"Profile of user {user.id} updated: {sorted(changes)}")
        return self.repo.save(user)
