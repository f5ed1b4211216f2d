# storefront/services/mailer.py
from email.message import EmailMessage
import smtplib

from storefront.utils.settings import (
    MAIL_FROM,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_STARTTLS,
    SMTP_USER,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Mailer:
    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        starttls: bool | None = None,
    ):
        self.host = host if host is not None else SMTP_HOST
        self.port = port or SMTP_PORT
        self.user = user if user is not None else SMTP_USER
        self.password = password if password is not None else SMTP_PASSWORD
        self.sender = sender or MAIL_FROM
        self.starttls = SMTP_STARTTLS if starttls is None else starttls

    def send(self, to: str, subject: str, body: str) -> bool:
        if not self.host:
            logger.info(f"SMTP not configured, skipping mail '{subject}' to {to}")
            return False

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.starttls:
                smtp.starttls()
            if self.user and self.password:
                smtp.login(self.user, self.password)
            smtp.send_message(msg)

        logger.info(f"Mail '{subject}' sent to {to}")
        return True
