"""Outbound mail: verification-code templates and SMTP / console transports."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from functools import lru_cache
from typing import TYPE_CHECKING, Literal, Protocol

from rawa.core.config import get_settings

if TYPE_CHECKING:
    from rawa.core.config import Settings

logger = logging.getLogger(__name__)

CodePurpose = Literal["verify_email", "reset_password"]

SUBJECTS: dict[str, str] = {
    "verify_email": "Your verification code",
    "reset_password": "Your password reset code",
}

_HTML_TEMPLATE = """
<div style="font-family: Arial, sans-serif;">
  <h2>{heading}</h2>
  <p>Hello {username},</p>
  <p>Your code is:</p>
  <h1 style="letter-spacing:4px;">{code}</h1>
  <p>This code will expire in {ttl_minutes} minutes.</p>
</div>
"""

_TEXT_TEMPLATE = "Hello {username},\n\nYour code is {code}. It expires in {ttl_minutes} minutes.\n"


class MailDeliveryError(Exception):
    """Raised when the transport could not hand the message over."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    html: str
    text: str


class Mailer(Protocol):
    def send(self, message: OutgoingEmail) -> None: ...


def build_code_email(
    to: str,
    username: str,
    code: str,
    purpose: CodePurpose,
    ttl_minutes: int,
) -> OutgoingEmail:
    """Render the verification / reset email for one code."""
    subject = SUBJECTS[purpose]
    heading = "Verification Code" if purpose == "verify_email" else "Password Reset Code"
    return OutgoingEmail(
        to=to,
        subject=subject,
        html=_HTML_TEMPLATE.format(
            heading=heading, username=username or "", code=code, ttl_minutes=ttl_minutes
        ),
        text=_TEXT_TEMPLATE.format(username=username or "", code=code, ttl_minutes=ttl_minutes),
    )


class SmtpMailer:
    """Send through an SMTP relay (STARTTLS, implicit TLS or plain, per settings)."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _build_message(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._settings.MAIL_FROM
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.set_content(message.text)
        msg.add_alternative(message.html, subtype="html")
        return msg

    def send(self, message: OutgoingEmail) -> None:
        s = self._settings
        msg = self._build_message(message)
        smtp_cls = smtplib.SMTP_SSL if s.SMTP_USE_SSL else smtplib.SMTP
        try:
            with smtp_cls(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as smtp:
                if s.SMTP_USE_TLS and not s.SMTP_USE_SSL:
                    smtp.starttls()
                if s.SMTP_USERNAME:
                    password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else ""
                    smtp.login(s.SMTP_USERNAME, password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"SMTP delivery to {message.to} failed: {e!s}") from e


class ConsoleMailer:
    """Development transport: log the message instead of sending it."""

    def send(self, message: OutgoingEmail) -> None:
        logger.info(
            "Console mail",
            extra={"mail_to": message.to, "mail_subject": message.subject},
        )
        logger.info("%s", message.text)


def create_mailer(settings: Settings) -> Mailer:
    if settings.MAIL_BACKEND == "console":
        return ConsoleMailer()
    return SmtpMailer(settings)


@lru_cache
def get_mailer() -> Mailer:
    """Dependency: process-wide mailer built once from settings."""
    return create_mailer(get_settings())
