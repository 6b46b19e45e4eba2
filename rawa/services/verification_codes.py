"""Verification code store: issue, mail and consume 6-digit one-time codes.

issue() adds the record and sends the mail but does not commit; consume() marks
the record consumed but does not commit. The caller commits once, together with
the user change that depends on the code, so either both land or neither does.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from sqlalchemy.orm import Session

from rawa.core.exceptions import DeliveryFailed
from rawa.models import User, VerificationCode
from rawa.services.mailer import CodePurpose, MailDeliveryError, Mailer, build_code_email

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
DEFAULT_TTL_MINUTES = 15

ConsumeResult = Literal["matched", "not_found", "expired"]


def generate_code() -> str:
    """Uniformly random code in 000000-999999, zero-padded."""
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we store is UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def issue_code(
    db: Session,
    user: User,
    mailer: Mailer,
    purpose: CodePurpose = "verify_email",
    ttl_minutes: int = DEFAULT_TTL_MINUTES,
    now: datetime | None = None,
) -> VerificationCode:
    """
    Persist a new code for user (flushed, not committed) and mail it to user.email.

    Raises DeliveryFailed if the mail could not be sent; the caller must roll back.
    Earlier unconsumed codes stay valid until their own expiry.
    """
    if not user.email:
        raise ValueError("issue_code requires a user with an email address")
    issued_at = now or datetime.now(timezone.utc)
    record = VerificationCode(
        user_id=user.id,
        code=generate_code(),
        expires_at=issued_at + timedelta(minutes=ttl_minutes),
        consumed=False,
    )
    db.add(record)
    db.flush()

    message = build_code_email(
        to=user.email,
        username=user.username,
        code=record.code,
        purpose=purpose,
        ttl_minutes=ttl_minutes,
    )
    try:
        mailer.send(message)
    except MailDeliveryError as e:
        logger.exception(
            "Verification code delivery failed",
            extra={"user_id": user.id, "purpose": purpose, "reason": e.message[:500]},
        )
        raise DeliveryFailed() from e

    logger.info(
        "Verification code issued",
        extra={"user_id": user.id, "purpose": purpose, "code_id": record.id},
    )
    return record


def consume_code(
    db: Session,
    user_id: int,
    supplied_code: str,
    now: datetime | None = None,
) -> ConsumeResult:
    """
    Check supplied_code against the newest unconsumed matching record for user_id.

    On "matched" the record is marked consumed in the session (uncommitted).
    An expired record is left unconsumed so a resubmission reports "expired" again.
    """
    record = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.user_id == user_id,
            VerificationCode.code == supplied_code,
            VerificationCode.consumed.is_(False),
        )
        .order_by(VerificationCode.id.desc())
        .first()
    )
    if record is None:
        return "not_found"

    current = now or datetime.now(timezone.utc)
    if current > _as_utc(record.expires_at):
        return "expired"

    record.consumed = True
    return "matched"
