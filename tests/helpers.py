"""Shared test fixtures: in-memory SQLite store, recording mailer, API client wiring."""

import re

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from rawa.core.database import get_db
from rawa.core.security import create_access_token, hash_password
from rawa.models import Base, User, VerificationCode
from rawa.services.mailer import MailDeliveryError, OutgoingEmail, get_mailer

API = "/api/v1"
DEFAULT_PASSWORD = "secret1"

_CODE_RE = re.compile(r"\b(\d{6})\b")


class RecordingMailer:
    """Mailer double: keeps every message; fail=True simulates a dead SMTP relay."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[OutgoingEmail] = []

    def send(self, message: OutgoingEmail) -> None:
        if self.fail:
            raise MailDeliveryError("SMTP relay unreachable")
        self.sent.append(message)

    def last_code(self) -> str:
        match = _CODE_RE.search(self.sent[-1].text)
        assert match is not None, "no code in last message"
        return match.group(1)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with the full schema and foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def make_user(
    db: Session,
    username: str,
    role: str = "USER",
    password: str = DEFAULT_PASSWORD,
    email: str | None = None,
    email_verified: bool = True,
    phone: str | None = "0790000000",
) -> User:
    user = User(
        username=username,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        role=role,
        email_verified=email_verified,
        status="ACTIVE",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.username)}"}


def codes_for(db: Session, user_id: int) -> list[VerificationCode]:
    return (
        db.query(VerificationCode)
        .filter(VerificationCode.user_id == user_id)
        .order_by(VerificationCode.id)
        .all()
    )


def make_client(session_factory: sessionmaker, mailer: RecordingMailer) -> TestClient:
    """TestClient over the real app with the store and mailer swapped out."""
    from rawa.main import app

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    return TestClient(app)


def reset_overrides() -> None:
    from rawa.main import app

    app.dependency_overrides.clear()
