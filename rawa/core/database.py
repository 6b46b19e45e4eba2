"""PostgreSQL engine, request-scoped sessions and the commit helper shared by writers."""

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rawa.core.config import settings
from rawa.core.exceptions import Conflict

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; closed (and any open transaction rolled back) after the response."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Commit the session. Unique and foreign-key violations are the store's
    final word on conflicts: roll back and raise Conflict(message).
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Integrity constraint rejected write", extra={"reason": str(e.orig)[:200]})
        raise Conflict(message) from e


def check_db_connected(db: Session) -> bool:
    """SELECT 1 against the session's connection; False on any driver or pool error."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        return False
