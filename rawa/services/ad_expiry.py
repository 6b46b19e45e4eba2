"""Ad expiry: hide ads whose expires_at has passed."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from rawa.models import Ad

if TYPE_CHECKING:
    from rawa.core.config import Settings

logger = logging.getLogger(__name__)


def hide_expired_ads(session: Session, now: datetime | None = None) -> int:
    """
    Clear in_show on every shown ad with expires_at <= now in a single UPDATE.

    Returns the number of ads hidden. Idempotent; a concurrent show/hide of the
    same ad simply wins or loses on last write.
    """
    cutoff = now or datetime.now(timezone.utc)
    hidden_count = (
        session.query(Ad)
        .filter(Ad.in_show.is_(True), Ad.expires_at <= cutoff)
        .update({Ad.in_show: False}, synchronize_session=False)
    )
    session.commit()
    return hidden_count


def run_ad_expiry(session: Session, settings: "Settings") -> int:
    """Scheduled sweep entrypoint. Honors AD_EXPIRY_ENABLED."""
    if not settings.AD_EXPIRY_ENABLED:
        logger.info("Ad expiry is disabled (AD_EXPIRY_ENABLED=false); skipping.")
        return 0

    cutoff = datetime.now(timezone.utc)
    hidden_count = hide_expired_ads(session, now=cutoff)
    if hidden_count > 0:
        logger.info(
            "Ad expiry run: cutoff=%s, ads_hidden=%s",
            cutoff.isoformat(),
            hidden_count,
        )
    return hidden_count
