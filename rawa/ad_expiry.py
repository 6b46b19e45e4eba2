"""
CLI entrypoint for the daily ad expiry sweep. Run from cron, e.g.:

  python -m rawa.ad_expiry

Or daily at midnight: 0 0 * * * cd /path/to/rawa && .venv/bin/python -m rawa.ad_expiry
"""

import logging
import sys

from rawa.core.config import get_settings
from rawa.core.database import SessionLocal
from rawa.services.ad_expiry import run_ad_expiry

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the sweep: hide ads past their expiry."""
    settings = get_settings()
    db = SessionLocal()
    try:
        ads_hidden = run_ad_expiry(db, settings)
        logger.info("Ad expiry completed: ads_hidden=%s", ads_hidden)
        return 0
    except Exception as e:
        logger.exception("Ad expiry job failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
