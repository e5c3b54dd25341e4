"""
CLI entrypoint for purging expired sessions. Run from cron, e.g.:

  python -m membersite.session_cleanup

Or hourly: 0 * * * * cd /path/to/membersite && .venv/bin/python -m membersite.session_cleanup
"""

import logging
import sys

from dotenv import load_dotenv

from membersite.core.config import get_settings
from membersite.core.database import build_engine, build_session_factory
from membersite.services.retention import purge_expired_sessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Delete every session whose expiry has passed."""
    load_dotenv()
    settings = get_settings()
    engine = build_engine(settings)
    db = build_session_factory(engine)()
    try:
        sessions_deleted = purge_expired_sessions(db)
        logger.info("Session purge completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
