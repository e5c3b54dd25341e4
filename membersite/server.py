"""
Run the site with uvicorn on HOST:PORT (PORT defaults to 8000):

  python -m membersite.server
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from membersite.core.config import get_settings

logger = logging.getLogger(__name__)


def main() -> int:
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    logger.info("Listening on port: %s", settings.PORT)
    uvicorn.run(
        "membersite.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
