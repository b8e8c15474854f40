"""Run the relay: python -m app"""
import logging
import sys

import uvicorn

from app.config import check_live_credentials, get_settings
from app.errors import ConfigurationError
from app.log import configure_logging

logger = logging.getLogger("app")


def main() -> int:
    settings = get_settings()
    configure_logging(settings)
    try:
        check_live_credentials(settings)
    except ConfigurationError as e:
        logger.error("ERROR: %s", e)
        return 1

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
