"""Application-wide logging setup."""

import logging
import sys

from backend.app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure the root logger once; repeated calls are no-ops."""
    settings = get_settings()
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, settings.log_level, logging.INFO))
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    if settings.environment == "production":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
