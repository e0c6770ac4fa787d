"""
Logging setup for the Attendance Tracker Service.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_configured = False


def setup_logging() -> None:
    """Configure the root logger once."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())

    # Quieter third-party loggers
    logging.getLogger("aiokafka").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )

    _configured = True


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
