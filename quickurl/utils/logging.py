"""Application-wide logging initialization

Call `setup_logging()` once at process start (the FastAPI lifespan and the
standalone sweeper both do) before any other logging is done. Modules log
through `logging.getLogger(__name__)`.

Logging format:
    2025-12-26 12:00:00,000 INFO [quickurl.store.factory] SQL URL store initialized
"""

import logging
import logging.config
from typing import Optional

from quickurl.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    log_level = (level or settings.log_level).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": LOG_FORMAT,
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": log_level,
                "handlers": ["stdout"],
            },
        }
    )
