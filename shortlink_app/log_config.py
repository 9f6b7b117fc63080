"""
Application-wide logging initialization.

Call `setup_logging()` once when the app is created, before anything
else logs. Every module logs through `logging.getLogger(__name__)`.

Format:
    2025-10-29 10:30:00,123 INFO shortlink_app.services.url_service: Created short link abc12345
"""

import logging
import logging.config


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
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
            "loggers": {
                "shortlink_app": {
                    "level": level.upper(),
                    "handlers": ["stdout"],
                    "propagate": False,
                }
            },
        }
    )
