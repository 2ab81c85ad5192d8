"""
Logging configuration for the service.

One consistent line format for every module logger.
Never logs chart images, prompt bodies, or API keys.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log request lines or full SQL at INFO.
_QUIET_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "urllib3.connectionpool",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
