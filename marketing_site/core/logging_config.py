"""
Logging configuration for the site backend.

Every module logs through ``logging.getLogger(__name__)``, so all records end
up under the ``marketing_site`` logger configured here. Request access lines
are written by uvicorn.

    2026-02-16 14:32:01 | INFO     | marketing_site.services.store | Purged 3 contact messages
"""

import logging

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level_name: str = "INFO") -> logging.Logger:
    """
    Set up the marketing_site logger. Idempotent, so calling it from every
    app factory invocation is fine. Returns the configured logger.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    logger = logging.getLogger("marketing_site")
    logger.setLevel(level)

    # Guard: don't add duplicate handlers if already configured
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    logger.addHandler(handler)

    return logger
