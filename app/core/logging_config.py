"""
Logging setup - one call at startup, module loggers everywhere else.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once. Safe to call repeatedly."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level.upper())
    # pymongo is chatty at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
