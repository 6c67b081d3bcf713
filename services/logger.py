"""
Logging configuration for the registration backend.

One named logger, level taken from the LOG_LEVEL environment variable.
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logger = logging.getLogger("akilam")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

logger.propagate = False


def get_logger(name=None):
    """Return the backend logger, or a child of it when a name is given."""
    if name:
        return logging.getLogger(f"akilam.{name}")
    return logger
