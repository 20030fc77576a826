"""
logger.py
=========
Central logger configuration. Modules call get_logger(__name__).
"""

import logging
import os

LOG_LEVEL = os.getenv("CLINIC_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv(
    "CLINIC_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def get_logger(name: str = "clinic_queue") -> logging.Logger:
    """Create (once) and return a named logger with a console handler."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    return logger
