# =============================================================================
# core/logger.py — Centralized Logging Utility for the Face Attribute Engine
# =============================================================================

import logging
import os
from datetime import datetime

from config import LOGS_DIR, LOG_FILE_PREFIX, LOG_TO_FILE, CONSOLE_LOG_LEVEL

_FORMAT      = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """
    Returns a named logger writing to the console and, when LOG_TO_FILE is
    enabled, to a dated file under LOGS_DIR.

    Usage:  from core.logger import get_logger
            log = get_logger(__name__)
            log.info("Message")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # Already configured

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.getLevelName(CONSOLE_LOG_LEVEL.upper()))
    console.setFormatter(formatter)
    logger.addHandler(console)

    if LOG_TO_FILE:
        os.makedirs(LOGS_DIR, exist_ok=True)
        log_path = os.path.join(
            LOGS_DIR, datetime.now().strftime(f"{LOG_FILE_PREFIX}_%Y%m%d.log")
        )
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
