# =============================================================================
# core/logger.py — Centralized Logging Utility
# =============================================================================

import logging
import os
from datetime import datetime
from config import LOGS_DIR

_FORMAT  = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """
    Returns a named logger that writes to both console and a dated log file.
    Usage:  from core.logger import get_logger
            log = get_logger(__name__)
            log.info("Message")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # Already configured

    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    # Console: lifecycle events and warnings only
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    # File: everything, including per-tick telemetry
    log_path = os.path.join(LOGS_DIR, datetime.now().strftime("eyemon_%Y%m%d.log"))
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    return logger
