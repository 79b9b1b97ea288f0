# utils/logger.py - shared logger setup for the http utility
import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_logger(name: str = "http-utility", level: int = logging.INFO):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(LOG_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def redact_headers(headers) -> dict:
    """Copy of request headers safe to log (Authorization keeps only its scheme)."""
    safe = dict(headers)
    for key in list(safe):
        if key.lower() == "authorization" and safe[key]:
            safe[key] = str(safe[key]).split(" ", 1)[0] + " [REDACTED]"
    return safe
