"""
Logging setup for medcart.

    from medcart.logging import get_logger, sanitize_id_for_logging
    logger = get_logger(__name__)
    logger.info(f"Rejected add for {sanitize_id_for_logging(product_id)}")

LOG_LEVEL picks the level, MEDCART_ENV=production drops timestamps
(the hosting platform adds its own).
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Control characters stripped or escaped before untrusted ids reach a log line
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging() -> None:
    """Attach a stdout handler to the root logger unless the host app already did."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    production = os.environ.get("MEDCART_ENV") == "production"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if production else LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    # Upstash requests are logged by its HTTP client at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None, max_length: int = 32) -> str:
    """Product ids and payment references come from the UI; escape and cap them."""
    if not id_value:
        return "N/A"
    return str(id_value).translate(_LOG_ESCAPES)[:max_length]


__all__ = ["configure_logging", "get_logger", "sanitize_id_for_logging"]
