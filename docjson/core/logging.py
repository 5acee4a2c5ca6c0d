"""Logging configuration."""

import logging
import os


def setup_logging() -> None:
    """Configure application logging."""
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    # httpx logs every provider request at INFO; keep uploads readable
    if level != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
