"""Logging configuration helpers."""

import logging

from flickr_search.config import LOG_LEVEL


def configure_logging(level: str | int | None = None) -> None:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("flickr_search")
    logger.setLevel(level or LOG_LEVEL)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
