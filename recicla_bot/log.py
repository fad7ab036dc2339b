"""Logging setup for the webhook process."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging; unknown level names fall back to INFO."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format=_FORMAT, force=True)
    # httpx logs full request URLs at INFO, and those carry the bot token
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
