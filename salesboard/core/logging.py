"""Logging setup for the service."""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install a basic handler unless the host process already set one up."""

    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=(level or LOG_LEVEL), format=LOG_FORMAT)


__all__ = ["LOG_FORMAT", "configure_logging"]
