"""Logging configuration."""

from __future__ import annotations

import logging
import sys

from edloop.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger for console output.

    Args:
        level: Log level name; defaults to ``settings.log_level``.
    """
    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    root.setLevel(resolved)

    if not any(getattr(h, "_edloop_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._edloop_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
