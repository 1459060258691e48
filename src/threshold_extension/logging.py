"""
Logging configuration helpers.
Library modules only create loggers; processes that want output (the demo CLI,
scripts) call `configure_logging` once.
"""

from __future__ import annotations

import logging

from threshold_extension.settings import get_settings

_LOGGING_CONFIGURED = False


def configure_logging(level_name: str | None = None) -> None:
    """Configure process-wide logging from settings, or from an explicit level."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    name = (level_name or get_settings().log_level).upper()
    level = getattr(logging, name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
