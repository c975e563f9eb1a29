"""Logging helpers shared by the CLI, repos and capability engine."""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "SAMPLEBANK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root ``samplebank`` logger once.

    Args:
        level: Log level name. Falls back to $SAMPLEBANK_LOG_LEVEL, then INFO.
    """
    global _configured
    if _configured and level is None:
        return

    root = logging.getLogger("samplebank")
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the ``samplebank`` hierarchy."""
    configure_logging()
    if not name.startswith("samplebank"):
        name = f"samplebank.{name}"
    return logging.getLogger(name)
