"""Console logging setup for the server and CLI entry points."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure the ``sublyze`` logger with a single stream handler.

    Safe to call more than once: existing handlers are removed first so
    repeated calls never duplicate output.
    """
    logger = logging.getLogger("sublyze")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)

    logger.debug("Logging initialized at level %s", log_level.upper())
    return logger
