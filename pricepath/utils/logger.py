"""Logging configuration for pricepath."""

import logging
import sys


def setup_logger(name: str = "pricepath", level: str = "INFO") -> logging.Logger:
    """Create and configure a logger under the ``pricepath`` namespace."""
    if not name.startswith("pricepath"):
        name = f"pricepath.{name}"
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        fmt = logging.Formatter(
            "%(asctime)s | %(name)-28s | %(levelname)-7s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
