"""Minimal logging utilities for Colonnade.

Example:
    >>> from colonnade.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Compiling %d events", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a standard library logger under the "colonnade." namespace.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("mymodule").name
        'colonnade.mymodule'
    """
    if not (name == "colonnade" or name.startswith("colonnade.")):
        name = f"colonnade.{name}"
    return logging.getLogger(name)
