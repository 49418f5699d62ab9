"""Utility modules for Colonnade.

Provides:
- logger: get_logger for namespaced logging
"""

from colonnade.utils.logger import get_logger

__all__ = ["get_logger"]
