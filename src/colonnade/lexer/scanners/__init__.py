"""Scanners for the Colonnade lexer.

BlockScannerMixin walks lines and emits block structure; InlineScannerMixin
emits phrasing events for paragraph text, heading text and labels.
"""

from __future__ import annotations

from colonnade.lexer.scanners.block import BlockScannerMixin
from colonnade.lexer.scanners.inline import InlineScannerMixin

__all__ = [
    "BlockScannerMixin",
    "InlineScannerMixin",
]
