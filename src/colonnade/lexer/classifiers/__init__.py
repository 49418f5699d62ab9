"""Classifiers for the Colonnade lexer.

Classifiers recognize one construct at a given position and return its
events, or None when the text there is not that construct.
"""

from colonnade.lexer.classifiers.directive import (
    DirectiveClassifierMixin,
)

__all__ = [
    "DirectiveClassifierMixin",
]
