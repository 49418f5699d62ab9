"""Generic directives for Colonnade.

Three forms share one notation of name, bracketed label and braced
attributes:

    :abbr[HTML]{title="HyperText Markup Language"}     text directive
    ::youtube[Video of a cat]{#01ab2cd3efg}            leaf directive
    :::spoiler{.warning}                               container directive
    He was dead all along.
    :::

Key components:
- directive_from_markdown: compiler extension building directive nodes
- directive_to_markdown: renderer extension writing them back
- fold_attributes / encode_attributes: the attribute list codec
- fence_length / fence: colon counts that keep nested containers apart

Thread Safety:
Extensions are immutable tables of plain functions. Per-call state lives in
the compiler and renderer contexts.

"""

from __future__ import annotations

from colonnade.directives.attributes import (
    SHORTCUT,
    encode_attributes,
    fold_attributes,
    is_shortcut,
)
from colonnade.directives.fence import fence, fence_length
from colonnade.directives.reader import directive_from_markdown
from colonnade.directives.writer import directive_to_markdown

__all__ = [
    "SHORTCUT",
    "directive_from_markdown",
    "directive_to_markdown",
    "encode_attributes",
    "fence",
    "fence_length",
    "fold_attributes",
    "is_shortcut",
]
