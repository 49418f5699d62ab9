"""Typed tree nodes for Colonnade.

All nodes are frozen, slotted, keyword-only dataclasses:
- Immutability: the writer never mutates a caller's tree, and trees are safe
  to share across threads
- Pattern matching: ``match node: case ContainerDirective(): ...`` works
- ``location`` is excluded from equality, so two trees compare equal "up to
  position metadata"

Every node class carries a ``type`` tag. Handler tables in the compiler and
renderer are keyed by these tags.

Node Hierarchy:
Node (base)
├── Document                 document
├── Paragraph                paragraph (directive_label marks a container label)
├── Heading                  heading
├── BlockQuote               block_quote
├── Text                     text
└── Directive
    ├── TextDirective        text_directive       :name[label]{attrs}
    ├── LeafDirective        leaf_directive       ::name[label]{attrs}
    └── ContainerDirective   container_directive  :::name[label]{attrs} ... :::

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from colonnade.location import UNKNOWN_LOCATION, SourceLocation

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    """Base class for all tree nodes."""

    type: ClassVar[str] = "node"

    location: SourceLocation = field(default=UNKNOWN_LOCATION, compare=False, repr=False)


# =============================================================================
# Phrasing Nodes
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Text(Node):
    """Plain text. Soft line endings are kept as ``\\n`` in ``content``."""

    type: ClassVar[str] = "text"

    content: str = ""


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Paragraph(Node):
    """Paragraph block.

    When ``directive_label`` is set, the paragraph holds the bracketed label
    of the container directive it is the first child of.

    """

    type: ClassVar[str] = "paragraph"

    children: tuple[Inline, ...] = ()
    directive_label: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class Heading(Node):
    """ATX heading.

    Markdown: ## Heading

    """

    type: ClassVar[str] = "heading"

    level: int = 1
    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class BlockQuote(Node):
    """Block quote.

    Markdown: > quoted text

    """

    type: ClassVar[str] = "block_quote"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Document(Node):
    """Root node holding all top-level blocks."""

    type: ClassVar[str] = "document"

    children: tuple[Block, ...] = ()


# =============================================================================
# Directives
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Directive(Node):
    """Fields shared by the three directive forms.

    Attributes:
        name: Directive name; empty when the source omitted it
        attributes: Insertion-ordered attribute mapping. Readers always
            produce ``str`` values; ``None`` values on hand-built nodes are
            skipped when serializing.
        children: Label content (text/leaf) or block content (container)

    """

    type: ClassVar[str] = "directive"

    name: str = ""
    attributes: Mapping[str, str | None] = field(default_factory=dict)
    children: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class TextDirective(Directive):
    """Inline directive; children are the label's phrasing content.

    Markdown: :abbr[HTML]{title="HyperText Markup Language"}

    """

    type: ClassVar[str] = "text_directive"


@dataclass(frozen=True, slots=True, kw_only=True)
class LeafDirective(Directive):
    """Block directive without block content; children are the label's phrasing.

    Markdown: ::youtube[Video of a cat]{#01ab2cd3efg}

    """

    type: ClassVar[str] = "leaf_directive"


@dataclass(frozen=True, slots=True, kw_only=True)
class ContainerDirective(Directive):
    """Block directive wrapping block content.

    The label, when present, is the first child: a Paragraph with
    ``directive_label=True``.

    Markdown:
        :::spoiler[Ending]
        He was dead all along.
        :::

    """

    type: ClassVar[str] = "container_directive"


def is_directive_label(node: Node | None) -> bool:
    """Whether ``node`` is a container directive's label paragraph."""
    return isinstance(node, Paragraph) and node.directive_label


# PEP 695 type aliases
type Inline = Text | TextDirective
type Block = Paragraph | Heading | BlockQuote | LeafDirective | ContainerDirective
type AnyDirective = TextDirective | LeafDirective | ContainerDirective

NODE_TYPES: dict[str, type[Node]] = {
    cls.type: cls
    for cls in (
        Document,
        Paragraph,
        Heading,
        BlockQuote,
        Text,
        TextDirective,
        LeafDirective,
        ContainerDirective,
    )
}
