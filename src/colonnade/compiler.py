"""Tree construction from lexer events.

The compiler replays a balanced event stream and calls the handler
registered for each token kind, on enter and on exit. Handlers build the
tree through a CompileContext:

- ``enter(node_class, token, **fields)`` opens a draft node
- ``exit(token)`` closes the innermost draft, freezes it into a node and
  appends it to its parent
- ``add_text(value, token)`` appends text; consecutive text merges into one
  Text node
- ``buffer()``/``resume()`` capture text in a throwaway draft instead of the
  tree
- ``set_data``/``get_data``/``pop_data`` hold scratch values between events

Nodes are frozen, so open nodes live as mutable Draft objects until their
exit event. Token kinds without a handler are passed over; their nested
events are still replayed.

Example:
    >>> from colonnade.lexer import Lexer
    >>> compile_events(Lexer("Hello").tokenize())
    Document(children=(Paragraph(children=(Text(content='Hello'),), directive_label=False),))

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from colonnade.entities import decode_entity
from colonnade.errors import ParseError
from colonnade.location import UNKNOWN_LOCATION, SourceLocation
from colonnade.nodes import BlockQuote, Document, Heading, Node, Paragraph, Text
from colonnade.tokens import Event, EventKind, Token, TokenType
from colonnade.utils.logger import get_logger

logger = get_logger(__name__)

type Handler = Callable[[CompileContext, Token], None]

# Draft type of the throwaway drafts opened by CompileContext.buffer()
FRAGMENT = "fragment"


@dataclass(frozen=True, slots=True)
class FromMarkdownExtension:
    """Handlers contributed to the compiler.

    Attributes:
        enter: Token kind -> handler called when the token opens
        exit: Token kind -> handler called when the token closes
        can_contain_eols: Draft types that keep soft line endings as ``\\n``
            text; elsewhere line endings are dropped

    """

    enter: Mapping[str, Handler] = field(default_factory=dict)
    exit: Mapping[str, Handler] = field(default_factory=dict)
    can_contain_eols: tuple[str, ...] = ()


@dataclass(slots=True)
class Draft:
    """A node under construction.

    ``node_class`` is None for buffer fragments, which never become nodes.
    """

    node_class: type[Node] | None
    start: Token | None
    fields: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    _text: list[str] = field(default_factory=list)
    _text_start: Token | None = None
    _text_end: Token | None = None

    @property
    def type(self) -> str:
        """The ``type`` tag of the node this draft becomes."""
        return self.node_class.type if self.node_class is not None else FRAGMENT

    def add_text(self, value: str, token: Token) -> None:
        if not self._text:
            self._text_start = token
        self._text.append(value)
        self._text_end = token

    def append(self, node: Node) -> None:
        self.flush_text()
        self.children.append(node)

    def flush_text(self) -> None:
        """Turn pending text into a Text child."""
        if not self._text:
            return
        location = UNKNOWN_LOCATION
        if self._text_start is not None and self._text_end is not None:
            location = self._text_start.location.span_to(self._text_end.location)
        self.children.append(Text(content="".join(self._text), location=location))
        self._text.clear()
        self._text_start = self._text_end = None

    def text_content(self) -> str:
        """All text collected so far, for buffer fragments."""
        self.flush_text()
        return "".join(child.content for child in self.children if isinstance(child, Text))

    def finish(self, end: Token | None) -> Node:
        """Freeze the draft into its node."""
        if self.node_class is None:
            msg = "Cannot finish a buffer fragment into a node"
            raise ParseError(msg)
        self.flush_text()
        if self.start is not None and end is not None:
            location = self.start.location.span_to(end.location)
        elif self.children:
            location = self.children[0].location.span_to(self.children[-1].location)
        else:
            location = UNKNOWN_LOCATION
        return self.node_class(children=tuple(self.children), location=location, **self.fields)


class CompileContext:
    """Mutable state shared by handlers during one compile call.

    Thread Safety:
        Not thread-safe. One context exists per compile call.

    """

    __slots__ = ("stack", "data", "can_contain_eols", "_open")

    def __init__(self, can_contain_eols: Iterable[str] = ()) -> None:
        self.stack: list[Draft] = [Draft(Document, None)]
        self.data: dict[str, Any] = {}
        self.can_contain_eols = frozenset(can_contain_eols)
        self._open: list[Token] = []

    @property
    def current(self) -> Draft:
        """The innermost open draft."""
        return self.stack[-1]

    def enter(self, node_class: type[Node], token: Token, **fields: Any) -> Draft:
        """Open a draft for ``node_class`` started by ``token``."""
        draft = Draft(node_class, token, dict(fields))
        self.stack.append(draft)
        return draft

    def exit(self, token: Token) -> Node:
        """Close the innermost draft, which must have been opened by ``token``."""
        draft = self.stack[-1]
        if len(self.stack) == 1 or draft.start is not token:
            opened = draft.start.type if draft.start is not None else draft.type
            msg = f"Cannot close '{token.type}' ({token.value!r}): '{opened}' is open"
            raise ParseError(msg, token.lineno, token.col, token.location.source_file)
        self.stack.pop()
        node = draft.finish(token)
        self.stack[-1].append(node)
        return node

    def add_text(self, value: str, token: Token) -> None:
        self.stack[-1].add_text(value, token)

    def buffer(self) -> None:
        """Capture text in a fragment until ``resume()``."""
        self.stack.append(Draft(None, None))

    def resume(self) -> str:
        """Close the fragment opened by ``buffer()`` and return its text."""
        draft = self.stack[-1]
        if draft.node_class is not None:
            msg = f"Cannot resume: '{draft.type}' is open, not a buffer"
            raise ParseError(msg)
        self.stack.pop()
        return draft.text_content()

    def set_data(self, key: str, value: Any) -> None:
        self.data[key] = value

    def get_data(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def pop_data(self, key: str, default: Any = None) -> Any:
        return self.data.pop(key, default)

    @staticmethod
    def slice_serialize(token: Token) -> str:
        """Text covered by ``token``, with container prefixes removed."""
        return token.value


# =============================================================================
# Core handlers
# =============================================================================


def _enter_paragraph(ctx: CompileContext, token: Token) -> None:
    ctx.enter(Paragraph, token)


def _enter_heading(ctx: CompileContext, token: Token) -> None:
    ctx.enter(Heading, token)


def _exit_heading_sequence(ctx: CompileContext, token: Token) -> None:
    ctx.current.fields["level"] = len(token.value)


def _enter_block_quote(ctx: CompileContext, token: Token) -> None:
    ctx.enter(BlockQuote, token)


def _exit_node(ctx: CompileContext, token: Token) -> None:
    ctx.exit(token)


def _on_text(ctx: CompileContext, token: Token) -> None:
    ctx.add_text(token.value, token)


def _on_character_reference(ctx: CompileContext, token: Token) -> None:
    decoded = decode_entity(token.value[1:-1])
    ctx.add_text(token.value if decoded is None else decoded, token)


def _on_line_ending(ctx: CompileContext, token: Token) -> None:
    if ctx.current.type in ctx.can_contain_eols:
        ctx.add_text("\n", token)


CORE_EXTENSION = FromMarkdownExtension(
    enter={
        TokenType.PARAGRAPH: _enter_paragraph,
        TokenType.ATX_HEADING: _enter_heading,
        TokenType.BLOCK_QUOTE: _enter_block_quote,
    },
    exit={
        TokenType.PARAGRAPH: _exit_node,
        TokenType.ATX_HEADING: _exit_node,
        TokenType.ATX_HEADING_SEQUENCE: _exit_heading_sequence,
        TokenType.BLOCK_QUOTE: _exit_node,
        TokenType.DATA: _on_text,
        TokenType.CHARACTER_ESCAPE_VALUE: _on_text,
        TokenType.CHARACTER_REFERENCE: _on_character_reference,
        TokenType.LINE_ENDING: _on_line_ending,
    },
    can_contain_eols=(Paragraph.type, Heading.type),
)


def compile_events(
    events: Iterable[Event],
    extensions: Iterable[FromMarkdownExtension] = (),
) -> Document:
    """Build a Document from a balanced event stream.

    Args:
        events: Enter/exit events, e.g. from ``Lexer.tokenize()``
        extensions: Handler tables applied after the core handlers; later
            tables override earlier ones for the same token kind

    Raises:
        ParseError: If the events are not balanced.
    """
    enter: dict[str, Handler] = {}
    exit_: dict[str, Handler] = {}
    can_contain_eols: list[str] = []
    for extension in (CORE_EXTENSION, *extensions):
        enter.update(extension.enter)
        exit_.update(extension.exit)
        can_contain_eols.extend(extension.can_contain_eols)

    ctx = CompileContext(can_contain_eols)
    count = 0
    for kind, token in events:
        count += 1
        if kind is EventKind.ENTER:
            ctx._open.append(token)
            handler = enter.get(token.type)
        else:
            if not ctx._open or ctx._open[-1] is not token:
                msg = f"Unexpected exit of '{token.type}' ({token.value!r})"
                raise ParseError(msg, token.lineno, token.col, token.location.source_file)
            ctx._open.pop()
            handler = exit_.get(token.type)
        if handler is not None:
            handler(ctx, token)

    if ctx._open:
        token = ctx._open[-1]
        msg = f"Unclosed '{token.type}' at end of input"
        raise ParseError(msg, token.lineno, token.col, token.location.source_file)
    if len(ctx.stack) != 1:
        msg = f"Unclosed '{ctx.current.type}' draft at end of input"
        raise ParseError(msg)

    document = ctx.stack[0].finish(None)
    logger.debug("Compiled %d events into %d blocks", count, len(document.children))
    return document  # type: ignore[return-value]


__all__ = [
    "CORE_EXTENSION",
    "CompileContext",
    "Draft",
    "FromMarkdownExtension",
    "Handler",
    "compile_events",
]
