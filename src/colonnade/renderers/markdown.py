"""Markdown renderer: typed tree back to Markdown source.

Rendering is driven by handler tables keyed by node ``type``. A per-call
SerializeState carries the tables, the construct stack and the escaping
rules. Handlers call back into the state to render children:

- ``container_phrasing``: inline children, each told which characters sit
  right before and after it so text can be escaped at the seams
- ``container_flow``: block children, separated by one blank line
- ``safe``: escape text according to the UnsafePattern rules whose
  construct conditions match the current stack

Characters that must be escaped get a backslash when they are ASCII
punctuation and a hexadecimal character reference otherwise.

Thread Safety:
SerializeState is created per call; extension tables are immutable.

"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import cast

from colonnade.errors import SerializeError
from colonnade.nodes import BlockQuote, Document, Heading, Node, Paragraph, Text
from colonnade.utils.logger import get_logger

logger = get_logger(__name__)

ASCII_PUNCTUATION = re.compile(r"[!-/:-@\[-`{-~]")
_BACKSLASH_BEFORE_PUNCTUATION = re.compile(r"\\(?=[!-/:-@\[-`{-~])")
_LINE_ENDING = re.compile(r"\r?\n|\r")
_REGEX_SPECIAL = frozenset("|\\{}()[]^$+*?.-")


@dataclass(frozen=True, slots=True)
class Info:
    """Characters surrounding the node being rendered."""

    before: str = "\n"
    after: str = "\n"


type NodeHandler = Callable[[Node, Node | None, SerializeState, Info], str]
type Guard = Callable[[str, str], str]


@dataclass(frozen=True, slots=True)
class UnsafePattern:
    """A character that must be escaped in some context.

    Attributes:
        character: The character to escape
        before: Regex the text before the character must end with
        after: Regex the text after the character must start with
        at_break: Only at the start of a line (after optional spaces/tabs)
        in_construct: Only when one of these constructs is on the stack
            (empty: everywhere)
        not_in_construct: Never when one of these constructs is on the stack

    """

    character: str
    before: str | None = None
    after: str | None = None
    at_break: bool = False
    in_construct: tuple[str, ...] = ()
    not_in_construct: tuple[str, ...] = ()

    def in_scope(self, stack: Sequence[str]) -> bool:
        if self.in_construct and not any(name in stack for name in self.in_construct):
            return False
        return not any(name in stack for name in self.not_in_construct)

    def compile(self) -> re.Pattern[str]:
        before = ("[\\r\\n][\\t ]*" if self.at_break else "") + (
            f"(?:{self.before})" if self.before else ""
        )
        character = ("\\" if self.character in _REGEX_SPECIAL else "") + self.character
        after = f"(?:{self.after})" if self.after else ""
        return re.compile((f"({before})" if before else "") + character + after)


@dataclass(frozen=True, slots=True)
class ToMarkdownExtension:
    """Handlers and escaping rules contributed to the renderer.

    Attributes:
        handlers: Node type -> render handler
        peek: Node type -> handler returning the node's first character,
            cheaper than a full render
        unsafe: Escaping rules added to the core rules
        guard: Node type -> ``guard(rendered, following)``, returning the next
            sibling's output with whatever would merge into ``rendered``
            escaped

    """

    handlers: Mapping[str, NodeHandler] = field(default_factory=dict)
    peek: Mapping[str, NodeHandler] = field(default_factory=dict)
    unsafe: tuple[UnsafePattern, ...] = ()
    guard: Mapping[str, Guard] = field(default_factory=dict)


def encode_character_reference(character: str) -> str:
    """``&#x..;`` reference for one character."""
    return f"&#x{ord(character):X};"


def escape_character(character: str) -> str:
    """Backslash for ASCII punctuation, a character reference otherwise."""
    if ASCII_PUNCTUATION.match(character):
        return "\\" + character
    return encode_character_reference(character)


def escape_backslashes(value: str, after: str) -> str:
    """Double every backslash that would otherwise escape what follows it."""
    whole = value + after
    positions = [
        match.start()
        for match in _BACKSLASH_BEFORE_PUNCTUATION.finditer(whole)
        if match.start() < len(value)
    ]
    if not positions:
        return value
    results: list[str] = []
    start = 0
    for position in positions:
        results.append(value[start:position])
        results.append("\\")
        start = position
    results.append(value[start:])
    return "".join(results)


def indent_lines(value: str, map_line: Callable[[str, int, bool], str]) -> str:
    """Apply ``map_line(line, index, blank)`` to every line of ``value``."""
    result: list[str] = []
    start = 0
    line = 0
    for match in _LINE_ENDING.finditer(value):
        chunk = value[start : match.start()]
        result.append(map_line(chunk, line, not chunk))
        result.append(match.group(0))
        start = match.end()
        line += 1
    chunk = value[start:]
    result.append(map_line(chunk, line, not chunk))
    return "".join(result)


class SerializeState:
    """Per-call rendering state.

    Attributes:
        stack: Names of the constructs currently being rendered
        quote: Quote character for attribute values

    """

    __slots__ = ("stack", "quote", "handlers", "peeks", "unsafe", "guards", "_compiled")

    def __init__(self, extensions: Iterable[ToMarkdownExtension] = (), quote: str = '"') -> None:
        self.stack: list[str] = []
        self.quote = quote
        self.handlers: dict[str, NodeHandler] = {}
        self.peeks: dict[str, NodeHandler] = {}
        self.unsafe: list[UnsafePattern] = []
        self.guards: dict[str, Guard] = {}
        for extension in (CORE_EXTENSION, *extensions):
            self.handlers.update(extension.handlers)
            self.peeks.update(extension.peek)
            self.unsafe.extend(extension.unsafe)
            self.guards.update(extension.guard)
        self._compiled: dict[UnsafePattern, re.Pattern[str]] = {}

    @contextmanager
    def enter(self, construct: str) -> Iterator[None]:
        """Mark ``construct`` as open while rendering inside it."""
        self.stack.append(construct)
        try:
            yield
        finally:
            self.stack.pop()

    def handle(self, node: Node, parent: Node | None, info: Info) -> str:
        handler = self.handlers.get(node.type)
        if handler is None:
            raise SerializeError(node.type)
        return handler(node, parent, self, info)

    def peek(self, node: Node, parent: Node | None) -> str:
        """First character ``node`` will render to."""
        handler = self.peeks.get(node.type)
        if handler is None:
            return self.handle(node, parent, Info(before="", after=""))[:1]
        return handler(node, parent, self, Info(before="", after=""))[:1]

    # =========================================================================
    # Containers
    # =========================================================================

    def container_phrasing(self, parent: Node, info: Info) -> str:
        """Render the inline children of ``parent``."""
        children: Sequence[Node] = getattr(parent, "children", ()) or ()
        results: list[str] = []
        before = info.before
        guarded: Guard | None = None

        for index, child in enumerate(children):
            if index + 1 < len(children):
                after = self.peek(children[index + 1], parent)
            else:
                after = info.after

            if child.type in self.guards and results and _ends_with_bare_colon(results[-1]):
                results[-1] = results[-1][:-1] + "\\:"

            result = self.handle(child, parent, Info(before=before, after=after))
            if guarded is not None and result and child.type not in self.guards:
                guarded_result = guarded(results[-1], result)
                if guarded_result != result:
                    logger.debug("Escaping %r after a %s", result[0], children[index - 1].type)
                    result = guarded_result
            guarded = self.guards.get(child.type)

            results.append(result)
            before = result[-1:]

        return "".join(results)

    def container_flow(self, parent: Node, info: Info) -> str:
        """Render the block children of ``parent``, one blank line apart."""
        children: Sequence[Node] = getattr(parent, "children", ()) or ()
        return "\n\n".join(
            self.handle(child, parent, Info(before="\n", after="\n")) for child in children
        )

    # =========================================================================
    # Escaping
    # =========================================================================

    def _pattern(self, pattern: UnsafePattern) -> re.Pattern[str]:
        compiled = self._compiled.get(pattern)
        if compiled is None:
            compiled = self._compiled[pattern] = pattern.compile()
        return compiled

    def safe(self, value: str, info: Info) -> str:
        """Escape ``value`` so it reads back as the same text.

        ``info.before`` and ``info.after`` are the characters around
        ``value`` in the output; rules may look at them but they are not
        part of the result.
        """
        whole = info.before + value + info.after
        # position -> (has before condition, has after condition)
        found: dict[int, tuple[bool, bool]] = {}

        for pattern in self.unsafe:
            if not pattern.in_scope(self.stack):
                continue
            expression = self._pattern(pattern)
            has_before = pattern.before is not None or pattern.at_break
            has_after = pattern.after is not None
            search_from = 0
            while (match := expression.search(whole, search_from)) is not None:
                position = match.start() + (len(match.group(1)) if has_before else 0)
                if position in found:
                    known_before, known_after = found[position]
                    found[position] = (known_before and has_before, known_after and has_after)
                else:
                    found[position] = (has_before, has_after)
                search_from = match.start() + 1

        positions = sorted(found)
        result: list[str] = []
        start = len(info.before)
        end = len(whole) - len(info.after)

        for index, position in enumerate(positions):
            if position < start or position >= end:
                continue
            _, has_after = found[position]
            # A condition on the next character no longer holds once that
            # character is escaped
            next_plain = (
                index + 1 < len(positions)
                and positions[index + 1] == position + 1
                and found[position + 1] == (False, False)
            )
            if position + 1 < end and next_plain and has_after:
                continue

            if start != position:
                result.append(escape_backslashes(whole[start:position], "\\"))
            start = position
            if ASCII_PUNCTUATION.match(whole[position]):
                result.append("\\")
            else:
                result.append(encode_character_reference(whole[position]))
                start += 1

        result.append(escape_backslashes(whole[start:end], info.after))
        return "".join(result)


def _ends_with_bare_colon(value: str) -> bool:
    """Whether ``value`` ends in a ``:`` that no backslash escapes."""
    if not value.endswith(":"):
        return False
    backslashes = len(value[:-1]) - len(value[:-1].rstrip("\\"))
    return backslashes % 2 == 0


# =============================================================================
# Core handlers
# =============================================================================


def _document(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    return state.container_flow(node, info)


def _paragraph(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    with state.enter("paragraph"), state.enter("phrasing"):
        return state.container_phrasing(node, info)


def _heading(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    sequence = "#" * max(min(6, cast(Heading, node).level), 1)
    with state.enter("heading_atx"), state.enter("phrasing"):
        value = state.container_phrasing(node, Info(before="# ", after="\n"))
    if value[:1] in (" ", "\t"):
        value = encode_character_reference(value[0]) + value[1:]
    return f"{sequence} {value}" if value else sequence


def _quote_line(line: str, index: int, blank: bool) -> str:
    return ">" + ("" if blank else " ") + line


def _block_quote(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    with state.enter("block_quote"):
        return indent_lines(state.container_flow(node, info), _quote_line)


def _text(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    return state.safe(cast(Text, node).content, info)


_PHRASING = ("phrasing",)
# Labels are phrasing too, though not always inside a paragraph
_INLINE = ("phrasing", "label")

CORE_UNSAFE: tuple[UnsafePattern, ...] = (
    UnsafePattern("\t", after="[\\r\\n]", in_construct=_PHRASING),
    UnsafePattern("\t", before="[\\r\\n]", in_construct=_PHRASING),
    UnsafePattern("\r", in_construct=("heading_atx",)),
    UnsafePattern("\n", in_construct=("heading_atx",)),
    UnsafePattern(" ", after="[\\r\\n]", in_construct=_PHRASING),
    UnsafePattern(" ", before="[\\r\\n]", in_construct=_PHRASING),
    UnsafePattern("!", after="\\[", in_construct=_INLINE),
    UnsafePattern("#", at_break=True),
    UnsafePattern("#", after="(?:[\\r\\n]|$)", in_construct=("heading_atx",)),
    UnsafePattern("&", after="[#A-Za-z]", in_construct=_INLINE),
    UnsafePattern("(", before="\\]", in_construct=_PHRASING),
    UnsafePattern(")", before="\\d+", at_break=True),
    UnsafePattern("*", after="(?:[ \\t\\r\\n*])", at_break=True),
    UnsafePattern("*", in_construct=_INLINE),
    UnsafePattern("+", after="(?:[ \\t\\r\\n])", at_break=True),
    UnsafePattern("-", after="(?:[ \\t\\r\\n-])", at_break=True),
    UnsafePattern(".", before="\\d+", after="(?:[ \\t\\r\\n]|$)", at_break=True),
    UnsafePattern("<", after="[!/?A-Za-z]", at_break=True),
    UnsafePattern("<", after="[!/?A-Za-z]", in_construct=_INLINE),
    UnsafePattern("=", at_break=True),
    UnsafePattern(">", at_break=True),
    UnsafePattern("[", at_break=True),
    UnsafePattern("[", in_construct=_INLINE),
    UnsafePattern("\\", after="[\\r\\n]", in_construct=_PHRASING),
    UnsafePattern("]", in_construct=("label",)),
    UnsafePattern("_", at_break=True),
    UnsafePattern("_", in_construct=_INLINE),
    UnsafePattern("`", at_break=True),
    UnsafePattern("`", in_construct=_INLINE),
    UnsafePattern("~", at_break=True),
)

CORE_EXTENSION = ToMarkdownExtension(
    handlers={
        Document.type: _document,
        Paragraph.type: _paragraph,
        Heading.type: _heading,
        BlockQuote.type: _block_quote,
        Text.type: _text,
    },
    unsafe=CORE_UNSAFE,
)


def to_markdown(
    node: Node,
    extensions: Iterable[ToMarkdownExtension] = (),
    quote: str = '"',
) -> str:
    """Render ``node`` (usually a Document) to Markdown.

    Non-empty output always ends with a line feed.

    Raises:
        SerializeError: If a node has no registered handler.
    """
    state = SerializeState(extensions, quote=quote)
    result = state.handle(node, None, Info())
    if result and result[-1] not in "\r\n":
        result += "\n"
    return result


class MarkdownRenderer:
    """Renderer object conforming to NodeRenderer.

    Usage:
        >>> MarkdownRenderer().render(Document(children=(Paragraph(children=(Text(content="a:b"),)),)))
        'a:b\\n'

    """

    __slots__ = ("_extensions", "_quote")

    def __init__(self, extensions: Iterable[ToMarkdownExtension] = (), quote: str = '"') -> None:
        self._extensions = tuple(extensions)
        self._quote = quote

    def render(self, node: Node) -> str:
        return to_markdown(node, self._extensions, quote=self._quote)


__all__ = [
    "CORE_EXTENSION",
    "CORE_UNSAFE",
    "Info",
    "MarkdownRenderer",
    "NodeHandler",
    "SerializeState",
    "ToMarkdownExtension",
    "UnsafePattern",
    "encode_character_reference",
    "escape_backslashes",
    "escape_character",
    "indent_lines",
    "to_markdown",
]
