"""Token kinds, tokens and events produced by the Colonnade lexer.

The lexer emits a flat, balanced stream of events: every token is entered,
then zero or more nested events follow, then the same token is exited. The
compiler turns that stream into a tree by reacting to the token kinds it has
handlers for and ignoring the rest.

Token kinds are a StrEnum, so handler tables may be keyed by the enum members
or by their plain string values ("directive_text_name", ...).

Thread Safety:
Token and Event are immutable and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum, auto
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from colonnade.location import SourceLocation


class TokenType(StrEnum):
    """Token kinds produced by the lexer.

    Organized by category:
    - Block structure (paragraphs, headings, block quotes)
    - Phrasing (data, escapes, references, line endings)
    - Directives, one family per form (text, leaf, container)

    """

    # Block structure
    PARAGRAPH = auto()
    ATX_HEADING = auto()  # # Heading
    ATX_HEADING_SEQUENCE = auto()  # the run of #
    ATX_HEADING_TEXT = auto()
    BLOCK_QUOTE = auto()  # > quoted

    # Phrasing
    DATA = auto()
    LINE_ENDING = auto()
    WHITESPACE = auto()
    CHARACTER_ESCAPE = auto()  # \:
    CHARACTER_ESCAPE_MARKER = auto()
    CHARACTER_ESCAPE_VALUE = auto()
    CHARACTER_REFERENCE = auto()  # &amp; &#123; &#x7B;

    # Text directive: :name[label]{attributes}
    DIRECTIVE_TEXT = auto()
    DIRECTIVE_TEXT_SEQUENCE = auto()
    DIRECTIVE_TEXT_NAME = auto()
    DIRECTIVE_TEXT_LABEL = auto()
    DIRECTIVE_TEXT_LABEL_MARKER = auto()
    DIRECTIVE_TEXT_LABEL_STRING = auto()
    DIRECTIVE_TEXT_ATTRIBUTES = auto()
    DIRECTIVE_TEXT_ATTRIBUTES_MARKER = auto()
    DIRECTIVE_TEXT_ATTRIBUTE = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_ID_MARKER = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_ID_VALUE = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_CLASS_MARKER = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_CLASS_VALUE = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_NAME = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_INITIALIZER_MARKER = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_VALUE_MARKER = auto()
    DIRECTIVE_TEXT_ATTRIBUTE_VALUE = auto()

    # Leaf directive: ::name[label]{attributes}
    DIRECTIVE_LEAF = auto()
    DIRECTIVE_LEAF_SEQUENCE = auto()
    DIRECTIVE_LEAF_NAME = auto()
    DIRECTIVE_LEAF_LABEL = auto()
    DIRECTIVE_LEAF_LABEL_MARKER = auto()
    DIRECTIVE_LEAF_LABEL_STRING = auto()
    DIRECTIVE_LEAF_ATTRIBUTES = auto()
    DIRECTIVE_LEAF_ATTRIBUTES_MARKER = auto()
    DIRECTIVE_LEAF_ATTRIBUTE = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_ID_MARKER = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_ID_VALUE = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_CLASS_MARKER = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_CLASS_VALUE = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_NAME = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_INITIALIZER_MARKER = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_VALUE_MARKER = auto()
    DIRECTIVE_LEAF_ATTRIBUTE_VALUE = auto()

    # Container directive: :::name[label]{attributes} ... :::
    DIRECTIVE_CONTAINER = auto()
    DIRECTIVE_CONTAINER_FENCE = auto()
    DIRECTIVE_CONTAINER_SEQUENCE = auto()
    DIRECTIVE_CONTAINER_NAME = auto()
    DIRECTIVE_CONTAINER_LABEL = auto()
    DIRECTIVE_CONTAINER_LABEL_MARKER = auto()
    DIRECTIVE_CONTAINER_LABEL_STRING = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTES = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTES_MARKER = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_ID_MARKER = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_ID_VALUE = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_CLASS_MARKER = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_CLASS_VALUE = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_NAME = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_INITIALIZER_MARKER = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_VALUE_MARKER = auto()
    DIRECTIVE_CONTAINER_ATTRIBUTE_VALUE = auto()
    DIRECTIVE_CONTAINER_CONTENT = auto()


@dataclass(frozen=True, slots=True)
class DirectiveTokens:
    """The token kinds used by one directive form.

    The three forms share one grammar for names, labels and attributes and
    differ only in which kinds they emit, so the lexer and the reader look
    kinds up through one of TEXT_TOKENS, LEAF_TOKENS or CONTAINER_TOKENS.

    """

    directive: TokenType
    sequence: TokenType
    name: TokenType
    label: TokenType
    label_marker: TokenType
    label_string: TokenType
    attributes: TokenType
    attributes_marker: TokenType
    attribute: TokenType
    id_marker: TokenType
    id_value: TokenType
    class_marker: TokenType
    class_value: TokenType
    attribute_name: TokenType
    initializer_marker: TokenType
    value_marker: TokenType
    attribute_value: TokenType


def _directive_tokens(prefix: str) -> DirectiveTokens:
    def kind(suffix: str = "") -> TokenType:
        return TokenType[prefix + suffix]

    return DirectiveTokens(
        directive=kind(),
        sequence=kind("_SEQUENCE"),
        name=kind("_NAME"),
        label=kind("_LABEL"),
        label_marker=kind("_LABEL_MARKER"),
        label_string=kind("_LABEL_STRING"),
        attributes=kind("_ATTRIBUTES"),
        attributes_marker=kind("_ATTRIBUTES_MARKER"),
        attribute=kind("_ATTRIBUTE"),
        id_marker=kind("_ATTRIBUTE_ID_MARKER"),
        id_value=kind("_ATTRIBUTE_ID_VALUE"),
        class_marker=kind("_ATTRIBUTE_CLASS_MARKER"),
        class_value=kind("_ATTRIBUTE_CLASS_VALUE"),
        attribute_name=kind("_ATTRIBUTE_NAME"),
        initializer_marker=kind("_ATTRIBUTE_INITIALIZER_MARKER"),
        value_marker=kind("_ATTRIBUTE_VALUE_MARKER"),
        attribute_value=kind("_ATTRIBUTE_VALUE"),
    )


TEXT_TOKENS = _directive_tokens("DIRECTIVE_TEXT")
LEAF_TOKENS = _directive_tokens("DIRECTIVE_LEAF")
CONTAINER_TOKENS = _directive_tokens("DIRECTIVE_CONTAINER")


@dataclass(frozen=True, slots=True)
class Token:
    """A span of source recognized by the lexer.

    Attributes:
        type: The token kind
        value: The logical text covered by the token. For text inside block
            quotes the ``>`` prefixes are removed, so ``value`` can differ
            from ``source[start:end]``.
        _lineno: Start line number (1-indexed)
        _col: Start column (1-indexed)
        _start_offset: Absolute start position in source
        _end_offset: Absolute end position in source
        _end_lineno: End line number
        _end_col: End column
        _source_file: Optional source file path

    Performance:
        SourceLocation is created lazily on first access to `.location`.

    """

    type: TokenType
    value: str
    _lineno: int
    _col: int
    _start_offset: int
    _end_offset: int
    _end_lineno: int | None = None
    _end_col: int | None = None
    _source_file: str | None = None
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @property
    def location(self) -> SourceLocation:
        """Get source location (lazily created and cached)."""
        if self._location_cache is not None:
            return self._location_cache

        from colonnade.location import SourceLocation

        loc = SourceLocation(
            lineno=self._lineno,
            col_offset=self._col,
            offset=self._start_offset,
            end_offset=self._end_offset,
            end_lineno=self._end_lineno,
            end_col_offset=self._end_col,
            source_file=self._source_file,
        )
        object.__setattr__(self, "_location_cache", loc)
        return loc

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self._lineno}:{self._col})"

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self._lineno

    @property
    def col(self) -> int:
        """Column offset (convenience accessor)."""
        return self._col


class EventKind(Enum):
    """Whether an event opens or closes its token."""

    ENTER = auto()
    EXIT = auto()


class Event(NamedTuple):
    """One step of the event stream: ``(kind, token)``."""

    kind: EventKind
    token: Token
