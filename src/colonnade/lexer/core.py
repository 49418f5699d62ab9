"""Line-window lexer producing a balanced event stream.

The source is split into lines once. Block scanning walks those lines,
classifies each one, and recurses into block quotes and container
directives with the container prefix stripped. Phrasing content (paragraph
lines, heading text, labels) is joined into a Run: the logical text plus a
table mapping it back to source offsets, so tokens inside a block quote
report real positions while their ``value`` holds the text without ``>``.

No regex in the block hot path; every scan advances by at least one line or
one character, so tokenizing is linear in the size of the input.

Thread Safety:
Lexer instances are single-use. Create one per source string.

"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator

from colonnade.lexer.classifiers import DirectiveClassifierMixin
from colonnade.lexer.lines import Line, Run
from colonnade.lexer.scanners import BlockScannerMixin, InlineScannerMixin
from colonnade.tokens import Event, EventKind, Token, TokenType
from colonnade.utils.logger import get_logger

logger = get_logger(__name__)


class Lexer(
    # Classifiers (pure recognition of directive parts)
    DirectiveClassifierMixin,
    # Scanners (block and phrasing)
    BlockScannerMixin,
    InlineScannerMixin,
):
    """Tokenize Markdown with directives into enter/exit events.

    Usage:
        >>> for kind, token in Lexer("::a[b]").tokenize():
        ...     print(kind.name, token.type.name, repr(token.value))
        ENTER DIRECTIVE_LEAF '::a[b]'
        ENTER DIRECTIVE_LEAF_SEQUENCE '::'
        EXIT DIRECTIVE_LEAF_SEQUENCE '::'
        ...

    Thread Safety:
        Lexer instances are single-use. All state is instance-local.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_directives",
        "_line_starts",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        directives: bool = True,
    ) -> None:
        """Initialize lexer with source text.

        Args:
            source: Markdown source text
            source_file: Optional source file path for locations
            directives: Recognize directive syntax
        """
        self._source = source
        self._source_file = source_file
        self._directives = directives
        self._line_starts: list[int] = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    def tokenize(self) -> Iterator[Event]:
        """Tokenize the whole source.

        Yields:
            Balanced enter/exit events, block by block.
        """
        events, _ = self._scan_blocks(self._split_lines())
        logger.debug("Tokenized %d characters into %d events", len(self._source), len(events))
        yield from events

    # =========================================================================
    # Lines
    # =========================================================================

    def _split_lines(self) -> list[Line]:
        lines: list[Line] = []
        for index, start in enumerate(self._line_starts):
            if index + 1 < len(self._line_starts):
                text = self._source[start : self._line_starts[index + 1] - 1]
            else:
                text = self._source[start:]
            lines.append(Line(text.removesuffix("\r"), start))
        return lines

    @staticmethod
    def _calc_indent(text: str) -> tuple[int, int]:
        """Calculate indent width and content start.

        Spaces count as 1, tabs expand to the next multiple of 4.

        Returns:
            (indent_width, content_start_index)
        """
        indent = 0
        pos = 0
        while pos < len(text):
            char = text[pos]
            if char == " ":
                indent += 1
            elif char == "\t":
                indent += 4 - (indent % 4)
            else:
                break
            pos += 1
        return indent, pos

    # =========================================================================
    # Tokens and events
    # =========================================================================

    def _point(self, offset: int) -> tuple[int, int]:
        """Line and column (both 1-indexed) of a source offset."""
        lineno = bisect_right(self._line_starts, offset)
        return lineno, offset - self._line_starts[lineno - 1] + 1

    def _make_token(self, token_type: TokenType, value: str, start: int, end: int) -> Token:
        """Create a token spanning source offsets ``start`` to ``end``."""
        lineno, col = self._point(start)
        end_lineno, end_col = self._point(end)
        return Token(
            type=token_type,
            value=value,
            _lineno=lineno,
            _col=col,
            _start_offset=start,
            _end_offset=end,
            _end_lineno=end_lineno,
            _end_col=end_col,
            _source_file=self._source_file,
        )

    def _block_token(self, token_type: TokenType, start: int, end: int) -> Token:
        """Token whose value is the raw source slice."""
        return self._make_token(token_type, self._source[start:end], start, end)

    def _run_token(self, token_type: TokenType, run: Run, start: int, end: int) -> Token:
        """Token over logical indices of ``run``."""
        return self._make_token(
            token_type,
            run.text[start:end],
            run.source_offset(start),
            run.source_offset(end),
        )

    @staticmethod
    def _wrap(token: Token, inner: list[Event] | None = None) -> list[Event]:
        """Enter ``token``, replay ``inner``, exit ``token``."""
        return [Event(EventKind.ENTER, token), *(inner or ()), Event(EventKind.EXIT, token)]
