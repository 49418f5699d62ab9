"""Block scanner mixin.

Scans lines for block-level structure using a window approach:
1. Take the next line (window)
2. Classify its content (blank, quote, heading, directive, paragraph)
3. Emit events and advance past every line the block used

Block quotes and container directives are scanned recursively over their
lines with the container prefix removed. A container's content ends at a
closing fence of at least as many colons as its opening, or at the end of
the enclosing block.

"""

from __future__ import annotations

import re

from colonnade.lexer.lines import Line, Run
from colonnade.tokens import CONTAINER_TOKENS, LEAF_TOKENS, Event, Token, TokenType
from colonnade.utils.logger import get_logger

logger = get_logger(__name__)

# Optional closing sequence of an ATX heading: "# Title ##"
_CLOSING_SEQUENCE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")


class BlockScannerMixin:
    """Mixin providing block scanning over lists of lines."""

    _directives: bool

    def _calc_indent(self, text: str) -> tuple[int, int]:
        """Calculate indent level and content start position."""
        raise NotImplementedError

    def _block_token(self, token_type: TokenType, start: int, end: int) -> Token:
        """Token whose value is the raw source slice. Implemented by Lexer."""
        raise NotImplementedError

    def _run_token(self, token_type: TokenType, run: Run, start: int, end: int) -> Token:
        """Token over logical indices of ``run``. Implemented by Lexer."""
        raise NotImplementedError

    def _wrap(self, token: Token, inner: list[Event] | None = None) -> list[Event]:
        """Enter, replay, exit. Implemented by Lexer."""
        raise NotImplementedError

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _scan_blocks(self, lines: list[Line], close: int = 0) -> tuple[list[Event], int]:
        """Scan ``lines`` into block events.

        Args:
            lines: Lines to scan, container prefixes already removed
            close: Inside a container directive, the length of its opening
                sequence. Scanning stops at a closing fence at least that long.

        Returns:
            (events, index of the first line not consumed). The index points
            at the closing fence when one stopped the scan.
        """
        events: list[Event] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            indent, content_start = self._calc_indent(line.text)
            content = line.text[content_start:]

            if not content.strip(" \t"):
                index += 1
                continue

            if indent < 4:
                if close and self._is_closing_fence(content, close):
                    return events, index

                if content.startswith(">"):
                    block, index = self._scan_block_quote(lines, index)
                    events.extend(block)
                    continue

                heading = self._try_heading(line.strip_prefix(content_start))
                if heading is not None:
                    events.extend(heading)
                    index += 1
                    continue

                if self._directives and content.startswith("::"):
                    directive = self._try_block_directive(lines, index, close)
                    if directive is not None:
                        block, index = directive
                        events.extend(block)
                        continue

            block, index = self._scan_paragraph(lines, index, close)
            events.extend(block)

        return events, index

    @staticmethod
    def _is_closing_fence(content: str, size: int) -> bool:
        count = len(content) - len(content.lstrip(":"))
        return count >= size and not content[count:].strip(" \t")

    def _interrupts(self, line: Line, close: int) -> bool:
        """Whether ``line`` ends a paragraph that precedes it."""
        indent, content_start = self._calc_indent(line.text)
        content = line.text[content_start:]
        if not content.strip(" \t"):
            return True
        if indent >= 4:
            return False
        if content.startswith(">"):
            return True
        if self._try_heading(line.strip_prefix(content_start)) is not None:
            return True
        if self._directives and content.startswith("::"):
            if close and self._is_closing_fence(content, close):
                return True
            return self._classify_block_directive(line.strip_prefix(content_start)) is not None
        return False

    # =========================================================================
    # Paragraphs and headings
    # =========================================================================

    def _scan_paragraph(self, lines: list[Line], index: int, close: int) -> tuple[list[Event], int]:
        stop = index + 1
        while stop < len(lines) and not self._interrupts(lines[stop], close):
            stop += 1

        stripped: list[Line] = []
        for line in lines[index:stop]:
            _, content_start = self._calc_indent(line.text)
            line = line.strip_prefix(content_start)
            stripped.append(Line(line.text.rstrip(" \t"), line.offset))

        run = Run.from_lines(stripped)
        token = self._run_token(TokenType.PARAGRAPH, run, 0, len(run.text))
        return self._wrap(token, self._scan_inline(run, 0, len(run.text))), stop

    def _try_heading(self, line: Line) -> list[Event] | None:
        """Classify ``# text`` (1-6 hashes followed by space or end of line)."""
        text = line.text
        level = len(text) - len(text.lstrip("#"))
        if not 1 <= level <= 6 or (len(text) > level and text[level] not in " \t"):
            return None

        run = Run.from_lines([line])
        inner = self._wrap(self._run_token(TokenType.ATX_HEADING_SEQUENCE, run, 0, level))

        body = text[level:].rstrip(" \t")
        closing = _CLOSING_SEQUENCE.search(body)
        if closing is not None:
            body = body[: closing.start()]
        start = level + len(body) - len(body.lstrip(" \t"))
        end = level + len(body)
        if end > start:
            heading_text = self._run_token(TokenType.ATX_HEADING_TEXT, run, start, end)
            inner.extend(self._wrap(heading_text, self._scan_inline(run, start, end)))

        token = self._run_token(TokenType.ATX_HEADING, run, 0, len(text))
        return self._wrap(token, inner)

    # =========================================================================
    # Block quotes
    # =========================================================================

    def _scan_block_quote(self, lines: list[Line], index: int) -> tuple[list[Event], int]:
        """Consecutive ``>`` lines, scanned again with the marker removed."""
        inner_lines: list[Line] = []
        stop = index
        while stop < len(lines):
            indent, content_start = self._calc_indent(lines[stop].text)
            text = lines[stop].text
            if indent >= 4 or not text[content_start:].startswith(">"):
                break
            skip = content_start + 1
            if skip < len(text) and text[skip] in " \t":
                skip += 1
            inner_lines.append(lines[stop].strip_prefix(skip))
            stop += 1

        inner, _ = self._scan_blocks(inner_lines)
        first, last = lines[index], lines[stop - 1]
        _, first_start = self._calc_indent(first.text)
        token = self._block_token(
            TokenType.BLOCK_QUOTE,
            first.offset + first_start,
            last.offset + len(last.text),
        )
        return self._wrap(token, inner), stop

    # =========================================================================
    # Leaf and container directives
    # =========================================================================

    def _classify_block_directive(self, line: Line) -> tuple[int, list[Event]] | None:
        """Recognize the first line of a leaf or container directive.

        Args:
            line: The line with its indentation removed

        Returns:
            (colon count, events for the line), or None when the line is not
            a directive. A count of 2 means a leaf directive.
        """
        text = line.text
        count = len(text) - len(text.lstrip(":"))
        if count < 2:
            return None
        kinds = LEAF_TOKENS if count == 2 else CONTAINER_TOKENS

        run = Run.from_lines([line])
        tail = self._scan_directive_tail(run, count, len(text), kinds, allow_eol=False)
        if tail is None:
            return None
        tail_events, stop = tail
        if text[stop:].strip(" \t"):
            return None

        events = self._wrap(self._run_token(kinds.sequence, run, 0, count))
        events.extend(tail_events)
        if count == 2:
            return count, self._wrap(self._run_token(kinds.directive, run, 0, len(text)), events)
        return count, self._wrap(self._run_token(TokenType.DIRECTIVE_CONTAINER_FENCE, run, 0, len(text)), events)

    def _try_block_directive(
        self, lines: list[Line], index: int, close: int
    ) -> tuple[list[Event], int] | None:
        line = lines[index]
        indent, content_start = self._calc_indent(line.text)
        classified = self._classify_block_directive(line.strip_prefix(content_start))
        if classified is None:
            return None
        count, events = classified
        if count == 2:
            return events, index + 1

        # Content lines lose up to as much indentation as the opening fence had
        inner_lines: list[Line] = []
        for content_line in lines[index + 1 :]:
            _, strip = self._calc_indent(content_line.text[:content_start])
            inner_lines.append(content_line.strip_prefix(strip))

        content, consumed = self._scan_blocks(inner_lines, close=count)
        start = line.offset + content_start
        end = line.offset + len(line.text)
        if content:
            first_inner = inner_lines[0]
            last_inner = inner_lines[consumed - 1]
            content_token = self._block_token(
                TokenType.DIRECTIVE_CONTAINER_CONTENT,
                first_inner.offset,
                last_inner.offset + len(last_inner.text),
            )
            events.extend(self._wrap(content_token, content))
            end = content_token._end_offset

        stop = index + 1 + consumed
        if consumed < len(inner_lines):
            fence_line = inner_lines[consumed]
            _, fence_start = self._calc_indent(fence_line.text)
            fence_run = Run.from_lines([fence_line.strip_prefix(fence_start)])
            fence_size = len(fence_run.text) - len(fence_run.text.lstrip(":"))
            sequence = self._wrap(self._run_token(CONTAINER_TOKENS.sequence, fence_run, 0, fence_size))
            fence = self._run_token(TokenType.DIRECTIVE_CONTAINER_FENCE, fence_run, 0, len(fence_run.text))
            events.extend(self._wrap(fence, sequence))
            end = fence._end_offset
            stop += 1
        else:
            logger.debug("Container directive at offset %d is not closed", start)

        token = self._block_token(TokenType.DIRECTIVE_CONTAINER, start, end)
        return self._wrap(token, events), stop
