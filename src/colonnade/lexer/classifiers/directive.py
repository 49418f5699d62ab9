"""Directive classifier mixin.

Recognizes the parts every directive form shares, after its colon
sequence:

    name[label]{#id .class key="value"}

The three forms differ only in which token kinds they emit and in whether
line endings may appear inside the label and attributes (text directives
only). A part that does not parse is left out and the directive ends before
it; a missing or malformed name means there is no directive at all.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from colonnade.tokens import DirectiveTokens, Event, Token, TokenType
from colonnade.utils.logger import get_logger

if TYPE_CHECKING:
    from colonnade.lexer.lines import Run

logger = get_logger(__name__)

_SPACE = frozenset(" \t")
# Characters that may never appear in a shortcut or unquoted value
_INVALID_BARE = frozenset("\"'<=>`")
# Characters that end a #id or .class shortcut
_SHORTCUT_END = frozenset("\t\n\r \"#'.<=>`}")
_NAME_START = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz:_")
_NAME_CHARS = _NAME_START | frozenset("0123456789.-")


class DirectiveClassifierMixin:
    """Mixin providing recognition of directive names, labels and attributes."""

    def _run_token(self, token_type: TokenType, run: Run, start: int, end: int) -> Token:
        """Create a token over logical indices of ``run``. Implemented by Lexer."""
        raise NotImplementedError

    def _wrap(self, token: Token, inner: list[Event] | None = None) -> list[Event]:
        """Enter, replay, exit. Implemented by Lexer."""
        raise NotImplementedError

    @staticmethod
    def _scan_name(text: str, pos: int, end: int) -> int | None:
        """Return the end of a directive name starting at ``pos``.

        A name is an ASCII letter followed by letters, digits, ``-`` and
        ``_``, and may not end in ``-`` or ``_``.
        """
        if pos >= end or not (text[pos].isascii() and text[pos].isalpha()):
            return None
        cursor = pos + 1
        while cursor < end and text[cursor].isascii() and (text[cursor].isalnum() or text[cursor] in "-_"):
            cursor += 1
        if text[cursor - 1] in "-_":
            return None
        return cursor

    def _scan_directive_tail(
        self,
        run: Run,
        pos: int,
        end: int,
        kinds: DirectiveTokens,
        allow_eol: bool,
    ) -> tuple[list[Event], int] | None:
        """Scan ``name[label]{attributes}`` starting right after the colons.

        Returns:
            (events, end_index), or None when no valid name starts at ``pos``.
        """
        name_end = self._scan_name(run.text, pos, end)
        if name_end is None:
            return None

        events = self._wrap(self._run_token(kinds.name, run, pos, name_end))
        cursor = name_end

        if cursor < end and run.text[cursor] == "[":
            label = self._scan_label(run, cursor, end, kinds, allow_eol)
            if label is None:
                logger.debug("Unterminated directive label at index %d", cursor)
            else:
                label_events, cursor = label
                events.extend(label_events)

        if cursor < end and run.text[cursor] == "{":
            attributes = self._scan_attributes(run, cursor, end, kinds, allow_eol)
            if attributes is None:
                logger.debug("Malformed directive attributes at index %d", cursor)
            else:
                attribute_events, cursor = attributes
                events.extend(attribute_events)

        return events, cursor

    def _scan_label(
        self,
        run: Run,
        pos: int,
        end: int,
        kinds: DirectiveTokens,
        allow_eol: bool,
    ) -> tuple[list[Event], int] | None:
        """Scan a bracketed label; brackets nest and ``\\[``/``\\]`` are literal."""
        text = run.text
        depth = 0
        cursor = pos + 1
        while cursor < end:
            char = text[cursor]
            if char == "\\" and cursor + 1 < end and text[cursor + 1] in "[\\]":
                cursor += 2
                continue
            if char == "\n" and not allow_eol:
                return None
            if char == "[":
                depth += 1
            elif char == "]":
                if depth == 0:
                    break
                depth -= 1
            cursor += 1
        else:
            return None

        inner = self._wrap(self._run_token(kinds.label_marker, run, pos, pos + 1))
        if cursor > pos + 1:
            string = self._run_token(kinds.label_string, run, pos + 1, cursor)
            inner.extend(self._wrap(string, self._scan_inline(run, pos + 1, cursor)))
        inner.extend(self._wrap(self._run_token(kinds.label_marker, run, cursor, cursor + 1)))
        return self._wrap(self._run_token(kinds.label, run, pos, cursor + 1), inner), cursor + 1

    def _scan_space(
        self, run: Run, pos: int, end: int, allow_eol: bool, sink: list[Event]
    ) -> int:
        """Consume whitespace (and line endings when allowed) into ``sink``."""
        text = run.text
        cursor = pos
        while cursor < end:
            if text[cursor] in _SPACE:
                start = cursor
                while cursor < end and text[cursor] in _SPACE:
                    cursor += 1
                sink.extend(self._wrap(self._run_token(TokenType.WHITESPACE, run, start, cursor)))
            elif text[cursor] == "\n" and allow_eol:
                sink.extend(self._wrap(self._run_token(TokenType.LINE_ENDING, run, cursor, cursor + 1)))
                cursor += 1
            else:
                break
        return cursor

    def _scan_attributes(
        self,
        run: Run,
        pos: int,
        end: int,
        kinds: DirectiveTokens,
        allow_eol: bool,
    ) -> tuple[list[Event], int] | None:
        """Scan a braced attribute list.

        Grammar (whitespace separates entries and may surround ``=``):
            #id  .class  name  name=value  name="value"  name='value'
        """
        text = run.text
        inner = self._wrap(self._run_token(kinds.attributes_marker, run, pos, pos + 1))
        cursor = pos + 1

        while True:
            cursor = self._scan_space(run, cursor, end, allow_eol, inner)
            if cursor >= end:
                return None
            char = text[cursor]

            if char == "}":
                inner.extend(self._wrap(self._run_token(kinds.attributes_marker, run, cursor, cursor + 1)))
                return self._wrap(self._run_token(kinds.attributes, run, pos, cursor + 1), inner), cursor + 1

            if char in "#.":
                marker, value = (
                    (kinds.id_marker, kinds.id_value)
                    if char == "#"
                    else (kinds.class_marker, kinds.class_value)
                )
                stop = cursor + 1
                while stop < end and text[stop] not in _SHORTCUT_END:
                    stop += 1
                if stop == cursor + 1 or (stop < end and text[stop] in _INVALID_BARE):
                    return None
                parts = self._wrap(self._run_token(marker, run, cursor, cursor + 1))
                parts.extend(self._wrap(self._run_token(value, run, cursor + 1, stop)))
                inner.extend(self._wrap(self._run_token(kinds.attribute, run, cursor, stop), parts))
                cursor = stop
                continue

            if char in _NAME_START:
                scanned = self._scan_attribute(run, cursor, end, kinds, allow_eol)
                if scanned is None:
                    return None
                events, cursor = scanned
                inner.extend(events)
                continue

            return None

    def _scan_attribute(
        self,
        run: Run,
        pos: int,
        end: int,
        kinds: DirectiveTokens,
        allow_eol: bool,
    ) -> tuple[list[Event], int] | None:
        """Scan ``name``, optionally followed by ``=`` and a value."""
        text = run.text
        name_end = pos + 1
        while name_end < end and text[name_end] in _NAME_CHARS:
            name_end += 1
        parts = self._wrap(self._run_token(kinds.attribute_name, run, pos, name_end))

        # Look past whitespace for an initializer without committing to it
        lookahead: list[Event] = []
        cursor = self._scan_space(run, name_end, end, allow_eol, lookahead)
        if cursor >= end or text[cursor] != "=":
            return self._wrap(self._run_token(kinds.attribute, run, pos, name_end), parts), name_end

        parts.extend(lookahead)
        parts.extend(self._wrap(self._run_token(kinds.initializer_marker, run, cursor, cursor + 1)))
        cursor = self._scan_space(run, cursor + 1, end, allow_eol, parts)
        if cursor >= end or text[cursor] in "<=>`}":
            return None

        quote = text[cursor]
        if quote in "\"'":
            close = cursor + 1
            while close < end and text[close] != quote:
                if text[close] == "\n" and not allow_eol:
                    return None
                close += 1
            if close >= end:
                return None
            parts.extend(self._wrap(self._run_token(kinds.value_marker, run, cursor, cursor + 1)))
            if close > cursor + 1:
                parts.extend(self._wrap(self._run_token(kinds.attribute_value, run, cursor + 1, close)))
            parts.extend(self._wrap(self._run_token(kinds.value_marker, run, close, close + 1)))
            stop = close + 1
            if stop < end and text[stop] not in " \t\n}":
                return None
        else:
            stop = cursor
            while stop < end and text[stop] not in " \t\n\r}":
                if text[stop] in _INVALID_BARE:
                    return None
                stop += 1
            parts.extend(self._wrap(self._run_token(kinds.attribute_value, run, cursor, stop)))

        return self._wrap(self._run_token(kinds.attribute, run, pos, stop), parts), stop
