"""Inline scanner mixin.

Phrasing content is scanned one character at a time. Plain characters
coalesce into DATA tokens; the scanner stops on:

- ``\\n``: a LINE_ENDING
- ``\\`` before ASCII punctuation: a CHARACTER_ESCAPE
- ``&`` starting a known reference: a CHARACTER_REFERENCE
- ``:`` not preceded by a literal ``:``: a possible text directive

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from colonnade.entities import REFERENCE, decode_entity
from colonnade.tokens import TEXT_TOKENS, Event, Token, TokenType

if TYPE_CHECKING:
    from colonnade.lexer.lines import Run

ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


class InlineScannerMixin:
    """Mixin providing phrasing scanning over a Run."""

    _directives: bool

    def _run_token(self, token_type: TokenType, run: Run, start: int, end: int) -> Token:
        """Create a token over logical indices of ``run``. Implemented by Lexer."""
        raise NotImplementedError

    def _wrap(self, token: Token, inner: list[Event] | None = None) -> list[Event]:
        """Enter, replay, exit. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_inline(self, run: Run, start: int, end: int) -> list[Event]:
        """Scan ``run.text[start:end]`` into phrasing events."""
        text = run.text
        events: list[Event] = []
        data_start: int | None = None
        after_colon = False
        cursor = start

        def flush(stop: int) -> None:
            nonlocal data_start
            if data_start is not None and stop > data_start:
                events.extend(self._wrap(self._run_token(TokenType.DATA, run, data_start, stop)))
            data_start = None

        while cursor < end:
            char = text[cursor]

            if char == "\n":
                flush(cursor)
                events.extend(self._wrap(self._run_token(TokenType.LINE_ENDING, run, cursor, cursor + 1)))
                after_colon = False
                cursor += 1
                continue

            if char == "\\" and cursor + 1 < end and text[cursor + 1] in ASCII_PUNCTUATION:
                flush(cursor)
                inner = self._wrap(self._run_token(TokenType.CHARACTER_ESCAPE_MARKER, run, cursor, cursor + 1))
                inner.extend(
                    self._wrap(self._run_token(TokenType.CHARACTER_ESCAPE_VALUE, run, cursor + 1, cursor + 2))
                )
                events.extend(self._wrap(self._run_token(TokenType.CHARACTER_ESCAPE, run, cursor, cursor + 2), inner))
                after_colon = False
                cursor += 2
                continue

            if char == "&":
                match = REFERENCE.match(text, cursor, end)
                if match is not None and decode_entity(match.group(1)) is not None:
                    flush(cursor)
                    events.extend(
                        self._wrap(self._run_token(TokenType.CHARACTER_REFERENCE, run, cursor, match.end()))
                    )
                    after_colon = False
                    cursor = match.end()
                    continue

            if char == ":" and self._directives and not after_colon:
                directive = self._scan_text_directive(run, cursor, end)
                if directive is not None:
                    flush(cursor)
                    directive_events, cursor = directive
                    events.extend(directive_events)
                    continue

            if data_start is None:
                data_start = cursor
            after_colon = char == ":"
            cursor += 1

        flush(end)
        return events

    def _scan_text_directive(self, run: Run, pos: int, end: int) -> tuple[list[Event], int] | None:
        """Try ``:name[label]{attributes}`` at ``pos``."""
        tail = self._scan_directive_tail(run, pos + 1, end, TEXT_TOKENS, allow_eol=True)
        if tail is None:
            return None
        tail_events, stop = tail
        inner = self._wrap(self._run_token(TEXT_TOKENS.sequence, run, pos, pos + 1))
        inner.extend(tail_events)
        return self._wrap(self._run_token(TEXT_TOKENS.directive, run, pos, stop), inner), stop
