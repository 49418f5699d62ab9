"""Tests for error types and the paths that raise them."""

import pytest

from colonnade import ColonnadeError, ConfigError, ParseError, SerializeError, compile_events, serialize
from colonnade.lexer import Lexer
from colonnade.nodes import Node
from colonnade.tokens import Event, EventKind, Token, TokenType


class TestParseError:
    def test_message_with_location(self) -> None:
        error = ParseError("bad", lineno=3, col_offset=5, source_file="doc.md")
        assert str(error) == "doc.md:3:5 bad"
        assert (error.lineno, error.col_offset, error.source_file) == (3, 5, "doc.md")

    def test_message_without_location(self) -> None:
        assert str(ParseError("bad")) == "bad"

    def test_line_only(self) -> None:
        assert str(ParseError("bad", lineno=2)) == "2 bad"


class TestHierarchy:
    def test_all_derive_from_base(self) -> None:
        for cls in (ParseError, SerializeError, ConfigError):
            assert issubclass(cls, ColonnadeError)

    def test_config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)


def _token(kind: TokenType) -> Token:
    return Token(type=kind, value="x", _lineno=1, _col=1, _start_offset=0, _end_offset=1)


class TestUnbalancedEvents:
    def test_exit_without_enter(self) -> None:
        token = _token(TokenType.PARAGRAPH)
        with pytest.raises(ParseError, match="Unexpected exit"):
            compile_events([Event(EventKind.EXIT, token)])

    def test_unclosed_token(self) -> None:
        token = _token(TokenType.PARAGRAPH)
        with pytest.raises(ParseError, match="Unclosed"):
            compile_events([Event(EventKind.ENTER, token)])

    def test_crossed_tokens(self) -> None:
        outer = _token(TokenType.PARAGRAPH)
        inner = _token(TokenType.DATA)
        events = [
            Event(EventKind.ENTER, outer),
            Event(EventKind.ENTER, inner),
            Event(EventKind.EXIT, outer),
            Event(EventKind.EXIT, inner),
        ]
        with pytest.raises(ParseError):
            compile_events(events)

    def test_lexer_output_is_balanced(self) -> None:
        compile_events(Lexer(":::a[b]{c}\n> d\n:::").tokenize())


class _Unknown(Node):
    pass


class TestSerializeError:
    def test_unknown_node_type(self) -> None:
        with pytest.raises(SerializeError) as exc_info:
            serialize(_Unknown())
        assert exc_info.value.node_type == "node"
        assert "node" in str(exc_info.value)

    def test_custom_message(self) -> None:
        assert str(SerializeError("x", "custom")) == "custom"
