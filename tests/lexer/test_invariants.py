"""Property-based tests for lexer invariants using Hypothesis.

These tests verify that certain properties always hold regardless
of the input, helping catch edge cases that example-based tests miss.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from colonnade import parse
from colonnade.lexer import Lexer
from colonnade.tokens import EventKind

# Characters with meaning to the block and directive scanners
_SYNTAX = st.text(alphabet=":[]{}#.=\"'>\\& \t\nab\r", max_size=200)


class TestBasicInvariants:
    """Test basic invariants that should always hold."""

    @given(st.text(max_size=500))
    @settings(max_examples=200)
    def test_events_are_balanced(self, source: str) -> None:
        """Every exit closes the most recently entered token."""
        stack = []
        for kind, token in Lexer(source).tokenize():
            if kind is EventKind.ENTER:
                stack.append(token)
            else:
                assert stack, "Exit without enter"
                assert stack.pop() is token
        assert stack == []

    @given(_SYNTAX)
    @settings(max_examples=300)
    def test_syntax_heavy_input_is_balanced(self, source: str) -> None:
        depth = 0
        for kind, _ in Lexer(source).tokenize():
            depth += 1 if kind is EventKind.ENTER else -1
            assert depth >= 0
        assert depth == 0

    @given(st.text(max_size=500))
    @settings(max_examples=100)
    def test_positions_valid(self, source: str) -> None:
        """Lines and columns start at 1; offsets stay inside the source."""
        for _, token in Lexer(source).tokenize():
            location = token.location
            assert location.lineno >= 1
            assert location.col_offset >= 1
            assert 0 <= location.offset <= location.end_offset <= len(source)

    @given(_SYNTAX)
    @settings(max_examples=200)
    def test_parse_never_fails(self, source: str) -> None:
        parse(source)
        parse(source, directives=False)


class TestDeterminism:
    @given(_SYNTAX)
    @settings(max_examples=100)
    def test_same_input_same_tree(self, source: str) -> None:
        assert parse(source) == parse(source)

    @given(st.text(alphabet="ab \n", max_size=100))
    @settings(max_examples=100)
    def test_plain_text_unaffected_by_directive_setting(self, source: str) -> None:
        assert parse(source) == parse(source, directives=False)
