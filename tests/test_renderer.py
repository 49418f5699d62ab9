"""Tests for the core Markdown renderer: escaping, headings, quotes."""

import pytest

from colonnade.nodes import BlockQuote, Document, Heading, Paragraph, Text
from colonnade.renderers.markdown import (
    Info,
    SerializeState,
    ToMarkdownExtension,
    UnsafePattern,
    encode_character_reference,
    escape_backslashes,
    indent_lines,
    to_markdown,
)


def _para(content: str) -> Paragraph:
    return Paragraph(children=(Text(content=content),))


class TestHelpers:
    def test_character_reference(self) -> None:
        assert encode_character_reference("\n") == "&#xA;"
        assert encode_character_reference(" ") == "&#x20;"

    def test_escape_backslashes_before_punctuation(self) -> None:
        assert escape_backslashes("a\\*", "") == "a\\\\*"

    def test_escape_backslashes_before_letter(self) -> None:
        assert escape_backslashes("a\\b", "") == "a\\b"

    def test_escape_backslashes_looks_at_after(self) -> None:
        assert escape_backslashes("a\\", ":") == "a\\\\"
        assert escape_backslashes("a\\", "b") == "a\\"

    def test_indent_lines(self) -> None:
        marked = indent_lines("a\n\nb", lambda line, index, blank: f"{index}{'!' if blank else ':'}{line}")
        assert marked == "0:a\n1!\n2:b"


class TestUnsafePattern:
    def test_scope(self) -> None:
        pattern = UnsafePattern("*", in_construct=("phrasing",), not_in_construct=("label",))
        assert pattern.in_scope(["paragraph", "phrasing"])
        assert not pattern.in_scope(["paragraph"])
        assert not pattern.in_scope(["phrasing", "label"])

    def test_compile_at_break(self) -> None:
        expression = UnsafePattern("#", at_break=True).compile()
        assert expression.search("a\n  #") is not None
        assert expression.search("a #") is None

    def test_compile_escapes_regex_characters(self) -> None:
        expression = UnsafePattern("*", after="a").compile()
        assert expression.search("*a") is not None
        assert expression.search("*b") is None


class TestSafe:
    def _safe(self, value: str, before: str = "\n", after: str = "\n") -> str:
        state = SerializeState()
        with state.enter("paragraph"), state.enter("phrasing"):
            return state.safe(value, Info(before=before, after=after))

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("plain", "plain"),
            ("# a", "\\# a"),
            ("> a", "\\> a"),
            ("a [b]", "a \\[b]"),
            ("a*b_c", "a\\*b\\_c"),
            ("&amp;", "\\&amp;"),
            ("R&D", "R\\&D"),
            ("a & b", "a & b"),
            (" a ", "&#x20;a&#x20;"),
            ("a\\", "a\\\\"),
        ],
    )
    def test_escapes(self, value: str, expected: str) -> None:
        assert self._safe(value) == expected

    def test_context_characters_not_included(self) -> None:
        assert self._safe("#", before="a", after="b") == "#"

    def test_overlapping_matches(self) -> None:
        state = SerializeState([ToMarkdownExtension(unsafe=(UnsafePattern("x", before="x", after="x"),))])
        assert state.safe("xxxx", Info(before="", after="")) == "x&#x78;&#x78;x"


class TestBlocks:
    def test_blocks_joined_by_blank_line(self) -> None:
        doc = Document(children=(_para("a"), _para("b")))
        assert to_markdown(doc) == "a\n\nb\n"

    def test_heading(self) -> None:
        assert to_markdown(Heading(level=2, children=(Text(content="Title"),))) == "## Title\n"

    def test_empty_heading(self) -> None:
        assert to_markdown(Heading(level=3)) == "###\n"

    def test_heading_level_clamped(self) -> None:
        assert to_markdown(Heading(level=9, children=(Text(content="a"),))) == "###### a\n"

    def test_heading_leading_space(self) -> None:
        assert to_markdown(Heading(children=(Text(content=" a"),))) == "# &#x20;a\n"

    def test_heading_trailing_hash(self) -> None:
        assert to_markdown(Heading(children=(Text(content="C#"),))) == "# C\\#\n"

    def test_heading_line_ending(self) -> None:
        assert to_markdown(Heading(children=(Text(content="a\nb"),))) == "# a&#xA;b\n"

    def test_block_quote(self) -> None:
        quote = BlockQuote(children=(_para("a\nb"), _para("c")))
        assert to_markdown(quote) == "> a\n> b\n>\n> c\n"

    def test_nested_block_quote(self) -> None:
        quote = BlockQuote(children=(BlockQuote(children=(_para("a"),)),))
        assert to_markdown(quote) == "> > a\n"

    def test_empty_document(self) -> None:
        assert to_markdown(Document()) == ""
