"""Tests for writing directive nodes back to Markdown."""

import pytest

from colonnade import serialize
from colonnade.errors import SerializeError
from colonnade.nodes import (
    BlockQuote,
    ContainerDirective,
    Document,
    Heading,
    LeafDirective,
    Paragraph,
    Text,
    TextDirective,
)


def _text(content: str) -> Text:
    return Text(content=content)


def _para(*inlines) -> Paragraph:  # type: ignore[no-untyped-def]
    return Paragraph(children=tuple(inlines))


def _label(content: str) -> Paragraph:
    return Paragraph(children=(_text(content),), directive_label=True)


class TestTextDirective:
    def test_bare(self) -> None:
        assert serialize(_para(TextDirective())) == ":\n"

    def test_name(self) -> None:
        assert serialize(_para(TextDirective(name="a"))) == ":a\n"

    def test_label(self) -> None:
        assert serialize(_para(TextDirective(name="a", children=(_text("b"),)))) == ":a[b]\n"

    def test_empty_label_has_no_brackets(self) -> None:
        assert serialize(_para(TextDirective(name="a", children=(_text(""),)))) == ":a\n"

    def test_label_brackets_escaped(self) -> None:
        node = _para(TextDirective(name="a", children=(_text("b[c]d"),)))
        assert serialize(node) == ":a[b\\[c\\]d]\n"

    def test_label_line_ending_kept(self) -> None:
        node = _para(TextDirective(name="a", children=(_text("b\nc"),)))
        assert serialize(node) == ":a[b\nc]\n"

    def test_attributes(self) -> None:
        node = _para(TextDirective(name="a", attributes={"id": "b", "class": "c d", "key": "e\nf"}))
        assert serialize(node) == ':a{#b .c.d key="e&#xA;f"}\n'

    def test_in_sentence(self) -> None:
        node = _para(_text("a "), TextDirective(name="b", children=(_text("c"),)), _text(" d."))
        assert serialize(node) == "a :b[c] d.\n"


class TestLeafDirective:
    def test_bare(self) -> None:
        assert serialize(LeafDirective()) == "::\n"

    def test_name(self) -> None:
        assert serialize(LeafDirective(name="a")) == "::a\n"

    def test_label(self) -> None:
        assert serialize(LeafDirective(name="a", children=(_text("b"),))) == "::a[b]\n"

    def test_label_line_ending_encoded(self) -> None:
        assert serialize(LeafDirective(name="a", children=(_text("b\nc"),))) == "::a[b&#xA;c]\n"

    def test_attributes(self) -> None:
        node = LeafDirective(name="a", attributes={"id": "b", "class": "c d", "key": "e\nf"})
        assert serialize(node) == '::a{#b .c.d key="e&#xA;f"}\n'


class TestContainerDirective:
    def test_bare(self) -> None:
        assert serialize(ContainerDirective()) == ":::\n:::\n"

    def test_name(self) -> None:
        assert serialize(ContainerDirective(name="a")) == ":::a\n:::\n"

    def test_paragraph_content(self) -> None:
        node = ContainerDirective(name="a", children=(_para(_text("b")),))
        assert serialize(node) == ":::a\nb\n:::\n"

    def test_heading_content(self) -> None:
        node = ContainerDirective(name="a", children=(Heading(level=1, children=(_text("b"),)),))
        assert serialize(node) == ":::a\n# b\n:::\n"

    def test_multiline_text(self) -> None:
        node = ContainerDirective(name="a", children=(_para(_text("b\nc")),))
        assert serialize(node) == ":::a\nb\nc\n:::\n"

    def test_attributes(self) -> None:
        node = ContainerDirective(name="a", attributes={"id": "b", "class": "c d", "key": "e\nf"})
        assert serialize(node) == ':::a{#b .c.d key="e&#xA;f"}\n:::\n'

    def test_label(self) -> None:
        node = ContainerDirective(name="a", children=(_label("b"),))
        assert serialize(node) == ":::a[b]\n:::\n"

    def test_label_with_content(self) -> None:
        node = ContainerDirective(name="a", children=(_label("b"), _para(_text("c"))))
        assert serialize(node) == ":::a[b]\nc\n:::\n"

    def test_label_line_ending_encoded(self) -> None:
        node = ContainerDirective(name="a", children=(_label("b\nc"),))
        assert serialize(node) == ":::a[b&#xA;c]\n:::\n"

    def test_does_not_mutate_children(self) -> None:
        children = (_label("b"), _para(_text("c")))
        node = ContainerDirective(name="a", children=children)
        serialize(node)
        assert node.children is children


class TestNesting:
    def test_nested_container(self) -> None:
        node = ContainerDirective(
            name="a",
            children=(ContainerDirective(name="b", children=(_para(_text("c")),)),),
        )
        assert serialize(node) == "::::a\n:::b\nc\n:::\n::::\n"

    def test_sibling_containers(self) -> None:
        node = ContainerDirective(
            name="a",
            children=(
                ContainerDirective(name="b", children=(_para(_text("c")),)),
                ContainerDirective(name="d", children=(_para(_text("e")),)),
            ),
        )
        assert serialize(node) == "::::a\n:::b\nc\n:::\n\n:::d\ne\n:::\n::::\n"

    def test_three_levels(self) -> None:
        node = ContainerDirective(
            name="a",
            children=(
                ContainerDirective(
                    name="b",
                    children=(ContainerDirective(name="c", children=(_para(_text("d")),)),),
                ),
            ),
        )
        assert serialize(node) == ":::::a\n::::b\n:::c\nd\n:::\n::::\n:::::\n"

    def test_nesting_through_block_quote(self) -> None:
        node = ContainerDirective(
            name="a",
            children=(BlockQuote(children=(ContainerDirective(name="b", children=(_para(_text("c")),)),)),),
        )
        assert serialize(node) == "::::a\n> :::b\n> c\n> :::\n::::\n"


class TestPhrasingEscapes:
    """Text that would read back as a directive is escaped."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("a:b", "a\\:b\n"),
            ("a:9", "a:9\n"),
            ("a::c", "a::c\n"),
            (":\na", ":\na\n"),
            (":a", "\\:a\n"),
            ("::\na", "\\::\na\n"),
            (":::\na", "\\:::\na\n"),
            ("::a", "\\:\\:a\n"),
        ],
    )
    def test_colons(self, content: str, expected: str) -> None:
        assert serialize(_para(_text(content))) == expected

    def test_colon_not_escaped_without_directives(self) -> None:
        assert serialize(_para(_text("a:b")), directives=False) == "a:b\n"


class TestTextDirectiveNeighbours:
    """Text right after a text directive must not merge into it."""

    def test_name_character_after_name(self) -> None:
        node = _para(TextDirective(name="a"), _text("b"))
        assert serialize(node) == ":a&#x62;\n"

    def test_bracket_after_name(self) -> None:
        node = _para(TextDirective(name="a"), _text("[b]"))
        assert serialize(node) == ":a\\[b]\n"

    def test_brace_after_label(self) -> None:
        node = _para(TextDirective(name="a", children=(_text("b"),)), _text("{c}"))
        assert serialize(node) == ":a[b]\\{c}\n"

    def test_brace_after_attributes_is_plain(self) -> None:
        node = _para(TextDirective(name="a", attributes={"b": ""}), _text("{c}"))
        assert serialize(node) == ":a{b}{c}\n"

    def test_colon_after_directive(self) -> None:
        node = _para(TextDirective(name="a"), _text(":9"))
        assert serialize(node) == ":a\\:9\n"

    def test_double_colon_before_letter(self) -> None:
        node = _para(TextDirective(name="a"), _text("::c"))
        assert serialize(node) == ":a\\:\\:c\n"

    def test_adjacent_directives(self) -> None:
        node = _para(TextDirective(name="a"), TextDirective(name="b"))
        assert serialize(node) == ":a:b\n"

    def test_bare_colon_before_directive(self) -> None:
        node = _para(_text("a:"), TextDirective(name="b"))
        assert serialize(node) == "a\\::b\n"

    def test_space_after_name_is_plain(self) -> None:
        node = _para(TextDirective(name="a"), _text(" b"))
        assert serialize(node) == ":a b\n"


class TestOptions:
    def test_single_quote(self) -> None:
        node = LeafDirective(name="a", attributes={"b": "c'd"})
        assert serialize(node, quote="'") == "::a{b='c&#x27;d'}\n"

    def test_double_quote_inside_single(self) -> None:
        node = LeafDirective(name="a", attributes={"b": 'c"d'})
        assert serialize(node, quote="'") == "::a{b='c\"d'}\n"

    def test_directives_disabled_raises(self) -> None:
        with pytest.raises(SerializeError) as exc_info:
            serialize(Document(children=(LeafDirective(name="a"),)), directives=False)
        assert exc_info.value.node_type == "leaf_directive"


class TestDegenerateNodes:
    """Hand-built nodes with missing fields are written without faulting."""

    def test_none_attributes(self) -> None:
        node = LeafDirective(name="a", attributes=None)  # type: ignore[arg-type]
        assert serialize(node) == "::a\n"

    def test_none_attribute_value_skipped(self) -> None:
        node = LeafDirective(name="a", attributes={"b": None, "c": "d"})
        assert serialize(node) == '::a{c="d"}\n'

    def test_label_only_container(self) -> None:
        node = ContainerDirective(name="a", children=(_label(""),))
        assert serialize(node) == ":::a\n:::\n"
