"""Tests for colonnade.serialization: dict and JSON forms of trees."""

import json

import pytest

from colonnade import parse
from colonnade.location import SourceLocation
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
from colonnade.serialization import from_dict, from_json, to_dict, to_json

_LOC = SourceLocation(lineno=1, col_offset=1, offset=0, end_offset=1)


def _doc(*blocks) -> Document:  # type: ignore[no-untyped-def]
    return Document(location=_LOC, children=tuple(blocks))


def _para(*inlines) -> Paragraph:  # type: ignore[no-untyped-def]
    return Paragraph(location=_LOC, children=tuple(inlines))


def _text(content: str) -> Text:
    return Text(location=_LOC, content=content)


class TestToDict:
    def test_type_discriminator(self) -> None:
        data = to_dict(_text("a"))
        assert data["type"] == "text"
        assert data["content"] == "a"

    def test_location_included(self) -> None:
        assert to_dict(_text("a"))["location"]["lineno"] == 1

    def test_location_omitted(self) -> None:
        assert "location" not in to_dict(_text("a"), locations=False)

    def test_directive_fields(self) -> None:
        node = LeafDirective(name="a", attributes={"id": "b", "k": ""}, children=(_text("c"),))
        data = to_dict(node, locations=False)
        assert data == {
            "type": "leaf_directive",
            "name": "a",
            "attributes": {"id": "b", "k": ""},
            "children": [{"type": "text", "content": "c"}],
        }

    def test_label_flag(self) -> None:
        label = Paragraph(children=(_text("b"),), directive_label=True)
        assert to_dict(label, locations=False)["directive_label"] is True


class TestFromDict:
    def test_missing_type(self) -> None:
        with pytest.raises(ValueError, match="Missing"):
            from_dict({"content": "a"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown node type"):
            from_dict({"type": "table"})

    def test_defaults_for_missing_fields(self) -> None:
        assert from_dict({"type": "container_directive"}) == ContainerDirective()

    def test_location_restored(self) -> None:
        node = from_dict(to_dict(_text("a")))
        assert node.location == _LOC


class TestRoundTrip:
    """to_json -> from_json preserves every node type."""

    def _roundtrip(self, doc: Document) -> None:
        restored = from_json(to_json(doc))
        assert restored == doc

    def test_empty_document(self) -> None:
        self._roundtrip(_doc())

    def test_all_node_types(self) -> None:
        self._roundtrip(
            _doc(
                Heading(location=_LOC, level=2, children=(_text("Title"),)),
                _para(_text("a "), TextDirective(name="b", attributes={"c": "d"}, children=(_text("e"),))),
                BlockQuote(location=_LOC, children=(_para(_text("quoted")),)),
                LeafDirective(name="f", attributes={"id": "g", "class": "h i"}),
                ContainerDirective(
                    name="j",
                    children=(
                        Paragraph(children=(_text("label"),), directive_label=True),
                        ContainerDirective(name="k"),
                    ),
                ),
            )
        )

    def test_parsed_tree(self) -> None:
        doc = parse(':::a[b]{#c .d e="f"}\n::g\n\nh :i[j]\n:::')
        restored = from_json(to_json(doc))
        assert restored == doc
        assert restored.children[0].location == doc.children[0].location

    def test_attribute_order_preserved(self) -> None:
        doc = _doc(LeafDirective(name="a", attributes={"z": "1", "a": "2", "m": "3"}))
        assert list(from_json(to_json(doc)).children[0].attributes) == ["z", "a", "m"]

    def test_indent(self) -> None:
        text = to_json(_doc(_para(_text("a"))), indent=2)
        assert "\n  " in text
        assert json.loads(text)["type"] == "document"

    def test_from_json_requires_document(self) -> None:
        with pytest.raises(ValueError, match="Expected Document"):
            from_json(to_json(_text("a")))
