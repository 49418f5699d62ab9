"""Renderer handlers that write directive nodes back to Markdown.

A directive is written as its fence, name, label and attribute block; a
container directive adds its block content and a closing fence:

    ::::outer[Label]{#id .class key="value"}
    :::inner
    content
    :::
    ::::

Besides the handlers, the extension contributes escaping rules so that
ordinary text never reads back as a directive: a ``:`` before a letter, a
``::`` at the start of a line, and line endings inside block directive
labels are escaped.

"""

from __future__ import annotations

from dataclasses import replace
from typing import cast

from colonnade.directives.attributes import encode_attributes
from colonnade.directives.fence import fence
from colonnade.nodes import ContainerDirective, Directive, LeafDirective, Node, TextDirective, is_directive_label
from colonnade.renderers.markdown import Info, SerializeState, ToMarkdownExtension, UnsafePattern, escape_character

_BLOCK_LABELS = (f"{LeafDirective.type}_label", f"{ContainerDirective.type}_label")

DIRECTIVE_UNSAFE: tuple[UnsafePattern, ...] = (
    UnsafePattern("\r", in_construct=_BLOCK_LABELS),
    UnsafePattern("\n", in_construct=_BLOCK_LABELS),
    UnsafePattern(":", before="[^:]", after="[A-Za-z]", in_construct=("phrasing", "label")),
    UnsafePattern(":", after=":", at_break=True),
    # an escaped colon lets the next one open a directive
    UnsafePattern(":", before=":", after="[A-Za-z]", at_break=True),
)


def handle_directive(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    """Write any of the three directive forms."""
    directive = cast(Directive, node)
    prefix = fence(directive)
    with state.enter(directive.type):
        value = prefix + (directive.name or "") + _label(directive, state)
        value += encode_attributes(directive.attributes, state.quote)
        if isinstance(directive, ContainerDirective):
            subvalue = _content(directive, state)
            if subvalue:
                value += "\n" + subvalue
            value += "\n" + prefix
    return value


def peek_directive(node: Node, parent: Node | None, state: SerializeState, info: Info) -> str:
    return ":"


def _label(node: Directive, state: SerializeState) -> str:
    label: Node = node
    if isinstance(node, ContainerDirective):
        head = node.children[0] if node.children else None
        if head is None or not is_directive_label(head):
            return ""
        label = head

    with state.enter("label"), state.enter(f"{node.type}_label"):
        value = state.container_phrasing(label, Info(before="[", after="]"))
    return f"[{value}]" if value else ""


def _content(node: ContainerDirective, state: SerializeState) -> str:
    children = node.children or ()
    if children and is_directive_label(children[0]):
        node = replace(node, children=tuple(children[1:]))
    return state.container_flow(node, Info())


def guard_text_directive(rendered: str, following: str) -> str:
    """Escape the start of ``following`` where it would merge into ``rendered``.

    A ``:`` right after a text directive is always escaped, and so is a
    second ``:`` before a letter, which the escaped one would no longer
    shield. A directive that ends with its name would absorb name
    characters, a label or an attribute block; one that ends with a label
    would absorb attributes.
    """
    head = following[:1]
    if head == ":":
        if following[1:2] == ":" and _starts_name(following[2:3]):
            return "\\:\\:" + following[2:]
        return "\\:" + following[1:]
    if not head or rendered.endswith("}"):
        return following
    if rendered.endswith("]"):
        return "\\{" + following[1:] if head == "{" else following
    if head in "[{-_" or (head.isascii() and head.isalnum()):
        return escape_character(head) + following[1:]
    return following


def _starts_name(character: str) -> bool:
    return character.isascii() and character.isalpha()


def directive_to_markdown() -> ToMarkdownExtension:
    """Renderer extension writing text, leaf and container directives.

    Example:
        >>> from colonnade.renderers.markdown import to_markdown
        >>> to_markdown(LeafDirective(name="a", attributes={"id": "b"}), [directive_to_markdown()])
        '::a{#b}\\n'

    """
    types = (TextDirective.type, LeafDirective.type, ContainerDirective.type)
    return ToMarkdownExtension(
        handlers=dict.fromkeys(types, handle_directive),
        peek=dict.fromkeys(types, peek_directive),
        unsafe=DIRECTIVE_UNSAFE,
        guard={TextDirective.type: guard_text_directive},
    )


__all__ = [
    "DIRECTIVE_UNSAFE",
    "directive_to_markdown",
    "guard_text_directive",
    "handle_directive",
    "peek_directive",
]
