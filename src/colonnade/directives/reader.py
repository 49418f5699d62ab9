"""Compiler handlers that build directive nodes.

The three directive forms share one set of handlers, registered once per
form under that form's token kinds:

- entering the directive opens a TextDirective, LeafDirective or
  ContainerDirective draft
- the name token sets ``name``
- a container label opens a Paragraph marked ``directive_label``; text and
  leaf labels add their content straight to the directive
- the attribute block collects ``(key, value)`` pairs in scratch data while
  its text is buffered away from the tree, then folds them into
  ``attributes``

"""

from __future__ import annotations

from colonnade.compiler import CompileContext, FromMarkdownExtension, Handler
from colonnade.directives.attributes import AttributePairs, fold_attributes
from colonnade.entities import decode_light
from colonnade.nodes import ContainerDirective, Directive, LeafDirective, Paragraph, TextDirective
from colonnade.tokens import CONTAINER_TOKENS, LEAF_TOKENS, TEXT_TOKENS, DirectiveTokens, Token

# Scratch data key for the pairs of the attribute block being read
ATTRIBUTES_KEY = "directive_attributes"


def _opener(node_class: type[Directive]) -> Handler:
    def enter(ctx: CompileContext, token: Token) -> None:
        ctx.enter(node_class, token, name="", attributes={})

    enter.__name__ = f"enter_{node_class.type}"
    return enter


def _exit(ctx: CompileContext, token: Token) -> None:
    ctx.exit(token)


def _enter_container_label(ctx: CompileContext, token: Token) -> None:
    ctx.enter(Paragraph, token, directive_label=True)


def _exit_name(ctx: CompileContext, token: Token) -> None:
    ctx.current.fields["name"] = ctx.slice_serialize(token)


def _pairs(ctx: CompileContext) -> AttributePairs:
    return ctx.get_data(ATTRIBUTES_KEY)


def _enter_attributes(ctx: CompileContext, token: Token) -> None:
    ctx.set_data(ATTRIBUTES_KEY, [])
    ctx.buffer()


def _exit_id(ctx: CompileContext, token: Token) -> None:
    _pairs(ctx).append(("id", decode_light(ctx.slice_serialize(token))))


def _exit_class(ctx: CompileContext, token: Token) -> None:
    _pairs(ctx).append(("class", decode_light(ctx.slice_serialize(token))))


def _exit_attribute_name(ctx: CompileContext, token: Token) -> None:
    # Names cannot contain "&", so there is nothing to decode
    _pairs(ctx).append((ctx.slice_serialize(token), ""))


def _exit_attribute_value(ctx: CompileContext, token: Token) -> None:
    pairs = _pairs(ctx)
    pairs[-1] = (pairs[-1][0], decode_light(ctx.slice_serialize(token)))


def _exit_attributes(ctx: CompileContext, token: Token) -> None:
    pairs: AttributePairs = ctx.pop_data(ATTRIBUTES_KEY, [])
    ctx.resume()
    ctx.current.fields["attributes"] = fold_attributes(pairs)


def _form_handlers(
    kinds: DirectiveTokens, node_class: type[Directive]
) -> tuple[dict[str, Handler], dict[str, Handler]]:
    enter: dict[str, Handler] = {
        kinds.directive: _opener(node_class),
        kinds.attributes: _enter_attributes,
    }
    exit_: dict[str, Handler] = {
        kinds.directive: _exit,
        kinds.name: _exit_name,
        kinds.attributes: _exit_attributes,
        kinds.id_value: _exit_id,
        kinds.class_value: _exit_class,
        kinds.attribute_name: _exit_attribute_name,
        kinds.attribute_value: _exit_attribute_value,
    }
    if node_class is ContainerDirective:
        enter[kinds.label] = _enter_container_label
        exit_[kinds.label] = _exit
    return enter, exit_


def directive_from_markdown() -> FromMarkdownExtension:
    """Compiler extension reading text, leaf and container directives.

    Example:
        >>> from colonnade.compiler import compile_events
        >>> from colonnade.lexer import Lexer
        >>> doc = compile_events(Lexer("::a[b]{c}").tokenize(), [directive_from_markdown()])
        >>> doc.children[0].name, dict(doc.children[0].attributes)
        ('a', {'c': ''})

    """
    enter: dict[str, Handler] = {}
    exit_: dict[str, Handler] = {}
    for kinds, node_class in (
        (TEXT_TOKENS, TextDirective),
        (LEAF_TOKENS, LeafDirective),
        (CONTAINER_TOKENS, ContainerDirective),
    ):
        form_enter, form_exit = _form_handlers(kinds, node_class)
        enter.update(form_enter)
        exit_.update(form_exit)
    return FromMarkdownExtension(
        enter=enter,
        exit=exit_,
        can_contain_eols=(TextDirective.type,),
    )


__all__ = ["ATTRIBUTES_KEY", "directive_from_markdown"]
