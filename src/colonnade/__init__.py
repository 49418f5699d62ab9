"""
Colonnade: generic directives for Markdown, both ways.

Reads ``:text``, ``::leaf`` and ``:::container`` directives into a typed
tree of frozen dataclasses, and writes such trees back to Markdown with the
fence lengths, escapes and attribute shortcuts needed to read them back
unchanged. Zero runtime dependencies.

Quick Start:
    >>> from colonnade import parse, serialize
    >>> doc = parse(":::note[Heads up]{.warning}\\nMind the gap.\\n:::")
    >>> doc.children[0].name, dict(doc.children[0].attributes)
    ('note', {'class': 'warning'})
    >>> serialize(doc)
    ':::note[Heads up]{.warning}\\nMind the gap.\\n:::\\n'

    >>> # Or use the high-level Markdown class
    >>> from colonnade import Markdown
    >>> Markdown(quote="'")('::video{src="a b"}')
    "::video{src='a b'}\\n"

"""

from dataclasses import replace

from colonnade.compiler import CompileContext, FromMarkdownExtension, compile_events
from colonnade.config import (
    ParseConfig,
    SerializeConfig,
    get_parse_config,
    get_serialize_config,
    parse_config_context,
    reset_parse_config,
    reset_serialize_config,
    serialize_config_context,
    set_parse_config,
    set_serialize_config,
)
from colonnade.directives import (
    directive_from_markdown,
    directive_to_markdown,
    encode_attributes,
    fence,
    fence_length,
    fold_attributes,
)
from colonnade.errors import ColonnadeError, ConfigError, ParseError, SerializeError
from colonnade.lexer import Lexer
from colonnade.location import SourceLocation
from colonnade.nodes import (
    Block,
    BlockQuote,
    ContainerDirective,
    Directive,
    Document,
    Heading,
    Inline,
    LeafDirective,
    Node,
    Paragraph,
    Text,
    TextDirective,
    is_directive_label,
)
from colonnade.renderers.markdown import MarkdownRenderer, ToMarkdownExtension, to_markdown
from colonnade.renderers.protocol import NodeRenderer
from colonnade.serialization import from_dict, from_json, to_dict, to_json
from colonnade.tokens import Event, EventKind, Token, TokenType

__version__ = "0.1.0"


def _document_location(source: str, source_file: str | None) -> SourceLocation:
    last_newline = source.rfind("\n")
    return SourceLocation(
        lineno=1,
        col_offset=1,
        offset=0,
        end_offset=len(source),
        end_lineno=source.count("\n") + 1,
        end_col_offset=len(source) - last_newline,
        source_file=source_file,
    )


def parse(
    source: str,
    *,
    directives: bool | None = None,
    source_file: str | None = None,
) -> Document:
    """Parse Markdown source into a typed tree.

    Args:
        source: Markdown source text
        directives: Recognize directive syntax (defaults to the active
            ParseConfig)
        source_file: Optional source file path for locations and errors

    Returns:
        Document root node

    Example:
        >>> parse("::a[b]{c}").children[0]
        LeafDirective(name='a', attributes={'c': ''}, children=(Text(content='b'),))
    """
    config = get_parse_config()
    enabled = config.directives_enabled if directives is None else directives
    if source_file is None:
        source_file = config.source_file

    lexer = Lexer(source, source_file=source_file, directives=enabled)
    extensions = [directive_from_markdown()] if enabled else []
    doc = compile_events(lexer.tokenize(), extensions)
    return replace(doc, location=_document_location(source, source_file))


def serialize(
    node: Node,
    *,
    quote: str | None = None,
    directives: bool | None = None,
) -> str:
    """Render a tree back to Markdown.

    Args:
        node: Root node (usually a Document; any node works)
        quote: ``"`` or ``'`` around attribute values (defaults to the active
            SerializeConfig)
        directives: Register the directive handlers (defaults to the active
            SerializeConfig)

    Raises:
        ConfigError: If ``quote`` is not a supported quote character.
        SerializeError: If a node has no handler (e.g. a directive with
            directives disabled).

    Example:
        >>> serialize(ContainerDirective(name="a", children=(Paragraph(children=(Text(content="b"),)),)))
        ':::a\\nb\\n:::\\n'
    """
    config = get_serialize_config()
    if quote is not None or directives is not None:
        config = SerializeConfig(
            directives_enabled=config.directives_enabled if directives is None else directives,
            quote=config.quote if quote is None else quote,
        )
    extensions = [directive_to_markdown()] if config.directives_enabled else []
    return to_markdown(node, extensions, quote=config.quote)


class Markdown:
    """High-level processor pairing a parse and a serialize configuration.

    Usage:
        >>> md = Markdown()
        >>> md(":::a\\n\\nb\\n\\n\\n:::")
        ':::a\\nb\\n:::\\n'

        >>> # Access the tree
        >>> md.parse("::x").children[0].name
        'x'

    Thread Safety:
        Configs are immutable and applied through ContextVars for the
        duration of each call. Safe to share across threads.

    """

    __slots__ = ("_parse_config", "_serialize_config")

    def __init__(self, *, directives: bool = True, quote: str = '"') -> None:
        """Initialize Markdown processor.

        Args:
            directives: Read and write directive syntax
            quote: Quote character for attribute values

        Raises:
            ConfigError: If ``quote`` is not a supported quote character.
        """
        self._parse_config = ParseConfig(directives_enabled=directives)
        self._serialize_config = SerializeConfig(directives_enabled=directives, quote=quote)

    def __call__(self, source: str) -> str:
        """Parse then serialize, normalizing ``source``."""
        return self.serialize(self.parse(source))

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        with parse_config_context(self._parse_config):
            return parse(source, source_file=source_file)

    def serialize(self, node: Node) -> str:
        with serialize_config_context(self._serialize_config):
            return serialize(node)


__all__ = [
    # Main API
    "parse",
    "serialize",
    "Markdown",
    "__version__",
    # Configuration
    "ParseConfig",
    "SerializeConfig",
    "get_parse_config",
    "get_serialize_config",
    "parse_config_context",
    "reset_parse_config",
    "reset_serialize_config",
    "serialize_config_context",
    "set_parse_config",
    "set_serialize_config",
    # Errors
    "ColonnadeError",
    "ConfigError",
    "ParseError",
    "SerializeError",
    # Directives
    "directive_from_markdown",
    "directive_to_markdown",
    "encode_attributes",
    "fence",
    "fence_length",
    "fold_attributes",
    # Frameworks
    "CompileContext",
    "FromMarkdownExtension",
    "Lexer",
    "MarkdownRenderer",
    "NodeRenderer",
    "ToMarkdownExtension",
    "compile_events",
    "to_markdown",
    # Tokens
    "Event",
    "EventKind",
    "Token",
    "TokenType",
    # Location
    "SourceLocation",
    # Nodes
    "Block",
    "BlockQuote",
    "ContainerDirective",
    "Directive",
    "Document",
    "Heading",
    "Inline",
    "LeafDirective",
    "Node",
    "Paragraph",
    "Text",
    "TextDirective",
    "is_directive_label",
    # Serialization
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
]
