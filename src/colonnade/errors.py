"""Exception classes for Colonnade.

The directive reader and writer never raise on odd input: missing names,
attributes or children degrade to empty values. These exceptions cover the
surrounding machinery, where a broken contract is a programming error.
"""

from __future__ import annotations


class ColonnadeError(Exception):
    """Base exception for all Colonnade errors."""

    pass


class ParseError(ColonnadeError):
    """Error while turning events into a tree.

    Raised when the event stream handed to the compiler is not balanced,
    e.g. an exit for a token that is not the one currently open.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class SerializeError(ColonnadeError):
    """Error while serializing a tree back to Markdown.

    Raised when no handler is registered for a node type, which usually
    means a directive node was serialized without the directive extension.
    """

    def __init__(self, node_type: str, message: str | None = None) -> None:
        """Initialize serialize error.

        Args:
            node_type: The ``type`` tag of the offending node
            message: Optional description (defaults to a missing-handler message)
        """
        self.node_type = node_type
        super().__init__(message or f"Cannot serialize unknown node type '{node_type}'")


class ConfigError(ColonnadeError, ValueError):
    """Invalid configuration value (e.g. an unsupported quote character)."""

    pass
