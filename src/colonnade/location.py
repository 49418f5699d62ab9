"""Source location tracking for tokens and tree nodes.

Every token the lexer emits, and every node the compiler builds from those
tokens, carries a SourceLocation. Nodes built by hand get UNKNOWN_LOCATION.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Span of source text.

    Line and column numbers are 1-indexed; offsets are 0-indexed positions
    into the original source string (end exclusive).

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column (1-indexed)
        offset: Absolute start offset in the source
        end_offset: Absolute end offset in the source
        end_lineno: Ending line number (optional)
        end_col_offset: Ending column (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(lineno=1, col_offset=1)
        >>> str(loc)
        '1:1'

        >>> loc = SourceLocation(3, 5, source_file="docs/guide.md")
        >>> str(loc)
        'docs/guide.md:3:5'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_offset: int = 0
    end_lineno: int | None = None
    end_col_offset: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.md:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a new location spanning from this location to the end of ``end``."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_offset=end.end_offset or end.offset,
            end_lineno=end.end_lineno or end.lineno,
            end_col_offset=end.end_col_offset or end.col_offset,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Placeholder for nodes created synthetically."""
        return UNKNOWN_LOCATION


UNKNOWN_LOCATION = SourceLocation(lineno=0, col_offset=0)
