"""Lines and phrasing runs.

Block scanning strips container prefixes (block quote markers, container
directive indentation) from lines; phrasing scanning works on the logical
text left over. Both keep a mapping back to offsets in the original source.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Line:
    """One source line with any container prefix removed.

    Attributes:
        text: Line content without the line ending
        offset: Source offset of ``text[0]``
    """

    text: str
    offset: int

    def strip_prefix(self, count: int) -> Line:
        """Drop the first ``count`` characters."""
        return Line(self.text[count:], self.offset + count)


@dataclass(frozen=True, slots=True)
class Run:
    """Logical phrasing text assembled from one or more lines.

    Lines are joined with ``\\n``. ``starts[k]`` is the logical index where
    line ``k`` begins and ``offsets[k]`` its source offset.
    """

    text: str
    starts: tuple[int, ...]
    offsets: tuple[int, ...]

    @classmethod
    def from_lines(cls, lines: list[Line]) -> Run:
        starts: list[int] = []
        position = 0
        for line in lines:
            starts.append(position)
            position += len(line.text) + 1
        return cls(
            text="\n".join(line.text for line in lines),
            starts=tuple(starts),
            offsets=tuple(line.offset for line in lines),
        )

    def source_offset(self, index: int) -> int:
        """Map a logical index to an offset in the original source."""
        k = bisect_right(self.starts, index) - 1
        return self.offsets[k] + (index - self.starts[k])
