"""
Range Maps - Fragment-to-document offset translation

A fragment is the code block body with leading indentation trimmed (up to
the opening fence's indentation) and directive lines injected at the top.
Within one line, fragment text is a suffix of the document line, so a map
only needs the offset delta at the start of each line.

Breakpoint 0 sits at fragment offset 0 with a zero delta and the block's
base indentation; breakpoint ``i`` (i >= 1) is the i-th physical line after
the opening fence, the closing fence line included.

Author: mdfence maintainers | 2026-10-19
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence

from mdfence.document import LEADING_INDENT_RE


@dataclass(frozen=True)
class Breakpoint:
    """Offset delta in effect from ``fragment_offset`` onwards."""
    fragment_offset: int
    delta: int
    indent: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "fragment_offset": self.fragment_offset,
            "delta": self.delta,
            "indent": self.indent,
        }


class RangeMap:
    """Immutable, ordered breakpoint table for one block."""

    def __init__(self, breakpoints: Sequence[Breakpoint]):
        if not breakpoints or breakpoints[0].fragment_offset != 0:
            raise ValueError("RangeMap must start with a breakpoint at offset 0")
        self._breakpoints = tuple(breakpoints)
        self._offsets = [b.fragment_offset for b in self._breakpoints]

    def __len__(self) -> int:
        return len(self._breakpoints)

    def __iter__(self) -> Iterator[Breakpoint]:
        return iter(self._breakpoints)

    def __getitem__(self, i: int) -> Breakpoint:
        return self._breakpoints[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RangeMap):
            return self._breakpoints == other._breakpoints
        return NotImplemented

    def __repr__(self) -> str:
        return f"RangeMap({len(self._breakpoints)} breakpoints)"

    @property
    def line_count(self) -> int:
        """Number of document lines after the opening fence."""
        return len(self._breakpoints) - 1

    def line(self, body_line: int) -> Breakpoint:
        """Breakpoint of a 1-based body line."""
        if body_line < 1 or body_line > self.line_count:
            raise IndexError(f"Body line {body_line} out of range 1..{self.line_count}")
        return self._breakpoints[body_line]

    def lookup(self, fragment_offset: int) -> Breakpoint:
        """Last breakpoint whose fragment offset is <= ``fragment_offset``."""
        i = bisect_right(self._offsets, fragment_offset)
        return self._breakpoints[max(i - 1, 0)]

    def to_document(self, fragment_offset: int) -> int:
        """Translate a fragment offset into a document offset."""
        return fragment_offset + self.lookup(fragment_offset).delta

    def to_list(self) -> List[Dict[str, Any]]:
        return [b.to_dict() for b in self._breakpoints]


def leading_indent_length(line: str) -> int:
    """Length of the leading whitespace / ``>`` run of a line."""
    return len(LEADING_INDENT_RE.match(line).group())


def trim_length(line: str, base_indent: int) -> int:
    """Characters trimmed from a body line: never more than the fence's indentation."""
    return min(base_indent, leading_indent_length(line))


def build_range_map(
    lines: Sequence[str],
    base_indent: int,
    document_offset: int,
    directive_length: int = 0,
) -> RangeMap:
    """
    Build the range map of a block.

    Args:
        lines: Physical document lines following the opening fence, without
            newlines (closing fence line included when present)
        base_indent: Indentation of the opening fence
        document_offset: Document offset of the first of ``lines``
        directive_length: Total length of the injected directive lines,
            newlines included

    Returns:
        RangeMap with ``len(lines) + 1`` breakpoints
    """
    breakpoints = [Breakpoint(fragment_offset=0, delta=0, indent=base_indent)]

    fragment_offset = directive_length
    for line in lines:
        trimmed = trim_length(line, base_indent)
        breakpoints.append(Breakpoint(
            fragment_offset=fragment_offset,
            delta=document_offset + trimmed - fragment_offset,
            indent=trimmed,
        ))
        document_offset += len(line) + 1
        fragment_offset += len(line) - trimmed + 1

    return RangeMap(breakpoints)
