"""Conversion between character offsets and line/column positions."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain
from typing import Optional, Sequence


@dataclass
class CodeLocation:
    """A resolved position in a source text, with the bounds of its line."""

    offset: int = 0
    line: int = 0
    column: int = 0
    line_start_offset: int = 0
    line_end_offset: int = 0


def location_to_offset(file: str, line: int, column: int) -> Optional[int]:
    """Return the offset of a 1-based line and column, or None if the line is missing."""
    start = 0
    for _ in range(line - 1):
        newline = file.find("\n", start)
        if newline < 0:
            return None
        start = newline + 1
    return start + column - 1


def offset_to_location(file: str, offsets: Sequence[int]) -> list[CodeLocation]:
    """Resolve each offset into a CodeLocation, keeping the order of ``offsets``.

    Offsets past the end of the text are left as all-zero locations.
    """
    if not offsets:
        return []
    max_offset = max(offsets)

    # Sorted descending, so the smallest pending offset is always at the end.
    pending = sorted(
        ((offset, idx) for idx, offset in enumerate(offsets)), reverse=True
    )
    out = [CodeLocation() for _ in offsets]
    without_line_end: list[int] = []
    line = 1
    column = 1
    line_start = 0

    for pos, ch in enumerate(chain(file, " ")):
        column += 1
        while pending and pending[-1][0] == pos:
            _, idx = pending.pop()
            without_line_end.append(idx)
            loc = out[idx]
            loc.offset = pos
            loc.line = line
            loc.column = column
            loc.line_start_offset = line_start
        if ch == "\n":
            line += 1
            column = 1
            for idx in without_line_end:
                out[idx].line_end_offset = pos
            without_line_end.clear()
            line_start = pos + 1
            if pos == max_offset + 1:
                break

    for idx in without_line_end:
        out[idx].line_end_offset = len(file)
    return out