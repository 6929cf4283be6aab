"""
Three-way conflict view built from conflict-marked content.

Interleaves the unconflicted text of a file with its parsed conflict
regions and provides the helpers a three-pane renderer needs:
- Chunk sequence in source order
- Conflict counting and lookup
- Ours/base/theirs row layout
- Conflict-to-conflict navigation
"""

from __future__ import annotations

from typing import Optional, Sequence

from reviewdiff.core.merge.conflict_markers import parse_conflict_markers
from reviewdiff.core.models import (
    CommonChunk,
    ConflictChunk,
    ConflictRegion,
    ThreeWayChunk,
    ThreeWayRow,
)


def build_three_way_view(content: str) -> list[ThreeWayChunk]:
    """
    Split content into common and conflict chunks.

    Runs of lines outside conflict blocks become one CommonChunk each;
    empty runs are omitted. Content without conflicts (including empty
    content) yields a single CommonChunk.
    """
    lines = content.split('\n')
    regions = parse_conflict_markers(content)

    if not regions:
        return [CommonChunk(lines=tuple(lines))]

    chunks: list[ThreeWayChunk] = []
    cursor = 0

    for region in regions:
        if region.start_line > cursor:
            chunks.append(CommonChunk(lines=tuple(lines[cursor:region.start_line])))
        chunks.append(ConflictChunk(region=region))
        cursor = region.end_line + 1

    if cursor < len(lines):
        chunks.append(CommonChunk(lines=tuple(lines[cursor:])))

    return chunks


def count_conflicts(chunks: Sequence[ThreeWayChunk]) -> int:
    """Number of conflict chunks in the sequence."""
    return sum(1 for chunk in chunks if isinstance(chunk, ConflictChunk))


def conflict_regions(chunks: Sequence[ThreeWayChunk]) -> list[ConflictRegion]:
    """Conflict regions of a chunk sequence, in order."""
    return [chunk.region for chunk in chunks if isinstance(chunk, ConflictChunk)]


def conflict_index_at(chunks: Sequence[ThreeWayChunk], chunk_index: int) -> int:
    """
    Ordinal of the conflict at chunk_index.

    For a common chunk this is the ordinal of the next conflict.
    """
    return count_conflicts(chunks[:max(0, chunk_index)])


def flatten_chunks(chunks: Sequence[ThreeWayChunk]) -> list[str]:
    """
    Rebuild the line list of the file the chunks came from.

    Conflict blocks are re-emitted with their marker lines.
    """
    lines: list[str] = []
    for chunk in chunks:
        if isinstance(chunk, ConflictChunk):
            lines.extend(chunk.region.marker_lines())
        else:
            lines.extend(chunk.lines)
    return lines


def three_way_rows(
    chunks: Sequence[ThreeWayChunk],
    show_base: bool = True
) -> list[ThreeWayRow]:
    """
    Lay chunks out as ours/base/theirs rows.

    Common lines are repeated across all three panes. A conflict takes
    as many rows as its longest side (at least one); shorter sides are
    padded with empty strings.
    """
    rows: list[ThreeWayRow] = []
    conflict_index = 0

    for chunk in chunks:
        if isinstance(chunk, CommonChunk):
            for line in chunk.lines:
                rows.append(ThreeWayRow(ours=line, base=line, theirs=line))
            continue

        region = chunk.region
        base = region.base if show_base else ()
        height = max(len(region.ours), len(base), len(region.theirs), 1)
        for offset in range(height):
            rows.append(ThreeWayRow(
                ours=_line_at(region.ours, offset),
                base=_line_at(base, offset),
                theirs=_line_at(region.theirs, offset),
                conflict_index=conflict_index
            ))
        conflict_index += 1

    return rows


def _line_at(lines: Sequence[str], index: int) -> str:
    return lines[index] if index < len(lines) else ""


class ConflictNavigator:
    """
    Cursor over the conflicts of a chunk sequence.

    Moving past either end wraps around.
    """

    def __init__(self, chunks: Sequence[ThreeWayChunk]):
        self._regions = conflict_regions(chunks)
        self._current = 0 if self._regions else -1

    @property
    def count(self) -> int:
        return len(self._regions)

    @property
    def current(self) -> int:
        """Ordinal of the focused conflict, or -1 when there are none."""
        return self._current

    @property
    def current_region(self) -> Optional[ConflictRegion]:
        if self._current < 0:
            return None
        return self._regions[self._current]

    def next(self) -> int:
        """Focus the following conflict."""
        if self._regions:
            self._current = (self._current + 1) % len(self._regions)
        return self._current

    def previous(self) -> int:
        """Focus the preceding conflict."""
        if self._regions:
            self._current = (self._current - 1) % len(self._regions)
        return self._current

    def jump_to(self, index: int) -> int:
        """Focus a conflict by ordinal, clamped to the valid range."""
        if self._regions:
            self._current = min(max(index, 0), len(self._regions) - 1)
        return self._current
