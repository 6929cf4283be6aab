"""
Text rendering of word diffs, side-by-side hunks and three-way views.

Renderers only read the core models. Changed segments are shown with
ANSI colours when enabled, otherwise with [-removed-] and {+added+}
markers so the output stays readable when piped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from reviewdiff.core.diff.line_pairing import expand_tabs, slice_segments
from reviewdiff.core.merge.three_way import count_conflicts, three_way_rows
from reviewdiff.core.models import (
    DiffLine,
    DiffLineType,
    LinePair,
    ThreeWayChunk,
    WordDiffResult,
    WordDiffSegment,
)
from reviewdiff.services.settings import ApplicationSettings


REMOVED_MARKERS = ('[-', '-]')
ADDED_MARKERS = ('{+', '+}')

NUMBER_WIDTH = 4

GUTTERS = {
    DiffLineType.CONTEXT: '|',
    DiffLineType.MODIFIED: '!',
    DiffLineType.REMOVED: '<',
    DiffLineType.ADDED: '>',
}


@dataclass
class TerminalColors:
    """ANSI colour scheme for diff highlighting."""
    added: str = '\033[32m'
    removed: str = '\033[31m'
    intraline_added: str = '\033[1;30;42m'
    intraline_removed: str = '\033[1;30;41m'
    header: str = '\033[36m'
    conflict: str = '\033[33m'
    reset: str = '\033[0m'

    @classmethod
    def plain(cls) -> 'TerminalColors':
        """Scheme without escape codes, for pipes and files."""
        return cls(
            added='',
            removed='',
            intraline_added='',
            intraline_removed='',
            header='',
            conflict='',
            reset='',
        )

    @property
    def enabled(self) -> bool:
        return bool(self.reset)

    def paint(self, text: str, code: str) -> str:
        if not code or not text:
            return text
        return f"{code}{text}{self.reset}"


def render_segments(
    segments: Sequence[WordDiffSegment],
    added: bool,
    colors: TerminalColors
) -> str:
    """
    Render one side of a word diff as a single string.

    Args:
        segments: Segments of the old (added=False) or new side
        added: Whether this is the new side
        colors: Colour scheme; a plain scheme falls back to markers

    Returns:
        Line text with changed runs highlighted
    """
    parts = []
    for segment in segments:
        if not segment.is_changed:
            parts.append(segment.text)
        elif colors.enabled:
            code = colors.intraline_added if added else colors.intraline_removed
            parts.append(colors.paint(segment.text, code))
        else:
            opening, closing = ADDED_MARKERS if added else REMOVED_MARKERS
            parts.append(f"{opening}{segment.text}{closing}")
    return ''.join(parts)


def _expand_segment_tabs(
    segments: Sequence[WordDiffSegment],
    tab_size: int
) -> tuple[WordDiffSegment, ...]:
    """Expand tabs across segment boundaries using one running column."""
    tab_size = max(tab_size, 1)
    result = []
    column = 0

    for segment in segments:
        chars = []
        for char in segment.text:
            if char == '\t':
                spaces = tab_size - (column % tab_size)
                chars.append(' ' * spaces)
                column += spaces
            else:
                chars.append(char)
                column += 1
        result.append(WordDiffSegment(''.join(chars), segment.segment_type))

    return tuple(result)


class TextRenderer:
    """Renders core models as lines of terminal text."""

    def __init__(
        self,
        settings: ApplicationSettings,
        colors: Optional[TerminalColors] = None
    ):
        self.settings = settings
        self.colors = colors or TerminalColors.plain()
        self.width = max(settings.output.column_width, 8)
        self.tab_size = settings.word_diff.tab_size

    # === Word diff ===

    def render_word_diff(self, result: WordDiffResult) -> list[str]:
        """Old line then new line, with changed words highlighted."""
        return [
            self.colors.paint('- ', self.colors.removed)
            + render_segments(result.old_segments, False, self.colors),
            self.colors.paint('+ ', self.colors.added)
            + render_segments(result.new_segments, True, self.colors),
        ]

    # === Side by side ===

    def render_line_pairs(self, pairs: Sequence[LinePair]) -> list[str]:
        """
        Two-column layout of hunk rows.

        The gutter between columns shows | for context, ! for a paired
        change, < for a removal and > for an addition.
        """
        lines = []
        for pair in pairs:
            if pair.pair_type == DiffLineType.HEADER:
                lines.append(self.colors.paint(pair.left_content, self.colors.header))
                continue

            left = self._cell(pair.left_line, pair.left_word_diff, right=False)
            right = self._cell(pair.right_line, pair.right_word_diff, right=True)
            gutter = GUTTERS.get(pair.pair_type, '|')
            lines.append(f"{left} {gutter} {right}".rstrip())
        return lines

    def _cell(
        self,
        line: Optional[DiffLine],
        segments: Optional[tuple[WordDiffSegment, ...]],
        right: bool
    ) -> str:
        if line is None:
            return ' ' * (NUMBER_WIDTH + 1 + self.width)

        number = line.right_line_num if right else line.left_line_num
        number_text = f"{number:>{NUMBER_WIDTH}}" if number is not None else ' ' * NUMBER_WIDTH

        if segments:
            visible = slice_segments(_expand_segment_tabs(segments, self.tab_size), 0, self.width)
            text = render_segments(visible, right, self.colors)
            length = sum(segment.length for segment in visible)
        else:
            text = expand_tabs(line.content, self.tab_size)[:self.width]
            length = len(text)
            if line.line_type == DiffLineType.REMOVED:
                text = self.colors.paint(text, self.colors.removed)
            elif line.line_type == DiffLineType.ADDED:
                text = self.colors.paint(text, self.colors.added)

        return f"{number_text} {text}{' ' * (self.width - length)}"

    # === Three way ===

    def render_three_way(self, chunks: Sequence[ThreeWayChunk]) -> list[str]:
        """
        Ours/base/theirs columns followed by a conflict count.

        Conflict rows carry the 1-based conflict number in the gutter.
        """
        conflicts = self.settings.conflicts
        show_base = conflicts.show_base

        if show_base:
            titles = [conflicts.ours_title, conflicts.base_title, conflicts.theirs_title]
        else:
            titles = [conflicts.ours_title, conflicts.theirs_title]

        lines = [
            ' ' * NUMBER_WIDTH + ' | '.join(self._fit(title) for title in titles).rstrip(),
            ' ' * NUMBER_WIDTH + '-+-'.join('-' * self.width for _ in titles),
        ]

        for row in three_way_rows(chunks, show_base):
            cells = [row.ours, row.base, row.theirs] if show_base else [row.ours, row.theirs]
            text = ' | '.join(self._fit(cell) for cell in cells).rstrip()
            if row.is_conflict:
                gutter = f"{row.conflict_index + 1:>{NUMBER_WIDTH - 1}} "
                lines.append(self.colors.paint(gutter + text, self.colors.conflict))
            else:
                lines.append(' ' * NUMBER_WIDTH + text)

        count = count_conflicts(chunks)
        lines.append('')
        lines.append(f"{count} conflict{'' if count == 1 else 's'}")
        return lines

    def _fit(self, text: str) -> str:
        return expand_tabs(text, self.tab_size)[:self.width].ljust(self.width)


# =============================================================================
# JSON documents
# =============================================================================

def _line_to_dict(
    line: Optional[DiffLine],
    segments: Optional[tuple[WordDiffSegment, ...]]
) -> Optional[dict]:
    if line is None:
        return None
    data = {
        'content': line.content,
        'left_line_num': line.left_line_num,
        'right_line_num': line.right_line_num,
    }
    if segments is not None:
        data['segments'] = [segment.to_dict() for segment in segments]
    return data


def line_pairs_to_dict(pairs: Sequence[LinePair]) -> dict:
    """JSON-ready document for side-by-side rows."""
    return {
        'pairs': [
            {
                'type': pair.pair_type.name.lower(),
                'left': _line_to_dict(pair.left_line, pair.left_word_diff),
                'right': _line_to_dict(pair.right_line, pair.right_word_diff),
            }
            for pair in pairs
        ]
    }


def three_way_to_dict(chunks: Sequence[ThreeWayChunk]) -> dict:
    """JSON-ready document for a three-way view."""
    return {
        'conflict_count': count_conflicts(chunks),
        'chunks': [chunk.to_dict() for chunk in chunks],
    }
