"""
Core data models for the review diff engine.

This module defines all data structures used across the package:
- Word diff models
- Hunk and side-by-side line models
- Conflict region and three-way chunk models

All models are designed to be:
- UI-agnostic (the rendering layer only reads them)
- Immutable (frozen dataclasses holding tuples)
- Type-hinted for IDE support
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, Union


# =============================================================================
# Enumerations
# =============================================================================

class SegmentType(Enum):
    """Classification of a word diff segment."""
    EQUAL = "equal"      # Text present on both sides
    CHANGED = "changed"  # Text present on this side only


class DiffLineType(Enum):
    """Type of line in a patch hunk."""
    CONTEXT = auto()  # Line exists in both files, identical
    ADDED = auto()    # Line exists only in right/new file
    REMOVED = auto()  # Line exists only in left/old file
    MODIFIED = auto()  # Removed/added pair shown side by side
    HEADER = auto()   # Hunk header line (@@ ... @@)


# =============================================================================
# Word Diff Models
# =============================================================================

@dataclass(frozen=True)
class WordDiffSegment:
    """
    A run of same-classification tokens on one side of a line pair.

    The unit the rendering layer styles: EQUAL in neutral colours,
    CHANGED highlighted.
    """
    text: str
    segment_type: SegmentType

    @property
    def is_changed(self) -> bool:
        return self.segment_type == SegmentType.CHANGED

    @property
    def length(self) -> int:
        return len(self.text)

    def to_dict(self) -> dict:
        return {'text': self.text, 'type': self.segment_type.value}


@dataclass(frozen=True)
class WordDiffResult:
    """
    Word-level diff of one old/new line pair.

    Concatenating either side's segments reproduces that side's line.
    """
    old_segments: tuple[WordDiffSegment, ...] = ()
    new_segments: tuple[WordDiffSegment, ...] = ()

    @property
    def old_text(self) -> str:
        return ''.join(s.text for s in self.old_segments)

    @property
    def new_text(self) -> str:
        return ''.join(s.text for s in self.new_segments)

    @property
    def has_equal(self) -> bool:
        """True if any text is shared between the two sides."""
        return any(not s.is_changed for s in self.old_segments)

    @property
    def has_changes(self) -> bool:
        return any(s.is_changed for s in self.old_segments + self.new_segments)

    @property
    def is_mixed(self) -> bool:
        """True if the lines share some text but not all of it."""
        return self.has_equal and self.has_changes

    def to_dict(self) -> dict:
        return {
            'old_segments': [s.to_dict() for s in self.old_segments],
            'new_segments': [s.to_dict() for s in self.new_segments],
        }


# =============================================================================
# Hunk Models
# =============================================================================

@dataclass(frozen=True)
class DiffLine:
    """
    A single line of a patch hunk.

    Line numbers are 1-indexed; a side's number is None when the
    line does not exist on that side.
    """
    line_type: DiffLineType
    content: str
    left_line_num: Optional[int] = None
    right_line_num: Optional[int] = None
    word_diff: Optional[tuple[WordDiffSegment, ...]] = None

    @property
    def has_word_diff(self) -> bool:
        return self.word_diff is not None and len(self.word_diff) > 0

    @property
    def line_number(self) -> Optional[int]:
        """Get the applicable display line number."""
        if self.line_type == DiffLineType.REMOVED:
            return self.left_line_num
        return self.right_line_num

    @property
    def prefix(self) -> str:
        """Get the unified diff prefix character."""
        prefixes = {
            DiffLineType.CONTEXT: ' ',
            DiffLineType.ADDED: '+',
            DiffLineType.REMOVED: '-',
            DiffLineType.MODIFIED: '!',
            DiffLineType.HEADER: '',
        }
        return prefixes.get(self.line_type, ' ')


@dataclass(frozen=True)
class DiffHunk:
    """
    A group of related changes (a "hunk" in unified diff terminology).
    """
    left_start: int       # Starting line number in left file (1-indexed)
    left_count: int       # Number of lines from left file
    right_start: int      # Starting line number in right file (1-indexed)
    right_count: int      # Number of lines from right file
    lines: tuple[DiffLine, ...] = ()
    section_header: str = ""  # Optional function/section name

    @property
    def header(self) -> str:
        """Generate unified diff hunk header."""
        base = f"@@ -{self.left_start},{self.left_count} +{self.right_start},{self.right_count} @@"
        if self.section_header:
            return f"{base} {self.section_header}"
        return base

    @property
    def change_count(self) -> int:
        """Count of added and removed lines."""
        return sum(1 for line in self.lines
                   if line.line_type in (DiffLineType.ADDED, DiffLineType.REMOVED))

    def iter_changes(self) -> Iterator[DiffLine]:
        """Iterate over only the changed lines."""
        for line in self.lines:
            if line.line_type in (DiffLineType.ADDED, DiffLineType.REMOVED):
                yield line


@dataclass(frozen=True)
class LinePair:
    """
    A pair of lines for side-by-side display.

    One side is None for unmatched additions/deletions and for
    header rows (which only use the left side).
    """
    left_line: Optional[DiffLine]
    right_line: Optional[DiffLine]
    pair_type: DiffLineType
    left_word_diff: Optional[tuple[WordDiffSegment, ...]] = None
    right_word_diff: Optional[tuple[WordDiffSegment, ...]] = None

    @property
    def is_different(self) -> bool:
        return self.pair_type in (
            DiffLineType.ADDED, DiffLineType.REMOVED, DiffLineType.MODIFIED
        )

    @property
    def left_content(self) -> str:
        return self.left_line.content if self.left_line else ""

    @property
    def right_content(self) -> str:
        return self.right_line.content if self.right_line else ""


# =============================================================================
# Conflict Models
# =============================================================================

@dataclass(frozen=True)
class ConflictRegion:
    """
    One conflict block found in a file.

    start_line and end_line are the 0-based indices of the opening
    <<<<<<< and closing >>>>>>> marker lines. Labels are the text after
    each marker and do not take part in equality.
    """
    ours: tuple[str, ...]
    base: tuple[str, ...]
    theirs: tuple[str, ...]
    start_line: int
    end_line: int
    ours_label: str = field(default="", compare=False)
    base_label: Optional[str] = field(default=None, compare=False)
    theirs_label: str = field(default="", compare=False)

    @property
    def has_base(self) -> bool:
        """True if a ||||||| section was present, even an empty one."""
        return self.base_label is not None

    @property
    def line_count(self) -> int:
        """Number of source lines spanned, markers included."""
        return self.end_line - self.start_line + 1

    def marker_lines(self) -> list[str]:
        """Rebuild the marker-delimited block this region was parsed from."""
        def marker(prefix: str, label: Optional[str]) -> str:
            return f"{prefix} {label}" if label else prefix

        lines = [marker('<' * 7, self.ours_label)]
        lines.extend(self.ours)
        if self.has_base:
            lines.append(marker('|' * 7, self.base_label))
            lines.extend(self.base)
        lines.append('=' * 7)
        lines.extend(self.theirs)
        lines.append(marker('>' * 7, self.theirs_label))
        return lines

    def to_dict(self) -> dict:
        return {
            'ours': list(self.ours),
            'base': list(self.base),
            'theirs': list(self.theirs),
            'start_line': self.start_line,
            'end_line': self.end_line,
            'ours_label': self.ours_label,
            'base_label': self.base_label,
            'theirs_label': self.theirs_label,
        }


@dataclass(frozen=True)
class CommonChunk:
    """A run of unconflicted lines."""
    lines: tuple[str, ...]

    @property
    def is_conflict(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {'type': 'common', 'lines': list(self.lines)}


@dataclass(frozen=True)
class ConflictChunk:
    """A single conflict region in chunk form."""
    region: ConflictRegion

    @property
    def is_conflict(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {'type': 'conflict', 'region': self.region.to_dict()}


ThreeWayChunk = Union[CommonChunk, ConflictChunk]


@dataclass(frozen=True)
class ThreeWayRow:
    """
    One row of an ours/base/theirs three-pane layout.

    conflict_index is the ordinal of the conflict the row belongs to,
    or None for common lines.
    """
    ours: str
    base: str
    theirs: str
    conflict_index: Optional[int] = None

    @property
    def is_conflict(self) -> bool:
        return self.conflict_index is not None
