"""
Pairing of removed/added hunk lines for word-level highlighting.

The line-level diff comes from a patch; this module decides which
removed and added lines are versions of each other and attaches
their word diffs, for both unified and side-by-side layouts.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from reviewdiff.core.diff.word_diff import WordDiffOptions, compute_word_diff
from reviewdiff.core.models import (
    DiffHunk,
    DiffLine,
    DiffLineType,
    LinePair,
    WordDiffResult,
    WordDiffSegment,
)


def pair_word_diff(
    old_line: str,
    new_line: str,
    options: Optional[WordDiffOptions] = None,
    only_mixed: bool = True
) -> Optional[WordDiffResult]:
    """
    Word diff of a removed/added pair, or None when it would not help.

    With only_mixed, lines with nothing in common (or nothing changed)
    return None so they are shown with whole-line highlighting.
    """
    result = compute_word_diff(old_line, new_line, options)
    if result.is_mixed or not only_mixed:
        return result
    return None


def annotate_word_diffs(
    lines: Sequence[DiffLine],
    options: Optional[WordDiffOptions] = None,
    only_mixed: bool = True
) -> list[DiffLine]:
    """
    Attach word diffs to removed lines that are followed by added lines.

    Each run of REMOVED lines immediately followed by a run of ADDED
    lines is paired positionally; surplus lines on the longer side are
    left as they are.
    """
    result = list(lines)

    i = 0
    while i < len(result):
        removed_start = i
        while i < len(result) and result[i].line_type == DiffLineType.REMOVED:
            i += 1
        removed_end = i

        added_start = i
        while i < len(result) and result[i].line_type == DiffLineType.ADDED:
            i += 1
        added_end = i

        pair_count = min(removed_end - removed_start, added_end - added_start)
        for offset in range(pair_count):
            removed = result[removed_start + offset]
            added = result[added_start + offset]
            diff = pair_word_diff(removed.content, added.content, options, only_mixed)
            if diff is not None:
                result[removed_start + offset] = replace(removed, word_diff=diff.old_segments)
                result[added_start + offset] = replace(added, word_diff=diff.new_segments)

        if removed_start == removed_end and added_start == added_end:
            i += 1

    return result


def build_line_pairs(
    hunks: Sequence[DiffHunk],
    options: Optional[WordDiffOptions] = None,
    only_mixed: bool = True
) -> list[LinePair]:
    """
    Build side-by-side rows from hunks.

    Context lines appear on both sides. Pending removed/added lines are
    zipped together when a context or header line (or the hunk end) is
    reached; unmatched lines get an empty opposite side.
    """
    pairs: list[LinePair] = []

    for hunk in hunks:
        pending_removed: list[DiffLine] = []
        pending_added: list[DiffLine] = []

        def flush_pending() -> None:
            for offset in range(max(len(pending_removed), len(pending_added))):
                left = pending_removed[offset] if offset < len(pending_removed) else None
                right = pending_added[offset] if offset < len(pending_added) else None

                left_diff = right_diff = None
                if left is not None and right is not None:
                    diff = pair_word_diff(left.content, right.content, options, only_mixed)
                    if diff is not None:
                        left_diff = diff.old_segments
                        right_diff = diff.new_segments

                if left is not None and right is not None:
                    pair_type = DiffLineType.MODIFIED
                elif left is not None:
                    pair_type = DiffLineType.REMOVED
                else:
                    pair_type = DiffLineType.ADDED

                pairs.append(LinePair(
                    left_line=left,
                    right_line=right,
                    pair_type=pair_type,
                    left_word_diff=left_diff,
                    right_word_diff=right_diff
                ))
            pending_removed.clear()
            pending_added.clear()

        for line in hunk.lines:
            if line.line_type == DiffLineType.HEADER:
                flush_pending()
                pairs.append(LinePair(
                    left_line=line,
                    right_line=None,
                    pair_type=DiffLineType.HEADER
                ))
            elif line.line_type == DiffLineType.REMOVED:
                pending_removed.append(line)
            elif line.line_type == DiffLineType.ADDED:
                pending_added.append(line)
            else:
                flush_pending()
                pairs.append(LinePair(
                    left_line=line,
                    right_line=line,
                    pair_type=DiffLineType.CONTEXT
                ))

        flush_pending()

    return pairs


def slice_segments(
    segments: Sequence[WordDiffSegment],
    offset: int,
    width: int
) -> tuple[WordDiffSegment, ...]:
    """
    Clip segments to the visible columns [offset, offset + width).

    Segment types are kept; segments that fall entirely outside the
    window are dropped.
    """
    result: list[WordDiffSegment] = []
    pos = 0
    end = offset + width

    for segment in segments:
        segment_end = pos + len(segment.text)
        if segment_end <= offset:
            pos = segment_end
            continue
        if pos >= end:
            break

        start = max(0, offset - pos)
        stop = min(len(segment.text), end - pos)
        text = segment.text[start:stop]
        if text:
            result.append(WordDiffSegment(text, segment.segment_type))
        pos = segment_end

    return tuple(result)


def expand_tabs(text: str, tab_size: int = 4) -> str:
    """Expand tabs to tab stops so character count matches columns."""
    if '\t' not in text:
        return text
    return text.expandtabs(tab_size)
