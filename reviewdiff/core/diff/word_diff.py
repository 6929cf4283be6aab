"""
Word-level diff for a single pair of lines.

Explains why two versions of a line differ:
- Tokenize each line into words, whitespace runs and punctuation
- Align the token sequences with a longest-common-subsequence table
- Merge consecutive same-tag tokens into renderable segments
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from reviewdiff.core.models import (
    SegmentType,
    WordDiffResult,
    WordDiffSegment,
)

logger = logging.getLogger(__name__)

# Whitespace run, word run, or a single other character
TOKEN_PATTERN = re.compile(r'\s+|\w+|[^\s\w]')


@dataclass
class WordDiffOptions:
    """Options for word diff computation."""
    # Upper bound on LCS table cells after prefix/suffix trimming.
    # None means always compute the full alignment.
    max_alignment_cells: Optional[int] = None


def tokenize(line: str) -> list[str]:
    """
    Split a line into atomic tokens.

    Whitespace runs and word runs (letters, digits, underscore) are single
    tokens; every other character is a token of its own. Joining the
    tokens gives back the line.
    """
    return TOKEN_PATTERN.findall(line)


def align(
    old_tokens: Sequence[str],
    new_tokens: Sequence[str],
    options: Optional[WordDiffOptions] = None
) -> tuple[list[SegmentType], list[SegmentType]]:
    """
    Tag each token EQUAL or CHANGED using a minimal-edit alignment.

    Tokens that take part in a longest common subsequence are EQUAL.

    Returns:
        Tuple of (old_tags, new_tags), index-aligned with the inputs
    """
    options = options or WordDiffOptions()
    old_count = len(old_tokens)
    new_count = len(new_tokens)

    old_tags = [SegmentType.CHANGED] * old_count
    new_tags = [SegmentType.CHANGED] * new_count

    # Common prefix
    prefix = 0
    while (prefix < old_count and prefix < new_count and
           old_tokens[prefix] == new_tokens[prefix]):
        old_tags[prefix] = SegmentType.EQUAL
        new_tags[prefix] = SegmentType.EQUAL
        prefix += 1

    # Common suffix (never overlapping the prefix)
    suffix = 0
    while (suffix < old_count - prefix and suffix < new_count - prefix and
           old_tokens[old_count - 1 - suffix] == new_tokens[new_count - 1 - suffix]):
        old_tags[old_count - 1 - suffix] = SegmentType.EQUAL
        new_tags[new_count - 1 - suffix] = SegmentType.EQUAL
        suffix += 1

    old_middle = old_tokens[prefix:old_count - suffix]
    new_middle = new_tokens[prefix:new_count - suffix]

    if not old_middle or not new_middle:
        return old_tags, new_tags

    cells = (len(old_middle) + 1) * (len(new_middle) + 1)
    if options.max_alignment_cells is not None and cells > options.max_alignment_cells:
        logger.debug(
            "Alignment table of %d cells exceeds budget of %d, marking middle as changed",
            cells, options.max_alignment_cells
        )
        return old_tags, new_tags

    for i, j in _lcs_matches(old_middle, new_middle):
        old_tags[prefix + i] = SegmentType.EQUAL
        new_tags[prefix + j] = SegmentType.EQUAL

    return old_tags, new_tags


def _lcs_matches(
    old: Sequence[str],
    new: Sequence[str]
) -> list[tuple[int, int]]:
    """
    Find index pairs of a longest common subsequence.

    table[i][j] holds the LCS length of old[i:] and new[j:], so the
    forward walk from (0, 0) can pick matches in source order.
    """
    rows = len(old)
    cols = len(new)
    table = [[0] * (cols + 1) for _ in range(rows + 1)]

    for i in range(rows - 1, -1, -1):
        row = table[i]
        below = table[i + 1]
        token = old[i]
        for j in range(cols - 1, -1, -1):
            if token == new[j]:
                row[j] = below[j + 1] + 1
            elif below[j] >= row[j + 1]:
                row[j] = below[j]
            else:
                row[j] = row[j + 1]

    matches: list[tuple[int, int]] = []
    i = j = 0
    while i < rows and j < cols:
        if old[i] == new[j]:
            matches.append((i, j))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            i += 1
        else:
            j += 1

    return matches


def merge_segments(
    tokens: Sequence[str],
    tags: Sequence[SegmentType]
) -> tuple[WordDiffSegment, ...]:
    """Collapse consecutive same-tag tokens into segments."""
    segments: list[WordDiffSegment] = []
    buffer: list[str] = []
    current: Optional[SegmentType] = None

    for token, tag in zip(tokens, tags):
        if tag != current and buffer:
            segments.append(WordDiffSegment(''.join(buffer), current))
            buffer = []
        current = tag
        buffer.append(token)

    if buffer:
        segments.append(WordDiffSegment(''.join(buffer), current))

    return tuple(segments)


def compute_word_diff(
    old_line: str,
    new_line: str,
    options: Optional[WordDiffOptions] = None
) -> WordDiffResult:
    """
    Compute the word-level diff of an old/new line pair.

    Args:
        old_line: Line from the left/original version
        new_line: Line from the right/modified version
        options: Alignment options

    Returns:
        WordDiffResult with one segment list per side
    """
    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)

    old_tags, new_tags = align(old_tokens, new_tokens, options)

    return WordDiffResult(
        old_segments=merge_segments(old_tokens, old_tags),
        new_segments=merge_segments(new_tokens, new_tags),
    )
