"""
Diff module for line-pair comparison.

Provides:
- Word-level diff of a single old/new line pair
- Pairing of removed/added hunk lines with word diffs
- Unified diff hunk reading
"""

from reviewdiff.core.diff.word_diff import (
    WordDiffOptions,
    tokenize,
    align,
    merge_segments,
    compute_word_diff,
)
from reviewdiff.core.diff.line_pairing import (
    pair_word_diff,
    annotate_word_diffs,
    build_line_pairs,
    slice_segments,
    expand_tabs,
)
from reviewdiff.core.diff.patch import parse_hunks

__all__ = [
    # Word diff
    'WordDiffOptions',
    'tokenize',
    'align',
    'merge_segments',
    'compute_word_diff',
    # Line pairing
    'pair_word_diff',
    'annotate_word_diffs',
    'build_line_pairs',
    'slice_segments',
    'expand_tabs',
    # Patch reading
    'parse_hunks',
]
