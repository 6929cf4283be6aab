"""Tests for pairing removed and added lines."""

from reviewdiff.core.diff import (
    annotate_word_diffs,
    build_line_pairs,
    expand_tabs,
    pair_word_diff,
    parse_hunks,
    slice_segments,
)
from reviewdiff.core.models import DiffLine, DiffLineType, SegmentType, WordDiffSegment


def removed(text, number):
    return DiffLine(DiffLineType.REMOVED, text, left_line_num=number)


def added(text, number):
    return DiffLine(DiffLineType.ADDED, text, right_line_num=number)


def context(text, left, right):
    return DiffLine(DiffLineType.CONTEXT, text, left_line_num=left, right_line_num=right)


class TestPairWordDiff:
    """Tests for deciding when a word diff helps."""

    def test_mixed_pair_returns_diff(self):
        """Lines sharing some text get a word diff."""
        result = pair_word_diff('x = compute(a, b)', 'x = compute(a, c)')
        assert result is not None
        assert result.is_mixed

    def test_unrelated_pair_returns_none(self):
        """Lines with nothing in common fall back to whole-line highlighting."""
        assert pair_word_diff('hello', 'world') is None

    def test_pure_insertion_returns_diff(self):
        """Appending words keeps the shared prefix and highlights the addition."""
        result = pair_word_diff('foo', 'foo bar')
        assert result is not None
        assert result.new_segments == (
            WordDiffSegment('foo', SegmentType.EQUAL),
            WordDiffSegment(' bar', SegmentType.CHANGED),
        )

    def test_pure_deletion_returns_diff(self):
        """Removing words is mixed on the old side."""
        assert pair_word_diff('foo bar', 'foo') is not None

    def test_identical_pair_returns_none(self):
        """Identical lines have nothing to highlight."""
        assert pair_word_diff('same', 'same') is None

    def test_only_mixed_disabled(self):
        """Without the mixed filter every pair gets a diff."""
        result = pair_word_diff('hello', 'world', only_mixed=False)
        assert result is not None
        assert result.old_segments == (WordDiffSegment('hello', SegmentType.CHANGED),)


class TestAnnotateWordDiffs:
    """Tests for attaching word diffs in unified layout."""

    def test_removed_then_added_run_is_paired(self):
        """Positional pairs of a removed/added run carry segments."""
        lines = [
            context('import os', 1, 1),
            removed('x = compute(a, b)', 2),
            added('x = compute(a, c)', 2),
            context('print(x)', 3, 3),
        ]
        result = annotate_word_diffs(lines)
        assert result[0] == lines[0]
        assert result[3] == lines[3]
        assert result[1].has_word_diff
        assert result[2].has_word_diff
        assert ''.join(s.text for s in result[1].word_diff) == 'x = compute(a, b)'
        assert [s.text for s in result[2].word_diff if s.is_changed] == ['c']

    def test_surplus_lines_untouched(self):
        """Extra removed lines beyond the added run keep no word diff."""
        lines = [
            removed('value = 1', 1),
            removed('other = 2', 2),
            added('value = 10', 1),
        ]
        result = annotate_word_diffs(lines)
        assert result[0].has_word_diff
        assert not result[1].has_word_diff
        assert result[2].has_word_diff

    def test_added_before_removed_is_not_paired(self):
        """Only removed-then-added order forms a pair."""
        lines = [added('a = 1', 1), removed('a = 2', 1)]
        result = annotate_word_diffs(lines)
        assert result == lines

    def test_input_not_mutated(self):
        """Annotation returns new records."""
        lines = [removed('a = 1', 1), added('a = 2', 1)]
        annotate_word_diffs(lines)
        assert lines[0].word_diff is None


class TestBuildLinePairs:
    """Tests for side-by-side rows."""

    def test_rows_from_patch(self, sample_patch):
        """Headers, context and paired changes become rows in order."""
        pairs = build_line_pairs(parse_hunks(sample_patch))
        types = [pair.pair_type for pair in pairs]
        assert types == [
            DiffLineType.HEADER,
            DiffLineType.CONTEXT,
            DiffLineType.MODIFIED,
            DiffLineType.CONTEXT,
            DiffLineType.HEADER,
            DiffLineType.CONTEXT,
            DiffLineType.ADDED,
            DiffLineType.CONTEXT,
        ]

    def test_modified_row_has_word_diff(self, sample_patch):
        """A paired change carries segments on both sides."""
        pairs = build_line_pairs(parse_hunks(sample_patch))
        modified = pairs[2]
        assert modified.left_content == 'x = compute(a, b)'
        assert modified.right_content == 'x = compute(a, c)'
        assert [s.text for s in modified.left_word_diff if s.is_changed] == ['b']
        assert [s.text for s in modified.right_word_diff if s.is_changed] == ['c']
        assert modified.is_different

    def test_added_row_has_empty_left(self, sample_patch):
        """Unmatched additions have no left side."""
        pairs = build_line_pairs(parse_hunks(sample_patch))
        added_row = pairs[6]
        assert added_row.left_line is None
        assert added_row.right_content == '# done'
        assert added_row.right_word_diff is None

    def test_context_row_shares_line(self, sample_patch):
        """Context rows show the same line on both sides."""
        pairs = build_line_pairs(parse_hunks(sample_patch))
        row = pairs[1]
        assert row.left_line is row.right_line
        assert row.left_line.left_line_num == 1
        assert not row.is_different

    def test_header_row_uses_left_only(self, sample_patch):
        """Header rows keep the raw header text on the left."""
        pairs = build_line_pairs(parse_hunks(sample_patch))
        assert pairs[0].left_content == '@@ -1,3 +1,3 @@ def main():'
        assert pairs[0].right_line is None

    def test_unequal_runs_are_zipped(self):
        """Two removals against one addition give one modified and one removed row."""
        hunks = parse_hunks('\n'.join([
            '@@ -1,2 +1,1 @@',
            '-first = 1',
            '-second = 2',
            '+first = 3',
        ]))
        pairs = build_line_pairs(hunks)
        assert [p.pair_type for p in pairs[1:]] == [DiffLineType.MODIFIED, DiffLineType.REMOVED]
        assert pairs[2].right_line is None

    def test_no_hunks(self):
        """No hunks, no rows."""
        assert build_line_pairs([]) == []


class TestSliceSegments:
    """Tests for clipping segments to a viewport."""

    SEGMENTS = (
        WordDiffSegment('abc', SegmentType.EQUAL),
        WordDiffSegment('def', SegmentType.CHANGED),
        WordDiffSegment('ghi', SegmentType.EQUAL),
    )

    def test_window_inside_one_segment(self):
        """A window within one segment yields one slice."""
        assert slice_segments(self.SEGMENTS, 4, 1) == (
            WordDiffSegment('e', SegmentType.CHANGED),
        )

    def test_window_across_segments(self):
        """Types are kept across segment boundaries."""
        assert slice_segments(self.SEGMENTS, 2, 5) == (
            WordDiffSegment('c', SegmentType.EQUAL),
            WordDiffSegment('def', SegmentType.CHANGED),
            WordDiffSegment('g', SegmentType.EQUAL),
        )

    def test_window_past_end(self):
        """Windows beyond the text are empty."""
        assert slice_segments(self.SEGMENTS, 20, 5) == ()

    def test_zero_width(self):
        """A zero-width window is empty."""
        assert slice_segments(self.SEGMENTS, 0, 0) == ()


class TestExpandTabs:
    """Tests for tab expansion."""

    def test_tab_stops(self):
        """Tabs advance to the next multiple of the tab size."""
        assert expand_tabs('a\tb', 4) == 'a   b'
        assert expand_tabs('\tx', 2) == '  x'

    def test_no_tabs_unchanged(self):
        """Text without tabs is returned as is."""
        assert expand_tabs('plain') == 'plain'
