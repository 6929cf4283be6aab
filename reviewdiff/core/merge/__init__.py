"""
Merge module for conflict-marked files.
"""

from reviewdiff.core.merge.conflict_markers import (
    ConflictMarkerParser,
    parse_conflict_markers,
    has_conflict_markers,
)
from reviewdiff.core.merge.three_way import (
    ConflictNavigator,
    build_three_way_view,
    count_conflicts,
    conflict_regions,
    conflict_index_at,
    flatten_chunks,
    three_way_rows,
)

__all__ = [
    'ConflictMarkerParser',
    'parse_conflict_markers',
    'has_conflict_markers',
    'ConflictNavigator',
    'build_three_way_view',
    'count_conflicts',
    'conflict_regions',
    'conflict_index_at',
    'flatten_chunks',
    'three_way_rows',
]
