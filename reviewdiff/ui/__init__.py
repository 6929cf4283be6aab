"""
Terminal presentation of diff and conflict models.
"""

from reviewdiff.ui.terminal import (
    TerminalColors,
    TextRenderer,
    render_segments,
    line_pairs_to_dict,
    three_way_to_dict,
)

__all__ = [
    'TerminalColors',
    'TextRenderer',
    'render_segments',
    'line_pairs_to_dict',
    'three_way_to_dict',
]
