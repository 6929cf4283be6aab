"""
Parser for git-style conflict markers.

Scans file content for blocks of the form:

    <<<<<<< ours-label
    ...
    ||||||| base-label      (optional, diff3 style)
    ...
    =======
    ...
    >>>>>>> theirs-label

and returns one ConflictRegion per block, in source order.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Optional

from reviewdiff.core.models import ConflictRegion

logger = logging.getLogger(__name__)


class ParserState(Enum):
    """Where the parser is relative to a conflict block."""
    OUTSIDE = auto()
    IN_OURS = auto()
    IN_BASE = auto()
    IN_THEIRS = auto()


class MarkerKind(Enum):
    """Classification of a single line."""
    OPEN = auto()       # <<<<<<< label
    BASE = auto()       # ||||||| label
    SEPARATOR = auto()  # =======
    CLOSE = auto()      # >>>>>>> label
    CONTENT = auto()    # anything else


class ConflictMarkerParser:
    """Parse conflict markers with an explicit state machine."""

    MARKER_OPEN = '<' * 7
    MARKER_BASE = '|' * 7
    MARKER_SEP = '=' * 7
    MARKER_CLOSE = '>' * 7

    # (state, marker) -> next state. Pairs not listed are content lines
    # of the current side (or ignored when OUTSIDE).
    TRANSITIONS: dict[tuple[ParserState, MarkerKind], ParserState] = {
        (ParserState.OUTSIDE, MarkerKind.OPEN): ParserState.IN_OURS,
        (ParserState.IN_OURS, MarkerKind.BASE): ParserState.IN_BASE,
        (ParserState.IN_OURS, MarkerKind.SEPARATOR): ParserState.IN_THEIRS,
        (ParserState.IN_BASE, MarkerKind.SEPARATOR): ParserState.IN_THEIRS,
        (ParserState.IN_THEIRS, MarkerKind.CLOSE): ParserState.OUTSIDE,
    }

    @classmethod
    def classify(cls, line: str) -> MarkerKind:
        """Classify a line by its marker prefix."""
        if line.startswith(cls.MARKER_OPEN):
            return MarkerKind.OPEN
        if line.startswith(cls.MARKER_BASE):
            return MarkerKind.BASE
        if line == cls.MARKER_SEP:
            return MarkerKind.SEPARATOR
        if line.startswith(cls.MARKER_CLOSE):
            return MarkerKind.CLOSE
        return MarkerKind.CONTENT

    @classmethod
    def has_conflict_markers(cls, content: str) -> bool:
        """Check if content contains at least one complete conflict block."""
        return len(cls.parse(content)) > 0

    @classmethod
    def parse(cls, content: str) -> list[ConflictRegion]:
        """
        Parse conflict regions from content.

        A block still open at end of input is discarded, so its lines
        are treated as ordinary content by callers that rebuild the file.
        """
        regions: list[ConflictRegion] = []
        if not content:
            return regions

        state = ParserState.OUTSIDE
        sides: dict[ParserState, list[str]] = {}
        start_line = 0
        ours_label = ""
        base_label: Optional[str] = None

        for index, line in enumerate(content.split('\n')):
            kind = cls.classify(line)
            next_state = cls.TRANSITIONS.get((state, kind))

            if next_state is None:
                if state != ParserState.OUTSIDE:
                    sides[state].append(line)
                continue

            if next_state == ParserState.IN_OURS:
                sides = {
                    ParserState.IN_OURS: [],
                    ParserState.IN_BASE: [],
                    ParserState.IN_THEIRS: [],
                }
                start_line = index
                ours_label = cls._label(line)
                base_label = None
            elif next_state == ParserState.IN_BASE:
                base_label = cls._label(line)
            elif next_state == ParserState.OUTSIDE:
                regions.append(ConflictRegion(
                    ours=tuple(sides[ParserState.IN_OURS]),
                    base=tuple(sides[ParserState.IN_BASE]),
                    theirs=tuple(sides[ParserState.IN_THEIRS]),
                    start_line=start_line,
                    end_line=index,
                    ours_label=ours_label,
                    base_label=base_label,
                    theirs_label=cls._label(line)
                ))

            state = next_state

        if state != ParserState.OUTSIDE:
            logger.debug(
                "Unterminated conflict block opened at line %d, treating as content",
                start_line
            )

        return regions

    @staticmethod
    def _label(line: str) -> str:
        """Text following a 7-character marker."""
        return line[7:].strip()


def parse_conflict_markers(content: str) -> list[ConflictRegion]:
    """Parse all complete conflict regions in content, in source order."""
    return ConflictMarkerParser.parse(content)


def has_conflict_markers(content: str) -> bool:
    """Check if content contains at least one complete conflict block."""
    return ConflictMarkerParser.has_conflict_markers(content)
