"""
Reader for unified diff hunks.

Turns an externally produced patch into DiffHunk records so word
diffs can be attached to its removed/added line pairs.
"""

from __future__ import annotations

import re

from reviewdiff.core.models import DiffHunk, DiffLine, DiffLineType


HUNK_HEADER = re.compile(r'^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@(.*)$')


def parse_hunks(patch_text: str) -> list[DiffHunk]:
    """
    Parse the hunks of a unified diff.

    Hunk bodies are bounded by the counts in their header, so file
    headers (---/+++), git metadata and "\\ No newline" notes between
    hunks are skipped while body lines starting with "++" or "--" are
    still read as content.

    Returns:
        Hunks in patch order; each hunk's first line is its HEADER line
    """
    hunks: list[DiffHunk] = []
    lines: list[DiffLine] = []
    header = None
    left_num = right_num = 0
    left_left = right_left = 0

    def flush() -> None:
        if header is not None:
            hunks.append(DiffHunk(
                left_start=header[0],
                left_count=header[1],
                right_start=header[2],
                right_count=header[3],
                lines=tuple(lines),
                section_header=header[4]
            ))

    for raw in patch_text.split('\n'):
        raw = raw.rstrip('\r')

        if left_left > 0 or right_left > 0:
            if raw.startswith('\\'):
                continue
            if raw.startswith('+') and right_left > 0:
                lines.append(DiffLine(
                    line_type=DiffLineType.ADDED,
                    content=raw[1:],
                    right_line_num=right_num
                ))
                right_num += 1
                right_left -= 1
                continue
            if raw.startswith('-') and left_left > 0:
                lines.append(DiffLine(
                    line_type=DiffLineType.REMOVED,
                    content=raw[1:],
                    left_line_num=left_num
                ))
                left_num += 1
                left_left -= 1
                continue
            if (raw.startswith(' ') or raw == '') and left_left > 0 and right_left > 0:
                lines.append(DiffLine(
                    line_type=DiffLineType.CONTEXT,
                    content=raw[1:],
                    left_line_num=left_num,
                    right_line_num=right_num
                ))
                left_num += 1
                right_num += 1
                left_left -= 1
                right_left -= 1
                continue
            # Truncated hunk: close it and rescan this line as a header
            left_left = right_left = 0

        match = HUNK_HEADER.match(raw)
        if match:
            flush()
            left_num = int(match.group(1))
            right_num = int(match.group(3))
            left_left = int(match.group(2)) if match.group(2) is not None else 1
            right_left = int(match.group(4)) if match.group(4) is not None else 1
            header = (left_num, left_left, right_num, right_left,
                      match.group(5).strip())
            lines = [DiffLine(line_type=DiffLineType.HEADER, content=raw)]

    flush()
    return hunks
