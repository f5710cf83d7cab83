"""
Diff ingestion and line alignment.

Usage:
    from splitdiff.diff import parse_unified_diff, align_file

    for file_diff in parse_unified_diff(raw_diff):
        diff_file = align_file(file_diff.filename, old_text, new_text, file_diff.hunks)
        for line in diff_file.lines:
            print(line.left_number, line.right_number, line.state.value)
"""

from splitdiff.diff.alignment import (
    AlignmentError,
    MatchStrategy,
    align_file,
    align_hunk_lines,
    align_lines,
    check_alignment,
    find_greedy_pairs,
    split_lines,
)
from splitdiff.diff.models import (
    DiffFile,
    DiffLine,
    FileDiff,
    Hunk,
    HunkLine,
    LineState,
)
from splitdiff.diff.parser import parse_hunk_header, parse_hunks, parse_unified_diff

__all__ = [
    # Models
    "DiffFile",
    "DiffLine",
    "FileDiff",
    "Hunk",
    "HunkLine",
    "LineState",
    # Parser
    "parse_hunk_header",
    "parse_hunks",
    "parse_unified_diff",
    # Alignment
    "AlignmentError",
    "MatchStrategy",
    "align_file",
    "align_hunk_lines",
    "align_lines",
    "check_alignment",
    "find_greedy_pairs",
    "split_lines",
]
