"""
Line alignment engine.

Re-projects an already computed unified diff onto the complete old and new
file contents, producing one gap-free sequence of DiffLine pairs for the
whole file: untouched regions between hunks are reconstructed as NORMAL
lines, and each hunk's old/new sub-ranges are paired up by content.

Match Strategies:
    - SEQUENCE: longest-common-subsequence alignment of the hunk sub-ranges
      (difflib.SequenceMatcher on whitespace-stripped lines). Replaced blocks
      are paired positionally as MODIFIED lines.
    - GREEDY: for each old line, link the first not-yet-linked new line with
      equal stripped content. Not order-aware, so duplicate lines inside one
      hunk can be attributed to the wrong partner.

Whatever the input, every old line number 1..N_old and every new line number
1..N_new appears exactly once and in order; out-of-range or overlapping hunks
are clamped rather than rejected.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from enum import Enum
from typing import Iterable, Sequence

from splitdiff.diff.models import DiffFile, DiffLine, FileDiff, Hunk, LineState
from splitdiff.logging import get_logger

logger = get_logger(__name__)


class MatchStrategy(Enum):
    """How old and new lines inside a hunk are linked."""

    SEQUENCE = "sequence"
    GREEDY = "greedy"


class AlignmentError(ValueError):
    """Raised by check_alignment() when a sequence breaks a DiffLine invariant."""


def split_lines(text: str) -> list[str]:
    """Split file content into lines the way diff counts them.

    A trailing newline does not start an extra empty line, and a trailing
    carriage return is dropped from each line.

    Args:
        text: Whole file content.

    Returns:
        The file's lines; empty for empty content.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def find_greedy_pairs(old_lines: Sequence[str], new_lines: Sequence[str]) -> dict[int, int]:
    """Link old lines to new lines with equal stripped content.

    Each old line takes the first new line that matches and is not already
    linked. Positional order is not enforced.

    Args:
        old_lines: Old side of one hunk.
        new_lines: New side of one hunk.

    Returns:
        Map from old sub-range index to new sub-range index.
    """
    pairs: dict[int, int] = {}
    linked: set[int] = set()
    stripped_new = [line.strip() for line in new_lines]

    for i, old_line in enumerate(old_lines):
        key = old_line.strip()
        for j, candidate in enumerate(stripped_new):
            if j not in linked and candidate == key:
                pairs[i] = j
                linked.add(j)
                break
    return pairs


class _Aligner:
    """Emits DiffLines while walking both files with two cursors."""

    def __init__(
        self, old_lines: Sequence[str], new_lines: Sequence[str], strategy: MatchStrategy
    ) -> None:
        self.old_lines = old_lines
        self.new_lines = new_lines
        self.strategy = strategy
        self.old_idx = 0
        self.new_idx = 0
        self.lines: list[DiffLine] = []

    def _pair(self, i: int, j: int) -> None:
        self.lines.append(
            DiffLine.paired(i + 1, j + 1, self.old_lines[i], self.new_lines[j])
        )

    def _removed(self, i: int) -> None:
        self.lines.append(DiffLine.removed(i + 1, self.old_lines[i]))

    def _added(self, j: int) -> None:
        self.lines.append(DiffLine.added(j + 1, self.new_lines[j]))

    def catch_up(self, old_target: int, new_target: int) -> None:
        """Emit untouched lines until both cursors reach their targets.

        Both cursors advance together; if the gaps differ in length (an
        inconsistent diff) the surplus is emitted one-sided.
        """
        while self.old_idx < old_target and self.new_idx < new_target:
            self._pair(self.old_idx, self.new_idx)
            self.old_idx += 1
            self.new_idx += 1
        while self.old_idx < old_target:
            self._removed(self.old_idx)
            self.old_idx += 1
        while self.new_idx < new_target:
            self._added(self.new_idx)
            self.new_idx += 1

    def add_hunk(self, hunk: Hunk) -> None:
        n_old = len(self.old_lines)
        n_new = len(self.new_lines)

        old_begin = min(max(hunk.old_begin, self.old_idx), n_old)
        new_begin = min(max(hunk.new_begin, self.new_idx), n_new)
        old_end = min(max(hunk.old_end, old_begin), n_old)
        new_end = min(max(hunk.new_end, new_begin), n_new)

        if (old_begin, old_end, new_begin, new_end) != (
            hunk.old_begin,
            hunk.old_end,
            hunk.new_begin,
            hunk.new_end,
        ):
            logger.debug("Clamped hunk %r to the available content", hunk.header)

        self.catch_up(old_begin, new_begin)

        if self.strategy is MatchStrategy.GREEDY:
            self._walk_greedy(old_begin, old_end, new_begin, new_end)
        else:
            self._walk_sequence(old_begin, old_end, new_begin, new_end)

        self.old_idx = old_end
        self.new_idx = new_end

    def _walk_greedy(self, old_begin: int, old_end: int, new_begin: int, new_end: int) -> None:
        pairs = find_greedy_pairs(
            self.old_lines[old_begin:old_end], self.new_lines[new_begin:new_end]
        )
        new_to_old = {new: old for old, new in pairs.items()}

        i, j = old_begin, new_begin
        while i < old_end or j < new_end:
            if i < old_end and j < new_end and pairs.get(i - old_begin) == j - new_begin:
                self._pair(i, j)
                i += 1
                j += 1
            elif j < new_end and new_to_old.get(j - new_begin, -1) < i - old_begin:
                # Unlinked, or its partner was already emitted as removed
                self._added(j)
                j += 1
            else:
                self._removed(i)
                i += 1

    def _walk_sequence(
        self, old_begin: int, old_end: int, new_begin: int, new_end: int
    ) -> None:
        old_keys = [line.strip() for line in self.old_lines[old_begin:old_end]]
        new_keys = [line.strip() for line in self.new_lines[new_begin:new_end]]
        matcher = SequenceMatcher(None, old_keys, new_keys, autojunk=False)

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            i1 += old_begin
            i2 += old_begin
            j1 += new_begin
            j2 += new_begin
            if tag == "equal":
                for offset in range(i2 - i1):
                    self._pair(i1 + offset, j1 + offset)
            elif tag == "replace":
                common = min(i2 - i1, j2 - j1)
                for offset in range(common):
                    self._pair(i1 + offset, j1 + offset)
                for i in range(i1 + common, i2):
                    self._removed(i)
                for j in range(j1 + common, j2):
                    self._added(j)
            elif tag == "delete":
                for i in range(i1, i2):
                    self._removed(i)
            elif tag == "insert":
                for j in range(j1, j2):
                    self._added(j)

    def finish(self) -> list[DiffLine]:
        self.catch_up(len(self.old_lines), len(self.new_lines))
        return self.lines


def align_lines(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    hunks: Iterable[Hunk],
    strategy: MatchStrategy = MatchStrategy.SEQUENCE,
) -> list[DiffLine]:
    """Align two line lists using the hunks of their diff.

    Args:
        old_lines: Complete old file, one entry per line.
        new_lines: Complete new file, one entry per line.
        hunks: Hunks of the diff between them, in header order.
        strategy: How lines inside a hunk are linked.

    Returns:
        The gap-free aligned sequence.
    """
    aligner = _Aligner(old_lines, new_lines, strategy)
    for hunk in hunks:
        aligner.add_hunk(hunk)
    return aligner.finish()


def align_file(
    filename: str,
    old_text: str,
    new_text: str,
    hunks: Iterable[Hunk],
    strategy: MatchStrategy = MatchStrategy.SEQUENCE,
) -> DiffFile:
    """Build the whole-file alignment for one changed path.

    Args:
        filename: Path shown in the file selector.
        old_text: Content before the change ("" if unavailable).
        new_text: Content after the change ("" if unavailable).
        hunks: Hunks parsed from the path's diff.
        strategy: How lines inside a hunk are linked.

    Returns:
        An immutable DiffFile.

    Examples:
        >>> hunks = parse_hunks("@@ -2 +2 @@\\n-b\\n+x\\n")
        >>> [l.state.value for l in align_file("f", "a\\nb\\nc\\n", "a\\nx\\nc\\n", hunks).lines]
        ['normal', 'modified', 'normal']
    """
    lines = align_lines(split_lines(old_text), split_lines(new_text), hunks, strategy)
    return DiffFile(filename=filename, lines=tuple(lines))


def align_hunk_lines(file_diff: FileDiff) -> DiffFile:
    """Project raw hunk lines into pairs without the full file contents.

    Context lines become NORMAL; a run of removed lines followed by a run of
    added lines is paired positionally. Numbers come from the hunk headers,
    so the result only covers the hunks and is not gap-free.

    Args:
        file_diff: Parser output for one file.

    Returns:
        A DiffFile covering only the hunk regions.
    """
    lines: list[DiffLine] = []

    for hunk in file_diff.hunks:
        old_no = hunk.old_begin + 1
        new_no = hunk.new_begin + 1
        removed: list[str] = []
        added: list[str] = []

        def flush() -> None:
            nonlocal old_no, new_no
            common = min(len(removed), len(added))
            for k in range(common):
                lines.append(DiffLine.paired(old_no, new_no, removed[k], added[k]))
                old_no += 1
                new_no += 1
            for content in removed[common:]:
                lines.append(DiffLine.removed(old_no, content))
                old_no += 1
            for content in added[common:]:
                lines.append(DiffLine.added(new_no, content))
                new_no += 1
            removed.clear()
            added.clear()

        for hunk_line in hunk.lines:
            if hunk_line.kind == "-":
                if added:
                    flush()
                removed.append(hunk_line.content)
            elif hunk_line.kind == "+":
                added.append(hunk_line.content)
            else:
                flush()
                lines.append(DiffLine.normal(old_no, new_no, hunk_line.content))
                old_no += 1
                new_no += 1
        flush()

    return DiffFile(filename=file_diff.filename, lines=tuple(lines))


def check_alignment(lines: Sequence[DiffLine], old_count: int, new_count: int) -> None:
    """Verify that an aligned sequence honours the DiffLine invariants.

    Args:
        lines: The aligned sequence.
        old_count: Number of lines in the old file.
        new_count: Number of lines in the new file.

    Raises:
        AlignmentError: Describing the first violation found.
    """
    expected_left = 1
    expected_right = 1

    for index, line in enumerate(lines):
        if not line.has_left and not line.has_right:
            raise AlignmentError(f"row {index}: no line number on either side")

        if line.state is LineState.NORMAL:
            if not (line.has_left and line.has_right):
                raise AlignmentError(f"row {index}: normal line missing a side")
            if line.left_content != line.right_content:
                raise AlignmentError(f"row {index}: normal line with differing content")
        elif line.state is LineState.ADDED:
            if line.has_left or not line.has_right:
                raise AlignmentError(f"row {index}: added line must be right-only")
        elif line.state is LineState.REMOVED:
            if line.has_right or not line.has_left:
                raise AlignmentError(f"row {index}: removed line must be left-only")
        elif line.state is LineState.MODIFIED:
            if not (line.has_left and line.has_right):
                raise AlignmentError(f"row {index}: modified line missing a side")
            if line.left_content == line.right_content:
                raise AlignmentError(f"row {index}: modified line with equal content")

        if line.has_left:
            if line.left_number != expected_left:
                raise AlignmentError(
                    f"row {index}: left number {line.left_number}, expected {expected_left}"
                )
            expected_left += 1
        if line.has_right:
            if line.right_number != expected_right:
                raise AlignmentError(
                    f"row {index}: right number {line.right_number}, expected {expected_right}"
                )
            expected_right += 1

    if expected_left - 1 != old_count:
        raise AlignmentError(f"covered {expected_left - 1} old lines of {old_count}")
    if expected_right - 1 != new_count:
        raise AlignmentError(f"covered {expected_right - 1} new lines of {new_count}")
