"""
Data model for parsed and aligned diffs.

Two layers are represented here:

    - Parser output: FileDiff -> Hunk -> HunkLine, a faithful projection of
      the unified diff text.
    - Alignment output: DiffFile -> DiffLine, one gap-free sequence of
      classified line pairs covering the whole file.

Line States:
    - NORMAL: identical on both sides
    - ADDED: only present in the new file
    - REMOVED: only present in the old file
    - MODIFIED: present on both sides with differing content
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class LineState(Enum):
    """Classification of one aligned line pair."""

    NORMAL = "normal"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"

    @property
    def css_class(self) -> str:
        """Return the presentation class used to tint rows of this state."""
        return _CSS_CLASSES[self]


_CSS_CLASSES = {
    LineState.NORMAL: "diff-unchanged",
    LineState.ADDED: "diff-added",
    LineState.REMOVED: "diff-removed",
    LineState.MODIFIED: "diff-changed",
}


@dataclass(frozen=True)
class DiffLine:
    """One row of the aligned sequence.

    Line numbers are 1-based. A missing side has no number and empty content.
    Use the classmethod constructors rather than building instances by hand;
    they keep the state consistent with which sides are present.

    Attributes:
        left_number: Line number in the old file, None for a pure insertion.
        right_number: Line number in the new file, None for a pure deletion.
        left_content: Old line text ("" when absent).
        right_content: New line text ("" when absent).
        state: The change classification.
    """

    left_number: int | None
    right_number: int | None
    left_content: str
    right_content: str
    state: LineState

    @classmethod
    def normal(cls, left_number: int, right_number: int, content: str) -> DiffLine:
        return cls(left_number, right_number, content, content, LineState.NORMAL)

    @classmethod
    def added(cls, right_number: int, content: str) -> DiffLine:
        return cls(None, right_number, "", content, LineState.ADDED)

    @classmethod
    def removed(cls, left_number: int, content: str) -> DiffLine:
        return cls(left_number, None, content, "", LineState.REMOVED)

    @classmethod
    def modified(
        cls, left_number: int, right_number: int, left_content: str, right_content: str
    ) -> DiffLine:
        return cls(
            left_number, right_number, left_content, right_content, LineState.MODIFIED
        )

    @classmethod
    def paired(
        cls, left_number: int, right_number: int, left_content: str, right_content: str
    ) -> DiffLine:
        """Build a two-sided line, NORMAL when identical and MODIFIED otherwise."""
        if left_content == right_content:
            return cls.normal(left_number, right_number, left_content)
        return cls.modified(left_number, right_number, left_content, right_content)

    @property
    def has_left(self) -> bool:
        return self.left_number is not None

    @property
    def has_right(self) -> bool:
        return self.right_number is not None


@dataclass(frozen=True)
class HunkLine:
    """A raw line inside a hunk, tagged by its leading marker ('+', '-', ' ')."""

    kind: str
    content: str


@dataclass
class Hunk:
    """A contiguous block of a unified diff.

    Attributes:
        header: The raw '@@ ... @@' line.
        old_start: 1-based first old line (or the line before an empty range).
        old_count: Number of old lines covered.
        new_start: 1-based first new line (or the line before an empty range).
        new_count: Number of new lines covered.
        section: Text after the closing '@@' (often an enclosing function).
        lines: Raw hunk body lines.
    """

    header: str
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str = ""
    lines: list[HunkLine] = field(default_factory=list)

    @property
    def old_begin(self) -> int:
        """0-based index of the first old line in the hunk.

        For an empty range unified diff names the line *before* the range,
        so the begin index is the start itself.
        """
        if self.old_count == 0:
            return max(self.old_start, 0)
        return max(self.old_start - 1, 0)

    @property
    def new_begin(self) -> int:
        """0-based index of the first new line in the hunk."""
        if self.new_count == 0:
            return max(self.new_start, 0)
        return max(self.new_start - 1, 0)

    @property
    def old_end(self) -> int:
        return self.old_begin + self.old_count

    @property
    def new_end(self) -> int:
        return self.new_begin + self.new_count


@dataclass
class FileDiff:
    """Parser output for one file: its name and ordered hunks."""

    filename: str
    hunks: list[Hunk] = field(default_factory=list)
    old_path: str | None = None
    new_path: str | None = None
    is_new_file: bool = False
    is_deleted_file: bool = False
    is_binary: bool = False


@dataclass(frozen=True)
class DiffFile:
    """A whole-file alignment, immutable once built."""

    filename: str
    lines: tuple[DiffLine, ...] = ()

    @property
    def old_line_count(self) -> int:
        return sum(1 for line in self.lines if line.has_left)

    @property
    def new_line_count(self) -> int:
        return sum(1 for line in self.lines if line.has_right)

    def stats(self) -> dict[str, int]:
        """Count aligned lines by state.

        Returns:
            A dictionary keyed by state value, e.g.
            {"normal": 10, "added": 2, "removed": 1, "modified": 0}.
        """
        summary = {state.value: 0 for state in LineState}
        for line in self.lines:
            summary[line.state.value] += 1
        return summary

    @property
    def has_changes(self) -> bool:
        return any(line.state is not LineState.NORMAL for line in self.lines)
