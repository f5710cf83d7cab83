"""
Dual-pane view model.

Holds the DiffFile collection, the current selection, and one scroll cursor
per pane. Rendering turns the selected file's DiffLines into two parallel
row lists; row i on the left and row i on the right always come from the
same DiffLine, which is what makes row synchronisation meaningful.

All mutation happens on the UI event loop, one handler at a time; the only
re-entrancy is the scroll notification handled by ScrollSynchronizer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from rich.markup import escape

from splitdiff.diff.models import DiffFile, DiffLine, LineState
from splitdiff.logging import get_logger
from splitdiff.tui.sync import ScrollSynchronizer

logger = get_logger(__name__)

# Class of the blank row shown opposite a one-sided line
FILLER_CLASS = "diff-filler"

ROW_STYLES = {
    "diff-removed": "red",
    "diff-added": "green",
    "diff-changed": "yellow",
    FILLER_CLASS: "dim",
}

NUMBER_SEPARATOR = " │ "


class Pane(Enum):
    """Focusable regions, in focus-cycle order."""

    SELECTOR = "selector"
    LEFT = "left"
    RIGHT = "right"


FOCUS_ORDER = (Pane.SELECTOR, Pane.LEFT, Pane.RIGHT)


class PaneCursor:
    """Scroll offset of one pane with change notification.

    Listeners are called with the cursor after every change of the offset,
    never when a scroll_to() leaves it where it was.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.row = 0
        self.col = 0
        self.max_row: int | None = None
        self.max_col: int | None = None
        self._listeners: list[Callable[[PaneCursor], object]] = []

    def __repr__(self) -> str:
        return f"PaneCursor({self.name!r}, row={self.row}, col={self.col})"

    def add_listener(self, listener: Callable[[PaneCursor], object]) -> None:
        self._listeners.append(listener)

    def get_scroll_offset(self) -> tuple[int, int]:
        return self.row, self.col

    def scroll_to(self, row: int, col: int) -> None:
        """Move to (row, col), clamped to the scrollable area."""
        row = max(row, 0)
        if self.max_row is not None:
            row = min(row, self.max_row)
        if self.max_col is not None:
            col = min(col, self.max_col)
        col = max(col, 0)

        if (row, col) == (self.row, self.col):
            return
        self.row, self.col = row, col
        for listener in list(self._listeners):
            listener(self)

    def scroll_by(self, row_delta: int, col_delta: int) -> None:
        self.scroll_to(self.row + row_delta, self.col + col_delta)

    def set_limits(self, max_row: int | None, max_col: int | None) -> None:
        """Change the scrollable area and re-clamp the current offset."""
        self.max_row = max_row
        self.max_col = max_col
        self.scroll_to(self.row, self.col)


@dataclass(frozen=True)
class RenderedRow:
    """One display row: line number (or None), text, and presentation class."""

    number: int | None
    content: str
    css_class: str


@dataclass(frozen=True)
class RenderedDiff:
    """Parallel left/right rows of one file."""

    filename: str
    left: tuple[RenderedRow, ...] = ()
    right: tuple[RenderedRow, ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.left)

    @property
    def number_width(self) -> int:
        numbers = [row.number for row in (*self.left, *self.right) if row.number]
        return len(str(max(numbers))) if numbers else 1

    def _markup(self, rows: Sequence[RenderedRow]) -> str:
        width = self.number_width
        out: list[str] = []
        for row in rows:
            number = str(row.number) if row.number is not None else ""
            text = f"{number:>{width}}{NUMBER_SEPARATOR}{escape(row.content)}"
            style = ROW_STYLES.get(row.css_class)
            out.append(f"[{style}]{text}[/]" if style else text)
        return "\n".join(out)

    def left_markup(self) -> str:
        """Left pane text as Rich console markup."""
        return self._markup(self.left)

    def right_markup(self) -> str:
        """Right pane text as Rich console markup."""
        return self._markup(self.right)


def _left_row(line: DiffLine) -> RenderedRow:
    if not line.has_left:
        return RenderedRow(None, "", FILLER_CLASS)
    if line.state in (LineState.REMOVED, LineState.MODIFIED):
        return RenderedRow(line.left_number, line.left_content, line.state.css_class)
    return RenderedRow(line.left_number, line.left_content, LineState.NORMAL.css_class)


def _right_row(line: DiffLine) -> RenderedRow:
    if not line.has_right:
        return RenderedRow(None, "", FILLER_CLASS)
    if line.state in (LineState.ADDED, LineState.MODIFIED):
        return RenderedRow(line.right_number, line.right_content, line.state.css_class)
    return RenderedRow(line.right_number, line.right_content, LineState.NORMAL.css_class)


def render_file(diff_file: DiffFile) -> RenderedDiff:
    """Render a DiffFile into parallel left/right rows."""
    return RenderedDiff(
        filename=diff_file.filename,
        left=tuple(_left_row(line) for line in diff_file.lines),
        right=tuple(_right_row(line) for line in diff_file.lines),
    )


class DiffViewModel:
    """Selection, rendering and scroll state behind the two diff panes.

    Attributes:
        left: Scroll cursor of the old-content pane.
        right: Scroll cursor of the new-content pane.
        synchronizer: Keeps both cursors on the same row.
        focus: The currently focused region.
    """

    def __init__(
        self,
        files: Sequence[DiffFile],
        *,
        couple_columns: bool = False,
        repaint: Callable[[], None] | None = None,
    ) -> None:
        """Initialize the view model.

        Args:
            files: Aligned files, in selector order.
            couple_columns: Also synchronise horizontal scrolling.
            repaint: Called after each propagated scroll change.
        """
        self._files = list(files)
        self._selected_index: int | None = None
        self._rendered: RenderedDiff | None = None
        self._view_rows: dict[Pane, int] = {}
        self.focus = Pane.SELECTOR

        self.left = PaneCursor("left")
        self.right = PaneCursor("right")
        self.synchronizer = ScrollSynchronizer(
            self.left, self.right, repaint, couple_columns=couple_columns
        )
        self.left.add_listener(self.synchronizer.on_scroll)
        self.right.add_listener(self.synchronizer.on_scroll)

        if self._files:
            self.select_file(0)

    @property
    def files(self) -> list[DiffFile]:
        return list(self._files)

    @property
    def filenames(self) -> list[str]:
        """Names for the file selector, in index order."""
        return [diff_file.filename for diff_file in self._files]

    @property
    def selected_index(self) -> int | None:
        return self._selected_index

    @property
    def current_file(self) -> DiffFile | None:
        if self._selected_index is None:
            return None
        return self._files[self._selected_index]

    def select_file(self, index: int) -> bool:
        """Make the file at index the active one.

        Out-of-range indices are ignored and the current selection is kept.

        Args:
            index: Position in the file list.

        Returns:
            True if the selection changed to index.
        """
        if not 0 <= index < len(self._files):
            logger.debug("Ignoring out-of-range file index %d", index)
            return False

        self._selected_index = index
        self._rendered = render_file(self._files[index])
        self._view_rows.clear()
        max_row = max(self._rendered.row_count - 1, 0)
        for cursor in (self.left, self.right):
            cursor.max_row = max_row
            cursor.max_col = None
            cursor.scroll_to(0, 0)
        return True

    def render(self) -> RenderedDiff:
        """Return the rows of the selected file (empty when nothing is selected)."""
        if self._rendered is None:
            return RenderedDiff(filename="")
        return self._rendered

    def cursor(self, pane: Pane) -> PaneCursor:
        if pane is Pane.LEFT:
            return self.left
        if pane is Pane.RIGHT:
            return self.right
        raise ValueError(f"{pane} has no scroll cursor")

    def set_view_limits(self, pane: Pane, max_row: int, max_col: int | None) -> None:
        """Record the laid-out scroll limits of one pane.

        Both cursors share the smallest row limit reported so far, so the
        panes always stop on the same row even when only one of them needs
        a horizontal scrollbar. Column limits stay per pane.
        """
        self._view_rows[pane] = max_row
        shared = min(self._view_rows.values())
        for other in (Pane.LEFT, Pane.RIGHT):
            cursor = self.cursor(other)
            cursor.set_limits(shared, max_col if other is pane else cursor.max_col)

    def scroll(self, pane: Pane, row_delta: int, col_delta: int) -> tuple[int, int]:
        """Scroll a pane by a delta; row changes propagate to the other pane.

        Args:
            pane: Pane.LEFT or Pane.RIGHT.
            row_delta: Rows to move (negative scrolls up).
            col_delta: Columns to move (negative scrolls left).

        Returns:
            The pane's new (row, col) offset.
        """
        cursor = self.cursor(pane)
        cursor.scroll_by(row_delta, col_delta)
        return cursor.get_scroll_offset()

    def cycle_focus(self) -> Pane:
        """Move focus selector -> left -> right -> selector."""
        position = FOCUS_ORDER.index(self.focus)
        self.focus = FOCUS_ORDER[(position + 1) % len(FOCUS_ORDER)]
        return self.focus
