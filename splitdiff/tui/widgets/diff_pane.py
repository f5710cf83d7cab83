"""
Diff Pane widget: one scrollable, colourable text region.

The pane shows Rich markup produced by the view model and mirrors a
PaneCursor: when the cursor moves the pane scrolls, and when the pane is
scrolled by the mouse or scrollbar the cursor follows. Navigation keys do
not scroll the widget directly; they post ScrollRequested so the screen can
route the change through the view model.
"""

from __future__ import annotations

from typing import Callable

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer
from textual.events import Resize
from textual.message import Message
from textual.widgets import Static

from splitdiff.tui.view_model import PaneCursor


class DiffPane(ScrollableContainer):
    """Scrollable text region for one side of the diff.

    Attributes:
        text: The markup currently displayed.
    """

    DEFAULT_CSS = """
    DiffPane {
        height: 1fr;
        overflow-x: scroll;
        overflow-y: auto;
    }

    DiffPane > .pane-text {
        width: auto;
        height: auto;
        text-wrap: nowrap;
    }
    """

    BINDINGS = [
        Binding("up", "request_scroll(-1, 0)", "Up", show=False),
        Binding("down", "request_scroll(1, 0)", "Down", show=False),
        Binding("left", "request_scroll(0, -1)", "Left", show=False),
        Binding("right", "request_scroll(0, 1)", "Right", show=False),
        Binding("k", "request_scroll(-1, 0)", "Up", show=False),
        Binding("j", "request_scroll(1, 0)", "Down", show=False),
        Binding("h", "request_scroll(0, -1)", "Left", show=False),
        Binding("l", "request_scroll(0, 1)", "Right", show=False),
        Binding("pageup", "request_page(-1)", "Page Up", show=False),
        Binding("pagedown", "request_page(1)", "Page Down", show=False),
        Binding("g", "request_edge(-1)", "Top", show=False),
        Binding("G", "request_edge(1)", "Bottom", show=False),
    ]

    class ScrollRequested(Message):
        """Posted when a navigation key asks to scroll this pane.

        Attributes:
            row_delta: Rows to move.
            col_delta: Columns to move.
            pane_id: The ID of the pane that emitted this message.
        """

        def __init__(self, row_delta: int, col_delta: int, pane_id: str) -> None:
            self.row_delta = row_delta
            self.col_delta = col_delta
            self.pane_id = pane_id
            super().__init__()

    class ScrollChanged(Message):
        """Posted after the pane's offset changed, whatever the cause.

        Attributes:
            row: New vertical offset.
            col: New horizontal offset.
            pane_id: The ID of the pane that emitted this message.
        """

        def __init__(self, row: int, col: int, pane_id: str) -> None:
            self.row = row
            self.col = col
            self.pane_id = pane_id
            super().__init__()

    def __init__(
        self,
        *,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self.text = ""
        self._cursor: PaneCursor | None = None
        self._on_limits: Callable[[int, int], None] | None = None
        self._applying = False

    def compose(self) -> ComposeResult:
        yield Static("", classes="pane-text")

    @property
    def cursor(self) -> PaneCursor | None:
        return self._cursor

    def bind_cursor(
        self, cursor: PaneCursor, on_limits: Callable[[int, int], None] | None = None
    ) -> None:
        """Mirror the given cursor from now on.

        Args:
            cursor: The scroll cursor to follow and drive.
            on_limits: Receives (max_row, max_col) after each layout; sets
                the cursor's limits directly when omitted.
        """
        self._cursor = cursor
        self._on_limits = on_limits
        cursor.add_listener(self._on_cursor_changed)

    def set_text(self, markup: str) -> None:
        """Replace the displayed text."""
        self.text = markup
        self.query_one(".pane-text", Static).update(markup)
        self.call_after_refresh(self._update_limits)

    def get_scroll_offset(self) -> tuple[int, int]:
        return round(self.scroll_y), round(self.scroll_x)

    def scroll_to_offset(self, row: int, col: int) -> None:
        """Scroll immediately without animation."""
        self._applying = True
        try:
            self.scroll_x = col
            self.scroll_y = row
        finally:
            self._applying = False

    def _on_cursor_changed(self, cursor: PaneCursor) -> None:
        self.scroll_to_offset(cursor.row, cursor.col)
        if self.id:
            self.post_message(self.ScrollChanged(cursor.row, cursor.col, self.id))

    def _update_limits(self) -> None:
        # Not laid out yet; keep the limits set by the view model
        if self._cursor is None or not self.virtual_size.height:
            return
        max_row, max_col = round(self.max_scroll_y), round(self.max_scroll_x)
        if self._on_limits is not None:
            self._on_limits(max_row, max_col)
        else:
            self._cursor.set_limits(max_row, max_col)

    def on_resize(self, event: Resize) -> None:
        self.call_after_refresh(self._update_limits)

    def _follow_widget_scroll(self) -> None:
        if self._applying or self._cursor is None:
            return
        row, col = self.get_scroll_offset()
        self._cursor.scroll_to(row, col)
        if self._cursor.get_scroll_offset() != (row, col):
            # Clamped by the shared limits
            self.scroll_to_offset(self._cursor.row, self._cursor.col)

    def watch_scroll_x(self, old_value: float, new_value: float) -> None:
        super().watch_scroll_x(old_value, new_value)
        self._follow_widget_scroll()

    def watch_scroll_y(self, old_value: float, new_value: float) -> None:
        super().watch_scroll_y(old_value, new_value)
        self._follow_widget_scroll()

    def action_request_scroll(self, row_delta: int, col_delta: int) -> None:
        if self.id:
            self.post_message(self.ScrollRequested(row_delta, col_delta, self.id))

    def action_request_page(self, direction: int) -> None:
        page = max(self.scrollable_content_region.height - 1, 1)
        self.action_request_scroll(direction * page, 0)

    def action_request_edge(self, direction: int) -> None:
        if self._cursor is None:
            return
        if direction < 0:
            self.action_request_scroll(-self._cursor.row, 0)
        else:
            limit = self._cursor.max_row if self._cursor.max_row is not None else 0
            self.action_request_scroll(limit - self._cursor.row, 0)
