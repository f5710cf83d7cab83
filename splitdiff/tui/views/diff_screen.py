"""
Diff Screen for side-by-side file comparison.

Displays the content before the change on the left and after the change on
the right, one row per aligned line, with a file selector on top. Vertical
scrolling is synchronised between the panels; horizontal scrolling is
independent unless column coupling is switched on.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Sequence

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import DescendantFocus
from textual.screen import Screen
from textual.widgets import Footer, Header, Select, Static

from splitdiff.tui.mixins import DualPaneMixin
from splitdiff.tui.view_model import DiffViewModel, Pane
from splitdiff.tui.widgets import DiffPane

HELP_TEXT = (
    "[yellow]Arrows/hjkl scroll | PgUp/PgDn page | g/G top/bottom | "
    "Tab switch focus | s sync rows | c couple columns | q quit[/]"
)

PANEL_WIDGET_IDS = {
    "selector": "file-select",
    "left": "left-pane",
    "right": "right-pane",
}


class DiffScreen(DualPaneMixin, Screen):
    """Side-by-side diff view backed by a DiffViewModel."""

    CSS_PATH = "../styles/base.tcss"

    CSS = """
    DiffScreen {
        layout: vertical;
    }

    #file-select {
        width: 100%;
    }

    #diff-container {
        height: 1fr;
    }

    #left-panel {
        border-right: none;
    }

    #help-line, #status-line {
        height: 1;
        width: 100%;
        text-align: center;
    }
    """

    BINDINGS = DualPaneMixin.DUAL_PANE_BINDINGS + [
        Binding("s", "toggle_sync", "Sync Rows"),
        Binding("c", "toggle_columns", "Couple Columns"),
    ]

    def __init__(
        self,
        view_model: DiffViewModel,
        skipped: Sequence[tuple[str, str]] = (),
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the DiffScreen.

        Args:
            view_model: Selection and scroll state to display.
            skipped: (path, reason) for paths that could not be loaded.
            name: Optional name for the screen.
            id: Optional ID for the screen.
            classes: Optional CSS classes for the screen.
        """
        super().__init__(name=name, id=id, classes=classes)
        self._view_model = view_model
        self._skipped = list(skipped)

    @property
    def view_model(self) -> DiffViewModel:
        return self._view_model

    def compose(self) -> ComposeResult:
        """Compose the selector, both panels, and the help line."""
        options: list[tuple[str, Any]] = [
            (filename, index) for index, filename in enumerate(self._view_model.filenames)
        ]
        yield Header()
        yield Select(
            options,
            prompt="Select file",
            allow_blank=not options,
            id="file-select",
        )
        with Horizontal(id="diff-container"):
            with Vertical(id="left-panel", classes="inactive"):
                yield Static("Original", classes="panel-header", id="left-title")
                yield DiffPane(id="left-pane")
            with Vertical(id="right-panel", classes="inactive"):
                yield Static("Modified", classes="panel-header", id="right-title")
                yield DiffPane(id="right-pane")
        yield Static("", id="status-line")
        yield Static(HELP_TEXT, id="help-line")
        yield Footer()

    def on_mount(self) -> None:
        """Bind panes to the view model and show the selected file."""
        left = self.query_one("#left-pane", DiffPane)
        right = self.query_one("#right-pane", DiffPane)
        left.bind_cursor(
            self._view_model.left, partial(self._view_model.set_view_limits, Pane.LEFT)
        )
        right.bind_cursor(
            self._view_model.right, partial(self._view_model.set_view_limits, Pane.RIGHT)
        )
        self._view_model.synchronizer.repaint = self.refresh

        self._show_current_file()
        self._set_active_panel(self._view_model.focus.value)

        if self._skipped:
            names = ", ".join(path for path, _ in self._skipped)
            self.notify(f"Skipped {len(self._skipped)} file(s): {names}", severity="warning")
        if not self._view_model.filenames:
            self.notify("No files to display", severity="warning")

    def select_file(self, index: int) -> None:
        """Show the file at index; out-of-range indices are ignored."""
        if self._view_model.select_file(index):
            self._show_current_file()

    def _show_current_file(self) -> None:
        rendered = self._view_model.render()
        self.query_one("#left-pane", DiffPane).set_text(rendered.left_markup())
        self.query_one("#right-pane", DiffPane).set_text(rendered.right_markup())

        if rendered.filename:
            self.title = f"Split Diff - {rendered.filename}"
        self._update_status()

    def _update_status(self) -> None:
        diff_file = self._view_model.current_file
        if diff_file is None:
            status = "No changes"
        else:
            stats = diff_file.stats()
            rows = max(len(diff_file.lines), 1)
            row = min(self._view_model.left.row + 1, rows)
            status = (
                f"[green]+{stats['added']}[/] [red]-{stats['removed']}[/] "
                f"[yellow]~{stats['modified']}[/]  row {row}/{rows}"
            )
        self.query_one("#status-line", Static).update(status)

    def on_select_changed(self, event: Select.Changed) -> None:
        """Switch files when the selector changes."""
        if isinstance(event.value, int):
            self.select_file(event.value)

    def on_diff_pane_scroll_requested(self, message: DiffPane.ScrollRequested) -> None:
        """Route navigation keys through the view model."""
        pane = Pane.LEFT if message.pane_id == "left-pane" else Pane.RIGHT
        self._view_model.scroll(pane, message.row_delta, message.col_delta)

    def on_diff_pane_scroll_changed(self, message: DiffPane.ScrollChanged) -> None:
        self._update_status()

    def on_descendant_focus(self, event: DescendantFocus) -> None:
        """Keep the active panel in step with mouse-driven focus changes."""
        focused = self.focused
        if focused is None:
            return
        for node in (focused, *focused.ancestors):
            for panel, widget_id in PANEL_WIDGET_IDS.items():
                if node.id == widget_id:
                    if panel != self._active_panel:
                        self._active_panel = panel
                        self._view_model.focus = Pane(panel)
                        self._update_panel_styles()
                    return

    def _focus_active_widget(self) -> None:
        """Focus the widget of the active panel."""
        self._view_model.focus = Pane(self._active_panel)
        widget_id = PANEL_WIDGET_IDS[self._active_panel]
        self.query_one(f"#{widget_id}").focus()

    def action_cycle_focus(self) -> None:
        """Move focus selector -> left -> right -> selector."""
        self._set_active_panel(self._view_model.cycle_focus().value)

    def action_toggle_sync(self) -> None:
        """Toggle synchronised row scrolling between panels."""
        synchronizer = self._view_model.synchronizer
        synchronizer.enabled = not synchronizer.enabled
        if synchronizer.enabled:
            source = self._view_model.right if self.is_right_active else self._view_model.left
            synchronizer.on_scroll(source)

        status = "enabled" if synchronizer.enabled else "disabled"
        self.notify(f"Row sync {status}")

    def action_toggle_columns(self) -> None:
        """Toggle coupling of horizontal scrolling."""
        synchronizer = self._view_model.synchronizer
        synchronizer.couple_columns = not synchronizer.couple_columns

        status = "coupled" if synchronizer.couple_columns else "independent"
        self.notify(f"Columns {status}")
