"""
Loading screen shown while changed files are read from git and aligned.

The screen tracks per-file progress: a progress bar over the number of
changed paths, the path currently being loaded, and running counts of
loaded and skipped files.
"""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Center, Middle
from textual.screen import Screen
from textual.widgets import Footer, Header, ProgressBar, Static


class LoadingScreen(Screen):
    """Per-file progress while diffs are loaded.

    Usage:
        screen = LoadingScreen(total=3)
        screen.advance("src/app.py", loaded=True)
        screen.advance("logo.png", loaded=False)
        screen.finish()
    """

    CSS_PATH = "../styles/base.tcss"

    def __init__(
        self,
        label: str = "",
        total: int | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """Initialize the loading screen.

        Args:
            label: What is being loaded (for the title).
            total: Number of paths to load, None if unknown.
            name: Optional screen name.
            id: Optional screen ID.
            classes: Optional CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.label = label
        self.total = total
        self.loaded = 0
        self.skipped = 0
        self.title_text = f"Loading {label}..." if label else "Loading..."

    def compose(self) -> ComposeResult:
        yield Header()
        with Center():
            with Middle(id="loading-container", classes="progress-container"):
                yield Static(self.title_text, id="progress-title", classes="progress-title")
                yield ProgressBar(total=self.total, show_eta=False, id="progress-bar")
                yield Static("Reading diffs...", id="progress-status", classes="progress-status")
                yield Static("", id="progress-detail", classes="progress-detail")
        yield Footer()

    @property
    def processed(self) -> int:
        return self.loaded + self.skipped

    def _counts(self) -> str:
        text = f"{self.loaded} loaded"
        if self.skipped:
            text += f", {self.skipped} skipped"
        return text

    def advance(self, path: str, loaded: bool = True) -> None:
        """Record one finished path and show it as the current item."""
        if loaded:
            self.loaded += 1
        else:
            self.skipped += 1

        if not self.is_mounted:
            return
        self.query_one("#progress-bar", ProgressBar).advance(1)
        self.query_one("#progress-status", Static).update(path)
        self.query_one("#progress-detail", Static).update(self._counts())

    def finish(self) -> None:
        """Show the completed state."""
        if not self.is_mounted:
            return
        self.query_one("#progress-title", Static).update("Complete")
        self.query_one("#progress-status", Static).update(
            f"Loaded {self.processed} of {self.total or self.processed} file(s)"
        )
        self.query_one("#progress-detail", Static).update(self._counts())

    def fail(self, message: str) -> None:
        """Show an error instead of progress."""
        if not self.is_mounted:
            return
        self.query_one("#progress-title", Static).update("Error")
        self.query_one("#progress-status", Static).update(f"[red]{message}[/]")
