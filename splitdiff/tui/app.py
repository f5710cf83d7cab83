"""
Main Textual application for the side-by-side diff viewer.

This is the entry point: it lists the changed files, loads and aligns them
in a background worker behind a loading screen, then shows DiffScreen.

Compared Sides:
    - default: index -> working tree (`git diff`)
    - --cached: HEAD -> index (`git diff --cached`)
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from textual.app import App
from textual.binding import Binding

from splitdiff.config import Settings, get_settings
from splitdiff.diff.alignment import MatchStrategy
from splitdiff.diff.loader import DiffLoader, LoadResult
from splitdiff.diff.models import DiffFile
from splitdiff.git import GitError, list_changed_files
from splitdiff.logging import get_logger, setup_logging
from splitdiff.tui.mixins import BackgroundTaskMixin
from splitdiff.tui.view_model import DiffViewModel
from splitdiff.tui.views.diff_screen import DiffScreen

logger = get_logger(__name__)


class DiffViewerApp(BackgroundTaskMixin, App):
    """A Textual app showing git changes as two synchronised panes."""

    TITLE = "Split Diff"

    CSS = """
    Screen {
        background: $surface;
    }

    Header {
        dock: top;
        background: $primary;
        color: $text;
    }

    Footer {
        dock: bottom;
        height: 1;
        background: $primary-darken-2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        paths: Sequence[str] = (),
        loader: DiffLoader | None = None,
        *,
        files: Sequence[DiffFile] | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the app.

        Args:
            paths: Changed paths to load through the loader.
            loader: Loader used to fetch and align the paths.
            files: Already aligned files; skips loading when given.
            settings: Viewer settings (defaults to get_settings()).
        """
        super().__init__()
        self._paths = list(paths)
        self._loader = loader
        self._files = list(files) if files is not None else None
        self._settings = settings or get_settings()
        self.load_result: LoadResult | None = None

    def on_mount(self) -> None:
        """Show preloaded files or start loading the changed paths."""
        if self._files is not None:
            self._show_result(LoadResult(files=self._files))
            return

        if self._loader is None or not self._paths:
            self._show_result(LoadResult())
            return

        self._run_loading_task(
            label=f"{len(self._paths)} changed file(s)",
            load_fn=lambda: self._loader.iter_load(self._paths),
            on_complete=self._on_files_loaded,
            on_error=self._on_loading_error,
            total_count=len(self._paths),
            item_name_fn=lambda item: item[0],
            item_ok_fn=lambda item: item[1] is not None,
        )

    def _on_files_loaded(self, items: list[tuple[str, DiffFile | None, str | None]]) -> None:
        """Called when the background load completes."""
        result = LoadResult()
        for path, diff_file, reason in items:
            if diff_file is not None:
                result.files.append(diff_file)
            else:
                result.skipped.append((path, reason or "unknown error"))
        self._show_result(result)

    def _on_loading_error(self, error: str) -> None:
        """Called when the background load fails."""
        self.notify(f"Error loading diffs: {error}", severity="error")
        self._show_result(LoadResult())

    def _show_result(self, result: LoadResult) -> None:
        self.load_result = result
        view_model = DiffViewModel(
            result.files, couple_columns=self._settings.couple_columns
        )
        self.push_screen(DiffScreen(view_model, skipped=result.skipped))


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser; unset flags fall back to settings."""
    parser = argparse.ArgumentParser(
        prog="splitdiff",
        description="View git changes side by side in a terminal UI.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Restrict the listing to these paths",
    )
    parser.add_argument(
        "--cached",
        "-c",
        dest="staged",
        action="store_const",
        const=True,
        default=None,
        help="Show staged changes (HEAD -> index)",
    )
    parser.add_argument(
        "--context",
        "-U",
        dest="context_lines",
        type=int,
        default=None,
        help="Context lines requested from git diff (default: 3)",
    )
    parser.add_argument(
        "--strategy",
        dest="match_strategy",
        choices=[strategy.value for strategy in MatchStrategy],
        default=None,
        help="How changed lines inside a hunk are paired (default: sequence)",
    )
    parser.add_argument(
        "--couple-columns",
        dest="couple_columns",
        action="store_const",
        const=True,
        default=None,
        help="Scroll both panes horizontally together",
    )
    parser.add_argument(
        "--hunks-only",
        dest="hunks_only",
        action="store_const",
        const=True,
        default=None,
        help="Show only the changed regions instead of whole files",
    )
    parser.add_argument(
        "-C",
        "--repo",
        dest="repo_dir",
        default=None,
        help="Run as if started in this directory",
    )
    parser.add_argument("--log-file", dest="log_file", default=None, help="Write a debug log here")
    parser.add_argument("--log-level", dest="log_level", default=None, help="Log level (default: WARNING)")
    return parser


def resolve_settings(args: argparse.Namespace, settings: Settings | None = None) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    settings = settings or get_settings()
    overrides: dict[str, Any] = {
        key: value
        for key, value in vars(args).items()
        if key in Settings.model_fields and value is not None
    }
    if overrides.get("context_lines", 0) < 0:
        raise ValueError("--context must not be negative")
    return settings.model_copy(update=overrides)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments, list changed files and run the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(settings.log_level, settings.log_file)

    try:
        paths = list_changed_files(
            cached=settings.staged,
            paths=args.paths,
            repo_dir=args.repo_dir,
            git_binary=settings.git_binary,
        )
    except GitError as e:
        logger.error("Cannot list changed files: %s", e)
        print(f"Error: cannot list changed files: {e}", file=sys.stderr)
        sys.exit(1)

    if not paths:
        print("No changes to show.")
        sys.exit(0)

    loader = DiffLoader(
        cached=settings.staged,
        context_lines=settings.context_lines,
        strategy=MatchStrategy(settings.match_strategy),
        hunks_only=settings.hunks_only,
        repo_dir=args.repo_dir,
        git_binary=settings.git_binary,
    )
    app = DiffViewerApp(paths=paths, loader=loader, settings=settings)
    app.run()


if __name__ == "__main__":
    main()
