"""Integration tests for the Textual diff screen.

Each test drives the real app headlessly through App.run_test().
"""

from __future__ import annotations

import asyncio

from textual.widgets import Static

from splitdiff.config import Settings
from splitdiff.diff.models import DiffFile, DiffLine
from splitdiff.tui.app import DiffViewerApp
from splitdiff.tui.screens import LoadingScreen
from splitdiff.tui.view_model import Pane
from splitdiff.tui.views.diff_screen import DiffScreen
from splitdiff.tui.widgets import DiffPane

SIZE = (100, 30)


def make_app(files) -> DiffViewerApp:
    return DiffViewerApp(files=files, settings=Settings())


class TestDiffScreen:
    """Keyboard behavior of the side-by-side screen."""

    def test_shows_first_file(self, long_file, small_files):
        async def scenario():
            app = make_app([long_file, *small_files])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                screen = app.screen
                assert isinstance(screen, DiffScreen)
                assert screen.view_model.selected_index == 0
                left = screen.query_one("#left-pane", DiffPane)
                assert left.text.startswith("  1 │ line 1")
                assert screen.title == "Split Diff - long.py"

        asyncio.run(scenario())

    def test_tab_cycles_focus(self, small_files):
        async def scenario():
            app = make_app(small_files)
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                screen = app.screen
                assert screen.view_model.focus is Pane.SELECTOR

                await pilot.press("tab")
                await pilot.pause()
                assert screen.view_model.focus is Pane.LEFT
                assert app.focused.id == "left-pane"

                await pilot.press("tab")
                await pilot.pause()
                assert screen.view_model.focus is Pane.RIGHT
                assert app.focused.id == "right-pane"

                await pilot.press("tab")
                await pilot.pause()
                assert screen.view_model.focus is Pane.SELECTOR

        asyncio.run(scenario())

    def test_keys_scroll_both_panes(self, long_file):
        async def scenario():
            app = make_app([long_file])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                vm = app.screen.view_model

                await pilot.press("tab", "down", "down", "j")
                await pilot.pause()
                assert vm.left.row == 3
                assert vm.right.row == 3

                await pilot.press("tab", "k")
                await pilot.pause()
                assert vm.right.row == 2
                assert vm.left.row == 2

                await pilot.press("g")
                await pilot.pause()
                assert vm.left.row == 0

        asyncio.run(scenario())

    def test_horizontal_keys_stay_local(self, long_file):
        async def scenario():
            app = make_app([long_file])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                vm = app.screen.view_model

                await pilot.press("tab", "down", "right", "l")
                await pilot.pause()
                assert vm.left.row == vm.right.row == 1
                assert vm.right.col == 0

        asyncio.run(scenario())

    def test_toggle_sync(self, long_file):
        async def scenario():
            app = make_app([long_file])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                vm = app.screen.view_model

                await pilot.press("tab", "s", "down", "down")
                await pilot.pause()
                assert vm.left.row == 2
                assert vm.right.row == 0

                # Re-enabling realigns the other pane
                await pilot.press("s")
                await pilot.pause()
                assert vm.right.row == 2

        asyncio.run(scenario())

    def test_bottom_rows_match_with_one_wide_pane(self):
        """A long line on one side must not give that pane an extra row."""
        lines = [DiffLine.removed(1, "x" * 400)]
        lines += [DiffLine.normal(i + 1, i, f"line {i}") for i in range(1, 79)]
        wide = DiffFile(filename="wide.txt", lines=tuple(lines))

        async def scenario():
            app = make_app([wide])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                await pilot.pause()
                vm = app.screen.view_model

                await pilot.press("tab", "G")
                await pilot.pause()
                assert vm.left.row > 0
                assert vm.left.row == vm.right.row

                left = app.screen.query_one("#left-pane", DiffPane)
                right = app.screen.query_one("#right-pane", DiffPane)
                assert left.get_scroll_offset()[0] == right.get_scroll_offset()[0]

        asyncio.run(scenario())

    def test_select_file(self, long_file, small_files):
        async def scenario():
            app = make_app([long_file, *small_files])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                screen = app.screen

                screen.select_file(2)
                await pilot.pause()
                assert screen.view_model.render().filename == "file1.txt"
                assert screen.title == "Split Diff - file1.txt"

                screen.select_file(42)
                await pilot.pause()
                assert screen.view_model.selected_index == 2

        asyncio.run(scenario())

    def test_no_files(self):
        async def scenario():
            app = make_app([])
            async with app.run_test(size=SIZE) as pilot:
                await pilot.pause()
                screen = app.screen
                assert isinstance(screen, DiffScreen)
                assert screen.view_model.current_file is None

        asyncio.run(scenario())


class FakeLoader:
    """Stands in for DiffLoader without touching git."""

    def __init__(self, files):
        self.files = {f.filename: f for f in files}

    def iter_load(self, paths):
        for path in paths:
            if path in self.files:
                yield path, self.files[path], None
            else:
                yield path, None, "binary file"


class TestLoading:
    """Background loading before the diff screen appears."""

    def test_loads_then_shows_diff(self, small_files):
        async def scenario():
            app = DiffViewerApp(
                paths=["file0.txt", "image.png", "file2.txt"],
                loader=FakeLoader(small_files),
                settings=Settings(),
            )
            app.TASK_COMPLETION_DELAY = 0
            async with app.run_test(size=SIZE) as pilot:
                await app.workers.wait_for_complete()
                await pilot.pause()

                assert isinstance(app.screen, DiffScreen)
                assert app.screen.view_model.filenames == ["file0.txt", "file2.txt"]
                assert app.load_result.skipped == [("image.png", "binary file")]

        asyncio.run(scenario())

    def test_loading_screen_counts(self):
        async def scenario():
            app = DiffViewerApp(files=[], settings=Settings())
            async with app.run_test(size=SIZE) as pilot:
                screen = LoadingScreen(label="2 changed file(s)", total=2)
                await app.push_screen(screen)
                screen.advance("a.txt", loaded=True)
                screen.advance("logo.png", loaded=False)
                screen.finish()
                await pilot.pause()

                assert (screen.loaded, screen.skipped, screen.processed) == (1, 1, 2)
                detail = screen.query_one("#progress-detail", Static)
                assert "1 loaded, 1 skipped" in str(detail.render())

        asyncio.run(scenario())
