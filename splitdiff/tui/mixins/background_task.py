"""
Background Task Mixin for loading diffs with progress feedback.

Loading runs in a worker thread so git calls never block the UI:
- a LoadingScreen is pushed
- each loaded item advances the screen via call_from_thread
- on success the screen is dismissed and on_complete gets the items
- on failure the error is shown briefly, then on_error is called
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable, Iterable

from textual import work

from splitdiff.logging import get_logger

if TYPE_CHECKING:
    from splitdiff.tui.screens.progress import LoadingScreen

logger = get_logger(__name__)


class BackgroundTaskMixin:
    """Mixin for Apps that load their data in a thread.

    Usage:
        class MyApp(BackgroundTaskMixin, App):
            def on_mount(self):
                self._run_loading_task(
                    label="3 files",
                    load_fn=lambda: loader.iter_load(paths),
                    on_complete=self._on_loaded,
                    total_count=len(paths),
                    item_name_fn=lambda item: item[0],
                    item_ok_fn=lambda item: item[1] is not None,
                )
    """

    TASK_COMPLETION_DELAY: float = 0.3
    TASK_ERROR_DELAY: float = 2.0

    def _run_loading_task(
        self,
        label: str,
        load_fn: Callable[[], Iterable[Any]],
        on_complete: Callable[[list[Any]], None],
        on_error: Callable[[str], None] | None = None,
        *,
        total_count: int | None = None,
        item_name_fn: Callable[[Any], str] | None = None,
        item_ok_fn: Callable[[Any], bool] | None = None,
    ) -> None:
        """Push a LoadingScreen and consume load_fn() in a worker thread.

        Args:
            label: What is being loaded (for display).
            load_fn: Function returning an iterable of loaded items.
            on_complete: Called on the UI thread with all items.
            on_error: Called on the UI thread with the error message.
            total_count: Number of items expected, for the progress bar.
            item_name_fn: Display name of an item.
            item_ok_fn: Whether an item loaded (False counts as skipped).
        """
        from splitdiff.tui.screens.progress import LoadingScreen

        screen = LoadingScreen(label=label, total=total_count)
        self.app.push_screen(screen)
        self._run_loading_worker(
            screen, load_fn, on_complete, on_error, item_name_fn, item_ok_fn
        )

    @work(thread=True)
    def _run_loading_worker(
        self,
        screen: "LoadingScreen",
        load_fn: Callable[[], Iterable[Any]],
        on_complete: Callable[[list[Any]], None],
        on_error: Callable[[str], None] | None,
        item_name_fn: Callable[[Any], str] | None = None,
        item_ok_fn: Callable[[Any], bool] | None = None,
    ) -> None:
        items: list[Any] = []

        try:
            for item in load_fn():
                items.append(item)
                name = item_name_fn(item) if item_name_fn else str(len(items))
                ok = item_ok_fn(item) if item_ok_fn else True
                self.app.call_from_thread(screen.advance, name, ok)

            self.app.call_from_thread(screen.finish)
            time.sleep(self.TASK_COMPLETION_DELAY)
            self.app.call_from_thread(self.app.pop_screen)
            self.app.call_from_thread(on_complete, items)

        except Exception as e:
            logger.exception("Background load failed")
            self.app.call_from_thread(screen.fail, f"Error: {e}")
            time.sleep(self.TASK_ERROR_DELAY)
            self.app.call_from_thread(self.app.pop_screen)

            if on_error:
                self.app.call_from_thread(on_error, str(e))
