"""
Scroll synchronisation between the two diff panes.

Setting the other pane's offset fires that pane's own change notification,
which calls back into the synchronizer while it is still propagating. The
guard drops that re-entrant call so the panes never ping-pong:

    IDLE --scroll on A--> SYNCING --copy row A->B, repaint--> IDLE
                             |
                 re-entered from B's notification: dropped

The guard is a lock taken with a non-blocking attempt. Propagation happens
synchronously on the event loop, so waiting on the lock would deadlock.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Protocol

from splitdiff.logging import get_logger

logger = get_logger(__name__)


class SyncState(Enum):
    """State of the re-entrancy guard."""

    IDLE = "idle"
    SYNCING = "syncing"


class ScrollablePane(Protocol):
    """A text region with a (row, column) scroll offset."""

    def get_scroll_offset(self) -> tuple[int, int]:
        ...

    def scroll_to(self, row: int, col: int) -> None:
        ...


class ScrollSynchronizer:
    """Keeps the row offset of two panes equal.

    Columns stay independent unless couple_columns is set, in which case the
    horizontal offset is copied as well.

    Attributes:
        repaint: Called after each propagation to request a redraw.
        enabled: When False, scroll changes are not propagated.
        couple_columns: Also copy the column offset.
        propagations: Number of completed propagations.
        dropped: Number of re-entrant notifications that were dropped.
    """

    def __init__(
        self,
        left: ScrollablePane,
        right: ScrollablePane,
        repaint: Callable[[], None] | None = None,
        *,
        couple_columns: bool = False,
    ) -> None:
        self.left = left
        self.right = right
        self.repaint = repaint
        self.couple_columns = couple_columns
        self.enabled = True
        self.propagations = 0
        self.dropped = 0
        self._guard = threading.Lock()

    @property
    def state(self) -> SyncState:
        return SyncState.SYNCING if self._guard.locked() else SyncState.IDLE

    def _other(self, source: ScrollablePane) -> ScrollablePane:
        if source is self.left:
            return self.right
        if source is self.right:
            return self.left
        raise ValueError("pane is not managed by this synchronizer")

    def on_scroll(self, source: ScrollablePane) -> bool:
        """Propagate a scroll change from source to the other pane.

        Args:
            source: The pane whose offset changed.

        Returns:
            True if the change was propagated, False if it was dropped
            (re-entrant call or synchronisation disabled).
        """
        if not self.enabled:
            return False

        if not self._guard.acquire(blocking=False):
            self.dropped += 1
            return False

        try:
            target = self._other(source)
            row, col = source.get_scroll_offset()
            _, target_col = target.get_scroll_offset()
            target.scroll_to(row, col if self.couple_columns else target_col)
            if self.repaint is not None:
                self.repaint()
            self.propagations += 1
        finally:
            self._guard.release()
        return True
