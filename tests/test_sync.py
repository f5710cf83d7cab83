"""Tests for the scroll synchronizer."""

from __future__ import annotations

import pytest

from splitdiff.tui.sync import ScrollSynchronizer, SyncState
from splitdiff.tui.view_model import PaneCursor


class FakePane:
    """Pane that notifies a callback on every scroll_to, like a real widget."""

    def __init__(self, row: int = 0, col: int = 0) -> None:
        self.row = row
        self.col = col
        self.on_change = None
        self.calls: list[tuple[int, int]] = []

    def get_scroll_offset(self) -> tuple[int, int]:
        return self.row, self.col

    def scroll_to(self, row: int, col: int) -> None:
        self.calls.append((row, col))
        self.row, self.col = row, col
        if self.on_change is not None:
            self.on_change(self)


@pytest.fixture
def cursors() -> tuple[PaneCursor, PaneCursor]:
    left = PaneCursor("left")
    right = PaneCursor("right")
    for cursor in (left, right):
        cursor.max_row = 99
    return left, right


@pytest.fixture
def synced(cursors):
    """Two cursors wired to a synchronizer the way the view model does it."""
    left, right = cursors
    repaints: list[SyncState] = []
    sync = ScrollSynchronizer(left, right)
    sync.repaint = lambda: repaints.append(sync.state)
    left.add_listener(sync.on_scroll)
    right.add_listener(sync.on_scroll)
    return left, right, sync, repaints


class TestScrollSynchronizer:
    """Tests for row propagation between two panes."""

    def test_row_follows_source(self, synced):
        """Scrolling left down by 3 moves right to row 3."""
        left, right, sync, repaints = synced
        left.scroll_by(3, 0)

        assert right.get_scroll_offset() == (3, 0)
        assert sync.propagations == 1
        assert repaints == [SyncState.SYNCING]

    def test_both_directions(self, synced):
        left, right, sync, _ = synced
        right.scroll_to(7, 0)
        assert left.row == 7
        left.scroll_to(2, 0)
        assert right.row == 2

    def test_reentrant_notification_dropped(self, synced):
        """The other pane's change notification is dropped, then the guard resets."""
        left, right, sync, _ = synced
        left.scroll_to(5, 0)

        assert sync.propagations == 1
        assert sync.dropped == 1
        assert sync.state is SyncState.IDLE

    def test_horizontal_scroll_leaves_rows(self, synced):
        """A column-only change does not move the other pane's columns."""
        left, right, sync, _ = synced
        left.scroll_to(4, 0)
        left.scroll_by(0, 12)

        assert left.get_scroll_offset() == (4, 12)
        assert right.get_scroll_offset() == (4, 0)

    def test_couple_columns(self, synced):
        left, right, sync, _ = synced
        sync.couple_columns = True
        left.scroll_to(1, 8)
        assert right.get_scroll_offset() == (1, 8)

    def test_disabled(self, synced):
        left, right, sync, repaints = synced
        sync.enabled = False
        left.scroll_to(3, 0)

        assert right.row == 0
        assert sync.propagations == 0
        assert repaints == []

    def test_busy_guard_does_not_block(self):
        """A held guard makes on_scroll return immediately."""
        left, right = FakePane(row=2), FakePane()
        sync = ScrollSynchronizer(left, right)
        sync._guard.acquire()
        try:
            assert sync.state is SyncState.SYNCING
            assert sync.on_scroll(left) is False
        finally:
            sync._guard.release()

        assert sync.dropped == 1
        assert right.calls == []
        assert sync.state is SyncState.IDLE

    def test_fake_panes_no_ping_pong(self):
        """Each pane is scrolled at most once per user scroll."""
        left, right = FakePane(), FakePane()
        sync = ScrollSynchronizer(left, right)
        left.on_change = sync.on_scroll
        right.on_change = sync.on_scroll

        left.scroll_to(6, 1)

        assert left.calls == [(6, 1)]
        assert right.calls == [(6, 0)]
        assert sync.dropped == 1

    def test_unknown_pane(self, cursors):
        left, right = cursors
        sync = ScrollSynchronizer(left, right)
        with pytest.raises(ValueError):
            sync.on_scroll(PaneCursor("other"))
        assert sync.state is SyncState.IDLE

    def test_repaint_failure_releases_guard(self, cursors):
        left, right = cursors
        sync = ScrollSynchronizer(left, right, repaint=lambda: 1 / 0)
        left.row = 3
        with pytest.raises(ZeroDivisionError):
            sync.on_scroll(left)
        assert sync.state is SyncState.IDLE


class TestPaneCursor:
    """Tests for the cursor used as each pane's scroll offset."""

    def test_no_notification_without_change(self):
        cursor = PaneCursor("left")
        seen = []
        cursor.add_listener(seen.append)
        cursor.scroll_to(0, 0)
        assert seen == []

    def test_clamps_to_limits(self):
        cursor = PaneCursor("left")
        cursor.max_row = 10
        cursor.max_col = 4
        cursor.scroll_to(50, 50)
        assert cursor.get_scroll_offset() == (10, 4)
        cursor.scroll_to(-5, -5)
        assert cursor.get_scroll_offset() == (0, 0)

    def test_set_limits_reclamps(self):
        cursor = PaneCursor("left")
        cursor.scroll_to(20, 3)
        cursor.set_limits(5, None)
        assert cursor.get_scroll_offset() == (5, 3)
