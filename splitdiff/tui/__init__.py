"""
TUI Side-by-Side Diff Viewer.

A Textual-based terminal UI that shows each changed file of a git working
tree as two synchronised panes: the content before the change on the left
and after the change on the right.

Usage:
    splitdiff            # unstaged changes
    splitdiff --cached   # staged changes

Components:
    - DiffViewerApp: Main application class
    - DiffScreen: Side-by-side view with file selector
    - DiffPane: Scrollable text region for one side
    - DiffViewModel: Selection, rendering and scroll state
    - ScrollSynchronizer: Re-entrancy guarded row synchronisation
"""
