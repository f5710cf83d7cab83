"""
Unified diff parser.

Turns raw unified diff text (one or many files, as printed by `git diff` or
`diff -u`) into FileDiff records holding their hunks and raw hunk lines.

The parser never raises: malformed hunk headers drop that hunk, truncated
hunks are kept with whatever lines were seen, and anything it does not
recognise is treated as metadata and ignored.
"""

from __future__ import annotations

import re

from splitdiff.diff.models import FileDiff, Hunk, HunkLine
from splitdiff.logging import get_logger

logger = get_logger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")

GIT_HEADER_PREFIX = "diff --git "
DEV_NULL = "/dev/null"


def parse_hunk_header(line: str) -> Hunk | None:
    """Decode an '@@ -a[,b] +c[,d] @@' line.

    Omitted counts default to 1, as in the unified diff format.

    Args:
        line: The raw header line.

    Returns:
        A Hunk with no body lines yet, or None if the header is malformed.
    """
    match = HUNK_HEADER_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None

    old_start, old_count, new_start, new_count, section = match.groups()
    return Hunk(
        header=line.rstrip("\r\n"),
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
        section=section.strip(),
    )


def _strip_prefix(path: str) -> str:
    """Remove the a/ or b/ side prefix git puts on paths."""
    path = path.strip()
    if len(path) >= 2 and path[0] == '"' and path[-1] == '"':
        path = path[1:-1]
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def parse_git_header(line: str) -> tuple[str | None, str | None]:
    """Extract (old_path, new_path) from a 'diff --git a/x b/y' marker."""
    rest = line[len(GIT_HEADER_PREFIX):].strip()
    if " b/" in rest:
        old, new = rest.rsplit(" b/", 1)
        return _strip_prefix(old), new
    if '" "' in rest:
        old, new = rest.split('" "', 1)
        return _strip_prefix(old + '"'), _strip_prefix('"' + new)

    parts = rest.split(" ")
    if len(parts) >= 2:
        return _strip_prefix(parts[0]), _strip_prefix(parts[-1])
    if parts and parts[0]:
        path = _strip_prefix(parts[0])
        return path, path
    return None, None


def _file_header_path(line: str) -> str | None:
    """Path named by a '--- x' or '+++ x' line, None for /dev/null."""
    path = line[4:].split("\t", 1)[0].strip()
    if path == DEV_NULL or not path:
        return None
    return _strip_prefix(path)


class _DiffParser:
    """Line-by-line state machine behind parse_unified_diff()."""

    def __init__(self) -> None:
        self.files: list[FileDiff] = []
        self.current_file: FileDiff | None = None
        self.current_hunk: Hunk | None = None
        self._old_remaining = 0
        self._new_remaining = 0
        self._pending_old_path: str | None = None
        self._pending_old_seen = False

    @property
    def hunk_open(self) -> bool:
        return self.current_hunk is not None and (
            self._old_remaining > 0 or self._new_remaining > 0
        )

    def feed(self, line: str) -> None:
        line = line.rstrip("\r")

        if self.hunk_open and self._feed_hunk_line(line):
            return

        if line.startswith(GIT_HEADER_PREFIX):
            self._start_git_file(line)
        elif line.startswith("@@"):
            self._start_hunk(line)
        elif line.startswith("--- "):
            self._pending_old_path = _file_header_path(line)
            self._pending_old_seen = True
        elif line.startswith("+++ "):
            self._file_header_pair(_file_header_path(line))
        elif self.current_file is not None:
            self._feed_metadata(line)

    def _feed_hunk_line(self, line: str) -> bool:
        """Record a body line of the open hunk; False if it is not one."""
        assert self.current_hunk is not None

        if line.startswith("\\"):
            # "\ No newline at end of file"
            return True

        if line == "":
            kind, content = " ", ""
        elif line[0] in "+- ":
            kind, content = line[0], line[1:]
        else:
            logger.debug(
                "Truncated hunk %r in %s", self.current_hunk.header, self._filename()
            )
            self._old_remaining = self._new_remaining = 0
            return False

        if kind in "- ":
            self._old_remaining -= 1
        if kind in "+ ":
            self._new_remaining -= 1
        self.current_hunk.lines.append(HunkLine(kind=kind, content=content))
        return True

    def _filename(self) -> str:
        return self.current_file.filename if self.current_file else "<unknown>"

    def _flush_hunk(self) -> None:
        if self.current_hunk is not None and self.current_file is not None:
            self.current_file.hunks.append(self.current_hunk)
        self.current_hunk = None
        self._old_remaining = self._new_remaining = 0

    def _flush_file(self) -> None:
        self._flush_hunk()
        if self.current_file is not None:
            self.files.append(self.current_file)
        self.current_file = None

    def _start_git_file(self, line: str) -> None:
        self._flush_file()
        old_path, new_path = parse_git_header(line)
        filename = new_path or old_path or "unknown"
        self.current_file = FileDiff(
            filename=filename, old_path=old_path, new_path=new_path
        )
        self._pending_old_seen = False

    def _file_header_pair(self, new_path: str | None) -> None:
        """Handle '+++' after '---': names the file, or opens one for plain diffs."""
        old_path = self._pending_old_path
        seen = self._pending_old_seen
        self._pending_old_path = None
        self._pending_old_seen = False

        if self.current_file is not None and not self.current_file.hunks:
            # Git header already opened this file; refine its paths
            if seen:
                self.current_file.old_path = old_path
                self.current_file.is_new_file |= old_path is None
            self.current_file.new_path = new_path
            self.current_file.is_deleted_file |= new_path is None
            if new_path is None and old_path is not None:
                self.current_file.filename = old_path
            return

        self._flush_file()
        self.current_file = FileDiff(
            filename=new_path or old_path or "unknown",
            old_path=old_path,
            new_path=new_path,
            is_new_file=seen and old_path is None,
            is_deleted_file=new_path is None,
        )

    def _feed_metadata(self, line: str) -> None:
        assert self.current_file is not None
        if line.startswith("new file mode"):
            self.current_file.is_new_file = True
        elif line.startswith("deleted file mode"):
            self.current_file.is_deleted_file = True
        elif line.startswith("Binary files ") or line.startswith("GIT binary patch"):
            self.current_file.is_binary = True

    def _start_hunk(self, line: str) -> None:
        self._flush_hunk()
        hunk = parse_hunk_header(line)
        if hunk is None:
            logger.debug("Skipping malformed hunk header %r", line)
            return
        if self.current_file is None:
            self.current_file = FileDiff(filename="unknown")
        self.current_hunk = hunk
        self._old_remaining = hunk.old_count
        self._new_remaining = hunk.new_count
        if not self.hunk_open:
            # Zero-length hunk, nothing to read
            self._flush_hunk()

    def finish(self) -> list[FileDiff]:
        if self.current_hunk is not None and self.hunk_open:
            logger.debug(
                "Input ended inside hunk %r of %s",
                self.current_hunk.header,
                self._filename(),
            )
        self._flush_file()
        return self.files


def parse_unified_diff(text: str) -> list[FileDiff]:
    """Parse unified diff text into per-file hunk records.

    Args:
        text: Raw diff output for one or many files.

    Returns:
        FileDiff records in input order. Empty for empty or unrecognised input.

    Examples:
        >>> files = parse_unified_diff("--- a/f.py\\n+++ b/f.py\\n@@ -1 +1 @@\\n-a\\n+b\\n")
        >>> files[0].filename, len(files[0].hunks)
        ('f.py', 1)
    """
    parser = _DiffParser()
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        parser.feed(line)
    return parser.finish()


def parse_hunks(text: str) -> list[Hunk]:
    """Return the hunks of a single-file diff (all files' hunks, in order)."""
    return [hunk for file_diff in parse_unified_diff(text) for hunk in file_diff.hunks]
