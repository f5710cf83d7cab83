"""
Build DiffFile records for changed paths from git.

For each path the loader fetches the before/after contents and the unified
diff, then aligns them. Content that cannot be fetched (a newly created or
deleted file) is treated as empty; a path whose diff cannot be fetched is
skipped and reported instead of aborting the run.

Sides compared:
    - unstaged (default): index -> working tree, like `git diff`
    - staged: HEAD -> index, like `git diff --cached`
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

from splitdiff.diff.alignment import (
    AlignmentError,
    MatchStrategy,
    align_file,
    align_hunk_lines,
    check_alignment,
    split_lines,
)
from splitdiff.diff.models import DiffFile, FileDiff
from splitdiff.diff.parser import parse_unified_diff
from splitdiff.git import (
    DEFAULT_GIT_BINARY,
    INDEX_REF,
    WORKTREE_REF,
    GitError,
    get_file_content,
    get_toplevel,
    get_unified_diff,
)
from splitdiff.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading a set of paths.

    Attributes:
        files: Aligned files, in the order the paths were given.
        skipped: (path, reason) for every path that could not be shown.
    """

    files: list[DiffFile] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)


def decode_content(data: bytes) -> str:
    """Decode file bytes for display, replacing undecodable sequences."""
    return data.decode("utf-8", errors="replace")


class DiffLoader:
    """Fetches and aligns changed files from one repository."""

    def __init__(
        self,
        *,
        cached: bool = False,
        context_lines: int = 3,
        strategy: MatchStrategy = MatchStrategy.SEQUENCE,
        hunks_only: bool = False,
        repo_dir: str | Path | None = None,
        git_binary: str = DEFAULT_GIT_BINARY,
    ) -> None:
        """Initialize the loader.

        Args:
            cached: Compare HEAD with the index instead of the index with
                the working tree.
            context_lines: Context lines requested from git diff.
            strategy: How lines inside a hunk are linked.
            hunks_only: Skip content fetching and show only hunk regions.
            repo_dir: Any directory inside the repository; paths are
                resolved against its top level.
            git_binary: Executable to run.
        """
        self.cached = cached
        self.context_lines = context_lines
        self.strategy = strategy
        self.hunks_only = hunks_only
        self.repo_dir = repo_dir
        self.git_binary = git_binary
        self._toplevel: Path | None = None

    @property
    def toplevel(self) -> Path:
        """Root of the working tree; changed paths are relative to it."""
        if self._toplevel is None:
            self._toplevel = get_toplevel(self.repo_dir, git_binary=self.git_binary)
        return self._toplevel

    @property
    def old_ref(self) -> str | None:
        return "HEAD" if self.cached else INDEX_REF

    @property
    def new_ref(self) -> str | None:
        return INDEX_REF if self.cached else WORKTREE_REF

    def _content(self, ref: str | None, path: str) -> str:
        try:
            data = get_file_content(
                ref, path, repo_dir=self.toplevel, git_binary=self.git_binary
            )
        except GitError as e:
            logger.warning("Using empty content for %s: %s", path, e)
            return ""
        return decode_content(data)

    def _file_diff(self, path: str, diff_text: str) -> FileDiff:
        for file_diff in parse_unified_diff(diff_text):
            if path in (file_diff.filename, file_diff.old_path, file_diff.new_path):
                return file_diff
        return FileDiff(filename=path)

    def load(self, path: str) -> DiffFile:
        """Align one changed path.

        Args:
            path: Repository-relative path.

        Returns:
            The aligned file.

        Raises:
            GitError: If the diff for the path cannot be obtained.
            ValueError: If git reports the path as a binary file.
        """
        diff_text = get_unified_diff(
            path,
            context_lines=self.context_lines,
            cached=self.cached,
            repo_dir=self.toplevel,
            git_binary=self.git_binary,
        )
        file_diff = self._file_diff(path, diff_text)
        if file_diff.is_binary:
            raise ValueError("binary file")

        if self.hunks_only:
            return align_hunk_lines(file_diff)

        old_text = self._content(self.old_ref, path)
        new_text = self._content(self.new_ref, path)
        diff_file = align_file(path, old_text, new_text, file_diff.hunks, self.strategy)

        if logger.isEnabledFor(logging.DEBUG):
            try:
                check_alignment(
                    diff_file.lines, len(split_lines(old_text)), len(split_lines(new_text))
                )
            except AlignmentError as e:
                logger.debug("Alignment check failed for %s: %s", path, e)
        return diff_file

    def iter_load(
        self, paths: Sequence[str]
    ) -> Iterator[tuple[str, DiffFile | None, str | None]]:
        """Load paths one at a time.

        Yields:
            (path, diff_file, None) on success or (path, None, reason) when
            the path has to be skipped.
        """
        for path in paths:
            try:
                yield path, self.load(path), None
            except (GitError, ValueError) as e:
                logger.warning("Skipping %s: %s", path, e)
                yield path, None, str(e)

    def load_all(self, paths: Sequence[str]) -> LoadResult:
        """Load every path, collecting skipped ones."""
        result = LoadResult()
        for path, diff_file, reason in self.iter_load(paths):
            if diff_file is not None:
                result.files.append(diff_file)
            else:
                result.skipped.append((path, reason or "unknown error"))
        return result
