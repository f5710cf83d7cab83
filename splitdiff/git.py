"""
Thin wrapper around the git binary.

Each function runs one git command synchronously and returns its output.
Failures (non-zero exit, missing binary, unreadable file) raise GitError;
callers decide whether that is fatal.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from splitdiff.logging import get_logger

logger = get_logger(__name__)

DEFAULT_GIT_BINARY = "git"

# Refs understood by get_file_content() besides ordinary revisions
WORKTREE_REF = None
INDEX_REF = ""


class GitError(RuntimeError):
    """A git command failed.

    Attributes:
        cmd: The command that was run.
        returncode: Exit status (None when the process could not start).
        stderr: Captured standard error, decoded.
    """

    def __init__(
        self, message: str, cmd: Sequence[str] = (), returncode: int | None = None, stderr: str = ""
    ) -> None:
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr


def run_git(
    args: Sequence[str],
    repo_dir: str | Path | None = None,
    git_binary: str = DEFAULT_GIT_BINARY,
) -> bytes:
    """Run `git <args>` and return its stdout.

    Args:
        args: Arguments after the binary name.
        repo_dir: Working directory for the command.
        git_binary: Executable to run.

    Returns:
        Raw standard output.

    Raises:
        GitError: If git cannot be started or exits non-zero.
    """
    cmd = [git_binary, *args]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=repo_dir,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        raise GitError(f"Cannot run {git_binary}: {e}", cmd=cmd) from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(
            f"{' '.join(cmd)} exited with status {result.returncode}: {stderr}",
            cmd=cmd,
            returncode=result.returncode,
            stderr=stderr,
        )
    return result.stdout


def get_toplevel(
    repo_dir: str | Path | None = None,
    git_binary: str = DEFAULT_GIT_BINARY,
) -> Path:
    """Return the root of the working tree containing repo_dir.

    Paths printed by `git diff --name-only` are relative to this directory,
    whatever directory the listing was run from.
    """
    output = run_git(["rev-parse", "--show-toplevel"], repo_dir=repo_dir, git_binary=git_binary)
    return Path(output.decode("utf-8", errors="replace").strip())


def list_changed_files(
    cached: bool = False,
    paths: Sequence[str] = (),
    repo_dir: str | Path | None = None,
    git_binary: str = DEFAULT_GIT_BINARY,
) -> list[str]:
    """List changed paths (`git diff --name-only`).

    Args:
        cached: List staged changes instead of unstaged ones.
        paths: Optional pathspecs restricting the listing.
        repo_dir: Repository working directory.
        git_binary: Executable to run.

    Returns:
        Changed paths relative to the repository root, in git's order.
    """
    args = ["diff", "--name-only"]
    if cached:
        args.append("--cached")
    if paths:
        args.extend(["--", *paths])

    output = run_git(args, repo_dir=repo_dir, git_binary=git_binary)
    text = output.decode("utf-8", errors="replace")
    return [line for line in text.splitlines() if line.strip()]


def get_file_content(
    ref: str | None,
    path: str,
    repo_dir: str | Path | None = None,
    git_binary: str = DEFAULT_GIT_BINARY,
) -> bytes:
    """Fetch a path's content at a ref.

    Args:
        ref: A revision such as "HEAD", INDEX_REF ("") for the staged
            version, or WORKTREE_REF (None) for the file on disk.
        path: Repository-relative path.
        repo_dir: Repository working directory.
        git_binary: Executable to run.

    Returns:
        Raw file content.

    Raises:
        GitError: If the path does not exist at that ref.
    """
    if ref is WORKTREE_REF:
        file_path = Path(repo_dir) / path if repo_dir is not None else Path(path)
        try:
            return file_path.read_bytes()
        except OSError as e:
            raise GitError(f"Cannot read {file_path}: {e}") from e

    return run_git(["show", f"{ref}:{path}"], repo_dir=repo_dir, git_binary=git_binary)


def get_unified_diff(
    path: str,
    context_lines: int = 3,
    cached: bool = False,
    repo_dir: str | Path | None = None,
    git_binary: str = DEFAULT_GIT_BINARY,
) -> str:
    """Fetch the unified diff of one path.

    Args:
        path: Repository-relative path.
        context_lines: Lines of context around each change (--unified=N).
        cached: Diff the index against HEAD instead of the worktree against
            the index.
        repo_dir: Repository working directory.
        git_binary: Executable to run.

    Returns:
        Raw diff text.
    """
    args = ["diff", "--no-color", "--no-ext-diff", f"--unified={context_lines}"]
    if cached:
        args.append("--cached")
    args.extend(["--", path])

    output = run_git(args, repo_dir=repo_dir, git_binary=git_binary)
    return output.decode("utf-8", errors="replace")
