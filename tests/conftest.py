"""Pytest configuration and shared fixtures for splitdiff tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from splitdiff.config import get_settings
from splitdiff.diff.models import DiffFile, DiffLine

GIT_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,3 +1,3 @@ def main():
 import os
-import sys
+import json

@@ -10,2 +10,3 @@ class App:
     def run(self):
+        self.setup()
         return 0
diff --git a/docs/new.md b/docs/new.md
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/docs/new.md
@@ -0,0 +1,2 @@
+# Title
+body
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 1111111..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-gone
diff --git a/logo.png b/logo.png
index 2222222..3333333 100644
Binary files a/logo.png and b/logo.png differ
"""


def run(cmd: list[str], cwd: Path) -> None:
    """Run a command in cwd, failing the test on error."""
    subprocess.run(cmd, cwd=cwd, check=True, capture_output=True)


def make_diff_file(filename: str, count: int) -> DiffFile:
    """Create a DiffFile of count unchanged lines."""
    lines = tuple(DiffLine.normal(i, i, f"line {i}") for i in range(1, count + 1))
    return DiffFile(filename=filename, lines=lines)


@pytest.fixture
def git_diff_text() -> str:
    """Return a multi-file diff as printed by git."""
    return GIT_DIFF


@pytest.fixture
def long_file() -> DiffFile:
    """Return a 100-line mixed alignment."""
    lines = []
    for i in range(1, 101):
        if i % 10 == 0:
            lines.append(DiffLine.modified(i, i, f"old {i}", f"new {i}"))
        else:
            lines.append(DiffLine.normal(i, i, f"line {i}"))
    return DiffFile(filename="long.py", lines=tuple(lines))


@pytest.fixture
def small_files() -> list[DiffFile]:
    """Return three small files for selection tests."""
    return [make_diff_file(f"file{i}.txt", 5 + i) for i in range(3)]


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a throwaway repository with one committed file.

    Skips when git is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    run(["git", "init", "-q"], tmp_path)
    run(["git", "config", "user.email", "test@example.com"], tmp_path)
    run(["git", "config", "user.name", "Test"], tmp_path)
    run(["git", "config", "commit.gpgsign", "false"], tmp_path)
    (tmp_path / "a.txt").write_text("a\nb\nc\n", encoding="utf-8")
    run(["git", "add", "a.txt"], tmp_path)
    run(["git", "commit", "-q", "-m", "initial"], tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def git_cmd():
    """Return a helper running a git command inside a repository."""

    def _git(repo: Path, *args: str) -> None:
        run(["git", *args], repo)

    return _git
