"""Tests for loading aligned files from a repository."""

from __future__ import annotations

import pytest

from splitdiff.diff.alignment import MatchStrategy, check_alignment
from splitdiff.diff.loader import DiffLoader, decode_content
from splitdiff.diff.models import LineState
from splitdiff.git import list_changed_files


def states(diff_file) -> list[str]:
    return [line.state.value for line in diff_file.lines]


class TestDecodeContent:
    def test_utf8(self):
        assert decode_content("héllo".encode("utf-8")) == "héllo"

    def test_invalid_bytes_replaced(self):
        assert decode_content(b"a\xffb") == "a�b"


class TestDiffLoader:
    """Tests for DiffLoader against a throwaway repository."""

    def test_refs(self):
        assert DiffLoader().old_ref == ""
        assert DiffLoader().new_ref is None
        assert DiffLoader(cached=True).old_ref == "HEAD"
        assert DiffLoader(cached=True).new_ref == ""

    @pytest.mark.parametrize("strategy", [MatchStrategy.SEQUENCE, MatchStrategy.GREEDY])
    def test_unstaged_change(self, git_repo, strategy):
        (git_repo / "a.txt").write_text("a\nx\nc\n", encoding="utf-8")
        diff_file = DiffLoader(repo_dir=git_repo, strategy=strategy).load("a.txt")

        assert diff_file.filename == "a.txt"
        assert diff_file.lines[0].state is LineState.NORMAL
        assert diff_file.lines[-1].state is LineState.NORMAL
        check_alignment(diff_file.lines, 3, 3)

    def test_staged_change_ignores_worktree(self, git_repo, git_cmd):
        """--cached compares HEAD with the index only."""
        (git_repo / "a.txt").write_text("a\nx\nc\n", encoding="utf-8")
        git_cmd(git_repo, "add", "a.txt")
        (git_repo / "a.txt").write_text("completely\ndifferent\n", encoding="utf-8")

        diff_file = DiffLoader(cached=True, repo_dir=git_repo).load("a.txt")
        assert states(diff_file) == ["normal", "modified", "normal"]
        assert diff_file.lines[1].right_content == "x"

    def test_new_staged_file_is_all_added(self, git_repo, git_cmd):
        (git_repo / "new.txt").write_text("one\ntwo\n", encoding="utf-8")
        git_cmd(git_repo, "add", "new.txt")

        diff_file = DiffLoader(cached=True, repo_dir=git_repo).load("new.txt")
        assert states(diff_file) == ["added", "added"]

    def test_deleted_file_is_all_removed(self, git_repo):
        (git_repo / "a.txt").unlink()

        diff_file = DiffLoader(repo_dir=git_repo).load("a.txt")
        assert states(diff_file) == ["removed", "removed", "removed"]

    def test_whole_file_with_small_context(self, git_repo, git_cmd):
        """Untouched regions outside the hunks are filled in from the contents."""
        lines = [f"line {i}" for i in range(1, 21)]
        (git_repo / "long.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
        git_cmd(git_repo, "add", "long.txt")
        git_cmd(git_repo, "commit", "-q", "-m", "long")

        lines[9] = "changed"
        (git_repo / "long.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")

        diff_file = DiffLoader(repo_dir=git_repo, context_lines=1).load("long.txt")
        assert len(diff_file.lines) == 20
        assert diff_file.stats()["modified"] == 1
        check_alignment(diff_file.lines, 20, 20)

    def test_hunks_only(self, git_repo, git_cmd):
        lines = [f"line {i}" for i in range(1, 21)]
        (git_repo / "long.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")
        git_cmd(git_repo, "add", "long.txt")
        git_cmd(git_repo, "commit", "-q", "-m", "long")

        lines[9] = "changed"
        (git_repo / "long.txt").write_text("\n".join(lines) + "\n", encoding="utf-8")

        diff_file = DiffLoader(repo_dir=git_repo, context_lines=1, hunks_only=True).load(
            "long.txt"
        )
        assert states(diff_file) == ["normal", "modified", "normal"]
        assert diff_file.lines[0].left_number == 9

    def test_binary_file_skipped(self, git_repo, git_cmd):
        (git_repo / "blob.bin").write_bytes(b"\x00\x01\x02")
        git_cmd(git_repo, "add", "blob.bin")
        git_cmd(git_repo, "commit", "-q", "-m", "blob")
        (git_repo / "blob.bin").write_bytes(b"\x00\x03\x04\x05")
        (git_repo / "a.txt").write_text("a\nx\nc\n", encoding="utf-8")

        result = DiffLoader(repo_dir=git_repo).load_all(["a.txt", "blob.bin"])
        assert [f.filename for f in result.files] == ["a.txt"]
        assert result.skipped == [("blob.bin", "binary file")]

    def test_git_failure_skips_path(self, tmp_path):
        """A path whose diff cannot be fetched is reported, not raised."""
        loader = DiffLoader(repo_dir=tmp_path, git_binary="no-such-git-binary")
        items = list(loader.iter_load(["a.txt", "b.txt"]))

        assert [path for path, _, _ in items] == ["a.txt", "b.txt"]
        assert all(diff_file is None for _, diff_file, _ in items)
        assert all("no-such-git-binary" in reason for _, _, reason in items)

    def test_run_from_subdirectory(self, git_repo, git_cmd, monkeypatch):
        """Listed paths are relative to the repository root, not the cwd."""
        sub = git_repo / "sub"
        sub.mkdir()
        (sub / "f.txt").write_text("1\n2\n3\n", encoding="utf-8")
        git_cmd(git_repo, "add", "sub/f.txt")
        git_cmd(git_repo, "commit", "-q", "-m", "sub")
        (sub / "f.txt").write_text("1\nTWO\n3\n", encoding="utf-8")

        monkeypatch.chdir(sub)
        paths = list_changed_files()
        assert paths == ["sub/f.txt"]

        result = DiffLoader().load_all(paths)
        assert result.skipped == []
        assert states(result.files[0]) == ["normal", "modified", "normal"]
        assert result.files[0].stats()["normal"] == 2
