"""Tests for the file walker and its skip rules."""

import os

import pytest

from csindex.indexer.core import DiscoveredFile, is_skipped_name, walk_files


def walked(root) -> list[str]:
    return [f.path for f in walk_files(str(root))]


@pytest.mark.parametrize(
    "name, skipped",
    [
        (".git", True),
        (".env", True),
        ("#draft#", True),
        ("~lock.doc", True),
        ("notes~", True),
        ("~", True),
        ("foo.txt", False),
        ("a~b", False),
        ("mid.dot", False),
        ("", False),
    ],
)
def test_skip_rule(name, skipped):
    assert is_skipped_name(name) is skipped


class TestWalkFiles:
    """Depth-first traversal with pruning."""

    def test_hidden_and_backup_entries_are_skipped(self, sample_tree):
        assert walked(sample_tree) == [
            str(sample_tree / "a.txt"),
            str(sample_tree / "lib" / "util.c"),
        ]

    def test_pruning_is_inherited(self, tmp_path):
        git = tmp_path / ".git"
        (git / "objects").mkdir(parents=True)
        (git / "foo.txt").write_text("x")
        (git / "objects" / "pack").write_text("x")
        (tmp_path / "keep.txt").write_text("x")

        assert walked(tmp_path) == [str(tmp_path / "keep.txt")]

    def test_backup_file_never_yielded(self, tmp_path):
        (tmp_path / "foo~").write_text("x")
        (tmp_path / "#foo#").write_text("x")

        assert walked(tmp_path) == []

    def test_entries_visited_in_sorted_order(self, tmp_path):
        for name in ["zeta", "alpha", "Mid"]:
            (tmp_path / name).mkdir()
            (tmp_path / name / "f").write_text(name)

        assert walked(tmp_path) == [
            str(tmp_path / "Mid" / "f"),
            str(tmp_path / "alpha" / "f"),
            str(tmp_path / "zeta" / "f"),
        ]

    def test_root_may_be_a_single_file(self, tmp_path):
        target = tmp_path / "one.txt"
        target.write_text("hello")

        assert list(walk_files(str(target))) == [DiscoveredFile(path=str(target), size=5)]

    def test_hidden_root_is_skipped(self, tmp_path):
        hidden = tmp_path / ".config"
        hidden.mkdir()
        (hidden / "settings").write_text("x")

        assert walked(hidden) == []

    def test_symlinks_are_not_followed_or_yielded(self, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        (real / "file.txt").write_text("x")
        root = tmp_path / "root"
        root.mkdir()
        (root / "dirlink").symlink_to(real)
        (root / "filelink").symlink_to(real / "file.txt")
        (root / "plain.txt").write_text("x")

        assert walked(root) == [str(root / "plain.txt")]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="POSIX only")
    def test_special_files_are_not_yielded(self, tmp_path):
        os.mkfifo(tmp_path / "pipe")
        (tmp_path / "plain").write_text("x")

        assert walked(tmp_path) == [str(tmp_path / "plain")]

    def test_missing_root_is_logged_not_raised(self, tmp_path, log_messages):
        missing = tmp_path / "missing"

        assert walked(missing) == []
        assert any(str(missing) in m for m in log_messages)

    def test_unreadable_directory_is_skipped(self, tmp_path, monkeypatch, log_messages):
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret.txt").write_text("x")
        (tmp_path / "open.txt").write_text("x")

        real_listdir = os.listdir

        def fake_listdir(path):
            if str(path) == str(locked):
                raise PermissionError(13, "Permission denied", str(path))
            return real_listdir(path)

        monkeypatch.setattr(os, "listdir", fake_listdir)

        assert walked(tmp_path) == [str(tmp_path / "open.txt")]
        assert any("Permission denied" in m for m in log_messages)

    def test_walk_is_lazy(self, sample_tree):
        walk = walk_files(str(sample_tree))

        first = next(walk)

        assert first.path == str(sample_tree / "a.txt")

    def test_deeply_nested_tree(self, tmp_path):
        depth = 1500
        deepest = os.path.join(str(tmp_path), *(["d"] * depth))
        os.makedirs(deepest)
        with open(os.path.join(deepest, "leaf.txt"), "w") as f:
            f.write("leaf")
        (tmp_path / "z.txt").write_text("z")

        assert walked(tmp_path) == [
            os.path.join(deepest, "leaf.txt"),
            str(tmp_path / "z.txt"),
        ]
