"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest

from csindex.indexer.database import IndexBuilder
from csindex.utils.logging import logger


@pytest.fixture
def tmp_index(tmp_path):
    """Published index location inside a fresh directory."""
    index_dir = tmp_path / "index"
    index_dir.mkdir()
    return str(index_dir / "csearchindex")


@pytest.fixture
def sample_tree(tmp_path):
    """
    Source tree exercising the skip rules.

    Layout:
      src/a.txt            "hello"
      src/.hidden/b.txt    "skip me"
      src/c~               "skip me too"
      src/lib/util.c       "int main"
    """
    root = tmp_path / "src"
    root.mkdir()
    (root / "a.txt").write_text("hello")
    (root / ".hidden").mkdir()
    (root / ".hidden" / "b.txt").write_text("skip me")
    (root / "c~").write_text("skip me too")
    (root / "lib").mkdir()
    (root / "lib" / "util.c").write_text("int main")
    return root


@pytest.fixture
def log_messages():
    """Capture loguru messages (DEBUG and up) as plain strings."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m).rstrip("\n")), format="{message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)


def build_index(path: str, roots: list[str], files: dict[str, bytes]) -> str:
    """Write an index file directly, bypassing the walker."""
    with IndexBuilder(path) as builder:
        builder.add_roots(roots)
        for name, content in files.items():
            builder._insert(name, content)
        builder.flush()
    return path


@pytest.fixture
def make_index():
    return build_index


def indexed_files(path: str | Path) -> dict[str, bytes]:
    """Name -> content of every file in an index."""
    from csindex.indexer.database import IndexReader

    with IndexReader(str(path)) as reader:
        return dict(reader.iter_files())


@pytest.fixture
def read_index():
    return indexed_files
