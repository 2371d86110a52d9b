"""Index file storage for csindex.

This module contains the SQLite-backed index file that the driver builds,
merges and publishes, and that the query tool reads.

An index file records two things:
- roots: the paths the user asked to index (what ``cindex --list`` prints)
- files: each indexed file's name and its UTF-8 content

Trigram postings are not stored here; the query side derives them.

ARCHITECTURE: Build beside, then rename
- IndexBuilder writes into a private scratch file next to its target
- flush() commits, marks the file read-only and os.replace()s it into place
- A crash before flush leaves only a ``*.build~`` scratch file behind; the
  target path is never half-written
"""

import os
import sqlite3
import tempfile
import urllib.parse
from collections.abc import Iterable, Iterator
from typing import BinaryIO

from csindex.utils.logging import logger

from .config import (
    BUILD_SUFFIX,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_LINE_LENGTH,
    INDEX_FORMAT,
    INDEX_FORMAT_VERSION,
    READ_CHUNK_SIZE,
)
from .exceptions import CorruptIndexError, IndexAddError, IndexerError, IndexNotFoundError

SCHEMA = """
CREATE TABLE meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
CREATE TABLE roots (
    path TEXT PRIMARY KEY
);
CREATE TABLE files (
    name TEXT PRIMARY KEY,
    content BLOB NOT NULL
);
"""


def is_under_root(name: str, root: str) -> bool:
    """True when ``name`` is ``root`` itself or lies below it."""
    if name == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return name.startswith(prefix)


class IndexReader:
    """Read-only view of an index file.

    Opened in SQLite read-only mode, so readers never block or modify the
    published file.
    """

    def __init__(self, path: str):
        self.path = path
        if not os.path.isfile(path):
            raise IndexNotFoundError(path)
        uri = f"file:{urllib.parse.quote(os.path.abspath(path))}?mode=ro"
        self.conn = sqlite3.connect(uri, uri=True)
        try:
            self._check_format()
        except BaseException:
            self.conn.close()
            raise

    def _check_format(self) -> None:
        try:
            rows = dict(self.conn.execute("SELECT key, value FROM meta").fetchall())
        except sqlite3.DatabaseError as e:
            raise CorruptIndexError(self.path, f"not an index file ({e})") from e
        if rows.get("format") != INDEX_FORMAT:
            raise CorruptIndexError(self.path, "not an index file")
        if rows.get("version") != str(INDEX_FORMAT_VERSION):
            raise CorruptIndexError(
                self.path,
                f"unsupported index version {rows.get('version')!r} "
                f"(expected {INDEX_FORMAT_VERSION})",
            )

    def paths(self) -> list[str]:
        """Recorded roots, sorted."""
        return [row[0] for row in self.conn.execute("SELECT path FROM roots ORDER BY path")]

    def names(self) -> list[str]:
        """Indexed file names, sorted."""
        return [row[0] for row in self.conn.execute("SELECT name FROM files ORDER BY name")]

    def read(self, name: str) -> bytes | None:
        """Indexed content of ``name``, or None if it is not in the index."""
        row = self.conn.execute("SELECT content FROM files WHERE name = ?", (name,)).fetchone()
        return None if row is None else bytes(row[0])

    def iter_files(self) -> Iterator[tuple[str, bytes]]:
        """Yield (name, content) pairs in name order."""
        for name, content in self.conn.execute("SELECT name, content FROM files ORDER BY name"):
            yield name, bytes(content)

    def search(self, text: str | bytes) -> list[str]:
        """Names of indexed files whose content contains ``text`` literally."""
        needle = text.encode("utf-8") if isinstance(text, str) else text
        cursor = self.conn.execute(
            "SELECT name FROM files WHERE instr(content, ?) > 0 ORDER BY name",
            (needle,),
        )
        return [row[0] for row in cursor]

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "IndexReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class IndexBuilder:
    """Accumulates roots and file contents into a new index file.

    Usage:
        with IndexBuilder(path) as builder:
            builder.add_roots(roots)
            for name in names:
                with open(name, "rb") as f:
                    builder.add(name, f)
            builder.flush()

    ``flush`` must be called exactly once. Leaving the ``with`` block without
    flushing discards the scratch file and leaves ``path`` untouched.
    """

    def __init__(
        self,
        path: str,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    ):
        self.path = path
        self.max_file_size = max_file_size
        self.max_line_length = max_line_length
        self.verbose = False
        self.stats = {
            "files_added": 0,
            "files_skipped": 0,
            "bytes_added": 0,
        }
        self._flushed = False
        self._closed = False

        directory = os.path.dirname(os.path.abspath(path))
        fd, self.build_path = tempfile.mkstemp(
            prefix=os.path.basename(path) + ".", suffix=BUILD_SUFFIX, dir=directory
        )
        os.close(fd)
        try:
            self.conn = sqlite3.connect(self.build_path)
            self.conn.execute("PRAGMA journal_mode=MEMORY")
            self.conn.executescript(SCHEMA)
            self.conn.executemany(
                "INSERT INTO meta (key, value) VALUES (?, ?)",
                [("format", INDEX_FORMAT), ("version", str(INDEX_FORMAT_VERSION))],
            )
        except BaseException:
            self._remove_build_file()
            raise

    def _check_open(self) -> None:
        if self._flushed:
            raise IndexerError(f"{self.path}: index already flushed")
        if self._closed:
            raise IndexerError(f"{self.path}: index builder discarded")

    def add_roots(self, paths: Iterable[str]) -> None:
        """Record ``paths`` as roots of this index."""
        self._check_open()
        self.conn.executemany(
            "INSERT OR IGNORE INTO roots (path) VALUES (?)",
            [(path,) for path in paths],
        )

    def add(self, name: str, stream: BinaryIO) -> bool:
        """Add one file's content under ``name``.

        Content the query side cannot use (oversized, binary, invalid UTF-8,
        very long lines) is skipped, not failed.

        Returns:
            True if the file was added, False if it was skipped

        Raises:
            IndexAddError: reading ``stream`` failed
        """
        self._check_open()
        try:
            data = self._read_content(stream)
        except (OSError, UnicodeError) as e:
            raise IndexAddError(name, e) from e

        reason = self._skip_reason(data)
        if reason is not None:
            self.stats["files_skipped"] += 1
            if self.verbose:
                logger.info("{}: {}, ignoring", name, reason)
            return False

        self._insert(name, data)
        self.stats["files_added"] += 1
        self.stats["bytes_added"] += len(data)
        return True

    def _read_content(self, stream: BinaryIO) -> bytes | None:
        """Read the whole stream, or None once it exceeds max_file_size."""
        parts = []
        total = 0
        while True:
            chunk = stream.read(READ_CHUNK_SIZE)
            if not chunk:
                return b"".join(parts)
            total += len(chunk)
            if total > self.max_file_size:
                return None
            parts.append(chunk)

    def _skip_reason(self, data: bytes | None) -> str | None:
        if data is None:
            return "too long"
        if b"\x00" in data:
            return "binary file"
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            return "invalid UTF-8"
        if any(len(line) > self.max_line_length for line in data.split(b"\n")):
            return "very long lines"
        return None

    def _insert(self, name: str, content: bytes) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO files (name, content) VALUES (?, ?)",
            (name, content),
        )

    def flush(self) -> None:
        """Write everything to ``path`` and make the index read-only."""
        self._check_open()
        self._flushed = True
        try:
            self.conn.commit()
        except sqlite3.Error:
            self.conn.close()
            self._remove_build_file()
            raise
        self.conn.close()
        try:
            os.chmod(self.build_path, 0o444)
            os.replace(self.build_path, self.path)
        except OSError:
            self._remove_build_file()
            raise
        if self.verbose:
            logger.info(
                "{}: {} file(s) added, {} skipped, {} bytes",
                self.path,
                self.stats["files_added"],
                self.stats["files_skipped"],
                self.stats["bytes_added"],
            )

    def discard(self) -> None:
        """Drop the unflushed scratch file."""
        if self._flushed or self._closed:
            return
        self._closed = True
        self.conn.close()
        self._remove_build_file()

    def _remove_build_file(self) -> None:
        try:
            os.remove(self.build_path)
        except FileNotFoundError:
            pass

    def __enter__(self) -> "IndexBuilder":
        return self

    def __exit__(self, *exc_info) -> None:
        self.discard()


def merge_indexes(dest: str, staging: str, master: str) -> None:
    """Write to ``dest`` the merge of ``master`` and the newer ``staging``.

    Roots are the union of both. Every file in ``staging`` is kept. A file in
    ``master`` survives only if ``staging`` neither contains it nor records a
    root above it, so files deleted from disk under a re-indexed root drop
    out of the merged index.
    """
    with IndexReader(master) as old, IndexReader(staging) as new:
        new_roots = new.paths()
        with IndexBuilder(dest) as builder:
            builder.add_roots(sorted(set(old.paths()) | set(new_roots)))

            new_names = set()
            for name, content in new.iter_files():
                builder._insert(name, content)
                new_names.add(name)

            dropped = 0
            for name, content in old.iter_files():
                if name in new_names or any(is_under_root(name, root) for root in new_roots):
                    dropped += 1
                    continue
                builder._insert(name, content)

            builder.flush()
    logger.debug(
        "merged {} new file(s) into {}, {} old file(s) superseded",
        len(new_names),
        dest,
        dropped,
    )
