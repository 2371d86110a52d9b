"""Core functionality for file system traversal.

This module contains the walker that enumerates indexable regular files under
one root, applying the hidden/temporary name skip rules.
"""

import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from csindex.utils.logging import logger

from .config import SKIP_NAME_PREFIXES, SKIP_NAME_SUFFIXES


@dataclass(slots=True, frozen=True)
class DiscoveredFile:
    """A regular file that passed the skip rules."""

    path: str
    size: int

    def open(self) -> BinaryIO:
        """Open the file's content for reading. The caller closes it."""
        return open(self.path, "rb")


def is_skipped_name(name: str) -> bool:
    """Check a base name against the hidden/temporary skip rules.

    Args:
        name: Base name of a file or directory (not a full path)

    Returns:
        True for names like ``.git``, ``#draft#``, ``~lock`` or ``notes~``
    """
    if not name:
        return False
    return name.startswith(SKIP_NAME_PREFIXES) or name.endswith(SKIP_NAME_SUFFIXES)


def walk_files(root: str) -> Iterator[DiscoveredFile]:
    """Walk ``root`` depth-first and yield its indexable regular files.

    Entries are visited in sorted name order. Symlinks are never followed
    and never yielded. Unreadable entries are logged and skipped.

    Args:
        root: Absolute file or directory path

    Yields:
        DiscoveredFile for each regular file that passed the skip rules
    """
    if is_skipped_name(os.path.basename(root)):
        return
    try:
        info = os.lstat(root)
    except OSError as e:
        logger.warning("{}: {}", root, e)
        return
    yield from _walk(root, info)


def _walk(root: str, info: os.stat_result) -> Iterator[DiscoveredFile]:
    # Explicit stack; children are pushed in reverse so they pop in sorted order
    stack = [(root, info)]
    while stack:
        path, info = stack.pop()
        mode = info.st_mode
        if stat.S_ISREG(mode):
            yield DiscoveredFile(path=path, size=info.st_size)
            continue
        if not stat.S_ISDIR(mode):
            # Symlinks, sockets, devices, fifos
            continue

        try:
            names = sorted(os.listdir(path))
        except OSError as e:
            logger.warning("{}: {}", path, e)
            continue

        children = []
        for name in names:
            if is_skipped_name(name):
                continue
            child = os.path.join(path, name)
            try:
                children.append((child, os.lstat(child)))
            except OSError as e:
                logger.warning("{}: {}", child, e)
        stack.extend(reversed(children))
