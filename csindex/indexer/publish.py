"""Publish protocol for the index file.

Two modes, chosen once per run:

- DIRECT: reset requested, or nothing published yet. The builder targets the
  published location; its flush is the publication.
- INCREMENTAL: the builder targets the staging file ``<index>~``. publish()
  merges staging with the current index into ``<index>~~`` and renames that
  over the published index.

The previously published index is only ever replaced by os.replace(), never
deleted first, so a crash at any point leaves a valid index in place. Stray
``~`` files from an interrupted run are harmless and are overwritten by the
next run.
"""

import glob
import os
from enum import Enum

from csindex.utils.logging import logger

from .config import BUILD_SUFFIX, MERGE_SUFFIX, STAGING_SUFFIX
from .database import merge_indexes
from .exceptions import PublishError


class PublishMode(Enum):
    DIRECT = "direct"
    INCREMENTAL = "incremental"


def staging_path(index_path: str) -> str:
    return index_path + STAGING_SUFFIX


def merge_path(index_path: str) -> str:
    return index_path + MERGE_SUFFIX


def remove_index(index_path: str) -> list[str]:
    """Delete the published index and any staging, merge or scratch leftovers.

    Returns:
        The paths that were actually removed
    """
    targets = [index_path, staging_path(index_path), merge_path(index_path)]
    # Scratch files of builders that never flushed
    scratch = [
        path
        for target in targets
        for path in sorted(glob.glob(glob.escape(target) + ".*" + BUILD_SUFFIX))
    ]
    removed = []
    for path in targets + scratch:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        removed.append(path)
    return removed


class PublishCoordinator:
    """Chooses where this run builds and publishes the result."""

    def __init__(self, index_path: str, reset: bool = False):
        self.index_path = index_path
        if reset or not os.path.exists(index_path):
            self.mode = PublishMode.DIRECT
        else:
            self.mode = PublishMode.INCREMENTAL
        logger.debug("{} build for {}", self.mode.value, index_path)

    @property
    def build_path(self) -> str:
        """Where the IndexBuilder for this run must write."""
        if self.mode is PublishMode.DIRECT:
            return self.index_path
        return staging_path(self.index_path)

    def publish(self) -> None:
        """Make the flushed build the published index.

        Raises:
            PublishError: merge or rename failed; the old index is intact and
                the staging file is kept for recovery
        """
        if self.mode is PublishMode.DIRECT:
            return

        master = self.index_path
        staging = self.build_path
        merged = merge_path(master)

        logger.info("merge {} {}", master, staging)
        try:
            merge_indexes(dest=merged, staging=staging, master=master)
        except Exception as e:
            self._remove_quietly(merged)
            raise PublishError(f"merge into {master} failed: {e}") from e

        try:
            os.replace(merged, master)
        except OSError as e:
            self._remove_quietly(merged)
            raise PublishError(f"rename {merged} -> {master} failed: {e}") from e

        self._remove_quietly(staging)

    @staticmethod
    def _remove_quietly(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("{}: could not remove: {}", path, e)
