"""Target path canonicalization.

Turns raw command line arguments into the sorted, deduplicated set of
absolute roots the walker visits. Sorting here is what makes two runs over
the same inputs produce identical index content.
"""

import os

from csindex.utils.logging import logger

from .database import IndexReader


def resolve_link_once(path: str) -> str:
    """Follow ``path`` one symlink level, never further.

    A path that is not a symlink is returned unchanged. A relative link
    target is interpreted against the link's directory.

    Raises:
        ValueError: path contains a NUL byte
    """
    try:
        target = os.readlink(path)
    except OSError:
        # Not a link (EINVAL) or gone; the walker reports the latter
        return path
    if not target:
        return path
    if not os.path.isabs(target):
        target = os.path.normpath(os.path.join(os.path.dirname(path), target))
    return target


def canonicalize_paths(raw_paths: list[str]) -> list[str]:
    """Absolute, singly-resolved, deduplicated and sorted target paths.

    An entry whose absolute form or link cannot be computed is logged and
    left out; the rest of the run proceeds.
    """
    resolved: list[str] = []
    for raw in raw_paths:
        try:
            resolved.append(resolve_link_once(os.path.abspath(raw)))
        except (OSError, ValueError) as e:
            logger.warning("{}: {}", raw, e)
            resolved.append("")

    targets = sorted(set(resolved))
    # Unresolved entries are "" and sort to the front as one block
    while targets and targets[0] == "":
        targets.pop(0)
    return targets


def plan_targets(raw_paths: list[str], index_path: str) -> list[str]:
    """Roots to index for this run.

    With no arguments the roots recorded in the published index are
    refreshed as they are. They were canonicalized when recorded, and
    resolving their links again would replace a recorded root with its
    target.
    """
    if not raw_paths:
        with IndexReader(index_path) as reader:
            roots = reader.paths()
        logger.debug("Refreshing {} recorded root(s)", len(roots))
        return roots
    return canonicalize_paths(raw_paths)
