"""Indexer workflow runner."""

import time
from typing import Any

from csindex.utils.logging import logger

from .database import IndexBuilder, IndexReader
from .encodings import resolve_encodings
from .exceptions import IndexerError
from .orchestrator import IndexerOrchestrator
from .paths import plan_targets
from .publish import PublishCoordinator, PublishMode, remove_index


def list_roots(index_path: str) -> list[str]:
    """Roots recorded in the published index."""
    with IndexReader(index_path) as reader:
        return reader.paths()


def reset_index(index_path: str) -> list[str]:
    """Delete the published index and staging leftovers, without rebuilding."""
    removed = remove_index(index_path)
    if removed:
        logger.info("removed {}", ", ".join(removed))
    else:
        logger.info("no index at {}", index_path)
    return removed


def run_repository_index(
    paths: list[str],
    index_path: str,
    reset: bool = False,
    verbose: bool = False,
    encodings: str | None = None,
    limits: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Run the complete index build/update workflow.

    Args:
        paths: Raw roots to index; empty means refresh the recorded roots
        index_path: Published index location
        reset: Rebuild from scratch (with no paths: only delete)
        verbose: Log skipped files and builder totals
        encodings: Comma-separated candidate encodings
        limits: ``max_file_size`` / ``max_line_length`` overrides

    Returns:
        Summary dict with the mode, roots and walk counters

    Raises:
        IndexerError: any fatal failure; the published index is intact unless
            this run was a direct build
    """
    start_time = time.time()

    # Before anything touches the disk
    candidates = resolve_encodings(encodings)

    if reset and not paths:
        removed = reset_index(index_path)
        return {
            "success": True,
            "mode": "reset",
            "removed": removed,
            "elapsed": time.time() - start_time,
        }

    roots = plan_targets(paths, index_path)
    coordinator = PublishCoordinator(index_path, reset=reset)

    with IndexBuilder(coordinator.build_path, **(limits or {})) as builder:
        builder.verbose = verbose
        orchestrator = IndexerOrchestrator(roots, builder, candidates)
        try:
            stats = orchestrator.index()
        except IndexerError:
            # Keep what was added before the failure, but do not publish it
            logger.info("flush index")
            builder.flush()
            if coordinator.mode is PublishMode.INCREMENTAL:
                logger.warning(
                    "partial build left at {}; {} unchanged",
                    coordinator.build_path,
                    index_path,
                )
            raise
        logger.info("flush index")
        builder.flush()

    coordinator.publish()
    logger.info("done")

    return {
        "success": True,
        "mode": coordinator.mode.value,
        "roots": roots,
        "stats": stats,
        "elapsed": time.time() - start_time,
    }
