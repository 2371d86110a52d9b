"""csindex Indexer Package.

Build/update driver for the trigram search index:
- paths: canonical, sorted target roots
- core: walker with hidden/temporary-name skip rules
- encodings: candidate resolution and last-match-wins detection
- database: index file builder, reader and merge
- publish: direct vs. incremental publication with atomic rename
- orchestrator / runner: the sequential pipeline tying them together
"""

from .core import DiscoveredFile, is_skipped_name, walk_files
from .database import IndexBuilder, IndexReader, merge_indexes
from .encodings import EncodingCandidate, detect_encoding, open_encoded, resolve_encodings
from .orchestrator import IndexerOrchestrator, IndexRunStats
from .paths import canonicalize_paths, plan_targets, resolve_link_once
from .publish import PublishCoordinator, PublishMode, remove_index
from .runner import list_roots, reset_index, run_repository_index

__all__ = [
    "DiscoveredFile",
    "is_skipped_name",
    "walk_files",
    "IndexBuilder",
    "IndexReader",
    "merge_indexes",
    "EncodingCandidate",
    "detect_encoding",
    "open_encoded",
    "resolve_encodings",
    "IndexerOrchestrator",
    "IndexRunStats",
    "canonicalize_paths",
    "plan_targets",
    "resolve_link_once",
    "PublishCoordinator",
    "PublishMode",
    "remove_index",
    "list_roots",
    "reset_index",
    "run_repository_index",
]
