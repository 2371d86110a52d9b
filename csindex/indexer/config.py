"""Indexer configuration - constants and patterns.

This module contains ONLY configuration constants for the indexer package.
"""

# =============================================================================
# FILE SYSTEM CONFIGURATION
# =============================================================================

# Base names starting with one of these are hidden or editor temporaries
SKIP_NAME_PREFIXES: tuple[str, ...] = (".", "#", "~")

# Base names ending with one of these are editor backups
SKIP_NAME_SUFFIXES: tuple[str, ...] = ("~",)


# =============================================================================
# PUBLISH PROTOCOL
# =============================================================================

# Staging index: <published>~ (incremental builds land here first)
STAGING_SUFFIX = "~"

# Merge output: <published>~~ (renamed over the published index)
MERGE_SUFFIX = "~~"

# Builder scratch files live beside their target with this suffix
BUILD_SUFFIX = ".build~"


# =============================================================================
# CONTENT LIMITS
# =============================================================================

# Files larger than this are skipped by the index builder
DEFAULT_MAX_FILE_SIZE = 1 << 30

# Files with a longer line are skipped (generated or minified content)
DEFAULT_MAX_LINE_LENGTH = 2000

# Read size for encoding probes and content reads
READ_CHUNK_SIZE = 64 * 1024


# =============================================================================
# INDEX FILE FORMAT
# =============================================================================

INDEX_FORMAT = "csindex"
INDEX_FORMAT_VERSION = 1
