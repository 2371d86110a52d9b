"""Custom exceptions for the indexer package.

Everything that makes the resulting index untrustworthy is raised as an
``IndexerError`` subclass and stops the run. Per-entry problems (a path that
cannot be resolved, an unreadable directory) are logged where they happen and
never raised.
"""


class IndexerError(Exception):
    """Base class for fatal indexing failures."""


class UnknownEncodingError(IndexerError):
    """Raised when an ``--encodings`` item names no known codec.

    Attributes:
        name: The encoding name as given by the user
    """

    def __init__(self, name: str):
        super().__init__(f"{name!r}: unknown encoding")
        self.name = name


class IndexNotFoundError(IndexerError):
    """Raised when the published index must be read but does not exist."""

    def __init__(self, path: str):
        super().__init__(f"{path}: no index found")
        self.path = path


class CorruptIndexError(IndexerError):
    """Raised when a file is not a readable csindex index."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class StreamRewindError(IndexerError):
    """Raised when a content source cannot be rewound between encoding probes."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"{path!r}: rewind failed: {cause}")
        self.path = path


class IndexAddError(IndexerError):
    """Raised when a file's content cannot be read while adding it."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"{path!r}: {cause}")
        self.path = path


class PublishError(IndexerError):
    """Raised when merging or renaming into the published location fails.

    The previously published index is intact when this is raised.
    """
