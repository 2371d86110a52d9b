"""Indexer orchestration logic."""

from dataclasses import dataclass

from csindex.utils.logging import logger

from .core import walk_files
from .database import IndexBuilder
from .encodings import EncodingCandidate, open_encoded
from .exceptions import IndexAddError, StreamRewindError


@dataclass(slots=True, frozen=True)
class IndexRunStats:
    """Counters for one orchestrated walk."""

    roots: int
    files_seen: int
    files_added: int
    files_skipped: int
    aborted: bool


class IndexerOrchestrator:
    """Feeds every discovered file under each root into one IndexBuilder.

    Roots are walked strictly in the given order, one file at a time. A file
    that cannot be opened, rewound or read stops the whole walk: nothing after
    it is added, everything before it stays in the builder.
    """

    def __init__(
        self,
        roots: list[str],
        builder: IndexBuilder,
        encodings: list[EncodingCandidate] | None = None,
    ):
        self.roots = roots
        self.builder = builder
        self.encodings = encodings or []
        self.counts = {
            "roots": 0,
            "files_seen": 0,
            "files_added": 0,
            "files_skipped": 0,
        }
        self.aborted = False

    def index(self) -> IndexRunStats:
        """Walk all roots into the builder.

        Raises:
            IndexAddError: a discovered file could not be opened or read
            StreamRewindError: a discovered file could not be rewound
        """
        self.builder.add_roots(self.roots)
        try:
            for root in self.roots:
                logger.info("index {}", root)
                self.counts["roots"] += 1
                self._index_root(root)
        except (IndexAddError, StreamRewindError):
            self.aborted = True
            logger.error(
                "indexing stopped after {} file(s); remaining roots not walked",
                self.counts["files_added"],
            )
            raise
        return self.stats()

    def _index_root(self, root: str) -> None:
        for discovered in walk_files(root):
            self.counts["files_seen"] += 1
            try:
                stream = open_encoded(discovered.path, self.encodings)
            except OSError as e:
                raise IndexAddError(discovered.path, e) from e
            with stream:
                added = self.builder.add(discovered.path, stream)
            if added:
                self.counts["files_added"] += 1
            else:
                self.counts["files_skipped"] += 1

    def stats(self) -> IndexRunStats:
        return IndexRunStats(aborted=self.aborted, **self.counts)
