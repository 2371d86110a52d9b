"""Text encoding resolution and detection.

``--encodings`` names an ordered list of candidate codecs. Each file is probed
against every candidate in turn; the LAST candidate that decodes the whole file
cleanly wins and the file is indexed as that text re-encoded to UTF-8. Files
no candidate accepts are indexed byte-for-byte.

Probing never modifies the file. It needs to re-read the content once per
candidate, so the source must support ``seek(0)``.
"""

import codecs
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from csindex.utils.logging import logger

from .config import READ_CHUNK_SIZE
from .exceptions import StreamRewindError, UnknownEncodingError


class SeekableSource(Protocol):
    """Byte source that can be read and rewound (files, ``io.BytesIO``)."""

    def read(self, size: int = -1, /) -> bytes: ...

    def seek(self, offset: int, whence: int = 0, /) -> int: ...


@dataclass(slots=True, frozen=True)
class EncodingCandidate:
    """One resolved candidate encoding."""

    name: str
    codec: codecs.CodecInfo

    def new_decoder(self) -> codecs.IncrementalDecoder:
        """Fresh strict incremental decoder for this encoding."""
        return self.codec.incrementaldecoder(errors="strict")


def resolve_encodings(spec: str | None) -> list[EncodingCandidate]:
    """Parse a comma-separated list of encoding names, keeping order.

    Blank items are ignored, so ``""`` and ``None`` give an empty list
    (no transformation). Only text encodings are accepted.

    Raises:
        UnknownEncodingError: an item names no text encoding
    """
    candidates: list[EncodingCandidate] = []
    for item in (spec or "").split(","):
        name = item.strip()
        if not name:
            continue
        try:
            # bytes.decode rejects both unknown names and bytes-to-bytes codecs
            b"".decode(name)
            info = codecs.lookup(name)
        except LookupError as e:
            raise UnknownEncodingError(name) from e
        candidates.append(EncodingCandidate(name=name, codec=info))
    if candidates:
        logger.debug("Encoding candidates: {}", ", ".join(c.codec.name for c in candidates))
    return candidates


def _decodes_cleanly(source: SeekableSource, candidate: EncodingCandidate) -> bool:
    decoder = candidate.new_decoder()
    try:
        while True:
            chunk = source.read(READ_CHUNK_SIZE)
            if not chunk:
                decoder.decode(b"", final=True)
                return True
            decoder.decode(chunk)
    except UnicodeDecodeError:
        return False


def detect_encoding(
    source: SeekableSource,
    candidates: list[EncodingCandidate],
    name: str = "<stream>",
) -> EncodingCandidate | None:
    """Return the last candidate that decodes ``source`` completely.

    The source is rewound after every probe and is positioned at its start
    on return.

    Raises:
        StreamRewindError: the source could not be rewound
    """
    found = None
    for candidate in candidates:
        if _decodes_cleanly(source, candidate):
            found = candidate
        try:
            source.seek(0)
        except OSError as e:
            raise StreamRewindError(name, e) from e
    return found


class DecodedReader:
    """Read-only byte stream that decodes its source and yields UTF-8.

    Owns the wrapped handle: closing the reader closes the source.
    """

    def __init__(self, source: BinaryIO, candidate: EncodingCandidate):
        self._source = source
        self._decoder = candidate.new_decoder()
        self._pending = b""
        self._eof = False
        self.encoding = candidate.codec.name
        self.name = getattr(source, "name", None)

    def _fill(self) -> bytes:
        raw = self._source.read(READ_CHUNK_SIZE)
        if not raw:
            self._eof = True
        return self._decoder.decode(raw, final=self._eof).encode("utf-8")

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes of UTF-8 (all remaining if negative)."""
        if size is None or size < 0:
            parts = [self._pending]
            self._pending = b""
            while not self._eof:
                parts.append(self._fill())
            return b"".join(parts)
        while len(self._pending) < size and not self._eof:
            self._pending += self._fill()
        out, self._pending = self._pending[:size], self._pending[size:]
        return out

    def close(self) -> None:
        self._source.close()

    @property
    def closed(self) -> bool:
        return self._source.closed

    def __enter__(self) -> "DecodedReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def open_encoded(path: str, candidates: list[EncodingCandidate]) -> BinaryIO | DecodedReader:
    """Open ``path`` for indexing, decoding it with the winning candidate.

    Returns the raw file when no candidate validates. The returned object is
    a context manager; the file handle is closed if detection fails.

    Raises:
        OSError: the file cannot be opened or read
        StreamRewindError: the file could not be rewound between probes
    """
    handle = open(path, "rb")
    try:
        found = detect_encoding(handle, candidates, name=path)
    except BaseException:
        handle.close()
        raise
    if found is None:
        return handle
    logger.trace("{}: decoding as {}", path, found.codec.name)
    return DecodedReader(handle, found)
