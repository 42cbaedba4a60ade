"""
Sentinel-delimited chunking of byte streams.

This module provides functionality to:
- Split an unbounded binary stream into records around a delimiter pattern
- Keep memory bounded by the largest record instead of the whole input
- Scan every input byte a constant number of times
"""

from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterator

DEFAULT_READ_SIZE = 64 * 1024


@dataclass(frozen=True)
class Sentinel:
    """A byte pattern that delimits chunks.

    If marks_end is False the pattern opens a chunk (FASTA '>'), otherwise it
    closes the current chunk and is included at its end (EMBL '//').
    """
    pattern: bytes
    marks_end: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, (bytes, bytearray)):
            raise TypeError(f"Sentinel pattern must be bytes, got {type(self.pattern).__name__}")
        if not self.pattern:
            raise ValueError("Sentinel pattern must not be empty.")
        object.__setattr__(self, "pattern", bytes(self.pattern))


class ChunkReadError(OSError):
    """Reading from the source failed. Bytes already yielded stay valid."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(message)
        self.offset = offset


def _reader_for(source: BinaryIO) -> Callable[[int], bytes]:
    # read1 returns whatever is available instead of blocking for a full read
    read1 = getattr(source, "read1", None)
    return read1 if read1 is not None else source.read


def _fill(read: Callable[[int], bytes], read_size: int, offset: int) -> bytes:
    while True:
        try:
            data = read(read_size)
        except InterruptedError:
            continue
        except OSError as e:
            raise ChunkReadError(f"Failed to read input after {offset} bytes: {e}", offset) from e
        if data is None:
            raise ChunkReadError(
                f"Source returned no data after {offset} bytes without reaching end of input "
                f"(non-blocking source?)", offset)
        return data


def chunks(source: BinaryIO, sentinel: Sentinel, read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    """Lazily split a binary stream into chunks around a sentinel.

    Concatenating the yielded chunks gives back the input exactly. Empty chunks
    are never yielded, and whatever follows the last sentinel is flushed as a
    final chunk at end of input.

    Args:
        source: Binary file-like object providing read1() or read().
        sentinel: Delimiter pattern and whether it opens or closes a chunk.
        read_size: Number of bytes requested per read (default: 64 KiB).

    Yields:
        bytes: One chunk per record.

    Raises:
        ChunkReadError: If the source fails or, being non-blocking, has no data
            ready. The iterator is finished afterwards.
    """
    if read_size < 1:
        raise ValueError(f"read_size must be positive, got {read_size}")

    pattern = sentinel.pattern
    width = len(pattern)
    # a sentinel at the very start of a chunk opens it, so never split there
    skip = 0 if sentinel.marks_end else 1
    read = _reader_for(source)

    buffer = bytearray()
    start = 0      # first byte not yet yielded
    searched = 0   # no match can begin before this offset
    yielded = 0

    while True:
        found = buffer.find(pattern, max(searched, start + skip))
        if found >= 0:
            end = found + width if sentinel.marks_end else found
            if end > start:
                chunk = bytes(buffer[start:end])
                yielded += len(chunk)
                yield chunk
            start = end
            searched = end
            continue

        # the last width - 1 bytes may be the head of a sentinel cut by the read
        searched = max(searched, start + skip, len(buffer) - width + 1)
        if start:
            del buffer[:start]
            searched -= start
            start = 0

        data = _fill(read, read_size, yielded)
        if not data:
            if buffer:
                chunk = bytes(buffer)
                buffer.clear()
                yield chunk
            return
        buffer += data


def chunks_starting_with(source: BinaryIO, pattern: bytes, read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    return chunks(source, Sentinel(pattern, marks_end=False), read_size=read_size)


def chunks_ending_with(source: BinaryIO, pattern: bytes, read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    return chunks(source, Sentinel(pattern, marks_end=True), read_size=read_size)
