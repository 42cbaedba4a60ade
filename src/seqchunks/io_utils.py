import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, Sequence, TextIO


@contextmanager
def open_output(path: Optional[str]) -> Iterator[TextIO]:
    """Open path for writing, or use stdout when no path is given. Stdout is left open."""
    if path is None:
        yield sys.stdout
        sys.stdout.flush()
        return
    with open(path, "w") as out:
        yield out


def open_inputs(paths: Optional[Sequence[str]]) -> Iterator[BinaryIO]:
    """Yield a binary reader per input path, or stdin when no paths are given.

    Each file is closed before the next one is opened. Stdin is left open.
    """
    if not paths:
        yield sys.stdin.buffer
        return
    for path in paths:
        with open(path, "rb") as f:
            yield f


class LineEndingReader:
    """Binary reader that turns CRLF line endings into LF while reading.

    A CR that ends one read is held back until the next read shows whether an
    LF follows it. Lone CRs are passed through unchanged.
    """

    def __init__(self, source: BinaryIO) -> None:
        read1 = getattr(source, "read1", None)
        self._read = read1 if read1 is not None else source.read
        self._held = b""

    def read(self, size: int = -1) -> Optional[bytes]:
        while True:
            data = self._read(size)
            if data is None:
                return None
            if not data:
                held, self._held = self._held, b""
                return held
            data = self._held + data
            self._held = b""
            if data.endswith(b"\r"):
                data, self._held = data[:-1], b"\r"
            data = data.replace(b"\r\n", b"\n")
            if data:
                return data
