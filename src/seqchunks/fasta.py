"""
FASTA records: parsing from text chunks, streaming from binary input and writing.
"""

from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, TextIO

from seqchunks.chunks import DEFAULT_READ_SIZE, chunks
from seqchunks.formats import FASTA_SENTINEL

DEFAULT_LINE_LENGTH = 60


class FastaParseError(ValueError):
    pass


@dataclass
class FastaDescription:
    identifier: Optional[str]
    description: Optional[str]

    @classmethod
    def read(cls, descr_line: str) -> "FastaDescription":
        """Split a description line into identifier and description at the first space."""
        parts = descr_line.split(" ", 1)
        identifier = parts[0] or None
        description = parts[1] if len(parts) > 1 else None
        return cls(identifier=identifier, description=description)


@dataclass
class FastaRecord:
    descr_line: str
    seq: str

    @property
    def identifier(self) -> Optional[str]:
        return FastaDescription.read(self.descr_line).identifier

    @staticmethod
    def descr_line_for(identifier: Optional[str], description: Optional[str]) -> str:
        parts = []
        if identifier:
            parts.append(identifier)
        if description:
            parts.append(description)
        return " ".join(parts)

    def write(self, out: TextIO, line_length: int = DEFAULT_LINE_LENGTH) -> None:
        if line_length < 1:
            raise ValueError(f"Line length must be positive, got {line_length}")
        out.write(f">{self.descr_line}\n")
        for i in range(0, len(self.seq), line_length):
            out.write(f"{self.seq[i:i + line_length]}\n")


def parse_fastas(text: str) -> List[FastaRecord]:
    """Parse all FASTA records in a piece of text.

    Sequence lines may contain whitespace-separated tokens; they are joined without
    separator. Blank text before the first header is ignored.

    Raises:
        FastaParseError: If non-blank text comes before the first '>' header.
    """
    records: List[FastaRecord] = []
    descr_line: Optional[str] = None
    seq_parts: List[str] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if stripped.startswith(">"):
            if descr_line is not None:
                records.append(FastaRecord(descr_line=descr_line, seq="".join(seq_parts)))
            descr_line = stripped[1:].strip()
            seq_parts = []
        elif not stripped:
            continue
        elif descr_line is None:
            raise FastaParseError(f"Expected a '>' header line but got line {lineno}: {line}")
        else:
            seq_parts.extend(stripped.split())
    if descr_line is not None:
        records.append(FastaRecord(descr_line=descr_line, seq="".join(seq_parts)))
    return records


def fasta_chunks(source: BinaryIO, read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    """Split a binary source into one chunk per FASTA record.

    A '>' only opens a record at the start of a line. A chunk whose predecessor
    does not end a line (e.g. the '>' in "protein A>B") is joined back onto it.
    """
    pending = b""
    for chunk in chunks(source, FASTA_SENTINEL, read_size=read_size):
        if pending and not pending.endswith(b"\n"):
            pending += chunk
            continue
        if pending:
            yield pending
        pending = chunk
    if pending:
        yield pending


def read_fastas(source: BinaryIO, encoding: str = "utf-8", read_size: int = DEFAULT_READ_SIZE) -> Iterator[FastaRecord]:
    """Stream FASTA records from a binary source, one chunk per record."""
    for chunk in fasta_chunks(source, read_size=read_size):
        yield from parse_fastas(chunk.decode(encoding))
