"""
EMBL flat-file entries.

Each entry is a run of lines with a two-letter line code in the first five
columns and ends with a '//' line:

    ID   X56734; SV 1; linear; mRNA; STD; PLN; 1859 BP.
    DE   Trifolium repens mRNA for non-cyanogenic beta-glucosidase
    FT   CDS             14..1495
    FT                   /product="beta-glucosidase"
    SQ   Sequence 1859 BP; 609 A; 314 C; 355 G; 573 T; 8 other;
         aaacaaacca aatatggatt ttattgtagc catatttgct ctgtttgtta        60
    //
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, List, Optional

from seqchunks.chunks import DEFAULT_READ_SIZE, chunks
from seqchunks.feature_table import EMBL_KEY_COLUMNS, FeatureTable
from seqchunks.formats import EMBL_SENTINEL, EMBL_STANZAS
from seqchunks.io_utils import LineEndingReader
from seqchunks.stanzas import Stanza

_LINE_CODE_COLUMNS = EMBL_STANZAS.tag_columns
_SEQUENCE_TAG = "SQ"
_FEATURE_TAG = "FT"
_END_TAG = "//"


@dataclass
class Annotation:
    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class EmblRecord:
    annotations: List[Annotation] = field(default_factory=list)
    sequence: str = ""
    feature_lines: List[str] = field(default_factory=list)

    def values(self, name: str) -> List[str]:
        return [value for annotation in self.annotations if annotation.name == name for value in annotation.values]

    @property
    def identifier(self) -> Optional[str]:
        for value in self.values("ID"):
            identifier = value.split(";", 1)[0].strip()
            if identifier:
                return identifier
        return None

    @property
    def description(self) -> Optional[str]:
        lines = self.values("DE")
        return " ".join(lines) if lines else None

    def features(self) -> FeatureTable:
        """Parse the feature table of this entry.

        Raises:
            FeatureParseError: If a feature's location or qualifiers are malformed.
        """
        return FeatureTable.from_lines(self.feature_lines, key_columns=EMBL_KEY_COLUMNS)

    @classmethod
    def from_stanzas(cls, stanzas: List[Stanza], feature_lines: Optional[List[str]] = None) -> "EmblRecord":
        record = cls(feature_lines=list(feature_lines or []))
        seq_parts = []
        for stanza in stanzas:
            if stanza.tag == _SEQUENCE_TAG:
                # first line is the 'Sequence 1859 BP; ...' header, the rest carry position numbers
                for line in stanza.lines[1:]:
                    seq_parts.extend(token for token in line.split() if token.isalpha())
            elif stanza.tag in (_FEATURE_TAG, _END_TAG, None):
                continue
            else:
                record.annotations.append(Annotation(name=stanza.tag, values=list(stanza.lines)))
        record.sequence = "".join(seq_parts)
        return record

    @classmethod
    def from_text(cls, text: str) -> "EmblRecord":
        lines = text.splitlines()
        feature_lines = [line[_LINE_CODE_COLUMNS:] for line in lines if line[:_LINE_CODE_COLUMNS].strip() == _FEATURE_TAG]
        return cls.from_stanzas(list(EMBL_STANZAS.stanzas(lines)), feature_lines=feature_lines)


def embl_chunks(source: BinaryIO, read_size: int = DEFAULT_READ_SIZE) -> Iterator[bytes]:
    """Split a binary source into one chunk per EMBL entry.

    CRLF line endings are read as LF, so every chunk uses LF only.
    """
    return chunks(LineEndingReader(source), EMBL_SENTINEL, read_size=read_size)


def record_from_chunk(chunk: bytes, encoding: str = "utf-8") -> Optional[EmblRecord]:
    """Parse one chunk, or return None if it holds only whitespace (e.g. trailing blank lines).

    Raises:
        UnicodeDecodeError: If the chunk is not valid in the given encoding.
    """
    text = chunk.decode(encoding)
    if not text.strip():
        return None
    return EmblRecord.from_text(text)


def read_embl(source: BinaryIO, encoding: str = "utf-8", read_size: int = DEFAULT_READ_SIZE) -> Iterator[EmblRecord]:
    """Stream EMBL entries from a binary source, one chunk per entry.

    Chunks holding only whitespace are skipped. Files with CRLF line endings
    are read like LF files.
    """
    for chunk in embl_chunks(source, read_size=read_size):
        record = record_from_chunk(chunk, encoding)
        if record is not None:
            yield record
