"""
Flat GFF3 records.

See: https://github.com/The-Sequence-Ontology/Specifications/blob/master/gff3.md

Escaping rules of the attribute column are not applied.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

_COLUMNS = ["seqid", "source", "type", "start", "end", "score", "strand", "phase", "attributes"]


class GffParseError(ValueError):
    def __init__(self, message: str, lineno: Optional[int] = None) -> None:
        self.reason = message
        self.lineno = lineno
        prefix = f"line {lineno}: " if lineno is not None else ""
        super().__init__(f"Unable to parse GFF3 record because: {prefix}{message}")


class Strand(Enum):
    POSITIVE = "+"
    NEGATIVE = "-"
    NO_STRAND = "."
    UNKNOWN = "?"


def _one_based(column: str, value: str) -> int:
    try:
        position = int(value)
    except ValueError:
        raise GffParseError(f"{column} column `{value}` is not an integer") from None
    if position < 1:
        raise GffParseError(f"{column} column `{value}` is not a one-based coordinate")
    return position


def _score(value: str) -> Optional[float]:
    if value == ".":
        return None
    try:
        return float(value)
    except ValueError:
        raise GffParseError(f"score column `{value}` is not a number") from None


def _strand(value: str) -> Strand:
    try:
        return Strand(value)
    except ValueError:
        raise GffParseError(f"Cannot parse `{value}` as a strand") from None


def _phase(value: str) -> Optional[int]:
    if value == ".":
        return None
    if value not in ("0", "1", "2"):
        raise GffParseError(f"phase column `{value}` is not one of 0, 1, 2 or .")
    return int(value)


def _attributes(value: str) -> Dict[str, str]:
    attributes = {}
    for pair in value.split(";"):
        if not pair.strip():
            continue
        tag, sep, val = pair.partition("=")
        if not sep:
            raise GffParseError(f"Expected <tag>=<value> but got: {pair}")
        attributes[tag.strip()] = val
    return attributes


@dataclass
class GffRecord:
    """One feature line of a GFF3 file. Coordinates are 1-based and inclusive."""
    seq_id: str
    source: str
    feature_type: str
    start: int
    end: int
    score: Optional[float]
    strand: Strand
    phase: Optional[int]
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_line(cls, line: str) -> "GffRecord":
        columns = line.strip("\r\n").split("\t")
        if len(columns) < len(_COLUMNS):
            missing = _COLUMNS[len(columns)]
            raise GffParseError(f"No {missing} column in {line.strip()}")
        return cls(
            seq_id=columns[0],
            source=columns[1],
            feature_type=columns[2],
            start=_one_based("start", columns[3]),
            end=_one_based("end", columns[4]),
            score=_score(columns[5]),
            strand=_strand(columns[6]),
            phase=_phase(columns[7]),
            attributes=_attributes(columns[8]),
        )

    def overlaps(self, position: int) -> bool:
        return self.start <= position <= self.end


def read_gff3(lines: Iterable[str]) -> Iterator[GffRecord]:
    """Parse GFF3 lines, skipping blank lines and '#' comment or directive lines."""
    for lineno, line in enumerate(lines, 1):
        if not line.strip() or line.startswith("#"):
            continue
        try:
            record = GffRecord.from_line(line)
        except GffParseError as e:
            raise GffParseError(e.reason, lineno=lineno) from e
        yield record


def load_gff3(path: str) -> List[GffRecord]:
    with open(path, "r") as f:
        return list(read_gff3(f))
