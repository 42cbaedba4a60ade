from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Stanza:
    """A tagged block of lines, e.g. all 'DE' lines of an EMBL entry."""
    tag: Optional[str]
    lines: Tuple[str, ...] = ()

    def text(self, sep: str = " ") -> str:
        return sep.join(self.lines)


@dataclass(frozen=True)
class StanzaGrouper:
    """Regroups lines into stanzas by a fixed-width leading tag column.

    Attributes:
        tag_columns: Width of the tag field at the start of each line.
        merge_tags: If True, consecutive lines with the same tag share a stanza.
    """
    tag_columns: int
    merge_tags: bool = False

    def __post_init__(self) -> None:
        if self.tag_columns < 0:
            raise ValueError(f"tag_columns must not be negative, got {self.tag_columns}")

    def split_line(self, line: str) -> Tuple[Optional[str], Optional[str]]:
        """Split a line into its (tag, value) parts, each None when blank."""
        if len(line) < self.tag_columns:
            return line.strip() or None, None
        tag = line[:self.tag_columns].strip() or None
        value = line[self.tag_columns:].strip() or None
        return tag, value

    def stanzas(self, lines: Iterable[str]) -> Iterator[Stanza]:
        tag: Optional[str] = None
        block: Optional[List[str]] = None
        for line in lines:
            line_tag, value = self.split_line(line)
            if line_tag is None:
                if block is None:
                    if value is None:
                        continue
                    block = []
            elif block is None or not (self.merge_tags and tag == line_tag):
                if block is not None:
                    yield Stanza(tag, tuple(block))
                tag, block = line_tag, []
            if value is not None:
                block.append(value)
        if block is not None:
            yield Stanza(tag, tuple(block))


def stanzas(lines: Iterable[str], tag_columns: int, merge_tags: bool = False) -> Iterator[Stanza]:
    return StanzaGrouper(tag_columns=tag_columns, merge_tags=merge_tags).stanzas(lines)
