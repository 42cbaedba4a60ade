"""
Data model for the DDBJ/ENA/GenBank feature table.

See: http://www.insdc.org/files/feature_table.html

A feature starts with its key in the key column, followed by the location,
which may wrap over several lines, and then one qualifier per '/' line:

    source          1..1000
                    /culture_collection="ATCC:11775"
                    /culture_collection="CECT:515"

Grouping the lines by the key column gives one stanza per feature.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from seqchunks.location import LocationParseError, LocOp, Qualifier, QualifierValue, QuotedText, parse_location_full, parse_qualifier_full
from seqchunks.stanzas import Stanza, StanzaGrouper

# width of the key field once the two-letter 'FT' line code is removed
EMBL_KEY_COLUMNS = 16
GENBANK_KEY_COLUMNS = 21


def _plain(value: Optional[QualifierValue]) -> str:
    if value is None:
        return ""
    if isinstance(value, QuotedText):
        return value.text
    return str(value)


class FeatureParseError(ValueError):
    def __init__(self, key: Optional[str], message: str) -> None:
        self.key = key
        super().__init__(f"Problem with '{key}' feature: {message}")


@dataclass(frozen=True)
class FeatureRecord:
    key: str
    location: LocOp
    qualifiers: Tuple[Qualifier, ...] = ()

    def qualifier_values(self, name: str) -> List[str]:
        """Get the unquoted values of all qualifiers called name, "" for qualifiers without value."""
        return [_plain(q.value) for q in self.qualifiers if q.name == name]


def _quote_open(text: str) -> bool:
    return text.count('"') % 2 == 1


def split_feature_lines(stanza: Stanza) -> Tuple[str, List[str]]:
    """Split the value lines of a feature stanza into location text and qualifier texts.

    Location lines are concatenated without separator since locations wrap after
    commas. Qualifier continuation lines are joined with a single space.
    """
    location_parts: List[str] = []
    qualifiers: List[str] = []
    for line in stanza.lines:
        if qualifiers and _quote_open(qualifiers[-1]):
            qualifiers[-1] += " " + line
        elif line.startswith("/"):
            qualifiers.append(line)
        elif qualifiers:
            qualifiers[-1] += " " + line
        else:
            location_parts.append(line)
    return "".join(location_parts), qualifiers


def parse_feature(stanza: Stanza) -> FeatureRecord:
    """Build a FeatureRecord from the stanza holding one feature.

    Raises:
        FeatureParseError: If the stanza has no key or location, or if the location
            or one of the qualifiers does not parse completely.
    """
    if stanza.tag is None:
        raise FeatureParseError(None, f"lines without feature key: {stanza.lines}")
    location_text, qualifier_texts = split_feature_lines(stanza)
    if not location_text:
        raise FeatureParseError(stanza.tag, "missing location")
    try:
        location = parse_location_full(location_text)
    except LocationParseError as e:
        raise FeatureParseError(stanza.tag, str(e)) from e
    qualifiers = []
    for qualifier_text in qualifier_texts:
        try:
            qualifiers.append(parse_qualifier_full(qualifier_text))
        except LocationParseError as e:
            raise FeatureParseError(stanza.tag, str(e)) from e
    return FeatureRecord(key=stanza.tag, location=location, qualifiers=tuple(qualifiers))


def feature_stanzas(lines: Iterable[str], key_columns: int = EMBL_KEY_COLUMNS) -> Iterator[Stanza]:
    grouper = StanzaGrouper(tag_columns=key_columns, merge_tags=False)
    return grouper.stanzas(lines)


@dataclass(frozen=True)
class FeatureTable:
    features: Tuple[FeatureRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[FeatureRecord]:
        return iter(self.features)

    def by_key(self, key: str) -> List[FeatureRecord]:
        return [f for f in self.features if f.key == key]

    @classmethod
    def from_lines(cls, lines: Iterable[str], key_columns: int = EMBL_KEY_COLUMNS) -> "FeatureTable":
        """Parse feature table lines with the line code already removed.

        Args:
            lines: Feature lines, e.g. EMBL 'FT' lines without their first 5 columns.
            key_columns: Width of the feature key field (default: 16, EMBL).

        Returns:
            FeatureTable with one FeatureRecord per feature, in input order.
        """
        return cls(features=tuple(parse_feature(s) for s in feature_stanzas(lines, key_columns)))
