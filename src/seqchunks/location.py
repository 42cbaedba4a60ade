"""
Parser for the INSDC feature table location and qualifier syntax.

See: http://www.insdc.org/files/feature_table.html

Locations are parsed by recursive descent with ordered alternatives. Several
productions share a textual prefix (the digits of a Point start a Between, a
Within and a Span), so the order in which alternatives are tried matters:
the longer productions are always tried first.

Every parser function takes the text and an offset and returns the parsed node
together with the offset just past it. Failures raise LocationParseError. A
failure raised after the keyword of complement(, join( or order( has matched
is committed: no other alternative is tried for that text.

Each level of complement(, join( or order( nesting costs a few interpreter
frames, so nesting depth is bounded by the recursion limit (a few hundred
levels by default). Deeper input fails with LocationParseError.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, TypeVar, Union

T = TypeVar("T")
Parser = Callable[[str, int], Tuple[T, int]]

_UINT = re.compile(r"[0-9]+")
_ACCESSION = re.compile(r"[A-Za-z0-9.]+")
_FT_STRING = re.compile(r"[A-Za-z0-9_\-'*]{1,20}")
_LETTER = re.compile(r"[A-Za-z]")


class LocationParseError(ValueError):
    """Structured failure of the location or qualifier grammar.

    Attributes:
        text: The full text being parsed.
        position: Offset at which the expected production was missing.
        expected: Label of what was expected there.
        committed: True if raised inside complement(, join( or order( after
            the keyword matched, so no other alternative may be tried.
    """

    def __init__(self, text: str, position: int, expected: str, committed: bool = False) -> None:
        self.text = text
        self.position = position
        self.expected = expected
        self.committed = committed
        found = repr(text[position:position + 10]) if position < len(text) else "end of input"
        super().__init__(f"Expected {expected} at position {position} of '{text}', found {found}")

    def commit(self) -> "LocationParseError":
        if self.committed:
            return self
        return LocationParseError(self.text, self.position, self.expected, committed=True)


@dataclass(frozen=True)
class Point:
    """A single base, counted from 1."""
    n: int

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError(f"Coordinates are one-based, got {self.n}")

    def __str__(self) -> str:
        return str(self.n)


@dataclass(frozen=True)
class Between:
    """A site between two adjacent bases, e.g. 122^123 (or 100^1 on a circular sequence of length 100)."""
    left: int
    right: int

    def __post_init__(self) -> None:
        if self.left < 1 or self.right < 1:
            raise ValueError(f"Coordinates are one-based, got {self.left}^{self.right}")

    def __str__(self) -> str:
        return f"{self.left}^{self.right}"


Position = Union[Point, Between]


@dataclass(frozen=True)
class Within:
    """A single base somewhere within a range, e.g. 102.110."""
    from_: Point
    to: Point

    def __str__(self) -> str:
        return f"{self.from_}.{self.to}"


@dataclass(frozen=True)
class Span:
    """A continuous range of bases, e.g. <345..500.

    before_from and after_to mark fuzzy ends; they never change the coordinates.
    """
    from_: Position
    to: Position
    before_from: bool = False
    after_to: bool = False

    @classmethod
    def of(cls, from_: int, to: int, before_from: bool = False, after_to: bool = False) -> "Span":
        return cls(Point(from_), Point(to), before_from=before_from, after_to=after_to)

    def __str__(self) -> str:
        before = "<" if self.before_from else ""
        after = ">" if self.after_to else ""
        return f"{before}{self.from_}..{after}{self.to}"


Local = Union[Point, Between, Within, Span]


@dataclass(frozen=True)
class Remote:
    """A location on another entry, e.g. J00194.1:100..202."""
    accession: str
    at: Local

    def __str__(self) -> str:
        return f"{self.accession}:{self.at}"


Loc = Union[Local, Remote]


@dataclass(frozen=True)
class Complement:
    inner: "LocOp"

    def __str__(self) -> str:
        return f"complement({self.inner})"


@dataclass(frozen=True)
class Join:
    parts: Tuple["LocOp", ...]

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("join() needs at least one location")

    def __str__(self) -> str:
        return "join(" + ",".join(str(p) for p in self.parts) + ")"


@dataclass(frozen=True)
class Order:
    parts: Tuple["LocOp", ...]

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("order() needs at least one location")

    def __str__(self) -> str:
        return "order(" + ",".join(str(p) for p in self.parts) + ")"


LocOp = Union[Loc, Complement, Join, Order]


@dataclass(frozen=True)
class QuotedText:
    text: str

    def __str__(self) -> str:
        return f'"{self.text}"'


@dataclass(frozen=True)
class VocabularyTerm:
    term: str

    def __str__(self) -> str:
        return self.term


@dataclass(frozen=True)
class ReferenceNumber:
    number: int

    def __str__(self) -> str:
        return f"[{self.number}]"


@dataclass(frozen=True)
class NumericValue:
    """A bare number such as the 1 of /codon_start=1."""
    number: int

    def __str__(self) -> str:
        return str(self.number)


QualifierValue = Union[QuotedText, VocabularyTerm, ReferenceNumber, NumericValue]


@dataclass(frozen=True)
class Qualifier:
    """A feature qualifier such as /gene="arsC", /citation=[1] or /pseudo."""
    name: str
    value: Optional[QualifierValue] = None

    def __str__(self) -> str:
        if self.value is None:
            return f"/{self.name}"
        return f"/{self.name}={self.value}"


def _alt(text: str, pos: int, expected: str, *parsers: Parser) -> Tuple[object, int]:
    """Try each parser in turn at pos and return the first success."""
    furthest: Optional[LocationParseError] = None
    for parser in parsers:
        try:
            return parser(text, pos)
        except LocationParseError as e:
            if e.committed:
                raise
            if furthest is None or e.position > furthest.position:
                furthest = e
    if furthest is not None and furthest.position > pos:
        raise furthest
    raise LocationParseError(text, pos, expected)


def _tag(text: str, pos: int, literal: str) -> int:
    if text.startswith(literal, pos):
        return pos + len(literal)
    raise LocationParseError(text, pos, f"'{literal}'")


def _uint(text: str, pos: int) -> Tuple[int, int]:
    match = _UINT.match(text, pos)
    if not match:
        raise LocationParseError(text, pos, "digits")
    return int(match.group()), match.end()


def _coordinate(text: str, pos: int) -> Tuple[int, int]:
    n, end = _uint(text, pos)
    if n < 1:
        raise LocationParseError(text, pos, "coordinate of at least 1")
    return n, end


def _point(text: str, pos: int) -> Tuple[Point, int]:
    n, pos = _coordinate(text, pos)
    return Point(n), pos


def _between(text: str, pos: int) -> Tuple[Between, int]:
    left, pos = _coordinate(text, pos)
    pos = _tag(text, pos, "^")
    right, pos = _coordinate(text, pos)
    return Between(left, right), pos


def _position(text: str, pos: int) -> Tuple[Position, int]:
    return _alt(text, pos, "position", _between, _point)


def _within(text: str, pos: int) -> Tuple[Within, int]:
    from_, pos = _point(text, pos)
    pos = _tag(text, pos, ".")
    to, pos = _point(text, pos)
    return Within(from_, to), pos


def _span(text: str, pos: int) -> Tuple[Span, int]:
    before_from = text.startswith("<", pos)
    if before_from:
        pos += 1
    from_, pos = _position(text, pos)
    pos = _tag(text, pos, "..")
    after_to = text.startswith(">", pos)
    if after_to:
        pos += 1
    to, pos = _position(text, pos)
    return Span(from_, to, before_from=before_from, after_to=after_to), pos


def _local(text: str, pos: int) -> Tuple[Local, int]:
    # Point is a prefix of the other three and has to come last
    return _alt(text, pos, "local location", _between, _within, _span, _point)


def _remote(text: str, pos: int) -> Tuple[Remote, int]:
    match = _ACCESSION.match(text, pos)
    if not match:
        raise LocationParseError(text, pos, "accession")
    end = _tag(text, match.end(), ":")
    at, end = _local(text, end)
    return Remote(match.group(), at), end


def _loc(text: str, pos: int) -> Tuple[Loc, int]:
    return _alt(text, pos, "location", _remote, _local)


def _operands(text: str, pos: int) -> Tuple[Tuple[LocOp, ...], int]:
    parts = []
    part, pos = _loc_op(text, pos)
    parts.append(part)
    while text.startswith(",", pos):
        part, pos = _loc_op(text, pos + 1)
        parts.append(part)
    pos = _tag(text, pos, ")")
    return tuple(parts), pos


def _complement(text: str, pos: int) -> Tuple[Complement, int]:
    pos = _tag(text, pos, "complement(")
    try:
        inner, pos = _loc_op(text, pos)
        pos = _tag(text, pos, ")")
    except LocationParseError as e:
        raise e.commit() from None
    return Complement(inner), pos


def _join(text: str, pos: int) -> Tuple[Join, int]:
    pos = _tag(text, pos, "join(")
    try:
        parts, pos = _operands(text, pos)
    except LocationParseError as e:
        raise e.commit() from None
    return Join(parts), pos


def _order(text: str, pos: int) -> Tuple[Order, int]:
    pos = _tag(text, pos, "order(")
    try:
        parts, pos = _operands(text, pos)
    except LocationParseError as e:
        raise e.commit() from None
    return Order(parts), pos


def _loc_op(text: str, pos: int) -> Tuple[LocOp, int]:
    return _alt(text, pos, "location or operator", _loc, _complement, _join, _order)


def _ft_string(text: str, pos: int) -> Tuple[str, int]:
    match = _FT_STRING.match(text, pos)
    if not match or not _LETTER.search(match.group()):
        raise LocationParseError(text, pos, "feature table name")
    return match.group(), match.end()


def _quoted_text(text: str, pos: int) -> Tuple[QuotedText, int]:
    pos = _tag(text, pos, '"')
    close = text.find('"', pos)
    if close < 0:
        raise LocationParseError(text, len(text), "closing '\"'")
    return QuotedText(text[pos:close]), close + 1


def _reference_number(text: str, pos: int) -> Tuple[ReferenceNumber, int]:
    pos = _tag(text, pos, "[")
    number, pos = _uint(text, pos)
    pos = _tag(text, pos, "]")
    return ReferenceNumber(number), pos


def _vocabulary_term(text: str, pos: int) -> Tuple[VocabularyTerm, int]:
    term, pos = _ft_string(text, pos)
    return VocabularyTerm(term), pos


def _numeric_value(text: str, pos: int) -> Tuple[NumericValue, int]:
    number, pos = _uint(text, pos)
    return NumericValue(number), pos


def _qualifier_value(text: str, pos: int) -> Tuple[QualifierValue, int]:
    return _alt(text, pos, "qualifier value", _quoted_text, _reference_number, _vocabulary_term, _numeric_value)


def _qualifier(text: str, pos: int) -> Tuple[Qualifier, int]:
    pos = _tag(text, pos, "/")
    name, pos = _ft_string(text, pos)
    if text.startswith("=", pos):
        try:
            value, end = _qualifier_value(text, pos + 1)
        except LocationParseError as e:
            if e.committed:
                raise
        else:
            return Qualifier(name, value), end
    return Qualifier(name), pos


def _top_loc_op(text: str, pos: int) -> Tuple[LocOp, int]:
    try:
        return _loc_op(text, pos)
    except RecursionError:
        raise LocationParseError(text, pos, "less deeply nested location", committed=True) from None


def parse_location(text: str, pos: int = 0) -> Tuple[LocOp, str]:
    """Parse a location expression starting at pos.

    Args:
        text: Text containing the location.
        pos: Offset of the first character of the location (default: 0).

    Returns:
        Tuple[LocOp, str]: The location and the unconsumed rest of the text.

    Raises:
        LocationParseError: If no location starts at pos, or if it nests
            deeper than the interpreter's recursion limit allows.
    """
    node, end = _top_loc_op(text, pos)
    return node, text[end:]


def parse_location_full(text: str) -> LocOp:
    """Parse text that must consist of exactly one location expression."""
    node, end = _top_loc_op(text, 0)
    if end != len(text):
        raise LocationParseError(text, end, "end of location")
    return node


def parse_qualifier(text: str, pos: int = 0) -> Tuple[Qualifier, str]:
    node, end = _qualifier(text, pos)
    return node, text[end:]


def parse_qualifier_full(text: str) -> Qualifier:
    node, end = _qualifier(text, 0)
    if end != len(text):
        raise LocationParseError(text, end, "end of qualifier")
    return node
