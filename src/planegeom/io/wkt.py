"""
Well-known text (WKT) reader and writer.

The reader is a recursive-descent parser over a small tokenizer; keywords
are case-insensitive. The writer produces canonical text, so that
``dumps(loads(dumps(g))) == dumps(g)`` for every geometry.

Example
-------
>>> from planegeom.io import wkt
>>> wkt.dumps(wkt.loads("point(1 2)"))
'POINT (1 2)'
"""

import logging
import re
from typing import List, NamedTuple, Tuple

import numpy as np

from ..core.errors import MalformedWkt
from ..core.geometry import (
    Geometry,
    GeometryCollection,
    GeometryType,
    LinearRing,
    LineString,
    MAX_NESTING_DEPTH,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)

logger = logging.getLogger(__name__)


_TOKEN_PATTERN = re.compile(
    r"""\s*(?:
        (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
      | (?P<word>[A-Za-z_][A-Za-z0-9_]*)
      | (?P<punct>[(),])
      | (?P<other>\S)
    )""",
    re.VERBOSE,
)

NUMBER = "number"
WORD = "word"
PUNCT = "punct"
OTHER = "other"
EOF = "eof"

# Words accepted where a number is expected; the model rejects them as non-finite
_NON_FINITE_WORDS = {"nan", "inf", "infinity"}
_DIMENSION_QUALIFIERS = {"Z", "M", "ZM"}


class Token(NamedTuple):
    kind: str
    text: str


_END = Token(EOF, "")


def tokenize(text: str) -> List[Token]:
    """Split WKT into tokens. Never fails; bad characters become OTHER tokens."""
    tokens = []
    pos = 0
    length = len(text)
    while pos < length:
        match = _TOKEN_PATTERN.match(text, pos)
        if match is None:
            # Only trailing whitespace is left
            break
        pos = match.end()
        kind = match.lastgroup
        tokens.append(Token(kind, match.group(kind)))
    return tokens


def _describe(token: Token) -> str:
    if token.kind == EOF:
        return "end of stream"
    return f"'{token.text}'"


class _WktReader:
    """Recursive-descent parser over a token list."""

    def __init__(self, text: str):
        self._tokens = tokenize(text)
        self._pos = 0
        self._depth = 0

    def _peek(self) -> Token:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return _END

    def _next(self) -> Token:
        token = self._peek()
        if token.kind != EOF:
            self._pos += 1
        return token

    def _fail(self, expected: str, token: Token):
        raise MalformedWkt(f"Expected {expected} but encountered {_describe(token)}")

    def _next_word(self) -> Token:
        token = self._next()
        if token.kind != WORD:
            self._fail("word", token)
        return token

    def _next_number(self) -> float:
        token = self._next()
        if token.kind == NUMBER:
            return float(token.text)
        if token.kind == WORD and token.text.lower() in _NON_FINITE_WORDS:
            return float(token.text)
        self._fail("number", token)

    def _expect(self, punct: str) -> None:
        token = self._next()
        if token.kind != PUNCT or token.text != punct:
            self._fail(f"'{punct}'", token)

    def _open_or_empty(self) -> bool:
        """Consume ``EMPTY`` (returning True) or an opening parenthesis."""
        token = self._next()
        if token.kind == WORD and token.text.upper() == "EMPTY":
            return True
        if token.kind == PUNCT and token.text == "(":
            return False
        self._fail("'EMPTY' or '('", token)

    def _comma_or_close(self) -> bool:
        """Consume ``,`` (returning True) or ``)`` (returning False)."""
        token = self._next()
        if token.kind == PUNCT and token.text == ",":
            return True
        if token.kind == PUNCT and token.text == ")":
            return False
        self._fail("',' or ')'", token)

    def _coordinate(self) -> Tuple[float, float]:
        x = self._next_number()
        y = self._next_number()
        return (x, y)

    def _coordinate_list(self) -> List[Tuple[float, float]]:
        # Opening parenthesis already consumed
        coords = [self._coordinate()]
        while self._comma_or_close():
            coords.append(self._coordinate())
        return coords

    def _members(self, read_member) -> list:
        members = [read_member()]
        while self._comma_or_close():
            members.append(read_member())
        return members

    def _collection_members(self, read_member) -> list:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise MalformedWkt(f"Geometry collections nested deeper than {MAX_NESTING_DEPTH} levels")
        members = self._members(read_member)
        self._depth -= 1
        return members

    def read(self) -> Geometry:
        geom = self.read_geometry()
        token = self._peek()
        if token.kind != EOF:
            raise MalformedWkt(f"Unexpected text after end of geometry: {_describe(token)}")
        return geom

    def read_geometry(self) -> Geometry:
        token = self._next_word()
        try:
            kind = GeometryType[token.text.upper()]
        except KeyError:
            raise MalformedWkt(f"Unknown type: '{token.text}'") from None

        qualifier = self._peek()
        if qualifier.kind == WORD and qualifier.text.upper() in _DIMENSION_QUALIFIERS:
            raise MalformedWkt(
                f"Unsupported coordinate dimension '{qualifier.text}': only 2D geometries are supported"
            )

        return self._READERS[kind](self)

    def _point_text(self) -> Point:
        if self._open_or_empty():
            return Point()
        x, y = self._coordinate()
        self._expect(")")
        return Point(x, y)

    def _linestring_text(self) -> LineString:
        if self._open_or_empty():
            return LineString()
        return LineString(self._coordinate_list())

    def _ring_text(self) -> LinearRing:
        if self._open_or_empty():
            return LinearRing()
        return LinearRing(self._coordinate_list())

    def _polygon_text(self) -> Polygon:
        if self._open_or_empty():
            return Polygon()
        rings = self._members(self._ring_text)
        return Polygon(rings[0], rings[1:])

    def _multipoint_member(self) -> Point:
        # Both "MULTIPOINT (1 2, 3 4)" and "MULTIPOINT ((1 2), (3 4))" are accepted
        token = self._peek()
        if token.kind == PUNCT and token.text == "(":
            return self._point_text()
        if token.kind == WORD and token.text.upper() == "EMPTY":
            self._next()
            return Point()
        return Point(*self._coordinate())

    def _multipoint_text(self) -> MultiPoint:
        if self._open_or_empty():
            return MultiPoint()
        return MultiPoint(self._collection_members(self._multipoint_member))

    def _multilinestring_text(self) -> MultiLineString:
        if self._open_or_empty():
            return MultiLineString()
        return MultiLineString(self._collection_members(self._linestring_text))

    def _multipolygon_text(self) -> MultiPolygon:
        if self._open_or_empty():
            return MultiPolygon()
        return MultiPolygon(self._collection_members(self._polygon_text))

    def _collection_text(self) -> GeometryCollection:
        if self._open_or_empty():
            return GeometryCollection()
        return GeometryCollection(self._collection_members(self.read_geometry))

    _READERS = {
        GeometryType.POINT: _point_text,
        GeometryType.LINESTRING: _linestring_text,
        GeometryType.POLYGON: _polygon_text,
        GeometryType.MULTIPOINT: _multipoint_text,
        GeometryType.MULTILINESTRING: _multilinestring_text,
        GeometryType.MULTIPOLYGON: _multipolygon_text,
        GeometryType.GEOMETRYCOLLECTION: _collection_text,
    }


def loads(text: str) -> Geometry:
    """
    Parse well-known text into a geometry.

    Parameters
    ----------
    text : str
        WKT such as ``"POLYGON ((0 0, 0 1, 1 1, 0 0))"``.

    Returns
    -------
    Geometry
        The parsed geometry.

    Raises
    ------
    MalformedWkt
        On a syntax error, or collections nested deeper than
        ``MAX_NESTING_DEPTH``.
    InvalidGeometry
        If the text is well-formed but violates a structural invariant,
        e.g. a one-point line or an unclosed ring.
    """
    geom = _WktReader(text).read()
    logger.debug("Parsed WKT %s", geom.geom_type.keyword)
    return geom


def format_number(value: float) -> str:
    """Shortest positional decimal that reads back as exactly ``value``."""
    return np.format_float_positional(value, trim="-")


def _coordinate_text(coords: np.ndarray) -> str:
    return ", ".join(f"{format_number(x)} {format_number(y)}" for x, y in coords)


def _body(geom: Geometry) -> str:
    """Text following the keyword: ``EMPTY`` or the parenthesised coordinates."""
    if isinstance(geom, Point):
        if geom.is_empty:
            return "EMPTY"
        return f"({_coordinate_text(geom.coords)})"

    if isinstance(geom, LineString):
        if geom.is_empty:
            return "EMPTY"
        return f"({_coordinate_text(geom.coords)})"

    if isinstance(geom, Polygon):
        if geom.is_empty:
            return "EMPTY"
        return "(" + ", ".join(_body(ring) for ring in geom.rings) + ")"

    if not geom.geoms:
        return "EMPTY"

    if isinstance(geom, MultiPoint):
        members = ("EMPTY" if p.is_empty else _coordinate_text(p.coords) for p in geom.geoms)
    elif isinstance(geom, (MultiLineString, MultiPolygon)):
        members = (_body(g) for g in geom.geoms)
    else:
        members = (dumps(g) for g in geom.geoms)
    return "(" + ", ".join(members) + ")"


def dumps(geom: Geometry) -> str:
    """
    Write a geometry as canonical well-known text.

    Coordinates are separated by ``", "`` and written in the shortest exact
    positional form, e.g. ``LINESTRING (0 0, 10 10)`` or ``POINT (0.5 2)``.
    Empty values are written as ``<KIND> EMPTY``.
    """
    return f"{geom.geom_type.keyword} {_body(geom)}"
