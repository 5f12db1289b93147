"""
Well-known binary (WKB) reader and writer.

Record layout (OGC Simple Features):
- 1 byte byte-order flag: 0 big-endian, 1 little-endian
- uint32 geometry type code (1..7)
- type-specific payload; collections hold complete nested records,
  each with its own byte-order flag

The reader accepts either byte order per record. The writer always emits
little-endian records, so re-encoding normalises the byte order.
"""

import logging
import struct
from typing import List, Union

import numpy as np

from ..core.errors import InvalidGeometry, MalformedWkb
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


BIG_ENDIAN = 0
LITTLE_ENDIAN = 1
_STRUCT_ORDER = {BIG_ENDIAN: ">", LITTLE_ENDIAN: "<"}

HEADER_SIZE = 5
COORDINATE_SIZE = 16
COUNT_SIZE = 4
# An empty line record is the smallest possible nested record
MIN_RECORD_SIZE = HEADER_SIZE + COUNT_SIZE

_MULTI_KINDS = {
    GeometryType.MULTIPOINT: MultiPoint,
    GeometryType.MULTILINESTRING: MultiLineString,
    GeometryType.MULTIPOLYGON: MultiPolygon,
    GeometryType.GEOMETRYCOLLECTION: GeometryCollection,
}

WkbInput = Union[bytes, bytearray, memoryview, str]


class _WkbReader:
    """Cursor over a WKB buffer."""

    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0
        self._depth = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _require(self, size: int) -> None:
        if size > self.remaining:
            raise MalformedWkb("Unexpected EOF parsing WKB")

    def _take(self, size: int) -> bytes:
        self._require(size)
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def _count(self, order: str) -> int:
        return struct.unpack(order + "I", self._take(COUNT_SIZE))[0]

    def _coordinates(self, order: str, count: int) -> np.ndarray:
        raw = self._take(count * COORDINATE_SIZE)
        values = np.frombuffer(raw, dtype=np.dtype(order + "f8"))
        # astype copies into native order, detached from the input buffer
        return values.astype(np.float64).reshape(count, 2)

    def read_geometry(self) -> Geometry:
        header = self._take(HEADER_SIZE)
        flag = header[0]
        if flag not in _STRUCT_ORDER:
            raise MalformedWkb(f"Unknown WKB byte order {flag}")
        order = _STRUCT_ORDER[flag]

        code = struct.unpack(order + "I", header[1:])[0]
        try:
            kind = GeometryType(code)
        except ValueError:
            raise MalformedWkb(f"Unknown WKB type {code}") from None

        if kind == GeometryType.POINT:
            return self._point(order)
        if kind == GeometryType.LINESTRING:
            return self._linestring(order)
        if kind == GeometryType.POLYGON:
            return self._polygon(order)
        return self._collection(order, _MULTI_KINDS[kind])

    def _point(self, order: str) -> Point:
        xy = self._coordinates(order, 1)[0]
        # The empty point is encoded as NaN NaN
        if np.isnan(xy).all():
            return Point()
        return Point(xy[0], xy[1])

    def _linestring(self, order: str) -> LineString:
        count = self._count(order)
        self._require(count * COORDINATE_SIZE)
        return LineString(self._coordinates(order, count))

    def _polygon(self, order: str) -> Polygon:
        ring_count = self._count(order)
        self._require(ring_count * COUNT_SIZE)
        rings = []
        for _ in range(ring_count):
            count = self._count(order)
            rings.append(LinearRing(self._coordinates(order, count)))
        if not rings:
            return Polygon()
        return Polygon(rings[0], rings[1:])

    def _collection(self, order: str, cls: type) -> GeometryCollection:
        self._depth += 1
        if self._depth > MAX_NESTING_DEPTH:
            raise MalformedWkb(f"Geometry collections nested deeper than {MAX_NESTING_DEPTH} levels")
        count = self._count(order)
        self._require(count * MIN_RECORD_SIZE)
        members = []
        for _ in range(count):
            member = self.read_geometry()
            if cls is not GeometryCollection and type(member) is not cls.member_type:
                raise MalformedWkb(
                    f"{cls.__name__} can only contain {cls.member_type.__name__} records, "
                    f"found {type(member).__name__}"
                )
            members.append(member)
        self._depth -= 1
        return cls(members)


def _as_bytes(data: WkbInput) -> bytes:
    if isinstance(data, str):
        try:
            return bytes.fromhex(data)
        except ValueError as exc:
            raise MalformedWkb(f"Invalid hex-encoded WKB: {exc}") from exc
    return bytes(data)


def loads(data: WkbInput) -> Geometry:
    """
    Parse well-known binary into a geometry.

    Parameters
    ----------
    data : bytes, bytearray, memoryview or str
        WKB bytes, or their hexadecimal encoding.

    Returns
    -------
    Geometry
        The decoded geometry.

    Raises
    ------
    MalformedWkb
        On truncated input, unknown byte order or type code, or bytes
        left over after the geometry, or collections nested deeper than
        ``MAX_NESTING_DEPTH``.
    InvalidGeometry
        If the record violates a structural invariant.
    """
    reader = _WkbReader(_as_bytes(data))
    geom = reader.read_geometry()
    if reader.remaining:
        raise MalformedWkb(f"Unexpected {reader.remaining} trailing bytes after WKB geometry")
    logger.debug("Parsed WKB %s", geom.geom_type.keyword)
    return geom


def _header(geom: Geometry) -> bytes:
    return struct.pack("<BI", LITTLE_ENDIAN, int(geom.geom_type))


def _write(geom: Geometry, out: List[bytes]) -> None:
    out.append(_header(geom))

    if isinstance(geom, Point):
        xy = [np.nan, np.nan] if geom.is_empty else geom.coords[0]
        out.append(np.asarray(xy, dtype="<f8").tobytes())

    elif isinstance(geom, LineString):
        out.append(struct.pack("<I", len(geom.coords)))
        out.append(geom.coords.astype("<f8").tobytes())

    elif isinstance(geom, Polygon):
        out.append(struct.pack("<I", len(geom.rings)))
        for ring in geom.rings:
            out.append(struct.pack("<I", len(ring.coords)))
            out.append(ring.coords.astype("<f8").tobytes())

    elif isinstance(geom, GeometryCollection):
        out.append(struct.pack("<I", len(geom.geoms)))
        for member in geom.geoms:
            _write(member, out)

    else:
        raise InvalidGeometry(f"Cannot encode {type(geom).__name__} as WKB")


def dumps(geom: Geometry, hex: bool = False) -> Union[bytes, str]:
    """
    Encode a geometry as little-endian well-known binary.

    Parameters
    ----------
    geom : Geometry
        Geometry to encode.
    hex : bool
        If True return an upper-case hexadecimal string instead of bytes.

    Returns
    -------
    bytes or str
        The encoded record.
    """
    out: List[bytes] = []
    _write(geom, out)
    data = b"".join(out)
    if hex:
        return data.hex().upper()
    return data
