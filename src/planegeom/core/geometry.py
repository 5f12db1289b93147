"""
Geometry model.

Immutable value types for planar vector geometries:
- Point, LineString, LinearRing, Polygon
- MultiPoint, MultiLineString, MultiPolygon
- GeometryCollection (members of any kind, including nested collections)

Every kind has an EMPTY state. Coordinates are stored as read-only numpy
arrays of shape (N, 2) that are copied on construction, so no two geometries
ever share storage.
"""

from enum import IntEnum
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidGeometry
from .validity import as_coordinates, check_line, check_point, check_ring


Bounds = Tuple[float, float, float, float]

# Collections may nest at most this many levels
MAX_NESTING_DEPTH = 100


class GeometryType(IntEnum):
    """Geometry kinds, valued by their well-known binary type code."""
    POINT = 1
    LINESTRING = 2
    POLYGON = 3
    MULTIPOINT = 4
    MULTILINESTRING = 5
    MULTIPOLYGON = 6
    GEOMETRYCOLLECTION = 7

    @property
    def keyword(self) -> str:
        """Upper-case well-known text keyword."""
        return self.name


class Geometry:
    """
    Base class of the seven geometry kinds.

    The set of subclasses is closed; it mirrors the kinds of the exchange
    formats. Instances are immutable and compare structurally.
    """

    __slots__ = ()
    geom_type: GeometryType

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def is_empty(self) -> bool:
        raise NotImplementedError

    @property
    def dimension(self) -> int:
        """Topological dimension: 0 puntal, 1 lineal, 2 areal, -1 empty collection."""
        raise NotImplementedError

    def coordinates(self) -> np.ndarray:
        """All vertices of the geometry in storage order, shape (N, 2)."""
        raise NotImplementedError

    @property
    def bounds(self) -> Optional[Bounds]:
        """(min x, min y, max x, max y), or None for an empty geometry."""
        coords = self.coordinates()
        if len(coords) == 0:
            return None
        lo = coords.min(axis=0)
        hi = coords.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    def _same(self, other: "Geometry") -> bool:
        raise NotImplementedError

    def __eq__(self, other):
        if not isinstance(other, Geometry):
            return NotImplemented
        return type(self) is type(other) and self._same(other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        from ..io.wkt import dumps
        return f"<{type(self).__name__} {dumps(self)}>"


class Point(Geometry):
    """
    A single position, or the empty point.

    ``Point()`` is the empty point and ``Point(x, y)`` a located one.
    """

    __slots__ = ("coords",)
    geom_type = GeometryType.POINT
    kind_dimension = 0

    def __init__(self, x: Optional[float] = None, y: Optional[float] = None):
        if (x is None) != (y is None):
            raise InvalidGeometry("Point requires both x and y, or neither")
        coords = as_coordinates([] if x is None else [(x, y)])
        check_point(coords)
        object.__setattr__(self, "coords", coords)

    @property
    def is_empty(self) -> bool:
        return len(self.coords) == 0

    @property
    def dimension(self) -> int:
        return 0

    @property
    def x(self) -> float:
        if self.is_empty:
            raise InvalidGeometry("Empty point has no x coordinate")
        return float(self.coords[0, 0])

    @property
    def y(self) -> float:
        if self.is_empty:
            raise InvalidGeometry("Empty point has no y coordinate")
        return float(self.coords[0, 1])

    def coordinates(self) -> np.ndarray:
        return self.coords

    def _same(self, other) -> bool:
        return np.array_equal(self.coords, other.coords)


class LineString(Geometry):
    """An ordered sequence of 0 or at least 2 positions."""

    __slots__ = ("coords",)
    geom_type = GeometryType.LINESTRING
    kind_dimension = 1

    def __init__(self, coords=()):
        coords = as_coordinates(coords)
        self._check(coords)
        object.__setattr__(self, "coords", coords)

    @staticmethod
    def _check(coords: np.ndarray) -> None:
        check_line(coords)

    @property
    def is_empty(self) -> bool:
        return len(self.coords) == 0

    @property
    def dimension(self) -> int:
        return 1

    def __len__(self):
        return len(self.coords)

    def coordinates(self) -> np.ndarray:
        return self.coords

    def _same(self, other) -> bool:
        return np.array_equal(self.coords, other.coords)


class LinearRing(LineString):
    """
    A closed line of 0 or at least 4 positions.

    Only used as a polygon shell or hole; it is written out as part of
    its polygon, never on its own.
    """

    __slots__ = ()

    @staticmethod
    def _check(coords: np.ndarray) -> None:
        check_ring(coords)


def _as_ring(ring) -> LinearRing:
    if isinstance(ring, LinearRing):
        return ring
    if isinstance(ring, Geometry):
        raise InvalidGeometry(f"Polygon rings must be LinearRing, got {type(ring).__name__}")
    return LinearRing(ring)


class Polygon(Geometry):
    """
    A shell ring and an ordered sequence of holes.

    Parameters
    ----------
    exterior : LinearRing or array_like, optional
        Shell ring. Omitted or empty for the empty polygon.
    interiors : sequence of LinearRing or array_like
        Hole rings. Must be empty when the shell is.
    """

    __slots__ = ("exterior", "interiors")
    geom_type = GeometryType.POLYGON
    kind_dimension = 2

    def __init__(self, exterior=None, interiors: Sequence = ()):
        shell = LinearRing() if exterior is None else _as_ring(exterior)
        holes = tuple(_as_ring(ring) for ring in interiors)
        if shell.is_empty and holes:
            raise InvalidGeometry("shell is empty but holes are not")
        object.__setattr__(self, "exterior", shell)
        object.__setattr__(self, "interiors", holes)

    @property
    def rings(self) -> Tuple[LinearRing, ...]:
        """Shell followed by holes; empty for the empty polygon."""
        if self.exterior.is_empty:
            return ()
        return (self.exterior,) + self.interiors

    @property
    def is_empty(self) -> bool:
        return self.exterior.is_empty

    @property
    def dimension(self) -> int:
        return 2

    def coordinates(self) -> np.ndarray:
        rings = self.rings
        if not rings:
            return np.empty((0, 2))
        return np.vstack([ring.coords for ring in rings])

    def _same(self, other) -> bool:
        return (
            self.exterior == other.exterior
            and len(self.interiors) == len(other.interiors)
            and all(a == b for a, b in zip(self.interiors, other.interiors))
        )


class GeometryCollection(Geometry):
    """An ordered sequence of arbitrary geometries, possibly nested."""

    __slots__ = ("geoms", "depth")
    geom_type = GeometryType.GEOMETRYCOLLECTION
    member_type: Optional[type] = None

    def __init__(self, geoms: Sequence[Geometry] = ()):
        members = tuple(self._member(g) for g in geoms)
        object.__setattr__(self, "geoms", members)
        depth = 1 + max((g.depth for g in members if isinstance(g, GeometryCollection)), default=0)
        if depth > MAX_NESTING_DEPTH:
            raise InvalidGeometry(f"Geometry collections nested deeper than {MAX_NESTING_DEPTH} levels")
        object.__setattr__(self, "depth", depth)

    def _member(self, geom) -> Geometry:
        if not isinstance(geom, Geometry):
            raise InvalidGeometry(
                f"{type(self).__name__} members must be geometries, got {type(geom).__name__}"
            )
        if isinstance(geom, LinearRing):
            raise InvalidGeometry("LinearRing can only be used as a polygon ring")
        return geom

    def __len__(self):
        return len(self.geoms)

    def __iter__(self) -> Iterator[Geometry]:
        return iter(self.geoms)

    @property
    def is_empty(self) -> bool:
        return all(g.is_empty for g in self.geoms)

    @property
    def dimension(self) -> int:
        return max((g.dimension for g in self.geoms), default=-1)

    def coordinates(self) -> np.ndarray:
        parts = [g.coordinates() for g in self.geoms]
        parts = [p for p in parts if len(p)]
        if not parts:
            return np.empty((0, 2))
        return np.vstack(parts)

    def _same(self, other) -> bool:
        return len(self.geoms) == len(other.geoms) and all(
            a == b for a, b in zip(self.geoms, other.geoms)
        )


class _HomogeneousCollection(GeometryCollection):
    __slots__ = ()
    member_type: type = Geometry

    def _member(self, geom) -> Geometry:
        if type(geom) is not self.member_type:
            raise InvalidGeometry(
                f"{type(self).__name__} members must be {self.member_type.__name__}, "
                f"got {type(geom).__name__}"
            )
        return geom

    @property
    def dimension(self) -> int:
        return self.member_type.kind_dimension


class MultiPoint(_HomogeneousCollection):
    __slots__ = ()
    geom_type = GeometryType.MULTIPOINT
    member_type = Point

    def _member(self, geom) -> Geometry:
        if not isinstance(geom, Geometry):
            # Accept bare (x, y) pairs
            geom = Point(*geom)
        return super()._member(geom)


class MultiLineString(_HomogeneousCollection):
    __slots__ = ()
    geom_type = GeometryType.MULTILINESTRING
    member_type = LineString


class MultiPolygon(_HomogeneousCollection):
    __slots__ = ()
    geom_type = GeometryType.MULTIPOLYGON
    member_type = Polygon


# Single and multi kind for each topological dimension
SINGLE_KINDS = {0: Point, 1: LineString, 2: Polygon}
MULTI_KINDS = {0: MultiPoint, 1: MultiLineString, 2: MultiPolygon}


def iter_atoms(geom: Geometry) -> Iterator[Geometry]:
    """
    Yield the non-collection members of a geometry, depth first.

    A Point, LineString or Polygon yields itself.
    """
    if isinstance(geom, GeometryCollection):
        for member in geom.geoms:
            yield from iter_atoms(member)
    else:
        yield geom


def empty_of_dimension(dimension: int) -> Geometry:
    """Empty value of the simplest kind with the given dimension."""
    if dimension < 0:
        return GeometryCollection()
    return SINGLE_KINDS[dimension]()
