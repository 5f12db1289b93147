"""
Relate Engine

Computes the DE-9IM intersection matrix of two geometries and evaluates
the named spatial predicates on it:
- equals, disjoint, intersects, touches, crosses, within, contains, overlaps
- covers, covered_by
- relate (match against a 9-character pattern)

The matrix itself is labelled by GEOS through Shapely. Cheap envelope tests
run first and answer many calls without building a matrix at all.
Every operation returns None when any argument is None.
"""

import logging
from enum import IntEnum
from typing import Optional, Sequence, Tuple

import numpy as np
import shapely
from shapely.errors import GEOSException

from ..config import DEFAULT_CONFIG, EngineConfig
from ..core.conversion import to_shapely, topology_problem
from ..core.errors import MalformedInput, TopologyException
from ..core.geometry import Bounds, Geometry, GeometryCollection, Polygon
from ..core.nulls import propagate_nulls

logger = logging.getLogger(__name__)


class Location(IntEnum):
    """Row/column index of a point-set component in the matrix."""
    INTERIOR = 0
    BOUNDARY = 1
    EXTERIOR = 2


# Cell value for an empty intersection
FALSE = -1

_CELL_SYMBOLS = {"F": FALSE, "0": 0, "1": 1, "2": 2}
_PATTERN_SYMBOLS = set("012TF*")

I = Location.INTERIOR
B = Location.BOUNDARY
E = Location.EXTERIOR


def _is_true(value: int) -> bool:
    return value >= 0


class IntersectionMatrix:
    """
    A computed DE-9IM matrix.

    Cells hold the dimension of each component intersection: -1 (empty),
    0, 1 or 2. Rows index the first geometry's interior, boundary and
    exterior; columns the second's.

    Parameters
    ----------
    cells : sequence of int
        Nine values in row-major order.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Sequence[int]):
        cells = tuple(int(c) for c in cells)
        if len(cells) != 9 or any(c not in (FALSE, 0, 1, 2) for c in cells):
            raise ValueError(f"Expected nine cells in -1..2, got {cells}")
        self._cells = cells

    @classmethod
    def from_string(cls, text: str) -> "IntersectionMatrix":
        """Parse the standard form, e.g. ``"212101212"`` or ``"FF2F01212"``."""
        if len(text) != 9 or any(ch.upper() not in _CELL_SYMBOLS for ch in text):
            raise ValueError(f"Invalid intersection matrix: '{text}'")
        return cls(_CELL_SYMBOLS[ch.upper()] for ch in text)

    def __getitem__(self, index: Tuple[int, int]) -> int:
        row, col = index
        return self._cells[3 * row + col]

    def __str__(self):
        return "".join("F" if c == FALSE else str(c) for c in self._cells)

    def __repr__(self):
        return f"IntersectionMatrix('{self}')"

    def __eq__(self, other):
        if not isinstance(other, IntersectionMatrix):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self):
        return hash(self._cells)

    def matches(self, pattern: str) -> bool:
        """
        Test the matrix against a DE-9IM pattern.

        Parameters
        ----------
        pattern : str
            Nine symbols from ``0 1 2 T F *``, case-insensitive.

        Raises
        ------
        MalformedInput
            If the pattern has the wrong length or an unknown symbol.
        """
        symbols = validate_pattern(pattern)
        return all(_cell_matches(cell, sym) for cell, sym in zip(self._cells, symbols))

    def is_disjoint(self) -> bool:
        return (
            self[I, I] == FALSE and self[I, B] == FALSE
            and self[B, I] == FALSE and self[B, B] == FALSE
        )

    def is_intersects(self) -> bool:
        return not self.is_disjoint()

    def is_touches(self, dim_a: int, dim_b: int) -> bool:
        """Boundaries meet but interiors do not. Never true for two puntal inputs."""
        if dim_a == 0 and dim_b == 0:
            return False
        return self[I, I] == FALSE and (
            _is_true(self[I, B]) or _is_true(self[B, I]) or _is_true(self[B, B])
        )

    def is_crosses(self, dim_a: int, dim_b: int) -> bool:
        if dim_a < dim_b and (dim_a, dim_b) in ((0, 1), (0, 2), (1, 2)):
            return _is_true(self[I, I]) and _is_true(self[I, E])
        if dim_a > dim_b and (dim_a, dim_b) in ((1, 0), (2, 0), (2, 1)):
            return _is_true(self[I, I]) and _is_true(self[E, I])
        if dim_a == 1 and dim_b == 1:
            return self[I, I] == 0
        return False

    def is_within(self) -> bool:
        return _is_true(self[I, I]) and self[I, E] == FALSE and self[B, E] == FALSE

    def is_contains(self) -> bool:
        return _is_true(self[I, I]) and self[E, I] == FALSE and self[E, B] == FALSE

    def is_covers(self) -> bool:
        touches_interior_or_boundary = (
            _is_true(self[I, I]) or _is_true(self[I, B])
            or _is_true(self[B, I]) or _is_true(self[B, B])
        )
        return touches_interior_or_boundary and self[E, I] == FALSE and self[E, B] == FALSE

    def is_covered_by(self) -> bool:
        touches_interior_or_boundary = (
            _is_true(self[I, I]) or _is_true(self[I, B])
            or _is_true(self[B, I]) or _is_true(self[B, B])
        )
        return touches_interior_or_boundary and self[I, E] == FALSE and self[B, E] == FALSE

    def is_equals(self, dim_a: int, dim_b: int) -> bool:
        if dim_a != dim_b:
            return False
        return (
            _is_true(self[I, I])
            and self[I, E] == FALSE and self[B, E] == FALSE
            and self[E, I] == FALSE and self[E, B] == FALSE
        )

    def is_overlaps(self, dim_a: int, dim_b: int) -> bool:
        if dim_a != dim_b:
            return False
        if dim_a == 1:
            return self[I, I] == 1 and _is_true(self[I, E]) and _is_true(self[E, I])
        return _is_true(self[I, I]) and _is_true(self[I, E]) and _is_true(self[E, I])


def _cell_matches(cell: int, symbol: str) -> bool:
    if symbol == "*":
        return True
    if symbol == "T":
        return _is_true(cell)
    return cell == _CELL_SYMBOLS[symbol]


def validate_pattern(pattern: str) -> str:
    """Return the upper-cased pattern, or raise MalformedInput."""
    if not isinstance(pattern, str):
        raise MalformedInput(f"DE-9IM pattern must be a string, got {type(pattern).__name__}")
    symbols = pattern.upper()
    if len(symbols) != 9:
        raise MalformedInput(
            f"DE-9IM pattern must have 9 symbols, got {len(symbols)}: '{pattern}'"
        )
    bad = sorted(set(symbols) - _PATTERN_SYMBOLS)
    if bad:
        raise MalformedInput(f"Invalid symbol(s) {''.join(bad)!r} in DE-9IM pattern '{pattern}'")
    return symbols


def _envelopes_intersect(a: Optional[Bounds], b: Optional[Bounds]) -> bool:
    if a is None or b is None:
        return False
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def _envelope_covers(outer: Optional[Bounds], inner: Optional[Bounds]) -> bool:
    if outer is None or inner is None:
        return False
    return (
        outer[0] <= inner[0] and outer[1] <= inner[1]
        and inner[2] <= outer[2] and inner[3] <= outer[3]
    )


def _by_envelope(operation: str, result: bool) -> bool:
    logger.debug("%s decided by envelope test: %s", operation, result)
    return result


def _prepare(geom: Geometry):
    shp = to_shapely(geom)
    if type(geom) is GeometryCollection:
        # Collections relate with union semantics
        shp = shapely.union_all(shp)
    return shp


def _check_topology(a: Geometry, b: Geometry, operation: str) -> None:
    for geom in (a, b):
        problem = topology_problem(geom)
        if problem is None:
            continue
        logger.warning(
            "Invalid input to %s: %s at %s", operation, problem.reason, problem.location
        )
        if problem.location is None:
            raise TopologyException(operation, problem.reason)
        raise TopologyException(operation, "side location conflict", problem.location)


def _strip_prefix(message: str) -> str:
    prefix = "TopologyException: "
    return message[len(prefix):] if message.startswith(prefix) else message


def _compute(a: Geometry, b: Geometry, operation: str, config: Optional[EngineConfig]) -> IntersectionMatrix:
    config = config or DEFAULT_CONFIG
    if config.check_validity:
        _check_topology(a, b, operation)
    try:
        text = shapely.relate(_prepare(a), _prepare(b))
    except GEOSException as exc:
        logger.warning("GEOS failed to relate geometries for %s: %s", operation, exc)
        raise TopologyException(operation, _strip_prefix(str(exc))) from exc
    return IntersectionMatrix.from_string(text)


def is_rectangle(geom: Geometry) -> bool:
    """
    True for a polygon without holes whose shell is an axis-aligned rectangle.

    Intersects and contains tests against a rectangle are answered directly
    by GEOS without building a matrix or validating the other operand.
    """
    if type(geom) is not Polygon or geom.is_empty or geom.interiors:
        return False
    coords = geom.exterior.coords
    if len(coords) != 5:
        return False
    xmin, ymin, xmax, ymax = geom.bounds
    if xmin == xmax or ymin == ymax:
        return False
    on_corner = np.isin(coords[:, 0], (xmin, xmax)) & np.isin(coords[:, 1], (ymin, ymax))
    steps = np.diff(coords, axis=0)
    axis_aligned = (steps[:, 0] == 0) != (steps[:, 1] == 0)
    return bool(on_corner.all() and axis_aligned.all())


def _rectangle_test(a: Geometry, b: Geometry, operation: str, predicate) -> bool:
    logger.debug("%s answered by rectangle test", operation)
    try:
        return bool(predicate(_prepare(a), _prepare(b)))
    except GEOSException as exc:
        logger.warning("GEOS failed to evaluate %s: %s", operation, exc)
        raise TopologyException(operation, _strip_prefix(str(exc))) from exc


def _intersects(a: Geometry, b: Geometry, operation: str, config: Optional[EngineConfig]) -> bool:
    if not _envelopes_intersect(a.bounds, b.bounds):
        return _by_envelope(operation, False)
    if is_rectangle(a) or is_rectangle(b):
        return _rectangle_test(a, b, operation, shapely.intersects)
    return _compute(a, b, operation, config).is_intersects()


def _contains(a: Geometry, b: Geometry, operation: str, config: Optional[EngineConfig]) -> bool:
    if not _envelope_covers(a.bounds, b.bounds):
        return _by_envelope(operation, False)
    if is_rectangle(a):
        return _rectangle_test(a, b, operation, shapely.contains)
    return _compute(a, b, operation, config).is_contains()


def _covers(a: Geometry, b: Geometry, operation: str, config: Optional[EngineConfig]) -> bool:
    if not _envelope_covers(a.bounds, b.bounds):
        return _by_envelope(operation, False)
    return _compute(a, b, operation, config).is_covers()


@propagate_nulls
def relate_matrix(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> IntersectionMatrix:
    """
    Compute the DE-9IM matrix of two geometries.

    Raises
    ------
    TopologyException
        If an input is topologically invalid.
    """
    return _compute(a, b, "relate", config)


@propagate_nulls
def relate(a: Geometry, b: Geometry, pattern: str, *, config: Optional[EngineConfig] = None) -> bool:
    """
    Test whether the DE-9IM matrix of ``a`` and ``b`` matches ``pattern``.

    Parameters
    ----------
    a, b : Geometry
        Geometries to relate.
    pattern : str
        Nine symbols from ``0 1 2 T F *`` in row-major order
        (Interior, Boundary, Exterior of ``a`` against those of ``b``).

    Returns
    -------
    bool or None
        None if any argument is None.
    """
    validate_pattern(pattern)
    return _compute(a, b, "relate", config).matches(pattern)


@propagate_nulls
def equals(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """
    Topological equality: same point set and same dimension.

    Vertex order and ring start points do not matter. Two empty
    geometries are equal.
    """
    if a.is_empty or b.is_empty:
        return a.is_empty and b.is_empty
    if a.bounds != b.bounds:
        return _by_envelope("equals", False)
    return _compute(a, b, "equals", config).is_equals(a.dimension, b.dimension)


@propagate_nulls
def disjoint(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if the geometries share no point. Negation of intersects."""
    return not _intersects(a, b, "disjoint", config)


@propagate_nulls
def intersects(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if the geometries share at least one point."""
    return _intersects(a, b, "intersects", config)


@propagate_nulls
def touches(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if the geometries meet only at their boundaries."""
    if not _envelopes_intersect(a.bounds, b.bounds):
        return _by_envelope("touches", False)
    return _compute(a, b, "touches", config).is_touches(a.dimension, b.dimension)


@propagate_nulls
def crosses(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """
    True if the interiors meet in a set of lower dimension than the larger
    input, and each geometry has points outside the other.
    """
    if not _envelopes_intersect(a.bounds, b.bounds):
        return _by_envelope("crosses", False)
    return _compute(a, b, "crosses", config).is_crosses(a.dimension, b.dimension)


@propagate_nulls
def within(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if ``a`` lies in ``b`` and their interiors meet. Inverse of contains."""
    return _contains(b, a, "within", config)


@propagate_nulls
def contains(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if ``b`` lies in ``a`` and their interiors meet."""
    return _contains(a, b, "contains", config)


@propagate_nulls
def overlaps(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """
    True if the geometries have the same dimension, their interiors meet
    in a set of that dimension, and neither contains the other.
    """
    if not _envelopes_intersect(a.bounds, b.bounds):
        return _by_envelope("overlaps", False)
    return _compute(a, b, "overlaps", config).is_overlaps(a.dimension, b.dimension)


@propagate_nulls
def covers(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if no point of ``b`` lies outside ``a``."""
    return _covers(a, b, "covers", config)


@propagate_nulls
def covered_by(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> bool:
    """True if no point of ``a`` lies outside ``b``. Inverse of covers."""
    return _covers(b, a, "coveredby", config)
