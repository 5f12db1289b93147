"""
Overlay Engine

Set-theoretic combination of two geometries:
- difference(a, b): points of ``a`` not in ``b``
- intersection(a, b): points in both
- sym_difference(a, b): points in exactly one
- union(a, b): points in either

Noding and polygon assembly are done by GEOS through Shapely; this module
validates inputs, handles mixed-dimension collections and normalizes the
result to the simplest kind that represents it.
"""

import logging
from typing import Callable, List, Optional

import shapely
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from ..config import DEFAULT_CONFIG, EngineConfig
from ..core.conversion import from_shapely, to_shapely, topology_problem
from ..core.errors import TopologyException
from ..core.geometry import (
    MULTI_KINDS,
    Geometry,
    GeometryCollection,
    empty_of_dimension,
    iter_atoms,
)
from ..core.nulls import propagate_nulls

logger = logging.getLogger(__name__)


def _check_inputs(a: Geometry, b: Geometry, operation: str) -> None:
    for index, geom in enumerate((a, b)):
        problem = topology_problem(geom)
        if problem is None:
            continue
        logger.warning(
            "Invalid input geom %d to %s: %s at %s",
            index, operation, problem.reason, problem.location,
        )
        raise TopologyException(
            operation,
            f"Input geom {index} is invalid: {problem.reason}",
            problem.location,
            action="compute",
        )


def _parts_by_dimension(shp: BaseGeometry) -> List[BaseGeometry]:
    """Dissolve a geometry and split it into at most one part per dimension."""
    dissolved = shapely.union_all(shp)
    parts = {0: [], 1: [], 2: []}
    for atom in shapely.get_parts(dissolved):
        if not atom.is_empty:
            parts[shapely.get_dimensions(atom)].append(atom)
    return [shapely.union_all(found) for found in parts.values() if found]


def _intersection_parts(a: BaseGeometry, b: BaseGeometry) -> BaseGeometry:
    pieces = [
        shapely.intersection(pa, pb)
        for pa in _parts_by_dimension(a)
        for pb in _parts_by_dimension(b)
    ]
    return shapely.union_all(pieces)


def _difference_parts(a: BaseGeometry, b: BaseGeometry) -> BaseGeometry:
    subtrahends = _parts_by_dimension(b)
    pieces = []
    for part in _parts_by_dimension(a):
        for other in subtrahends:
            part = shapely.difference(part, other)
        pieces.append(part)
    return shapely.union_all(pieces)


def _sym_difference_parts(a: BaseGeometry, b: BaseGeometry) -> BaseGeometry:
    return shapely.union_all([_difference_parts(a, b), _difference_parts(b, a)])


def _union_parts(a: BaseGeometry, b: BaseGeometry) -> BaseGeometry:
    return shapely.union_all([a, b])


# (homogeneous, collection-aware) implementation per operation
_OPERATIONS = {
    "difference": (shapely.difference, _difference_parts),
    "intersection": (shapely.intersection, _intersection_parts),
    "symdifference": (shapely.symmetric_difference, _sym_difference_parts),
    "union": (shapely.union, _union_parts),
}


def _merge_lines(shp: BaseGeometry) -> BaseGeometry:
    """Join lineal parts that meet end to end at nodes of degree two."""
    atoms = shapely.get_parts(shp)
    lines = [g for g in atoms if shapely.get_dimensions(g) == 1]
    if len(lines) < 2:
        return shp
    merged = shapely.line_merge(shapely.multilinestrings(lines))
    others = [g for g in atoms if shapely.get_dimensions(g) != 1]
    if not others:
        return merged
    return shapely.geometrycollections(others + list(shapely.get_parts(merged)))


def normalize(geom: Geometry, dimension: int) -> Geometry:
    """
    Reduce an overlay result to its simplest representation.

    Nested collections are flattened and empty members dropped. One
    remaining member is returned as itself; members of one dimension are
    gathered into the matching multi kind; mixed dimensions stay a
    GeometryCollection. An empty result becomes the empty value of
    ``dimension``.
    """
    atoms = [g for g in iter_atoms(geom) if not g.is_empty]
    if not atoms:
        return empty_of_dimension(dimension)
    if len(atoms) == 1:
        return atoms[0]

    dims = {g.dimension for g in atoms}
    if len(dims) == 1:
        return MULTI_KINDS[dims.pop()](atoms)
    return GeometryCollection(atoms)


def _result_dimension(a: Geometry, b: Geometry, operation: str) -> int:
    if operation == "intersection":
        return min(a.dimension, b.dimension)
    if operation == "difference":
        return a.dimension
    return max(a.dimension, b.dimension)


def _overlay(a: Geometry, b: Geometry, operation: str, config: Optional[EngineConfig]) -> Geometry:
    config = config or DEFAULT_CONFIG
    if config.check_validity:
        _check_inputs(a, b, operation)

    direct, by_parts = _OPERATIONS[operation]
    mixed = type(a) is GeometryCollection or type(b) is GeometryCollection
    func: Callable = by_parts if mixed else direct

    try:
        result = func(to_shapely(a), to_shapely(b))
        if operation == "union" and config.merge_lines:
            result = _merge_lines(result)
    except GEOSException as exc:
        logger.warning("GEOS failed to compute %s: %s", operation, exc)
        message = str(exc)
        prefix = "TopologyException: "
        if message.startswith(prefix):
            message = message[len(prefix):]
        raise TopologyException(operation, message, action="compute") from exc

    return normalize(from_shapely(result), _result_dimension(a, b, operation))


@propagate_nulls
def difference(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> Geometry:
    """
    Points of ``a`` that are not in ``b``.

    Parameters
    ----------
    a, b : Geometry
        Operands. Polygonal parts must be topologically valid.
    config : EngineConfig, optional
        Overrides the process-wide configuration.

    Returns
    -------
    Geometry or None
        Normalized result; the empty value of ``a``'s dimension when
        nothing is left. None if any argument is None.

    Raises
    ------
    TopologyException
        If an input is topologically invalid.
    """
    return _overlay(a, b, "difference", config)


@propagate_nulls
def intersection(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> Geometry:
    """
    Points common to ``a`` and ``b``.

    An empty result takes the smaller of the two input dimensions.
    """
    return _overlay(a, b, "intersection", config)


@propagate_nulls
def sym_difference(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> Geometry:
    """Points in exactly one of ``a`` and ``b``."""
    return _overlay(a, b, "symdifference", config)


@propagate_nulls
def union(a: Geometry, b: Geometry, *, config: Optional[EngineConfig] = None) -> Geometry:
    """
    Points in ``a`` or ``b``.

    Lines that meet end to end are merged into a single line unless the
    configuration disables it.
    """
    return _overlay(a, b, "union", config)
