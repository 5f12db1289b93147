"""
Named query functions.

Thin, null-propagating wrappers that expose the engine under the names a
SQL query engine uses (``ST_Contains``, ``ST_Union``, ...). Every function
returns None when any of its arguments is None.

``register_geometry_functions`` returns the name-to-callable table that a
function registry consumes.
"""

import logging
from typing import Callable, Dict, Optional, Union

from .core.geometry import Geometry
from .core.nulls import propagate_nulls
from .io import wkb, wkt
from .ops.measure import area
from .ops.overlay import difference, intersection, sym_difference, union
from .ops.relate import (
    contains,
    crosses,
    disjoint,
    equals,
    intersects,
    overlaps,
    relate,
    touches,
    within,
)

logger = logging.getLogger(__name__)


# Conversions

@propagate_nulls
def st_geometry_from_text(text: str) -> Geometry:
    """Parse well-known text."""
    return wkt.loads(text)


@propagate_nulls
def st_geom_from_binary(data: Union[bytes, str]) -> Geometry:
    """Parse well-known binary (raw bytes or hex)."""
    return wkb.loads(data)


@propagate_nulls
def st_as_text(geom: Geometry) -> str:
    return wkt.dumps(geom)


@propagate_nulls
def st_as_binary(geom: Geometry) -> bytes:
    return wkb.dumps(geom)


# Accessors

def st_area(geom: Optional[Geometry]) -> Optional[float]:
    return area(geom)


# Predicates

def st_relate(a: Optional[Geometry], b: Optional[Geometry], pattern: Optional[str]) -> Optional[bool]:
    return relate(a, b, pattern)


def st_contains(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return contains(a, b)


def st_crosses(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return crosses(a, b)


def st_disjoint(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return disjoint(a, b)


def st_equals(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return equals(a, b)


def st_intersects(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return intersects(a, b)


def st_overlaps(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return overlaps(a, b)


def st_touches(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return touches(a, b)


def st_within(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[bool]:
    return within(a, b)


# Overlay

def st_difference(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[Geometry]:
    return difference(a, b)


def st_intersection(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[Geometry]:
    return intersection(a, b)


def st_sym_difference(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[Geometry]:
    return sym_difference(a, b)


def st_union(a: Optional[Geometry], b: Optional[Geometry]) -> Optional[Geometry]:
    return union(a, b)


_FUNCTIONS = {
    "ST_GeometryFromText": st_geometry_from_text,
    "ST_GeomFromBinary": st_geom_from_binary,
    "ST_AsText": st_as_text,
    "ST_AsBinary": st_as_binary,
    "ST_Area": st_area,
    "ST_Relate": st_relate,
    "ST_Contains": st_contains,
    "ST_Crosses": st_crosses,
    "ST_Disjoint": st_disjoint,
    "ST_Equals": st_equals,
    "ST_Intersects": st_intersects,
    "ST_Overlaps": st_overlaps,
    "ST_Touches": st_touches,
    "ST_Within": st_within,
    "ST_Difference": st_difference,
    "ST_Intersection": st_intersection,
    "ST_SymDifference": st_sym_difference,
    "ST_Union": st_union,
}


def register_geometry_functions(prefix: str = "") -> Dict[str, Callable]:
    """
    Build the table of named geometry functions.

    Parameters
    ----------
    prefix : str
        Prepended to every name, e.g. ``"presto.default."``.

    Returns
    -------
    dict
        Maps ``prefix + name`` to the implementing callable.
    """
    table = {prefix + name: func for name, func in _FUNCTIONS.items()}
    logger.debug("Registered %d geometry functions with prefix %r", len(table), prefix)
    return table
