"""
Conversion between planegeom geometries and Shapely geometries.

Shapely (GEOS) does the numerically robust work for the relate and overlay
engines: noding, DE-9IM labelling and validity diagnostics.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import shapely
from shapely import geometry as sgeom
from shapely.geometry.base import BaseGeometry

from .geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)


# GEOS validity reasons look like "Self-intersection[1 2]"
_REASON_PATTERN = re.compile(r"^(?P<reason>.*?)\s*\[(?P<x>\S+)\s+(?P<y>\S+)\]\s*$")


@dataclass(frozen=True)
class TopologyProblem:
    """
    A topological defect found in a geometry.

    Attributes
    ----------
    reason : str
        GEOS description of the defect, e.g. ``"Self-intersection"``.
    location : tuple of float or None
        Coordinate of the defect when GEOS reports one.
    """
    reason: str
    location: Optional[Tuple[float, float]] = None


def to_shapely(geom: Geometry) -> BaseGeometry:
    """
    Convert a planegeom geometry to the equivalent Shapely geometry.

    Empty members of multi-geometries are dropped; they denote no points.
    """
    if isinstance(geom, Point):
        if geom.is_empty:
            return sgeom.Point()
        return sgeom.Point(geom.x, geom.y)

    if isinstance(geom, LineString):
        if geom.is_empty:
            return sgeom.LineString()
        return sgeom.LineString(geom.coords)

    if isinstance(geom, Polygon):
        if geom.is_empty:
            return sgeom.Polygon()
        return sgeom.Polygon(geom.exterior.coords, [ring.coords for ring in geom.interiors])

    if isinstance(geom, MultiPoint):
        return sgeom.MultiPoint([to_shapely(p) for p in geom.geoms if not p.is_empty])

    if isinstance(geom, MultiLineString):
        return sgeom.MultiLineString([to_shapely(g) for g in geom.geoms if not g.is_empty])

    if isinstance(geom, MultiPolygon):
        return sgeom.MultiPolygon([to_shapely(g) for g in geom.geoms if not g.is_empty])

    if isinstance(geom, GeometryCollection):
        return sgeom.GeometryCollection([to_shapely(g) for g in geom.geoms])

    raise TypeError(f"Cannot convert {type(geom).__name__} to Shapely")


def from_shapely(shp) -> Geometry:
    """
    Convert a Shapely geometry back to a planegeom geometry.

    Parameters
    ----------
    shp : BaseGeometry
        Any 2D Shapely geometry.

    Returns
    -------
    Geometry
        A new geometry holding its own copy of the coordinates.
    """
    kind = shp.geom_type

    if kind == "Point":
        if shp.is_empty:
            return Point()
        return Point(shp.x, shp.y)

    if kind in ("LineString", "LinearRing"):
        return LineString(shapely.get_coordinates(shp))

    if kind == "Polygon":
        if shp.is_empty:
            return Polygon()
        return Polygon(
            shapely.get_coordinates(shp.exterior),
            [shapely.get_coordinates(ring) for ring in shp.interiors],
        )

    members = [from_shapely(g) for g in shp.geoms]
    if kind == "MultiPoint":
        return MultiPoint(members)
    if kind == "MultiLineString":
        return MultiLineString(members)
    if kind == "MultiPolygon":
        return MultiPolygon(members)
    if kind == "GeometryCollection":
        return GeometryCollection(members)

    raise TypeError(f"Unsupported Shapely geometry type: {kind}")


def _polygonal_parts(geom: Geometry) -> Iterator[Geometry]:
    # A multipolygon is validated as a whole so overlapping members are caught
    if isinstance(geom, (Polygon, MultiPolygon)):
        if not geom.is_empty:
            yield geom
    elif type(geom) is GeometryCollection:
        for member in geom.geoms:
            yield from _polygonal_parts(member)


def topology_problem(geom: Geometry) -> Optional[TopologyProblem]:
    """
    Find the first topological defect in the areal parts of a geometry.

    Points and lines are never reported: a self-crossing line is a legal
    input for every operation. Rings are checked for self-intersection and
    multipolygon members for overlap.

    Returns
    -------
    TopologyProblem or None
        None if the geometry is topologically valid.
    """
    for part in _polygonal_parts(geom):
        shp = to_shapely(part)
        if shapely.is_valid(shp):
            continue

        reason = shapely.is_valid_reason(shp)
        match = _REASON_PATTERN.match(reason)
        if match is None:
            return TopologyProblem(reason)
        try:
            location = (float(match.group("x")), float(match.group("y")))
        except ValueError:
            return TopologyProblem(reason)
        return TopologyProblem(match.group("reason"), location)

    return None
