"""
Area measurement.
"""

import numpy as np

from ..core.errors import InvalidGeometry
from ..core.geometry import Geometry, GeometryCollection, LineString, Point, Polygon
from ..core.nulls import propagate_nulls


def ring_signed_area(coords: np.ndarray) -> float:
    """
    Signed area of a closed ring by the shoelace formula.

    Positive for counter-clockwise rings. Coordinates are shifted to the
    first vertex before summing, which keeps the cross products small for
    rings far from the origin.

    Parameters
    ----------
    coords : np.ndarray
        Ring vertices, shape (N, 2), first equal to last.

    Returns
    -------
    float
        Signed area; 0.0 for an empty ring.
    """
    if len(coords) < 3:
        return 0.0
    shifted = coords - coords[0]
    x = shifted[:, 0]
    y = shifted[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def _polygon_area(polygon: Polygon) -> float:
    if polygon.is_empty:
        return 0.0
    shell = abs(ring_signed_area(polygon.exterior.coords))
    holes = sum(abs(ring_signed_area(ring.coords)) for ring in polygon.interiors)
    return abs(shell - holes)


@propagate_nulls
def area(geom: Geometry) -> float:
    """
    Planar area of a geometry.

    Polygons contribute the absolute value of their shell area less the
    area of their holes; points and lines contribute 0. Collections sum
    their members.

    Parameters
    ----------
    geom : Geometry
        Any geometry. Empty geometries have area 0.

    Returns
    -------
    float or None
        Non-negative area, or None if ``geom`` is None.

    Example
    -------
    >>> area(Polygon([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)]))
    4.0
    """
    if isinstance(geom, Polygon):
        return _polygon_area(geom)
    if isinstance(geom, (Point, LineString)):
        return 0.0
    if isinstance(geom, GeometryCollection):
        return float(sum(area(member) for member in geom.geoms))
    raise InvalidGeometry(f"Cannot measure {type(geom).__name__}")
