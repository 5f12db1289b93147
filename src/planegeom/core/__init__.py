"""
Core geometry model, structural validity and error types.
"""

from .errors import (
    GeometryError,
    InvalidGeometry,
    MalformedInput,
    MalformedWkt,
    MalformedWkb,
    TopologyException,
)
from .geometry import (
    GeometryType,
    Geometry,
    Point,
    LineString,
    LinearRing,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    iter_atoms,
    empty_of_dimension,
)
from .nulls import propagate_nulls

__all__ = [
    # Errors
    'GeometryError',
    'InvalidGeometry',
    'MalformedInput',
    'MalformedWkt',
    'MalformedWkb',
    'TopologyException',
    # Model
    'GeometryType',
    'Geometry',
    'Point',
    'LineString',
    'LinearRing',
    'Polygon',
    'MultiPoint',
    'MultiLineString',
    'MultiPolygon',
    'GeometryCollection',
    'iter_atoms',
    'empty_of_dimension',
    'propagate_nulls',
]
