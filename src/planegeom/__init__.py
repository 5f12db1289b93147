"""
planegeom - Planar vector geometry for query engines.

This package provides an immutable 2D geometry model together with:
- Well-known text and well-known binary codecs
- DE-9IM relate and the named spatial predicates
- Overlay operations (difference, intersection, symmetric difference, union)
- Planar area

Main Functions
--------------
loads_wkt, dumps_wkt : Read and write well-known text
loads_wkb, dumps_wkb : Read and write well-known binary
relate : Match the DE-9IM matrix of two geometries against a pattern
contains, within, intersects, ... : Named spatial predicates
difference, intersection, sym_difference, union : Overlay
area : Planar area

Every operation returns None when any argument is None.

Example
-------
>>> from planegeom import loads_wkt, dumps_wkt, contains, union

>>> square = loads_wkt("POLYGON ((0 0, 0 4, 4 4, 4 0, 0 0))")
>>> contains(square, loads_wkt("POINT (1 1)"))
True
>>> dumps_wkt(union(loads_wkt("LINESTRING (0 1, 1 2)"), loads_wkt("LINESTRING (1 2, 3 4)")))
'LINESTRING (0 1, 1 2, 3 4)'
"""

from .core import (
    GeometryError,
    InvalidGeometry,
    MalformedInput,
    MalformedWkt,
    MalformedWkb,
    TopologyException,
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
)
from .io.wkt import loads as loads_wkt, dumps as dumps_wkt
from .io.wkb import loads as loads_wkb, dumps as dumps_wkb
from .ops import (
    IntersectionMatrix,
    relate_matrix,
    relate,
    equals,
    disjoint,
    intersects,
    touches,
    crosses,
    within,
    contains,
    overlaps,
    covers,
    covered_by,
    difference,
    intersection,
    sym_difference,
    union,
    area,
)
from .config import EngineConfig, load_config, configure_logging
from .functions import register_geometry_functions

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
    # Codecs
    'loads_wkt',
    'dumps_wkt',
    'loads_wkb',
    'dumps_wkb',
    # Relate
    'IntersectionMatrix',
    'relate_matrix',
    'relate',
    'equals',
    'disjoint',
    'intersects',
    'touches',
    'crosses',
    'within',
    'contains',
    'overlaps',
    'covers',
    'covered_by',
    # Overlay
    'difference',
    'intersection',
    'sym_difference',
    'union',
    # Measure
    'area',
    # Configuration
    'EngineConfig',
    'load_config',
    'configure_logging',
    'register_geometry_functions',
]
