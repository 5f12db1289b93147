"""
Geometric operations: DE-9IM relate, predicates, overlay and area.
"""

from .relate import (
    Location,
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
)
from .overlay import difference, intersection, sym_difference, union, normalize
from .measure import area, ring_signed_area

__all__ = [
    # Relate
    'Location',
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
    'normalize',
    # Measure
    'area',
    'ring_signed_area',
]
