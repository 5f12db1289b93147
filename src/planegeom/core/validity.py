"""
Structural validity checks.

These run whenever a point sequence, line or ring is assembled, whether by a
codec or by direct construction. They only check well-formedness; a ring
that crosses itself passes here and is reported later by the relate and
overlay engines.
"""

import numpy as np

from .errors import InvalidGeometry


# Smallest legal non-empty sizes
MIN_LINE_POINTS = 2
MIN_RING_POINTS = 4


def as_coordinates(coords) -> np.ndarray:
    """
    Convert a coordinate sequence to a read-only float64 array of shape (N, 2).

    The result never shares memory with the input.

    Parameters
    ----------
    coords : array_like
        Sequence of (x, y) pairs. An empty sequence is allowed.

    Returns
    -------
    np.ndarray
        Array of shape (N, 2).
    """
    arr = np.array(coords, dtype=np.float64)
    if arr.size == 0:
        arr = np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidGeometry(f"Expected coordinates of shape (N, 2), got {arr.shape}")
    arr.setflags(write=False)
    return arr


def check_finite(coords: np.ndarray, kind: str) -> None:
    """Reject NaN and infinite ordinates."""
    bad = ~np.isfinite(coords).all(axis=1)
    if bad.any():
        index = int(np.argmax(bad))
        raise InvalidGeometry(
            f"Invalid coordinate in {kind}: non-finite value at index {index}"
        )


def check_point(coords: np.ndarray) -> None:
    if len(coords) > 1:
        raise InvalidGeometry(
            f"Point must contain 0 or 1 coordinates, found {len(coords)}"
        )
    check_finite(coords, "Point")


def check_line(coords: np.ndarray) -> None:
    if len(coords) == 1:
        raise InvalidGeometry("point array must contain 0 or >1 elements")
    check_finite(coords, "LineString")


def check_ring(coords: np.ndarray) -> None:
    """
    Check ring size and closure.

    Raises
    ------
    InvalidGeometry
        If the ring has 1 to 3 points, or its first and last points differ.
    """
    n = len(coords)
    if n == 0:
        return
    if n < MIN_RING_POINTS:
        raise InvalidGeometry(
            f"Invalid number of points in LinearRing found {n} - must be 0 or >= 4"
        )
    check_finite(coords, "LinearRing")
    if not np.array_equal(coords[0], coords[-1]):
        raise InvalidGeometry("Points of LinearRing do not form a closed linestring")
