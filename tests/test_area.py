"""
Unit tests for area measurement.
"""

import numpy as np
import pytest

from planegeom import area
from planegeom.io.wkt import loads
from planegeom.ops.measure import ring_signed_area

EPS = 1e-9


class TestRingSignedArea:
    """Tests for ring_signed_area() function."""

    def test_orientation_sign(self):
        """Counter-clockwise rings are positive, clockwise negative."""
        ccw = np.array([[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]], dtype=float)
        assert ring_signed_area(ccw) == pytest.approx(1.0)
        assert ring_signed_area(ccw[::-1]) == pytest.approx(-1.0)

    def test_degenerate(self):
        """Fewer than three positions enclose nothing."""
        assert ring_signed_area(np.empty((0, 2))) == 0.0
        assert ring_signed_area(np.array([[0.0, 0.0], [1.0, 1.0]])) == 0.0

    def test_far_from_origin(self):
        """Shifting to the first vertex keeps precision for large offsets."""
        offset = 1e7
        square = np.array([[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]], dtype=float) + offset
        assert abs(ring_signed_area(square) - 1.0) < EPS


class TestArea:
    """Tests for area() function."""

    @pytest.mark.parametrize("text, expected", [
        ("POLYGON ((2 2, 2 6, 6 6, 6 2, 2 2))", 16.0),
        ("POLYGON EMPTY", 0.0),
        ("LINESTRING (1 4, 2 5)", 0.0),
        ("LINESTRING EMPTY", 0.0),
        ("POINT (1 4)", 0.0),
        ("POINT EMPTY", 0.0),
        ("GEOMETRYCOLLECTION EMPTY", 0.0),
        ("GEOMETRYCOLLECTION (POINT (8 8), LINESTRING (5 5, 6 6), POLYGON ((1 1, 3 1, 3 4, 1 4, 1 1)))", 6.0),
        # overlapping members are not deduplicated
        ("GEOMETRYCOLLECTION (POLYGON ((0 0, 2 0, 2 2, 0 2, 0 0)), POLYGON ((1 1, 3 1, 3 3, 1 3, 1 1)))", 8.0),
        ("GEOMETRYCOLLECTION (POLYGON ((0 0, 2 0, 2 2, 0 2, 0 0)), POLYGON ((1 1, 3 1, 3 3, 1 3, 1 1)), "
         "GEOMETRYCOLLECTION (POINT (8 8), LINESTRING (5 5, 6 6), POLYGON ((1 1, 3 1, 3 4, 1 4, 1 1))))", 14.0),
        ("POLYGON ((0 0, 0 5, 5 5, 5 0, 0 0), (1 1, 4 1, 4 4, 1 4, 1 1))", 16.0),
        ("MULTIPOLYGON (((0 0, 0 1, 1 1, 1 0, 0 0)), ((2 2, 2 3, 3 3, 3 2, 2 2)))", 2.0),
    ])
    def test_area(self, text, expected):
        """Exact areas across kinds."""
        assert area(loads(text)) == expected

    def test_orientation_independent(self):
        """Shell orientation does not change the area."""
        cw = loads("POLYGON ((0 0, 0 2, 2 2, 2 0, 0 0))")
        ccw = loads("POLYGON ((0 0, 2 0, 2 2, 0 2, 0 0))")
        assert area(cw) == area(ccw) == 4.0

    def test_hole_larger_than_shell(self):
        """A hole outside a smaller shell still gives a non-negative area."""
        geom = loads("POLYGON ((0 0, 0 1, 1 1, 1 0, 0 0), (5 5, 5 8, 8 8, 8 5, 5 5))")
        assert area(geom) == 8.0

    def test_deeply_nested_collection(self):
        """Collections at the nesting limit are measured."""
        text = "GEOMETRYCOLLECTION (" * 100 + "POLYGON ((0 0, 0 2, 2 2, 2 0, 0 0))" + ")" * 100
        assert area(loads(text)) == 4.0

    def test_none(self):
        """None gives None."""
        assert area(None) is None
