"""
Unit tests for structural validity checks.
"""

import numpy as np
import pytest

from planegeom.core.errors import InvalidGeometry
from planegeom.core.validity import (
    as_coordinates,
    check_finite,
    check_line,
    check_point,
    check_ring,
)


class TestAsCoordinates:
    """Tests for as_coordinates() function."""

    def test_empty_sequence(self):
        """Empty input gives a (0, 2) array."""
        assert as_coordinates([]).shape == (0, 2)

    def test_wrong_shape(self):
        """Three ordinates per position are rejected."""
        with pytest.raises(InvalidGeometry, match="shape"):
            as_coordinates([(0, 0, 0)])

    def test_read_only(self):
        """Result is not writeable."""
        assert not as_coordinates([(1, 2)]).flags.writeable


class TestChecks:
    """Tests for the individual structural checks."""

    def test_check_finite_reports_index(self):
        """The first offending position is named."""
        coords = np.array([[0.0, 0.0], [1.0, np.nan], [np.inf, 0.0]])
        with pytest.raises(InvalidGeometry, match="in LineString: non-finite value at index 1"):
            check_finite(coords, "LineString")

    def test_check_point_too_many(self):
        """A point holds at most one position."""
        with pytest.raises(InvalidGeometry):
            check_point(np.zeros((2, 2)))

    @pytest.mark.parametrize("n", [0, 2, 5])
    def test_check_line_accepts(self, n):
        """Zero or at least two positions form a line."""
        check_line(np.arange(2 * n, dtype=float).reshape(n, 2))

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_check_ring_short(self, n):
        """One to three positions never form a ring."""
        coords = np.zeros((n, 2))
        with pytest.raises(InvalidGeometry, match=f"found {n} - must be 0 or >= 4"):
            check_ring(coords)

    def test_check_ring_size_before_finiteness(self):
        """Size is reported before bad ordinates."""
        coords = np.array([[np.nan, 0.0], [0.0, 0.0]])
        with pytest.raises(InvalidGeometry, match="found 2"):
            check_ring(coords)

    def test_check_ring_self_crossing_passes(self):
        """A bow-tie ring is structurally fine."""
        bowtie = np.array([[0, 0], [1, 1], [1, 0], [0, 1], [0, 0]], dtype=float)
        check_ring(bowtie)
