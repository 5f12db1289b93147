"""
Tests for the named query functions.
"""

import pytest

from planegeom import functions
from planegeom.functions import (
    register_geometry_functions,
    st_area,
    st_as_binary,
    st_as_text,
    st_contains,
    st_geom_from_binary,
    st_geometry_from_text,
    st_relate,
    st_union,
)


SQUARE = "POLYGON ((0 0, 0 4, 4 4, 4 0, 0 0))"
INNER = "POLYGON ((1 1, 1 2, 2 2, 2 1, 1 1))"

PREDICATE_CASES = [
    ("ST_Contains", SQUARE, INNER, True),
    ("ST_Within", INNER, SQUARE, True),
    ("ST_Crosses", "LINESTRING (-2 -2, 6 6)", SQUARE, True),
    ("ST_Disjoint", SQUARE, "POINT (5 5)", True),
    ("ST_Equals", SQUARE, "POLYGON ((4 4, 4 0, 0 0, 0 4, 4 4))", True),
    ("ST_Intersects", SQUARE, INNER, True),
    ("ST_Overlaps", SQUARE, "POLYGON ((3 3, 3 5, 5 5, 5 3, 3 3))", True),
    ("ST_Touches", SQUARE, "POINT (0 2)", True),
]

OVERLAY_CASES = [
    ("ST_Difference", 15.0),
    ("ST_Intersection", 1.0),
    ("ST_SymDifference", 15.0),
    ("ST_Union", 16.0),
]

# Number of arguments of each function that does not take two geometries
ARITY = {
    "ST_GeometryFromText": 1,
    "ST_GeomFromBinary": 1,
    "ST_AsText": 1,
    "ST_AsBinary": 1,
    "ST_Area": 1,
    "ST_Relate": 3,
}


class TestConversions:
    """Text and binary conversions."""

    def test_text_round_trip(self):
        """ST_AsText(ST_GeometryFromText(x)) is canonical."""
        assert st_as_text(st_geometry_from_text("point (1 2)")) == "POINT (1 2)"

    def test_binary_round_trip(self):
        """ST_GeomFromBinary(ST_AsBinary(g)) gives back g."""
        geom = st_geometry_from_text("LINESTRING (0 0, 10 10)")
        assert st_geom_from_binary(st_as_binary(geom)) == geom

    @pytest.mark.parametrize("func", [st_geometry_from_text, st_geom_from_binary, st_as_text, st_as_binary, st_area])
    def test_none(self, func):
        """NULL in, NULL out."""
        assert func(None) is None


class TestQueries:
    """Predicates and overlay through the named functions."""

    def test_contains(self):
        """ST_Contains."""
        square = st_geometry_from_text("POLYGON ((0 0, 0 4, 4 4, 4 0, 0 0))")
        assert st_contains(square, st_geometry_from_text("POINT (1 1)"))

    def test_relate_null_pattern(self):
        """A NULL pattern gives NULL."""
        point = st_geometry_from_text("POINT (1 1)")
        assert st_relate(point, point, None) is None

    def test_union_area(self):
        """Union of two overlapping squares measured by ST_Area."""
        a = st_geometry_from_text("POLYGON ((1 1, 3 1, 3 3, 1 3, 1 1))")
        b = st_geometry_from_text("POLYGON ((2 2, 4 2, 4 4, 2 4, 2 2))")
        assert st_area(st_union(a, b)) == pytest.approx(7.0)


class TestRegistration:
    """Tests for register_geometry_functions()."""

    def test_names(self):
        """Every query-engine name maps to its implementation."""
        table = register_geometry_functions()
        assert table["ST_GeometryFromText"] is st_geometry_from_text
        assert table["ST_SymDifference"] is functions.st_sym_difference
        assert len(table) == 18

    def test_prefix(self):
        """The prefix is prepended to every name."""
        table = register_geometry_functions(prefix="presto.default.")
        assert all(name.startswith("presto.default.ST_") for name in table)
        assert table["presto.default.ST_Area"] is st_area

    @pytest.mark.parametrize("name", sorted(register_geometry_functions()))
    def test_every_function_propagates_nulls(self, name):
        """Every registered function gives NULL for all-NULL arguments."""
        func = register_geometry_functions()[name]
        assert func(*[None] * ARITY.get(name, 2)) is None


class TestRegisteredQueries:
    """Predicates and overlay looked up by name."""

    @pytest.mark.parametrize("name, left, right, expected", PREDICATE_CASES)
    def test_predicates(self, name, left, right, expected):
        """Each named predicate evaluates through the registry."""
        func = register_geometry_functions()[name]
        assert func(st_geometry_from_text(left), st_geometry_from_text(right)) is expected

    @pytest.mark.parametrize("name, left, right, expected", PREDICATE_CASES)
    def test_predicate_nulls(self, name, left, right, expected):
        """A NULL on either side gives NULL."""
        func = register_geometry_functions()[name]
        geom = st_geometry_from_text(left)
        assert func(geom, None) is None
        assert func(None, geom) is None

    def test_relate(self):
        """ST_Relate matches a DE-9IM pattern."""
        func = register_geometry_functions()["ST_Relate"]
        square = st_geometry_from_text(SQUARE)
        inner = st_geometry_from_text(INNER)
        assert func(square, inner, "T*****FF*") is True
        assert func(inner, square, "T*****FF*") is False

    @pytest.mark.parametrize("name, expected", OVERLAY_CASES)
    def test_overlay(self, name, expected):
        """Each named overlay operation evaluates through the registry."""
        func = register_geometry_functions()[name]
        result = func(st_geometry_from_text(SQUARE), st_geometry_from_text(INNER))
        assert st_area(result) == pytest.approx(expected)
