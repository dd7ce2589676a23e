"""Tests for geometry.py and the value types in models.py."""

from __future__ import annotations

import math

import pytest

from polygrow.geometry import (
    centroid,
    fuzzy_equals,
    normal,
    normalized,
    point_in_convex_polygon,
    polygon_edges,
    resized,
    segment_distance,
    segment_intersection,
    segments_intersect,
    signed_area,
    z_cross,
)
from polygrow.models import Bounds, GrowthDirection, Segment

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


# ═══════════════════════════════════════════════════════════════════
# Vectors
# ═══════════════════════════════════════════════════════════════════


class TestVectors:
    def test_z_cross_sign(self):
        assert z_cross((1.0, 0.0), (0.0, 1.0)) == 1.0
        assert z_cross((0.0, 1.0), (1.0, 0.0)) == -1.0
        assert z_cross((2.0, 2.0), (1.0, 1.0)) == 0.0

    def test_normal_is_quarter_turn(self):
        n = normal((1.0, 0.0))
        assert n == (0.0, 1.0)

    def test_normalized(self):
        assert normalized((3.0, 4.0)) == pytest.approx((0.6, 0.8))

    def test_normalized_zero_raises(self):
        with pytest.raises(ValueError):
            normalized((0.0, 0.0))

    def test_resized(self):
        assert resized((3.0, 4.0), 10.0) == pytest.approx((6.0, 8.0))

    def test_resized_negative_flips(self):
        assert resized((0.0, 2.0), -0.5) == pytest.approx((0.0, -0.5))


class TestFuzzyEquals:
    def test_close_values(self):
        assert fuzzy_equals(1.0, 1.0 + 1e-14)
        assert not fuzzy_equals(1.0, 1.001)

    def test_small_values_use_absolute_tolerance(self):
        assert fuzzy_equals(0.0, 1e-13)

    def test_infinities(self):
        assert fuzzy_equals(math.inf, math.inf)
        assert not fuzzy_equals(math.inf, 1e300)

    def test_nan_equals_nothing(self):
        assert not fuzzy_equals(math.nan, math.nan)


# ═══════════════════════════════════════════════════════════════════
# Segments
# ═══════════════════════════════════════════════════════════════════


class TestSegment:
    def test_length_and_midpoint(self):
        s = Segment((0.0, 0.0), (3.0, 4.0))
        assert s.length == pytest.approx(5.0)
        assert s.midpoint == (1.5, 2.0)

    def test_slope(self):
        assert Segment((0.0, 0.0), (2.0, 1.0)).slope == pytest.approx(0.5)
        assert Segment((0.0, 0.0), (-2.0, 0.0)).slope == 0.0

    def test_vertical_slope_is_infinite_both_ways(self):
        assert Segment((1.0, 0.0), (1.0, 1.0)).slope == math.inf
        assert Segment((1.0, 1.0), (1.0, 0.0)).slope == math.inf

    def test_degenerate(self):
        s = Segment((1.0, 1.0), (1.0, 1.0))
        assert s.is_degenerate()
        assert math.isnan(s.slope)
        assert not Segment((0.0, 0.0), (1e-9, 0.0)).is_degenerate(1e-12)
        assert Segment((0.0, 0.0), (1e-13, 0.0)).is_degenerate(1e-12)


class TestSegmentIntersection:
    def test_crossing(self):
        a = Segment((0.0, 0.0), (2.0, 2.0))
        b = Segment((0.0, 2.0), (2.0, 0.0))
        assert segments_intersect(a, b)
        assert segment_intersection(a, b) == pytest.approx((1.0, 1.0))

    def test_shared_endpoint(self):
        a = Segment((0.0, 0.0), (1.0, 0.0))
        b = Segment((1.0, 0.0), (1.0, 1.0))
        assert segments_intersect(a, b)
        assert segment_intersection(a, b) == pytest.approx((1.0, 0.0))

    def test_disjoint(self):
        a = Segment((0.0, 0.0), (1.0, 0.0))
        b = Segment((2.0, -1.0), (2.0, 1.0))
        assert not segments_intersect(a, b)
        assert segment_intersection(a, b) is None

    def test_parallel_has_no_single_point(self):
        a = Segment((0.0, 0.0), (2.0, 0.0))
        b = Segment((1.0, 0.0), (3.0, 0.0))
        assert segments_intersect(a, b)
        assert segment_intersection(a, b) is None


class TestSegmentDistance:
    def test_crossing(self):
        a = Segment((0.0, 0.0), (2.0, 2.0))
        b = Segment((0.0, 2.0), (2.0, 0.0))
        assert segment_distance(a, b) == 0.0

    def test_end_near_middle(self):
        a = Segment((1.0, 0.5), (1.0, 3.0))
        b = Segment((0.0, 0.0), (2.0, 0.0))
        assert segment_distance(a, b) == pytest.approx(0.5)

    def test_end_to_end(self):
        a = Segment((0.0, 0.0), (1.0, 0.0))
        b = Segment((4.0, 4.0), (5.0, 4.0))
        assert segment_distance(a, b) == pytest.approx(5.0)

    def test_degenerate(self):
        point = Segment((1.0, 1.0), (1.0, 1.0))
        b = Segment((0.0, 0.0), (2.0, 0.0))
        assert segment_distance(point, b) == pytest.approx(1.0)


# ═══════════════════════════════════════════════════════════════════
# Vertex loops
# ═══════════════════════════════════════════════════════════════════


class TestPolygonHelpers:
    def test_polygon_edges_close_the_loop(self):
        edges = polygon_edges(UNIT_SQUARE)
        assert len(edges) == 4
        assert edges[-1] == Segment((0.0, 1.0), (0.0, 0.0))

    def test_signed_area_follows_winding(self):
        assert signed_area(UNIT_SQUARE) == pytest.approx(1.0)
        assert signed_area(list(reversed(UNIT_SQUARE))) == pytest.approx(-1.0)

    def test_centroid(self):
        assert centroid(UNIT_SQUARE) == pytest.approx((0.5, 0.5))

    def test_point_in_convex_polygon_includes_boundary(self):
        assert point_in_convex_polygon((0.5, 0.5), UNIT_SQUARE)
        assert point_in_convex_polygon((1.0, 0.5), UNIT_SQUARE)
        assert point_in_convex_polygon((1.0, 1.0), UNIT_SQUARE)
        assert not point_in_convex_polygon((1.1, 0.5), UNIT_SQUARE)

    def test_point_in_convex_polygon_clockwise(self):
        assert point_in_convex_polygon((0.5, 0.5), list(reversed(UNIT_SQUARE)))
        assert not point_in_convex_polygon((-0.5, 0.5), list(reversed(UNIT_SQUARE)))

    def test_point_in_convex_polygon_skips_zero_length_edges(self):
        points = [(0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
        assert point_in_convex_polygon((0.5, 0.5), points)
        assert not point_in_convex_polygon((0.5, -0.5), points)


# ═══════════════════════════════════════════════════════════════════
# Value types
# ═══════════════════════════════════════════════════════════════════


class TestGrowthDirection:
    def test_filled_keeps_existing_slots(self):
        direction = GrowthDirection(first=(1.0, 0.0))
        filled = direction.filled((0.0, 1.0))
        assert filled.first == (1.0, 0.0)
        assert filled.second == (0.0, 1.0)
        assert filled.is_complete
        assert not direction.is_complete

    def test_with_second(self):
        direction = GrowthDirection().with_second((0.0, -1.0))
        assert direction.first is None
        assert direction.second == (0.0, -1.0)


class TestBounds:
    def test_extent(self):
        bounds = Bounds((-1.0, 2.0), 4.0, 3.0)
        assert bounds.max_x == 3.0
        assert bounds.max_y == 5.0
        assert bounds.area == 12.0

    def test_contains_is_closed(self):
        bounds = Bounds((0.0, 0.0), 1.0, 1.0)
        assert bounds.contains_point((1.0, 1.0))
        assert not bounds.contains_point((1.0 + 1e-9, 0.5))
        assert bounds.contains_segment(Segment((0.0, 0.0), (1.0, 1.0)))
        assert not bounds.contains_segment(Segment((0.0, 0.0), (1.0, 1.5)))

    def test_dict_round_trip(self):
        bounds = Bounds((1.0, 2.0), 3.0, 4.0)
        assert Bounds.from_dict(bounds.to_dict()) == bounds
