"""Tests for ExtendableConvexPolygon.extend: growth around obstacles."""

from __future__ import annotations

import math

import pytest

from polygrow.errors import ContractViolationError, GrowthError
from polygrow.extendable import ExtendableConvexPolygon
from polygrow.models import Bounds, Segment
from polygrow.obstacles import PolygonObstacle

ROOT_HALF = math.sqrt(0.5)
ORIGIN = (-10.0, -10.0)
SIZE = 20.0


def _flat(polygon):
    return [c for vertex in polygon.vertices for c in vertex]


@pytest.fixture
def square():
    return ExtendableConvexPolygon([(0, 0), (1, 0), (1, 1), (0, 1)])


@pytest.fixture
def corner_triangle():
    """Triangle whose oblique edge faces the (1, 1) corner of the unit square."""
    return PolygonObstacle.from_points([(1.15, 0.9), (1.5, 1.5), (0.9, 1.15)])


# ═══════════════════════════════════════════════════════════════════
# Free growth
# ═══════════════════════════════════════════════════════════════════


class TestFreeGrowth:
    def test_single_iteration_moves_every_edge(self, square):
        assert square.extend(0.1, [], ORIGIN, SIZE, SIZE)
        assert _flat(square) == pytest.approx([-0.1, -0.1, 1.1, -0.1, 1.1, 1.1, -0.1, 1.1])
        assert square.enabled_edges() == [0, 1, 2, 3]

    def test_reaches_the_bounds(self, square):
        iterations = square.grow(1.0, [], Bounds(ORIGIN, SIZE, SIZE))
        assert iterations == 10
        assert _flat(square) == pytest.approx([-10, -10, 10, -10, 10, 10, -10, 10])
        assert square.enabled_edges() == []
        assert not square.extend(1.0, [], ORIGIN, SIZE, SIZE)

    def test_zero_iterations_budget(self, square):
        assert square.grow(1.0, [], Bounds(ORIGIN, SIZE, SIZE), max_iterations=0) == 0
        assert square.area() == pytest.approx(1.0)

    def test_edge_leaving_bounds_is_disabled(self, square):
        assert square.extend(0.1, [], (0.0, 0.0), 5.0, 5.0)
        assert square.enabled_edges() == [1, 2]
        assert _flat(square) == pytest.approx([0, 0, 1.1, 0, 1.1, 1.1, 0, 1.1])


# ═══════════════════════════════════════════════════════════════════
# Blocked growth
# ═══════════════════════════════════════════════════════════════════


class TestBlockedGrowth:
    def test_edge_reaching_a_wall_is_reverted_and_disabled(self, square):
        wall = PolygonObstacle.rectangle(1.05, -5.0, 2.0, 10.0)
        assert square.extend(0.1, [wall], ORIGIN, SIZE, SIZE)
        assert not square.can_advance(1)
        assert square.get_vertex(1)[0] == pytest.approx(1.0)
        assert square.get_vertex(2)[0] == pytest.approx(1.0)
        assert not square.intersects(wall)

    def test_disabled_edge_stays_disabled(self, square):
        wall = PolygonObstacle.rectangle(1.05, -5.0, 2.0, 10.0)
        square.extend(0.1, [wall], ORIGIN, SIZE, SIZE)
        assert square.extend(0.1, [wall], ORIGIN, SIZE, SIZE)
        assert square.extend(0.1, [wall], ORIGIN, SIZE, SIZE)
        assert not square.can_advance(1)
        assert square.get_vertex(1)[0] == pytest.approx(1.0)

    def test_obstacle_vertex_inside_is_not_grown_around(self, square):
        spike = PolygonObstacle.from_points([(1.05, 0.5), (2.0, 0.4), (2.0, 0.6)])
        square.extend(0.1, [spike], ORIGIN, SIZE, SIZE)
        assert not square.can_advance(1)
        assert square.vertex_count() == 4
        assert not square.intersects(spike)

    def test_fixpoint_never_overlaps_the_wall(self, square):
        wall = PolygonObstacle.rectangle(1.05, -5.0, 2.0, 10.0)
        square.grow(0.25, [wall], Bounds(ORIGIN, SIZE, SIZE))
        assert square.is_convex()
        assert not square.intersects(wall)
        assert max(x for x, _ in square.vertices) == pytest.approx(1.0)


# ═══════════════════════════════════════════════════════════════════
# Advanced case: vertex split along an oblique obstacle edge
# ═══════════════════════════════════════════════════════════════════


class TestVertexSplit:
    def test_corner_is_split(self, square, corner_triangle):
        assert square.extend(0.1, [corner_triangle], ORIGIN, SIZE, SIZE)
        assert square.vertex_count() == 5
        assert len(square.caches) == 5
        assert _flat(square) == pytest.approx([0, -0.1, 1, -0.1, 1, 1, 0.9, 1.1, 0, 1.1])

    def test_split_halves_follow_the_obstacle_edge(self, square, corner_triangle):
        square.extend(0.1, [corner_triangle], ORIGIN, SIZE, SIZE)
        assert square.growth_direction(1).second == pytest.approx((ROOT_HALF, -ROOT_HALF))
        assert square.growth_direction(3).first == pytest.approx((-ROOT_HALF, ROOT_HALF))
        assert not square.can_advance(2)
        assert not square.intersects(corner_triangle)

    def test_growth_slides_along_the_obstacle(self, square, corner_triangle):
        square.grow(0.1, [corner_triangle], Bounds((-3.0, -3.0), 6.0, 6.0))
        assert square.is_convex()
        assert square.validate() == []
        assert not square.intersects(corner_triangle)
        assert square.vertex_count() == 5
        assert all(x + y <= 2.0 + 1e-9 for x, y in square.vertices)
        # [-3, 3]^2 minus the corner cut by x + y = 2, up to one step
        assert 26.0 < square.area() <= 28.0 + 1e-9


class TestInvalidDirections:
    def test_edge_with_unusable_direction_is_disabled(self, square):
        square._set_growth(0, first=(1.0, 0.0))
        assert square.extend(0.1, [], ORIGIN, SIZE, SIZE)
        assert not square.can_advance(0)
        assert square.enabled_edges() == [1, 2, 3]


# ═══════════════════════════════════════════════════════════════════
# Reverts, several obstacles, broken obstacles
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def lower_corner_triangle():
    """Oblique edge x - y = 1.05 facing the (1, 0) corner of the unit square."""
    return PolygonObstacle.from_points([(0.95, -0.1), (1.5, -0.5), (1.15, 0.1)])


@pytest.fixture
def upper_corner_triangle():
    """Mirror image of ``lower_corner_triangle`` about y = 0.5."""
    return PolygonObstacle.from_points([(0.95, 1.1), (1.5, 1.5), (1.15, 0.9)])


class _OutlineFarAway:
    """Obstacle whose containment disagrees with its outline."""

    def vertices(self):
        return [(50.0, 50.0), (51.0, 50.0), (51.0, 51.0)]

    def contains(self, point, tolerance=0.0):
        return point[0] > 1.05 and point[1] > 0.5

    def intersects_polygon(self, points, tolerance=0.0):
        return any(self.contains(p) for p in points)


class TestRevert:
    def test_revert_restores_exact_coordinates(self):
        polygon = ExtendableConvexPolygon([(-1.0, 0.0), (0.1, 0.0), (0.1, 1.0), (-1.0, 1.0)])
        wall = PolygonObstacle.rectangle(0.25, -5.0, 1.0, 10.0)
        assert polygon.extend(0.2, [wall], ORIGIN, SIZE, SIZE)
        assert not polygon.can_advance(1)
        # 0.1 + 0.2 - 0.2 != 0.1 in floating point
        assert polygon.get_vertex(1)[0] == 0.1
        assert polygon.get_vertex(2)[0] == 0.1


class TestSeveralObstacles:
    def test_two_corners_split_in_one_move(
        self, square, lower_corner_triangle, upper_corner_triangle
    ):
        obstacles = [lower_corner_triangle, upper_corner_triangle]
        # only the right edge has room to move
        assert square.extend(0.1, obstacles, (0.0, 0.0), 5.0, 1.0)
        assert square.vertex_count() == 6
        assert len(square.caches) == 6
        assert square.growth_direction(0).second == pytest.approx((-ROOT_HALF, -ROOT_HALF))
        assert square.growth_direction(2).first == pytest.approx((ROOT_HALF, ROOT_HALF))
        assert square.growth_direction(2).second == pytest.approx((ROOT_HALF, -ROOT_HALF))
        assert square.growth_direction(4).first == pytest.approx((-ROOT_HALF, ROOT_HALF))
        # the old right edge already moved once along the new directions
        assert _flat(square) == pytest.approx([0, 0, 1, 0, 1.1, 0.1, 1.1, 0.9, 1, 1, 0, 1])
        assert square.is_convex()
        assert not any(square.intersects(o) for o in obstacles)

    def test_more_than_two_obstacles_block_the_edge(
        self, square, lower_corner_triangle, upper_corner_triangle
    ):
        spike = PolygonObstacle.from_points([(1.05, 0.45), (1.5, 0.4), (1.5, 0.6)])
        obstacles = [lower_corner_triangle, upper_corner_triangle, spike]
        assert not square.extend(0.1, obstacles, (0.0, 0.0), 5.0, 1.0)
        assert square.vertex_count() == 4
        assert square.enabled_edges() == []
        assert _flat(square) == pytest.approx([0, 0, 1, 0, 1, 1, 0, 1])


class TestContractViolation:
    def test_outline_not_crossed_stops_growth(self, square):
        with pytest.raises(ContractViolationError):
            square.extend(0.1, [_OutlineFarAway()], ORIGIN, SIZE, SIZE)

    def test_is_a_growth_error(self, square):
        with pytest.raises(GrowthError):
            square.grow(0.1, [_OutlineFarAway()], Bounds(ORIGIN, SIZE, SIZE))


class TestFlushEdges:
    def test_edge_along_the_obstacle_edge_is_not_split(self):
        # edge 2 lies on x + y = 2
        polygon = ExtendableConvexPolygon([(0, 0), (1.5, 0), (1.5, 0.5), (0.5, 1.5), (0, 1.5)])
        assert polygon._plan_adjustment(2, Segment((2.0, 0.0), (0.0, 2.0))) is None
        assert polygon._plan_adjustment(3, Segment((2.0, 0.0), (0.0, 2.0))) is None

    def test_crossing_edges_are_split(self, square):
        plan = square._plan_adjustment(2, Segment((0.8, 1.15), (1.15, 0.8)))
        assert plan.vertex == 2
        assert plan.after == pytest.approx((-ROOT_HALF, ROOT_HALF))
        assert plan.before == pytest.approx((ROOT_HALF, -ROOT_HALF))
