"""Convex polygons that grow outward while avoiding obstacles.

An :class:`ExtendableConvexPolygon` keeps one :class:`EdgeCache` per
edge (outward normal, growth directions of the edge's two vertices,
advance-enabled flag). Every topology change goes through the
overridden mutators below so the cache list always has one entry per
edge, at the same index.

Growth
------
Each call to :meth:`ExtendableConvexPolygon.extend` tries to push every
enabled edge outward by ``step``. A move is kept only when the edge
stays inside the bounding rectangle and no obstacle is overlapped,
except in the *advanced case*: a single polygon vertex poked into an
obstacle through an oblique obstacle edge, and no obstacle vertex got
inside the polygon. The move is then undone, the intruding vertex is
split in two and the two halves are given growth directions running
along the obstacle edge, so that later iterations grow flush with it.
Edges that cannot move are disabled for good.

>>> square = ExtendableConvexPolygon([(0, 0), (1, 0), (1, 1), (0, 1)])
>>> iterations = square.grow(0.5, [], Bounds((-2, -2), 5, 5))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from .errors import ContractViolationError, InvalidGrowthDirectionError
from .geometry import (
    DEFAULT_TOLERANCE,
    add,
    distance,
    dot,
    fuzzy_equals,
    length,
    normal,
    normalized,
    resized,
    segment_distance,
    segment_intersection,
    segments_intersect,
    sub,
    z_cross,
)
from .models import Bounds, EdgeCache, GrowthDirection, Point, Segment
from .obstacles import Obstacle, obstacle_edges
from .polygon import MutableConvexPolygon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Adjustment:
    """Vertex split planned for one obstacle in the advanced case.

    *vertex* is the index of the intruding vertex. *after* becomes its
    growth direction on the edge it starts; *before* is given to the
    duplicate inserted in front of it, on the preceding edge.
    """

    vertex: int
    after: Point
    before: Point


class ExtendableConvexPolygon(MutableConvexPolygon):
    """Convex polygon able to grow edge by edge (see module docstring)."""

    def __init__(
        self,
        vertices: Iterable[Sequence[float]],
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        super().__init__(vertices, tolerance)
        self._caches: List[EdgeCache] = [EdgeCache() for _ in self._vertices]

    # ── Cache queries ───────────────────────────────────────────────

    @property
    def caches(self) -> tuple[EdgeCache, ...]:
        return tuple(self._caches)

    def can_advance(self, index: int) -> bool:
        return self._caches[self._checked(index)].can_advance

    def growth_direction(self, index: int) -> GrowthDirection:
        return self._caches[self._checked(index)].growth

    def normal(self, index: int) -> Optional[Point]:
        return self._caches[self._checked(index)].normal

    def enabled_edges(self) -> List[int]:
        return [i for i, cache in enumerate(self._caches) if cache.can_advance]

    # ── Topology changes, with cache bookkeeping ────────────────────

    def add_vertex(self, index: int, x: float, y: float) -> bool:
        if not 0 <= index <= self.vertex_count():
            raise IndexError(f"Vertex index {index} out of range")
        old_edge = self.get_edge(self.circular_previous(index))
        if super().add_vertex(index, x, y):
            self._add_cache_at(index)
            self._void_cache_at(self.circular_previous(index), old_edge)
            return True
        return False

    def remove_vertex(self, index: int) -> bool:
        old_edge = self.get_edge(self.circular_previous(self._checked(index)))
        if super().remove_vertex(index):
            self._remove_cache_at(index)
            self._void_cache_at(self.circular_previous(index), old_edge)
            return True
        return False

    def move_vertex(self, index: int, x: float, y: float) -> bool:
        modified = self._edges_around(index, (self.circular_previous(index), index))
        if super().move_vertex(index, x, y):
            for i, old_edge in modified:
                self._void_cache_at(i, old_edge)
            return True
        return False

    def move_edge(self, index: int, new_edge: Segment) -> bool:
        modified = self._edges_around(
            index,
            (self.circular_previous(index), index, self.circular_next(index)),
        )
        if super().move_edge(index, new_edge):
            for i, old_edge in modified:
                self._void_cache_at(i, old_edge)
            return True
        return False

    def mutate_to(self, other: MutableConvexPolygon) -> None:
        super().mutate_to(other)
        self._caches = [EdgeCache() for _ in self._vertices]

    # ── Growth ──────────────────────────────────────────────────────

    def advance_edge(self, index: int, step: float) -> bool:
        """Translate edge *index* by *step* along its outward normal.

        The two vertices move along their own growth directions, each
        resized so that its component along the normal equals *step*;
        the advanced edge is therefore parallel to the old one even
        when the directions differ. A negative *step* undoes a previous
        advance. Returns ``False`` for a degenerate edge or when the
        move would break convexity.
        """
        if step == 0.0:
            return True
        edge = self.get_edge(index)
        if edge.is_degenerate(self.tolerance):
            return False

        cache = self._caches[index]
        edge_normal = cache.normal if cache.normal is not None else self._compute_normal(index)
        growth = cache.growth.filled(edge_normal)
        self._caches[index] = replace(cache, normal=edge_normal, growth=growth)

        first_length = _growth_length(growth.first, edge_normal, step)
        second_length = _growth_length(growth.second, edge_normal, step)
        if not (math.isfinite(first_length) and math.isfinite(second_length)):
            raise InvalidGrowthDirectionError(
                f"Growth directions of edge {index} cannot advance it along {edge_normal}"
            )
        advanced = Segment(
            add(edge.first, resized(growth.first, first_length)),
            add(edge.second, resized(growth.second, second_length)),
        )
        # the base move keeps the caches: the slope is unchanged
        return MutableConvexPolygon.move_edge(self, index, advanced)

    def extend(
        self,
        step: float,
        obstacles: Iterable[Obstacle],
        origin: Point,
        width: float,
        height: float,
    ) -> bool:
        """Run one growth iteration over the currently enabled edges.

        Returns whether anything changed; call repeatedly until it
        returns ``False`` to reach the largest region.
        """
        bounds = Bounds(origin, width, height)
        obstacles = list(obstacles)
        extended = False
        for i in self.enabled_edges():
            old_edge = self.get_edge(i)
            has_advanced = self._try_advance(i, step)
            plans = None
            if has_advanced and bounds.contains_segment(self.get_edge(i)):
                intersected = [obstacle for obstacle in obstacles if self.intersects(obstacle)]
                plans = self._plan_growth(intersected, i, step)
            if plans is None:
                if has_advanced:
                    self._undo_advance(i, old_edge)
                self._disable(i)
                continue
            if plans:
                self._adjust_growth(plans, i, old_edge)
            extended = True
        return extended

    def grow(
        self,
        step: float,
        obstacles: Iterable[Obstacle],
        bounds: Bounds,
        max_iterations: int = 10_000,
    ) -> int:
        """Extend until the fixpoint or *max_iterations*; return the rounds that extended."""
        obstacles = list(obstacles)
        iterations = 0
        while iterations < max_iterations and self.extend(
            step, obstacles, bounds.origin, bounds.width, bounds.height
        ):
            iterations += 1
        logger.debug(
            "Grown to %d vertices after %d iterations (%d edges still enabled)",
            self.vertex_count(), iterations, len(self.enabled_edges()),
        )
        return iterations

    # ── Validation / serialisation ──────────────────────────────────

    def validate(self) -> list[str]:
        errors = super().validate()
        if len(self._caches) != self.vertex_count():
            errors.append(
                f"Polygon has {len(self._caches)} edge caches but {self.vertex_count()} edges"
            )
        return errors

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["can_advance"] = [cache.can_advance for cache in self._caches]
        return data

    # ── Cache maintenance ───────────────────────────────────────────

    def _add_cache_at(self, index: int) -> None:
        self._caches.insert(index, EdgeCache())

    def _remove_cache_at(self, index: int) -> None:
        del self._caches[index]

    def _void_cache_at(self, index: int, old_edge: Segment) -> None:
        """Re-enable edge *index*, dropping direction caches if its slope changed."""
        new_edge = self.get_edge(index)
        slope_changed = not fuzzy_equals(old_edge.slope, new_edge.slope, self.tolerance)
        degenerate = old_edge.is_degenerate(self.tolerance) or new_edge.is_degenerate(self.tolerance)
        if slope_changed and not degenerate:
            self._caches[index] = EdgeCache()
        else:
            self._caches[index] = replace(self._caches[index], can_advance=True)

    def _edges_around(self, index: int, indices: Sequence[int]) -> List[tuple[int, Segment]]:
        self._checked(index)
        return [(i, self.get_edge(i)) for i in dict.fromkeys(indices)]

    def _disable(self, index: int) -> None:
        self._caches[index] = replace(self._caches[index], can_advance=False)
        logger.debug("Edge %d can no longer advance", index)

    def _set_growth(
        self,
        index: int,
        first: Optional[Point] = None,
        second: Optional[Point] = None,
    ) -> None:
        cache = self._caches[index]
        growth = cache.growth
        if first is not None:
            growth = growth.with_first(first)
        if second is not None:
            growth = growth.with_second(second)
        self._caches[index] = replace(cache, growth=growth)

    def _compute_normal(self, index: int) -> Point:
        """Unit normal of edge *index* pointing away from the interior.

        Of the two normals, pick the one on the opposite side of the
        edge from the preceding edge.
        """
        current = self.get_edge(index).vector
        candidate = normalized(normal(current))
        previous = self._reference_vector(index, current)
        if (z_cross(current, candidate) > 0.0) != (z_cross(current, previous) > 0.0):
            return (-candidate[0], -candidate[1])
        return candidate

    def _reference_vector(self, index: int, current: Point) -> Point:
        """Nearest preceding edge vector that is neither degenerate nor collinear."""
        j = index
        for _ in range(self.vertex_count() - 1):
            j = self.circular_previous(j)
            vector = self.get_edge(j).vector
            if abs(z_cross(current, vector)) > self.tolerance * length(current) * length(vector):
                return vector
        raise ContractViolationError(f"Edge {index} has no non-collinear preceding edge")

    # ── Growth internals ────────────────────────────────────────────

    def _try_advance(self, index: int, step: float) -> bool:
        try:
            return self.advance_edge(index, step)
        except InvalidGrowthDirectionError as exc:
            logger.warning("Edge %d not advanced: %s", index, exc)
            return False

    def _undo_advance(self, index: int, old_edge: Segment) -> None:
        # restore the saved coordinates, stepping back by -step drifts
        if not MutableConvexPolygon.move_edge(self, index, old_edge):
            raise ContractViolationError(f"Could not revert the advance of edge {index}")

    def _plan_growth(
        self,
        intersected: Sequence[Obstacle],
        index: int,
        step: float,
    ) -> Optional[List[_Adjustment]]:
        """Vertex splits that grow the advanced edge around *intersected*.

        ``None`` when the overlap cannot be grown around, an empty list
        when nothing is intersected. At most two obstacles are handled,
        each intruded by a different vertex.
        """
        if len(intersected) > 2:
            return None
        edge_slope = self.get_edge(index).slope
        plans = []
        for obstacle in intersected:
            if any(self.contains_boundary_included(v) for v in obstacle.vertices()):
                return None
            inside = [
                j for j, v in enumerate(self._vertices)
                if obstacle.contains(v, self.tolerance)
            ]
            if len(inside) != 1:
                return None
            intruded = self._find_intruded_edge(obstacle, index, inside[0], step)
            if fuzzy_equals(intruded.slope, edge_slope, self.tolerance):
                return None
            plan = self._plan_adjustment(inside[0], intruded)
            if plan is None:
                return None
            plans.append(plan)
        if len({plan.vertex for plan in plans}) != len(plans):
            return None
        return plans

    def _find_intruded_edge(
        self,
        obstacle: Obstacle,
        index: int,
        vertex: int,
        step: float,
    ) -> Segment:
        """Obstacle edge crossed by *vertex* of edge *index* on its way into *obstacle*."""
        cache = self._caches[index]
        if cache.normal is None or not cache.growth.is_complete:
            raise ContractViolationError(f"Edge {index} has no growth direction")
        if vertex == index:
            direction = cache.growth.first
        elif vertex == self.circular_next(index):
            direction = cache.growth.second
        else:
            raise ContractViolationError(
                f"Vertex {vertex} intruding the obstacle is not on edge {index}"
            )

        position = self._vertices[vertex]
        displacement = resized(direction, _growth_length(direction, cache.normal, step))
        movement = Segment(sub(position, displacement), position)
        edges = obstacle_edges(obstacle)
        intruded = [e for e in edges if segments_intersect(e, movement)]
        if not intruded:
            # started on the outline, within the tolerance
            intruded = [e for e in edges if segment_distance(e, movement) <= self.tolerance]
        if len(intruded) != 1:
            raise ContractViolationError(
                f"Expected one obstacle edge crossed by edge {index}, found {len(intruded)}"
            )
        return intruded[0]

    def _adjust_growth(self, plans: Sequence[_Adjustment], index: int, old_edge: Segment) -> None:
        """Split the intruding vertices so their halves follow the obstacle edges."""
        # the edge stepped into the obstacles: undo the move, it is
        # retried next iteration along the new directions
        self._undo_advance(index, old_edge)
        for plan in sorted(plans, key=lambda p: p.vertex, reverse=True):
            self._apply_adjustment(plan)

    def _plan_adjustment(self, vertex: int, obstacle_edge: Segment) -> Optional[_Adjustment]:
        """Directions along *obstacle_edge* for the two halves of *vertex*.

        ``None`` when an edge around *vertex* is degenerate or already
        runs along *obstacle_edge*: there is no crossing to split at.
        """
        after_edge = self.get_edge(vertex)
        before_edge = self.get_edge(self.circular_previous(vertex))
        if self._runs_along(after_edge, obstacle_edge) or self._runs_along(before_edge, obstacle_edge):
            return None

        p1 = segment_intersection(after_edge, obstacle_edge, self.tolerance)
        p2 = segment_intersection(before_edge, obstacle_edge, self.tolerance)
        if p1 is None or p2 is None:
            return None
        toward_second = normalized(obstacle_edge.vector)
        toward_first = (-toward_second[0], -toward_second[1])
        if distance(p1, obstacle_edge.first) < distance(p2, obstacle_edge.first):
            return _Adjustment(vertex, after=toward_first, before=toward_second)
        return _Adjustment(vertex, after=toward_second, before=toward_first)

    def _runs_along(self, edge: Segment, other: Segment) -> bool:
        if edge.is_degenerate(self.tolerance):
            return True
        cross = z_cross(edge.vector, other.vector)
        return abs(cross) <= self.tolerance * edge.length * other.length

    def _apply_adjustment(self, plan: _Adjustment) -> None:
        k = plan.vertex
        self._set_growth(k, first=plan.after)
        x, y = self._vertices[k]
        if not self.add_vertex(k, x, y):
            raise ContractViolationError(f"Could not split vertex {k}")
        # the zero-length edge between the two halves only grows through its neighbours
        self._disable(k)
        self._set_growth(self.circular_previous(k), second=plan.before)
        logger.info("Vertex %d split to follow an obstacle edge (%d vertices)", k, self.vertex_count())


def _growth_length(direction: Point, unit_normal: Point, step: float) -> float:
    """Length *direction* must have for its projection on *unit_normal* to equal *step*."""
    projection = dot(direction, unit_normal)
    if projection == 0.0:
        return math.inf
    return step / projection
