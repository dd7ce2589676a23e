from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Iterable, List, Sequence

from .geometry import (
    DEFAULT_TOLERANCE,
    centroid,
    dot,
    length,
    point_in_convex_polygon,
    polygon_edges,
    signed_area,
    z_cross,
)
from .models import Point, Segment

if TYPE_CHECKING:
    from .obstacles import Obstacle


class MutableConvexPolygon:
    """Ordered cyclic vertex list that stays convex under every edit.

    Edge *i* joins vertex *i* to vertex *i + 1* (modulo the vertex
    count). Every mutator returns ``False`` and leaves the polygon
    untouched when the edit would break convexity. Zero-length edges
    are tolerated and ignored by the convexity test.
    """

    VERSION = "1.0"

    def __init__(
        self,
        vertices: Iterable[Sequence[float]],
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> None:
        self.tolerance = tolerance
        self._vertices: List[Point] = [(float(x), float(y)) for x, y in vertices]
        if not self.is_convex():
            raise ValueError("Given vertices do not represent a convex polygon")

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def vertices(self) -> tuple[Point, ...]:
        return tuple(self._vertices)

    def vertex_count(self) -> int:
        return len(self._vertices)

    def get_vertex(self, index: int) -> Point:
        return self._vertices[self._checked(index)]

    def get_edge(self, index: int) -> Segment:
        index = self._checked(index)
        return Segment(self._vertices[index], self._vertices[self.circular_next(index)])

    def edges(self) -> List[Segment]:
        return polygon_edges(self._vertices)

    def circular_next(self, index: int) -> int:
        return (index + 1) % len(self._vertices)

    def circular_previous(self, index: int) -> int:
        return (index - 1) % len(self._vertices)

    def is_convex(self) -> bool:
        return _is_convex(self._vertices, self.tolerance)

    def contains_boundary_included(self, point: Point) -> bool:
        return point_in_convex_polygon(point, self._vertices, self.tolerance)

    def intersects(self, obstacle: "Obstacle") -> bool:
        """Whether the interiors of this polygon and *obstacle* overlap by more than the tolerance."""
        return obstacle.intersects_polygon(self._vertices, self.tolerance)

    def area(self) -> float:
        return abs(signed_area(self._vertices))

    def centroid(self) -> Point:
        return centroid(self._vertices)

    # ── Mutators ────────────────────────────────────────────────────

    def add_vertex(self, index: int, x: float, y: float) -> bool:
        """Insert a vertex so that it becomes vertex *index*."""
        if not 0 <= index <= len(self._vertices):
            raise IndexError(f"Vertex index {index} out of range")
        self._vertices.insert(index, (float(x), float(y)))
        if self.is_convex():
            return True
        del self._vertices[index]
        return False

    def remove_vertex(self, index: int) -> bool:
        index = self._checked(index)
        if len(self._vertices) <= 3:
            return False
        old = self._vertices.pop(index)
        if self.is_convex():
            return True
        self._vertices.insert(index, old)
        return False

    def move_vertex(self, index: int, x: float, y: float) -> bool:
        index = self._checked(index)
        old = self._vertices[index]
        self._vertices[index] = (float(x), float(y))
        if self.is_convex():
            return True
        self._vertices[index] = old
        return False

    def move_edge(self, index: int, new_edge: Segment) -> bool:
        """Move both vertices of edge *index* to the ends of *new_edge*."""
        index = self._checked(index)
        nxt = self.circular_next(index)
        old_first, old_second = self._vertices[index], self._vertices[nxt]
        self._vertices[index] = new_edge.first
        self._vertices[nxt] = new_edge.second
        if self.is_convex():
            return True
        self._vertices[index] = old_first
        self._vertices[nxt] = old_second
        return False

    def mutate_to(self, other: "MutableConvexPolygon") -> None:
        """Replace the whole shape with a copy of *other*'s vertices."""
        self._vertices = list(other.vertices)

    # ── Validation / serialisation ──────────────────────────────────

    def validate(self) -> list[str]:
        errors: list[str] = []
        if len(self._vertices) < 3:
            errors.append(f"Polygon has {len(self._vertices)} vertices, expected at least 3")
        for i, (x, y) in enumerate(self._vertices):
            if not (math.isfinite(x) and math.isfinite(y)):
                errors.append(f"Vertex {i} has a non-finite position ({x}, {y})")
        if not self.is_convex():
            errors.append("Polygon is not convex")
        return errors

    def to_dict(self) -> dict:
        return {
            "version": self.VERSION,
            "vertices": [[x, y] for x, y in self._vertices],
        }

    @classmethod
    def from_dict(cls, payload: dict, tolerance: float = DEFAULT_TOLERANCE):
        return cls(
            [(vertex[0], vertex[1]) for vertex in payload.get("vertices", [])],
            tolerance=tolerance,
        )

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, json_data: str, tolerance: float = DEFAULT_TOLERANCE):
        return cls.from_dict(json.loads(json_data), tolerance=tolerance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MutableConvexPolygon):
            return NotImplemented
        return self._vertices == list(other.vertices)

    def __hash__(self) -> int:
        return hash(tuple(self._vertices))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._vertices!r})"

    def _checked(self, index: int) -> int:
        if not 0 <= index < len(self._vertices):
            raise IndexError(f"Vertex index {index} out of range")
        return index


# ═══════════════════════════════════════════════════════════════════
# Convexity test
# ═══════════════════════════════════════════════════════════════════

def _is_convex(points: Sequence[Point], tolerance: float) -> bool:
    """Convexity of a vertex loop, ignoring zero-length edges.

    Consecutive edges must all turn the same way (collinear runs are
    allowed, reversals are not) and the turns must add up to exactly
    one revolution, which rules out self-intersecting loops.
    """
    if len(points) < 3:
        return False
    vectors = [e.vector for e in polygon_edges(points) if not e.is_degenerate(tolerance)]
    if len(vectors) < 3:
        return False

    sense = 0
    turning = 0.0
    for i, a in enumerate(vectors):
        b = vectors[(i + 1) % len(vectors)]
        cross = z_cross(a, b)
        if abs(cross) <= tolerance * length(a) * length(b):
            if dot(a, b) < 0.0:
                return False
            continue
        turn = 1 if cross > 0.0 else -1
        if sense == 0:
            sense = turn
        elif turn != sense:
            return False
        turning += math.atan2(cross, dot(a, b))

    return sense != 0 and math.isclose(abs(turning), 2.0 * math.pi, abs_tol=1e-6)
