"""Obstacles a region must not overlap.

The growth engine only needs three capabilities from an obstacle, as
described by :class:`Obstacle`. :class:`PolygonObstacle` implements
them on top of a shapely polygon.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Protocol, Sequence, runtime_checkable

from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon as ShapelyPolygon

from .geometry import polygon_edges
from .models import Point, Segment

if TYPE_CHECKING:
    from .polygon import MutableConvexPolygon


@runtime_checkable
class Obstacle(Protocol):
    """Capability interface of an obstacle shape."""

    def vertices(self) -> List[Point]:
        """Outline vertices, in order, without repeating the first one."""
        ...

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        """Whether *point* lies inside the obstacle, farther than *tolerance* from its outline."""
        ...

    def intersects_polygon(self, points: Sequence[Point], tolerance: float = 0.0) -> bool:
        """Whether the polygon *points* overlaps the obstacle's interior.

        Overlaps thinner than *tolerance* along the polygon outline do
        not count.
        """
        ...


def obstacle_edges(obstacle: Obstacle) -> List[Segment]:
    """Closed loop of outline edges of *obstacle*."""
    return polygon_edges(obstacle.vertices())


class PolygonObstacle:
    """Obstacle backed by a :class:`shapely.geometry.Polygon`.

    Only the exterior ring takes part in the edge-level queries; holes
    still count for containment and overlap.
    """

    def __init__(self, shape: ShapelyPolygon) -> None:
        if shape.is_empty or shape.area <= 0.0:
            raise ValueError("Obstacle shape must have a positive area")
        self.shape = shape
        self._vertices: List[Point] = _dedupe([
            (float(x), float(y)) for x, y in list(shape.exterior.coords)[:-1]
        ])

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "PolygonObstacle":
        return cls(ShapelyPolygon(_dedupe([(float(p[0]), float(p[1])) for p in points])))

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float) -> "PolygonObstacle":
        """Axis-aligned rectangle with lower-left corner ``(x, y)``."""
        return cls.from_points([
            (x, y),
            (x + width, y),
            (x + width, y + height),
            (x, y + height),
        ])

    @classmethod
    def from_polygon(cls, polygon: "MutableConvexPolygon") -> "PolygonObstacle":
        """Freeze the current shape of a (possibly still growing) polygon."""
        return cls.from_points(polygon.vertices)

    def vertices(self) -> List[Point]:
        return list(self._vertices)

    def contains(self, point: Point, tolerance: float = 0.0) -> bool:
        shapely_point = ShapelyPoint(point)
        return (
            self.shape.contains(shapely_point)
            and self.shape.boundary.distance(shapely_point) > tolerance
        )

    def intersects_polygon(self, points: Sequence[Point], tolerance: float = 0.0) -> bool:
        other = ShapelyPolygon(points)
        if not self.shape.intersects(other) or self.shape.touches(other):
            return False
        # slivers left by rounding along a shared boundary
        return self.shape.intersection(other).area > tolerance * other.length

    def to_dict(self) -> dict:
        return {"vertices": [[x, y] for x, y in self._vertices]}

    @classmethod
    def from_dict(cls, payload: dict) -> "PolygonObstacle":
        return cls.from_points(payload["vertices"])

    def __repr__(self) -> str:
        return f"PolygonObstacle({self._vertices!r})"


def _dedupe(points: List[Point]) -> List[Point]:
    """Drop consecutive repeated points, including a closing repeat."""
    result: List[Point] = []
    for point in points:
        if not result or result[-1] != point:
            result.append(point)
    while len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result
