from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Segment:
    first: Point
    second: Point

    @property
    def vector(self) -> Point:
        return (self.second[0] - self.first[0], self.second[1] - self.first[1])

    @property
    def length(self) -> float:
        dx, dy = self.vector
        return math.hypot(dx, dy)

    @property
    def slope(self) -> float:
        """dy/dx of the supporting line.

        Vertical segments report ``math.inf`` regardless of their
        direction, degenerate ones ``nan``.
        """
        dx, dy = self.vector
        if dx == 0.0:
            return math.nan if dy == 0.0 else math.inf
        return dy / dx

    @property
    def midpoint(self) -> Point:
        return (
            (self.first[0] + self.second[0]) / 2.0,
            (self.first[1] + self.second[1]) / 2.0,
        )

    def is_degenerate(self, tolerance: float = 0.0) -> bool:
        return self.length <= tolerance


@dataclass(frozen=True)
class GrowthDirection:
    """Growth directions of the two vertices of an edge.

    Either slot may be empty. Empty slots fall back to the edge normal
    the next time the edge advances; slots that are already set are
    never overwritten by that fallback.
    """

    first: Optional[Point] = None
    second: Optional[Point] = None

    @property
    def is_complete(self) -> bool:
        return self.first is not None and self.second is not None

    def with_first(self, direction: Point) -> "GrowthDirection":
        return replace(self, first=direction)

    def with_second(self, direction: Point) -> "GrowthDirection":
        return replace(self, second=direction)

    def filled(self, default: Point) -> "GrowthDirection":
        return GrowthDirection(
            first=self.first if self.first is not None else default,
            second=self.second if self.second is not None else default,
        )


@dataclass(frozen=True)
class EdgeCache:
    """Per-edge state of an extendable polygon, index-aligned with its edges."""

    can_advance: bool = True
    growth: GrowthDirection = field(default_factory=GrowthDirection)
    normal: Optional[Point] = None


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle ``[origin, origin + (width, height)]``."""

    origin: Point
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.origin[0] + self.width

    @property
    def max_y(self) -> float:
        return self.origin[1] + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains_point(self, point: Point) -> bool:
        x, y = point
        return self.origin[0] <= x <= self.max_x and self.origin[1] <= y <= self.max_y

    def contains_segment(self, segment: Segment) -> bool:
        return self.contains_point(segment.first) and self.contains_point(segment.second)

    def corners(self) -> tuple[Point, Point, Point, Point]:
        x0, y0 = self.origin
        return ((x0, y0), (self.max_x, y0), (self.max_x, self.max_y), (x0, self.max_y))

    def to_dict(self) -> dict:
        return {
            "origin": [self.origin[0], self.origin[1]],
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Bounds":
        ox, oy = payload.get("origin", (0.0, 0.0))
        return cls((float(ox), float(oy)), float(payload["width"]), float(payload["height"]))
