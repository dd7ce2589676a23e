"""Geometry helper functions used across the package.

Points and vectors are plain ``(x, y)`` tuples.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .models import Point, Segment

DEFAULT_TOLERANCE = 1e-12


# ═══════════════════════════════════════════════════════════════════
# Vector arithmetic
# ═══════════════════════════════════════════════════════════════════

def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Point, k: float) -> Point:
    return (v[0] * k, v[1] * k)


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def z_cross(a: Point, b: Point) -> float:
    """Z component of the cross product of two planar vectors."""
    return a[0] * b[1] - a[1] * b[0]


def length(v: Point) -> float:
    return math.hypot(v[0], v[1])


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def normal(v: Point) -> Point:
    """One of the two normals of *v* (rotated a quarter turn counter-clockwise)."""
    return (-v[1], v[0])


def normalized(v: Point) -> Point:
    norm = length(v)
    if norm == 0.0:
        raise ValueError("Cannot normalize a zero vector")
    return (v[0] / norm, v[1] / norm)


def resized(v: Point, new_length: float) -> Point:
    """Return *v* scaled to *new_length*; a negative length flips it."""
    return scale(normalized(v), new_length)


def fuzzy_equals(a: float, b: float, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Equality up to *tolerance*, both relative and absolute.

    Infinities are only equal to themselves and ``nan`` equals nothing.
    """
    return math.isclose(a, b, rel_tol=tolerance, abs_tol=tolerance)


# ═══════════════════════════════════════════════════════════════════
# Segments
# ═══════════════════════════════════════════════════════════════════

def segments_intersect(a: Segment, b: Segment) -> bool:
    """Whether two closed segments share at least one point."""
    def orient(p: Point, q: Point, r: Point) -> float:
        return (q[0] - p[0]) * (r[1] - p[1]) - (q[1] - p[1]) * (r[0] - p[0])

    def on_segment(p: Point, q: Point, r: Point) -> bool:
        return (
            min(p[0], r[0]) <= q[0] <= max(p[0], r[0])
            and min(p[1], r[1]) <= q[1] <= max(p[1], r[1])
        )

    a1, a2 = a.first, a.second
    b1, b2 = b.first, b.second
    o1 = orient(a1, a2, b1)
    o2 = orient(a1, a2, b2)
    o3 = orient(b1, b2, a1)
    o4 = orient(b1, b2, a2)

    if o1 == 0 and on_segment(a1, b1, a2):
        return True
    if o2 == 0 and on_segment(a1, b2, a2):
        return True
    if o3 == 0 and on_segment(b1, a1, b2):
        return True
    if o4 == 0 and on_segment(b1, a2, b2):
        return True

    return (o1 > 0) != (o2 > 0) and (o3 > 0) != (o4 > 0)


def segment_intersection(
    a: Segment,
    b: Segment,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Optional[Point]:
    """Single intersection point of two segments, or ``None``.

    Parallel segments (including collinear overlapping ones) have no
    single intersection point. The segment parameters may overshoot
    the ends by *tolerance* to absorb rounding at shared endpoints.
    """
    r = a.vector
    s = b.vector
    denom = z_cross(r, s)
    if fuzzy_equals(denom, 0.0, tolerance):
        return None
    qp = sub(b.first, a.first)
    t = z_cross(qp, s) / denom
    u = z_cross(qp, r) / denom
    if -tolerance <= t <= 1.0 + tolerance and -tolerance <= u <= 1.0 + tolerance:
        return add(a.first, scale(r, t))
    return None


def point_segment_distance(p: Point, s: Segment) -> float:
    v = s.vector
    squared = dot(v, v)
    if squared == 0.0:
        return distance(p, s.first)
    t = max(0.0, min(1.0, dot(sub(p, s.first), v) / squared))
    return distance(p, add(s.first, scale(v, t)))


def segment_distance(a: Segment, b: Segment) -> float:
    """Shortest distance between two closed segments (0 when they meet)."""
    if segments_intersect(a, b):
        return 0.0
    return min(
        point_segment_distance(a.first, b),
        point_segment_distance(a.second, b),
        point_segment_distance(b.first, a),
        point_segment_distance(b.second, a),
    )


# ═══════════════════════════════════════════════════════════════════
# Polygons (as vertex sequences)
# ═══════════════════════════════════════════════════════════════════

def polygon_edges(points: Sequence[Point]) -> List[Segment]:
    """Closed loop of edges ``(p[i], p[i + 1])``."""
    n = len(points)
    return [Segment(points[i], points[(i + 1) % n]) for i in range(n)]


def signed_area(points: Sequence[Point]) -> float:
    """Shoelace area: positive for counter-clockwise winding."""
    area = 0.0
    n = len(points)
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        area += x1 * y2 - x2 * y1
    return area / 2.0


def centroid(points: Sequence[Point]) -> Point:
    """Area centroid, falling back to the vertex mean for zero-area input."""
    area = signed_area(points)
    n = len(points)
    if area == 0.0:
        return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)
    cx = cy = 0.0
    for i in range(n):
        x1, y1 = points[i]
        x2, y2 = points[(i + 1) % n]
        cross = x1 * y2 - x2 * y1
        cx += (x1 + x2) * cross
        cy += (y1 + y2) * cross
    return (cx / (6.0 * area), cy / (6.0 * area))


def point_in_convex_polygon(
    point: Point,
    points: Sequence[Point],
    tolerance: float = DEFAULT_TOLERANCE,
) -> bool:
    """Containment test for a convex polygon, boundary included.

    Zero-length edges are skipped.
    """
    orientation = 1.0 if signed_area(points) >= 0.0 else -1.0
    for edge in polygon_edges(points):
        edge_length = edge.length
        if edge_length <= tolerance:
            continue
        side = z_cross(edge.vector, sub(point, edge.first)) / edge_length
        if side * orientation < -tolerance:
            return False
    return True
