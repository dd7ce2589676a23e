from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .extendable import ExtendableConvexPolygon
from .models import Bounds
from .obstacles import Obstacle, PolygonObstacle
from .polygon import MutableConvexPolygon


def min_edge_length(polygon: MutableConvexPolygon, skip_degenerate: bool = True) -> float:
    lengths = [
        edge.length
        for edge in polygon.edges()
        if not (skip_degenerate and edge.is_degenerate(polygon.tolerance))
    ]
    return min(lengths) if lengths else 0.0


def has_obstacle_overlap(polygon: MutableConvexPolygon, obstacles: Iterable[Obstacle]) -> bool:
    return any(polygon.intersects(obstacle) for obstacle in obstacles)


def overlapping_region_pairs(regions: Sequence[MutableConvexPolygon]) -> List[tuple[int, int]]:
    """Index pairs of regions whose interiors overlap."""
    frozen = [PolygonObstacle.from_polygon(region) for region in regions]
    pairs: List[tuple[int, int]] = []
    for i, region in enumerate(regions):
        for j in range(i + 1, len(regions)):
            if region.intersects(frozen[j]):
                pairs.append((i, j))
    return pairs


def coverage_ratio(regions: Iterable[MutableConvexPolygon], bounds: Bounds) -> float:
    """Summed region area over the bounds' area (1.0 when disjoint regions tile the bounds)."""
    if bounds.area <= 0.0:
        return 0.0
    return sum(region.area() for region in regions) / bounds.area


def validate_regions(
    regions: Sequence[MutableConvexPolygon],
    obstacles: Iterable[Obstacle] = (),
    bounds: Optional[Bounds] = None,
) -> list[str]:
    """Collect every invariant violation across a set of grown regions."""
    obstacles = list(obstacles)
    errors: list[str] = []
    for i, region in enumerate(regions):
        errors.extend(f"Region {i}: {error}" for error in region.validate())
        if has_obstacle_overlap(region, obstacles):
            errors.append(f"Region {i} overlaps an obstacle")
        if bounds is not None and not all(bounds.contains_point(v) for v in region.vertices):
            errors.append(f"Region {i} leaves the bounds")
    for i, j in overlapping_region_pairs(regions):
        errors.append(f"Regions {i} and {j} overlap")
    return errors


def region_report(
    regions: Sequence[MutableConvexPolygon],
    obstacles: Iterable[Obstacle] = (),
    bounds: Optional[Bounds] = None,
) -> Dict[str, object]:
    """Build a structured growth report suitable for JSON export."""
    obstacles = list(obstacles)
    region_payload = []
    for region in regions:
        entry: Dict[str, object] = {
            "vertices": region.vertex_count(),
            "area": region.area(),
            "min_edge_length": min_edge_length(region),
        }
        if isinstance(region, ExtendableConvexPolygon):
            entry["enabled_edges"] = len(region.enabled_edges())
        region_payload.append(entry)

    report: Dict[str, object] = {
        "region_count": len(regions),
        "total_area": sum(region.area() for region in regions),
        "errors": validate_regions(regions, obstacles, bounds),
        "regions": region_payload,
    }
    if bounds is not None:
        report["coverage"] = coverage_ratio(regions, bounds)
    return report
