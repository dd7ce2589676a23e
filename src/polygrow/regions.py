"""Seeding a bounding area and growing many regions at once.

Seeds are small squares laid on a regular grid over the bounds; those
overlapping an obstacle are dropped. All seeds then grow together: in
each round every still-growing region gets one ``extend`` call, seeing
the static obstacles plus a frozen copy of every other region, so the
grown regions never overlap each other either.

Usage
-----
>>> from polygrow.models import Bounds
>>> from polygrow.obstacles import PolygonObstacle
>>> from polygrow.regions import seed_grid, grow_regions
>>> bounds = Bounds((0.0, 0.0), 20.0, 10.0)
>>> obstacles = [PolygonObstacle.rectangle(8.0, 2.0, 3.0, 5.0)]
>>> seeds = seed_grid(bounds, obstacles, spacing=4.0, seed_size=1.0)
>>> result = grow_regions(seeds, obstacles, bounds)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np

from .config import DEFAULT_GROWTH, GrowthConfig
from .extendable import ExtendableConvexPolygon
from .geometry import DEFAULT_TOLERANCE
from .models import Bounds, Point
from .obstacles import Obstacle, PolygonObstacle

logger = logging.getLogger(__name__)


@dataclass
class GrowthResult:
    """Outcome of a growth run.

    Attributes
    ----------
    regions : list of ExtendableConvexPolygon
        The grown polygons, in seed order.
    iterations : int
        Number of rounds in which at least one region extended.
    converged : bool
        Whether every region reached its fixpoint before the iteration
        budget ran out.
    """

    regions: List[ExtendableConvexPolygon] = field(default_factory=list)
    iterations: int = 0
    converged: bool = True

    @property
    def total_area(self) -> float:
        return sum(region.area() for region in self.regions)


def square_seed(
    center: Point,
    size: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> ExtendableConvexPolygon:
    """Axis-aligned square of side *size* centred on *center*, wound counter-clockwise."""
    if size <= 0.0:
        raise ValueError("size must be > 0")
    cx, cy = center
    half = size / 2.0
    return ExtendableConvexPolygon(
        [
            (cx - half, cy - half),
            (cx + half, cy - half),
            (cx + half, cy + half),
            (cx - half, cy + half),
        ],
        tolerance=tolerance,
    )


def seed_grid(
    bounds: Bounds,
    obstacles: Iterable[Obstacle],
    spacing: float,
    seed_size: float,
    tolerance: float = DEFAULT_TOLERANCE,
) -> List[ExtendableConvexPolygon]:
    """Square seeds centred on a grid of cells of side *spacing*.

    Cells start at the bounds' origin; seeds leaving the bounds or
    overlapping an obstacle are skipped. Seeds are returned row by row,
    bottom row first.
    """
    if spacing <= 0.0:
        raise ValueError("spacing must be > 0")
    if not 0.0 < seed_size < spacing:
        raise ValueError("seed_size must be > 0 and smaller than spacing")

    obstacles = list(obstacles)
    xs = np.arange(bounds.origin[0] + spacing / 2.0, bounds.max_x, spacing)
    ys = np.arange(bounds.origin[1] + spacing / 2.0, bounds.max_y, spacing)

    seeds: List[ExtendableConvexPolygon] = []
    for y in ys:
        for x in xs:
            seed = square_seed((float(x), float(y)), seed_size, tolerance)
            if not all(bounds.contains_point(v) for v in seed.vertices):
                continue
            if any(seed.intersects(obstacle) for obstacle in obstacles):
                continue
            seeds.append(seed)
    logger.debug("Placed %d seeds on a %dx%d grid", len(seeds), len(xs), len(ys))
    return seeds


def grow_region(
    polygon: ExtendableConvexPolygon,
    obstacles: Iterable[Obstacle],
    bounds: Bounds,
    config: GrowthConfig = DEFAULT_GROWTH,
) -> GrowthResult:
    """Grow a single polygon in place until its fixpoint.

    Only ``config.step`` and ``config.max_iterations`` are read here.
    The polygon keeps the tolerance it was built with; pass
    ``config.tolerance`` to :func:`square_seed` or :func:`seed_grid`
    to have it apply.
    """
    iterations = polygon.grow(config.step, obstacles, bounds, config.max_iterations)
    return GrowthResult(
        regions=[polygon],
        iterations=iterations,
        converged=iterations < config.max_iterations,
    )


def grow_regions(
    seeds: Sequence[ExtendableConvexPolygon],
    obstacles: Iterable[Obstacle],
    bounds: Bounds,
    config: GrowthConfig = DEFAULT_GROWTH,
) -> GrowthResult:
    """Grow all *seeds* in place, each treating the others as obstacles.

    As in :func:`grow_region`, each seed keeps its own tolerance and
    ``config.tolerance`` is not read.
    """
    regions = list(seeds)
    obstacles = list(obstacles)
    active = list(range(len(regions)))
    iterations = 0

    while active and iterations < config.max_iterations:
        active = [i for i in active if _extend_once(regions, i, obstacles, bounds, config)]
        if active:
            iterations += 1

    result = GrowthResult(regions=regions, iterations=iterations, converged=not active)
    logger.info(
        "Grew %d regions in %d rounds (converged=%s, area=%.3f)",
        len(regions), iterations, result.converged, result.total_area,
    )
    return result


def _extend_once(
    regions: Sequence[ExtendableConvexPolygon],
    index: int,
    obstacles: List[Obstacle],
    bounds: Bounds,
    config: GrowthConfig,
) -> bool:
    others = [
        PolygonObstacle.from_polygon(region)
        for j, region in enumerate(regions)
        if j != index
    ]
    return regions[index].extend(
        config.step, obstacles + others, bounds.origin, bounds.width, bounds.height
    )
