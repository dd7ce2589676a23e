"""PolyGrow — obstacle-aware convex region growth.

Public API is organised into layers:

- **Core** — models, geometry, the convex polygon container
- **Growth** — extendable polygons and their configuration
- **Obstacles** — obstacle capability interface and shapely-backed shapes
- **Regions** — seeding a bounding area and growing many regions
- **I/O** — JSON scenarios and regions
- **Rendering** — visualisation (requires matplotlib)
- **Diagnostics** — validation and reports
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import Point, Segment, GrowthDirection, EdgeCache, Bounds
from .polygon import MutableConvexPolygon
from .errors import GrowthError, InvalidGrowthDirectionError, ContractViolationError

# ── Growth ──────────────────────────────────────────────────────────
from .extendable import ExtendableConvexPolygon
from .config import GrowthConfig, DEFAULT_GROWTH, FINE_GROWTH, COARSE_GROWTH

# ── Obstacles ───────────────────────────────────────────────────────
from .obstacles import Obstacle, PolygonObstacle, obstacle_edges

# ── Regions ─────────────────────────────────────────────────────────
from .regions import GrowthResult, square_seed, seed_grid, grow_region, grow_regions

# ── I/O ─────────────────────────────────────────────────────────────
from .io import Scenario, load_scenario, save_scenario, load_regions, save_regions

# ── Rendering (requires matplotlib) ────────────────────────────────
from .render import render_png

# ── Diagnostics ─────────────────────────────────────────────────────
from .diagnostics import (
    min_edge_length,
    has_obstacle_overlap,
    overlapping_region_pairs,
    coverage_ratio,
    validate_regions,
    region_report,
)

__all__ = [
    # Core
    "Point",
    "Segment",
    "GrowthDirection",
    "EdgeCache",
    "Bounds",
    "MutableConvexPolygon",
    "GrowthError",
    "InvalidGrowthDirectionError",
    "ContractViolationError",
    # Growth
    "ExtendableConvexPolygon",
    "GrowthConfig",
    "DEFAULT_GROWTH",
    "FINE_GROWTH",
    "COARSE_GROWTH",
    # Obstacles
    "Obstacle",
    "PolygonObstacle",
    "obstacle_edges",
    # Regions
    "GrowthResult",
    "square_seed",
    "seed_grid",
    "grow_region",
    "grow_regions",
    # I/O
    "Scenario",
    "load_scenario",
    "save_scenario",
    "load_regions",
    "save_regions",
    # Rendering
    "render_png",
    # Diagnostics
    "min_edge_length",
    "has_obstacle_overlap",
    "overlapping_region_pairs",
    "coverage_ratio",
    "validate_regions",
    "region_report",
]
