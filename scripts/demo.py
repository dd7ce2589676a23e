#!/usr/bin/env python3
"""Demo: seed a walled room with square regions and grow them to a fixpoint.

Produces a PNG of the grown regions and prints a short report.

Usage:
    python scripts/demo.py                           # default output
    python scripts/demo.py --step 0.25 --spacing 3   # customise
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from polygrow import (
    Bounds,
    GrowthConfig,
    PolygonObstacle,
    grow_regions,
    region_report,
    render_png,
    seed_grid,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Convex region growth demo")
    parser.add_argument("--step", type=float, default=0.5, help="Growth step (default: 0.5)")
    parser.add_argument("--spacing", type=float, default=5.0, help="Seed spacing (default: 5)")
    parser.add_argument("--out", type=str, default="exports/regions.png", help="Output PNG path")
    parser.add_argument("--dpi", type=int, default=150, help="Output DPI (default: 150)")
    args = parser.parse_args()

    bounds = Bounds((0.0, 0.0), 30.0, 20.0)
    obstacles = [
        PolygonObstacle.rectangle(9.0, 0.0, 1.0, 12.0),
        PolygonObstacle.rectangle(20.0, 8.0, 1.0, 12.0),
        PolygonObstacle.from_points([(13.0, 14.0), (17.0, 13.0), (15.5, 17.5)]),
    ]
    config = GrowthConfig(step=args.step, seed_spacing=args.spacing, seed_size=1.0)

    seeds = seed_grid(bounds, obstacles, config.seed_spacing, config.seed_size)
    print(f"Growing {len(seeds)} seeds …")
    result = grow_regions(seeds, obstacles, bounds, config)

    report = region_report(result.regions, obstacles, bounds)
    print(f"  {result.iterations} iterations, converged: {result.converged}")
    print(f"  coverage: {report['coverage']:.1%}")
    for error in report["errors"]:
        print(f"  ✗ {error}")

    render_png(result.regions, args.out, obstacles=obstacles, bounds=bounds, dpi=args.dpi)
    print(f"Saved {args.out}")


if __name__ == "__main__":
    main()
