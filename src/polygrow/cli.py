"""polygrow command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_GROWTH, GrowthConfig
from .errors import GrowthError
from .io import load_regions, load_scenario, save_regions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="polygrow CLI")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log growth progress (-v info, -vv debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    grow = sub.add_parser("grow", help="Grow convex regions in a scenario")
    grow.add_argument("--in", dest="input_path", required=True)
    grow.add_argument("--out", dest="output_path", required=True)
    grow.add_argument("--render-out", dest="render_path")
    grow.add_argument("--report-json", dest="report_path")
    grow.add_argument("--step", type=float, default=DEFAULT_GROWTH.step)
    grow.add_argument("--tolerance", type=float, default=DEFAULT_GROWTH.tolerance)
    grow.add_argument("--max-iterations", type=int, default=DEFAULT_GROWTH.max_iterations)
    grow.add_argument("--seed-spacing", type=float, default=DEFAULT_GROWTH.seed_spacing,
                      help="Grid spacing used when the scenario has no seeds")
    grow.add_argument("--seed-size", type=float, default=DEFAULT_GROWTH.seed_size)

    validate = sub.add_parser("validate", help="Validate grown regions")
    validate.add_argument("--in", dest="input_path", required=True)
    validate.add_argument("--scenario", dest="scenario_path",
                          help="Also check against the scenario's obstacles and bounds")
    validate.add_argument("--tolerance", type=float, default=DEFAULT_GROWTH.tolerance)

    render = sub.add_parser("render", help="Render a scenario and its regions to PNG")
    render.add_argument("--in", dest="input_path", required=True)
    render.add_argument("--regions", dest="regions_path")
    render.add_argument("--out", dest="output_path", required=True)
    render.add_argument("--dpi", type=int, default=150)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "grow":
        _cmd_grow(args, parser)

    elif args.command == "validate":
        _cmd_validate(args)

    elif args.command == "render":
        _cmd_render(args)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _cmd_grow(args, parser: argparse.ArgumentParser) -> None:
    from .diagnostics import region_report
    from .regions import grow_regions, seed_grid

    try:
        config = GrowthConfig(
            step=args.step,
            tolerance=args.tolerance,
            max_iterations=args.max_iterations,
            seed_spacing=args.seed_spacing,
            seed_size=args.seed_size,
        )
    except ValueError as exc:
        parser.error(str(exc))
    scenario = load_scenario(args.input_path, tolerance=config.tolerance)
    seeds = scenario.seeds or seed_grid(
        scenario.bounds,
        scenario.obstacles,
        spacing=config.seed_spacing,
        seed_size=config.seed_size,
        tolerance=config.tolerance,
    )
    try:
        result = grow_regions(seeds, scenario.obstacles, scenario.bounds, config)
    except GrowthError as exc:
        print(f"Growth failed: {exc}")
        raise SystemExit(1)

    save_regions(result.regions, args.output_path)
    print(
        f"Grew {len(result.regions)} regions in {result.iterations} iterations "
        f"(converged={result.converged}); saved {args.output_path}"
    )
    if args.render_path:
        from .render import render_png
        render_png(result.regions, args.render_path,
                   obstacles=scenario.obstacles, bounds=scenario.bounds)
        print(f"Saved {args.render_path}")
    if args.report_path:
        report = region_report(result.regions, scenario.obstacles, scenario.bounds)
        report["iterations"] = result.iterations
        report["converged"] = result.converged
        out = Path(args.report_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Saved {args.report_path}")


def _cmd_validate(args) -> None:
    from .diagnostics import validate_regions

    regions = load_regions(args.input_path, tolerance=args.tolerance)
    obstacles = []
    bounds = None
    if args.scenario_path:
        scenario = load_scenario(args.scenario_path, tolerance=args.tolerance)
        obstacles = scenario.obstacles
        bounds = scenario.bounds
    errors = validate_regions(regions, obstacles, bounds)
    if errors:
        for error in errors:
            print(error)
        raise SystemExit(1)
    print("OK")


def _cmd_render(args) -> None:
    from .render import render_png

    scenario = load_scenario(args.input_path)
    regions = load_regions(args.regions_path) if args.regions_path else scenario.seeds
    render_png(regions, args.output_path,
               obstacles=scenario.obstacles, bounds=scenario.bounds, dpi=args.dpi)
    print(f"Saved {args.output_path}")


if __name__ == "__main__":
    main()
