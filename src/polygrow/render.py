from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from .models import Bounds, Point
from .obstacles import Obstacle
from .polygon import MutableConvexPolygon


def render_png(
    regions: Sequence[MutableConvexPolygon],
    output_path: str | Path,
    obstacles: Iterable[Obstacle] = (),
    bounds: Optional[Bounds] = None,
    region_alpha: float = 0.35,
    region_color: str = "#5aa9e6",
    edge_color: str = "#2b2b2b",
    obstacle_color: str = "#6c6c6c",
    bounds_color: str = "#d1495b",
    vertex_size: float = 6.0,
    padding: float = 0.5,
    dpi: int = 150,
) -> None:
    """Render grown regions and obstacles to PNG.

    Requires matplotlib; imported lazily to keep core package lightweight.
    """
    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Polygon
    except ImportError as exc:  # pragma: no cover - requires optional dep
        raise RuntimeError(
            "matplotlib is required for rendering. Install with `pip install matplotlib`."
        ) from exc

    obstacles = list(obstacles)
    if not regions and not obstacles and bounds is None:
        raise ValueError("Nothing to render.")

    fig, ax = plt.subplots()

    for obstacle in obstacles:
        _draw_outline(ax, obstacle.vertices(), Polygon, obstacle_color, obstacle_color, 0.8)

    for region in regions:
        _draw_outline(ax, region.vertices, Polygon, edge_color, region_color, region_alpha)
        xs, ys = zip(*region.vertices)
        ax.scatter(xs, ys, s=vertex_size, c=edge_color, zorder=3)

    points: list[Point] = [v for region in regions for v in region.vertices]
    points.extend(v for obstacle in obstacles for v in obstacle.vertices())
    if bounds is not None:
        corners = list(bounds.corners())
        xs, ys = zip(*(corners + [corners[0]]))
        ax.plot(xs, ys, color=bounds_color, linewidth=1.0, linestyle=(0, (3, 3)))
        points.extend(corners)

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    ax.set_aspect("equal", "box")
    ax.set_xlim(min(xs) - padding, max(xs) + padding)
    ax.set_ylim(min(ys) - padding, max(ys) + padding)
    ax.axis("off")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight", pad_inches=0)
    plt.close(fig)


def _draw_outline(
    ax,
    points: Sequence[Point],
    polygon_cls,
    edge_color: str,
    face_color: str,
    face_alpha: float,
) -> None:
    if len(points) < 3:
        return
    patch = polygon_cls(list(points), closed=True, facecolor=face_color, alpha=face_alpha)
    ax.add_patch(patch)
    xs, ys = zip(*(list(points) + [points[0]]))
    ax.plot(xs, ys, color=edge_color, linewidth=1.0)
