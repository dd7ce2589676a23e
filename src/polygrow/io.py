"""JSON persistence for scenarios and grown regions.

A scenario file holds the bounding rectangle, the obstacles and,
optionally, explicit seeds::

    {
      "bounds": {"origin": [0, 0], "width": 20, "height": 10},
      "obstacles": [{"vertices": [[8, 2], [11, 2], [11, 7], [8, 7]]}],
      "seeds": [{"vertices": [[1, 1], [2, 1], [2, 2], [1, 2]]}]
    }

A regions file holds the grown polygons under ``"regions"``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Union

from .extendable import ExtendableConvexPolygon
from .geometry import DEFAULT_TOLERANCE
from .models import Bounds
from .obstacles import PolygonObstacle
from .polygon import MutableConvexPolygon


PathLike = Union[str, Path]

REGIONS_VERSION = "1.0"


@dataclass
class Scenario:
    bounds: Bounds
    obstacles: List[PolygonObstacle] = field(default_factory=list)
    seeds: List[ExtendableConvexPolygon] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "bounds": self.bounds.to_dict(),
            "obstacles": [obstacle.to_dict() for obstacle in self.obstacles],
            "seeds": [{"vertices": [[x, y] for x, y in seed.vertices]} for seed in self.seeds],
        }

    @classmethod
    def from_dict(cls, payload: dict, tolerance: float = DEFAULT_TOLERANCE) -> "Scenario":
        if "bounds" not in payload:
            raise ValueError("Scenario is missing 'bounds'")
        return cls(
            bounds=Bounds.from_dict(payload["bounds"]),
            obstacles=[PolygonObstacle.from_dict(o) for o in payload.get("obstacles", [])],
            seeds=[
                ExtendableConvexPolygon.from_dict(s, tolerance=tolerance)
                for s in payload.get("seeds", [])
            ],
        )


def load_scenario(path: PathLike, tolerance: float = DEFAULT_TOLERANCE) -> Scenario:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Scenario.from_dict(data, tolerance=tolerance)


def save_scenario(scenario: Scenario, path: PathLike) -> None:
    _write_json(scenario.to_dict(), path)


def regions_to_dict(regions: Iterable[MutableConvexPolygon]) -> dict:
    return {
        "version": REGIONS_VERSION,
        "regions": [region.to_dict() for region in regions],
    }


def load_regions(path: PathLike, tolerance: float = DEFAULT_TOLERANCE) -> List[ExtendableConvexPolygon]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [
        ExtendableConvexPolygon.from_dict(region, tolerance=tolerance)
        for region in data.get("regions", [])
    ]


def save_regions(regions: Iterable[MutableConvexPolygon], path: PathLike) -> None:
    _write_json(regions_to_dict(regions), path)


def _write_json(payload: dict, path: PathLike) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
