"""Growth configuration.

Usage
-----
>>> from polygrow.config import GrowthConfig, FINE_GROWTH
>>> config = GrowthConfig(step=0.25, max_iterations=500)
"""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import DEFAULT_TOLERANCE


# ═══════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class GrowthConfig:
    """All tuneable parameters of a growth run.

    Attributes
    ----------
    step : float
        Outward displacement of an edge per ``extend`` call.
    tolerance : float
        Epsilon for fuzzy slope comparisons, degenerate-edge detection
        and boundary-inclusive containment.
    max_iterations : int
        Upper bound on ``extend`` rounds; growth stops earlier at the
        fixpoint.
    seed_spacing : float
        Distance between seed centres when seeding a bounding area.
    seed_size : float
        Side of each square seed. Must be smaller than *seed_spacing*
        so that neighbouring seeds start disjoint.
    """

    step: float = 1.0
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = 10_000
    seed_spacing: float = 4.0
    seed_size: float = 1.0

    def __post_init__(self) -> None:
        if self.step <= 0.0:
            raise ValueError("step must be > 0")
        if self.tolerance < 0.0:
            raise ValueError("tolerance must be >= 0")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")
        if not 0.0 < self.seed_size < self.seed_spacing:
            raise ValueError("seed_size must be > 0 and smaller than seed_spacing")


# ═══════════════════════════════════════════════════════════════════
# Preset configs
# ═══════════════════════════════════════════════════════════════════

DEFAULT_GROWTH = GrowthConfig()

FINE_GROWTH = GrowthConfig(
    step=0.1,
    max_iterations=50_000,
    seed_spacing=2.0,
    seed_size=0.5,
)

COARSE_GROWTH = GrowthConfig(
    step=2.0,
    max_iterations=2_000,
    seed_spacing=8.0,
    seed_size=2.0,
)
