"""Exceptions raised while growing convex regions.

Rejected moves are not errors: they surface as ``False`` return values
and permanently disable the edge that could not grow.
"""

from __future__ import annotations


class GrowthError(Exception):
    """Base class for growth failures."""


class InvalidGrowthDirectionError(GrowthError, ValueError):
    """A growth direction cannot produce the requested normal displacement.

    Raised when the direction is (nearly) perpendicular to the edge
    normal, so resizing it gives a non-finite length. The edge that
    raised it is disabled; the rest of the iteration carries on.
    """


class ContractViolationError(GrowthError, RuntimeError):
    """An invariant between the polygon, its caches and the obstacles broke.

    Terminates the growth run: the obstacle set is malformed or the
    caches went out of sync with the polygon.
    """
