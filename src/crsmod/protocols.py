"""
Protocol definitions for crsmod consumers.

Layers that only need to push points and extents through a transform (map
rendering, spatial indexes) depend on these structural interfaces rather than
on the concrete MathTransform hierarchy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from crsmod.geometry.point import Point, PointLike
    from crsmod.transform.domain import DomainFlags


@runtime_checkable
class PointTransformer(Protocol):
    """
    Protocol for anything that maps points between two coordinate spaces.

    MathTransform implements it; the bounding box layer consumes it.
    """

    @property
    def dim_source(self) -> int:
        """Dimension of input points."""
        ...

    @property
    def dim_target(self) -> int:
        """Dimension of output points."""
        ...

    def transform(self, point: PointLike) -> Point:
        """Map one point."""
        ...

    def transform_list(self, points: Sequence[PointLike]) -> list[Point]:
        """Map many points, preserving order."""
        ...

    def get_codomain_convex_hull(self, ordinates: Sequence[float]) -> list[float]:
        """Map a source convex hull (packed ordinates) to a target hull."""
        ...

    def get_domain_flags(self, ordinates: Sequence[float]) -> DomainFlags:
        """Classify a source convex hull against the valid domain."""
        ...
