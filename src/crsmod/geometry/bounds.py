"""Axis-aligned bounding boxes.

A BoundingBox is the extent a map layer asks for when it needs to know where
a dataset lands after reprojection. ``transformed()`` pushes the box through a
transform's codomain hull, so the result contains the image of every point in
the box that lies in the transform's domain.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

from crsmod.errors import DimensionMismatchError
from crsmod.geometry.point import Point, PointLike, as_point, make_point
from crsmod.protocols import PointTransformer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """N-dimensional axis-aligned box.

    An empty box has ``min_corner`` greater than ``max_corner`` on every axis
    and acts as the neutral element of :meth:`join`.

    Example:
        >>> box = BoundingBox((0.0, 0.0), (10.0, 5.0))
        >>> box.contains((3.0, 4.0))
        True
    """

    min_corner: tuple[float, ...]
    max_corner: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.min_corner) != len(self.max_corner):
            raise DimensionMismatchError(
                f"Corner dimensions differ: {len(self.min_corner)} vs {len(self.max_corner)}"
            )
        object.__setattr__(self, "min_corner", tuple(float(v) for v in self.min_corner))
        object.__setattr__(self, "max_corner", tuple(float(v) for v in self.max_corner))

    # Factory methods

    @classmethod
    def empty(cls, dimension: int = 2) -> BoundingBox:
        """Create an empty box of the given dimension."""
        return cls((np.inf,) * dimension, (-np.inf,) * dimension)

    @classmethod
    def from_points(cls, points: Iterable[PointLike] | np.ndarray) -> BoundingBox:
        """Smallest box containing all points.

        :param points: Points or an [N, D] array
        :raises ValueError: If no points are given
        """
        if isinstance(points, np.ndarray):
            arr = points
        else:
            arr = np.array([as_point(p).ordinates for p in points], dtype=np.float64)
        if arr.size == 0:
            raise ValueError("Cannot build a bounding box from zero points")
        if arr.ndim != 2:
            raise DimensionMismatchError(f"Points must be [N, D], got shape {arr.shape}")
        return cls(tuple(arr.min(axis=0).tolist()), tuple(arr.max(axis=0).tolist()))

    @classmethod
    def from_ordinates(cls, ordinates: Sequence[float], dimension: int) -> BoundingBox:
        """Box around packed ordinates ``(x0, y0, x1, y1, ...)``."""
        if len(ordinates) % dimension != 0:
            raise DimensionMismatchError(
                f"{len(ordinates)} ordinates is not a multiple of dimension {dimension}"
            )
        if not ordinates:
            return cls.empty(dimension)
        return cls.from_points(np.asarray(ordinates, dtype=np.float64).reshape(-1, dimension))

    # Properties

    @property
    def dimension(self) -> int:
        return len(self.min_corner)

    @property
    def is_empty(self) -> bool:
        return any(lo > hi for lo, hi in zip(self.min_corner, self.max_corner, strict=True))

    @property
    def min(self) -> Point:
        return make_point(self.min_corner)

    @property
    def max(self) -> Point:
        return make_point(self.max_corner)

    @property
    def width(self) -> float:
        return self.max_corner[0] - self.min_corner[0]

    @property
    def height(self) -> float:
        return self.max_corner[1] - self.min_corner[1]

    @property
    def center(self) -> Point:
        return make_point(
            [(lo + hi) / 2 for lo, hi in zip(self.min_corner, self.max_corner, strict=True)]
        )

    # Predicates

    def contains(self, other: PointLike | BoundingBox, tolerance: float = 0.0) -> bool:
        """Check whether a point or box lies inside (boundary inclusive).

        :param other: Point or BoundingBox
        :param tolerance: Slack added on every side
        """
        if self.is_empty:
            return False
        if isinstance(other, BoundingBox):
            if other.is_empty:
                return False
            self._check_dimension(other.dimension)
            return all(
                lo - tolerance <= olo and ohi <= hi + tolerance
                for lo, hi, olo, ohi in zip(
                    self.min_corner, self.max_corner, other.min_corner, other.max_corner, strict=True
                )
            )
        p = as_point(other)
        self._check_dimension(p.dimension)
        return all(
            lo - tolerance <= v <= hi + tolerance
            for lo, hi, v in zip(self.min_corner, self.max_corner, p.ordinates, strict=True)
        )

    def intersects(self, other: BoundingBox) -> bool:
        """Check whether two boxes share at least one point."""
        if self.is_empty or other.is_empty:
            return False
        self._check_dimension(other.dimension)
        return all(
            lo <= ohi and olo <= hi
            for lo, hi, olo, ohi in zip(
                self.min_corner, self.max_corner, other.min_corner, other.max_corner, strict=True
            )
        )

    # Combinators

    def join(self, other: BoundingBox) -> BoundingBox:
        """Smallest box containing both boxes."""
        self._check_dimension(other.dimension)
        return BoundingBox(
            tuple(min(a, b) for a, b in zip(self.min_corner, other.min_corner, strict=True)),
            tuple(max(a, b) for a, b in zip(self.max_corner, other.max_corner, strict=True)),
        )

    def grow(self, amount: float) -> BoundingBox:
        """Expand every side by ``amount`` (negative shrinks)."""
        if self.is_empty:
            return self
        return BoundingBox(
            tuple(v - amount for v in self.min_corner),
            tuple(v + amount for v in self.max_corner),
        )

    def corners(self) -> np.ndarray:
        """All 2**D corners as a [2**D, D] array."""
        if self.is_empty:
            return np.empty((0, self.dimension), dtype=np.float64)
        axes = list(zip(self.min_corner, self.max_corner, strict=True))
        return np.array(list(itertools.product(*axes)), dtype=np.float64)

    def to_ordinates(self) -> list[float]:
        """Corners as packed ordinates, ready for convex hull operations."""
        return self.corners().ravel().tolist()

    def transformed(self, transformer: PointTransformer) -> BoundingBox:
        """Extent of this box after mapping through a transform.

        Uses the transform's codomain convex hull, so the result contains the
        image of the part of the box inside the transform's domain.

        :param transformer: Anything implementing PointTransformer
        :returns: Box in target space (empty if the box misses the domain)
        """
        self._check_dimension(transformer.dim_source)
        hull = transformer.get_codomain_convex_hull(self.to_ordinates())
        result = BoundingBox.from_ordinates(hull, transformer.dim_target)
        logger.debug("[BoundingBox] %s -> %s via %d hull ordinates", self, result, len(hull))
        return result

    def _check_dimension(self, dimension: int) -> None:
        if dimension != self.dimension:
            raise DimensionMismatchError(
                f"BoundingBox is {self.dimension}D, got {dimension}D operand"
            )
