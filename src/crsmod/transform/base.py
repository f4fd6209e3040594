"""
MathTransform: the contract every coordinate mapping in crsmod implements.

A transform maps points from a ``dim_source`` space to a ``dim_target``
space. Concrete transforms describe their FORWARD direction through a small
set of hooks (``_forward``, ``_reverse``, their array and derivative
variants, and ``_domain_band``); this base class adds direction handling,
validation, batching, inversion bookkeeping, domain classification and hull
propagation on top.

Direction handling:
    ``inverse()`` is non-destructive: it returns a separate, memoized object
    for the opposite direction whose own ``inverse()`` is the original.
    ``invert()`` is destructive: it flips the direction of this instance in
    place and drops the memoized inverse so ``inverse()`` keeps returning the
    opposite direction.

Thread safety:
    Concurrent ``transform*`` calls on one instance are safe. ``invert()``
    is NOT safe while other threads use the same instance; threads that need
    different directions should each use ``inverse()`` instead. Building the
    memoized inverse is guarded by a per-instance lock.
"""

from __future__ import annotations

import copy
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from crsmod.config.config import TRANSFORM_CONFIG
from crsmod.errors import (
    DimensionMismatchError,
    NonInvertibleError,
    NotSupportedError,
    OutOfDomainError,
)
from crsmod.geometry.point import Point, PointLike, as_point, make_point
from crsmod.transform.domain import DomainBand, DomainFlags
from crsmod.transform.hull import (
    array_to_ordinates,
    curvature_margin,
    densify_hull,
    expand_hull,
    ordinates_to_array,
    reduce_to_hull,
)

logger = logging.getLogger(__name__)

# Type aliases
type ArrayLike = np.ndarray | Sequence[Sequence[float]]


class MathTransform(ABC):
    """Invertible, composable mapping between two coordinate spaces.

    Subclasses call ``super().__init__(dim_source, dim_target)`` with the
    dimensions of their forward direction and implement at least
    :meth:`_forward`.
    """

    def __init__(self, dim_source: int, dim_target: int) -> None:
        self._dims = (dim_source, dim_target)
        self._is_inverse = False
        self._inverse: MathTransform | None = None
        self._inverse_lock = threading.Lock()

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def dim_source(self) -> int:
        """Dimension of input points in the current direction."""
        return self._dims[1] if self._is_inverse else self._dims[0]

    @property
    def dim_target(self) -> int:
        """Dimension of output points in the current direction."""
        return self._dims[0] if self._is_inverse else self._dims[1]

    @property
    def is_inverse(self) -> bool:
        """True if this instance currently applies its reverse mapping."""
        return self._is_inverse

    @property
    def is_linear(self) -> bool:
        """True if the mapping is affine (maps hulls to hulls exactly)."""
        return False

    @property
    def is_invertible(self) -> bool:
        return True

    def is_identity(self, tolerance: float | None = None) -> bool:
        """True if the transform provably does not move any point.

        :param tolerance: Largest parameter deviation still counted as identity,
            defaults to the identity_tolerance setting
        """
        return False

    @property
    def wkt(self) -> str:
        raise NotSupportedError(f"{type(self).__name__}: WKT output is not supported")

    @property
    def xml(self) -> str:
        raise NotSupportedError(f"{type(self).__name__}: XML output is not supported")

    # ========================================================================
    # Subclass hooks (forward-direction primitives)
    # ========================================================================

    @abstractmethod
    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        """Map one point in the forward direction."""

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        """Map one point in the reverse direction."""
        raise NonInvertibleError(f"{type(self).__name__} has no reverse mapping")

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        """Map an [N, D] array forward. Must not write into ``points``."""
        mapped = [self._forward(tuple(row)) for row in points.tolist()]
        return np.array(mapped, dtype=np.float64).reshape(-1, self._dims[1])

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        """Map an [N, D] array in reverse. Must not write into ``points``."""
        mapped = [self._reverse(tuple(row)) for row in points.tolist()]
        return np.array(mapped, dtype=np.float64).reshape(-1, self._dims[0])

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        raise NotSupportedError(f"{type(self).__name__} does not provide derivatives")

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        raise NotSupportedError(f"{type(self).__name__} does not provide derivatives")

    def _domain_band(self) -> DomainBand | None:
        """Valid input domain in the CURRENT direction (None = everywhere)."""
        return None

    # ========================================================================
    # Point mapping
    # ========================================================================

    def transform(self, point: PointLike) -> Point:
        """Map one point. The input is never modified.

        :param point: Point, tuple, list or 1D array with ``dim_source`` ordinates
        :returns: New point with ``dim_target`` ordinates
        :raises DimensionMismatchError: If the point has the wrong dimension
        :raises OutOfDomainError: If the point is outside the valid domain
        """
        p = self._check_point(point)
        return make_point(self._map_ordinates(p.ordinates))

    def __call__(self, point: PointLike) -> Point:
        return self.transform(point)

    def transform_list(self, points: Sequence[PointLike]) -> list[Point]:
        """Map many points, preserving order and length.

        Equivalent to ``[self.transform(p) for p in points]``; the first
        invalid element aborts the whole batch.
        """
        return [self.transform(p) for p in points]

    def transform_array(self, points: ArrayLike) -> np.ndarray:
        """Map an [N, dim_source] array to a new [N, dim_target] array.

        Fast path for large batches. Row ``i`` of the result equals
        ``transform(points[i])`` within floating-point rounding.

        :raises DimensionMismatchError: If the array is not [N, dim_source]
        :raises OutOfDomainError: If any row is outside the valid domain
        """
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] != self.dim_source:
            raise self._dimension_error(
                arr.shape[1] if arr.ndim == 2 else None,
                f"{type(self).__name__}: expected [N, {self.dim_source}] array, got shape {arr.shape}"
            )
        if arr.shape[0] == 0:
            return np.empty((0, self.dim_target), dtype=np.float64)
        self._check_domain_array(arr)
        return self._reverse_array(arr) if self._is_inverse else self._forward_array(arr)

    def transform_ordinates(self, ordinates: Sequence[float]) -> list[float]:
        """Map packed ordinates ``(x0, y0, z0, x1, ...)``.

        :raises DimensionMismatchError: If the length is not a multiple of dim_source
        """
        try:
            arr = ordinates_to_array(ordinates, self.dim_source)
        except DimensionMismatchError as exc:
            raise self._dimension_error(None, str(exc)) from exc
        return array_to_ordinates(self.transform_array(arr))

    def _dimension_error(self, found: int | None, message: str) -> Exception:
        """Error for input with ``found`` ordinates per point (None if unknown)."""
        return DimensionMismatchError(message)

    def _check_point(self, point: PointLike) -> Point:
        p = as_point(point)
        if p.dimension != self.dim_source:
            raise self._dimension_error(
                p.dimension,
                f"{type(self).__name__}: expected {self.dim_source}D point, got {p.dimension}D"
            )
        return p

    def _map_ordinates(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        """Domain-check and map validated ordinates in the current direction."""
        band = self._domain_band()
        if band is not None:
            value = ordinates[band.axis]
            if not band.lo <= value <= band.hi:
                raise OutOfDomainError(
                    f"{type(self).__name__}: {band.label} {value} outside [{band.lo}, {band.hi}]"
                )
        if self._is_inverse:
            return self._reverse(ordinates)
        return self._forward(ordinates)

    def _check_domain_array(self, points: np.ndarray) -> None:
        band = self._domain_band()
        if band is None:
            return
        inside = band.mask(points)
        if not inside.all():
            row = int(np.argmin(inside))
            raise OutOfDomainError(
                f"{type(self).__name__}: row {row} has {band.label} "
                f"{points[row, band.axis]} outside [{band.lo}, {band.hi}]"
            )

    # ========================================================================
    # Inversion
    # ========================================================================

    def inverse(self) -> MathTransform:
        """Transform for the opposite direction (built once, then cached).

        :raises NonInvertibleError: If the transform is not one-to-one
        """
        inverse = self._inverse
        if inverse is None:
            with self._inverse_lock:
                if self._inverse is None:
                    self._inverse = self._create_inverse()
                    logger.debug("[%s] Created inverse transform", type(self).__name__)
                inverse = self._inverse
        return inverse

    def _create_inverse(self) -> MathTransform:
        """Shallow copy with the direction flag flipped.

        Parameters are shared with this instance; the copy's memoized
        inverse points back here.
        """
        if not self.is_invertible:
            raise NonInvertibleError(f"{type(self).__name__} is not invertible")
        inverse = copy.copy(self)
        inverse._is_inverse = not self._is_inverse
        inverse._inverse = self
        inverse._inverse_lock = threading.Lock()
        return inverse

    def invert(self) -> None:
        """Flip the direction of this instance in place.

        :raises NonInvertibleError: If the transform is not one-to-one
        """
        if not self.is_invertible:
            raise NonInvertibleError(f"{type(self).__name__} is not invertible")
        with self._inverse_lock:
            self._is_inverse = not self._is_inverse
            cached = self._inverse
            self._inverse = None
        if cached is not None and cached is not self and cached._inverse is self:
            cached._inverse = None
        logger.debug(
            "[%s] Direction flipped to %s",
            type(self).__name__,
            "inverse" if self._is_inverse else "forward",
        )

    # ========================================================================
    # Derivative
    # ========================================================================

    def derivative(self, point: PointLike) -> np.ndarray:
        """Jacobian of the mapping at a point.

        :param point: Point in source space
        :returns: [dim_target, dim_source] matrix; column ``m`` is the output
            displacement per unit change of input ordinate ``m``
        :raises OutOfDomainError: If no derivative exists at the point
        """
        p = self._check_point(point)
        band = self._domain_band()
        if band is not None and not band.lo <= p[band.axis] <= band.hi:
            raise OutOfDomainError(
                f"{type(self).__name__}: derivative undefined outside the domain"
            )
        if self._is_inverse:
            jacobian = self._reverse_derivative(p.ordinates)
        else:
            jacobian = self._forward_derivative(p.ordinates)
        return np.asarray(jacobian, dtype=np.float64)

    # ========================================================================
    # Domain and hull operations
    # ========================================================================

    def get_domain_flags(self, ordinates: Sequence[float]) -> DomainFlags:
        """Classify the convex hull of packed source ordinates.

        :returns: INSIDE if the whole hull is in the valid domain, OUTSIDE if
            none of it is, both flags if it straddles the boundary, and no
            flags for an empty input
        """
        vertices = ordinates_to_array(ordinates, self.dim_source)
        if vertices.shape[0] == 0:
            return DomainFlags(0)
        band = self._domain_band()
        if band is None:
            return DomainFlags.INSIDE
        return band.classify(vertices)

    def get_codomain_convex_hull(
        self, ordinates: Sequence[float], edge_samples: int | None = None
    ) -> list[float]:
        """Map a source convex hull to a target convex hull.

        The result contains the image of the part of the source hull inside
        the valid domain. It may hold a different number of points than the
        input and is not guaranteed to be minimal.

        :param ordinates: Packed source hull vertices
        :param edge_samples: Override for the hull_edge_samples setting
        :returns: Packed target hull vertices (empty if the hull misses the domain)
        """
        vertices = ordinates_to_array(ordinates, self.dim_source)
        if vertices.shape[0] == 0:
            return []

        if self.is_linear:
            return array_to_ordinates(reduce_to_hull(self.transform_array(vertices)))

        samples = TRANSFORM_CONFIG.hull_edge_samples.validate_int(edge_samples)
        solid = self.dim_target > self.dim_source
        segments = densify_hull(vertices, self._domain_band(), samples, solid)
        if not segments:
            return []

        # One batch call, split back per segment for the curvature measure
        splits = np.cumsum([len(segment) for segment in segments])[:-1]
        images = np.split(self.transform_array(np.vstack(segments)), splits)
        margin = curvature_margin(images)
        hull = reduce_to_hull(np.vstack(images))
        if margin > 0.0:
            hull = reduce_to_hull(expand_hull(hull, margin))

        logger.debug(
            "[%s] Hull: %d vertices -> %d segments, margin=%.3g -> %d vertices",
            type(self).__name__,
            vertices.shape[0],
            len(segments),
            margin,
            hull.shape[0],
        )
        return array_to_ordinates(hull)

    def __repr__(self) -> str:
        direction = "inverse" if self._is_inverse else "forward"
        return f"{type(self).__name__}({self.dim_source}D -> {self.dim_target}D, {direction})"
