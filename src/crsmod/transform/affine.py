"""
Affine transforms and the identity.

Affine maps are stored as a homogeneous ``(m+1) x (n+1)`` matrix mapping
``n``-dimensional points to ``m`` dimensions. They are linear in the sense
used by :attr:`MathTransform.is_linear`: hulls map to hulls exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from crsmod.config.config import TRANSFORM_CONFIG
from crsmod.config.values import Wgs84ConversionInfo
from crsmod.errors import DimensionMismatchError, NonInvertibleError
from crsmod.transform.base import ArrayLike, MathTransform

logger = logging.getLogger(__name__)


def _apply_affine_numpy(points: np.ndarray, linear: np.ndarray, offset: np.ndarray) -> np.ndarray:
    """Apply ``points @ linear.T + offset`` to [N, n] points.

    :param points: Input points [N, n]
    :param linear: Linear part [m, n]
    :param offset: Translation [m]
    :return: New array [N, m]
    """
    # BLAS matmul beats a Numba loop for this shape
    return points @ linear.T + offset


class AffineTransform(MathTransform):
    """Affine map given by a homogeneous matrix.

    Accepts either the full ``(m+1, n+1)`` homogeneous matrix (last row
    ``[0, ..., 0, 1]``) or the ``(m, n+1)`` matrix without that row.

    Example:
        >>> shift = AffineTransform.from_translation(10.0, 20.0)
        >>> shift.transform((1.0, 2.0))
        Point2D(11.0, 22.0)
    """

    def __init__(self, matrix: ArrayLike) -> None:
        M = np.array(matrix, dtype=np.float64)
        if M.ndim != 2 or M.shape[0] < 1 or M.shape[1] < 2:
            raise DimensionMismatchError(f"Affine matrix must be 2D with at least 2 columns, got shape {M.shape}")

        n = M.shape[1] - 1
        last_row = np.zeros(n + 1)
        last_row[-1] = 1.0
        if M.shape[0] >= 2 and np.array_equal(M[-1], last_row):
            M = M[:-1]
        m = M.shape[0]

        super().__init__(n, m)
        self._linear = np.ascontiguousarray(M[:, :n])
        self._offset = np.ascontiguousarray(M[:, n])
        self._linear_inv: np.ndarray | None = None
        self._offset_inv: np.ndarray | None = None
        if m == n:
            det = np.linalg.det(self._linear)
            if det != 0.0 and np.isfinite(det):
                self._linear_inv = np.linalg.inv(self._linear)
                self._offset_inv = -self._linear_inv @ self._offset
        logger.debug("[AffineTransform] Created %dD -> %dD", n, m)

    # ========================================================================
    # Factories
    # ========================================================================

    @classmethod
    def from_translation(cls, *offsets: float) -> AffineTransform:
        """Translation by the given offsets (one per axis)."""
        n = len(offsets)
        if n == 0:
            raise DimensionMismatchError("from_translation needs at least one offset")
        M = np.eye(n + 1)
        M[:n, n] = offsets
        return cls(M)

    @classmethod
    def from_scale(cls, factor: float | Sequence[float], dimension: int | None = None) -> AffineTransform:
        """Scale about the origin.

        :param factor: Uniform factor (with ``dimension``) or one factor per axis
        :param dimension: Number of axes for a uniform factor (default 3)
        """
        if isinstance(factor, int | float):
            factors = [float(factor)] * (dimension if dimension is not None else 3)
        else:
            factors = [float(f) for f in factor]
            if dimension is not None and len(factors) != dimension:
                raise DimensionMismatchError(f"Expected {dimension} scale factors, got {len(factors)}")
        n = len(factors)
        M = np.eye(n + 1)
        M[np.arange(n), np.arange(n)] = factors
        return cls(M)

    @classmethod
    def from_helmert(cls, to_wgs84: Wgs84ConversionInfo) -> AffineTransform:
        """Exact matrix form of a Bursa-Wolf shift."""
        return cls(to_wgs84.to_matrix())

    @classmethod
    def select_axes(cls, dim_source: int, axes: Sequence[int]) -> AffineTransform:
        """Keep (and reorder) the given source axes, e.g. drop heights.

        Example:
            >>> AffineTransform.select_axes(3, [0, 1]).transform((1.0, 2.0, 3.0))
            Point2D(1.0, 2.0)
        """
        for axis in axes:
            if not 0 <= axis < dim_source:
                raise DimensionMismatchError(f"Axis {axis} out of range for {dim_source}D source")
        M = np.zeros((len(axes) + 1, dim_source + 1))
        for row, axis in enumerate(axes):
            M[row, axis] = 1.0
        M[-1, -1] = 1.0
        return cls(M)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def matrix(self) -> np.ndarray:
        """Homogeneous matrix of the current direction (a copy)."""
        linear, offset = self._current()
        m, n = linear.shape
        M = np.zeros((m + 1, n + 1))
        M[:m, :n] = linear
        M[:m, n] = offset
        M[m, n] = 1.0
        return M

    @property
    def is_linear(self) -> bool:
        return True

    @property
    def is_invertible(self) -> bool:
        return self._linear_inv is not None

    def is_identity(self, tolerance: float | None = None) -> bool:
        if self._dims[0] != self._dims[1]:
            return False
        tolerance = TRANSFORM_CONFIG.identity_tolerance.validate(tolerance)
        deviation = max(
            float(np.max(np.abs(self._linear - np.eye(self._dims[0])))),
            float(np.max(np.abs(self._offset))),
        )
        return deviation <= tolerance

    def _current(self) -> tuple[np.ndarray, np.ndarray]:
        if self._is_inverse:
            if self._linear_inv is None:
                raise NonInvertibleError("Affine matrix is singular or not square")
            return self._linear_inv, self._offset_inv
        return self._linear, self._offset

    # ========================================================================
    # Hooks
    # ========================================================================

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return tuple((self._linear @ np.array(ordinates) + self._offset).tolist())

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        linear, offset = self._current()
        return tuple((linear @ np.array(ordinates) + offset).tolist())

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        return _apply_affine_numpy(points, self._linear, self._offset)

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        linear, offset = self._current()
        return _apply_affine_numpy(points, linear, offset)

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return self._linear.copy()

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return self._current()[0].copy()


class IdentityTransform(MathTransform):
    """Transform that returns every point unchanged. Its own inverse."""

    def __init__(self, dimension: int) -> None:
        if dimension < 1:
            raise DimensionMismatchError(f"Dimension must be positive, got {dimension}")
        super().__init__(dimension, dimension)

    @property
    def is_linear(self) -> bool:
        return True

    def is_identity(self, tolerance: float | None = None) -> bool:
        return True

    def inverse(self) -> MathTransform:
        return self

    def invert(self) -> None:
        pass

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return ordinates

    _reverse = _forward

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        return points.copy()

    _reverse_array = _forward_array

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return np.eye(self._dims[0])

    _reverse_derivative = _forward_derivative
