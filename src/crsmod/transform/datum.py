"""
DatumTransform: 7-parameter Bursa-Wolf shift between geocentric frames.

Maps geocentric (X, Y, Z) points of a local datum to WGS84 using the
small-angle (linearized) Helmert transformation:

    x' = s*x - rz*y + ry*z + dx
    y' = rz*x + s*y - rx*z + dy
    z' = -ry*x + rx*y + s*z + dz

where ``(s, rx, ry, rz, dx, dy, dz)`` are the coefficients returned by
:meth:`Wgs84ConversionInfo.get_affine_transform` (rotations already scaled
by ``s``). The reverse direction solves this linear system exactly, so a
forward/reverse round trip reproduces the input to floating-point rounding.
"""

from __future__ import annotations

import logging

import numpy as np

from crsmod.config.config import TRANSFORM_CONFIG
from crsmod.config.values import Wgs84ConversionInfo
from crsmod.errors import UnsupportedPointTypeError
from crsmod.shared.rotation import helmert_inverse_matrix, helmert_matrix
from crsmod.transform.base import MathTransform
from crsmod.transform.kernels import helmert_forward_numba, helmert_reverse_numba

logger = logging.getLogger(__name__)


class DatumTransform(MathTransform):
    """Bursa-Wolf datum shift on 3D geocentric points.

    Example:
        >>> from crsmod.config import ED50_SHIFT
        >>> shift = DatumTransform(ED50_SHIFT)
        >>> shift.transform((4_000_000.0, 500_000.0, 4_900_000.0))
        Point3D(3999913.0, 499902.0, 4899879.0)
        >>> shift.inverse().transform((3999913.0, 499902.0, 4899879.0))
        Point3D(4000000.0, 500000.0, 4900000.0)
    """

    def __init__(self, to_wgs84: Wgs84ConversionInfo) -> None:
        """Initialize from a TOWGS84 parameter set.

        :param to_wgs84: Shift from the local datum to WGS84
        """
        if not isinstance(to_wgs84, Wgs84ConversionInfo):
            raise TypeError(
                f"DatumTransform expects Wgs84ConversionInfo, got {type(to_wgs84).__name__}"
            )
        super().__init__(3, 3)
        self._to_wgs84 = to_wgs84
        self._v = to_wgs84.get_affine_transform()
        self._v_array = np.array(self._v, dtype=np.float64)
        logger.debug("[DatumTransform] Created from TOWGS84[%s]", to_wgs84)

    @property
    def conversion_info(self) -> Wgs84ConversionInfo:
        return self._to_wgs84

    @property
    def coefficients(self) -> tuple[float, ...]:
        """Affine coefficients ``(s, rx, ry, rz, dx, dy, dz)``."""
        return self._v

    @property
    def is_linear(self) -> bool:
        return True

    def is_identity(self, tolerance: float | None = None) -> bool:
        tolerance = TRANSFORM_CONFIG.identity_tolerance.validate(tolerance)
        if tolerance == 0.0:
            return self._to_wgs84.has_zero_values_only
        deviation = max(abs(self._v[0] - 1.0), *(abs(c) for c in self._v[1:]))
        return deviation <= tolerance

    def _dimension_error(self, found: int | None, message: str) -> Exception:
        # Datum shifts need full geocentric points
        if found is not None and found < 3:
            return UnsupportedPointTypeError(message)
        return super()._dimension_error(found, message)

    # ------------------------------------------------------------------------
    # Single points
    # ------------------------------------------------------------------------

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        x, y, z = ordinates
        v = self._v
        return (
            v[0] * x - v[3] * y + v[2] * z + v[4],
            v[3] * x + v[0] * y - v[1] * z + v[5],
            -v[2] * x + v[1] * y + v[0] * z + v[6],
        )

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        s, a, b, c, tx, ty, tz = self._v
        dx = ordinates[0] - tx
        dy = ordinates[1] - ty
        dz = ordinates[2] - tz
        k = a * dx + b * dy + c * dz
        s2 = s * s
        denom = s * (s2 + a * a + b * b + c * c)
        return (
            (s2 * dx + s * (c * dy - b * dz) + a * k) / denom,
            (s2 * dy + s * (a * dz - c * dx) + b * k) / denom,
            (s2 * dz + s * (b * dx - a * dy) + c * k) / denom,
        )

    # ------------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------------

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        points = np.ascontiguousarray(points, dtype=np.float64)
        out = np.empty_like(points)
        helmert_forward_numba(points, self._v_array, out)
        return out

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        points = np.ascontiguousarray(points, dtype=np.float64)
        out = np.empty_like(points)
        helmert_reverse_numba(points, self._v_array, out)
        return out

    # ------------------------------------------------------------------------
    # Derivatives (constant for a linear map)
    # ------------------------------------------------------------------------

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return helmert_matrix(self._v)

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return helmert_inverse_matrix(self._v)

    def __repr__(self) -> str:
        direction = "inverse" if self._is_inverse else "forward"
        return f"DatumTransform(TOWGS84[{self._to_wgs84}], {direction})"
