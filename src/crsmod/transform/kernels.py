"""
Numba-optimized kernels for batch datum shifts.

Both kernels take the seven Helmert coefficients
``v = (s, rx, ry, rz, tx, ty, tz)`` and write into a caller-provided output
buffer, so input arrays are never modified.
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


@njit(parallel=True, cache=True, nogil=True)
def helmert_forward_numba(
    points: NDArray[np.float64],
    v: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Apply the linearized 7-parameter shift.

    Args:
        points: Geocentric points [N, 3]
        v: Affine coefficients [7]
        out: Output points [N, 3] (modified in-place)
    """
    n = points.shape[0]

    for i in prange(n):
        x = points[i, 0]
        y = points[i, 1]
        z = points[i, 2]

        out[i, 0] = v[0] * x - v[3] * y + v[2] * z + v[4]
        out[i, 1] = v[3] * x + v[0] * y - v[1] * z + v[5]
        out[i, 2] = -v[2] * x + v[1] * y + v[0] * z + v[6]


@njit(parallel=True, cache=True, nogil=True)
def helmert_reverse_numba(
    points: NDArray[np.float64],
    v: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Undo the linearized 7-parameter shift in closed form.

    Uses ``(s*I + [w]x)^-1 = (s^2*I - s*[w]x + w*w^T) / (s*(s^2 + |w|^2))``
    on the translated point.

    Args:
        points: Geocentric points [N, 3]
        v: Affine coefficients [7]
        out: Output points [N, 3] (modified in-place)
    """
    n = points.shape[0]
    s = v[0]
    a = v[1]
    b = v[2]
    c = v[3]
    s2 = s * s
    denom = s * (s2 + a * a + b * b + c * c)

    for i in prange(n):
        dx = points[i, 0] - v[4]
        dy = points[i, 1] - v[5]
        dz = points[i, 2] - v[6]
        k = a * dx + b * dy + c * dz

        out[i, 0] = (s2 * dx + s * (c * dy - b * dz) + a * k) / denom
        out[i, 1] = (s2 * dy + s * (a * dz - c * dx) + b * k) / denom
        out[i, 2] = (s2 * dz + s * (b * dx - a * dy) + c * k) / denom


def warmup_transform_kernels() -> None:
    """Trigger JIT compilation with a tiny input."""
    points = np.zeros((4, 3), dtype=np.float64)
    v = np.array([1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float64)
    out = np.empty_like(points)

    helmert_forward_numba(points, v, out)
    helmert_reverse_numba(points, v, out)

    logger.debug("Datum transform Numba kernels warmed up")


# Warmup on import
warmup_transform_kernels()
