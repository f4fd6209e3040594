"""Small-angle rotation utilities for Helmert (7-parameter) transforms.

Datum rotations are a few arc-seconds, so the rotation matrix is linearized
to ``I + [w]x`` where ``[w]x`` is the skew-symmetric cross-product matrix of
the rotation vector ``w = (rx, ry, rz)`` in radians. Scaling that matrix by
``s`` gives the Helmert matrix ``s*I + [w]x`` used throughout crsmod.

Convention: ``v = (s, rx, ry, rz, tx, ty, tz)`` as produced by
``Wgs84ConversionInfo.get_affine_transform()``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

# Arc-seconds to radians
SEC_TO_RAD = np.pi / 648000.0

# Type aliases
type ArrayLike = np.ndarray | list | tuple


def arcsec_to_rad(seconds: float | ArrayLike) -> float | np.ndarray:
    """Convert arc-seconds to radians."""
    if isinstance(seconds, int | float):
        return seconds * SEC_TO_RAD
    return np.asarray(seconds, dtype=np.float64) * SEC_TO_RAD


def skew_symmetric(omega: ArrayLike) -> np.ndarray:
    """Build the cross-product matrix ``[w]x`` so that ``[w]x @ p == w x p``.

    :param omega: Rotation vector [3]
    :returns: 3x3 skew-symmetric matrix
    """
    a, b, c = (float(w) for w in omega)
    return np.array(
        [
            [0.0, -c, b],
            [c, 0.0, -a],
            [-b, a, 0.0],
        ],
        dtype=np.float64,
    )


def helmert_matrix(v: Sequence[float]) -> np.ndarray:
    """Linear part of the forward Helmert transform.

    :param v: Seven affine coefficients (s, rx, ry, rz, tx, ty, tz)
    :returns: 3x3 matrix ``s*I + [w]x``
    """
    return v[0] * np.eye(3, dtype=np.float64) + skew_symmetric(v[1:4])


def helmert_inverse_matrix(v: Sequence[float]) -> np.ndarray:
    """Closed-form inverse of :func:`helmert_matrix`.

    For ``M = s*I + W`` with ``W = [w]x`` we have ``W @ W = w w^T - |w|^2 I``
    and ``W @ w = 0``, which gives::

        M^-1 = (s^2 I - s W + w w^T) / (s (s^2 + |w|^2))

    :param v: Seven affine coefficients (s, rx, ry, rz, tx, ty, tz)
    :returns: 3x3 inverse matrix
    """
    s = float(v[0])
    w = np.asarray(v[1:4], dtype=np.float64)
    denom = s * (s * s + float(w @ w))
    return (s * s * np.eye(3) - s * skew_symmetric(w) + np.outer(w, w)) / denom


def helmert_homogeneous_matrix(v: Sequence[float]) -> np.ndarray:
    """4x4 homogeneous form of the forward Helmert transform."""
    M = np.eye(4, dtype=np.float64)
    M[:3, :3] = helmert_matrix(v)
    M[:3, 3] = v[4:7]
    return M
