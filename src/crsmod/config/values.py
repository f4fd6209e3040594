"""Geodetic parameter value dataclasses.

This module provides the immutable parameter objects transforms are built
from: the Bursa-Wolf shift to WGS84 and the reference ellipsoid.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from crsmod.shared.rotation import SEC_TO_RAD, helmert_homogeneous_matrix


@dataclass(frozen=True)
class Wgs84ConversionInfo:
    """Bursa-Wolf (7-parameter) shift from a local datum to WGS84.

    Translations are in metres, rotations in arc-seconds, and the scale
    correction in parts per million.

    Example:
        >>> info = Wgs84ConversionInfo(dx=-87.0, dy=-98.0, dz=-121.0)
        >>> info.get_affine_transform()
        (1.0, 0.0, 0.0, 0.0, -87.0, -98.0, -121.0)
    """

    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    ex: float = 0.0
    ey: float = 0.0
    ez: float = 0.0
    ppm: float = 0.0
    area_of_use: str = ""

    def get_affine_transform(self) -> tuple[float, ...]:
        """Derive the seven affine coefficients used by DatumTransform.

        :returns: (s, rx*s, ry*s, rz*s, dx, dy, dz) with ``s = 1 + ppm*1e-6``
            and rotations converted to radians
        """
        rs = 1.0 + self.ppm * 0.000001
        return (
            rs,
            self.ex * SEC_TO_RAD * rs,
            self.ey * SEC_TO_RAD * rs,
            self.ez * SEC_TO_RAD * rs,
            float(self.dx),
            float(self.dy),
            float(self.dz),
        )

    @property
    def has_zero_values_only(self) -> bool:
        """True if the shift is the identity."""
        return (
            self.dx == 0.0
            and self.dy == 0.0
            and self.dz == 0.0
            and self.ex == 0.0
            and self.ey == 0.0
            and self.ez == 0.0
            and self.ppm == 0.0
        )

    def to_matrix(self) -> np.ndarray:
        """Convert to 4x4 homogeneous transformation matrix."""
        return helmert_homogeneous_matrix(self.get_affine_transform())

    def __str__(self) -> str:
        return (
            f"{self.dx}, {self.dy}, {self.dz}, "
            f"{self.ex}, {self.ey}, {self.ez}, {self.ppm}"
        )


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid defined by semi-major axis and inverse flattening.

    An inverse flattening of 0 denotes a sphere.
    """

    semi_major_axis: float
    inverse_flattening: float
    name: str = ""

    def __post_init__(self) -> None:
        if self.semi_major_axis <= 0:
            raise ValueError(f"semi_major_axis must be positive, got {self.semi_major_axis}")
        if self.inverse_flattening < 0:
            raise ValueError(
                f"inverse_flattening must be non-negative, got {self.inverse_flattening}"
            )

    @property
    def flattening(self) -> float:
        if self.inverse_flattening == 0:
            return 0.0
        return 1.0 / self.inverse_flattening

    @property
    def semi_minor_axis(self) -> float:
        return self.semi_major_axis * (1.0 - self.flattening)

    @property
    def eccentricity_squared(self) -> float:
        f = self.flattening
        return 2 * f - f * f

    @property
    def eccentricity(self) -> float:
        return math.sqrt(self.eccentricity_squared)

    @property
    def is_sphere(self) -> bool:
        return self.inverse_flattening == 0

    @classmethod
    def sphere(cls, radius: float, name: str = "Sphere") -> Ellipsoid:
        """Create a sphere of the given radius."""
        return cls(semi_major_axis=radius, inverse_flattening=0.0, name=name)
