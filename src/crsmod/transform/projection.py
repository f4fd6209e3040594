"""
Normal-aspect Mercator projection on an ellipsoid.

Maps geographic ``(longitude, latitude)`` in degrees to projected
``(easting, northing)`` in metres. Latitudes beyond ``latitude_limit`` are
outside the domain (the projection diverges at the poles).
"""

from __future__ import annotations

import logging

import numpy as np

from crsmod.config.config import GEODESY_CONFIG
from crsmod.config.presets import WGS84
from crsmod.config.values import Ellipsoid
from crsmod.transform.base import MathTransform
from crsmod.transform.domain import DomainBand

logger = logging.getLogger(__name__)

# Latitude at which a square world map ends (same cut as Web Mercator)
MERCATOR_MAX_LATITUDE = 85.0511287798


class MercatorProjection(MathTransform):
    """Ellipsoidal Mercator (EPSG method 9804 with optional scale factor).

    Example:
        >>> merc = MercatorProjection()
        >>> merc.transform((0.0, 0.0))
        Point2D(0.0, 0.0)
    """

    def __init__(
        self,
        ellipsoid: Ellipsoid = WGS84,
        central_meridian: float = 0.0,
        scale_factor: float = 1.0,
        false_easting: float = 0.0,
        false_northing: float = 0.0,
        latitude_limit: float = MERCATOR_MAX_LATITUDE,
        tolerance: float | None = None,
        max_iterations: int | None = None,
    ) -> None:
        if not 0.0 < latitude_limit < 90.0:
            raise ValueError(f"latitude_limit must be in (0, 90), got {latitude_limit}")
        if scale_factor <= 0.0:
            raise ValueError(f"scale_factor must be positive, got {scale_factor}")
        super().__init__(2, 2)
        self._ellipsoid = ellipsoid
        self._e = ellipsoid.eccentricity
        self._e2 = ellipsoid.eccentricity_squared
        self._ak = ellipsoid.semi_major_axis * scale_factor
        self._central_meridian = central_meridian
        self._false_easting = false_easting
        self._false_northing = false_northing
        self._band = DomainBand(axis=1, lo=-latitude_limit, hi=latitude_limit, label="latitude")
        self._tolerance = GEODESY_CONFIG.latitude_tolerance.validate(tolerance)
        self._max_iterations = GEODESY_CONFIG.max_iterations.validate_int(max_iterations)

    @property
    def latitude_limit(self) -> float:
        return self._band.hi

    def _domain_band(self) -> DomainBand | None:
        return None if self._is_inverse else self._band

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        lam = np.radians(points[:, 0] - self._central_meridian)
        phi = np.radians(points[:, 1])
        e_sin = self._e * np.sin(phi)

        out = np.empty_like(points, dtype=np.float64)
        out[:, 0] = self._false_easting + self._ak * lam
        out[:, 1] = self._false_northing + self._ak * (
            np.log(np.tan(np.pi / 4.0 + phi / 2.0))
            + 0.5 * self._e * np.log((1.0 - e_sin) / (1.0 + e_sin))
        )
        return out

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        lon = self._central_meridian + np.degrees((points[:, 0] - self._false_easting) / self._ak)
        t = np.exp(-(points[:, 1] - self._false_northing) / self._ak)
        phi = np.pi / 2.0 - 2.0 * np.arctan(t)

        if self._e > 0.0:
            for _ in range(self._max_iterations):
                e_sin = self._e * np.sin(phi)
                phi_next = np.pi / 2.0 - 2.0 * np.arctan(
                    t * ((1.0 - e_sin) / (1.0 + e_sin)) ** (0.5 * self._e)
                )
                delta = float(np.max(np.abs(phi_next - phi))) if phi.size else 0.0
                phi = phi_next
                if delta < self._tolerance:
                    break
            else:
                logger.warning(
                    "[MercatorProjection] Latitude did not converge within %d iterations",
                    self._max_iterations,
                )

        out = np.empty_like(points, dtype=np.float64)
        out[:, 0] = lon
        out[:, 1] = np.degrees(phi)
        return out

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return tuple(self._forward_array(np.array([ordinates], dtype=np.float64))[0].tolist())

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return tuple(self._reverse_array(np.array([ordinates], dtype=np.float64))[0].tolist())

    def _scale_terms(self, latitude: float) -> tuple[float, float]:
        """d(easting)/d(lon) and d(northing)/d(lat), per degree."""
        phi = np.radians(latitude)
        sin_phi = np.sin(phi)
        deg = np.pi / 180.0
        dx = self._ak * deg
        dy = self._ak * (1.0 - self._e2) / ((1.0 - self._e2 * sin_phi * sin_phi) * np.cos(phi)) * deg
        return dx, dy

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return np.diag(self._scale_terms(ordinates[1]))

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        latitude = self._reverse(ordinates)[1]
        dx, dy = self._scale_terms(latitude)
        return np.diag([1.0 / dx, 1.0 / dy])

    def __repr__(self) -> str:
        direction = "inverse" if self._is_inverse else "forward"
        return (
            f"MercatorProjection({self._ellipsoid.name or 'custom'}, "
            f"lon0={self._central_meridian}, {direction})"
        )
