"""
Geographic <-> geocentric conversion on a reference ellipsoid.

Geographic points are ``(longitude, latitude[, height])`` in degrees and
metres; geocentric points are Earth-centred ``(X, Y, Z)`` in metres.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from crsmod.config.config import GEODESY_CONFIG
from crsmod.config.presets import WGS84
from crsmod.config.values import Ellipsoid
from crsmod.errors import DimensionMismatchError, OutOfDomainError
from crsmod.transform.base import MathTransform
from crsmod.transform.domain import DomainBand, DomainFlags
from crsmod.transform.hull import ordinates_to_array

logger = logging.getLogger(__name__)

_LATITUDE_BAND = DomainBand(axis=1, lo=-90.0, hi=90.0, label="latitude")


class GeocentricTransform(MathTransform):
    """Convert geographic coordinates to geocentric, and back.

    The forward direction is closed-form. The reverse direction iterates on
    latitude until successive estimates differ by less than ``tolerance``
    radians or ``max_iterations`` is reached.

    :param ellipsoid: Reference ellipsoid (default WGS84)
    :param dim_geographic: 3 for ``(lon, lat, h)``, 2 for ``(lon, lat)`` on the surface
    :param tolerance: Latitude convergence tolerance (radians), defaults to config
    :param max_iterations: Iteration cap, defaults to config

    Example:
        >>> geo = GeocentricTransform()
        >>> geo.transform((0.0, 0.0, 0.0))
        Point3D(6378137.0, 0.0, 0.0)
    """

    def __init__(
        self,
        ellipsoid: Ellipsoid = WGS84,
        dim_geographic: int = 3,
        tolerance: float | None = None,
        max_iterations: int | None = None,
    ) -> None:
        if dim_geographic not in (2, 3):
            raise DimensionMismatchError(f"dim_geographic must be 2 or 3, got {dim_geographic}")
        super().__init__(dim_geographic, 3)
        self._ellipsoid = ellipsoid
        self._a = ellipsoid.semi_major_axis
        self._b = ellipsoid.semi_minor_axis
        self._e2 = ellipsoid.eccentricity_squared
        self._tolerance = GEODESY_CONFIG.latitude_tolerance.validate(tolerance)
        self._max_iterations = GEODESY_CONFIG.max_iterations.validate_int(max_iterations)

    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid

    def _domain_band(self) -> DomainBand | None:
        return None if self._is_inverse else _LATITUDE_BAND

    def get_domain_flags(self, ordinates: Sequence[float]) -> DomainFlags:
        """Classify a hull against the domain.

        In the reverse direction, hulls that may cross the half-plane
        ``X < 0, Y = 0`` are also flagged DISCONTINUOUS: longitude jumps from
        +180 to -180 there.
        """
        flags = super().get_domain_flags(ordinates)
        if self._is_inverse and flags:
            vertices = ordinates_to_array(ordinates, 3)
            x, y = vertices[:, 0], vertices[:, 1]
            if x.min() < 0.0 and y.min() < 0.0 < y.max():
                flags |= DomainFlags.DISCONTINUOUS
        return flags

    # ========================================================================
    # Batch conversion
    # ========================================================================

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        lon = np.radians(points[:, 0])
        lat = np.radians(points[:, 1])
        h = points[:, 2] if points.shape[1] == 3 else 0.0

        sin_lat = np.sin(lat)
        cos_lat = np.cos(lat)
        n = self._a / np.sqrt(1.0 - self._e2 * sin_lat * sin_lat)

        out = np.empty((points.shape[0], 3), dtype=np.float64)
        out[:, 0] = (n + h) * cos_lat * np.cos(lon)
        out[:, 1] = (n + h) * cos_lat * np.sin(lon)
        out[:, 2] = (n * (1.0 - self._e2) + h) * sin_lat
        return out

    def _geodetic(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Longitude, latitude (radians) and height of geocentric points."""
        x, y, z = points[:, 0], points[:, 1], points[:, 2]
        a, e2 = self._a, self._e2
        p = np.hypot(x, y)
        lon = np.arctan2(y, x)
        lat = np.arctan2(z, p * (1.0 - e2))

        converged = False
        with np.errstate(divide="ignore", invalid="ignore"):
            for _ in range(self._max_iterations):
                sin_lat = np.sin(lat)
                n = a / np.sqrt(1.0 - e2 * sin_lat * sin_lat)
                h = p * np.cos(lat) + z * sin_lat - a * a / n
                lat_next = np.arctan2(z, p * (1.0 - e2 * n / (n + h)))
                # Earth's centre: any latitude is valid
                lat_next = np.where(np.isfinite(lat_next), lat_next, lat)
                delta = float(np.max(np.abs(lat_next - lat))) if lat.size else 0.0
                lat = lat_next
                if delta < self._tolerance:
                    converged = True
                    break

        if not converged:
            logger.warning(
                "[GeocentricTransform] Latitude did not converge within %d iterations",
                self._max_iterations,
            )

        sin_lat = np.sin(lat)
        h = p * np.cos(lat) + z * sin_lat - a * np.sqrt(1.0 - e2 * sin_lat * sin_lat)
        return lon, lat, h

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        lon, lat, h = self._geodetic(points)
        out = np.empty((points.shape[0], self._dims[0]), dtype=np.float64)
        out[:, 0] = np.degrees(lon)
        out[:, 1] = np.degrees(lat)
        if self._dims[0] == 3:
            out[:, 2] = h
        return out

    # ========================================================================
    # Single points
    # ========================================================================

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return tuple(self._forward_array(np.array([ordinates], dtype=np.float64))[0].tolist())

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        return tuple(self._reverse_array(np.array([ordinates], dtype=np.float64))[0].tolist())

    # ========================================================================
    # Derivatives
    # ========================================================================

    def _jacobian(self, lon: float, lat: float, h: float) -> np.ndarray:
        """d(X, Y, Z) / d(lon, lat, h) with angles in degrees."""
        sin_lat, cos_lat = np.sin(lat), np.cos(lat)
        sin_lon, cos_lon = np.sin(lon), np.cos(lon)
        w2 = 1.0 - self._e2 * sin_lat * sin_lat
        n = self._a / np.sqrt(w2)
        m = self._a * (1.0 - self._e2) / (w2 * np.sqrt(w2))
        deg = np.pi / 180.0

        return np.array(
            [
                [-(n + h) * cos_lat * sin_lon * deg, -(m + h) * sin_lat * cos_lon * deg, cos_lat * cos_lon],
                [(n + h) * cos_lat * cos_lon * deg, -(m + h) * sin_lat * sin_lon * deg, cos_lat * sin_lon],
                [0.0, (m + h) * cos_lat * deg, sin_lat],
            ],
            dtype=np.float64,
        )

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        h = ordinates[2] if len(ordinates) == 3 else 0.0
        jacobian = self._jacobian(np.radians(ordinates[0]), np.radians(ordinates[1]), h)
        return jacobian[:, : self._dims[0]]

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        lon, lat, h = self._geodetic(np.array([ordinates], dtype=np.float64))
        if abs(np.cos(lat[0])) < 1e-12:
            raise OutOfDomainError("GeocentricTransform: derivative undefined at the poles")
        jacobian = self._jacobian(float(lon[0]), float(lat[0]), float(h[0]))
        return np.linalg.inv(jacobian)[: self._dims[0], :]

    def __repr__(self) -> str:
        direction = "inverse" if self._is_inverse else "forward"
        name = self._ellipsoid.name or f"a={self._a}"
        return f"GeocentricTransform({name}, {self.dim_source}D -> {self.dim_target}D, {direction})"
