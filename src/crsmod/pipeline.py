"""Fluent builder for chains of coordinate transforms.

Example:
    >>> from crsmod import Pipeline
    >>> from crsmod.config import INTERNATIONAL_1924
    >>>
    >>> # ED50 geographic -> WGS84 geographic
    >>> pipe = (Pipeline()
    ...     .to_geocentric(INTERNATIONAL_1924)
    ...     .datum_shift("ed50")
    ...     .from_geocentric())
    >>>
    >>> wgs84 = pipe((2.35, 48.85, 100.0))
    >>> transform = pipe.build()  # reusable MathTransform
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from crsmod.config.presets import WGS84, get_datum_preset, get_ellipsoid_preset
from crsmod.config.values import Ellipsoid, Wgs84ConversionInfo
from crsmod.geometry.point import Point, PointLike
from crsmod.transform.affine import AffineTransform
from crsmod.transform.base import ArrayLike, MathTransform
from crsmod.transform.composite import concatenate
from crsmod.transform.datum import DatumTransform
from crsmod.transform.geocentric import GeocentricTransform
from crsmod.transform.projection import MercatorProjection


def _resolve_ellipsoid(ellipsoid: Ellipsoid | str) -> Ellipsoid:
    if isinstance(ellipsoid, str):
        return get_ellipsoid_preset(ellipsoid)
    return ellipsoid


@dataclass
class Pipeline:
    """Ordered list of transform stages built into one MathTransform.

    Stages are accumulated and composed when built (or called). Supports
    method chaining for fluent API.
    """

    _stages: list[MathTransform] = field(default_factory=list)
    _built: MathTransform | None = field(default=None, repr=False)

    def _add(self, stage: MathTransform) -> Pipeline:
        self._stages.append(stage)
        self._built = None
        return self

    # ========================================================================
    # Generic Stages
    # ========================================================================

    def then(self, transform: MathTransform) -> Pipeline:
        """Append an existing transform.

        :param transform: Any MathTransform
        :returns: Self for chaining
        """
        if not isinstance(transform, MathTransform):
            raise TypeError(f"Expected MathTransform, got {type(transform).__name__}")
        return self._add(transform)

    def affine(self, matrix: ArrayLike) -> Pipeline:
        """Append an affine map given as a homogeneous matrix.

        :returns: Self for chaining
        """
        return self._add(AffineTransform(matrix))

    def translate(self, translation: Sequence[float]) -> Pipeline:
        """Append a translation.

        :param translation: One offset per axis
        :returns: Self for chaining
        """
        return self._add(AffineTransform.from_translation(*translation))

    def scale(self, factor: float | Sequence[float], dimension: int | None = None) -> Pipeline:
        """Append a scale about the origin.

        :param factor: Uniform scale factor or one factor per axis
        :param dimension: Axis count for a uniform factor (default 3)
        :returns: Self for chaining
        """
        return self._add(AffineTransform.from_scale(factor, dimension))

    def select_axes(self, dim_source: int, axes: Sequence[int]) -> Pipeline:
        """Append an axis selection, e.g. ``(3, [0, 1])`` to drop heights."""
        return self._add(AffineTransform.select_axes(dim_source, axes))

    # ========================================================================
    # Geodetic Stages
    # ========================================================================

    def datum_shift(self, to_wgs84: Wgs84ConversionInfo | str) -> Pipeline:
        """Append a Bursa-Wolf shift on geocentric points.

        :param to_wgs84: Shift parameters or a datum preset name
        :returns: Self for chaining
        """
        if isinstance(to_wgs84, str):
            to_wgs84 = get_datum_preset(to_wgs84)
        return self._add(DatumTransform(to_wgs84))

    def inverse_datum_shift(self, to_wgs84: Wgs84ConversionInfo | str) -> Pipeline:
        """Append the reverse of a Bursa-Wolf shift (WGS84 -> local datum).

        :returns: Self for chaining
        """
        if isinstance(to_wgs84, str):
            to_wgs84 = get_datum_preset(to_wgs84)
        return self._add(DatumTransform(to_wgs84).inverse())

    def to_geocentric(self, ellipsoid: Ellipsoid | str = WGS84, dim_geographic: int = 3) -> Pipeline:
        """Append geographic -> geocentric conversion.

        :param ellipsoid: Ellipsoid or preset name
        :param dim_geographic: 3 for (lon, lat, h), 2 for (lon, lat)
        :returns: Self for chaining
        """
        return self._add(GeocentricTransform(_resolve_ellipsoid(ellipsoid), dim_geographic))

    def from_geocentric(self, ellipsoid: Ellipsoid | str = WGS84, dim_geographic: int = 3) -> Pipeline:
        """Append geocentric -> geographic conversion.

        :returns: Self for chaining
        """
        return self._add(GeocentricTransform(_resolve_ellipsoid(ellipsoid), dim_geographic).inverse())

    def mercator(self, ellipsoid: Ellipsoid | str = WGS84, **kwargs: float) -> Pipeline:
        """Append a Mercator projection (keyword arguments as MercatorProjection).

        :returns: Self for chaining
        """
        return self._add(MercatorProjection(_resolve_ellipsoid(ellipsoid), **kwargs))

    def unproject_mercator(self, ellipsoid: Ellipsoid | str = WGS84, **kwargs: float) -> Pipeline:
        """Append an inverse Mercator projection.

        :returns: Self for chaining
        """
        return self._add(MercatorProjection(_resolve_ellipsoid(ellipsoid), **kwargs).inverse())

    # ========================================================================
    # Execution
    # ========================================================================

    def build(self) -> MathTransform:
        """Compose the stages into a single transform.

        Nested composites are flattened and identity stages dropped.

        :returns: The composed MathTransform (cached until the next change)
        :raises ValueError: If the pipeline is empty
        :raises DimensionMismatchError: If adjacent stages do not fit together
        """
        if not self._stages:
            raise ValueError("Cannot build an empty Pipeline")
        if self._built is None:
            self._built = concatenate(*self._stages)
        return self._built

    def __call__(self, point: PointLike) -> Point:
        """Build (if needed) and apply to a single point."""
        return self.build().transform(point)

    def is_neutral(self) -> bool:
        """True if every stage is an identity (or there are none)."""
        return all(stage.is_identity() for stage in self._stages)

    def reset(self) -> Pipeline:
        """Clear all stages.

        :returns: Self for chaining
        """
        self._stages.clear()
        self._built = None
        return self

    def clone(self) -> Pipeline:
        """Create a copy of the pipeline.

        :returns: New Pipeline with the same stages
        """
        return Pipeline(_stages=list(self._stages))

    def __len__(self) -> int:
        """Return number of stages."""
        return len(self._stages)

    def __repr__(self) -> str:
        stages = [type(stage).__name__ for stage in self._stages]
        return f"Pipeline([{', '.join(stages)}])"


def geographic_datum_shift(
    source_ellipsoid: Ellipsoid | str,
    to_wgs84: Wgs84ConversionInfo | str,
    target_ellipsoid: Ellipsoid | str = WGS84,
    dim_geographic: int = 3,
) -> MathTransform:
    """Geographic coordinates on one datum to geographic coordinates on another.

    Chains geographic -> geocentric -> Bursa-Wolf shift -> geocentric ->
    geographic.

    :param source_ellipsoid: Ellipsoid of the source datum (or preset name)
    :param to_wgs84: Shift from the source datum (or datum preset name)
    :param target_ellipsoid: Ellipsoid of the target datum (default WGS84)
    :param dim_geographic: 3 for (lon, lat, h), 2 for (lon, lat)
    :returns: Composed MathTransform
    """
    return (
        Pipeline()
        .to_geocentric(source_ellipsoid, dim_geographic)
        .datum_shift(to_wgs84)
        .from_geocentric(target_ellipsoid, dim_geographic)
        .build()
    )
