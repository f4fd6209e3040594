"""
Coordinate transforms - invertible, composable point mappings.

Datum shifts run through Numba-optimized batch kernels; geographic and
projection transforms are vectorized with NumPy.

Example:
    >>> from crsmod.transform import DatumTransform, GeocentricTransform, concatenate
    >>> from crsmod.config import ED50_SHIFT
    >>> chain = concatenate(
    ...     GeocentricTransform(), DatumTransform(ED50_SHIFT), GeocentricTransform().inverse()
    ... )
    >>> chain.transform((2.35, 48.85, 0.0))
"""

from crsmod.transform.affine import AffineTransform, IdentityTransform
from crsmod.transform.base import MathTransform
from crsmod.transform.composite import CompositeTransform, concatenate
from crsmod.transform.datum import DatumTransform
from crsmod.transform.domain import DomainBand, DomainFlags
from crsmod.transform.geocentric import GeocentricTransform
from crsmod.transform.projection import MERCATOR_MAX_LATITUDE, MercatorProjection

__all__ = [
    "MathTransform",
    "DatumTransform",
    "AffineTransform",
    "IdentityTransform",
    "GeocentricTransform",
    "MercatorProjection",
    "MERCATOR_MAX_LATITUDE",
    "CompositeTransform",
    "concatenate",
    "DomainFlags",
    "DomainBand",
]
