"""
crsmod - Coordinate Reference System Transforms

Invertible, composable coordinate transforms for geodesy and mapping.

Features:
- MathTransform contract: point, list, packed-ordinate and array mapping
- Bursa-Wolf (7-parameter) datum shifts with Numba batch kernels
- Geographic <-> geocentric conversion on any reference ellipsoid
- Ellipsoidal Mercator projection
- Affine and identity transforms, composite chains with automatic flattening
- Domain classification and convex hull propagation for extents
- Memoized, lock-guarded inverses plus in-place direction flips
- Presets: WGS72, ED50, NAD27, OSGB36, DHDN, Tokyo shifts and common ellipsoids

Example - Datum shift:
    >>> from crsmod import DatumTransform, get_datum_preset
    >>>
    >>> shift = DatumTransform(get_datum_preset("osgb36"))
    >>> wgs84_xyz = shift.transform((3_980_000.0, -10_000.0, 4_970_000.0))
    >>> osgb36_xyz = shift.inverse().transform(wgs84_xyz)

Example - Geographic datum change:
    >>> from crsmod import Pipeline, AIRY_1830
    >>>
    >>> to_wgs84 = Pipeline().to_geocentric(AIRY_1830).datum_shift("osgb36").from_geocentric().build()
    >>> to_wgs84.transform((-0.1276, 51.5072, 0.0))

Example - Batches:
    >>> import numpy as np
    >>> points = np.random.rand(1_000_000, 3) * 1e6
    >>> shifted = shift.transform_array(points)
"""

__version__ = "0.1.0"

# Configuration
from crsmod.config import (
    AIRY_1830,
    BESSEL_1841,
    CLARKE_1866,
    CONFIG,
    DATUM_PRESETS,
    ELLIPSOID_PRESETS,
    GRS80,
    INTERNATIONAL_1924,
    WGS84,
    Ellipsoid,
    Wgs84ConversionInfo,
    datum_from_dict,
    datum_to_dict,
    get_datum_preset,
    get_ellipsoid_preset,
    load_datum_json,
    save_datum_json,
)

# Errors
from crsmod.errors import (
    DimensionMismatchError,
    NonInvertibleError,
    NotSupportedError,
    OutOfDomainError,
    TransformError,
    UnsupportedPointTypeError,
)

# Geometry
from crsmod.geometry import BoundingBox, Point, Point2D, Point3D, as_point, make_point

# Pipeline builder
from crsmod.pipeline import Pipeline, geographic_datum_shift

# Protocols
from crsmod.protocols import PointTransformer

# Transforms
from crsmod.transform import (
    AffineTransform,
    CompositeTransform,
    DatumTransform,
    DomainFlags,
    GeocentricTransform,
    IdentityTransform,
    MathTransform,
    MercatorProjection,
    concatenate,
)

# Verification utilities
from crsmod.verification import RoundTripVerifier

__all__ = [
    # Version
    "__version__",
    # Geometry
    "Point",
    "Point2D",
    "Point3D",
    "as_point",
    "make_point",
    "BoundingBox",
    # Transforms
    "MathTransform",
    "DatumTransform",
    "AffineTransform",
    "IdentityTransform",
    "GeocentricTransform",
    "MercatorProjection",
    "CompositeTransform",
    "concatenate",
    "DomainFlags",
    # Pipeline
    "Pipeline",
    "geographic_datum_shift",
    # Config values
    "CONFIG",
    "Wgs84ConversionInfo",
    "Ellipsoid",
    # Presets
    "WGS84",
    "GRS80",
    "INTERNATIONAL_1924",
    "BESSEL_1841",
    "CLARKE_1866",
    "AIRY_1830",
    "DATUM_PRESETS",
    "ELLIPSOID_PRESETS",
    "get_datum_preset",
    "get_ellipsoid_preset",
    "datum_from_dict",
    "datum_to_dict",
    "load_datum_json",
    "save_datum_json",
    # Errors
    "TransformError",
    "DimensionMismatchError",
    "UnsupportedPointTypeError",
    "NonInvertibleError",
    "NotSupportedError",
    "OutOfDomainError",
    # Protocols
    "PointTransformer",
    # Verification
    "RoundTripVerifier",
]
