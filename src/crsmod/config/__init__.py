"""Configuration module for crsmod.

This module provides tunable settings, geodetic parameter values, and
preset libraries.

Usage:
    from crsmod.config import CONFIG
    CONFIG.transform.hull_edge_samples.default  # 16
    CONFIG.geodesy.max_iterations.default  # 20

    from crsmod.config import get_datum_preset
    info = get_datum_preset("osgb36")
"""

from crsmod.config.config import (
    CONFIG,
    GEODESY_CONFIG,
    TRANSFORM_CONFIG,
    CrsmodConfig,
)
from crsmod.config.geodesy import GeodesyConfig
from crsmod.config.operations import ParameterSpec
from crsmod.config.presets import (
    AIRY_1830,
    BESSEL_1841,
    CLARKE_1866,
    DATUM_PRESETS,
    DHDN_SHIFT,
    ED50_SHIFT,
    ELLIPSOID_PRESETS,
    GRS80,
    INTERNATIONAL_1924,
    NAD27_SHIFT,
    OSGB36_SHIFT,
    TOKYO_SHIFT,
    WGS72_SHIFT,
    WGS84,
    WGS84_SHIFT,
    datum_from_dict,
    datum_to_dict,
    ellipsoid_from_dict,
    get_datum_preset,
    get_ellipsoid_preset,
    load_datum_json,
    save_datum_json,
)
from crsmod.config.transform import TransformConfig
from crsmod.config.values import Ellipsoid, Wgs84ConversionInfo

__all__ = [
    # Core types
    "ParameterSpec",
    "CrsmodConfig",
    "TransformConfig",
    "GeodesyConfig",
    # Value classes
    "Wgs84ConversionInfo",
    "Ellipsoid",
    # Ellipsoid presets
    "WGS84",
    "GRS80",
    "INTERNATIONAL_1924",
    "BESSEL_1841",
    "CLARKE_1866",
    "AIRY_1830",
    "ELLIPSOID_PRESETS",
    # Datum presets
    "WGS84_SHIFT",
    "WGS72_SHIFT",
    "ED50_SHIFT",
    "NAD27_SHIFT",
    "OSGB36_SHIFT",
    "DHDN_SHIFT",
    "TOKYO_SHIFT",
    "DATUM_PRESETS",
    # Loading functions
    "get_ellipsoid_preset",
    "get_datum_preset",
    "datum_from_dict",
    "datum_to_dict",
    "ellipsoid_from_dict",
    "load_datum_json",
    "save_datum_json",
    # Singletons
    "CONFIG",
    "TRANSFORM_CONFIG",
    "GEODESY_CONFIG",
]
