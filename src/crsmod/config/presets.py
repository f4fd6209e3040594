"""Preset library for crsmod parameters.

Provides well-known ellipsoids and published TOWGS84 datum shifts, with
support for loading from dict and JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from crsmod.config.values import Ellipsoid, Wgs84ConversionInfo

logger = logging.getLogger(__name__)

# ============================================================================
# Ellipsoid Presets
# ============================================================================

WGS84 = Ellipsoid(6378137.0, 298.257223563, name="WGS 84")
GRS80 = Ellipsoid(6378137.0, 298.257222101, name="GRS 1980")
INTERNATIONAL_1924 = Ellipsoid(6378388.0, 297.0, name="International 1924")
BESSEL_1841 = Ellipsoid(6377397.155, 299.1528128, name="Bessel 1841")
CLARKE_1866 = Ellipsoid(6378206.4, 294.978698214, name="Clarke 1866")
AIRY_1830 = Ellipsoid(6377563.396, 299.3249646, name="Airy 1830")

ELLIPSOID_PRESETS: dict[str, Ellipsoid] = {
    "wgs84": WGS84,
    "grs80": GRS80,
    "international_1924": INTERNATIONAL_1924,
    "bessel_1841": BESSEL_1841,
    "clarke_1866": CLARKE_1866,
    "airy_1830": AIRY_1830,
}

# ============================================================================
# Datum Shift Presets (local datum -> WGS84)
# ============================================================================

WGS84_SHIFT = Wgs84ConversionInfo(area_of_use="World")

WGS72_SHIFT = Wgs84ConversionInfo(dz=4.5, ez=0.554, ppm=0.2263, area_of_use="World")

ED50_SHIFT = Wgs84ConversionInfo(dx=-87.0, dy=-98.0, dz=-121.0, area_of_use="Europe")

NAD27_SHIFT = Wgs84ConversionInfo(dx=-8.0, dy=160.0, dz=176.0, area_of_use="CONUS")

OSGB36_SHIFT = Wgs84ConversionInfo(
    dx=446.448,
    dy=-125.157,
    dz=542.06,
    ex=0.15,
    ey=0.247,
    ez=0.842,
    ppm=-20.489,
    area_of_use="Great Britain",
)

DHDN_SHIFT = Wgs84ConversionInfo(
    dx=598.1,
    dy=73.7,
    dz=418.2,
    ex=0.202,
    ey=0.045,
    ez=-2.455,
    ppm=6.7,
    area_of_use="Germany",
)

TOKYO_SHIFT = Wgs84ConversionInfo(dx=-146.414, dy=507.337, dz=680.507, area_of_use="Japan")

DATUM_PRESETS: dict[str, Wgs84ConversionInfo] = {
    "wgs84": WGS84_SHIFT,
    "wgs72": WGS72_SHIFT,
    "ed50": ED50_SHIFT,
    "nad27": NAD27_SHIFT,
    "osgb36": OSGB36_SHIFT,
    "dhdn": DHDN_SHIFT,
    "tokyo": TOKYO_SHIFT,
}

# ============================================================================
# Loading Functions
# ============================================================================


def get_ellipsoid_preset(name: str) -> Ellipsoid:
    """Get ellipsoid preset by name.

    :param name: Preset name (case-insensitive)
    :returns: Ellipsoid preset
    :raises KeyError: If preset not found
    """
    name_lower = name.lower()
    if name_lower not in ELLIPSOID_PRESETS:
        available = ", ".join(ELLIPSOID_PRESETS.keys())
        raise KeyError(f"Unknown ellipsoid preset '{name}'. Available: {available}")
    return ELLIPSOID_PRESETS[name_lower]


def get_datum_preset(name: str) -> Wgs84ConversionInfo:
    """Get datum shift preset by name.

    :param name: Preset name (case-insensitive)
    :returns: Wgs84ConversionInfo preset
    :raises KeyError: If preset not found
    """
    name_lower = name.lower()
    if name_lower not in DATUM_PRESETS:
        available = ", ".join(DATUM_PRESETS.keys())
        raise KeyError(f"Unknown datum preset '{name}'. Available: {available}")
    return DATUM_PRESETS[name_lower]


# ============================================================================
# Dict/JSON Loading
# ============================================================================


def datum_from_dict(d: dict) -> Wgs84ConversionInfo:
    """Create Wgs84ConversionInfo from dictionary.

    Supports both named fields and the 7-element TOWGS84 list.

    Example:
        >>> datum_from_dict({"dx": -87, "dy": -98, "dz": -121})
        >>> datum_from_dict({"towgs84": [446.448, -125.157, 542.06, 0.15, 0.247, 0.842, -20.489]})
    """
    if "preset" in d:
        return get_datum_preset(d["preset"])

    if "towgs84" in d:
        values = list(d["towgs84"])
        if len(values) not in (3, 7):
            raise ValueError(f"towgs84 must have 3 or 7 values, got {len(values)}")
        values += [0.0] * (7 - len(values))
        dx, dy, dz, ex, ey, ez, ppm = (float(v) for v in values)
        return Wgs84ConversionInfo(
            dx=dx, dy=dy, dz=dz, ex=ex, ey=ey, ez=ez, ppm=ppm,
            area_of_use=d.get("area_of_use", ""),
        )

    valid_fields = {"dx", "dy", "dz", "ex", "ey", "ez", "ppm", "area_of_use"}
    kwargs = {k: v for k, v in d.items() if k in valid_fields}
    ignored = set(d) - valid_fields
    if ignored:
        logger.debug("[datum_from_dict] Ignoring unknown keys: %s", sorted(ignored))
    return Wgs84ConversionInfo(**kwargs)


def datum_to_dict(info: Wgs84ConversionInfo) -> dict:
    """Convert Wgs84ConversionInfo to dictionary.

    :param info: Wgs84ConversionInfo instance
    :returns: Dictionary representation
    """
    return {
        "dx": info.dx,
        "dy": info.dy,
        "dz": info.dz,
        "ex": info.ex,
        "ey": info.ey,
        "ez": info.ez,
        "ppm": info.ppm,
        "area_of_use": info.area_of_use,
    }


def ellipsoid_from_dict(d: dict) -> Ellipsoid:
    """Create Ellipsoid from dictionary (or ``{"preset": name}``)."""
    if "preset" in d:
        return get_ellipsoid_preset(d["preset"])
    return Ellipsoid(
        semi_major_axis=float(d["semi_major_axis"]),
        inverse_flattening=float(d["inverse_flattening"]),
        name=d.get("name", ""),
    )


def load_datum_json(path: str | Path) -> Wgs84ConversionInfo:
    """Load Wgs84ConversionInfo from JSON file.

    :param path: Path to JSON file
    :returns: Wgs84ConversionInfo instance
    """
    with open(path) as f:
        d = json.load(f)
    return datum_from_dict(d)


def save_datum_json(info: Wgs84ConversionInfo, path: str | Path) -> None:
    """Save Wgs84ConversionInfo to JSON file.

    :param info: Wgs84ConversionInfo instance
    :param path: Output path
    """
    with open(path, "w") as f:
        json.dump(datum_to_dict(info), f, indent=2)
