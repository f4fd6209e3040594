"""
Example: datum shifts and coordinate pipelines.

Demonstrates how to use crsmod for:
- Bursa-Wolf datum shifts on geocentric coordinates
- Geographic datum changes through a Pipeline
- Batch transforms on NumPy arrays
- Domain flags and codomain hulls for map extents
"""

import logging

import numpy as np

from crsmod import (
    AIRY_1830,
    DatumTransform,
    DomainFlags,
    GeocentricTransform,
    MercatorProjection,
    Pipeline,
    RoundTripVerifier,
    geographic_datum_shift,
    get_datum_preset,
)

# Configure logging to see transform construction messages
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def example_1_geocentric_shift():
    """Example 1: OSGB36 -> WGS84 on geocentric coordinates."""
    print("\n" + "=" * 70)
    print("EXAMPLE 1: Geocentric Datum Shift")
    print("=" * 70)

    shift = DatumTransform(get_datum_preset("osgb36"))
    osgb36 = (3_980_000.0, -10_000.0, 4_970_000.0)

    wgs84 = shift.transform(osgb36)
    back = shift.inverse().transform(wgs84)

    print(f"Transform: {shift!r}")
    print(f"OSGB36 XYZ: {osgb36}")
    print(f"WGS84 XYZ:  {wgs84}")
    print(f"Recovered:  {back}")


def example_2_geographic_pipeline():
    """Example 2: London on OSGB36 to WGS84 longitude/latitude."""
    print("\n" + "=" * 70)
    print("EXAMPLE 2: Geographic Datum Change")
    print("=" * 70)

    pipe = Pipeline().to_geocentric(AIRY_1830).datum_shift("osgb36").from_geocentric()
    print(f"Pipeline: {pipe!r}")

    lon, lat, h = pipe((-0.1276, 51.5072, 0.0))
    print(f"WGS84: lon={lon:.6f}, lat={lat:.6f}, h={h:.2f} m")


def example_3_batches():
    """Example 3: Batch transforms with round-trip verification."""
    print("\n" + "=" * 70)
    print("EXAMPLE 3: Batch Transforms")
    print("=" * 70)

    rng = np.random.default_rng(42)
    n = 100_000
    points = np.column_stack(
        [rng.uniform(-8.0, 2.0, n), rng.uniform(50.0, 59.0, n), rng.uniform(0.0, 1000.0, n)]
    )

    shift = geographic_datum_shift(AIRY_1830, "osgb36")
    shifted = shift.transform_array(points)

    print(f"Transformed {len(shifted):,} points")
    print(f"Mean longitude change: {np.mean(shifted[:, 0] - points[:, 0]) * 3600:.3f} arcsec")
    print(f"Max round-trip error: {RoundTripVerifier.max_round_trip_error(shift, points[:1000]):.2e}")


def example_4_extents():
    """Example 4: Domain flags and projected extents."""
    print("\n" + "=" * 70)
    print("EXAMPLE 4: Domain Flags and Codomain Hulls")
    print("=" * 70)

    merc = MercatorProjection()
    europe = [-10.0, 35.0, 30.0, 35.0, 30.0, 70.0, -10.0, 70.0]
    arctic = [-10.0, 80.0, 30.0, 80.0, 30.0, 89.0, -10.0, 89.0]

    for name, extent in (("Europe", europe), ("Arctic", arctic)):
        flags = merc.get_domain_flags(extent)
        print(f"{name}: {flags!r}")
        if flags & DomainFlags.INSIDE:
            hull = np.asarray(merc.get_codomain_convex_hull(extent)).reshape(-1, 2)
            print(f"  projected hull: {len(hull)} vertices, y in [{hull[:, 1].min():.0f}, {hull[:, 1].max():.0f}]")

    crossing = [-6_378_137.0, -1000.0, 0.0, -6_378_137.0, 1000.0, 0.0]
    flags = GeocentricTransform().inverse().get_domain_flags(crossing)
    print(f"Antimeridian crossing: {flags!r}")


def main():
    """Run all examples."""
    print("\n" + "=" * 70)
    print("CRSMOD DATUM SHIFT EXAMPLES")
    print("=" * 70)

    example_1_geocentric_shift()
    example_2_geographic_pipeline()
    example_3_batches()
    example_4_extents()

    print("\n" + "=" * 70)
    print("ALL EXAMPLES COMPLETED")
    print("=" * 70)


if __name__ == "__main__":
    main()
