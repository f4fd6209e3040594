"""
Benchmark batch transform paths.

Compares, for a Bursa-Wolf shift:
- Numba kernel (DatumTransform.transform_array)
- NumPy matrix path (AffineTransform.from_helmert)
- Per-point Python path (transform_list)

and times the geographic pipeline end to end.

Usage:
    python benchmark_transform_array.py
"""

import time

import numpy as np

from crsmod import AIRY_1830, AffineTransform, DatumTransform, geographic_datum_shift, get_datum_preset

# Test configurations
SIZES = [1_000, 100_000, 1_000_000]
NUM_ITERATIONS = 20
WARMUP_ITERATIONS = 3
LIST_LIMIT = 10_000

print("=" * 80)
print("BATCH TRANSFORM BENCHMARK")
print("=" * 80)
print(f"Testing with {NUM_ITERATIONS} iterations per test")
print(f"Warmup: {WARMUP_ITERATIONS} iterations")


def create_geocentric_points(n: int) -> np.ndarray:
    """Create geocentric points near the surface of the Earth."""
    rng = np.random.default_rng(0)
    directions = rng.standard_normal((n, 3))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    return directions * 6_371_000.0


def create_geographic_points(n: int) -> np.ndarray:
    """Create (lon, lat, h) points over Great Britain."""
    rng = np.random.default_rng(1)
    return np.column_stack(
        [rng.uniform(-8.0, 2.0, n), rng.uniform(50.0, 59.0, n), rng.uniform(0.0, 1000.0, n)]
    )


def time_call(func, points: np.ndarray, iterations: int = NUM_ITERATIONS) -> float:
    """Mean wall time in milliseconds."""
    for _ in range(WARMUP_ITERATIONS):
        func(points)

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func(points)
        times.append((time.perf_counter() - start) * 1000)
    return float(np.mean(times))


def benchmark_datum(n: int) -> None:
    """Datum shift: Numba vs NumPy vs per-point."""
    info = get_datum_preset("osgb36")
    numba_path = DatumTransform(info)
    numpy_path = AffineTransform.from_helmert(info)
    points = create_geocentric_points(n)

    numba_ms = time_call(numba_path.transform_array, points)
    numpy_ms = time_call(numpy_path.transform_array, points)

    max_diff = np.max(np.abs(numba_path.transform_array(points) - numpy_path.transform_array(points)))

    print(f"\n[{n:,} points]")
    print(f"  Numba kernel:  {numba_ms:8.3f} ms  ({n / numba_ms / 1000:.1f} M points/s)")
    print(f"  NumPy matrix:  {numpy_ms:8.3f} ms  ({numpy_ms / numba_ms:.2f}x slower)")
    print(f"  Max difference: {max_diff:.3e} m")

    if n <= LIST_LIMIT:
        list_ms = time_call(numba_path.transform_list, list(points), iterations=3)
        print(f"  Per-point:     {list_ms:8.3f} ms  ({list_ms / numba_ms:.0f}x slower)")


def benchmark_pipeline(n: int) -> None:
    """Geographic OSGB36 -> WGS84 chain."""
    shift = geographic_datum_shift(AIRY_1830, "osgb36")
    points = create_geographic_points(n)
    ms = time_call(shift.transform_array, points, iterations=5)
    print(f"  Geographic chain: {ms:8.3f} ms  ({n / ms / 1000:.2f} M points/s)")


def main():
    for n in SIZES:
        benchmark_datum(n)
        benchmark_pipeline(n)

    print("\n" + "=" * 80)
    print("BENCHMARK COMPLETE")
    print("=" * 80)


if __name__ == "__main__":
    main()
