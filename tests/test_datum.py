"""Tests for DatumTransform (7-parameter Bursa-Wolf shift).

Covers the forward formula, the closed-form reverse, direction handling
(inverse/invert), batch paths and dimension enforcement.
"""

import threading

import numpy as np
import pytest

from crsmod import (
    DatumTransform,
    DimensionMismatchError,
    NonInvertibleError,
    NotSupportedError,
    Point3D,
    UnsupportedPointTypeError,
    Wgs84ConversionInfo,
)
from crsmod.config import DHDN_SHIFT, ED50_SHIFT, OSGB36_SHIFT
from crsmod.shared import SEC_TO_RAD
from crsmod.verification import RoundTripVerifier


def create_geocentric_points(n: int = 1000, seed: int = 42) -> np.ndarray:
    """Random points near the Earth's surface [N, 3]."""
    rng = np.random.default_rng(seed)
    directions = rng.normal(size=(n, 3))
    directions /= np.linalg.norm(directions, axis=1, keepdims=True)
    radii = rng.uniform(6.35e6, 6.40e6, size=(n, 1))
    return directions * radii


class TestCoefficients:
    """Test Wgs84ConversionInfo.get_affine_transform."""

    def test_translation_only(self):
        """Test a 3-parameter shift keeps unit scale and no rotation."""
        v = ED50_SHIFT.get_affine_transform()
        assert v == (1.0, 0.0, 0.0, 0.0, -87.0, -98.0, -121.0)

    def test_rotation_scaled_by_rs(self):
        """Test rotations are converted to radians and multiplied by RS."""
        info = Wgs84ConversionInfo(ex=1.0, ey=2.0, ez=3.0, ppm=10.0)
        v = info.get_affine_transform()
        rs = 1.0 + 10.0e-6
        assert v[0] == pytest.approx(rs)
        assert v[1] == pytest.approx(1.0 * SEC_TO_RAD * rs)
        assert v[2] == pytest.approx(2.0 * SEC_TO_RAD * rs)
        assert v[3] == pytest.approx(3.0 * SEC_TO_RAD * rs)


class TestDatumForward:
    """Test the forward mapping."""

    def test_identity_parameters(self):
        """Test zero parameters leave any point unchanged."""
        shift = DatumTransform(Wgs84ConversionInfo())
        assert shift.is_identity()
        for p in [(0.0, 0.0, 0.0), (1.5, -2.25, 3.0), (4e6, -5e5, 4.9e6)]:
            assert shift.transform(p) == Point3D(*p)

    def test_identity_tolerance(self):
        """Test near-identity shifts count as identity within a tolerance."""
        shift = DatumTransform(Wgs84ConversionInfo(dx=1e-4, ppm=1e-5))
        assert not shift.is_identity()
        assert shift.is_identity(tolerance=1e-3)
        assert not shift.is_identity(tolerance=1e-5)

    def test_pure_translation(self):
        """Test a pure translation moves the origin by the offsets."""
        shift = DatumTransform(Wgs84ConversionInfo(dx=100.0, dy=-50.0, dz=20.0))
        assert shift.transform((0.0, 0.0, 0.0)) == Point3D(100.0, -50.0, 20.0)
        assert shift.inverse().transform((100.0, -50.0, 20.0)) == Point3D(0.0, 0.0, 0.0)

    def test_formula(self):
        """Test the small-angle formula term by term."""
        shift = DatumTransform(OSGB36_SHIFT)
        v = shift.coefficients
        x, y, z = 3.9e6, -1.0e4, 4.97e6
        expected = (
            v[0] * x - v[3] * y + v[2] * z + v[4],
            v[3] * x + v[0] * y - v[1] * z + v[5],
            -v[2] * x + v[1] * y + v[0] * z + v[6],
        )
        assert shift.transform((x, y, z)).ordinates == pytest.approx(expected, rel=0, abs=1e-9)

    def test_input_not_modified(self):
        """Test transform never writes into its input."""
        shift = DatumTransform(DHDN_SHIFT)
        point = Point3D(1.0, 2.0, 3.0)
        arr = create_geocentric_points(10)
        original = arr.copy()

        shift.transform(point)
        shift.transform_array(arr)
        assert point == Point3D(1.0, 2.0, 3.0)
        assert np.array_equal(arr, original)

    def test_derivative_is_helmert_matrix(self):
        """Test the Jacobian matches a finite difference."""
        shift = DatumTransform(DHDN_SHIFT)
        p = np.array([4.0e6, 6.0e5, 4.9e6])
        jacobian = shift.derivative(p)
        assert jacobian.shape == (3, 3)
        for axis in range(3):
            step = np.zeros(3)
            step[axis] = 1.0
            diff = shift.transform(p + step).to_array() - shift.transform(p).to_array()
            assert np.allclose(jacobian[:, axis], diff, atol=1e-6)


class TestDatumInverse:
    """Test inverse() and invert() semantics."""

    def test_round_trip(self):
        """Test inverse(transform(p)) recovers p."""
        points = create_geocentric_points()
        for info in (ED50_SHIFT, OSGB36_SHIFT, DHDN_SHIFT):
            RoundTripVerifier.assert_round_trip(DatumTransform(info), points, rtol=0, atol=1e-6)

    def test_inverse_of_inverse_is_self(self):
        """Test the memoized inverse links back to the original."""
        shift = DatumTransform(OSGB36_SHIFT)
        inverse = shift.inverse()
        assert inverse is not shift
        assert inverse.is_inverse
        assert inverse.inverse() is shift
        assert shift.inverse() is inverse

    def test_inverse_shares_parameters(self):
        """Test the inverse reuses the same coefficient vector."""
        shift = DatumTransform(OSGB36_SHIFT)
        assert shift.inverse().coefficients is shift.coefficients

    def test_invert_in_place(self):
        """Test invert flips direction and twice restores it."""
        shift = DatumTransform(ED50_SHIFT)
        p = (4.0e6, 5.0e5, 4.9e6)
        forward = shift.transform(p)

        shift.invert()
        assert shift.is_inverse
        assert shift.transform(forward).almost_equal(p, rtol=0, atol=1e-9)

        shift.invert()
        assert not shift.is_inverse
        assert shift.transform(p) == forward

    def test_invert_drops_cached_inverse(self):
        """Test inverse() after invert() still returns the opposite direction."""
        shift = DatumTransform(OSGB36_SHIFT)
        before = shift.inverse()
        shift.invert()

        after = shift.inverse()
        assert after is not before
        assert after.is_inverse != shift.is_inverse
        assert not after.is_inverse
        # The old inverse no longer points back to the flipped instance
        assert before.inverse() is not shift

    def test_concurrent_inverse_built_once(self):
        """Test concurrent inverse() calls all receive the same object."""
        shift = DatumTransform(DHDN_SHIFT)
        results = []

        def worker():
            results.append(shift.inverse())

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 16
        assert all(r is results[0] for r in results)

    def test_reverse_derivative(self):
        """Test the reverse Jacobian inverts the forward one."""
        shift = DatumTransform(OSGB36_SHIFT)
        p = (3.9e6, -1.0e4, 4.97e6)
        forward = shift.derivative(p)
        reverse = shift.inverse().derivative(shift.transform(p))
        assert np.allclose(reverse @ forward, np.eye(3), atol=1e-12)


class TestDatumBatch:
    """Test list and array paths."""

    def test_transform_list_order(self):
        """Test transform_list preserves order and length."""
        shift = DatumTransform(ED50_SHIFT)
        points = [(float(i), 0.0, 0.0) for i in range(5)]
        result = shift.transform_list(points)
        assert len(result) == 5
        assert [p.x for p in result] == [i - 87.0 for i in range(5)]

    def test_transform_list_fails_whole_batch(self):
        """Test a bad element aborts the batch."""
        shift = DatumTransform(ED50_SHIFT)
        with pytest.raises(UnsupportedPointTypeError):
            shift.transform_list([(0.0, 0.0, 0.0), (1.0, 2.0)])

    def test_array_matches_single(self):
        """Test Numba kernels agree with the per-point path in both directions."""
        points = create_geocentric_points(200)
        shift = DatumTransform(DHDN_SHIFT)
        RoundTripVerifier.assert_batch_equivalent(shift, points)
        RoundTripVerifier.assert_batch_equivalent(shift.inverse(), points)

    def test_transform_ordinates(self):
        """Test packed ordinates match per-point results."""
        shift = DatumTransform(ED50_SHIFT)
        packed = shift.transform_ordinates([0.0, 0.0, 0.0, 1.0, 2.0, 3.0])
        assert packed == [-87.0, -98.0, -121.0, -86.0, -96.0, -118.0]

    def test_empty_array(self):
        """Test an empty batch returns an empty result."""
        result = DatumTransform(ED50_SHIFT).transform_array(np.empty((0, 3)))
        assert result.shape == (0, 3)


class TestDatumErrors:
    """Test error reporting."""

    def test_2d_point_rejected(self):
        """Test a 2D point raises UnsupportedPointTypeError."""
        shift = DatumTransform(ED50_SHIFT)
        with pytest.raises(UnsupportedPointTypeError, match="3D point"):
            shift.transform((1.0, 2.0))
        with pytest.raises(UnsupportedPointTypeError):
            shift.transform_array(np.zeros((4, 2)))

    def test_extra_ordinates_are_dimension_mismatch(self):
        """Test points with more than three ordinates raise DimensionMismatchError."""
        shift = DatumTransform(ED50_SHIFT)
        with pytest.raises(DimensionMismatchError, match="expected 3D point, got 4D"):
            shift.transform((1.0, 2.0, 3.0, 4.0))
        with pytest.raises(DimensionMismatchError):
            shift.transform_array(np.zeros((2, 4)))
        with pytest.raises(DimensionMismatchError, match="multiple of dimension 3"):
            shift.transform_ordinates([1.0, 2.0, 3.0, 4.0])
        assert not issubclass(DimensionMismatchError, UnsupportedPointTypeError)

    def test_unsupported_point_is_type_error(self):
        """Test the error still reads as a TypeError to generic callers."""
        with pytest.raises(TypeError):
            DatumTransform(ED50_SHIFT).transform((1.0, 2.0))

    def test_wkt_not_supported(self):
        """Test WKT and XML output raise NotSupportedError."""
        shift = DatumTransform(ED50_SHIFT)
        with pytest.raises(NotSupportedError, match="WKT"):
            _ = shift.wkt
        with pytest.raises(NotImplementedError, match="XML"):
            _ = shift.xml

    def test_rejects_non_info(self):
        """Test construction needs Wgs84ConversionInfo."""
        with pytest.raises(TypeError, match="Wgs84ConversionInfo"):
            DatumTransform((1, 2, 3))

    def test_non_invertible_error_type(self):
        """Test NonInvertibleError is a ValueError."""
        assert issubclass(NonInvertibleError, ValueError)
