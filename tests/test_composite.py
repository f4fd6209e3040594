"""Tests for CompositeTransform and concatenate."""

import numpy as np
import pytest

from crsmod import (
    AffineTransform,
    CompositeTransform,
    DatumTransform,
    DimensionMismatchError,
    GeocentricTransform,
    IdentityTransform,
    MercatorProjection,
    concatenate,
)
from crsmod.config import ED50_SHIFT, INTERNATIONAL_1924, OSGB36_SHIFT
from crsmod.verification import RoundTripVerifier


def create_datum_then_drop_height() -> CompositeTransform:
    """3D -> 3D datum shift followed by a 3D -> 2D projection stage."""
    return CompositeTransform(DatumTransform(ED50_SHIFT), AffineTransform.select_axes(3, [0, 1]))


class TestCompositeConstruction:
    """Test stage validation."""

    def test_dimension_mismatch_rejected(self):
        """Test adjacent stages must agree on dimensions."""
        with pytest.raises(DimensionMismatchError, match="stage 1 expects 2D"):
            CompositeTransform(DatumTransform(ED50_SHIFT), MercatorProjection())

    def test_needs_two_stages(self):
        """Test a single stage is rejected."""
        with pytest.raises(ValueError, match="at least two"):
            CompositeTransform(DatumTransform(ED50_SHIFT))

    def test_rejects_non_transform(self):
        """Test stages must be MathTransforms."""
        with pytest.raises(TypeError):
            CompositeTransform(DatumTransform(ED50_SHIFT), "not a transform")

    def test_dimensions(self):
        """Test composite dimensions come from the outer stages."""
        chain = create_datum_then_drop_height()
        assert chain.dim_source == 3
        assert chain.dim_target == 2
        assert len(chain) == 2


class TestCompositeMapping:
    """Test point mapping through chains."""

    def test_equals_sequential_application(self):
        """Test composite output equals B(A(p)) for every point."""
        a = DatumTransform(ED50_SHIFT)
        b = AffineTransform.select_axes(3, [0, 1])
        chain = CompositeTransform(a, b)

        rng = np.random.default_rng(3)
        for p in rng.normal(size=(20, 3)) * 6e6:
            assert chain.transform(p) == b.transform(a.transform(p))

    def test_array_matches_single(self):
        """Test batch path agrees with per-point path."""
        chain = create_datum_then_drop_height()
        points = np.random.default_rng(4).normal(size=(50, 3)) * 6e6
        RoundTripVerifier.assert_batch_equivalent(chain, points)

    def test_geographic_datum_round_trip(self):
        """Test geographic -> geocentric -> datum -> geographic round trip."""
        chain = CompositeTransform(
            GeocentricTransform(INTERNATIONAL_1924),
            DatumTransform(ED50_SHIFT),
            GeocentricTransform().inverse(),
        )
        points = np.array([[2.35, 48.85, 35.0], [-3.7, 40.4, 650.0], [13.4, 52.5, 0.0]])
        RoundTripVerifier.assert_round_trip(chain, points, rtol=0, atol=1e-7)

    def test_ed50_shift_magnitude(self):
        """Test ED50 -> WGS84 moves Paris by roughly a hundred metres."""
        chain = CompositeTransform(
            GeocentricTransform(INTERNATIONAL_1924),
            DatumTransform(ED50_SHIFT),
            GeocentricTransform().inverse(),
        )
        lon, lat, _ = chain.transform((2.35, 48.85, 0.0))
        dlon_m = (lon - 2.35) * 111_320 * np.cos(np.radians(48.85))
        dlat_m = (lat - 48.85) * 111_320
        assert 50 < np.hypot(dlon_m, dlat_m) < 200


class TestCompositeInverse:
    """Test inverse and invert on chains."""

    def test_inverse_reverses_stages(self):
        """Test the inverse applies stage inverses in reverse order."""
        a = DatumTransform(OSGB36_SHIFT)
        b = AffineTransform.from_translation(10.0, 20.0, 30.0)
        chain = CompositeTransform(a, b)
        inverse = chain.inverse()

        assert [type(s) for s in inverse.stages] == [AffineTransform, DatumTransform]
        assert all(s.is_inverse for s in inverse.stages)

        p = np.array([3.9e6, -1.0e4, 4.97e6])
        expected = a.inverse().transform(b.inverse().transform(p))
        assert inverse.transform(p).almost_equal(expected, rtol=0, atol=1e-9)
        assert inverse.inverse() is chain

    def test_invert_in_place(self):
        """Test invert flips the chain and restores it."""
        chain = CompositeTransform(DatumTransform(OSGB36_SHIFT), AffineTransform.from_scale(2.0))
        p = (3.9e6, -1.0e4, 4.97e6)
        forward = chain.transform(p)

        chain.invert()
        assert chain.transform(forward).almost_equal(p, rtol=0, atol=1e-8)
        chain.invert()
        assert chain.transform(p) == forward

    def test_not_invertible_with_projection_stage(self):
        """Test a composite with a non-invertible stage reports it."""
        chain = create_datum_then_drop_height()
        assert not chain.is_invertible


class TestCompositeDerivative:
    """Test chain rule."""

    def test_chain_rule(self):
        """Test the composite Jacobian is the product of stage Jacobians."""
        geo = GeocentricTransform()
        shift = DatumTransform(OSGB36_SHIFT)
        chain = CompositeTransform(geo, shift)
        p = (-1.5, 52.0, 100.0)

        expected = shift.derivative(geo.transform(p)) @ geo.derivative(p)
        assert np.allclose(chain.derivative(p), expected)

    def test_shape(self):
        """Test the Jacobian shape is (dim_target, dim_source)."""
        assert create_datum_then_drop_height().derivative((1.0, 2.0, 3.0)).shape == (2, 3)


class TestConcatenate:
    """Test concatenate flattening and simplification."""

    def test_flattens_nested(self):
        """Test nested composites become one flat chain."""
        a = AffineTransform.from_translation(1.0, 0.0, 0.0)
        b = AffineTransform.from_translation(0.0, 1.0, 0.0)
        c = DatumTransform(ED50_SHIFT)
        result = concatenate(CompositeTransform(a, b), c)
        assert isinstance(result, CompositeTransform)
        assert result.stages == (a, b, c)

    def test_drops_identities(self):
        """Test identity stages are removed."""
        shift = DatumTransform(ED50_SHIFT)
        assert concatenate(IdentityTransform(3), shift, IdentityTransform(3)) is shift

    def test_all_identities(self):
        """Test an all-identity chain returns an identity."""
        assert concatenate(IdentityTransform(2), IdentityTransform(2)).is_identity()

    def test_identity_tolerance(self):
        """Test the tolerance is passed to every stage."""
        chain = CompositeTransform(
            AffineTransform.from_translation(1e-9, 0.0), AffineTransform.from_translation(0.0, 1e-9)
        )
        assert not chain.is_identity()
        assert chain.is_identity(tolerance=1e-6)

    def test_mismatch(self):
        """Test dimension checks still apply."""
        with pytest.raises(DimensionMismatchError):
            concatenate(IdentityTransform(3), MercatorProjection())

    def test_empty(self):
        """Test at least one transform is needed."""
        with pytest.raises(ValueError):
            concatenate()
