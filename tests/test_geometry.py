"""Tests for points and bounding boxes."""

import numpy as np
import pytest

from crsmod import (
    AffineTransform,
    BoundingBox,
    DimensionMismatchError,
    MercatorProjection,
    Point,
    Point2D,
    Point3D,
    UnsupportedPointTypeError,
    as_point,
    make_point,
)


class TestPoint:
    """Test Point value semantics."""

    def test_named_accessors(self):
        """Test x/y/z accessors on the concrete classes."""
        p = Point3D(1.0, 2.0, 3.0)
        assert (p.x, p.y, p.z) == (1.0, 2.0, 3.0)
        assert p.to_2d() == Point2D(1.0, 2.0)

    def test_immutable(self):
        """Test that ordinates cannot be reassigned."""
        p = Point2D(1.0, 2.0)
        with pytest.raises(AttributeError, match="immutable"):
            p.x = 5.0

    def test_equality_across_classes(self):
        """Test component-wise equality between Point and Point3D."""
        assert Point(1.0, 2.0, 3.0) == Point3D(1.0, 2.0, 3.0)
        assert Point2D(1.0, 2.0) != Point3D(1.0, 2.0, 0.0)
        assert hash(Point(1.0, 2.0)) == hash(Point2D(1.0, 2.0))

    def test_index_and_iteration(self):
        """Test sequence behaviour."""
        p = Point(4.0, 5.0, 6.0, 7.0)
        assert p.dimension == 4
        assert p[3] == 7.0
        assert list(p) == [4.0, 5.0, 6.0, 7.0]

    def test_empty_point_rejected(self):
        """Test that a point needs at least one ordinate."""
        with pytest.raises(DimensionMismatchError):
            Point()

    def test_make_point_picks_class(self):
        """Test make_point returns the richest class for the length."""
        assert type(make_point([1, 2])) is Point2D
        assert type(make_point([1, 2, 3])) is Point3D
        assert type(make_point([1, 2, 3, 4])) is Point

    def test_as_point_coercion(self):
        """Test as_point accepts tuples, lists, arrays and promotes Points."""
        assert as_point((1, 2)) == Point2D(1.0, 2.0)
        assert isinstance(as_point(np.array([1.0, 2.0, 3.0])), Point3D)
        assert isinstance(as_point(Point(1.0, 2.0, 3.0)), Point3D)

    def test_as_point_rejects_bad_input(self):
        """Test non-flat or non-numeric input raises UnsupportedPointTypeError."""
        with pytest.raises(UnsupportedPointTypeError, match="flat sequence"):
            as_point(np.zeros((2, 3)))
        with pytest.raises(UnsupportedPointTypeError):
            as_point(["a", "b"])

    def test_almost_equal(self):
        """Test tolerance comparison."""
        p = Point3D(1.0, 2.0, 3.0)
        assert p.almost_equal((1.0 + 1e-12, 2.0, 3.0))
        assert not p.almost_equal((1.1, 2.0, 3.0))
        assert not p.almost_equal((1.0, 2.0))


class TestBoundingBox:
    """Test BoundingBox construction and predicates."""

    def test_from_points(self):
        """Test the box spans all points."""
        box = BoundingBox.from_points([(0, 5), (3, -1), (2, 2)])
        assert box.min_corner == (0.0, -1.0)
        assert box.max_corner == (3.0, 5.0)
        assert box.width == 3.0
        assert box.height == 6.0
        assert box.center == Point2D(1.5, 2.0)

    def test_empty_box(self):
        """Test empty box is neutral for join and contains nothing."""
        empty = BoundingBox.empty(2)
        box = BoundingBox((0, 0), (1, 1))
        assert empty.is_empty
        assert not empty.contains((0, 0))
        assert empty.join(box) == box
        assert empty.corners().shape == (0, 2)

    def test_contains_and_intersects(self):
        """Test boundary-inclusive containment and overlap."""
        box = BoundingBox((0, 0), (10, 10))
        assert box.contains((10, 0))
        assert not box.contains((10.5, 0))
        assert box.contains((10.5, 0), tolerance=1.0)
        assert box.contains(BoundingBox((1, 1), (2, 2)))
        assert box.intersects(BoundingBox((9, 9), (20, 20)))
        assert not box.intersects(BoundingBox((11, 11), (20, 20)))

    def test_dimension_mismatch(self):
        """Test mixed dimensions are rejected."""
        box = BoundingBox((0, 0), (1, 1))
        with pytest.raises(DimensionMismatchError):
            box.contains((0, 0, 0))
        with pytest.raises(DimensionMismatchError):
            BoundingBox((0, 0), (1, 1, 1))

    def test_corners(self):
        """Test 2**D corners are produced."""
        box = BoundingBox((0, 0, 0), (1, 2, 3))
        corners = box.corners()
        assert corners.shape == (8, 3)
        assert len(box.to_ordinates()) == 24

    def test_grow(self):
        """Test growing every side."""
        box = BoundingBox((0, 0), (1, 1)).grow(0.5)
        assert box.min_corner == (-0.5, -0.5)
        assert box.max_corner == (1.5, 1.5)


class TestBoundingBoxTransformed:
    """Test box propagation through transforms."""

    def test_affine_exact(self):
        """Test an affine map gives the exact image box."""
        box = BoundingBox((0, 0), (2, 1))
        moved = box.transformed(AffineTransform.from_translation(10.0, -5.0))
        assert np.allclose(moved.min_corner, (10.0, -5.0))
        assert np.allclose(moved.max_corner, (12.0, -4.0))

    def test_mercator_contains_images(self):
        """Test the projected box contains every projected sample."""
        merc = MercatorProjection()
        box = BoundingBox((-10.0, 30.0), (20.0, 60.0))
        projected = box.transformed(merc)

        rng = np.random.default_rng(0)
        samples = rng.uniform(box.min_corner, box.max_corner, size=(200, 2))
        images = merc.transform_array(samples)
        assert np.all(images >= np.array(projected.min_corner) - 1e-6)
        assert np.all(images <= np.array(projected.max_corner) + 1e-6)

    def test_box_outside_domain_is_empty(self):
        """Test a box entirely beyond the latitude limit maps to an empty box."""
        box = BoundingBox((0.0, 86.0), (10.0, 89.0))
        assert box.transformed(MercatorProjection()).is_empty
