"""Point and extent primitives consumed by the transform engine."""

from crsmod.geometry.bounds import BoundingBox
from crsmod.geometry.point import Point, Point2D, Point3D, as_point, make_point

__all__ = [
    "Point",
    "Point2D",
    "Point3D",
    "as_point",
    "make_point",
    "BoundingBox",
]
