"""Immutable coordinate tuples.

Points are plain value objects: a fixed number of float ordinates, index
access, and component-wise equality. ``Point2D`` and ``Point3D`` add named
accessors; a transform that needs geocentric input checks for ``Point3D``.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import numpy as np

from crsmod.errors import DimensionMismatchError, UnsupportedPointTypeError

# Type aliases (Python 3.12+ syntax)
type PointLike = Point | Sequence[float] | np.ndarray


class Point:
    """N-dimensional point with read-only ordinates."""

    __slots__ = ("_ordinates",)

    def __init__(self, *ordinates: float) -> None:
        if not ordinates:
            raise DimensionMismatchError("Point requires at least one ordinate")
        object.__setattr__(self, "_ordinates", tuple(float(o) for o in ordinates))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def ordinates(self) -> tuple[float, ...]:
        return self._ordinates

    @property
    def dimension(self) -> int:
        return len(self._ordinates)

    def __len__(self) -> int:
        return len(self._ordinates)

    def __getitem__(self, index: int) -> float:
        return self._ordinates[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self._ordinates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self._ordinates == other._ordinates

    def __hash__(self) -> int:
        return hash(self._ordinates)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(o) for o in self._ordinates)})"

    def to_array(self) -> np.ndarray:
        """Return ordinates as a new float64 array."""
        return np.array(self._ordinates, dtype=np.float64)

    def almost_equal(self, other: PointLike, rtol: float = 1e-9, atol: float = 1e-9) -> bool:
        """Compare ordinates within tolerance.

        :param other: Point or ordinate sequence
        :param rtol: Relative tolerance
        :param atol: Absolute tolerance
        :returns: False when dimensions differ
        """
        other = as_point(other)
        if other.dimension != self.dimension:
            return False
        return bool(np.allclose(self._ordinates, other._ordinates, rtol=rtol, atol=atol))


class Point2D(Point):
    """Planar point (x, y)."""

    __slots__ = ()

    def __init__(self, x: float, y: float) -> None:
        super().__init__(x, y)

    @property
    def x(self) -> float:
        return self._ordinates[0]

    @property
    def y(self) -> float:
        return self._ordinates[1]


class Point3D(Point):
    """Spatial point (x, y, z)."""

    __slots__ = ()

    def __init__(self, x: float, y: float, z: float) -> None:
        super().__init__(x, y, z)

    @property
    def x(self) -> float:
        return self._ordinates[0]

    @property
    def y(self) -> float:
        return self._ordinates[1]

    @property
    def z(self) -> float:
        return self._ordinates[2]

    def to_2d(self) -> Point2D:
        """Drop the z ordinate."""
        return Point2D(self._ordinates[0], self._ordinates[1])


def make_point(ordinates: Sequence[float]) -> Point:
    """Build the most specific point class for the given ordinates."""
    n = len(ordinates)
    if n == 2:
        return Point2D(*ordinates)
    if n == 3:
        return Point3D(*ordinates)
    return Point(*ordinates)


def as_point(value: PointLike) -> Point:
    """Coerce a point, tuple, list or 1D array into a :class:`Point`.

    Generic ``Point`` instances of length 2 or 3 are promoted to
    ``Point2D``/``Point3D`` so transforms can rely on the richer type.

    :raises UnsupportedPointTypeError: If value is not a flat numeric sequence
    """
    if isinstance(value, Point2D | Point3D):
        return value
    if isinstance(value, Point):
        return make_point(value.ordinates)
    try:
        arr = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise UnsupportedPointTypeError(
            f"Cannot interpret {type(value).__name__} as a point"
        ) from exc
    if arr.ndim != 1:
        raise UnsupportedPointTypeError(f"Point must be a flat sequence, got shape {arr.shape}")
    return make_point(arr.tolist())
