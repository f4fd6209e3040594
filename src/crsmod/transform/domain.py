"""Domain classification for convex hulls.

Transforms in crsmod have domains that are either the whole space or a band
on one axis (latitude limits). Bands are convex, so a convex hull is fully
inside iff all its vertices are, and misses the band iff every vertex lies
beyond the same edge. That makes classification exact from the vertices
alone, without sampling the hull interior.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np


class DomainFlags(enum.IntFlag):
    """Flags classifying a convex hull against a transform's valid domain.

    ``INSIDE | OUTSIDE`` means the hull straddles the domain boundary. An
    empty hull carries no flags.
    """

    INSIDE = 1
    OUTSIDE = 2
    DISCONTINUOUS = 4


@dataclass(frozen=True)
class DomainBand:
    """Valid domain ``lo <= p[axis] <= hi`` (all other axes unbounded).

    Attributes:
        axis: Ordinate index the band constrains
        lo: Lower limit (inclusive)
        hi: Upper limit (inclusive)
        label: Name of the constrained ordinate, used in error messages
    """

    axis: int
    lo: float
    hi: float
    label: str = "ordinate"

    def mask(self, points: np.ndarray) -> np.ndarray:
        """Boolean mask of rows of an [N, D] array inside the band."""
        values = points[:, self.axis]
        return (values >= self.lo) & (values <= self.hi)

    def classify(self, points: np.ndarray) -> DomainFlags:
        """Classify the convex hull of the given vertices.

        :param points: Hull vertices [N, D]
        :returns: INSIDE, OUTSIDE, or both (no flags for N == 0)
        """
        if points.shape[0] == 0:
            return DomainFlags(0)
        values = points[:, self.axis]
        vmin = float(values.min())
        vmax = float(values.max())
        if vmin >= self.lo and vmax <= self.hi:
            return DomainFlags.INSIDE
        if vmax < self.lo or vmin > self.hi:
            return DomainFlags.OUTSIDE
        return DomainFlags.INSIDE | DomainFlags.OUTSIDE

    def clip_segment(
        self, a: np.ndarray, b: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray] | None:
        """Clip segment ``a -> b`` to the band.

        :returns: Clipped endpoints, or None if the segment misses the band
        """
        va = float(a[self.axis])
        vb = float(b[self.axis])
        t0, t1 = 0.0, 1.0
        delta = vb - va

        if delta == 0.0:
            if va < self.lo or va > self.hi:
                return None
        else:
            ta = (self.lo - va) / delta
            tb = (self.hi - va) / delta
            t0 = max(t0, min(ta, tb))
            t1 = min(t1, max(ta, tb))
            if t0 > t1:
                return None

        start = a + t0 * (b - a)
        end = a + t1 * (b - a)
        return self.snap(start[np.newaxis, :])[0], self.snap(end[np.newaxis, :])[0]

    def snap(self, points: np.ndarray) -> np.ndarray:
        """Clamp the band ordinate in place so rounding never leaves the band."""
        np.clip(points[:, self.axis], self.lo, self.hi, out=points[:, self.axis])
        return points
