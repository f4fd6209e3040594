"""Packed-ordinate helpers and convex hull propagation.

Hull propagation strategy for non-linear transforms:

1. The source hull is covered by simplices: its boundary facets when it is
   full-dimensional (edges in 2D, triangles in 3D), or a triangulation of the
   whole polytope when it is flat or when the transform raises the dimension
   (a 2D region mapped onto a curved surface bulges past the image of its
   boundary). Triangles are swept by three families of segments parallel to
   their sides, ``2 * edge_samples`` segments per family.
2. Every segment is clipped to the transform's domain band and sampled at
   ``2 * edge_samples + 1`` evenly spaced points. Where the band cuts the
   hull, the cut face is covered and sampled the same way.
3. The samples are mapped through the transform. For each pair of adjacent
   even samples, the odd sample between them measures how far the image
   curve bows away from its chord; the largest bow over all segments is the
   curvature margin.
4. The image hull vertices are offset by ``margin * sqrt(D)`` along each
   axis in both directions, which contains the Minkowski sum of the sampled
   image with a ball of radius ``margin``, and reduced again with Qhull.

Facets with four or more vertices (hulls above 3D) are sampled through their
triangles only.

For affine transforms the image of a convex hull is exactly the convex hull
of the mapped vertices, so only the final reduction applies.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Sequence

import numpy as np
from scipy.spatial import ConvexHull, Delaunay, QhullError

from crsmod.errors import DimensionMismatchError
from crsmod.transform.domain import DomainBand

logger = logging.getLogger(__name__)

type Segment = tuple[np.ndarray, np.ndarray]

# Relative singular value below which a hull direction counts as flat
_RANK_TOLERANCE = 1e-10

# Relative distance within which a clipped endpoint lies on a band limit
_CUT_TOLERANCE = 1e-9


def ordinates_to_array(ordinates: Sequence[float] | np.ndarray, dimension: int) -> np.ndarray:
    """Unpack ``(x0, y0, x1, y1, ...)`` into an [N, dimension] float64 array.

    :raises DimensionMismatchError: If the length is not a multiple of dimension
    """
    arr = np.array(ordinates, dtype=np.float64).ravel()
    if arr.size % dimension != 0:
        raise DimensionMismatchError(
            f"{arr.size} ordinates is not a multiple of dimension {dimension}"
        )
    return arr.reshape(-1, dimension)


def array_to_ordinates(points: np.ndarray) -> list[float]:
    """Pack an [N, D] array into a flat list of floats."""
    return points.ravel().tolist()


def _qhull(factory, points: np.ndarray):
    try:
        return factory(points)
    except QhullError:
        # Nearly flat input: joggle and retry
        return factory(points, qhull_options="QJ")


def covering_simplices(vertices: np.ndarray, solid: bool = False) -> list[np.ndarray]:
    """Simplices covering the boundary of the vertices' hull, or all of it when solid.

    :param vertices: Hull vertices [N, D]
    :param solid: Cover the whole hull instead of its boundary
    :returns: List of [k, D] vertex groups (k = 1 for a point, 2 for a
        segment, 3 for a triangle, D for a facet)
    """
    n, dim = vertices.shape
    if n == 1:
        return [vertices]

    centered = vertices - vertices.mean(axis=0)
    _, singular, basis = np.linalg.svd(centered, full_matrices=False)
    if singular[0] == 0.0:
        return [vertices[:1]]
    rank = int(np.sum(singular > singular[0] * _RANK_TOLERANCE))
    coords = centered @ basis[:rank].T

    if rank == 1:
        order = np.argsort(coords[:, 0])
        return [vertices[[order[0], order[-1]]]]
    if rank == dim and not solid:
        hull = _qhull(ConvexHull, coords)
        return [vertices[simplex] for simplex in hull.simplices]

    # Flat hull inside a higher-dimensional space, or a solid: tile all of it
    outline = _qhull(ConvexHull, coords).vertices
    tiles = _qhull(Delaunay, coords[outline])
    return [vertices[outline[simplex]] for simplex in tiles.simplices]


def simplex_segments(simplex: np.ndarray, levels: int) -> list[Segment]:
    """Segments sweeping a simplex.

    Points and segments are returned as they are. Every vertex triple of a
    larger simplex is swept by three families of ``levels`` segments, each
    family parallel to one side of the triangle.
    """
    k = simplex.shape[0]
    if k == 1:
        return [(simplex[0], simplex[0])]
    if k == 2:
        return [(simplex[0], simplex[1])]

    segments = []
    for i, j, m in itertools.combinations(range(k), 3):
        a, b, c = simplex[i], simplex[j], simplex[m]
        for p, q, r in ((a, b, c), (b, c, a), (c, a, b)):
            for step in range(1, levels + 1):
                t = step / levels
                segments.append((p + t * (q - p), p + t * (r - p)))
    return segments


def densify_hull(
    vertices: np.ndarray,
    band: DomainBand | None,
    edge_samples: int,
    solid: bool = False,
) -> list[np.ndarray]:
    """Sample the boundary of a hull intersected with a domain band.

    :param vertices: Hull vertices [N, D]
    :param band: Domain band, or None for an unbounded domain
    :param edge_samples: Chord intervals per segment; triangles are swept by
        twice as many segments per family
    :param solid: Sample the whole hull rather than its boundary
    :returns: One [2 * edge_samples + 1, D] array per surviving segment
        ([1, D] for a single point); empty if the hull misses the domain
    """
    steps = np.linspace(0.0, 1.0, 2 * edge_samples + 1)[:, np.newaxis]
    levels = 2 * edge_samples
    sampled: list[np.ndarray] = []
    cuts: dict[float, list[np.ndarray]] = {band.lo: [], band.hi: []} if band else {}

    def add(segments: list[Segment], collect_cuts: bool) -> None:
        for start, end in segments:
            if band is not None:
                clipped = band.clip_segment(start, end)
                if clipped is None:
                    continue
                start, end = clipped
                if collect_cuts:
                    for endpoint in clipped:
                        for limit, points in cuts.items():
                            if abs(endpoint[band.axis] - limit) <= _CUT_TOLERANCE * max(1.0, abs(limit)):
                                points.append(endpoint)
            if np.array_equal(start, end):
                sampled.append(start[np.newaxis, :].copy())
            else:
                sampled.append((1.0 - steps) * start + steps * end)

    for simplex in covering_simplices(vertices, solid):
        add(simplex_segments(simplex, levels), collect_cuts=True)

    for limit, points in cuts.items():
        if len(points) < 2:
            continue
        face = np.unique(np.array(points), axis=0)
        face[:, band.axis] = limit
        for simplex in covering_simplices(face, solid):
            add(simplex_segments(simplex, levels), collect_cuts=False)

    if band is not None:
        sampled = [band.snap(samples) for samples in sampled]
    return sampled


def curvature_margin(images: list[np.ndarray]) -> float:
    """Largest distance between an image midpoint and its chord midpoint.

    :param images: Mapped segment samples as returned by :func:`densify_hull`
    """
    margin = 0.0
    for image in images:
        if image.shape[0] < 3:
            continue
        chord_mid = 0.5 * (image[0:-2:2] + image[2::2])
        deviation = np.linalg.norm(image[1::2] - chord_mid, axis=1)
        margin = max(margin, float(deviation.max()))
    return margin


def expand_hull(points: np.ndarray, margin: float) -> np.ndarray:
    """Offset every point by ``margin * sqrt(D)`` along each axis, both ways.

    :returns: [N * 2D, D] array, or the input unchanged for a zero margin
    """
    if margin <= 0.0:
        return points
    dim = points.shape[1]
    radius = margin * math.sqrt(dim)
    offsets = np.vstack([np.eye(dim), -np.eye(dim)]) * radius
    return (points[:, np.newaxis, :] + offsets[np.newaxis, :, :]).reshape(-1, dim)


def reduce_to_hull(points: np.ndarray) -> np.ndarray:
    """Keep only the convex hull vertices of a point cloud.

    Degenerate clouds (collinear, coplanar in 3D, too few points) cannot be
    triangulated by Qhull and are returned deduplicated instead, which is
    still a valid (if non-minimal) hull description.
    """
    unique = np.unique(points, axis=0)
    dim = unique.shape[1]
    if dim == 1:
        return np.array([[unique.min()], [unique.max()]]) if unique.shape[0] > 1 else unique
    if unique.shape[0] <= dim + 1:
        return unique
    try:
        hull = ConvexHull(unique)
    except QhullError:
        logger.debug("[reduce_to_hull] Degenerate point set (%d points), keeping all", len(unique))
        return unique
    return unique[np.sort(hull.vertices)]
