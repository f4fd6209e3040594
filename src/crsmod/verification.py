"""Round-trip and batch-equivalence checks for transforms.

Example:
    >>> from crsmod.verification import RoundTripVerifier
    >>>
    >>> RoundTripVerifier.assert_round_trip(transform, points, atol=1e-6)
    >>> RoundTripVerifier.assert_batch_equivalent(transform, points)
"""

from __future__ import annotations

import logging

import numpy as np

from crsmod.transform.base import ArrayLike, MathTransform

logger = logging.getLogger(__name__)


class RoundTripVerifier:
    """Utilities for verifying transform/inverse and batch consistency."""

    @staticmethod
    def round_trip(transform: MathTransform, points: ArrayLike) -> np.ndarray:
        """Push points forward then back through ``transform.inverse()``.

        :param transform: Invertible transform
        :param points: Source points [N, dim_source]
        :return: Recovered points [N, dim_source]
        """
        forward = transform.transform_array(points)
        return transform.inverse().transform_array(forward)

    @staticmethod
    def max_round_trip_error(transform: MathTransform, points: ArrayLike) -> float:
        """Largest absolute ordinate difference after a round trip."""
        original = np.asarray(points, dtype=np.float64)
        if original.size == 0:
            return 0.0
        recovered = RoundTripVerifier.round_trip(transform, original)
        return float(np.max(np.abs(recovered - original)))

    @staticmethod
    def assert_round_trip(
        transform: MathTransform,
        points: ArrayLike,
        rtol: float = 1e-9,
        atol: float = 1e-9,
    ) -> None:
        """Assert ``inverse(transform(p))`` recovers every point.

        :raises AssertionError: If any ordinate drifts beyond tolerance

        Example:
            >>> RoundTripVerifier.assert_round_trip(DatumTransform(OSGB36_SHIFT), pts, atol=1e-6)
        """
        original = np.asarray(points, dtype=np.float64)
        recovered = RoundTripVerifier.round_trip(transform, original)
        np.testing.assert_allclose(
            recovered,
            original,
            rtol=rtol,
            atol=atol,
            err_msg=f"Round trip through {transform!r} does not recover the input",
        )
        logger.debug(
            "[RoundTripVerifier] Round trip verified: %d points, max error=%.3g",
            original.shape[0],
            float(np.max(np.abs(recovered - original))) if original.size else 0.0,
        )

    @staticmethod
    def assert_batch_equivalent(
        transform: MathTransform,
        points: ArrayLike,
        rtol: float = 1e-12,
        atol: float = 1e-9,
    ) -> None:
        """Assert per-point, list and array paths give the same results.

        :raises AssertionError: If any path disagrees
        """
        original = np.asarray(points, dtype=np.float64)
        single = np.array([transform.transform(row).ordinates for row in original])
        listed = np.array([p.ordinates for p in transform.transform_list(list(original))])
        batched = transform.transform_array(original)

        if len(listed) != len(original):
            raise AssertionError(
                f"Length mismatch: transform_list returned {len(listed)} of {len(original)} points"
            )
        np.testing.assert_allclose(
            listed, single, rtol=rtol, atol=atol, err_msg="transform_list differs from transform"
        )
        np.testing.assert_allclose(
            batched, single, rtol=rtol, atol=atol, err_msg="transform_array differs from transform"
        )
        logger.debug("[RoundTripVerifier] Batch equivalence verified: %d points", len(original))
