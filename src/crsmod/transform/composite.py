"""
CompositeTransform: an ordered chain of transforms applied as one.

The output space of each stage is the input space of the next. The reverse
direction applies the inverse of every stage in reverse order. Domain
classification and hull propagation are carried through the chain stage by
stage.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from itertools import pairwise

import numpy as np

from crsmod.errors import DimensionMismatchError
from crsmod.transform.base import MathTransform
from crsmod.transform.domain import DomainFlags
from crsmod.transform.hull import ordinates_to_array

logger = logging.getLogger(__name__)


def _check_chain(stages: Sequence[MathTransform]) -> None:
    for i, (prev, nxt) in enumerate(pairwise(stages)):
        if prev.dim_target != nxt.dim_source:
            raise DimensionMismatchError(
                f"Stage {i} outputs {prev.dim_target}D but stage {i + 1} expects {nxt.dim_source}D"
            )


class CompositeTransform(MathTransform):
    """Chain of two or more transforms.

    Example:
        >>> chain = CompositeTransform(
        ...     GeocentricTransform(),
        ...     DatumTransform(ED50_SHIFT),
        ...     GeocentricTransform().inverse(),
        ... )
        >>> chain.dim_source, chain.dim_target
        (3, 3)
    """

    def __init__(self, *stages: MathTransform) -> None:
        if len(stages) < 2:
            raise ValueError(f"CompositeTransform needs at least two stages, got {len(stages)}")
        for stage in stages:
            if not isinstance(stage, MathTransform):
                raise TypeError(f"Expected MathTransform stage, got {type(stage).__name__}")
        _check_chain(stages)
        super().__init__(stages[0].dim_source, stages[-1].dim_target)
        self._stages = tuple(stages)
        logger.debug(
            "[CompositeTransform] Created with %d stages: %s",
            len(stages),
            " -> ".join(type(s).__name__ for s in stages),
        )

    @property
    def stages(self) -> tuple[MathTransform, ...]:
        """Stages in application order for the current direction."""
        if self._is_inverse:
            return tuple(stage.inverse() for stage in reversed(self._stages))
        return self._stages

    @property
    def is_linear(self) -> bool:
        return all(stage.is_linear for stage in self._stages)

    @property
    def is_invertible(self) -> bool:
        return all(stage.is_invertible for stage in self._stages)

    def is_identity(self, tolerance: float | None = None) -> bool:
        return all(stage.is_identity(tolerance) for stage in self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    # ========================================================================
    # Mapping
    # ========================================================================

    def _forward(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        for stage in self._stages:
            ordinates = stage._map_ordinates(ordinates)
        return ordinates

    def _reverse(self, ordinates: tuple[float, ...]) -> tuple[float, ...]:
        for stage in self.stages:
            ordinates = stage._map_ordinates(ordinates)
        return ordinates

    def _forward_array(self, points: np.ndarray) -> np.ndarray:
        for stage in self._stages:
            points = stage.transform_array(points)
        return points

    def _reverse_array(self, points: np.ndarray) -> np.ndarray:
        for stage in self.stages:
            points = stage.transform_array(points)
        return points

    @staticmethod
    def _chain_derivative(stages: Sequence[MathTransform], ordinates: tuple[float, ...]) -> np.ndarray:
        """Chain rule: J = J_k(p_k) @ ... @ J_1(p_1)."""
        jacobian = np.eye(len(ordinates))
        for stage in stages:
            jacobian = stage.derivative(ordinates) @ jacobian
            ordinates = stage._map_ordinates(ordinates)
        return jacobian

    def _forward_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return self._chain_derivative(self._stages, ordinates)

    def _reverse_derivative(self, ordinates: tuple[float, ...]) -> np.ndarray:
        return self._chain_derivative(self.stages, ordinates)

    # ========================================================================
    # Domain and hull propagation
    # ========================================================================

    def get_domain_flags(self, ordinates: Sequence[float]) -> DomainFlags:
        """Classify a source hull against every stage in turn.

        The hull is propagated through each stage before the next stage
        classifies it. Propagation stops as soon as a stage reports the hull
        entirely outside its domain.
        """
        if ordinates_to_array(ordinates, self.dim_source).shape[0] == 0:
            return DomainFlags(0)

        flags = DomainFlags(0)
        hull = list(ordinates)
        for stage in self.stages:
            stage_flags = stage.get_domain_flags(hull)
            if not stage_flags & DomainFlags.INSIDE:
                return DomainFlags.OUTSIDE | (flags & DomainFlags.DISCONTINUOUS)
            flags |= stage_flags
            hull = stage.get_codomain_convex_hull(hull)
        return flags

    def get_codomain_convex_hull(
        self, ordinates: Sequence[float], edge_samples: int | None = None
    ) -> list[float]:
        hull = ordinates_to_array(ordinates, self.dim_source).ravel().tolist()
        for stage in self.stages:
            if not hull:
                return []
            hull = stage.get_codomain_convex_hull(hull, edge_samples)
        return hull

    def __repr__(self) -> str:
        inner = ", ".join(repr(stage) for stage in self.stages)
        return f"CompositeTransform([{inner}])"


def concatenate(*transforms: MathTransform) -> MathTransform:
    """Chain transforms, flattening nested composites and dropping identities.

    :returns: The single remaining transform, or a CompositeTransform
    :raises DimensionMismatchError: If adjacent dimensions do not agree
    """
    if not transforms:
        raise ValueError("concatenate() needs at least one transform")

    flat: list[MathTransform] = []
    for transform in transforms:
        if isinstance(transform, CompositeTransform):
            flat.extend(transform.stages)
        else:
            flat.append(transform)
    _check_chain(flat)

    kept = [t for t in flat if not t.is_identity()]
    if not kept:
        return flat[0]
    if len(kept) == 1:
        return kept[0]
    return CompositeTransform(*kept)
