"""Unified crsmod configuration.

This module provides a top-level configuration dataclass that contains
the transform and geodesy configurations as sub-attributes.
"""

from __future__ import annotations

from dataclasses import dataclass

from crsmod.config.geodesy import GeodesyConfig
from crsmod.config.operations import ParameterSpec
from crsmod.config.transform import TransformConfig


@dataclass(frozen=True)
class CrsmodConfig:
    """Top-level configuration containing all setting groups.

    Provides hierarchical access:
        CONFIG.transform.hull_edge_samples
        CONFIG.geodesy.max_iterations
    """

    transform: TransformConfig = TransformConfig()
    geodesy: GeodesyConfig = GeodesyConfig()

    def get_all_specs(self) -> dict[str, dict[str, ParameterSpec]]:
        """Get all specs organized by group."""
        return {
            "transform": self.transform.get_all_specs(),
            "geodesy": self.geodesy.get_all_specs(),
        }


CONFIG = CrsmodConfig()

TRANSFORM_CONFIG = CONFIG.transform
GEODESY_CONFIG = CONFIG.geodesy
