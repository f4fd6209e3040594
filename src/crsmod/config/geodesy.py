"""Geodetic iteration configuration.

Inverse geocentric and inverse Mercator conversions solve for latitude
iteratively; these specs bound that iteration.
"""

from __future__ import annotations

from dataclasses import dataclass

from crsmod.config.operations import ParameterSpec


@dataclass(frozen=True)
class GeodesyConfig:
    """Configuration for iterative latitude solvers."""

    latitude_tolerance: ParameterSpec = ParameterSpec(
        name="latitude_tolerance",
        min_value=1e-15,
        max_value=1e-6,
        default=1e-12,
        description="Convergence threshold in radians",
    )

    max_iterations: ParameterSpec = ParameterSpec(
        name="max_iterations",
        min_value=1,
        max_value=100,
        default=20,
        description="Iteration cap before giving up on convergence",
    )

    def get_spec(self, name: str) -> ParameterSpec:
        """Get parameter spec by name."""
        return getattr(self, name)

    def get_all_specs(self) -> dict[str, ParameterSpec]:
        """Get all parameter specs as a dictionary."""
        return {
            "latitude_tolerance": self.latitude_tolerance,
            "max_iterations": self.max_iterations,
        }


