"""Transform operation configuration.

Settings shared by every MathTransform: hull propagation density and the
tolerance used by identity checks.
"""

from __future__ import annotations

from dataclasses import dataclass

from crsmod.config.operations import ParameterSpec


@dataclass(frozen=True)
class TransformConfig:
    """Configuration for generic transform operations."""

    hull_edge_samples: ParameterSpec = ParameterSpec(
        name="hull_edge_samples",
        min_value=1,
        max_value=1024,
        default=16,
        description="Subdivisions per hull edge when propagating through non-linear transforms",
    )

    identity_tolerance: ParameterSpec = ParameterSpec(
        name="identity_tolerance",
        min_value=0.0,
        max_value=1.0,
        default=0.0,
        description="Max coefficient deviation for a transform to count as identity",
    )

    def get_spec(self, name: str) -> ParameterSpec:
        """Get parameter spec by name.

        :param name: Setting name
        :return: ParameterSpec for the setting
        :raises AttributeError: If setting not found
        """
        return getattr(self, name)

    def get_all_specs(self) -> dict[str, ParameterSpec]:
        """Get all parameter specs as a dictionary."""
        return {
            "hull_edge_samples": self.hull_edge_samples,
            "identity_tolerance": self.identity_tolerance,
        }
