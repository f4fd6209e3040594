"""Parameter specifications for transform configuration.

This module defines the ParameterSpec dataclass that specifies allowed
ranges and defaults for tunable numeric settings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParameterSpec:
    """Specification for a tunable numeric setting.

    Attributes:
        name: Setting name (e.g., "hull_edge_samples")
        min_value: Minimum allowed value
        max_value: Maximum allowed value
        default: Value used when the caller does not override it
        description: Human-readable description
    """

    name: str
    min_value: float
    max_value: float
    default: float
    description: str = ""

    def validate(self, value: float | None) -> float:
        """Validate and clamp value to allowed range.

        :param value: Value to validate (None selects the default)
        :returns: Clamped value within [min_value, max_value]
        :raises ValueError: If value is not a number
        """
        if value is None:
            return self.default
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValueError(f"{self.name}: expected number, got {type(value).__name__}")

        return max(self.min_value, min(self.max_value, float(value)))

    def validate_int(self, value: int | None) -> int:
        """Validate, clamp and round to an integer count."""
        return int(round(self.validate(value)))

    def __repr__(self) -> str:
        return (
            f"ParameterSpec({self.name}, "
            f"range=[{self.min_value}, {self.max_value}], "
            f"default={self.default})"
        )
