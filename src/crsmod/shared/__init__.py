"""Shared numeric helpers for crsmod."""

from crsmod.shared.rotation import (
    SEC_TO_RAD,
    arcsec_to_rad,
    helmert_homogeneous_matrix,
    helmert_inverse_matrix,
    helmert_matrix,
    skew_symmetric,
)

__all__ = [
    "SEC_TO_RAD",
    "arcsec_to_rad",
    "skew_symmetric",
    "helmert_matrix",
    "helmert_inverse_matrix",
    "helmert_homogeneous_matrix",
]
