"""Exception types raised by crsmod transforms.

Every error derives from :class:`TransformError` and from the closest builtin,
so ``except ValueError`` style handlers keep working.
"""

from __future__ import annotations


class TransformError(Exception):
    """Base class for all coordinate transformation errors."""


class DimensionMismatchError(TransformError, ValueError):
    """Point or stage dimensionality does not match the declared contract."""


class UnsupportedPointTypeError(TransformError, TypeError):
    """Transform requires a different point representation than supplied."""


class NonInvertibleError(TransformError, ValueError):
    """Transform is not one-to-one, so no inverse can be built."""


class NotSupportedError(TransformError, NotImplementedError):
    """Operation intentionally left unimplemented (e.g. WKT/XML text)."""


class OutOfDomainError(TransformError, ValueError):
    """Point lies outside the valid domain of a transform."""
