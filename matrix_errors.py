"""
Exception types for sparse matrix reading and arithmetic.

I/O failures are not wrapped: a missing or unreadable document surfaces as the
built-in OSError family (FileNotFoundError, PermissionError, ...).
"""


class MatrixError(Exception):
    """Base class for all matrix errors."""


class FormatError(MatrixError, ValueError):
    """Document violates the header or entry grammar."""

    def __init__(self, message: str = "Input file has wrong format"):
        super().__init__(message)


class DimensionMismatchError(MatrixError, ValueError):
    """Operand shapes are incompatible for the requested operation."""


class InvalidOperationError(MatrixError, ValueError):
    """Unknown operation selector."""


class VerificationError(MatrixError):
    """Result disagrees with the scipy.sparse reference."""
