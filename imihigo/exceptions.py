"""
Custom exceptions for the Imihigo performance contract tracker.
"""


class ImihigoError(Exception):
    """Base exception for all Imihigo-related errors."""
    pass


class ValidationError(ImihigoError):
    """Raised when validation fails for a field or operation."""
    pass


class NotFoundError(ImihigoError):
    """Raised when a requested node or template is not found."""
    pass


class InvalidOperationError(ImihigoError):
    """Raised when an operation is not allowed in the current state."""
    pass


class IndexOutOfRangeError(ImihigoError, IndexError):
    """Raised when a positional index does not reference an existing node."""
    pass


class InvalidQuarterError(ImihigoError, ValueError):
    """Raised when a quarter number is outside 1..4."""
    pass


class StorageError(ImihigoError):
    """Raised when reading or writing the data directory fails."""
    pass


class ConfigurationError(ImihigoError):
    """Raised when there's a configuration or setup issue."""
    pass
