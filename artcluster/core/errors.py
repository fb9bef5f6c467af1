"""
Error types for the clustering engines.

Validation failures are raised at the call boundary before any category is
touched, so a failed ``learn`` leaves the category store unchanged.
"""

from typing import Optional, Any, Dict


class ARTError(Exception):
    """
    Base exception for all engine-related errors.

    Provides common functionality for error tracking and reporting.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize engine error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidArgumentError(ARTError, ValueError):
    """
    Raised when an input pattern or parameter value is unusable.

    Covers absent patterns, non-finite values and invalid hyperparameters.
    """

    def __init__(self, message: str,
                 argument: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.argument = argument
        self.details.update({'argument': argument})


class DimensionMismatchError(InvalidArgumentError):
    """Raised when a pattern does not have the engine's expected dimension."""

    def __init__(self, expected: int, actual: int,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Pattern dimension {actual} does not match expected dimension {expected}",
            argument='pattern',
            details=details,
        )
        self.expected = expected
        self.actual = actual
        self.details.update({'expected': expected, 'actual': actual})


class MissingConfigurationError(ARTError, TypeError):
    """
    Raised when the parameter object passed to an engine is absent.

    Deliberately not an InvalidArgumentError: callers can fall back to
    default parameters here while still rejecting bad input.
    """

    def __init__(self, message: str = "Parameters cannot be None",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class EngineClosedError(ARTError, RuntimeError):
    """Raised when an engine is used after ``close()``."""

    def __init__(self, engine_name: str):
        super().__init__(f"{engine_name} has been closed", {'engine': engine_name})
        self.engine_name = engine_name


class ConfigurationError(ARTError):
    """Raised when a configuration file or override cannot be applied."""

    def __init__(self, message: str,
                 source: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.source = source
        self.details.update({'source': source})


def is_dimension_error(error: Exception) -> bool:
    """Check if error is due to a pattern dimension mismatch."""
    return isinstance(error, DimensionMismatchError)


def is_missing_configuration(error: Exception) -> bool:
    """Check if error is due to absent parameters."""
    return isinstance(error, MissingConfigurationError)
