"""
Custom exceptions for call quality monitoring.

This module defines custom exception classes for call quality monitoring
errors, providing specific error types for different failure scenarios.
"""


class CallQualityError(Exception):
    """
    Base exception for call quality monitoring errors.

    All call quality-specific exceptions inherit from this base class,
    allowing for easy catching of all call quality-related errors.
    """
    pass


class StatsCollectionError(CallQualityError):
    """
    Raised when a transport statistics snapshot cannot be obtained.

    This exception is raised when:
    - The stats source does not expose get_stats()/getStats()
    - The stats call fails or times out

    Attributes:
        message: Error message describing the failure
        original_error: Original exception that caused the failure (if any)
    """

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class QualityPersistenceError(CallQualityError):
    """
    Raised when the quality snapshot cannot be written to the document store.

    Attributes:
        message: Error message describing the failure
        session_id: Session whose document could not be updated
        original_error: Original exception that caused the failure (if any)
    """

    def __init__(
        self,
        message: str,
        session_id: str = None,
        original_error: Exception = None
    ):
        super().__init__(message)
        self.session_id = session_id
        self.original_error = original_error

    def __str__(self):
        """Return string representation with session id if available."""
        if self.session_id:
            return f"{self.session_id}: {super().__str__()}"
        return super().__str__()


class ConfigurationError(CallQualityError):
    """
    Raised when monitor configuration is invalid.

    Attributes:
        message: Error message describing the configuration issue
        validation_errors: List of validation error messages

    Examples:
        >>> raise ConfigurationError(
        ...     "Invalid configuration",
        ...     validation_errors=["Sample interval must be positive"]
        ... )
    """

    def __init__(self, message: str, validation_errors: list = None):
        super().__init__(message)
        self.validation_errors = validation_errors or []

    def __str__(self):
        """Return string representation with validation errors if available."""
        if self.validation_errors:
            errors_str = "; ".join(self.validation_errors)
            return f"{super().__str__()}: {errors_str}"
        return super().__str__()
