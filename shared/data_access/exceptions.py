"""
Custom exceptions for the document store layer.
"""


class DocumentStoreError(Exception):
    """Base exception for document store operations."""
    pass


class DocumentNotFoundError(DocumentStoreError):
    """Exception raised when an update targets a document that does not exist."""
    pass


class InvalidPathError(DocumentStoreError, ValueError):
    """Exception raised when a document path is malformed."""
    pass


class RetryableError(DocumentStoreError):
    """Exception raised for transient errors that can be retried."""
    pass


class StoreTimeoutError(RetryableError):
    """Exception raised when a store call exceeds its timeout."""
    
    def __init__(self, message: str, operation: str = None, timeout_seconds: float = None):
        """
        Initialize store timeout error.
        
        Args:
            message: Error message
            operation: Name of the operation that timed out
            timeout_seconds: Timeout that was exceeded
        """
        super().__init__(message)
        self.operation = operation
        self.timeout_seconds = timeout_seconds
