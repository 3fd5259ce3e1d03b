"""
Custom exceptions for offline sync.
"""


class OfflineSyncError(Exception):
    """Base exception for offline sync errors."""
    pass


class PendingQueueCorruptedError(OfflineSyncError):
    """
    Raised when the persisted pending queue cannot be decoded.
    
    Attributes:
        storage_key: Local storage key holding the queue
        original_error: Decoding error (if any)
    """
    
    def __init__(
        self,
        message: str,
        storage_key: str = None,
        original_error: Exception = None
    ):
        super().__init__(message)
        self.storage_key = storage_key
        self.original_error = original_error


class ConfigurationError(OfflineSyncError):
    """Raised when sync configuration is invalid."""
    pass
