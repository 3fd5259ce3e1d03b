"""
SyncConfig model for offline sync settings.
"""
import os
from dataclasses import dataclass

from offline_sync.exceptions import ConfigurationError


@dataclass
class SyncConfig:
    """
    Configuration for the offline sync queue.
    
    Attributes:
        max_retries: Failed replays after which an operation is abandoned in place
        storage_key: Local storage key holding the persisted queue
        store_timeout_seconds: Bound on each document store call (0 disables)
    """
    max_retries: int = 3
    storage_key: str = 'pendingOperations'
    store_timeout_seconds: float = 10.0
    
    def __post_init__(self):
        """Validate configuration values."""
        if self.max_retries < 1:
            raise ConfigurationError(
                f"max_retries must be at least 1, got {self.max_retries}"
            )
        
        if not self.storage_key:
            raise ConfigurationError("storage_key must not be empty")
        
        if self.store_timeout_seconds < 0:
            raise ConfigurationError(
                f"store_timeout_seconds must be non-negative, got {self.store_timeout_seconds}"
            )
    
    @classmethod
    def from_env(cls) -> 'SyncConfig':
        """
        Build configuration from environment variables.
        
        Variables:
            OFFLINE_SYNC_MAX_RETRIES, OFFLINE_SYNC_STORAGE_KEY,
            OFFLINE_SYNC_STORE_TIMEOUT_SECONDS
        """
        try:
            return cls(
                max_retries=int(os.environ.get('OFFLINE_SYNC_MAX_RETRIES', 3)),
                storage_key=os.environ.get('OFFLINE_SYNC_STORAGE_KEY', 'pendingOperations'),
                store_timeout_seconds=float(
                    os.environ.get('OFFLINE_SYNC_STORE_TIMEOUT_SECONDS', 10.0)
                )
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid offline sync environment: {e}")
