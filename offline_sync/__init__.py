"""
Offline Sync Package.

Buffers document store writes in local storage while the network is
unavailable and replays them on reconnect with a field-level merge.
"""

__version__ = '1.0.0'

from offline_sync.exceptions import ConfigurationError, OfflineSyncError, PendingQueueCorruptedError
from offline_sync.models import (
    NetworkState,
    OperationType,
    PendingOperation,
    SyncConfig,
    SyncResult,
    SyncStatus,
)
from offline_sync.storage import FileLocalStore, InMemoryLocalStore, LocalStore
from offline_sync.services import ConnectivityProbe, NetworkMonitor, SyncQueue, resolve_conflict

__all__ = [
    'ConfigurationError',
    'OfflineSyncError',
    'PendingQueueCorruptedError',
    'NetworkState',
    'OperationType',
    'PendingOperation',
    'SyncConfig',
    'SyncResult',
    'SyncStatus',
    'FileLocalStore',
    'InMemoryLocalStore',
    'LocalStore',
    'ConnectivityProbe',
    'NetworkMonitor',
    'SyncQueue',
    'resolve_conflict',
]
