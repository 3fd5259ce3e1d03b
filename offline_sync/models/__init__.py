"""
Offline sync data models.
"""
from offline_sync.models.network_state import NetworkState, SyncStatus
from offline_sync.models.pending_operation import OperationType, PendingOperation
from offline_sync.models.sync_config import SyncConfig
from offline_sync.models.sync_result import SyncResult

__all__ = [
    'NetworkState',
    'SyncStatus',
    'OperationType',
    'PendingOperation',
    'SyncConfig',
    'SyncResult',
]
