"""
Network and sync status enums.
"""
from enum import Enum


class NetworkState(str, Enum):
    """Connectivity as last reported to the sync queue."""
    ONLINE = 'online'
    OFFLINE = 'offline'
    
    @classmethod
    def from_bool(cls, is_online: bool) -> 'NetworkState':
        return cls.ONLINE if is_online else cls.OFFLINE


class SyncStatus(str, Enum):
    """
    Replay progress shown to the user.
    
    synced: nothing pending
    syncing: a sync pass is running
    pending: operations remain queued
    """
    SYNCED = 'synced'
    SYNCING = 'syncing'
    PENDING = 'pending'
