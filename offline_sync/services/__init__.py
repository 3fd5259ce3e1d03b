"""
Offline sync services.
"""
from offline_sync.services.conflict_resolver import resolve_conflict
from offline_sync.services.sync_queue import SyncQueue
from offline_sync.services.network_monitor import ConnectivityProbe, NetworkMonitor

__all__ = [
    'resolve_conflict',
    'SyncQueue',
    'ConnectivityProbe',
    'NetworkMonitor',
]
