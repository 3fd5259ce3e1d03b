"""
Connectivity tracking and user-facing sync notifications.

NetworkMonitor polls a ConnectivityProbe (or is told about changes by
the host application), forwards transitions to the SyncQueue and keeps
the sync status and pending count shown to the user.
"""
import asyncio
from typing import Any, Awaitable, Callable, Optional

import requests

from shared.utils.structured_logger import LoggingContext, get_structured_logger
from offline_sync.models.network_state import NetworkState, SyncStatus
from offline_sync.services.sync_queue import SyncQueue

logger = get_structured_logger('NetworkMonitor')

DEFAULT_PROBE_URL = 'https://clients3.google.com/generate_204'

# notifier(message, kind); kind is one of online, offline, success, warning, error
Notifier = Callable[[str, str], Any]

MESSAGE_ONLINE = 'You are back online'
MESSAGE_OFFLINE = 'You are offline. Changes will be saved locally and synced when you reconnect.'
MESSAGE_SYNC_COMPLETE = 'All changes have been synced successfully'
MESSAGE_SYNC_OFFLINE = 'Cannot sync while offline'


def sync_incomplete_message(pending_count: int) -> str:
    """
    Examples:
        >>> sync_incomplete_message(1)
        '1 change failed to sync. Will retry automatically.'
        >>> sync_incomplete_message(3)
        '3 changes failed to sync. Will retry automatically.'
    """
    plural = 's' if pending_count > 1 else ''
    return f'{pending_count} change{plural} failed to sync. Will retry automatically.'


def _log_notification(message: str, kind: str) -> None:
    logger.info(message, operation='notify', kind=kind)


class ConnectivityProbe:
    """
    Decides whether the network is reachable with an HTTP HEAD request.
    
    Any HTTP response counts as online; connection errors and timeouts
    count as offline.
    """
    
    def __init__(
        self,
        url: str = DEFAULT_PROBE_URL,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize connectivity probe.
        
        Args:
            url: URL to probe
            timeout: Request timeout in seconds
            session: Optional requests session for testing
        """
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
    
    def is_reachable(self) -> bool:
        try:
            self.session.head(self.url, timeout=self.timeout, allow_redirects=False)
            return True
        except requests.RequestException as e:
            logger.debug(
                f"Connectivity probe failed: {e}",
                operation='probe',
                url=self.url
            )
            return False
    
    async def check(self) -> bool:
        """Run the blocking probe in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.is_reachable)


class NetworkMonitor:
    """
    Bridges connectivity changes to the sync queue and the user.
    
    Example:
        >>> monitor = NetworkMonitor(sync_queue, notifier=toast.show)
        >>> monitor.run(interval=15.0)
        >>> ...
        >>> await monitor.stop()
    """
    
    def __init__(
        self,
        sync_queue: SyncQueue,
        probe: Optional[ConnectivityProbe] = None,
        notifier: Optional[Notifier] = None
    ):
        self.sync_queue = sync_queue
        self.probe = probe or ConnectivityProbe()
        self.notifier = notifier or _log_notification
        
        self._is_online = sync_queue.get_network_status() == NetworkState.ONLINE
        self._pending_count = sync_queue.get_pending_operations_count()
        self._sync_status = SyncStatus.PENDING if self._pending_count else SyncStatus.SYNCED
        self._task: Optional[asyncio.Task] = None
    
    @property
    def is_online(self) -> bool:
        return self._is_online
    
    @property
    def network_status(self) -> NetworkState:
        return NetworkState.from_bool(self._is_online)
    
    @property
    def sync_status(self) -> SyncStatus:
        return self._sync_status
    
    @property
    def pending_count(self) -> int:
        return self._pending_count
    
    async def handle_network_change(self, is_online: bool) -> None:
        """
        Apply a connectivity change.
        
        Going online syncs pending changes before announcing the new state.
        """
        self._is_online = is_online
        
        if is_online:
            await self._sync_pending_changes(self._reconnect)
            self._notify(MESSAGE_ONLINE, 'online')
        else:
            await self.sync_queue.handle_network_change(NetworkState.OFFLINE)
            self._pending_count = self.sync_queue.get_pending_operations_count()
            self._notify(MESSAGE_OFFLINE, 'offline')
    
    async def _reconnect(self):
        result = await self.sync_queue.handle_network_change(NetworkState.ONLINE)
        # The queue only syncs on its own offline -> online transition
        if result is None and not self.sync_queue.sync_in_progress:
            result = await self.sync_queue.sync_pending_operations()
        return result
    
    async def manual_sync(self) -> None:
        """Sync now if online, otherwise tell the user it cannot be done."""
        if self._is_online:
            await self._sync_pending_changes(self.sync_queue.sync_pending_operations)
        else:
            self._notify(MESSAGE_SYNC_OFFLINE, 'warning')
    
    async def check_connectivity(self) -> bool:
        """
        Probe connectivity and apply the result if it changed.
        
        Returns:
            Current connectivity
        """
        with LoggingContext(logger, 'connectivity_probe', url=self.probe.url):
            is_online = await self.probe.check()
        if is_online != self._is_online:
            await self.handle_network_change(is_online)
        return is_online
    
    def run(self, interval: float = 30.0) -> None:
        """
        Start polling connectivity every interval seconds on the running loop.
        
        Raises:
            RuntimeError: If no event loop is running
        """
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._poll_loop(interval))
    
    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
    
    async def _poll_loop(self, interval: float) -> None:
        while True:
            try:
                await self.check_connectivity()
            except Exception as e:
                logger.error("Connectivity check failed", operation='poll', error=e)
            await asyncio.sleep(interval)
    
    async def _sync_pending_changes(self, run_sync: Callable[[], Awaitable[Any]]) -> None:
        previous_status = self._sync_status
        self._set_sync_status(SyncStatus.SYNCING)
        
        try:
            pending_before = self.sync_queue.get_pending_operations_count()
            self._pending_count = pending_before
            
            result = await run_sync()
            
            pending_after = self.sync_queue.get_pending_operations_count()
            self._pending_count = pending_after
            
            if result is None and pending_after:
                # Another pass owns the queue, or it went offline meanwhile
                self._set_sync_status(self.sync_queue.sync_status)
            elif pending_after == 0:
                self._set_sync_status(SyncStatus.SYNCED)
                if pending_before > 0:
                    self._notify(MESSAGE_SYNC_COMPLETE, 'success')
            else:
                self._set_sync_status(SyncStatus.PENDING)
                self._notify(sync_incomplete_message(pending_after), 'warning')
        except Exception as e:
            self._set_sync_status(SyncStatus.PENDING)
            logger.error(
                "Sync of pending changes failed",
                operation='sync',
                error=e,
                previous_status=previous_status
            )
    
    def _set_sync_status(self, status: SyncStatus) -> None:
        if status != self._sync_status:
            logger.log_state_change('syncStatus', self._sync_status, status)
        self._sync_status = status
    
    def _notify(self, message: str, kind: str) -> None:
        try:
            self.notifier(message, kind)
        except Exception as e:
            logger.error("Notifier failed", operation='notify', error=e)
