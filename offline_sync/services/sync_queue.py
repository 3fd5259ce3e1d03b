"""
Offline-tolerant write queue.

SyncQueue intercepts writes to the document store. While the network is
unavailable, or when a write fails, the write is buffered in local
storage (at most one pending operation per document path) and replayed
on reconnect with a field-level merge against the remote document.
"""
import asyncio
import copy
import inspect
import json
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from shared.data_access.document_path import validate_path
from shared.data_access.document_store import SERVER_TIMESTAMP, DocumentStore
from shared.utils.metrics_emitter import MetricsEmitter
from shared.utils.structured_logger import StructuredEncoder, get_structured_logger
from shared.utils.timeouts import call_with_timeout
from offline_sync.exceptions import PendingQueueCorruptedError
from offline_sync.models.network_state import NetworkState, SyncStatus
from offline_sync.models.pending_operation import OperationType, PendingOperation
from offline_sync.models.sync_config import SyncConfig
from offline_sync.models.sync_result import SyncResult
from offline_sync.services.conflict_resolver import resolve_conflict
from offline_sync.storage.local_store import LocalStore

logger = get_structured_logger('SyncQueue')

LAST_MODIFIED_FIELD = 'lastModified'

ExhaustedCallback = Callable[[PendingOperation], Any]


class SyncQueue:
    """
    Buffers document writes while offline and replays them on reconnect.
    
    Invariants:
    - At most one pending operation per path; a newer write replaces it.
    - An operation leaves the queue only when its replay succeeds.
    - After max_retries failed replays an operation stays queued but is
      no longer attempted until reset_retries() re-arms it.
    - One sync pass runs at a time.
    """
    
    def __init__(
        self,
        document_store: DocumentStore,
        local_store: LocalStore,
        config: Optional[SyncConfig] = None,
        metrics_emitter: Optional[MetricsEmitter] = None,
        on_exhausted: Optional[ExhaustedCallback] = None,
        network_state: Union[NetworkState, str] = NetworkState.ONLINE
    ):
        """
        Initialize the sync queue and reload any persisted operations.
        
        Args:
            document_store: Remote document store
            local_store: Local key/value storage for the pending queue
            config: Sync configuration (default: SyncConfig())
            metrics_emitter: Optional CloudWatch metrics emitter
            on_exhausted: Optional callback(operation) invoked when an
                operation runs out of retries. May be a coroutine function.
            network_state: Initial connectivity
        """
        self.config = config or SyncConfig()
        self.document_store = document_store
        self.local_store = local_store
        self.metrics_emitter = metrics_emitter
        self.on_exhausted = on_exhausted
        
        self._network_state = NetworkState(network_state)
        self._pending: Dict[str, PendingOperation] = {}
        self._sync_in_progress = False
        
        self._load_pending_operations()
    
    async def save_data(self, path: str, data: Mapping[str, Any]) -> None:
        """
        Create or overwrite a document, buffering the write if it cannot be applied.
        
        Args:
            path: Document path ('collection/docId')
            data: Document fields
            
        Raises:
            InvalidPathError: If the path is malformed
        """
        await self._write(OperationType.SET, path, data)
    
    async def update_data(self, path: str, data: Mapping[str, Any]) -> None:
        """
        Update fields of a document, buffering the write if it cannot be applied.
        
        Args:
            path: Document path ('collection/docId')
            data: Fields to update
            
        Raises:
            InvalidPathError: If the path is malformed
        """
        await self._write(OperationType.UPDATE, path, data)
    
    async def _write(
        self,
        operation_type: OperationType,
        path: str,
        data: Mapping[str, Any]
    ) -> None:
        validate_path(path)
        payload = copy.deepcopy(dict(data))
        
        if self._network_state == NetworkState.OFFLINE:
            self._enqueue(operation_type, path, payload)
            await self._flush_metrics()
            return
        
        try:
            fields = dict(payload)
            fields[LAST_MODIFIED_FIELD] = SERVER_TIMESTAMP
            if operation_type == OperationType.SET:
                await self._store_call(self.document_store.set(path, fields), 'set')
            else:
                await self._store_call(self.document_store.update(path, fields), 'update')
        except Exception as e:
            logger.warning(
                f"Write to {path} failed, queueing for retry",
                operation=operation_type.value,
                error_type=type(e).__name__,
                error_message=str(e),
                path=path
            )
            self._enqueue(operation_type, path, payload)
            await self._flush_metrics()
            return
        
        self._drop_superseded(path)
    
    def _drop_superseded(self, path: str) -> None:
        """Forget a queued write for path once a newer write reached the store."""
        if self._pending.pop(path, None) is None:
            return
        
        self._save_pending_operations()
        logger.info(
            f"Dropped queued write for {path} superseded by a direct write",
            operation='write',
            path=path,
            pending_count=len(self._pending)
        )
        if self.metrics_emitter:
            self.metrics_emitter.emit_pending_operations(len(self._pending))
    
    def _enqueue(
        self,
        operation_type: OperationType,
        path: str,
        payload: Dict[str, Any]
    ) -> None:
        replaced = path in self._pending
        # Delete first so the replacement moves to the end of the replay order
        self._pending.pop(path, None)
        self._pending[path] = PendingOperation(
            path=path,
            type=operation_type,
            data=payload
        )
        self._save_pending_operations()
        
        logger.info(
            f"Queued {operation_type.value} for {path}",
            operation='enqueue',
            path=path,
            replaced=replaced,
            pending_count=len(self._pending)
        )
        
        if self.metrics_emitter:
            self.metrics_emitter.emit_operation_queued(operation_type.value)
            self.metrics_emitter.emit_pending_operations(len(self._pending))
    
    async def sync_pending_operations(self) -> Optional[SyncResult]:
        """
        Replay pending operations against the document store.
        
        For each operation that still has retries left: if the remote
        document is absent it is created from the payload; otherwise the
        payload is merged into it with resolve_conflict and applied as an
        update. Both writes are stamped with lastModified. Success removes
        the operation; failure increments its retry count.
        
        Returns:
            SyncResult of the pass, or None if a pass is already running or
            the queue is offline
        """
        if self._sync_in_progress:
            logger.debug("Sync already in progress, skipping", operation='sync')
            return None
        
        if self._network_state == NetworkState.OFFLINE:
            logger.debug("Offline, skipping sync", operation='sync')
            return None
        
        self._sync_in_progress = True
        result = SyncResult()
        started = time.perf_counter()
        
        logger.info(
            f"Starting sync of {len(self._pending)} pending operations",
            operation='sync',
            pending_count=len(self._pending)
        )
        
        try:
            for path, operation in list(self._pending.items()):
                if operation.is_exhausted(self.config.max_retries):
                    logger.warning(
                        f"Operation for {path} failed after {self.config.max_retries} retries, skipping",
                        operation='sync',
                        path=path,
                        retry_count=operation.retry_count
                    )
                    result.skipped.append(path)
                    continue
                
                try:
                    await self._replay(operation)
                except Exception as e:
                    await self._record_failure(operation, e, result)
                    continue
                
                # A newer write replaced the operation during replay; keep it
                if self._pending.get(path) is operation:
                    del self._pending[path]
                
                result.synced.append(path)
                logger.info(
                    f"Synced {operation.type.value} for {path}",
                    operation='sync',
                    path=path
                )
                if self.metrics_emitter:
                    self.metrics_emitter.emit_operation_synced(operation.type.value)
        finally:
            self._sync_in_progress = False
            self._save_pending_operations()
            result.duration_ms = (time.perf_counter() - started) * 1000
            
            if self.metrics_emitter:
                self.metrics_emitter.emit_pending_operations(len(self._pending))
                self.metrics_emitter.emit_sync_duration(result.duration_ms)
        
        await self._flush_metrics()
        
        logger.info(
            "Sync pass completed",
            operation='sync',
            **result.to_dict(),
            pending_count=len(self._pending)
        )
        return result
    
    async def _replay(self, operation: PendingOperation) -> None:
        path = operation.path
        remote = await self._store_call(self.document_store.get(path), 'get')
        
        if remote is None:
            fields = copy.deepcopy(operation.data)
            fields[LAST_MODIFIED_FIELD] = SERVER_TIMESTAMP
            await self._store_call(self.document_store.set(path, fields), 'set')
        else:
            fields = resolve_conflict(operation.data, remote)
            fields[LAST_MODIFIED_FIELD] = SERVER_TIMESTAMP
            await self._store_call(self.document_store.update(path, fields), 'update')
    
    async def _record_failure(
        self,
        operation: PendingOperation,
        error: Exception,
        result: SyncResult
    ) -> None:
        path = operation.path
        result.failed.append(path)
        
        if self.metrics_emitter:
            self.metrics_emitter.emit_sync_failure(type(error).__name__)
        
        if self._pending.get(path) is not operation:
            # Replaced by a newer write with a fresh retry budget
            logger.warning(
                f"Failed to sync superseded operation for {path}",
                operation='sync',
                path=path,
                error_type=type(error).__name__
            )
            return
        
        operation.retry_count += 1
        logger.warning(
            f"Failed to sync operation for {path}",
            operation='sync',
            path=path,
            retry_count=operation.retry_count,
            error_type=type(error).__name__,
            error_message=str(error)
        )
        
        if not operation.is_exhausted(self.config.max_retries):
            return
        
        result.exhausted.append(path)
        logger.error(
            f"Operation for {path} exhausted {self.config.max_retries} retries",
            operation='sync',
            error=error,
            path=path,
            timestamp=operation.timestamp
        )
        if self.metrics_emitter:
            self.metrics_emitter.emit_operation_exhausted()
        await self._notify_exhausted(operation)
    
    async def _notify_exhausted(self, operation: PendingOperation) -> None:
        if self.on_exhausted is None:
            return
        
        try:
            outcome = self.on_exhausted(copy.deepcopy(operation))
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            logger.error(
                "on_exhausted callback failed",
                operation='sync',
                error=e,
                path=operation.path
            )
    
    async def handle_network_change(
        self,
        state: Union[NetworkState, str, bool]
    ) -> Optional[SyncResult]:
        """
        Record a connectivity change.
        
        Going from offline to online starts a sync pass unless one is
        already running. Repeating the current state does nothing.
        
        Args:
            state: New state (NetworkState, 'online'/'offline' or a bool)
            
        Returns:
            SyncResult of the triggered pass, or None if no pass ran
        """
        if isinstance(state, bool):
            new_state = NetworkState.from_bool(state)
        else:
            new_state = NetworkState(state)
        
        previous = self._network_state
        self._network_state = new_state
        
        if previous != new_state:
            logger.log_state_change('networkState', previous, new_state)
        
        entered_online = (
            previous == NetworkState.OFFLINE and new_state == NetworkState.ONLINE
        )
        if entered_online and not self._sync_in_progress:
            return await self.sync_pending_operations()
        return None
    
    def get_network_status(self) -> NetworkState:
        return self._network_state
    
    @property
    def sync_status(self) -> SyncStatus:
        if self._sync_in_progress:
            return SyncStatus.SYNCING
        if self._pending:
            return SyncStatus.PENDING
        return SyncStatus.SYNCED
    
    @property
    def sync_in_progress(self) -> bool:
        return self._sync_in_progress
    
    def get_pending_operations_count(self) -> int:
        return len(self._pending)
    
    def get_pending_operations(self) -> Dict[str, PendingOperation]:
        """Copy of the queue; mutating it does not affect the queue."""
        return copy.deepcopy(self._pending)
    
    def get_exhausted_operations(self) -> List[PendingOperation]:
        """Copies of the operations that are no longer attempted."""
        return [
            copy.deepcopy(operation)
            for operation in self._pending.values()
            if operation.is_exhausted(self.config.max_retries)
        ]
    
    def reset_retries(self, path: Optional[str] = None) -> int:
        """
        Re-arm exhausted operations so the next sync pass attempts them again.
        
        Args:
            path: Only re-arm this path (default: every exhausted operation)
            
        Returns:
            Number of operations re-armed
        """
        reset = 0
        for operation in self._pending.values():
            if path is not None and operation.path != path:
                continue
            if operation.is_exhausted(self.config.max_retries):
                operation.retry_count = 0
                reset += 1
        
        if reset:
            self._save_pending_operations()
            logger.info(
                f"Re-armed {reset} exhausted operations",
                operation='reset_retries',
                path=path
            )
        return reset
    
    def clear_pending_operations(self) -> None:
        """Drop every pending operation, including exhausted ones."""
        dropped = len(self._pending)
        self._pending.clear()
        self._save_pending_operations()
        logger.info(
            f"Cleared {dropped} pending operations",
            operation='clear'
        )
    
    def _load_pending_operations(self) -> None:
        key = self.config.storage_key
        try:
            self._pending = self._read_pending(key)
        except PendingQueueCorruptedError as e:
            logger.error(
                "Error loading pending operations, discarding stored queue",
                operation='load_pending',
                error=e.original_error or e,
                storage_key=key
            )
            self.local_store.remove(key)
            self._pending = {}
            return
        
        if self._pending:
            logger.info(
                f"Loaded {len(self._pending)} pending operations",
                operation='load_pending'
            )
    
    def _read_pending(self, key: str) -> Dict[str, PendingOperation]:
        """
        Read and decode the persisted [[path, entry], ...] list.
        
        Raises:
            PendingQueueCorruptedError: If the stored data is not a valid queue
        """
        try:
            raw = self.local_store.get(key)
            if raw is None:
                return {}
            
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError(f"expected a list, got {type(entries).__name__}")
            
            pending: Dict[str, PendingOperation] = {}
            for entry in entries:
                path, data = entry
                validate_path(path)
                pending[path] = PendingOperation.from_dict(path, data)
            return pending
        except (ValueError, TypeError, KeyError, OverflowError, RecursionError) as e:
            # UnicodeDecodeError and JSONDecodeError are ValueErrors
            raise PendingQueueCorruptedError(
                f"Malformed pending queue: {e}",
                storage_key=self.config.storage_key,
                original_error=e
            )
    
    def _save_pending_operations(self) -> None:
        entries = [
            [path, operation.to_dict()]
            for path, operation in self._pending.items()
        ]
        try:
            self.local_store.set(
                self.config.storage_key,
                json.dumps(entries, cls=StructuredEncoder)
            )
        except Exception as e:
            logger.error(
                "Failed to persist pending operations",
                operation='save_pending',
                error=e,
                pending_count=len(entries)
            )
    
    async def _store_call(self, awaitable, operation: str) -> Any:
        return await call_with_timeout(
            awaitable,
            self.config.store_timeout_seconds,
            operation=operation
        )
    
    async def _flush_metrics(self) -> None:
        if self.metrics_emitter is None:
            return
        
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.metrics_emitter.flush)
