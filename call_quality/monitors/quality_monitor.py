"""
Call quality monitor.

This module provides the QualityMonitor class that samples a live call's
transport statistics on a fixed interval, keeps a rolling history,
classifies the call into a quality tier and persists the result to the
session document.
"""

import asyncio
import functools
import inspect
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from call_quality.analyzers.metrics_history import MetricsHistory
from call_quality.analyzers.stats_reducer import StatsReducer
from call_quality.analyzers.tier_classifier import classify_quality
from call_quality.exceptions import (
    ConfigurationError,
    QualityPersistenceError,
    StatsCollectionError,
)
from call_quality.models.call_metrics import CallMetrics
from call_quality.models.call_session import CallSession
from call_quality.models.monitor_config import MonitorConfig
from call_quality.models.quality_event import QualityChangeEvent
from call_quality.models.quality_tier import QualityTier
from call_quality.notifiers.metrics_emitter import CallQualityMetricsEmitter
from call_quality.utils.structured_logger import (
    log_call_metrics,
    log_configuration_loaded,
    log_quality_change,
    log_sample_operation,
)
from shared.data_access.document_path import join_path
from shared.data_access.document_store import DocumentStore
from shared.utils.timeouts import call_with_timeout

logger = logging.getLogger(__name__)

QualityChangeCallback = Callable[[Optional[QualityTier], QualityTier], Any]


class QualityMonitor:
    """
    Samples call quality for one active session at a time.
    
    Sampling runs as a single asyncio task: each tick is awaited before
    the next sleep, so ticks never overlap. Failures inside a tick are
    logged and the next tick proceeds.
    
    Examples:
        >>> monitor = QualityMonitor(InMemoryDocumentStore())
        >>> monitor.start_monitoring(CallSession(id='s1'), peer_connection)
        >>> ...
        >>> monitor.stop_monitoring()
    """
    
    def __init__(
        self,
        document_store: DocumentStore,
        config: Optional[MonitorConfig] = None,
        metrics_emitter: Optional[CallQualityMetricsEmitter] = None,
        on_quality_change: Optional[QualityChangeCallback] = None
    ):
        """
        Initializes the quality monitor.
        
        Args:
            document_store: Store holding the session documents
            config: Monitor configuration (default: MonitorConfig())
            metrics_emitter: Optional CloudWatch/EventBridge emitter
            on_quality_change: Optional callback(previous, current) invoked
                when the tier changes. May be a coroutine function.
                
        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or MonitorConfig()
        
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(
                'Invalid monitor configuration',
                validation_errors=errors
            )
        
        self.document_store = document_store
        self.metrics_emitter = metrics_emitter
        self.on_quality_change = on_quality_change
        
        self._history = MetricsHistory(self.config.history_size)
        self._reducer = StatsReducer()
        self._session: Optional[CallSession] = None
        self._stats_source: Any = None
        self._task: Optional[asyncio.Task] = None
        self._current_tier: Optional[QualityTier] = None
        
        log_configuration_loaded(self.config.to_dict())
    
    @property
    def is_monitoring(self) -> bool:
        return self._task is not None and not self._task.done()
    
    @property
    def current_quality(self) -> Optional[QualityTier]:
        """Tier of the latest successful sample, None before the first one."""
        return self._current_tier
    
    @property
    def active_session(self) -> Optional[CallSession]:
        return self._session
    
    def start_monitoring(self, session: CallSession, stats_source: Any) -> None:
        """
        Starts periodic sampling for a call.
        
        If a session is already being monitored it is stopped first.
        Must be called from a running event loop.
        
        Args:
            session: Call whose document receives the quality snapshots
            stats_source: Peer connection exposing get_stats() or getStats()
            
        Raises:
            RuntimeError: If no event loop is running
        """
        loop = asyncio.get_running_loop()
        
        if self._session is not None or self._task is not None:
            logger.warning(
                f'start_monitoring called while monitoring session '
                f'{self._session.id if self._session else None}; restarting for {session.id}'
            )
            self.stop_monitoring()
        
        self._session = session
        self._stats_source = stats_source
        self._task = loop.create_task(self._sampling_loop(session))
        
        logger.info(
            f'Started quality monitoring for session {session.id} '
            f'every {self.config.sample_interval_ms}ms'
        )
    
    def stop_monitoring(self) -> None:
        """
        Stops sampling and clears the history and active session.
        
        Safe to call when not monitoring.
        """
        task = self._task
        session = self._session
        
        self._task = None
        self._session = None
        self._stats_source = None
        self._current_tier = None
        self._history.clear()
        self._reducer.reset()
        
        if task is not None and not task.done():
            task.cancel()
        
        if session is not None:
            logger.info(f'Stopped quality monitoring for session {session.id}')
    
    def get_average_metrics(self) -> Optional[CallMetrics]:
        """
        Averages the samples currently in the history.
        
        Returns:
            Mean of the numeric fields with the latest resolution and
            timestamp, or None if no samples have been taken
        """
        return self._history.average()
    
    def get_metrics_history(self) -> List[CallMetrics]:
        """Copy of the history, oldest first."""
        return self._history.to_list()
    
    async def measure_quality(self) -> Optional[QualityTier]:
        """
        Runs one sampling tick now.
        
        Collects stats, appends the sample, classifies it, persists the
        snapshot and emits metrics. Errors are logged and absorbed.
        
        Returns:
            Tier of the sample, or None if the tick did not complete or
            only established the bitrate baseline
        """
        session = self._session
        if session is None:
            logger.debug('measure_quality called with no active session')
            return None
        
        try:
            return await self._tick(session)
        except Exception as e:
            logger.error(
                f'Quality sample failed for session {session.id}: {e}',
                exc_info=True
            )
            return None
    
    async def _sampling_loop(self, session: CallSession) -> None:
        interval = self.config.sample_interval_s
        
        while self._session is session:
            started = time.monotonic()
            await self.measure_quality()
            elapsed = time.monotonic() - started
            await asyncio.sleep(max(0.0, interval - elapsed))
    
    async def _tick(self, session: CallSession) -> Optional[QualityTier]:
        started = time.perf_counter()
        report = await self._collect_stats()
        log_sample_operation(
            session.id, 'collect_stats', (time.perf_counter() - started) * 1000
        )
        
        # Monitoring was stopped or restarted while stats were in flight
        if self._session is not session:
            return None
        
        metrics = self._reducer.reduce(report)
        if self._reducer.is_baseline:
            # Bitrates need a second snapshot of the same streams
            logger.debug(f'Baseline stats sample for session {session.id}')
            return None
        
        self._history.append(metrics)
        tier = classify_quality(metrics, self.config.thresholds)
        log_call_metrics(session.id, metrics, tier)
        
        previous_tier = self._current_tier
        self._current_tier = tier
        
        await self._persist(session, tier)
        await self._emit_metrics(session, metrics, tier)
        
        if previous_tier != tier:
            await self._handle_quality_change(session, previous_tier, tier, metrics)
        
        return tier
    
    async def _collect_stats(self) -> Any:
        """
        Pulls one statistics snapshot from the stats source.
        
        Raises:
            StatsCollectionError: If the source has no stats method, or the
                call fails or times out
        """
        source = self._stats_source
        get_stats = getattr(source, 'get_stats', None) or getattr(source, 'getStats', None)
        if not callable(get_stats):
            raise StatsCollectionError(
                'Stats source exposes neither get_stats() nor getStats()'
            )
        
        try:
            report = get_stats()
            if inspect.isawaitable(report):
                report = await call_with_timeout(
                    report,
                    self.config.stats_timeout_seconds,
                    operation='get_stats'
                )
            return report
        except Exception as e:
            raise StatsCollectionError(
                f'Failed to collect transport stats: {e}',
                original_error=e
            )
    
    async def _persist(self, session: CallSession, tier: QualityTier) -> None:
        """
        Overwrites the quality snapshot on the session document.
        
        Raises:
            QualityPersistenceError: If the write fails or times out
        """
        path = join_path(self.config.sessions_collection, session.id)
        fields = {
            'quality': tier.value,
            'metrics': self._history.to_dicts(),
            'updatedAt': datetime.now(timezone.utc)
        }
        
        started = time.perf_counter()
        try:
            await call_with_timeout(
                self.document_store.set_fields(path, fields),
                self.config.store_timeout_seconds,
                operation='persist_quality'
            )
        except Exception as e:
            log_sample_operation(
                session.id,
                'persist_quality',
                (time.perf_counter() - started) * 1000,
                success=False,
                error=str(e)
            )
            raise QualityPersistenceError(
                f'Failed to persist quality snapshot: {e}',
                session_id=session.id,
                original_error=e
            )
        
        log_sample_operation(
            session.id, 'persist_quality', (time.perf_counter() - started) * 1000
        )
    
    async def _emit_metrics(
        self,
        session: CallSession,
        metrics: CallMetrics,
        tier: QualityTier
    ) -> None:
        if self.metrics_emitter is None:
            return
        
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            functools.partial(self.metrics_emitter.emit_metrics, session.id, metrics, tier)
        )
    
    async def _handle_quality_change(
        self,
        session: CallSession,
        previous_tier: Optional[QualityTier],
        current_tier: QualityTier,
        metrics: CallMetrics
    ) -> None:
        event = QualityChangeEvent(
            session_id=session.id,
            previous_tier=previous_tier,
            current_tier=current_tier,
            timestamp=metrics.timestamp,
            metrics=metrics.to_dict()
        )
        log_quality_change(event)
        
        if self.metrics_emitter is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                None,
                functools.partial(self.metrics_emitter.emit_quality_change, event)
            )
        
        if self.on_quality_change is None:
            return
        
        try:
            result = self.on_quality_change(previous_tier, current_tier)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f'Quality change callback failed: {e}', exc_info=True)
