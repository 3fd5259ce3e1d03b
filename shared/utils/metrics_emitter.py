"""
CloudWatch metrics emitter for offline sync.

This module provides a buffered emitter for queue depth, replay outcomes
and retry exhaustion of the offline sync queue.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class MetricsEmitter:
    """
    Emits CloudWatch metrics for offline sync operations.
    
    Metrics are only buffered by the emit_* methods; flush() publishes
    them in batches of batch_size. flush() blocks on CloudWatch, so async
    callers run it in an executor. The buffer is guarded by a lock because
    emit_* and flush() may run on different threads.
    """
    
    def __init__(
        self,
        namespace: str = 'NexProLink/OfflineSync',
        cloudwatch_client=None,
        batch_size: int = 20,
        max_buffered: int = 1000
    ):
        """
        Initialize metrics emitter.
        
        Args:
            namespace: CloudWatch namespace for metrics
            cloudwatch_client: Optional CloudWatch client for testing
            batch_size: Maximum metrics per PutMetricData call
            max_buffered: Oldest metrics are dropped past this many
        """
        self.namespace = namespace
        self.cloudwatch = cloudwatch_client or boto3.client('cloudwatch')
        self._metric_buffer: List[Dict] = []
        self._batch_size = batch_size
        self._max_buffered = max_buffered
        self._lock = threading.Lock()
    
    def emit_pending_operations(self, count: int) -> None:
        """
        Emit current pending queue depth.
        
        Args:
            count: Number of operations waiting for replay
        """
        self._add_metric(
            metric_name='PendingOperations',
            value=count,
            unit='Count'
        )
    
    def emit_operation_queued(self, operation_type: str) -> None:
        """Emit metric for a write diverted into the pending queue."""
        self._add_metric(
            metric_name='QueuedOperations',
            value=1,
            unit='Count',
            dimensions=[{'Name': 'OperationType', 'Value': operation_type}]
        )
    
    def emit_operation_synced(self, operation_type: str) -> None:
        """Emit metric for a pending operation replayed successfully."""
        self._add_metric(
            metric_name='SyncedOperations',
            value=1,
            unit='Count',
            dimensions=[{'Name': 'OperationType', 'Value': operation_type}]
        )
    
    def emit_sync_failure(self, error_type: str) -> None:
        """
        Emit metric for a failed replay attempt.
        
        Args:
            error_type: Exception class name of the failure
        """
        self._add_metric(
            metric_name='SyncFailures',
            value=1,
            unit='Count',
            dimensions=[{'Name': 'ErrorType', 'Value': error_type}]
        )
    
    def emit_operation_exhausted(self) -> None:
        """Emit metric for an operation that ran out of retries."""
        self._add_metric(
            metric_name='ExhaustedOperations',
            value=1,
            unit='Count'
        )
    
    def emit_sync_duration(self, duration_ms: float) -> None:
        """Emit duration of one sync pass."""
        self._add_metric(
            metric_name='SyncPassDuration',
            value=duration_ms,
            unit='Milliseconds'
        )
    
    def _add_metric(
        self,
        metric_name: str,
        value: float,
        unit: str,
        dimensions: Optional[List[Dict]] = None
    ) -> None:
        """
        Add metric to the buffer.
        
        Args:
            metric_name: Name of the metric
            value: Metric value
            unit: Metric unit
            dimensions: Metric dimensions
        """
        metric = {
            'MetricName': metric_name,
            'Value': value,
            'Unit': unit,
            'Dimensions': dimensions or [],
            'Timestamp': time.time()
        }
        with self._lock:
            self._metric_buffer.append(metric)
            overflow = len(self._metric_buffer) - self._max_buffered
            if overflow > 0:
                del self._metric_buffer[:overflow]
        
        if overflow > 0:
            logger.warning(f"Metric buffer full, dropped {overflow} oldest metrics")
    
    def flush(self) -> None:
        """Flush buffered metrics to CloudWatch."""
        with self._lock:
            batch, self._metric_buffer = self._metric_buffer, []
        
        for start in range(0, len(batch), self._batch_size):
            try:
                self.cloudwatch.put_metric_data(
                    Namespace=self.namespace,
                    MetricData=batch[start:start + self._batch_size]
                )
            except (ClientError, BotoCoreError) as e:
                logger.warning(f"Failed to emit metrics: {e}")
                self._requeue(batch[start:])
                return
    
    def _requeue(self, unsent: List[Dict]) -> None:
        """Put unsent metrics back ahead of anything emitted meanwhile."""
        with self._lock:
            self._metric_buffer = (unsent + self._metric_buffer)[-self._max_buffered:]
