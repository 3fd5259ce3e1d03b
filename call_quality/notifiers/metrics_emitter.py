"""
Call quality metrics emitter.

This module provides the CallQualityMetricsEmitter class for publishing
call quality samples to CloudWatch and tier changes to EventBridge.
"""

import logging
from datetime import datetime, timezone

from call_quality.models.call_metrics import CallMetrics
from call_quality.models.quality_event import QualityChangeEvent
from call_quality.models.quality_tier import QualityTier
from call_quality.utils.structured_logger import log_metrics_emission


logger = logging.getLogger(__name__)


class CallQualityMetricsEmitter:
    """
    Emits call quality data to monitoring systems.
    
    Publishing failures are logged and never raised, so a monitoring
    outage cannot interrupt sampling.
    """
    
    def __init__(
        self,
        cloudwatch_client,
        eventbridge_client,
        namespace: str = 'CallQuality'
    ):
        """
        Initializes the metrics emitter.
        
        Args:
            cloudwatch_client: Boto3 CloudWatch client
            eventbridge_client: Boto3 EventBridge client
            namespace: CloudWatch namespace
        """
        self.cloudwatch = cloudwatch_client
        self.eventbridge = eventbridge_client
        self.namespace = namespace
    
    def emit_metrics(
        self,
        session_id: str,
        metrics: CallMetrics,
        tier: QualityTier
    ) -> None:
        """
        Emits one sample to CloudWatch.
        
        Metrics published (dimension SessionId):
        - VideoBitrate, AudioBitrate (Bits/Second)
        - PacketLoss (Percent)
        - Latency, Jitter (Milliseconds)
        - FrameRate (Count/Second)
        - QualityScore (tier rank, 0 = critical .. 4 = excellent)
        
        Args:
            session_id: Call session identifier
            metrics: Sample to emit
            tier: Tier of the sample
        """
        try:
            timestamp = datetime.fromtimestamp(metrics.timestamp, tz=timezone.utc)
            dimensions = [{'Name': 'SessionId', 'Value': session_id}]
            
            values = [
                ('VideoBitrate', metrics.video_bitrate, 'Bits/Second'),
                ('AudioBitrate', metrics.audio_bitrate, 'Bits/Second'),
                ('PacketLoss', metrics.packet_loss, 'Percent'),
                ('Latency', metrics.latency, 'Milliseconds'),
                ('Jitter', metrics.jitter, 'Milliseconds'),
                ('FrameRate', metrics.frame_rate, 'Count/Second'),
                ('QualityScore', tier.rank, 'None'),
            ]
            metric_data = [
                {
                    'MetricName': name,
                    'Value': float(value),
                    'Unit': unit,
                    'Timestamp': timestamp,
                    'Dimensions': dimensions
                }
                for name, value, unit in values
            ]
            
            self.cloudwatch.put_metric_data(
                Namespace=self.namespace,
                MetricData=metric_data
            )
            
            log_metrics_emission(session_id, len(metric_data), success=True)
            
        except Exception as e:
            logger.error(
                f'Failed to emit metrics to CloudWatch: {e}',
                exc_info=True
            )
            log_metrics_emission(session_id, 0, success=False, error=str(e))
    
    def emit_quality_change(self, event: QualityChangeEvent) -> None:
        """
        Emits a tier transition to EventBridge.
        
        Event detail types follow call.quality.<tier>, e.g.
        call.quality.critical.
        
        Args:
            event: Tier transition to publish
        """
        try:
            self.eventbridge.put_events(
                Entries=[event.to_eventbridge_entry()]
            )
            
            logger.info(
                f'Emitted quality change {event.previous_tier} -> '
                f'{event.current_tier.value} for session {event.session_id}'
            )
            
        except Exception as e:
            logger.error(
                f'Failed to emit quality change to EventBridge: {e}',
                exc_info=True
            )
