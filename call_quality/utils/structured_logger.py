"""
Structured logging utilities for call quality monitoring.

Provides JSON-formatted logging for CloudWatch integration and monitoring.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from call_quality.models.call_metrics import CallMetrics
from call_quality.models.quality_event import QualityChangeEvent
from call_quality.models.quality_tier import QualityTier
from call_quality.utils.formatting import format_bitrate, format_resolution


logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _emit(log_entry: Dict[str, Any], level: str) -> None:
    log_message = json.dumps(log_entry)
    
    if level == 'DEBUG':
        logger.debug(log_message)
    elif level == 'INFO':
        logger.info(log_message)
    elif level == 'WARNING':
        logger.warning(log_message)
    elif level == 'ERROR':
        logger.error(log_message)


def log_call_metrics(
    session_id: str,
    metrics: CallMetrics,
    tier: QualityTier,
    level: str = 'DEBUG'
) -> None:
    """
    Logs one quality sample in structured JSON format.
    
    Args:
        session_id: Call session identifier
        metrics: Sample to log
        tier: Tier the sample was classified into
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    log_entry = {
        'event': 'call_metrics',
        'timestamp': _now_iso(),
        'sessionId': session_id,
        'quality': tier.value,
        'metrics': {
            'video_bitrate': format_bitrate(metrics.video_bitrate),
            'audio_bitrate': format_bitrate(metrics.audio_bitrate),
            'packet_loss': round(float(metrics.packet_loss), 2),
            'latency_ms': round(float(metrics.latency), 2),
            'jitter_ms': round(float(metrics.jitter), 2),
            'frame_rate': round(float(metrics.frame_rate), 2),
            'resolution': format_resolution(metrics.resolution)
        }
    }
    
    _emit(log_entry, level)


def log_quality_change(event: QualityChangeEvent) -> None:
    """
    Logs a tier transition.
    
    Degradations to critical are logged at ERROR, other degradations at
    WARNING and improvements at INFO.
    """
    log_entry = {
        'event': 'quality_change',
        'timestamp': _now_iso(),
        'sessionId': event.session_id,
        'previousQuality': event.previous_tier.value if event.previous_tier else None,
        'quality': event.current_tier.value,
        'severity': event.severity
    }
    
    _emit(log_entry, {'error': 'ERROR', 'warning': 'WARNING'}.get(event.severity, 'INFO'))


def log_sample_operation(
    session_id: str,
    operation: str,
    duration_ms: float,
    success: bool = True,
    error: Optional[str] = None
) -> None:
    """
    Logs a sampling step.
    
    Args:
        session_id: Call session identifier
        operation: Step name (collect_stats, persist_quality, ...)
        duration_ms: Step duration in milliseconds
        success: Whether the step succeeded
        error: Error message if the step failed
    """
    log_entry = {
        'event': 'sample_operation',
        'timestamp': _now_iso(),
        'sessionId': session_id,
        'operation': operation,
        'duration_ms': round(duration_ms, 2),
        'success': success
    }
    
    if error:
        log_entry['error'] = error
        _emit(log_entry, 'WARNING')
    else:
        _emit(log_entry, 'DEBUG')


def log_metrics_emission(
    session_id: str,
    metric_count: int,
    success: bool = True,
    error: Optional[str] = None
) -> None:
    """Logs a CloudWatch publish attempt."""
    log_entry = {
        'event': 'metrics_emission',
        'timestamp': _now_iso(),
        'sessionId': session_id,
        'metricCount': metric_count,
        'success': success
    }
    
    if error:
        log_entry['error'] = error
        _emit(log_entry, 'WARNING')
    else:
        _emit(log_entry, 'DEBUG')


def log_configuration_loaded(config: Dict[str, Any]) -> None:
    """Logs the effective monitor configuration at INFO."""
    log_entry = {
        'event': 'configuration_loaded',
        'timestamp': _now_iso(),
        'config': config
    }
    
    _emit(log_entry, 'INFO')
