"""
Call Quality Monitoring Package.

This package samples WebRTC transport statistics of a live consultation
call, classifies call quality into tiers and persists the rolling
metrics history to the session document.
"""

__version__ = '1.0.0'

from call_quality.models.call_metrics import CallMetrics, Resolution
from call_quality.models.call_session import CallSession
from call_quality.models.monitor_config import MonitorConfig
from call_quality.models.quality_event import QualityChangeEvent
from call_quality.models.quality_tier import DEFAULT_THRESHOLDS, QualityTier, ThresholdSet
from call_quality.analyzers.stats_reducer import StatsReducer
from call_quality.analyzers.metrics_history import MetricsHistory
from call_quality.analyzers.tier_classifier import classify_quality
from call_quality.notifiers.metrics_emitter import CallQualityMetricsEmitter
from call_quality.monitors.quality_monitor import QualityMonitor

__all__ = [
    'CallMetrics',
    'Resolution',
    'CallSession',
    'MonitorConfig',
    'QualityChangeEvent',
    'DEFAULT_THRESHOLDS',
    'QualityTier',
    'ThresholdSet',
    'StatsReducer',
    'MetricsHistory',
    'classify_quality',
    'CallQualityMetricsEmitter',
    'QualityMonitor',
]
