"""
Call quality data models.

This module contains dataclasses and models for call metrics, quality
tiers and thresholds, monitor configuration, sessions and events.
"""

from call_quality.models.call_metrics import CallMetrics, Resolution
from call_quality.models.call_session import CallSession
from call_quality.models.monitor_config import MonitorConfig
from call_quality.models.quality_event import QualityChangeEvent
from call_quality.models.quality_tier import (
    DEFAULT_THRESHOLDS,
    TIER_EVALUATION_ORDER,
    QualityTier,
    ThresholdSet,
)

__all__ = [
    'CallMetrics',
    'Resolution',
    'CallSession',
    'MonitorConfig',
    'QualityChangeEvent',
    'DEFAULT_THRESHOLDS',
    'TIER_EVALUATION_ORDER',
    'QualityTier',
    'ThresholdSet',
]
