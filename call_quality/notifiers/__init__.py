"""
Call quality notifiers.
"""

from call_quality.notifiers.metrics_emitter import CallQualityMetricsEmitter

__all__ = ['CallQualityMetricsEmitter']
