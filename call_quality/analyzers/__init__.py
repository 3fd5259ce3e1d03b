"""
Call quality analyzers.

This module contains the stats reducer, the rolling metrics history and
the tier classifier.
"""

from call_quality.analyzers.stats_reducer import StatsReducer
from call_quality.analyzers.metrics_history import MetricsHistory
from call_quality.analyzers.tier_classifier import classify_quality

__all__ = [
    'StatsReducer',
    'MetricsHistory',
    'classify_quality',
]
