"""
Call quality monitors.
"""

from call_quality.monitors.quality_monitor import QualityMonitor

__all__ = ['QualityMonitor']
