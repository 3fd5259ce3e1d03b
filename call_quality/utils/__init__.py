"""
Call quality utilities.
"""

from call_quality.utils.formatting import format_bitrate, format_resolution
from call_quality.utils.structured_logger import (
    log_call_metrics,
    log_configuration_loaded,
    log_metrics_emission,
    log_quality_change,
    log_sample_operation,
)

__all__ = [
    'format_bitrate',
    'format_resolution',
    'log_call_metrics',
    'log_configuration_loaded',
    'log_metrics_emission',
    'log_quality_change',
    'log_sample_operation',
]
