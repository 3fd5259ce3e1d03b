"""
Utility functions and services.
"""

from .structured_logger import (
    StructuredLogger,
    LoggingContext,
    get_structured_logger,
    configure_logging,
)
from .timeouts import call_with_timeout
from .metrics_emitter import MetricsEmitter

__all__ = [
    'StructuredLogger',
    'LoggingContext',
    'get_structured_logger',
    'configure_logging',
    'call_with_timeout',
    'MetricsEmitter',
]
