"""
Structured JSON logging.

This module provides a structured logger that outputs JSON-formatted
logs with correlation IDs, context, and standardized fields so that
sync and network events can be queried uniformly.
"""

import json
import logging
import os
import time
from typing import Any, Optional
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum


class StructuredEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal, datetime and Enum values."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return str(obj)


class StructuredLogger:
    """
    Structured JSON logger.

    Outputs logs in JSON format with:
    - Timestamp (ISO 8601)
    - Log level
    - Correlation IDs (sessionId, userId, requestId)
    - Component and operation
    - Message and additional context
    """

    def __init__(
        self,
        component: str,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component name (e.g., 'SyncQueue', 'NetworkMonitor')
            session_id: Session identifier for correlation
            user_id: User identifier for correlation
            request_id: Request identifier for correlation
        """
        self.component = component
        self.session_id = session_id
        self.user_id = user_id
        self.request_id = request_id
        self.logger = logging.getLogger(component)

        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        **kwargs
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Log message
            operation: Operation being performed
            **kwargs: Additional context fields

        Returns:
            JSON-formatted log string
        """
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'message': message
        }

        if self.session_id:
            log_entry['sessionId'] = self.session_id
        if self.user_id:
            log_entry['userId'] = self.user_id
        if self.request_id:
            log_entry['requestId'] = self.request_id

        if operation:
            log_entry['operation'] = operation

        if kwargs:
            log_entry['context'] = kwargs

        return json.dumps(log_entry, cls=StructuredEncoder)

    def debug(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        """Log debug message."""
        self.logger.debug(self._format_log('DEBUG', message, operation, **kwargs))

    def info(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        """Log info message."""
        self.logger.info(self._format_log('INFO', message, operation, **kwargs))

    def warning(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        """Log warning message."""
        self.logger.warning(self._format_log('WARNING', message, operation, **kwargs))

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        error: Optional[Exception] = None,
        **kwargs
    ) -> None:
        """
        Log error message.

        Args:
            message: Log message
            operation: Operation being performed
            error: Exception object if available
            **kwargs: Additional context
        """
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_message'] = str(error)

        self.logger.error(self._format_log('ERROR', message, operation, **kwargs))

    def log_state_change(self, state_type: str, old_value: Any, new_value: Any) -> None:
        """
        Log state change at INFO level.

        Args:
            state_type: Type of state (networkState, syncStatus, etc.)
            old_value: Previous value
            new_value: New value
        """
        self.info(
            f'State change: {state_type}',
            operation='state_change',
            state_type=state_type,
            old_value=old_value,
            new_value=new_value
        )

    def log_performance(self, operation: str, duration_ms: float, **kwargs) -> None:
        """Log performance metric at DEBUG level."""
        self.debug(
            f'Performance: {operation}',
            operation='performance',
            operation_name=operation,
            duration_ms=round(duration_ms, 2),
            **kwargs
        )


class LoggingContext:
    """
    Context manager for logging operation duration.

    Automatically logs operation start, end, and duration.
    """

    def __init__(self, logger: StructuredLogger, operation: str, **kwargs):
        self.logger = logger
        self.operation = operation
        self.context = kwargs
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            f'Starting operation: {self.operation}',
            operation=self.operation,
            **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is None:
            return

        duration_ms = (time.perf_counter() - self.start_time) * 1000
        if exc_type is not None:
            self.logger.error(
                f'Operation failed: {self.operation}',
                operation=self.operation,
                error=exc_val,
                duration_ms=duration_ms,
                **self.context
            )
        else:
            self.logger.log_performance(self.operation, duration_ms, **self.context)


def get_structured_logger(
    component: str,
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None
) -> StructuredLogger:
    """
    Factory function for creating StructuredLogger instances.

    Example:
        >>> logger = get_structured_logger('SyncQueue')
        >>> logger.info('Queued write', operation='enqueue', path='users/u1')
    """
    return StructuredLogger(
        component=component,
        session_id=session_id,
        user_id=user_id,
        request_id=request_id
    )


def configure_logging() -> None:
    """
    Configure root logging for JSON output.

    Sets up the root logger to write bare messages (already JSON) at the
    level given by LOG_LEVEL. Should be called once at process start.
    """
    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(message)s',
        force=True
    )

    if log_level != 'DEBUG':
        logging.getLogger('boto3').setLevel(logging.WARNING)
        logging.getLogger('botocore').setLevel(logging.WARNING)
        logging.getLogger('urllib3').setLevel(logging.WARNING)
