"""
Unit tests for the shared structured logger.
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from offline_sync.models import NetworkState
from shared.utils import LoggingContext, StructuredLogger, get_structured_logger


def _json_records(caplog):
    return [json.loads(record.getMessage()) for record in caplog.records]


class TestStructuredLogger:
    """Test suite for StructuredLogger."""
    
    def test_factory_creates_logger(self):
        logger = get_structured_logger('SyncQueue', session_id='s1', request_id='r1')
        
        assert isinstance(logger, StructuredLogger)
        assert logger.component == 'SyncQueue'
        assert logger.session_id == 's1'
        assert logger.user_id is None
        assert logger.request_id == 'r1'
    
    def test_info_outputs_json(self, caplog):
        logger = get_structured_logger('TestComponent', session_id='s1')
        
        with caplog.at_level(logging.INFO, logger='TestComponent'):
            logger.info('Queued write', operation='enqueue', path='users/u1')
        
        entry = _json_records(caplog)[0]
        assert entry['level'] == 'INFO'
        assert entry['component'] == 'TestComponent'
        assert entry['message'] == 'Queued write'
        assert entry['sessionId'] == 's1'
        assert entry['operation'] == 'enqueue'
        assert entry['context'] == {'path': 'users/u1'}
    
    def test_error_includes_exception_details(self, caplog):
        logger = get_structured_logger('TestComponent')
        
        with caplog.at_level(logging.ERROR, logger='TestComponent'):
            logger.error('Sync failed', operation='sync', error=KeyError('missing'))
        
        entry = _json_records(caplog)[0]
        assert entry['context']['error_type'] == 'KeyError'
        assert 'missing' in entry['context']['error_message']
    
    def test_serializes_decimal_datetime_and_enum(self, caplog):
        logger = get_structured_logger('TestComponent')
        
        with caplog.at_level(logging.INFO, logger='TestComponent'):
            logger.info(
                'Values',
                amount=Decimal('1.5'),
                at=datetime(2024, 1, 1, tzinfo=timezone.utc),
                state=NetworkState.ONLINE
            )
        
        context = _json_records(caplog)[0]['context']
        assert context['amount'] == 1.5
        assert context['at'].startswith('2024-01-01T00:00:00')
        assert context['state'] == 'online'
    
    def test_log_state_change(self, caplog):
        logger = get_structured_logger('TestComponent')
        
        with caplog.at_level(logging.INFO, logger='TestComponent'):
            logger.log_state_change('networkState', NetworkState.OFFLINE, NetworkState.ONLINE)
        
        entry = _json_records(caplog)[0]
        assert entry['operation'] == 'state_change'
        assert entry['context']['old_value'] == 'offline'
        assert entry['context']['new_value'] == 'online'
    
    def test_respects_log_level_env(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'WARNING')
        
        logger = get_structured_logger('LevelComponent')
        
        assert logger.logger.level == logging.WARNING


class TestLoggingContext:
    """Test suite for LoggingContext."""
    
    def test_logs_performance_on_success(self, caplog):
        logger = get_structured_logger('CtxComponent')
        
        with caplog.at_level(logging.DEBUG, logger='CtxComponent'):
            with LoggingContext(logger, 'sync', path='users/u1'):
                pass
        
        entries = _json_records(caplog)
        assert entries[0]['message'] == 'Starting operation: sync'
        assert entries[-1]['operation'] == 'performance'
        assert entries[-1]['context']['operation_name'] == 'sync'
    
    def test_logs_error_on_exception(self, caplog):
        logger = get_structured_logger('CtxComponent')
        
        with caplog.at_level(logging.DEBUG, logger='CtxComponent'):
            with pytest.raises(RuntimeError):
                with LoggingContext(logger, 'sync'):
                    raise RuntimeError('boom')
        
        entry = _json_records(caplog)[-1]
        assert entry['level'] == 'ERROR'
        assert entry['context']['error_type'] == 'RuntimeError'
