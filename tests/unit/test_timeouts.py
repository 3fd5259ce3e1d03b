"""
Unit tests for call_with_timeout.
"""

import asyncio

import pytest

from shared.data_access import RetryableError, StoreTimeoutError
from shared.utils import call_with_timeout


async def _slow(result, delay):
    await asyncio.sleep(delay)
    return result


class TestCallWithTimeout:
    """Test suite for call_with_timeout."""
    
    @pytest.mark.asyncio
    async def test_returns_result_in_time(self):
        assert await call_with_timeout(_slow('ok', 0), 1.0) == 'ok'
    
    @pytest.mark.asyncio
    async def test_raises_store_timeout(self):
        with pytest.raises(StoreTimeoutError) as exc_info:
            await call_with_timeout(_slow('ok', 1.0), 0.01, operation='get')
        
        assert exc_info.value.operation == 'get'
        assert exc_info.value.timeout_seconds == 0.01
        assert isinstance(exc_info.value, RetryableError)
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize('timeout', [None, 0])
    async def test_disabled_timeout_waits(self, timeout):
        assert await call_with_timeout(_slow('ok', 0.01), timeout) == 'ok'
    
    @pytest.mark.asyncio
    async def test_propagates_errors(self):
        async def boom():
            raise KeyError('x')
        
        with pytest.raises(KeyError):
            await call_with_timeout(boom(), 1.0)
