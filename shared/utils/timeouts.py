"""
Per-call timeouts for remote operations.

Every document store and stats call goes through call_with_timeout so a
hung remote call cannot stall a sampling tick or a sync pass forever.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from shared.data_access.exceptions import StoreTimeoutError

T = TypeVar('T')


async def call_with_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: Optional[float],
    operation: str = 'remote_call'
) -> T:
    """
    Await a remote call, bounding it by timeout_seconds.
    
    Args:
        awaitable: Coroutine or future to await
        timeout_seconds: Timeout in seconds; None or <= 0 disables the bound
        operation: Operation name used in the error message
        
    Returns:
        Result of the awaitable
        
    Raises:
        StoreTimeoutError: If the call does not complete in time
    """
    if not timeout_seconds or timeout_seconds <= 0:
        return await awaitable
    
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise StoreTimeoutError(
            f'{operation} timed out after {timeout_seconds}s',
            operation=operation,
            timeout_seconds=timeout_seconds
        )
