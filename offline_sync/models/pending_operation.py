"""
PendingOperation model for buffered writes.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict


class OperationType(str, Enum):
    """Write kind replayed against the document store."""
    SET = 'set'
    UPDATE = 'update'


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


@dataclass
class PendingOperation:
    """
    A write waiting to be replayed.
    
    Attributes:
        path: Document path ('collection/docId')
        type: Write kind (set or update)
        data: Payload exactly as passed by the caller
        timestamp: ISO-8601 time the write was first attempted
        retry_count: Failed replay attempts so far
    """
    path: str
    type: OperationType
    data: Dict[str, Any]
    timestamp: str = field(default_factory=_utc_now_iso)
    retry_count: int = 0
    
    def __post_init__(self):
        """Validate operation values."""
        self.type = OperationType(self.type)
        
        if not isinstance(self.data, dict):
            raise ValueError(f"Operation data must be a mapping, got {type(self.data).__name__}")
        
        if self.retry_count < 0:
            raise ValueError(f"Retry count must be non-negative, got {self.retry_count}")
    
    def is_exhausted(self, max_retries: int) -> bool:
        return self.retry_count >= max_retries
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the persisted queue entry shape.
        
        The path is not included; it is the key of the [path, entry] pair.
        """
        return {
            'type': self.type.value,
            'data': self.data,
            'timestamp': self.timestamp,
            'retryCount': self.retry_count
        }
    
    @classmethod
    def from_dict(cls, path: str, data: Dict[str, Any]) -> 'PendingOperation':
        """
        Create PendingOperation from a persisted queue entry.
        
        Args:
            path: Document path the entry is keyed by
            data: Entry with type, data, timestamp and retryCount
            
        Returns:
            PendingOperation instance
            
        Raises:
            ValueError: If the entry is malformed
            KeyError: If a required field is missing
        """
        return cls(
            path=path,
            type=OperationType(data['type']),
            data=data['data'],
            timestamp=data.get('timestamp') or _utc_now_iso(),
            retry_count=int(data.get('retryCount', 0) or 0)
        )
