"""
SyncResult model for the outcome of one sync pass.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class SyncResult:
    """
    Outcome of one sync pass.
    
    Attributes:
        synced: Paths replayed successfully and removed from the queue
        failed: Paths whose replay failed this pass (retry count incremented)
        skipped: Paths not attempted because their retries were already exhausted
        exhausted: Paths that reached the retry limit during this pass
        duration_ms: Wall time of the pass
    """
    synced: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    exhausted: List[str] = field(default_factory=list)
    duration_ms: float = 0.0
    
    @property
    def attempted(self) -> int:
        return len(self.synced) + len(self.failed)
    
    @property
    def succeeded(self) -> bool:
        """True when every attempted operation was replayed."""
        return not self.failed
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            'synced': list(self.synced),
            'failed': list(self.failed),
            'skipped': list(self.skipped),
            'exhausted': list(self.exhausted),
            'durationMs': round(self.duration_ms, 2)
        }
