"""
Quality change event data model.

This module defines the QualityChangeEvent dataclass for representing a
call moving from one quality tier to another, publishable to EventBridge.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from call_quality.models.quality_tier import QualityTier


@dataclass
class QualityChangeEvent:
    """Call quality tier transition."""
    
    session_id: str
    previous_tier: Optional[QualityTier]  # None on the first sample
    current_tier: QualityTier
    timestamp: float
    metrics: Dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self):
        """Validates event values."""
        if not self.session_id:
            raise ValueError('Session ID must not be empty')
        
        if self.timestamp < 0:
            raise ValueError('Timestamp must be non-negative')
        
        if self.previous_tier == self.current_tier:
            raise ValueError('A quality change needs two different tiers')
    
    @property
    def is_degradation(self) -> bool:
        return (
            self.previous_tier is not None
            and self.current_tier.is_worse_than(self.previous_tier)
        )
    
    @property
    def severity(self) -> str:
        """'error' for critical, 'warning' for other degradations, else 'info'."""
        if self.current_tier == QualityTier.CRITICAL:
            return 'error'
        if self.is_degradation:
            return 'warning'
        return 'info'
    
    def to_eventbridge_entry(self) -> Dict[str, Any]:
        """
        Converts to EventBridge event entry.
        
        Returns:
            Dictionary formatted for EventBridge PutEvents API.
        """
        return {
            'Source': 'nexprolink.call.quality',
            'DetailType': f'call.quality.{self.current_tier.value}',
            'Detail': json.dumps({
                'sessionId': self.session_id,
                'previousQuality': self.previous_tier.value if self.previous_tier else None,
                'quality': self.current_tier.value,
                'severity': self.severity,
                'timestamp': self.timestamp,
                'metrics': self.metrics
            })
        }
