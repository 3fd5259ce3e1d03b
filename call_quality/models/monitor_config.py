"""
Monitor configuration data model.

This module defines the MonitorConfig dataclass for configuring call
quality sampling, history size, persistence and the tier threshold table.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List

from call_quality.models.quality_tier import (
    DEFAULT_THRESHOLDS,
    TIER_EVALUATION_ORDER,
    QualityTier,
    ThresholdSet,
)
from shared.config.table_names import get_table_name


@dataclass
class MonitorConfig:
    """Configuration for call quality monitoring."""
    
    # Sampling
    sample_interval_ms: int = 1000
    history_size: int = 10
    
    # Persistence
    sessions_collection: str = 'videoSessions'
    
    # Remote call bounds (seconds, 0 disables)
    stats_timeout_seconds: float = 2.0
    store_timeout_seconds: float = 5.0
    
    # Tier cutoffs, shared process-wide unless overridden
    thresholds: Dict[QualityTier, ThresholdSet] = field(
        default_factory=lambda: dict(DEFAULT_THRESHOLDS)
    )
    
    def validate(self) -> List[str]:
        """
        Validates configuration parameters.
        
        Returns:
            List of error messages. Empty list if configuration is valid.
        """
        errors = []
        
        if self.sample_interval_ms <= 0:
            errors.append('Sample interval must be positive')
        
        if self.history_size < 1:
            errors.append('History size must be at least 1')
        
        if not self.sessions_collection:
            errors.append('Sessions collection must not be empty')
        
        if self.stats_timeout_seconds < 0:
            errors.append('Stats timeout must be non-negative')
        
        if self.store_timeout_seconds < 0:
            errors.append('Store timeout must be non-negative')
        
        missing = [tier.value for tier in TIER_EVALUATION_ORDER if tier not in self.thresholds]
        if missing:
            errors.append(f'Thresholds missing for tiers: {", ".join(missing)}')
            return errors
        
        for better, worse in zip(TIER_EVALUATION_ORDER, TIER_EVALUATION_ORDER[1:]):
            if not self.thresholds[worse].is_no_stricter_than(self.thresholds[better]):
                errors.append(
                    f'Thresholds for {worse.value} must not be stricter than {better.value}'
                )
        
        return errors
    
    @property
    def sample_interval_s(self) -> float:
        return self.sample_interval_ms / 1000.0
    
    @classmethod
    def from_env(cls) -> 'MonitorConfig':
        """
        Builds configuration from environment variables.
        
        Variables:
            CALL_QUALITY_SAMPLE_INTERVAL_MS, CALL_QUALITY_HISTORY_SIZE,
            CALL_QUALITY_STATS_TIMEOUT_SECONDS, CALL_QUALITY_STORE_TIMEOUT_SECONDS,
            VIDEO_SESSIONS_COLLECTION
        """
        defaults = cls()
        return cls(
            sample_interval_ms=int(os.getenv(
                'CALL_QUALITY_SAMPLE_INTERVAL_MS', defaults.sample_interval_ms
            )),
            history_size=int(os.getenv(
                'CALL_QUALITY_HISTORY_SIZE', defaults.history_size
            )),
            sessions_collection=get_table_name(
                'VIDEO_SESSIONS_COLLECTION', defaults.sessions_collection
            ),
            stats_timeout_seconds=float(os.getenv(
                'CALL_QUALITY_STATS_TIMEOUT_SECONDS', defaults.stats_timeout_seconds
            )),
            store_timeout_seconds=float(os.getenv(
                'CALL_QUALITY_STORE_TIMEOUT_SECONDS', defaults.store_timeout_seconds
            )),
        )
    
    def to_dict(self) -> Dict[str, object]:
        """Plain representation for logging."""
        return {
            'sample_interval_ms': self.sample_interval_ms,
            'history_size': self.history_size,
            'sessions_collection': self.sessions_collection,
            'stats_timeout_seconds': self.stats_timeout_seconds,
            'store_timeout_seconds': self.store_timeout_seconds,
            'thresholds': {
                tier.value: {
                    'min_bitrate': threshold.min_bitrate,
                    'max_latency': threshold.max_latency,
                    'max_packet_loss': threshold.max_packet_loss,
                    'min_frame_rate': threshold.min_frame_rate,
                }
                for tier, threshold in self.thresholds.items()
            },
        }
