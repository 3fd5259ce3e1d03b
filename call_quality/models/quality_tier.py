"""
Quality tier and threshold data models.

This module defines the ordered QualityTier enumeration, the ThresholdSet
that qualifies a sample for a tier, and the process-wide default
threshold table.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from call_quality.models.call_metrics import CallMetrics


class QualityTier(str, Enum):
    """Discrete call quality, ordered excellent > good > fair > poor > critical."""
    
    EXCELLENT = 'excellent'
    GOOD = 'good'
    FAIR = 'fair'
    POOR = 'poor'
    CRITICAL = 'critical'
    
    @property
    def rank(self) -> int:
        """Numeric rank, 4 for excellent down to 0 for critical."""
        return _TIER_RANKS[self]
    
    def is_better_than(self, other: 'QualityTier') -> bool:
        return self.rank > other.rank
    
    def is_worse_than(self, other: 'QualityTier') -> bool:
        return self.rank < other.rank


_TIER_RANKS = {
    QualityTier.EXCELLENT: 4,
    QualityTier.GOOD: 3,
    QualityTier.FAIR: 2,
    QualityTier.POOR: 1,
    QualityTier.CRITICAL: 0,
}

# Tiers that have thresholds, best first. CRITICAL is the fallback.
TIER_EVALUATION_ORDER = (
    QualityTier.EXCELLENT,
    QualityTier.GOOD,
    QualityTier.FAIR,
    QualityTier.POOR,
)


@dataclass(frozen=True)
class ThresholdSet:
    """Cutoffs a sample must meet, all four at once, to qualify for a tier."""
    
    min_bitrate: float      # bits/sec
    max_latency: float      # ms
    max_packet_loss: float  # percent
    min_frame_rate: float   # fps
    
    def is_satisfied_by(self, metrics: CallMetrics) -> bool:
        """
        Checks a sample against every cutoff.
        
        Args:
            metrics: Sample to check
            
        Returns:
            True if bitrate >= min, latency <= max, packet loss <= max
            and frame rate >= min
        """
        return (
            metrics.video_bitrate >= self.min_bitrate
            and metrics.latency <= self.max_latency
            and metrics.packet_loss <= self.max_packet_loss
            and metrics.frame_rate >= self.min_frame_rate
        )
    
    def is_no_stricter_than(self, other: 'ThresholdSet') -> bool:
        """True if every cutoff is equal to or looser than other's."""
        return (
            self.min_bitrate <= other.min_bitrate
            and self.max_latency >= other.max_latency
            and self.max_packet_loss >= other.max_packet_loss
            and self.min_frame_rate <= other.min_frame_rate
        )


DEFAULT_THRESHOLDS: Dict[QualityTier, ThresholdSet] = {
    QualityTier.EXCELLENT: ThresholdSet(
        min_bitrate=2_000_000,  # 2 Mbps
        max_latency=100,
        max_packet_loss=0.5,
        min_frame_rate=25
    ),
    QualityTier.GOOD: ThresholdSet(
        min_bitrate=1_000_000,  # 1 Mbps
        max_latency=200,
        max_packet_loss=2,
        min_frame_rate=20
    ),
    QualityTier.FAIR: ThresholdSet(
        min_bitrate=500_000,  # 500 Kbps
        max_latency=300,
        max_packet_loss=5,
        min_frame_rate=15
    ),
    QualityTier.POOR: ThresholdSet(
        min_bitrate=250_000,  # 250 Kbps
        max_latency=500,
        max_packet_loss=10,
        min_frame_rate=10
    ),
}
