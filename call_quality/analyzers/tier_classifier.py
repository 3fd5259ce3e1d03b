"""
Quality tier classification.

Classification is a pure function of one sample: tiers are checked best
first and the first tier whose thresholds are all met wins.
"""

from typing import Mapping, Optional

from call_quality.models.call_metrics import CallMetrics
from call_quality.models.quality_tier import (
    DEFAULT_THRESHOLDS,
    TIER_EVALUATION_ORDER,
    QualityTier,
    ThresholdSet,
)


def classify_quality(
    metrics: CallMetrics,
    thresholds: Optional[Mapping[QualityTier, ThresholdSet]] = None
) -> QualityTier:
    """
    Classifies a sample into a quality tier.
    
    Evaluates excellent, good, fair and poor in that order; the first tier
    whose four cutoffs (bitrate >= min, latency <= max, packet loss <= max,
    frame rate >= min) are all satisfied is returned. A sample that meets
    none of them is critical.
    
    Args:
        metrics: Latest sample
        thresholds: Tier cutoffs (default: DEFAULT_THRESHOLDS)
        
    Returns:
        QualityTier for the sample
        
    Examples:
        >>> classify_quality(CallMetrics(timestamp=0, video_bitrate=2_100_000,
        ...     latency=50, packet_loss=0.1, frame_rate=30))
        <QualityTier.EXCELLENT: 'excellent'>
    """
    if thresholds is None:
        thresholds = DEFAULT_THRESHOLDS
    
    for tier in TIER_EVALUATION_ORDER:
        threshold = thresholds.get(tier)
        if threshold is not None and threshold.is_satisfied_by(metrics):
            return tier
    
    return QualityTier.CRITICAL
