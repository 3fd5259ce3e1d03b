"""
Rolling metrics history.

This module provides the MetricsHistory ring buffer holding the most
recent samples of one monitoring session.
"""

from collections import deque
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from call_quality.models.call_metrics import CallMetrics


class MetricsHistory:
    """
    Bounded FIFO of CallMetrics samples.
    
    Appending past capacity evicts the oldest sample. The history is used
    for display and averaging only; tier classification never reads it.
    """
    
    def __init__(self, capacity: int = 10):
        """
        Initialize metrics history.
        
        Args:
            capacity: Maximum number of samples kept (default: 10)
            
        Raises:
            ValueError: If capacity is less than 1
        """
        if capacity < 1:
            raise ValueError('capacity must be at least 1')
        
        self.capacity = capacity
        self._samples = deque(maxlen=capacity)
    
    def append(self, metrics: CallMetrics) -> None:
        self._samples.append(metrics)
    
    def latest(self) -> Optional[CallMetrics]:
        return self._samples[-1] if self._samples else None
    
    def clear(self) -> None:
        self._samples.clear()
    
    def to_list(self) -> List[CallMetrics]:
        """Samples oldest first."""
        return list(self._samples)
    
    def to_dicts(self) -> List[Dict[str, Any]]:
        """Samples oldest first, in the stored document shape."""
        return [sample.to_dict() for sample in self._samples]
    
    def average(self) -> Optional[CallMetrics]:
        """
        Computes the arithmetic mean of the numeric fields.
        
        Bitrates, packet loss, latency, frame rate and jitter are averaged;
        resolution and timestamp are taken verbatim from the most recent
        sample.
        
        Returns:
            Averaged CallMetrics, or None if the history is empty
        """
        if not self._samples:
            return None
        
        values = np.array(
            [
                [getattr(sample, name) for name in CallMetrics.AVERAGED_FIELDS]
                for sample in self._samples
            ],
            dtype=float
        )
        means = values.mean(axis=0)
        
        return replace(
            self._samples[-1],
            **{
                name: float(mean)
                for name, mean in zip(CallMetrics.AVERAGED_FIELDS, means)
            }
        )
    
    def __len__(self) -> int:
        return len(self._samples)
    
    def __iter__(self) -> Iterator[CallMetrics]:
        return iter(list(self._samples))
