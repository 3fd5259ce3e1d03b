"""
Call metrics data model.

This module defines the CallMetrics dataclass holding one point-in-time
sample of a call's transport statistics, and the Resolution it carries.
"""

from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass(frozen=True)
class Resolution:
    """Video resolution in pixels."""
    
    width: int = 0
    height: int = 0
    
    def to_dict(self) -> Dict[str, int]:
        return {'width': self.width, 'height': self.height}
    
    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError('Resolution must be non-negative')


@dataclass(frozen=True)
class CallMetrics:
    """Transport metrics for a single sampling tick."""
    
    timestamp: float  # epoch seconds
    
    # Throughput (bits per second)
    video_bitrate: float = 0.0
    audio_bitrate: float = 0.0
    
    # Network health
    packet_loss: float = 0.0  # percent, 0-100
    latency: float = 0.0      # round-trip, ms
    jitter: float = 0.0       # ms
    
    # Video
    frame_rate: float = 0.0
    resolution: Resolution = field(default_factory=Resolution)
    
    # Numeric fields averaged by MetricsHistory.average()
    AVERAGED_FIELDS = (
        'video_bitrate',
        'audio_bitrate',
        'packet_loss',
        'latency',
        'frame_rate',
        'jitter',
    )
    
    def __post_init__(self):
        """Validates metric values."""
        if self.timestamp < 0:
            raise ValueError('Timestamp must be non-negative')
        
        if self.video_bitrate < 0 or self.audio_bitrate < 0:
            raise ValueError('Bitrate must be non-negative')
        
        if self.packet_loss < 0 or self.packet_loss > 100:
            raise ValueError('Packet loss must be between 0 and 100')
        
        if self.latency < 0:
            raise ValueError('Latency must be non-negative')
        
        if self.frame_rate < 0:
            raise ValueError('Frame rate must be non-negative')
        
        if self.jitter < 0:
            raise ValueError('Jitter must be non-negative')
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Converts metrics to the stored document shape.
        
        Returns:
            Dictionary with camelCase keys as persisted on the session document.
        """
        return {
            'timestamp': self.timestamp,
            'videoBitrate': self.video_bitrate,
            'audioBitrate': self.audio_bitrate,
            'packetLoss': self.packet_loss,
            'latency': self.latency,
            'frameRate': self.frame_rate,
            'resolution': self.resolution.to_dict(),
            'jitter': self.jitter,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CallMetrics':
        """Builds metrics from the stored document shape."""
        resolution = data.get('resolution') or {}
        return cls(
            timestamp=float(data['timestamp']),
            video_bitrate=float(data.get('videoBitrate', 0)),
            audio_bitrate=float(data.get('audioBitrate', 0)),
            packet_loss=float(data.get('packetLoss', 0)),
            latency=float(data.get('latency', 0)),
            frame_rate=float(data.get('frameRate', 0)),
            resolution=Resolution(
                width=int(resolution.get('width', 0)),
                height=int(resolution.get('height', 0))
            ),
            jitter=float(data.get('jitter', 0)),
        )
