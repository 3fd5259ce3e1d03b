"""
WebRTC stats reducer.

This module provides the StatsReducer class that turns a peer connection
statistics snapshot (W3C RTCStatsReport shape, as produced by browsers
and aiortc) into a single CallMetrics sample.
"""

import logging
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from call_quality.models.call_metrics import CallMetrics, Resolution

logger = logging.getLogger(__name__)


def _field(stat: Any, name: str, default: Any = None) -> Any:
    """Reads a field from a stats record given as a mapping or an object."""
    if isinstance(stat, Mapping):
        value = stat.get(name, default)
    else:
        value = getattr(stat, name, default)
    return default if value is None else value


def _iter_stats(report: Any) -> Iterable[Any]:
    """Iterates the records of a report given as a mapping (id -> stat) or a sequence."""
    if report is None:
        return []
    if isinstance(report, Mapping):
        return report.values()
    return report


def _timestamp_seconds(value: Any) -> Optional[float]:
    """
    Converts a stats timestamp to epoch seconds.

    aiortc reports datetimes; browsers report DOMHighResTimeStamp
    milliseconds.
    """
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, (int, float)) and value > 0:
        return float(value) / 1000.0
    return None


class StatsReducer:
    """
    Reduces RTCStats snapshots to CallMetrics.

    Field sources:
    - inbound-rtp (video): video bitrate, frame rate
    - inbound-rtp (audio): audio bitrate, jitter
    - track (video): resolution
    - remote-inbound-rtp: packet loss, round-trip latency

    Bitrates are derived from the change in bytesReceived between two
    consecutive snapshots, so the reducer keeps the previous counters per
    stream (the stat record id). Bitrates of concurrent inbound streams of
    the same kind are summed; frame rate and jitter take the largest value
    across streams.
    When several remote-inbound records are present the worst packet loss
    and latency are used. Any record type missing from a snapshot leaves
    its fields at zero.

    A stream seen for the first time (or whose counter went backwards) has
    no delta yet. When every inbound stream of a snapshot is in that state,
    is_baseline is True after reduce() and the sample carries no bitrate
    information.
    """

    def __init__(self):
        # stream id -> (bytesReceived, timestamp seconds)
        self._previous_counters: Dict[str, Tuple[float, float]] = {}
        self.is_baseline = False

    def reduce(self, report: Any, timestamp: Optional[float] = None) -> CallMetrics:
        """
        Reduces one stats snapshot to a metrics sample.

        Args:
            report: RTCStatsReport-like mapping (id -> record) or iterable of records.
                    Records may be mappings or objects with W3C field names.
            timestamp: Sample time in epoch seconds. If None, uses current time.

        Returns:
            CallMetrics for this snapshot
        """
        if timestamp is None:
            timestamp = time.time()

        video_bitrate = 0.0
        audio_bitrate = 0.0
        frame_rate = 0.0
        jitter_ms = 0.0
        packet_loss = 0.0
        latency_ms = 0.0
        width = 0
        height = 0

        seen_streams = set()
        baseline_streams = 0
        measured_streams = 0

        for stat in _iter_stats(report):
            stat_type = _field(stat, 'type')
            kind = _field(stat, 'kind')

            if stat_type == 'inbound-rtp' and kind in ('video', 'audio'):
                stream_id = str(_field(stat, 'id', kind))
                seen_streams.add(stream_id)
                bitrate = self._bitrate(stream_id, stat, timestamp)
                if bitrate is None:
                    if _field(stat, 'bytesReceived') is not None:
                        baseline_streams += 1
                    bitrate = 0.0
                else:
                    measured_streams += 1

                if kind == 'video':
                    video_bitrate += bitrate
                    frame_rate = max(frame_rate, float(_field(stat, 'framesPerSecond', 0)))
                else:
                    audio_bitrate += bitrate
                    # RTCStats jitter is in seconds
                    jitter_ms = max(jitter_ms, float(_field(stat, 'jitter', 0)) * 1000.0)

            elif stat_type == 'track' and kind == 'video':
                width = int(_field(stat, 'frameWidth', 0))
                height = int(_field(stat, 'frameHeight', 0))

            elif stat_type == 'remote-inbound-rtp':
                fraction_lost = float(_field(stat, 'fractionLost', 0))
                packet_loss = max(packet_loss, min(max(fraction_lost * 100.0, 0.0), 100.0))
                latency_ms = max(latency_ms, float(_field(stat, 'roundTripTime', 0)) * 1000.0)

        for stream_id in list(self._previous_counters):
            if stream_id not in seen_streams:
                del self._previous_counters[stream_id]
        self.is_baseline = baseline_streams > 0 and measured_streams == 0

        return CallMetrics(
            timestamp=timestamp,
            video_bitrate=video_bitrate,
            audio_bitrate=audio_bitrate,
            packet_loss=packet_loss,
            latency=max(latency_ms, 0.0),
            frame_rate=max(frame_rate, 0.0),
            resolution=Resolution(width=max(width, 0), height=max(height, 0)),
            jitter=max(jitter_ms, 0.0),
        )

    def _bitrate(self, stream_id: str, stat: Any, fallback_timestamp: float) -> Optional[float]:
        """
        Computes bits/sec from the bytesReceived delta since the last snapshot.

        Returns None when there is no delta: the counter is missing, this is
        the first snapshot of the stream, or the counter went backwards
        (stream restart).
        """
        bytes_received = _field(stat, 'bytesReceived')
        if bytes_received is None:
            return None

        bytes_received = float(bytes_received)
        stat_time = _timestamp_seconds(_field(stat, 'timestamp'))
        if stat_time is None:
            stat_time = fallback_timestamp

        previous = self._previous_counters.get(stream_id)
        self._previous_counters[stream_id] = (bytes_received, stat_time)

        if previous is None:
            return None

        previous_bytes, previous_time = previous
        if bytes_received < previous_bytes:
            return None
        elapsed = stat_time - previous_time
        if elapsed <= 0:
            return 0.0

        return (bytes_received - previous_bytes) * 8.0 / elapsed

    def reset(self) -> None:
        """Forgets byte counters, e.g. when a new call starts."""
        self._previous_counters.clear()
        self.is_baseline = False
