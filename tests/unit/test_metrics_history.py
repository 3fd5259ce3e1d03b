"""
Unit tests for MetricsHistory.
"""

import pytest

from call_quality.analyzers import MetricsHistory
from call_quality.models import CallMetrics, Resolution


def _sample(index, **overrides):
    values = dict(
        timestamp=float(index),
        video_bitrate=1_000_000 + index,
        audio_bitrate=64_000,
        packet_loss=1.0,
        latency=100.0,
        jitter=5.0,
        frame_rate=30.0,
        resolution=Resolution(1280, 720)
    )
    values.update(overrides)
    return CallMetrics(**values)


class TestMetricsHistory:
    """Test suite for MetricsHistory."""
    
    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            MetricsHistory(0)
    
    def test_never_exceeds_capacity(self):
        history = MetricsHistory(10)
        
        for index in range(25):
            history.append(_sample(index))
            assert len(history) <= 10
        
        assert len(history) == 10
    
    def test_evicts_oldest_first(self):
        history = MetricsHistory(10)
        samples = [_sample(index) for index in range(11)]
        
        for sample in samples:
            history.append(sample)
        
        assert samples[0] not in history.to_list()
        assert history.to_list() == samples[1:]
        assert history.latest() == samples[-1]
    
    def test_average_of_empty_is_none(self):
        assert MetricsHistory().average() is None
    
    def test_average_of_one_sample_is_unchanged(self):
        history = MetricsHistory()
        sample = _sample(3)
        history.append(sample)
        
        assert history.average() == sample
    
    def test_average_means_numeric_fields(self):
        history = MetricsHistory()
        history.append(_sample(1, video_bitrate=1_000_000, latency=100, packet_loss=0, jitter=2))
        history.append(_sample(2, video_bitrate=3_000_000, latency=300, packet_loss=4, jitter=6,
                               resolution=Resolution(640, 360)))
        
        average = history.average()
        
        assert average.video_bitrate == pytest.approx(2_000_000)
        assert average.latency == pytest.approx(200)
        assert average.packet_loss == pytest.approx(2)
        assert average.jitter == pytest.approx(4)
        assert average.resolution == Resolution(640, 360)
        assert average.timestamp == 2.0
    
    def test_clear(self):
        history = MetricsHistory()
        history.append(_sample(1))
        history.clear()
        
        assert len(history) == 0
        assert history.latest() is None
    
    def test_to_dicts(self):
        history = MetricsHistory()
        history.append(_sample(1))
        
        assert history.to_dicts() == [_sample(1).to_dict()]
