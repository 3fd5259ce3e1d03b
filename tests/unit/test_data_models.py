"""
Unit tests for call quality data models.
"""

import json
import time

import pytest

from call_quality.exceptions import ConfigurationError, QualityPersistenceError
from call_quality.models import (
    DEFAULT_THRESHOLDS,
    CallMetrics,
    CallSession,
    MonitorConfig,
    QualityChangeEvent,
    QualityTier,
    Resolution,
    ThresholdSet,
)


class TestCallMetrics:
    """Test suite for CallMetrics."""
    
    def test_defaults(self):
        metrics = CallMetrics(timestamp=1.0)
        
        assert metrics.video_bitrate == 0.0
        assert metrics.resolution == Resolution(0, 0)
    
    @pytest.mark.parametrize('kwargs', [
        {'timestamp': -1},
        {'timestamp': 0, 'video_bitrate': -1},
        {'timestamp': 0, 'packet_loss': 101},
        {'timestamp': 0, 'packet_loss': -0.1},
        {'timestamp': 0, 'latency': -5},
        {'timestamp': 0, 'frame_rate': -1},
        {'timestamp': 0, 'jitter': -1},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            CallMetrics(**kwargs)
    
    def test_is_immutable(self):
        metrics = CallMetrics(timestamp=1.0)
        
        with pytest.raises(AttributeError):
            metrics.latency = 5
    
    def test_to_dict_uses_stored_shape(self):
        metrics = CallMetrics(
            timestamp=10.0,
            video_bitrate=1_500_000,
            audio_bitrate=64_000,
            packet_loss=1.5,
            latency=120,
            jitter=8,
            frame_rate=24,
            resolution=Resolution(640, 480)
        )
        
        assert metrics.to_dict() == {
            'timestamp': 10.0,
            'videoBitrate': 1_500_000,
            'audioBitrate': 64_000,
            'packetLoss': 1.5,
            'latency': 120,
            'frameRate': 24,
            'resolution': {'width': 640, 'height': 480},
            'jitter': 8,
        }
    
    def test_from_dict_tolerates_missing_fields(self):
        metrics = CallMetrics.from_dict({'timestamp': 5, 'latency': 40})
        
        assert metrics.latency == 40.0
        assert metrics.frame_rate == 0.0
        assert metrics.resolution == Resolution()


class TestQualityTier:
    """Test suite for QualityTier ordering."""
    
    def test_ordering(self):
        assert QualityTier.EXCELLENT.is_better_than(QualityTier.GOOD)
        assert QualityTier.POOR.is_better_than(QualityTier.CRITICAL)
        assert QualityTier.FAIR.is_worse_than(QualityTier.GOOD)
        assert not QualityTier.GOOD.is_worse_than(QualityTier.GOOD)
    
    def test_values(self):
        assert [tier.value for tier in QualityTier] == [
            'excellent', 'good', 'fair', 'poor', 'critical'
        ]
    
    def test_default_table(self):
        excellent = DEFAULT_THRESHOLDS[QualityTier.EXCELLENT]
        poor = DEFAULT_THRESHOLDS[QualityTier.POOR]
        
        assert excellent == ThresholdSet(2_000_000, 100, 0.5, 25)
        assert poor == ThresholdSet(250_000, 500, 10, 10)
        assert QualityTier.CRITICAL not in DEFAULT_THRESHOLDS


class TestCallSession:
    """Test suite for CallSession."""
    
    def test_requires_id(self):
        with pytest.raises(ValueError):
            CallSession(id='')
    
    def test_start_time_defaults_to_now(self):
        before = time.time()
        session = CallSession(id='s1')
        
        assert session.start_time >= before


class TestMonitorConfig:
    """Test suite for MonitorConfig."""
    
    def test_defaults_are_valid(self):
        config = MonitorConfig()
        
        assert config.validate() == []
        assert config.sample_interval_ms == 1000
        assert config.history_size == 10
        assert config.sessions_collection == 'videoSessions'
        assert config.sample_interval_s == 1.0
    
    def test_invalid_values(self):
        config = MonitorConfig(
            sample_interval_ms=0,
            history_size=0,
            sessions_collection='',
            stats_timeout_seconds=-1
        )
        
        errors = config.validate()
        
        assert 'Sample interval must be positive' in errors
        assert 'History size must be at least 1' in errors
        assert 'Sessions collection must not be empty' in errors
        assert 'Stats timeout must be non-negative' in errors
    
    def test_missing_tier_thresholds(self):
        thresholds = dict(DEFAULT_THRESHOLDS)
        del thresholds[QualityTier.FAIR]
        
        errors = MonitorConfig(thresholds=thresholds).validate()
        
        assert errors == ['Thresholds missing for tiers: fair']
    
    def test_inverted_thresholds(self):
        thresholds = dict(DEFAULT_THRESHOLDS)
        thresholds[QualityTier.GOOD] = ThresholdSet(3_000_000, 50, 0.1, 30)
        
        errors = MonitorConfig(thresholds=thresholds).validate()
        
        assert 'Thresholds for good must not be stricter than excellent' in errors
    
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('CALL_QUALITY_SAMPLE_INTERVAL_MS', '500')
        monkeypatch.setenv('CALL_QUALITY_HISTORY_SIZE', '5')
        monkeypatch.setenv('CALL_QUALITY_STORE_TIMEOUT_SECONDS', '2.5')
        monkeypatch.setenv('VIDEO_SESSIONS_COLLECTION', 'videoSessions-dev')
        
        config = MonitorConfig.from_env()
        
        assert config.sample_interval_ms == 500
        assert config.history_size == 5
        assert config.store_timeout_seconds == 2.5
        assert config.stats_timeout_seconds == 2.0
        assert config.sessions_collection == 'videoSessions-dev'
    
    def test_to_dict_is_json_serializable(self):
        data = MonitorConfig().to_dict()
        
        assert json.loads(json.dumps(data))['thresholds']['good']['max_latency'] == 200


class TestQualityChangeEvent:
    """Test suite for QualityChangeEvent."""
    
    def test_requires_different_tiers(self):
        with pytest.raises(ValueError):
            QualityChangeEvent('s1', QualityTier.GOOD, QualityTier.GOOD, 1.0)
    
    @pytest.mark.parametrize('previous,current,severity', [
        (QualityTier.GOOD, QualityTier.CRITICAL, 'error'),
        (QualityTier.EXCELLENT, QualityTier.FAIR, 'warning'),
        (QualityTier.POOR, QualityTier.GOOD, 'info'),
        (None, QualityTier.FAIR, 'info'),
    ])
    def test_severity(self, previous, current, severity):
        event = QualityChangeEvent('s1', previous, current, 1.0)
        
        assert event.severity == severity
    
    def test_eventbridge_entry(self):
        event = QualityChangeEvent(
            's1', QualityTier.GOOD, QualityTier.POOR, 1.0, metrics={'latency': 400}
        )
        
        entry = event.to_eventbridge_entry()
        detail = json.loads(entry['Detail'])
        
        assert entry['Source'] == 'nexprolink.call.quality'
        assert entry['DetailType'] == 'call.quality.poor'
        assert detail['sessionId'] == 's1'
        assert detail['previousQuality'] == 'good'
        assert detail['quality'] == 'poor'
        assert detail['metrics'] == {'latency': 400}


class TestCallQualityExceptions:
    """Test suite for call quality exceptions."""
    
    def test_configuration_error_lists_validation_errors(self):
        error = ConfigurationError('Invalid', validation_errors=['a', 'b'])
        
        assert str(error) == 'Invalid: a; b'
    
    def test_persistence_error_includes_session(self):
        error = QualityPersistenceError('write failed', session_id='s1')
        
        assert str(error) == 's1: write failed'
