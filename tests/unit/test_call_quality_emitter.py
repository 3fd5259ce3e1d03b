"""
Unit tests for CallQualityMetricsEmitter.
"""

import json
from unittest.mock import Mock

import pytest

from call_quality.models import CallMetrics, QualityChangeEvent, QualityTier, Resolution
from call_quality.notifiers import CallQualityMetricsEmitter


class TestCallQualityMetricsEmitter:
    """Test suite for CallQualityMetricsEmitter."""
    
    @pytest.fixture
    def mock_cloudwatch(self):
        return Mock()
    
    @pytest.fixture
    def mock_eventbridge(self):
        return Mock()
    
    @pytest.fixture
    def emitter(self, mock_cloudwatch, mock_eventbridge):
        return CallQualityMetricsEmitter(mock_cloudwatch, mock_eventbridge)
    
    @pytest.fixture
    def metrics(self):
        return CallMetrics(
            timestamp=1_700_000_000.0,
            video_bitrate=1_200_000,
            audio_bitrate=48_000,
            packet_loss=1.0,
            latency=150,
            jitter=12,
            frame_rate=22,
            resolution=Resolution(1280, 720)
        )
    
    def test_emit_metrics(self, emitter, mock_cloudwatch, metrics):
        emitter.emit_metrics('session-123', metrics, QualityTier.GOOD)
        
        mock_cloudwatch.put_metric_data.assert_called_once()
        kwargs = mock_cloudwatch.put_metric_data.call_args[1]
        assert kwargs['Namespace'] == 'CallQuality'
        
        by_name = {m['MetricName']: m for m in kwargs['MetricData']}
        assert set(by_name) == {
            'VideoBitrate', 'AudioBitrate', 'PacketLoss', 'Latency',
            'Jitter', 'FrameRate', 'QualityScore'
        }
        assert by_name['VideoBitrate']['Value'] == 1_200_000.0
        assert by_name['PacketLoss']['Unit'] == 'Percent'
        assert by_name['QualityScore']['Value'] == 3.0
        assert by_name['Latency']['Dimensions'] == [{'Name': 'SessionId', 'Value': 'session-123'}]
    
    def test_emit_metrics_swallows_errors(self, emitter, mock_cloudwatch, metrics):
        mock_cloudwatch.put_metric_data.side_effect = Exception('CloudWatch down')
        
        emitter.emit_metrics('session-123', metrics, QualityTier.GOOD)
    
    def test_emit_quality_change(self, emitter, mock_eventbridge):
        event = QualityChangeEvent('session-123', QualityTier.GOOD, QualityTier.CRITICAL, 1.0)
        
        emitter.emit_quality_change(event)
        
        entries = mock_eventbridge.put_events.call_args[1]['Entries']
        assert entries[0]['DetailType'] == 'call.quality.critical'
        assert json.loads(entries[0]['Detail'])['severity'] == 'error'
    
    def test_emit_quality_change_swallows_errors(self, emitter, mock_eventbridge):
        mock_eventbridge.put_events.side_effect = Exception('EventBridge down')
        event = QualityChangeEvent('session-123', None, QualityTier.GOOD, 1.0)
        
        emitter.emit_quality_change(event)
        
        mock_eventbridge.put_events.assert_called_once()
