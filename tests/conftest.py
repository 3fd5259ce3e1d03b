"""
Shared pytest fixtures for call quality and offline sync tests.
"""

import os
import pytest

from call_quality.models import CallSession, MonitorConfig
from offline_sync.models import SyncConfig
from offline_sync.storage import InMemoryLocalStore
from shared.data_access import InMemoryDocumentStore


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


def make_stats_report(
    timestamp_ms: float = 1_700_000_000_000.0,
    video_bytes: float = None,
    audio_bytes: float = None,
    frames_per_second: float = 30.0,
    jitter_s: float = 0.01,
    width: int = 1280,
    height: int = 720,
    fraction_lost: float = 0.0,
    round_trip_time_s: float = 0.05
) -> dict:
    """
    Builds an RTCStatsReport-shaped mapping (id -> record).
    
    Records are omitted when their counters are None so tests can model
    partial reports.
    """
    report = {}
    if video_bytes is not None:
        report['RTCInboundRTPVideoStream_1'] = {
            'id': 'RTCInboundRTPVideoStream_1',
            'type': 'inbound-rtp',
            'kind': 'video',
            'timestamp': timestamp_ms,
            'bytesReceived': video_bytes,
            'framesPerSecond': frames_per_second,
        }
    if audio_bytes is not None:
        report['RTCInboundRTPAudioStream_2'] = {
            'id': 'RTCInboundRTPAudioStream_2',
            'type': 'inbound-rtp',
            'kind': 'audio',
            'timestamp': timestamp_ms,
            'bytesReceived': audio_bytes,
            'jitter': jitter_s,
        }
    report['RTCMediaStreamTrack_receiver_1'] = {
        'id': 'RTCMediaStreamTrack_receiver_1',
        'type': 'track',
        'kind': 'video',
        'timestamp': timestamp_ms,
        'frameWidth': width,
        'frameHeight': height,
    }
    report['RTCRemoteInboundRtpVideoStream_3'] = {
        'id': 'RTCRemoteInboundRtpVideoStream_3',
        'type': 'remote-inbound-rtp',
        'kind': 'video',
        'timestamp': timestamp_ms,
        'fractionLost': fraction_lost,
        'roundTripTime': round_trip_time_s,
    }
    return report


class FakePeerConnection:
    """
    Stats source producing one snapshot per get_stats() call.
    
    Each call advances the clock by one second and the byte counters by
    the configured bitrates, so from the second snapshot on the reduced
    bitrates equal video_bitrate and audio_bitrate.
    """
    
    def __init__(
        self,
        video_bitrate: float = 2_500_000,
        audio_bitrate: float = 64_000,
        frames_per_second: float = 30.0,
        fraction_lost: float = 0.001,
        round_trip_time_s: float = 0.05,
        jitter_s: float = 0.01
    ):
        self.video_bitrate = video_bitrate
        self.audio_bitrate = audio_bitrate
        self.frames_per_second = frames_per_second
        self.fraction_lost = fraction_lost
        self.round_trip_time_s = round_trip_time_s
        self.jitter_s = jitter_s
        self.calls = 0
        self._timestamp_ms = 1_700_000_000_000.0
        self._video_bytes = 0.0
        self._audio_bytes = 0.0
    
    def get_stats(self) -> dict:
        self.calls += 1
        self._timestamp_ms += 1000.0
        self._video_bytes += self.video_bitrate / 8.0
        self._audio_bytes += self.audio_bitrate / 8.0
        return make_stats_report(
            timestamp_ms=self._timestamp_ms,
            video_bytes=self._video_bytes,
            audio_bytes=self._audio_bytes,
            frames_per_second=self.frames_per_second,
            jitter_s=self.jitter_s,
            fraction_lost=self.fraction_lost,
            round_trip_time_s=self.round_trip_time_s
        )


class AsyncPeerConnection(FakePeerConnection):
    """aiortc-style source whose getStats() is a coroutine."""
    
    get_stats = None
    
    async def getStats(self) -> dict:
        return FakePeerConnection.get_stats(self)


class FailingDocumentStore(InMemoryDocumentStore):
    """InMemoryDocumentStore whose calls can be made to fail and are counted."""
    
    def __init__(self, error: Exception = None):
        super().__init__()
        self.error = error
        self.calls = []
    
    def _maybe_fail(self, name: str, path: str) -> None:
        self.calls.append((name, path))
        if self.error is not None:
            raise self.error
    
    async def get(self, path):
        self._maybe_fail('get', path)
        return await super().get(path)
    
    async def set(self, path, fields):
        self._maybe_fail('set', path)
        await super().set(path, fields)
    
    async def update(self, path, fields):
        self._maybe_fail('update', path)
        await super().update(path, fields)
    
    async def set_fields(self, path, fields):
        self._maybe_fail('set_fields', path)
        await super().set_fields(path, fields)


@pytest.fixture
def document_store():
    """Fixture providing an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def failing_store():
    """Fixture providing a document store that records calls and can fail."""
    return FailingDocumentStore()


@pytest.fixture
def local_store():
    """Fixture providing an empty in-memory local store."""
    return InMemoryLocalStore()


@pytest.fixture
def call_session():
    """Fixture providing a consultation call session."""
    return CallSession(
        id='session-123',
        appointment_id='appt-456',
        expert_id='expert-789',
        client_id='client-012'
    )


@pytest.fixture
def monitor_config():
    """Monitor configuration whose loop only samples once on start."""
    return MonitorConfig(sample_interval_ms=60_000)


@pytest.fixture
def sync_config():
    """Fixture providing default sync configuration with timeouts disabled."""
    return SyncConfig(store_timeout_seconds=0)


@pytest.fixture
def stats_report_factory():
    """Fixture providing the RTCStatsReport builder."""
    return make_stats_report


@pytest.fixture
def peer_connection_factory():
    """Fixture providing the synchronous fake peer connection class."""
    return FakePeerConnection


@pytest.fixture
def async_peer_connection_factory():
    """Fixture providing the coroutine-based fake peer connection class."""
    return AsyncPeerConnection
