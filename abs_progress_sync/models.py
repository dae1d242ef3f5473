"""
Session state, per-tick player snapshots and sync payloads.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

DOWNLOAD_STREAM_ID = 'download'


class ContentLocality(Enum):
    REMOTE = 'remote'
    LOCAL_PARTIAL = 'local_partial'
    LOCAL_COMPLETE = 'local_complete'

    @classmethod
    def classify(cls, is_local, stream_id):
        """Map the player's locality flag and stream id onto a locality"""
        if not is_local:
            return cls.REMOTE
        if stream_id == DOWNLOAD_STREAM_ID:
            return cls.LOCAL_COMPLETE
        return cls.LOCAL_PARTIAL


class Mode(Enum):
    UI_ACTIVE = 'ui_active'
    AUTONOMOUS = 'autonomous'


@dataclass
class SessionSnapshot:
    """What the syncer knows about the book being listened to"""
    title: str = ''
    content_id: str = ''
    stream_id: str = ''
    is_local: bool = False
    locality: ContentLocality = ContentLocality.REMOTE
    last_playback_position_ms: int = 0
    last_accounting_timestamp: int = 0

    @classmethod
    def cleared(cls):
        return cls()


@dataclass(frozen=True)
class PlayerState:
    """Read-only copy of the player values a single tick works with"""
    ui_attached: bool
    is_playing: bool
    current_time_ms: int
    duration_ms: int
    server_url: str
    token: str

    @property
    def current_time_sec(self):
        return self.current_time_ms // 1000

    @property
    def duration_sec(self):
        return self.duration_ms // 1000


@dataclass(frozen=True)
class StreamSyncPayload:
    time_listened: int
    current_time: int
    stream_id: str
    content_id: str

    def to_json(self):
        return {
            'timeListened': self.time_listened,
            'currentTime': self.current_time,
            'streamId': self.stream_id,
            'audiobookId': self.content_id,
        }


@dataclass(frozen=True)
class LocalSyncPayload:
    total_duration: int
    current_time: int
    progress: float
    last_update: int
    content_id: str
    is_read: bool = False

    @classmethod
    def build(cls, duration_sec, current_time_sec, last_update_ms, content_id):
        progress = (current_time_sec / duration_sec) if duration_sec > 0 else 0
        return cls(
            total_duration=duration_sec,
            current_time=current_time_sec,
            progress=progress,
            last_update=last_update_ms,
            content_id=content_id,
        )

    def to_json(self):
        return {
            'totalDuration': self.total_duration,
            'currentTime': self.current_time,
            'progress': self.progress,
            'isRead': self.is_read,
            'lastUpdate': self.last_update,
            'audiobookId': self.content_id,
        }


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one round trip to the server"""
    endpoint: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
