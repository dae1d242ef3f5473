"""
Audiobookshelf fallback progress syncer.
"""
from .models import ContentLocality, Mode, SyncResult
from .playback import PlaybackService
from .progress_syncer import AudiobookProgressSyncer, get_progress_syncer, reset_progress_syncer
from .settings import SyncSettings

__version__ = '1.0.0'

__all__ = [
    'AudiobookProgressSyncer',
    'ContentLocality',
    'Mode',
    'PlaybackService',
    'SyncResult',
    'SyncSettings',
    'get_progress_syncer',
    'reset_progress_syncer',
]
