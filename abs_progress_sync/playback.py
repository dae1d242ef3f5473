"""
Interface to the player that owns the listening session.
"""
from .models import PlayerState


class PlaybackService:
    """
    Values the syncer reads from the player.

    Times are in milliseconds. An empty server url or token means the
    server is not configured.
    """

    def get_is_ui_attached(self):
        raise NotImplementedError

    def get_current_book_title(self):
        raise NotImplementedError

    def get_current_book_is_local(self):
        raise NotImplementedError

    def get_current_book_id(self):
        raise NotImplementedError

    def get_current_stream_id(self):
        """Stream id of the session, 'download' for a fully downloaded book"""
        raise NotImplementedError

    def get_current_time(self):
        raise NotImplementedError

    def get_audiobook_duration(self):
        raise NotImplementedError

    def is_playing(self):
        raise NotImplementedError

    def get_server_url(self):
        raise NotImplementedError

    def get_user_token(self):
        raise NotImplementedError


def read_player_state(service):
    """Take a snapshot of the values one tick needs"""
    return PlayerState(
        ui_attached=bool(service.get_is_ui_attached()),
        is_playing=bool(service.is_playing()),
        current_time_ms=int(service.get_current_time() or 0),
        duration_ms=int(service.get_audiobook_duration() or 0),
        server_url=service.get_server_url() or '',
        token=service.get_user_token() or '',
    )
