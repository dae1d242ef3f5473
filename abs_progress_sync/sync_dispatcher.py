"""
Builds progress payloads and submits them without blocking the caller.
"""
import time
from concurrent.futures import ThreadPoolExecutor

import requests

from .library_service import AudioBookShelfLibraryService
from .log_utils import log, log_exception, LOGDEBUG, LOGINFO
from .models import ContentLocality, LocalSyncPayload, StreamSyncPayload, SyncResult
from .settings import SyncSettings


class SyncDispatcher:
    """
    Fire-and-forget submission of progress payloads.

    ``dispatch`` returns a Future resolving to a SyncResult, or None when
    nothing was sent. The completion callback is called as
    ``callback(payload, result)`` after every attempted request, failed or
    not, and never for skipped ones.
    """

    def __init__(self, settings=None, http_session=None, executor=None, clock=time.time):
        self.settings = settings or SyncSettings()
        self.http_session = http_session if http_session is not None else requests.Session()
        self.clock = clock
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.network_workers,
            thread_name_prefix='ProgressSync'
        )

    def build_payload(self, session, player_state, elapsed):
        """Pick the payload shape for the session's content, None if nothing is sent"""
        if session.locality is ContentLocality.REMOTE:
            return StreamSyncPayload(
                time_listened=elapsed,
                current_time=player_state.current_time_sec,
                stream_id=session.stream_id,
                content_id=session.content_id,
            )

        if session.locality is ContentLocality.LOCAL_COMPLETE:
            return LocalSyncPayload.build(
                duration_sec=player_state.duration_sec,
                current_time_sec=player_state.current_time_sec,
                last_update_ms=int(self.clock() * 1000),
                content_id=session.content_id,
            )

        return None

    def dispatch(self, session, player_state, elapsed, callback=None):
        payload = self.build_payload(session, player_state, elapsed)
        if payload is None:
            log(f"[DISPATCH] {session.title}: local book is not a finished download, nothing to sync", LOGDEBUG)
            return None

        if not player_state.server_url or not player_state.token:
            log("[DISPATCH] Server url or token not set, skipping sync", LOGDEBUG)
            return None

        service = AudioBookShelfLibraryService(
            player_state.server_url,
            player_state.token,
            session=self.http_session,
            timeout=self.settings.request_timeout
        )

        if isinstance(payload, StreamSyncPayload):
            log(f"[DISPATCH] Sending stream sync: elapsed {payload.time_listened}s | "
                f"{payload.stream_id} | {payload.content_id}", LOGINFO)
            send = service.sync_stream
        else:
            log(f"[DISPATCH] Sending local sync: {payload.current_time}s / {payload.total_duration}s | "
                f"{payload.content_id}", LOGINFO)
            send = service.sync_local

        try:
            future = self.executor.submit(self._submit, send, payload)
        except RuntimeError:
            log("[DISPATCH] Network executor shut down, dropping sync", LOGDEBUG)
            return None

        if callback is not None:
            future.add_done_callback(lambda f: self._complete(f, payload, callback))
        return future

    @staticmethod
    def _submit(send, payload):
        try:
            return send(payload)
        except Exception as e:
            log_exception(f"[DISPATCH] Unexpected sync error: {e}")
            return SyncResult(endpoint='', ok=False, error=str(e))

    @staticmethod
    def _complete(future, payload, callback):
        if future.cancelled():
            return
        try:
            callback(payload, future.result())
        except Exception as e:
            log_exception(f"[DISPATCH] Sync callback error: {e}")

    def shutdown(self, wait=False):
        if self._owns_executor:
            self.executor.shutdown(wait=wait)
