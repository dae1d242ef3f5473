"""
Fallback listening progress sync.

Progress is normally synced by the UI surface. When the player keeps going
without it (e.g. a car head unit with no UI attached) this syncer tracks
listening time itself and reports it every few seconds. The surface can
come and go at any time, so the timer always runs and each tick decides
who is responsible.
"""
import threading
import time
from functools import partial

from .accounting import ElapsedTimeAccountant
from .log_utils import log, LOGDEBUG, LOGINFO, LOGWARNING
from .mode_tracker import ModeTracker
from .models import ContentLocality, Mode, SessionSnapshot, StreamSyncPayload
from .periodic_driver import PeriodicDriver, SerialExecutor
from .playback import read_player_state
from .settings import SyncSettings
from .sync_dispatcher import SyncDispatcher


class ListeningSession:
    """Snapshot, mode and accounting for one book, from start() to reset()"""

    def __init__(self, snapshot, tracker, accountant, running=False):
        self.snapshot = snapshot
        self.tracker = tracker
        self.accountant = accountant
        self.running = running

    @classmethod
    def idle(cls):
        snapshot = SessionSnapshot.cleared()
        return cls(snapshot, ModeTracker(), ElapsedTimeAccountant(snapshot))

    @property
    def mode(self):
        return self.tracker.mode


def handle_tick(session, player_state, now, sync):
    """
    One timer tick: update the mode, then sync if this syncer is responsible
    and the book is playing.

    Returns whatever ``sync(session, player_state)`` returned, or None.
    """
    if not session.running:
        return None

    if session.tracker.evaluate(player_state.ui_attached):
        session.accountant.reset_checkpoint(now)

    if session.mode is Mode.AUTONOMOUS and player_state.is_playing:
        return sync(session, player_state)
    return None


class AudiobookProgressSyncer:

    def __init__(self, playback_service, settings=None, dispatcher=None, clock=time.time,
                 driver_factory=PeriodicDriver, tick_executor=None):
        self.playback = playback_service
        self.settings = settings or SyncSettings.from_env()
        self.clock = clock
        self.dispatcher = dispatcher or SyncDispatcher(self.settings, clock=clock)
        self.driver_factory = driver_factory
        self.tick_executor = tick_executor or SerialExecutor()
        self._driver = None
        self._session = ListeningSession.idle()

    @property
    def is_running(self):
        return self._session.running

    @property
    def mode(self):
        return self._session.mode

    @property
    def session(self):
        return self._session.snapshot

    def _now(self):
        return int(self.clock())

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self):
        title = self.playback.get_current_book_title()

        if self._session.running:
            log(f"[SYNCER] start: Timer already running for {self._session.snapshot.title}", LOGDEBUG)
            if title == self._session.snapshot.title:
                return
            log("[SYNCER] start: Changed audiobook stream - resetting timer", LOGINFO)
            self.reset()

        is_local = bool(self.playback.get_current_book_is_local())
        stream_id = self.playback.get_current_stream_id() or ''
        snapshot = SessionSnapshot(
            title=title or '',
            content_id=self.playback.get_current_book_id() or '',
            stream_id=stream_id,
            is_local=is_local,
            locality=ContentLocality.classify(is_local, stream_id),
            last_playback_position_ms=int(self.playback.get_current_time() or 0),
            last_accounting_timestamp=self._now(),
        )
        session = ListeningSession(
            snapshot,
            ModeTracker(surface_attached_at_start=bool(self.playback.get_is_ui_attached())),
            ElapsedTimeAccountant(snapshot, carry_over=self.settings.carry_over_failed_time),
            running=True,
        )
        self._session = session

        log(f"[SYNCER] Listening started: {snapshot.title} | {snapshot.content_id} | "
            f"{snapshot.stream_id} | {snapshot.locality.value} | mode={session.mode.value}", LOGINFO)

        driver = self.driver_factory(self.settings.sync_interval, partial(self._tick, session), self.tick_executor)
        self._driver = driver
        driver.start()

    def stop(self):
        """Stop listening, flushing progress first if this syncer was responsible"""
        session = self._session
        if not session.running:
            return None
        log(f"[SYNCER] stop: Stopping listening for {session.snapshot.title}", LOGINFO)

        future = None
        if session.mode is Mode.AUTONOMOUS:
            future = self._sync_session(session, read_player_state(self.playback))
        self.reset()
        return future

    def reset(self):
        driver = self._driver
        self._driver = None
        if driver is not None:
            driver.cancel()

        session = self._session
        session.running = False
        session.accountant.discard()
        if session.snapshot.title or session.snapshot.content_id:
            log(f"[SYNCER] Reset session for {session.snapshot.title}", LOGDEBUG)
        self._session = ListeningSession.idle()

    def shutdown(self, wait=False):
        """Stop the session and release the worker threads"""
        self.stop()
        self.tick_executor.shutdown(wait=wait)
        self.dispatcher.shutdown(wait=wait)

    # =========================================================================
    # SYNC
    # =========================================================================

    def sync(self):
        """Send the time listened since the last checkpoint. Returns the request future or None."""
        session = self._session
        if not session.running:
            log("[SYNCER] sync: No listening session", LOGDEBUG)
            return None
        return self._sync_session(session, read_player_state(self.playback))

    def tick(self):
        """Run one timer tick on the calling thread"""
        return self._tick(self._session)

    def _tick(self, session):
        return handle_tick(session, read_player_state(self.playback), self._now(), self._sync_session)

    def _sync_session(self, session, player_state):
        elapsed = session.accountant.consume(self._now())
        return self.dispatcher.dispatch(
            session.snapshot,
            player_state,
            elapsed,
            callback=partial(self._on_sync_done, session)
        )

    @staticmethod
    def _on_sync_done(session, payload, result):
        kind = 'Stream' if isinstance(payload, StreamSyncPayload) else 'Local'
        if result.ok:
            log(f"[SYNCER] {kind} sync done", LOGDEBUG)
            return

        log(f"[SYNCER] {kind} sync failed: {result.error}", LOGWARNING)
        if isinstance(payload, StreamSyncPayload):
            session.accountant.credit(payload.time_listened)


# =========================================================================
# GLOBAL INSTANCE
# =========================================================================

_progress_syncer = None
_syncer_lock = threading.Lock()


def get_progress_syncer(playback_service=None, **kwargs):
    """Get the process-wide syncer, creating it on first use"""
    global _progress_syncer
    with _syncer_lock:
        if _progress_syncer is None:
            if playback_service is None:
                raise ValueError("playback_service is required to create the progress syncer")
            _progress_syncer = AudiobookProgressSyncer(playback_service, **kwargs)
        return _progress_syncer


def reset_progress_syncer(wait=False):
    """Shut down and forget the process-wide syncer"""
    global _progress_syncer
    with _syncer_lock:
        syncer = _progress_syncer
        _progress_syncer = None
    if syncer is not None:
        syncer.shutdown(wait=wait)
