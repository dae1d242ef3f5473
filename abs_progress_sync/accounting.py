"""
Elapsed listening time between sync checkpoints.
"""
import threading

from .log_utils import log, LOGDEBUG, LOGWARNING


class ElapsedTimeAccountant:
    """
    Hands out the seconds elapsed since the session's accounting checkpoint,
    each second exactly once.

    The checkpoint lives on the session snapshot
    (``last_accounting_timestamp``). Seconds belonging to a failed submission
    can be credited back and are added to the next delta.
    """

    def __init__(self, snapshot, carry_over=True):
        self.snapshot = snapshot
        self.carry_over = carry_over
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def checkpoint(self):
        return self.snapshot.last_accounting_timestamp

    def reset_checkpoint(self, now):
        self.snapshot.last_accounting_timestamp = int(now)

    def consume(self, now):
        """Return seconds since the last checkpoint and move the checkpoint to now"""
        now = int(now)
        elapsed = now - self.snapshot.last_accounting_timestamp
        if elapsed < 0:
            log(f"[ACCOUNT] Clock moved backwards by {-elapsed}s, re-anchoring", LOGWARNING)
            elapsed = 0
        self.snapshot.last_accounting_timestamp = now

        with self._lock:
            carried = self._pending
            self._pending = 0

        if carried:
            log(f"[ACCOUNT] Adding {carried}s carried over from failed sync", LOGDEBUG)
        return elapsed + carried

    def credit(self, seconds):
        """Give back seconds that never reached the server"""
        if not self.carry_over or seconds <= 0:
            return
        with self._lock:
            self._pending += int(seconds)

    @property
    def pending(self):
        with self._lock:
            return self._pending

    def discard(self):
        with self._lock:
            self._pending = 0
