"""
Recurring listening timer.

A daemon thread keeps the cadence and posts every tick to a single-worker
executor, so tick handlers never run concurrently with each other.
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from .log_utils import log, log_exception, LOGDEBUG, LOGINFO, LOGWARNING


class SerialExecutor:
    """Runs posted callables one at a time, in order"""

    def __init__(self, name='SyncTick'):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._closed = False

    def post(self, fn, *args):
        if self._closed:
            log("[DRIVER] Tick executor closed, dropping work", LOGDEBUG)
            return None
        try:
            return self._executor.submit(self._run, fn, *args)
        except RuntimeError:
            # Shut down between the check above and submit
            log("[DRIVER] Tick executor closed, dropping work", LOGDEBUG)
            return None

    @staticmethod
    def _run(fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            log_exception(f"[DRIVER] Tick error: {e}")
            return None

    def shutdown(self, wait=False):
        self._closed = True
        self._executor.shutdown(wait=wait)


class PeriodicDriver:
    """Fires ``callback`` at t=0 and then every ``interval`` seconds until cancelled"""

    def __init__(self, interval, callback, executor, name='ListeningTimer'):
        self.interval = interval
        self.callback = callback
        self.executor = executor
        self.name = name
        self.fire_count = 0
        self._cancelled = threading.Event()
        self._thread = None

    def start(self):
        if self._thread and self._thread.is_alive():
            log(f"[DRIVER] {self.name} already running", LOGWARNING)
            return
        self._cancelled.clear()
        self._thread = threading.Thread(target=self._worker, name=self.name, daemon=True)
        self._thread.start()
        log(f"[DRIVER] {self.name} started, interval={self.interval}s", LOGINFO)

    def cancel(self):
        """Stop future fires. A tick that is already running is left alone."""
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        log(f"[DRIVER] {self.name} cancelled after {self.fire_count} fires", LOGINFO)

    @property
    def cancelled(self):
        return self._cancelled.is_set()

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout=None):
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _fire(self):
        # Queued before cancel() but not started yet
        if self._cancelled.is_set():
            return None
        return self.callback()

    def _worker(self):
        started = time.monotonic()
        while not self._cancelled.is_set():
            self.fire_count += 1
            self.executor.post(self._fire)

            next_fire = started + self.fire_count * self.interval
            if self._cancelled.wait(max(0.0, next_fire - time.monotonic())):
                break
        log(f"[DRIVER] {self.name} stopped", LOGDEBUG)
