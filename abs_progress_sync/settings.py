"""
Syncer settings.

Values come from ABS_SYNC_* environment variables. Missing or malformed
values fall back to the defaults below.
"""
import os
from dataclasses import dataclass

from .log_utils import log, LOGWARNING

SETTING_PREFIX = 'ABS_SYNC_'

DEFAULT_SYNC_INTERVAL = 5  # seconds between ticks
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_NETWORK_WORKERS = 2
MIN_SYNC_INTERVAL = 1


def get_setting(environ, setting_id, default=''):
    val = environ.get(SETTING_PREFIX + setting_id.upper())
    return val if val else default


def get_setting_bool(environ, setting_id, default=False):
    val = get_setting(environ, setting_id, 'true' if default else 'false')
    return val.strip().lower() in ('true', '1', 'yes', 'on')


def get_setting_int(environ, setting_id, default=0):
    val = get_setting(environ, setting_id, str(default))
    try:
        return int(val)
    except ValueError:
        log(f"[SETTINGS] Invalid integer for {setting_id}: {val!r}, using {default}", LOGWARNING)
        return default


@dataclass(frozen=True)
class SyncSettings:
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    carry_over_failed_time: bool = True
    network_workers: int = DEFAULT_NETWORK_WORKERS

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from the process environment (or a given mapping)"""
        if environ is None:
            environ = os.environ

        interval = get_setting_int(environ, 'interval', DEFAULT_SYNC_INTERVAL)
        if interval < MIN_SYNC_INTERVAL:
            log(f"[SETTINGS] Sync interval {interval}s too small, clamping to {MIN_SYNC_INTERVAL}s", LOGWARNING)
            interval = MIN_SYNC_INTERVAL

        return cls(
            sync_interval=interval,
            request_timeout=max(get_setting_int(environ, 'request_timeout', DEFAULT_REQUEST_TIMEOUT), 1),
            carry_over_failed_time=get_setting_bool(environ, 'carry_over', True),
            network_workers=max(get_setting_int(environ, 'network_workers', DEFAULT_NETWORK_WORKERS), 1),
        )
