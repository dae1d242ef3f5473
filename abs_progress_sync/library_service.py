"""
Audiobookshelf progress endpoints used by the fallback syncer.
"""
import requests

from .log_utils import log, mask_token, LOGDEBUG, LOGERROR, LOGINFO
from .models import SyncResult

SYNC_STREAM_ENDPOINT = '/api/syncStream'
SYNC_LOCAL_ENDPOINT = '/api/syncLocal'


class ProgressSyncError(Exception):
    """Base exception for progress sync errors."""
    pass


class SyncRequestFailed(ProgressSyncError):
    """A sync request did not complete successfully."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class AudioBookShelfLibraryService:
    """Posts listening progress to an Audiobookshelf server"""

    def __init__(self, base_url, token, session=None, timeout=10):
        self.base_url = (base_url or '').rstrip('/')
        self.token = token
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}"
        }

    def is_configured(self):
        return bool(self.base_url) and bool(self.token)

    def sync_stream(self, payload):
        """Report progress of a streamed book"""
        return self._send(SYNC_STREAM_ENDPOINT, payload)

    def sync_local(self, payload):
        """Report progress of a downloaded book"""
        return self._send(SYNC_LOCAL_ENDPOINT, payload)

    def _send(self, endpoint, payload):
        try:
            status_code = self._post(endpoint, payload.to_json())
            return SyncResult(endpoint=endpoint, ok=True, status_code=status_code)
        except SyncRequestFailed as e:
            return SyncResult(endpoint=endpoint, ok=False, status_code=e.status_code, error=str(e))

    def _post(self, endpoint, data):
        url = self.base_url + endpoint
        log(f"[SYNC] POST {url} | token={mask_token(self.token)} | {data}", LOGDEBUG)

        try:
            response = self.session.post(url, headers=self.headers, json=data, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            log(f"[SYNC] HTTP Error on {endpoint}: {status_code}", LOGERROR)
            raise SyncRequestFailed(f"Unexpected status {status_code} from {endpoint}", status_code) from e
        except requests.exceptions.RequestException as e:
            log(f"[SYNC] Failure to connect to {url}: {e}", LOGERROR)
            raise SyncRequestFailed(f"Failed to connect: {e}") from e

        log(f"[SYNC] {endpoint} -> {response.status_code}", LOGINFO)
        return response.status_code
