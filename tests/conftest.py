from concurrent.futures import Executor, Future
from unittest import mock

import pytest
import requests

from abs_progress_sync.playback import PlaybackService
from abs_progress_sync.progress_syncer import AudiobookProgressSyncer
from abs_progress_sync.settings import SyncSettings
from abs_progress_sync.sync_dispatcher import SyncDispatcher

SERVER_URL = 'http://abs.local:13378'
TOKEN = 'abcdef123456'


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakePlayback(PlaybackService):
    def __init__(self, **values):
        self.ui_attached = values.get('ui_attached', False)
        self.title = values.get('title', 'Book A')
        self.is_local = values.get('is_local', False)
        self.book_id = values.get('book_id', 'li_book_a')
        self.stream_id = values.get('stream_id', 's1')
        self.current_time_ms = values.get('current_time_ms', 60_000)
        self.duration_ms = values.get('duration_ms', 3_600_000)
        self.playing = values.get('playing', True)
        self.server_url = values.get('server_url', SERVER_URL)
        self.token = values.get('token', TOKEN)

    def get_is_ui_attached(self):
        return self.ui_attached

    def get_current_book_title(self):
        return self.title

    def get_current_book_is_local(self):
        return self.is_local

    def get_current_book_id(self):
        return self.book_id

    def get_current_stream_id(self):
        return self.stream_id

    def get_current_time(self):
        return self.current_time_ms

    def get_audiobook_duration(self):
        return self.duration_ms

    def is_playing(self):
        return self.playing

    def get_server_url(self):
        return self.server_url

    def get_user_token(self):
        return self.token


class FakeDriver:
    """Timer stand-in; tests fire ticks by hand"""

    def __init__(self, interval, callback, executor):
        self.interval = interval
        self.callback = callback
        self.executor = executor
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        return self.callback()


class ImmediateExecutor(Executor):
    """Runs submitted work on the calling thread"""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_response(status_code=200, url=SERVER_URL):
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response._content = b'{}'
    return response


def posted(http_session):
    """(url, json) for every POST made through the mocked session"""
    return [(c.args[0], c.kwargs['json']) for c in http_session.post.call_args_list]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def playback():
    return FakePlayback()


@pytest.fixture
def http_session():
    session = mock.Mock(spec=requests.Session)
    session.post.return_value = make_response(200)
    return session


@pytest.fixture
def drivers():
    created = []

    def factory(interval, callback, executor):
        driver = FakeDriver(interval, callback, executor)
        created.append(driver)
        return driver

    factory.created = created
    return factory


@pytest.fixture
def settings():
    return SyncSettings()


@pytest.fixture
def dispatcher(settings, http_session, clock):
    return SyncDispatcher(settings, http_session=http_session, executor=ImmediateExecutor(), clock=clock)


@pytest.fixture
def syncer(playback, settings, dispatcher, clock, drivers):
    syncer = AudiobookProgressSyncer(
        playback,
        settings=settings,
        dispatcher=dispatcher,
        clock=clock,
        driver_factory=drivers,
        tick_executor=ImmediateExecutor(),
    )
    yield syncer
    syncer.reset()
