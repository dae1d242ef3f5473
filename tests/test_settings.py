from abs_progress_sync.settings import SyncSettings


def test_defaults_without_environment():
    settings = SyncSettings.from_env({})
    assert settings.sync_interval == 5
    assert settings.request_timeout == 10
    assert settings.carry_over_failed_time is True
    assert settings.network_workers == 2


def test_values_read_from_environment():
    settings = SyncSettings.from_env({
        'ABS_SYNC_INTERVAL': '15',
        'ABS_SYNC_REQUEST_TIMEOUT': '3',
        'ABS_SYNC_CARRY_OVER': 'false',
        'ABS_SYNC_NETWORK_WORKERS': '4',
    })
    assert settings.sync_interval == 15
    assert settings.request_timeout == 3
    assert settings.carry_over_failed_time is False
    assert settings.network_workers == 4


def test_malformed_integer_falls_back_to_default():
    settings = SyncSettings.from_env({'ABS_SYNC_INTERVAL': 'often'})
    assert settings.sync_interval == 5


def test_interval_is_clamped():
    assert SyncSettings.from_env({'ABS_SYNC_INTERVAL': '0'}).sync_interval == 1
