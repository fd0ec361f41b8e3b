"""Tests for settings loading and operation counters."""
import pytest

from portfolio.core.config import Settings
from portfolio.core.monitoring import get_all_monitors, setup_monitoring


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tmp.db")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.dev, https://b.dev")
    monkeypatch.setenv("GCS_BUCKET_NAME", "portfolio-avatars")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite:///tmp.db"
    assert settings.access_token_expire_minutes == 15
    assert settings.cors_origins == ["https://a.dev", "https://b.dev"]
    assert settings.gcs_bucket_name == "portfolio-avatars"
    assert settings.avatar_prefix == "avatars"


def test_settings_defaults():
    settings = Settings()
    assert settings.jwt_algorithm == "HS256"
    assert settings.cors_origins == ["*"]
    assert settings.session_cookie_name == "access_token"


def test_expire_minutes_must_be_positive():
    with pytest.raises(ValueError):
        Settings(access_token_expire_minutes=0)


def test_monitor_counters():
    monitor = setup_monitoring('test_component')
    monitor.reset()

    monitor.increment('fetch')
    monitor.track_success('fetch')
    monitor.increment('fetch')
    monitor.track_error('fetch', "timeout")

    assert setup_monitoring('test_component') is monitor
    assert monitor.count('calls', 'fetch') == 2
    assert monitor.last_error['fetch'] == "timeout"
    snapshot = get_all_monitors('test_component')['test_component']
    assert snapshot['successes'] == {'fetch': 1}
    assert snapshot['errors'] == {'fetch': 1}


def test_store_calls_are_counted(store):
    monitor = setup_monitoring('store')
    before = monitor.count('calls', 'insert')

    store.insert('skills', {'user_id': "u1", 'name': "Go"}, identity="u1")

    assert monitor.count('calls', 'insert') == before + 1
