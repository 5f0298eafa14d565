"""
Pytest configuration and shared fixtures for all tests
"""

import pytest

from notifier.config import NotificationConfig
from stream_watcher.config import WatcherConfig


@pytest.fixture(scope="session")
def test_env_vars():
    """Provide test environment variables."""
    return {
        "STREAM_CLIENT_ID": "test-client-id",
        "STREAM_CLIENT_SECRET": "test-client-secret",
        "STREAM_CHANNEL_LOGIN": "testchannel",
        "CHAT_BOT_TOKEN": "123456:test-bot-token",
        "CHAT_DESTINATION_ID": "testchannel_news",
        "LOG_LEVEL": "DEBUG",
    }


@pytest.fixture
def mock_env(monkeypatch, test_env_vars):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def watcher_config(tmp_path):
    """Watcher configuration with the state file in a temporary directory."""
    return WatcherConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        channel_login="testchannel",
        state_file=tmp_path / "last_stream_id.txt",
    )


@pytest.fixture
def notification_config():
    """Notification configuration for a test channel."""
    return NotificationConfig(
        bot_token="123456:test-bot-token",
        destination_id="testchannel_news",
    )


@pytest.fixture
def sample_stream():
    """Provide a sample Helix /streams entry."""
    return {
        "id": "111",
        "user_login": "testchannel",
        "user_name": "TestChannel",
        "title": "T",
        "game_name": "G",
        "started_at": "2024-03-05T18:30:00Z",
        "thumbnail_url": "https://x/{width}x{height}.jpg",
        "viewer_count": 42,
    }
