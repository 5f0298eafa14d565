"""Configuration management for the stream watcher service.

Loads configuration from environment variables with validation and defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import pytz

from stream_watcher.errors import ConfigError

DEFAULT_POLL_INTERVAL_SECONDS = 2 * 60
DEFAULT_TIMEZONE = "Europe/Moscow"
DEFAULT_STATE_FILE = "last_stream_id.txt"


@dataclass
class WatcherConfig:
    """Configuration for the stream watcher service."""

    # Twitch application credentials
    client_id: str
    client_secret: str

    # Channel to watch
    channel_login: str

    # Polling
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    http_timeout_seconds: float = 10.0

    # Persisted last-notified broadcast id
    state_file: Path = Path(DEFAULT_STATE_FILE)

    # Timezone used to render the stream start time
    display_timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def from_env(cls) -> "WatcherConfig":
        """Load configuration from environment variables.

        Returns:
            WatcherConfig: Configuration instance with values from environment.

        Raises:
            ConfigError: If required environment variables are missing.
        """
        required = {
            "STREAM_CLIENT_ID": os.getenv("STREAM_CLIENT_ID"),
            "STREAM_CLIENT_SECRET": os.getenv("STREAM_CLIENT_SECRET"),
            "STREAM_CHANNEL_LOGIN": os.getenv("STREAM_CHANNEL_LOGIN"),
        }

        missing = [key for key, value in required.items() if not value]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        try:
            return cls(
                client_id=required["STREAM_CLIENT_ID"],
                client_secret=required["STREAM_CLIENT_SECRET"],
                channel_login=required["STREAM_CHANNEL_LOGIN"].strip().lower(),
                poll_interval_seconds=float(
                    os.getenv("POLL_INTERVAL_SECONDS", str(DEFAULT_POLL_INTERVAL_SECONDS))
                ),
                http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
                state_file=Path(os.getenv("STATE_FILE", DEFAULT_STATE_FILE)),
                display_timezone=os.getenv("DISPLAY_TIMEZONE", DEFAULT_TIMEZONE),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If configuration values are invalid.
        """
        if self.poll_interval_seconds <= 0:
            raise ConfigError(f"Invalid poll_interval_seconds: {self.poll_interval_seconds}")

        if self.http_timeout_seconds <= 0:
            raise ConfigError(f"Invalid http_timeout_seconds: {self.http_timeout_seconds}")

        if self.http_timeout_seconds >= self.poll_interval_seconds:
            raise ConfigError("http_timeout_seconds must be shorter than poll_interval_seconds")

        try:
            pytz.timezone(self.display_timezone)
        except pytz.UnknownTimeZoneError as e:
            raise ConfigError(f"Unknown display_timezone: {self.display_timezone}") from e

    def __repr__(self) -> str:
        return (
            f"WatcherConfig("
            f"client_id='{self.client_id}', "
            f"client_secret='***', "
            f"channel_login='{self.channel_login}', "
            f"poll_interval_seconds={self.poll_interval_seconds}, "
            f"state_file='{self.state_file}', "
            f"display_timezone='{self.display_timezone}')"
        )
