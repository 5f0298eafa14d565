"""
Configuration management for the notification system.

Handles environment variables for the Telegram destination, message layout
and the delayed deletion of sent notifications.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

TELEGRAM_API_BASE = "https://api.telegram.org"
TELEGRAM_CAPTION_LIMIT = 1024

DEFAULT_DELETE_AFTER_SECONDS = 4 * 60 * 60
DEFAULT_BUTTON_TEXT = "Watch stream"


@dataclass
class NotificationConfig:
    """Configuration for the notification system."""

    bot_token: str = ""
    destination_id: str = ""

    # Delay before a sent notification is removed again
    delete_after_seconds: float = DEFAULT_DELETE_AFTER_SECONDS

    # Message layout
    photo_path: Optional[Path] = None
    button_text: str = DEFAULT_BUTTON_TEXT
    parse_mode: str = "HTML"

    timeout_seconds: float = 10.0
    api_base: str = TELEGRAM_API_BASE

    @classmethod
    def from_env(cls) -> "NotificationConfig":
        """Create configuration from environment variables.

        Environment variables:
            CHAT_BOT_TOKEN: Telegram bot token
            CHAT_DESTINATION_ID: Channel username or numeric chat id
            DELETE_AFTER_SECONDS: Delay before deletion (default: 14400)
            CHAT_PHOTO_PATH: Local image to upload instead of the thumbnail
            CHAT_BUTTON_TEXT: Inline button label (default: Watch stream)
            HTTP_TIMEOUT_SECONDS: Request timeout (default: 10)

        Returns:
            NotificationConfig instance
        """
        photo_path = os.getenv("CHAT_PHOTO_PATH")
        return cls(
            bot_token=os.getenv("CHAT_BOT_TOKEN", ""),
            destination_id=os.getenv("CHAT_DESTINATION_ID", ""),
            delete_after_seconds=float(
                os.getenv("DELETE_AFTER_SECONDS", str(DEFAULT_DELETE_AFTER_SECONDS))
            ),
            photo_path=Path(photo_path) if photo_path else None,
            button_text=os.getenv("CHAT_BUTTON_TEXT", DEFAULT_BUTTON_TEXT),
            timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.bot_token:
            raise ValueError("bot_token cannot be empty")

        if not self.destination_id:
            raise ValueError("destination_id cannot be empty")

        if self.delete_after_seconds <= 0:
            raise ValueError(f"Invalid delete_after_seconds: {self.delete_after_seconds}")

        if self.timeout_seconds <= 0:
            raise ValueError(f"Invalid timeout_seconds: {self.timeout_seconds}")

        if self.photo_path is not None and not self.photo_path.is_file():
            raise ValueError(f"Notification photo not found: {self.photo_path}")

    @property
    def chat_id(self) -> Union[int, str]:
        """Destination as accepted by the Bot API.

        Numeric ids are passed through, channel usernames get a leading ``@``.
        """
        destination = self.destination_id.strip()
        if destination.lstrip("-").isdigit():
            return int(destination)
        if not destination.startswith("@"):
            return f"@{destination}"
        return destination

    def method_url(self, method: str) -> str:
        """Build the Bot API URL for a method name."""
        return f"{self.api_base}/bot{self.bot_token}/{method}"

    def __repr__(self) -> str:
        return (
            f"NotificationConfig("
            f"bot_token='***', "
            f"destination_id='{self.destination_id}', "
            f"delete_after_seconds={self.delete_after_seconds}, "
            f"photo_path={self.photo_path!r})"
        )
