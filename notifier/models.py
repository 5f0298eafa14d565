"""
Data carried by a single live notification.

StreamInfo is built once per check cycle and only parameterises one send.
MessageHandle identifies a sent Telegram message so it can be deleted later.
"""

from dataclasses import dataclass
from typing import Union

TWITCH_CHANNEL_URL = "https://www.twitch.tv/{username}"


@dataclass(frozen=True)
class StreamInfo:
    """View of a live broadcast used to render one notification."""

    username: str
    title: str
    category: str
    start_time: str
    image: str
    viewers: int

    @property
    def channel_url(self) -> str:
        """Public URL of the live channel."""
        return TWITCH_CHANNEL_URL.format(username=self.username)


@dataclass(frozen=True)
class MessageHandle:
    """Identifier of a message sent to the messaging platform."""

    chat_id: Union[int, str]
    message_id: int
